"""Calendar tools available to the agent."""

from .base import BaseTool, ToolContext, ToolResult
from .dispatcher import ToolDispatcher
from .registry import ToolRegistry

__all__ = ["BaseTool", "ToolContext", "ToolResult", "ToolDispatcher", "ToolRegistry"]
