"""Base tool interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config.profiles import UserProfile


@dataclass
class ToolContext:
    """Per-request data a tool needs besides its own arguments."""

    profile: UserProfile
    user_message: str = ""


@dataclass
class ToolResult:
    """Result from tool execution."""

    success: bool
    data: Any
    error: Optional[str] = None
    message: Optional[str] = None

    def to_payload(self) -> Any:
        """Value handed back to the model as the tool result."""
        if self.success:
            return self.data
        return {"error": self.error or "Tool failed"}


class BaseTool(ABC):
    """Abstract base class for all tools."""

    def __init__(self, name: str, description: str):
        """
        Initialize tool.

        Args:
            name: Tool name (used for registration and by the model)
            description: Tool description shown to the model
        """
        self.name = name
        self.description = description

    @abstractmethod
    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        """
        Execute the tool for one user request.

        Args:
            context: Profile and message of the requesting user
            **kwargs: Tool-specific parameters chosen by the model

        Returns:
            ToolResult with execution result
        """
        pass

    @abstractmethod
    def get_schema(self) -> Dict[str, Any]:
        """
        Get tool schema advertised to the model.

        Returns:
            Dictionary with name, description and JSON-schema parameters
        """
        pass

    def get_name(self) -> str:
        """Get tool name."""
        return self.name

    def get_description(self) -> str:
        """Get tool description."""
        return self.description
