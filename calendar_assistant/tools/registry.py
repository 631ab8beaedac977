"""Centralized tool registry."""

from typing import Any, Dict, List, Optional

from ..gcal.client import GoogleCalendarGateway
from .base import BaseTool


class ToolRegistry:
    """Centralized registry for all tools."""

    def __init__(self):
        """Initialize empty tool registry."""
        self._tools: Dict[str, BaseTool] = {}

    def register_tool(self, tool: BaseTool) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool instance to register
        """
        self._tools[tool.get_name()] = tool

    def get_tool(self, name: str) -> Optional[BaseTool]:
        """
        Get a tool by name.

        Args:
            name: Tool name

        Returns:
            Tool instance or None if not found
        """
        return self._tools.get(name)

    def get_all_tools(self) -> List[BaseTool]:
        return list(self._tools.values())

    def get_schemas(self) -> List[Dict[str, Any]]:
        """Schemas of every registered tool, in registration order."""
        return [tool.get_schema() for tool in self._tools.values()]

    def initialize_tools(self, gateway: GoogleCalendarGateway) -> None:
        """
        Register the calendar tool catalog.

        Args:
            gateway: Calendar gateway the tools call into
        """
        from .calendar_tools import (
            CreateEventTool,
            DeleteEventTool,
            FindEventTool,
            GetNextEventTool,
            ListEventsTool,
            UpdateEventTool,
        )

        for tool_cls in (
            ListEventsTool,
            GetNextEventTool,
            CreateEventTool,
            UpdateEventTool,
            DeleteEventTool,
            FindEventTool,
        ):
            self.register_tool(tool_cls(gateway))
