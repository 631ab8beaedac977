"""Tests for tool registry."""

from unittest.mock import MagicMock

from calendar_assistant.tools.base import BaseTool
from calendar_assistant.tools.registry import ToolRegistry


class MockTool(BaseTool):
    """Mock tool for testing."""

    def __init__(self, name: str = "mock_tool"):
        super().__init__(name=name, description="A mock tool for testing")

    async def execute(self, context, **kwargs):
        return None

    def get_schema(self):
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {"type": "object", "properties": {}},
        }


def test_register_tool():
    registry = ToolRegistry()
    tool = MockTool("test_tool")

    registry.register_tool(tool)

    assert registry.get_tool("test_tool") == tool
    assert len(registry.get_all_tools()) == 1


def test_get_tool_not_found():
    assert ToolRegistry().get_tool("nonexistent") is None


def test_register_same_name_replaces():
    registry = ToolRegistry()
    registry.register_tool(MockTool("a"))
    replacement = MockTool("a")
    registry.register_tool(replacement)

    assert registry.get_all_tools() == [replacement]


def test_initialize_calendar_tools():
    registry = ToolRegistry()
    registry.initialize_tools(MagicMock())

    names = [tool.get_name() for tool in registry.get_all_tools()]
    assert names == [
        "list_events",
        "get_next_event",
        "create_event",
        "update_event",
        "delete_event",
        "find_event",
    ]


def test_schemas_have_json_schema_parameters():
    registry = ToolRegistry()
    registry.initialize_tools(MagicMock())

    for schema in registry.get_schemas():
        assert set(schema) == {"name", "description", "parameters"}
        assert schema["parameters"]["type"] == "object"
        assert "calendar" in schema["parameters"]["properties"]

    create = registry.get_tool("create_event").get_schema()
    assert create["parameters"]["required"] == ["title", "start_time", "end_time"]
    assert "is_followup" in create["parameters"]["properties"]
