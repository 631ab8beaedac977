"""Executes the tool calls requested by the model."""

import asyncio
import logging
from typing import List

from ..context.models import ToolCall, ToolOutcome
from .base import ToolContext, ToolResult
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Runs tool calls against the registry and turns every outcome into a payload.

    A failing call never fails the batch: its exception becomes an
    {"error": ...} payload that the model can read and react to.
    """

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    async def dispatch(self, call: ToolCall, context: ToolContext) -> ToolOutcome:
        """
        Execute one tool call.

        Returns:
            ToolOutcome correlated to the call by its ID
        """
        tool = self.registry.get_tool(call.name)
        if tool is None:
            logger.warning(f"Model requested unknown tool: {call.name}")
            return ToolOutcome(call.id, {"error": f"Unknown tool: {call.name}"}, is_error=True)

        logger.info(f"Executing tool: {call.name}")
        logger.debug(f"Tool arguments for {call.name}: {call.arguments}")
        try:
            result = await tool.execute(context, **(call.arguments or {}))
        except Exception as e:
            logger.error(f"Tool execution error ({call.name}): {e}", exc_info=True)
            result = ToolResult(success=False, data=None, error=str(e) or type(e).__name__)

        if not result.success:
            return ToolOutcome(call.id, result.to_payload(), is_error=True)

        logger.debug(f"Tool result for {call.name}: {result.data}")
        return ToolOutcome(call.id, result.to_payload())

    async def dispatch_all(self, calls: List[ToolCall], context: ToolContext) -> List[ToolOutcome]:
        """Execute a batch concurrently. Outcomes keep the order of the calls."""
        return list(await asyncio.gather(*(self.dispatch(call, context) for call in calls)))
