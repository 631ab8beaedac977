"""Base LLM interface."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..context.models import ConversationTurn, ToolCall

logger = logging.getLogger(__name__)

STOP_TOOL_USE = "tool_use"
STOP_END_TURN = "end_turn"
STOP_MAX_TOKENS = "max_tokens"


@dataclass
class LLMResponse:
    """Response from LLM that may contain text and/or tool calls."""

    text: Optional[str] = None
    tool_calls: List[ToolCall] = field(default_factory=list)
    stop_reason: str = STOP_END_TURN

    @property
    def wants_tools(self) -> bool:
        """True when the model stopped to have tools executed."""
        return self.stop_reason == STOP_TOOL_USE and bool(self.tool_calls)


class BaseLLM(ABC):
    """Abstract base class for LLM implementations.

    Every provider takes the same provider-neutral conversation turns and
    tool definitions ({name, description, parameters}) and converts them to
    its own wire format.
    """

    async def generate(
        self,
        turns: List[ConversationTurn],
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            turns: Conversation so far, oldest first
            system_prompt: Optional system prompt
            tools: Optional list of tool definitions for function calling
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with text and/or tool calls
        """
        logger.debug(
            f"LLM request - Model: {self.get_model_name()}, Turns: {len(turns)}, "
            f"Tools: {len(tools) if tools else 0}"
        )

        response = await self._generate_impl(turns, system_prompt, tools, **kwargs)

        logger.debug(
            f"LLM response - Stop: {response.stop_reason}, "
            f"Tool calls: {[tc.name for tc in response.tool_calls]}, "
            f"Text: {(response.text or '')[:200]}"
        )
        return response

    @abstractmethod
    async def _generate_impl(
        self,
        turns: List[ConversationTurn],
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        """
        Implementation of generate. Subclasses must implement this.

        Args:
            turns: Conversation so far, oldest first
            system_prompt: Optional system prompt
            tools: Optional list of tool definitions for function calling
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with text and/or tool calls
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """
        Get the model name being used.

        Returns:
            Model name string
        """
        pass

    async def validate(self) -> None:
        """
        Validate that the LLM is accessible and working.

        Raises:
            Exception: If validation fails
        """
        await self.generate(
            [ConversationTurn.user("Hello")], system_prompt="Respond with just 'Hi'."
        )
