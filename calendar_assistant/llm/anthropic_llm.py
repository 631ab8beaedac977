"""Anthropic Claude LLM implementation."""

import logging
from typing import Any, Dict, List, Optional

from anthropic import AsyncAnthropic

from ..context.models import ConversationTurn, ToolCall
from .base import STOP_END_TURN, STOP_MAX_TOKENS, STOP_TOOL_USE, BaseLLM, LLMResponse

logger = logging.getLogger(__name__)


def to_anthropic_messages(turns: List[ConversationTurn]) -> List[Dict[str, Any]]:
    """Convert neutral turns to Messages API content blocks."""
    messages = []
    for turn in turns:
        if turn.tool_results:
            messages.append({
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": result.call_id,
                        "content": result.to_json(),
                        "is_error": result.is_error,
                    }
                    for result in turn.tool_results
                ],
            })
        elif turn.tool_calls:
            blocks: List[Dict[str, Any]] = []
            if turn.text:
                blocks.append({"type": "text", "text": turn.text})
            for tc in turn.tool_calls:
                blocks.append({
                    "type": "tool_use",
                    "id": tc.id,
                    "name": tc.name,
                    "input": tc.arguments,
                })
            messages.append({"role": "assistant", "content": blocks})
        else:
            messages.append({"role": turn.role, "content": turn.text or ""})
    return messages


def to_anthropic_tools(tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "name": tool["name"],
            "description": tool.get("description", ""),
            "input_schema": tool.get("parameters", {"type": "object", "properties": {}}),
        }
        for tool in tools
    ]


class AnthropicLLM(BaseLLM):
    """Anthropic LLM implementation for Claude models."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 1024,
        temperature: Optional[float] = None,
        client: Optional[AsyncAnthropic] = None,
    ):
        """
        Initialize Anthropic LLM.

        Args:
            api_key: Anthropic API key
            model: Model name
            max_tokens: Maximum tokens to generate
            temperature: Optional sampling temperature
            client: Prebuilt client (tests inject a mock here)
        """
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = client or AsyncAnthropic(api_key=api_key)

    async def _generate_impl(
        self,
        turns: List[ConversationTurn],
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        api_params: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
            "messages": to_anthropic_messages(turns),
        }
        if system_prompt:
            api_params["system"] = system_prompt
        if self.temperature is not None:
            api_params["temperature"] = self.temperature
        if tools:
            api_params["tools"] = to_anthropic_tools(tools)

        try:
            response = await self.client.messages.create(**api_params)
        except Exception as e:
            logger.error(f"Anthropic API error - Model: {self.model}, Error: {e}")
            raise

        text = None
        tool_calls = []
        for block in response.content:
            if block.type == "text" and text is None:
                text = block.text
            elif block.type == "tool_use":
                tool_calls.append(ToolCall(id=block.id, name=block.name, arguments=block.input or {}))

        if response.stop_reason == "tool_use":
            stop_reason = STOP_TOOL_USE
        elif response.stop_reason == "max_tokens":
            stop_reason = STOP_MAX_TOKENS
        else:
            stop_reason = STOP_END_TURN

        return LLMResponse(text=text, tool_calls=tool_calls, stop_reason=stop_reason)

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
