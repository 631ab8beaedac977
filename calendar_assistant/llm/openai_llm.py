"""OpenAI LLM implementation."""

import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from ..context.models import ConversationTurn, ToolCall
from .base import STOP_END_TURN, STOP_MAX_TOKENS, STOP_TOOL_USE, BaseLLM, LLMResponse

logger = logging.getLogger(__name__)


def to_openai_messages(
    turns: List[ConversationTurn], system_prompt: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Convert neutral turns to chat-completions messages."""
    messages: List[Dict[str, Any]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})

    for turn in turns:
        if turn.tool_results:
            # One "tool" message per result
            for result in turn.tool_results:
                messages.append({
                    "role": "tool",
                    "tool_call_id": result.call_id,
                    "content": result.to_json(),
                })
        elif turn.tool_calls:
            messages.append({
                "role": "assistant",
                "content": turn.text,
                "tool_calls": [
                    {
                        "id": tc.id,
                        "type": "function",
                        "function": {"name": tc.name, "arguments": json.dumps(tc.arguments)},
                    }
                    for tc in turn.tool_calls
                ],
            })
        else:
            messages.append({"role": turn.role, "content": turn.text or ""})
    return messages


class OpenAILLM(BaseLLM):
    """OpenAI LLM implementation for GPT models."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.7,
        max_tokens: int = 1024,
        organization_id: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize OpenAI LLM.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o")
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            organization_id: Optional organization ID
            client: Prebuilt client (tests inject a mock here)
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.organization_id = organization_id

        self.client = client or AsyncOpenAI(
            api_key=api_key,
            organization=organization_id,
        )

    async def _generate_impl(
        self,
        turns: List[ConversationTurn],
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        api_params: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": to_openai_messages(turns, system_prompt),
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if tools:
            api_params["tools"] = [{"type": "function", "function": tool} for tool in tools]

        response = await self.client.chat.completions.create(**api_params)

        choice = response.choices[0]
        message = choice.message

        tool_calls = []
        if message.tool_calls:
            for tc in message.tool_calls:
                try:
                    arguments = json.loads(tc.function.arguments or "{}")
                except json.JSONDecodeError:
                    logger.warning(f"Unparseable arguments for {tc.function.name}: {tc.function.arguments}")
                    arguments = {}
                tool_calls.append(ToolCall(id=tc.id, name=tc.function.name, arguments=arguments))

        if choice.finish_reason == "tool_calls" or tool_calls:
            stop_reason = STOP_TOOL_USE
        elif choice.finish_reason == "length":
            stop_reason = STOP_MAX_TOKENS
        else:
            stop_reason = STOP_END_TURN

        return LLMResponse(text=message.content, tool_calls=tool_calls, stop_reason=stop_reason)

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
