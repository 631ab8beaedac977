"""Ollama LLM implementation."""

import logging
import uuid
from typing import Any, Dict, List, Optional

import ollama

from ..context.models import ConversationTurn, ToolCall
from .base import STOP_END_TURN, STOP_TOOL_USE, BaseLLM, LLMResponse

logger = logging.getLogger(__name__)


def to_ollama_messages(
    turns: List[ConversationTurn], system_prompt: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Convert neutral turns to Ollama chat messages."""
    messages: List[Dict[str, Any]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})

    for turn in turns:
        if turn.tool_results:
            for result in turn.tool_results:
                messages.append({"role": "tool", "content": result.to_json()})
        elif turn.tool_calls:
            messages.append({
                "role": "assistant",
                "content": turn.text or "",
                "tool_calls": [
                    {"function": {"name": tc.name, "arguments": tc.arguments}}
                    for tc in turn.tool_calls
                ],
            })
        else:
            messages.append({"role": turn.role, "content": turn.text or ""})
    return messages


class OllamaLLM(BaseLLM):
    """Ollama LLM implementation for local models."""

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:11434",
        temperature: float = 0.7,
        max_tokens: int = 1024,
        context_window: Optional[int] = None,
        client: Optional[ollama.AsyncClient] = None,
    ):
        """
        Initialize Ollama LLM.

        Args:
            model: Model name (e.g., "llama3.1", "qwen2.5")
            base_url: Ollama server base URL
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            context_window: Context window size
            client: Prebuilt client (tests inject a mock here)
        """
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.context_window = context_window
        self.client = client or ollama.AsyncClient(host=base_url)

    async def _generate_impl(
        self,
        turns: List[ConversationTurn],
        system_prompt: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> LLMResponse:
        options: Dict[str, Any] = {
            "temperature": kwargs.get("temperature", self.temperature),
            "num_predict": kwargs.get("max_tokens", self.max_tokens),
        }
        if self.context_window:
            options["num_ctx"] = self.context_window

        api_params: Dict[str, Any] = {
            "model": self.model,
            "messages": to_ollama_messages(turns, system_prompt),
            "options": options,
        }
        if tools:
            api_params["tools"] = [
                {
                    "type": "function",
                    "function": {
                        "name": tool["name"],
                        "description": tool.get("description", ""),
                        "parameters": tool.get("parameters", {}),
                    },
                }
                for tool in tools
            ]

        try:
            response = await self.client.chat(**api_params)
        except Exception as e:
            logger.error(
                f"Ollama LLM generation failed - Model: {self.model}, "
                f"Base URL: {self.base_url}, Error: {e}",
                exc_info=True,
            )
            raise

        message = response.get("message", {})

        # Ollama does not assign call IDs, so mint one per call
        tool_calls = []
        for tc in message.get("tool_calls") or []:
            func = tc.get("function", {})
            tool_calls.append(
                ToolCall(
                    id=str(uuid.uuid4()),
                    name=func.get("name", ""),
                    arguments=dict(func.get("arguments") or {}),
                )
            )

        return LLMResponse(
            text=message.get("content") or None,
            tool_calls=tool_calls,
            stop_reason=STOP_TOOL_USE if tool_calls else STOP_END_TURN,
        )

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
