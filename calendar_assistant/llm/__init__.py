"""LLM abstraction module."""

from .anthropic_llm import AnthropicLLM
from .base import BaseLLM, LLMResponse
from .ollama_llm import OllamaLLM
from .openai_llm import OpenAILLM
from ..context.models import ToolCall

__all__ = ["BaseLLM", "LLMResponse", "ToolCall", "AnthropicLLM", "OllamaLLM", "OpenAILLM"]
