"""Conversation state module."""

from .conversation_store import ConversationStore
from .models import ConversationSession, ConversationTurn, ToolCall, ToolOutcome

__all__ = [
    "ConversationStore",
    "ConversationSession",
    "ConversationTurn",
    "ToolCall",
    "ToolOutcome",
]
