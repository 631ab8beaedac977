"""Data models for conversation state."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ToolCall:
    """Represents a tool call requested by the LLM."""

    id: str
    name: str
    arguments: Dict[str, Any]


@dataclass
class ToolOutcome:
    """Result of a single tool call. call_id matches the originating ToolCall.id."""

    call_id: str
    payload: Any
    is_error: bool = False

    def to_json(self) -> str:
        return json.dumps(self.payload, default=str)


@dataclass
class ConversationTurn:
    """One role-tagged unit of conversation.

    A turn carries plain text, the tool calls the assistant requested, or the
    results fed back for those calls.
    """

    role: str  # "user" or "assistant"
    text: Optional[str] = None
    tool_calls: List[ToolCall] = field(default_factory=list)
    tool_results: List[ToolOutcome] = field(default_factory=list)

    @classmethod
    def user(cls, text: str) -> "ConversationTurn":
        return cls(role="user", text=text)

    @classmethod
    def assistant(cls, text: str) -> "ConversationTurn":
        return cls(role="assistant", text=text)


@dataclass
class ConversationSession:
    """Bounded message history of one user."""

    turns: List[ConversationTurn]
    last_activity: float
