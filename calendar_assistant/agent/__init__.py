"""Calendar agent: prompt, bounded tool loop and chat lifecycle."""

from .chat_handler import ChatHandler
from .turn_loop import AgentTurnLoop

__all__ = ["AgentTurnLoop", "ChatHandler"]
