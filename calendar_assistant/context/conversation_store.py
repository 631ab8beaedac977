"""In-memory, per-user, time-expiring conversation store."""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional, Union

from .models import ConversationSession, ConversationTurn

logger = logging.getLogger(__name__)


class ConversationStore:
    """Keeps the most recent turns of each user's conversation.

    Sessions expire once they have been idle longer than the TTL. Expiry is
    checked on every read; the background sweep only reclaims memory.
    """

    def __init__(
        self,
        ttl_seconds: float = 30 * 60,
        max_turns: int = 20,
        sweep_interval_seconds: float = 10 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the store.

        Args:
            ttl_seconds: Idle time after which a session is discarded
            max_turns: Number of most recent turns kept per session
            sweep_interval_seconds: Interval of the background expiry sweep
            clock: Monotonic time source in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.max_turns = max_turns
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._sessions: Dict[str, ConversationSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._sweep_task: Optional[asyncio.Task] = None

    def _is_expired(self, session: ConversationSession, now: float) -> bool:
        return now - session.last_activity > self.ttl_seconds

    def get(self, user_id: str) -> List[ConversationTurn]:
        """
        Get the conversation history of a user.

        Returns:
            Ordered turns, empty if the session is absent or expired
        """
        session = self._sessions.get(user_id)
        if session is None:
            return []

        if self._is_expired(session, self._clock()):
            del self._sessions[user_id]
            return []

        return list(session.turns)

    def append(
        self, user_id: str, role: str, content: Union[str, ConversationTurn]
    ) -> None:
        """
        Append a turn, creating the session if needed, and keep only the newest turns.

        Args:
            user_id: Slack user ID
            role: "user" or "assistant"
            content: Message text or a prepared turn
        """
        now = self._clock()
        session = self._sessions.get(user_id)
        if session is None or self._is_expired(session, now):
            session = ConversationSession(turns=[], last_activity=now)
            self._sessions[user_id] = session

        if isinstance(content, ConversationTurn):
            turn = content
            turn.role = role
        else:
            turn = ConversationTurn(role=role, text=content)

        session.turns.append(turn)
        session.last_activity = now

        if len(session.turns) > self.max_turns:
            session.turns = session.turns[-self.max_turns:]

    def clear(self, user_id: str) -> None:
        """Drop a user's session."""
        self._sessions.pop(user_id, None)

    def sweep(self) -> int:
        """
        Remove every expired session.

        Returns:
            Number of sessions removed
        """
        now = self._clock()
        expired = [
            user_id
            for user_id, session in self._sessions.items()
            if self._is_expired(session, now)
        ]
        for user_id in expired:
            del self._sessions[user_id]

        if expired:
            logger.debug(f"Swept {len(expired)} expired conversation(s)")
        return len(expired)

    def lock_for(self, user_id: str) -> asyncio.Lock:
        """
        Lock serializing message handling for one user.

        Locks live as long as the store; sweeping a session never drops its lock.
        """
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._sessions)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep()

    def start(self) -> None:
        """Start the periodic sweep task on the running event loop."""
        if self._sweep_task is None:
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.info(
                f"Conversation sweep started (every {self.sweep_interval_seconds:.0f}s, "
                f"TTL {self.ttl_seconds:.0f}s)"
            )

    async def stop(self) -> None:
        """Cancel the sweep task."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
