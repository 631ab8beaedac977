"""Inbound chat message lifecycle."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config.profiles import ProfileDirectory
from ..context.conversation_store import ConversationStore
from ..errors import ConfigurationError
from ..slack.client import SlackNotifier
from ..slack.event_extractor import ExtractedMessage
from ..tools.base import ToolContext
from .prompts import get_system_prompt
from .turn_loop import AgentTurnLoop

logger = logging.getLogger(__name__)

THINKING_TEXT = "_thinking..._"
NOT_CONFIGURED_REPLY = (
    "Sorry, I don't have a calendar set up for you yet. "
    "Ask the person who runs me to add your profile."
)
ERROR_REPLY = "Sorry, I encountered an error processing your request. Please try again."


class ChatHandler:
    """Turns one inbound chat message into one reply."""

    def __init__(
        self,
        profiles: ProfileDirectory,
        store: ConversationStore,
        turn_loop: AgentTurnLoop,
        notifier: SlackNotifier,
        assistant_name: str = "Michelle",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.profiles = profiles
        self.store = store
        self.turn_loop = turn_loop
        self.notifier = notifier
        self.assistant_name = assistant_name
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def handle(self, message: ExtractedMessage) -> None:
        """
        Process a message and post the reply to its channel.

        Never raises: every failure ends as an apology in the channel.
        """
        user_id = message.user_id
        logger.info(f"Message from {user_id}: {message.text}")

        try:
            profile = self.profiles.resolve(user_id)
        except ConfigurationError as e:
            logger.warning(f"Cannot serve {user_id}: {e}")
            await self._send(message.channel, NOT_CONFIGURED_REPLY)
            return

        thinking_ts = await self._post_thinking(message.channel)

        async with self.store.lock_for(user_id):
            try:
                history = self.store.get(user_id)
                self.store.append(user_id, "user", message.text)

                reply = await self.turn_loop.run(
                    history,
                    message.text,
                    ToolContext(profile=profile, user_message=message.text),
                    get_system_prompt(profile, self.assistant_name, now=self._clock()),
                )
                self.store.append(user_id, "assistant", reply)
            except Exception as e:
                logger.error(f"Error processing message from {user_id}: {e}", exc_info=True)
                reply = ERROR_REPLY

        await self._delete_thinking(message.channel, thinking_ts)
        await self._send(message.channel, reply)

    async def _post_thinking(self, channel: str) -> Optional[str]:
        try:
            return await self.notifier.post(channel, THINKING_TEXT, format_markdown=False)
        except Exception as e:
            logger.warning(f"Error sending thinking indicator: {e}")
            return None

    async def _delete_thinking(self, channel: str, ts: Optional[str]) -> None:
        if not ts:
            return
        try:
            await self.notifier.delete(channel, ts)
        except Exception as e:
            logger.warning(f"Error deleting thinking indicator: {e}")

    async def _send(self, channel: str, text: str) -> None:
        try:
            await self.notifier.post(channel, text)
        except Exception as e:
            logger.error(f"Error sending reply to {channel}: {e}")
