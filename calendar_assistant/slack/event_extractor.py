"""Extraction and filtering of Slack Events API payloads."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass
class ExtractedMessage:
    """A user message that passed every filter."""

    user_id: str
    text: str
    channel: str
    ts: Optional[str] = None


class EventExtractor:
    """Turns event callbacks into messages the assistant should answer."""

    def __init__(self, allowed_user_ids: Iterable[str]):
        """
        Initialize event extractor.

        Args:
            allowed_user_ids: Slack user IDs allowed to talk to the bot. Empty allows nobody.
        """
        self.allowed_user_ids = {uid.strip() for uid in allowed_user_ids if uid.strip()}

    def extract(self, payload: dict) -> Optional[ExtractedMessage]:
        """
        Extract a message from an event callback payload.

        Bot messages, edits/deletes (any subtype) and non-message events are ignored.

        Args:
            payload: Parsed JSON body of the event request

        Returns:
            ExtractedMessage if the event should be answered, None otherwise
        """
        event = payload.get("event")
        if not event or event.get("type") != "message":
            return None

        if event.get("bot_id") or event.get("subtype"):
            return None

        user_id = event.get("user")
        text = event.get("text", "")
        channel = event.get("channel")

        if not user_id or not text or not channel:
            return None

        if not self.is_allowed_user(user_id):
            logger.info(f"Unauthorized user attempted access: {user_id}")
            return None

        return ExtractedMessage(
            user_id=user_id,
            text=text,
            channel=channel,
            ts=event.get("ts"),
        )

    def is_allowed_user(self, user_id: str) -> bool:
        return user_id in self.allowed_user_ids
