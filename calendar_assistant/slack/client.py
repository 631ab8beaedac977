"""Slack Web API client for posting, deleting and reading messages."""

import logging
from typing import Any, Dict, List, Optional

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from ..errors import RemoteServiceError
from .mrkdwn_formatter import markdown_to_slack_mrkdwn, split_message

logger = logging.getLogger(__name__)


def _as_remote_error(error: SlackApiError) -> RemoteServiceError:
    code = error.response.get("error", "unknown_error") if error.response else "unknown_error"
    return RemoteServiceError(f"Slack API error: {code}", code=code)


class SlackNotifier:
    """Notification sink backed by the Slack Web API."""

    def __init__(self, bot_token: Optional[str] = None, client: Optional[AsyncWebClient] = None):
        """
        Initialize Slack notifier.

        Args:
            bot_token: Bot user OAuth token
            client: Prebuilt AsyncWebClient (tests inject a mock here)
        """
        self.client = client or AsyncWebClient(token=bot_token)

    async def post(self, channel: str, text: str, format_markdown: bool = True) -> str:
        """
        Post a message, splitting it when it is too long for one Slack message.

        Args:
            channel: Channel or DM ID
            text: Message text (can contain markdown)
            format_markdown: If True, convert markdown to Slack mrkdwn

        Returns:
            Timestamp (message handle) of the first chunk posted

        Raises:
            RemoteServiceError: If Slack rejects the request
        """
        body = markdown_to_slack_mrkdwn(text) if format_markdown else text
        first_ts = None
        try:
            for chunk in split_message(body):
                response = await self.client.chat_postMessage(channel=channel, text=chunk)
                if first_ts is None:
                    first_ts = response["ts"]
        except SlackApiError as e:
            raise _as_remote_error(e) from e
        return first_ts

    async def delete(self, channel: str, ts: str) -> None:
        """
        Delete a message.

        Raises:
            RemoteServiceError: If Slack rejects the request
        """
        try:
            await self.client.chat_delete(channel=channel, ts=ts)
        except SlackApiError as e:
            raise _as_remote_error(e) from e

    async def read_history(self, channel: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Read the most recent messages of a channel.

        Raises:
            RemoteServiceError: If Slack rejects the request
        """
        try:
            response = await self.client.conversations_history(channel=channel, limit=limit)
        except SlackApiError as e:
            raise _as_remote_error(e) from e
        return response.get("messages", [])
