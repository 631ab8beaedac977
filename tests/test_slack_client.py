"""Tests for the Slack notifier."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from calendar_assistant.errors import RemoteServiceError
from calendar_assistant.slack.client import SlackNotifier


def slack_error(code: str) -> SlackApiError:
    return SlackApiError(message=f"The request failed: {code}", response={"ok": False, "error": code})


@pytest.fixture
def client():
    client = MagicMock()
    client.chat_postMessage = AsyncMock(return_value={"ok": True, "ts": "111.222"})
    client.chat_delete = AsyncMock(return_value={"ok": True})
    client.conversations_history = AsyncMock(
        return_value={"ok": True, "messages": [{"text": "hi", "ts": "1.0"}]}
    )
    return client


@pytest.fixture
def notifier(client):
    return SlackNotifier(client=client)


@pytest.mark.asyncio
async def test_post_converts_markdown(notifier, client):
    ts = await notifier.post("D1", "**Standup** at 9")

    assert ts == "111.222"
    client.chat_postMessage.assert_awaited_once_with(channel="D1", text="*Standup* at 9")


@pytest.mark.asyncio
async def test_post_raw_text(notifier, client):
    await notifier.post("D1", "_thinking..._", format_markdown=False)

    client.chat_postMessage.assert_awaited_once_with(channel="D1", text="_thinking..._")


@pytest.mark.asyncio
async def test_long_post_is_chunked(notifier, client):
    client.chat_postMessage.side_effect = [{"ts": "1"}, {"ts": "2"}]

    ts = await notifier.post("D1", "word " * 1000)

    assert ts == "1"
    assert client.chat_postMessage.await_count == 2
    for call in client.chat_postMessage.call_args_list:
        assert len(call.kwargs["text"]) <= 3900


@pytest.mark.asyncio
async def test_post_error_carries_code(notifier, client):
    client.chat_postMessage.side_effect = slack_error("channel_not_found")

    with pytest.raises(RemoteServiceError) as exc_info:
        await notifier.post("D404", "hello")

    assert exc_info.value.code == "channel_not_found"


@pytest.mark.asyncio
async def test_delete(notifier, client):
    await notifier.delete("D1", "111.222")

    client.chat_delete.assert_awaited_once_with(channel="D1", ts="111.222")


@pytest.mark.asyncio
async def test_delete_error(notifier, client):
    client.chat_delete.side_effect = slack_error("message_not_found")

    with pytest.raises(RemoteServiceError) as exc_info:
        await notifier.delete("D1", "1.0")

    assert exc_info.value.code == "message_not_found"


@pytest.mark.asyncio
async def test_read_history(notifier, client):
    messages = await notifier.read_history("D1", limit=5)

    assert messages == [{"text": "hi", "ts": "1.0"}]
    client.conversations_history.assert_awaited_once_with(channel="D1", limit=5)
