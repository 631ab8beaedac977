"""Tests for the Slack events HTTP surface."""

import hashlib
import hmac
import json
import time
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from calendar_assistant.slack.event_extractor import EventExtractor
from calendar_assistant.web.server import SlackEventServer

SECRET = "test-signing-secret"


def signed_headers(body: str, timestamp: int = None, secret: str = SECRET):
    timestamp = str(timestamp if timestamp is not None else int(time.time()))
    digest = hmac.new(secret.encode(), f"v0:{timestamp}:{body}".encode(), hashlib.sha256).hexdigest()
    return {
        "X-Slack-Request-Timestamp": timestamp,
        "X-Slack-Signature": f"v0={digest}",
        "Content-Type": "application/json",
    }


def message_body(user="U1", **event):
    payload = {
        "type": "event_callback",
        "event": {"type": "message", "user": user, "text": "what's next?", "channel": "D1", "ts": "1.0", **event},
    }
    return json.dumps(payload)


@pytest.fixture
def chat_handler():
    handler = MagicMock()
    handler.handle = AsyncMock()
    return handler


@pytest.fixture
def digest():
    digest = MagicMock()
    digest.send_all = AsyncMock(return_value={"U1": True})
    return digest


@pytest.fixture
def client(chat_handler, digest):
    server = SlackEventServer(
        signing_secret=SECRET,
        extractor=EventExtractor(["U1"]),
        chat_handler=chat_handler,
        digest=digest,
    )
    return TestClient(server.app)


def test_liveness(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "Calendar bot is running!"


def test_url_verification_answered_without_signature(client):
    body = json.dumps({"type": "url_verification", "challenge": "abc123"})

    response = client.post("/slack/events", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert response.text == "abc123"


def test_valid_message_acknowledged_and_handled(client, chat_handler):
    body = message_body()

    response = client.post("/slack/events", content=body, headers=signed_headers(body))

    assert response.status_code == 200
    assert response.text == "ok"
    chat_handler.handle.assert_awaited_once()
    message = chat_handler.handle.call_args.args[0]
    assert message.user_id == "U1"
    assert message.channel == "D1"


def test_bad_signature_rejected(client, chat_handler):
    body = message_body()

    response = client.post("/slack/events", content=body, headers=signed_headers(body, secret="wrong"))

    assert response.status_code == 401
    chat_handler.handle.assert_not_called()


def test_missing_signature_rejected(client, chat_handler):
    response = client.post("/slack/events", content=message_body(), headers={"Content-Type": "application/json"})

    assert response.status_code == 401
    chat_handler.handle.assert_not_called()


def test_stale_timestamp_rejected(client, chat_handler):
    body = message_body()

    response = client.post(
        "/slack/events", content=body, headers=signed_headers(body, timestamp=int(time.time()) - 301)
    )

    assert response.status_code == 401
    chat_handler.handle.assert_not_called()


def test_unlisted_user_acknowledged_but_ignored(client, chat_handler):
    body = message_body(user="U999")

    response = client.post("/slack/events", content=body, headers=signed_headers(body))

    assert response.status_code == 200
    chat_handler.handle.assert_not_called()


def test_bot_message_ignored(client, chat_handler):
    body = message_body(bot_id="B1")

    client.post("/slack/events", content=body, headers=signed_headers(body))

    chat_handler.handle.assert_not_called()


def test_trigger_summary(client, digest):
    response = client.get("/trigger-summary")

    assert response.status_code == 200
    assert response.text == "Daily summary triggered"
    digest.send_all.assert_awaited_once()


def test_trigger_summary_error(client, digest):
    digest.send_all.side_effect = RuntimeError("calendar down")

    response = client.get("/trigger-summary")

    assert response.status_code == 500
    assert response.text == "calendar down"
