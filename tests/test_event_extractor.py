"""Tests for Slack event extraction and filtering."""

import pytest

from calendar_assistant.slack.event_extractor import EventExtractor


def event_payload(**event):
    base = {"type": "message", "user": "U1", "text": "what's next?", "channel": "D1", "ts": "1.0"}
    base.update(event)
    return {"type": "event_callback", "event": base}


@pytest.fixture
def extractor():
    return EventExtractor(["U1", " U2 "])


def test_extract_allowed_message(extractor):
    message = extractor.extract(event_payload())

    assert message.user_id == "U1"
    assert message.text == "what's next?"
    assert message.channel == "D1"
    assert message.ts == "1.0"


def test_whitespace_in_allow_list_is_trimmed(extractor):
    assert extractor.extract(event_payload(user="U2")) is not None


def test_unlisted_user_dropped(extractor):
    assert extractor.extract(event_payload(user="U999")) is None


def test_bot_message_dropped(extractor):
    assert extractor.extract(event_payload(bot_id="B1")) is None


@pytest.mark.parametrize("subtype", ["message_changed", "message_deleted", "channel_join"])
def test_subtypes_dropped(extractor, subtype):
    assert extractor.extract(event_payload(subtype=subtype)) is None


def test_non_message_event_dropped(extractor):
    assert extractor.extract(event_payload(type="app_mention")) is None


def test_missing_event_dropped(extractor):
    assert extractor.extract({"type": "event_callback"}) is None


def test_empty_text_dropped(extractor):
    assert extractor.extract(event_payload(text="")) is None


def test_empty_allow_list_allows_nobody():
    assert EventExtractor([]).extract(event_payload()) is None
