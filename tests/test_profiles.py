"""Tests for user profile resolution."""

import pytest

from calendar_assistant.config.config_loader import from_dict
from calendar_assistant.config.profiles import ProfileDirectory
from calendar_assistant.errors import ConfigurationError


@pytest.fixture
def directory():
    config = from_dict(
        {
            "slack": {"bot_token": "xoxb", "signing_secret": "s", "allowed_user_ids": ["U1", "U2", "U3"]},
            "llm": {"provider": "anthropic", "anthropic": {"api_key": "k"}},
            "agent": {"default_timezone": "America/Chicago"},
            "users": [
                {
                    "user_id": "U1",
                    "display_name": "Sam",
                    "calendar_id": "sam@example.com",
                    "timezone": "America/Denver",
                    "digest_channel": "D1",
                    "primary_calendar": "northstar",
                    "calendars": [
                        {"label": "work", "calendar_id": "work@example.com", "keywords": ["Service", "docket"]},
                        {"label": "northstar", "calendar_id": "ns@example.com", "display_name": "Northstar"},
                    ],
                },
                {"user_id": "U2", "display_name": "Alex", "calendar_id": "alex@example.com"},
                {"user_id": "U3", "display_name": "Broken", "digest_channel": "D3"},
            ],
        }
    )
    return ProfileDirectory(config)


def test_resolve_multi_calendar_profile(directory):
    profile = directory.resolve("U1")

    assert profile.timezone == "America/Denver"
    assert profile.is_multi_calendar
    assert profile.primary_route().calendar_id == "ns@example.com"
    assert profile.all_calendar_ids() == ["ns@example.com", "work@example.com"]
    assert profile.routes[0].keywords == ("service", "docket")
    assert profile.routes[0].display_name == "Work"


def test_all_calendar_ids_primary_first_without_duplicates(directory):
    ids = directory.resolve("U1").all_calendar_ids()

    assert ids[0] == "ns@example.com"
    assert sorted(ids) == sorted(set(ids))
    assert "work@example.com" in ids


def test_single_calendar_profile_uses_default_timezone(directory):
    profile = directory.resolve("U2")

    assert profile.timezone == "America/Chicago"
    assert not profile.is_multi_calendar
    assert profile.primary_route().calendar_id == "alex@example.com"
    assert profile.all_calendar_ids() == ["alex@example.com"]


def test_resolve_unknown_user(directory):
    with pytest.raises(ConfigurationError):
        directory.resolve("U404")


def test_resolve_profile_missing_calendar_id(directory):
    with pytest.raises(ConfigurationError, match="calendar_id"):
        directory.resolve("U3")


def test_digest_profiles_skip_incomplete(directory):
    profiles = directory.digest_profiles()

    assert [p.user_id for p in profiles] == ["U1"]


def test_display_name_for(directory):
    profile = directory.resolve("U1")

    assert profile.display_name_for("ns@example.com") == "Northstar"
    assert profile.display_name_for("work@example.com") == "Work"
