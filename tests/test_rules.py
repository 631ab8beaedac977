"""Tests for calendar routing, title tagging and follow-up formatting."""

import pytest

from calendar_assistant.config.profiles import CalendarRoute, UserProfile
from calendar_assistant.tools.rules import (
    DEFAULT_COLOR_ID,
    PERSONAL_COLOR_ID,
    WORK_COLOR_ID,
    apply_prefix_and_color,
    build_follow_up,
    resolve_calendar,
)


@pytest.fixture
def multi_profile():
    return UserProfile(
        user_id="U1",
        display_name="Sam",
        calendar_id="sam@example.com",
        timezone="America/Denver",
        routes=[
            CalendarRoute("work", "work@example.com", "Work", ("work", "service", "docket")),
            CalendarRoute("northstar", "ns@example.com", "Northstar", ("northstar", "roofing")),
        ],
        primary_label="northstar",
    )


@pytest.fixture
def single_profile():
    return UserProfile(
        user_id="U2", display_name="Alex", calendar_id="alex@example.com", timezone="UTC"
    )


def test_work_keyword_prefixes_and_colors():
    tagged = apply_prefix_and_color("team sync", "add a work meeting called team sync")

    assert tagged.title == "SC - team sync"
    assert tagged.color_id == WORK_COLOR_ID


@pytest.mark.parametrize("message", ["ServiceCore demo", "docket review", "sc standup"])
def test_other_work_keywords(message):
    assert apply_prefix_and_color("meeting", message).color_id == WORK_COLOR_ID


def test_sc_must_be_a_whole_word():
    tagged = apply_prefix_and_color("Disco night", "schedule disco night")

    assert tagged.title == "Disco night"
    assert tagged.color_id == DEFAULT_COLOR_ID


def test_work_prefix_is_idempotent():
    tagged = apply_prefix_and_color("SC - team sync", "work thing")

    assert tagged.title == "SC - team sync"


def test_personal_keyword():
    tagged = apply_prefix_and_color("Gym", "personal: gym at 6")

    assert tagged.title == "P - Gym"
    assert tagged.color_id == PERSONAL_COLOR_ID


def test_personal_prefix_is_idempotent():
    assert apply_prefix_and_color("P - Gym", "personal").title == "P - Gym"


def test_work_wins_over_personal():
    tagged = apply_prefix_and_color("Lunch", "personal lunch with work friends")

    assert tagged.title == "SC - Lunch"
    assert tagged.color_id == WORK_COLOR_ID


def test_no_keyword_uses_default():
    tagged = apply_prefix_and_color("  Dentist  ", "book the dentist")

    assert tagged.title == "Dentist"
    assert tagged.color_id == DEFAULT_COLOR_ID


def test_follow_up_with_empty_title():
    follow_up = build_follow_up("")

    assert follow_up.title == "Phone Call - Follow Up"
    assert follow_up.description == "I will call you at this time to discuss Follow Up."
    assert [(r.method, r.minutes) for r in follow_up.reminders] == [("email", 30), ("popup", 10)]
    assert follow_up.attendees is None


def test_follow_up_with_topic_and_attendees():
    follow_up = build_follow_up(" Roof quote ", attendees=["pat@example.com"])

    assert follow_up.title == "Phone Call - Roof quote"
    assert follow_up.description == "I will call you at this time to discuss Roof quote."
    assert follow_up.attendees == ["pat@example.com"]


def test_follow_up_keeps_given_description():
    assert build_follow_up("Quote", description="Call from cell").description == "Call from cell"


def test_routing_by_label(multi_profile):
    assert resolve_calendar("work", multi_profile).calendar_id == "work@example.com"
    assert resolve_calendar("Northstar", multi_profile).calendar_id == "ns@example.com"


def test_routing_by_keyword_substring(multi_profile):
    assert resolve_calendar("the Roofing calendar", multi_profile).calendar_id == "ns@example.com"
    assert resolve_calendar("customer service", multi_profile).calendar_id == "work@example.com"


def test_routing_defaults_to_primary(multi_profile):
    assert resolve_calendar(None, multi_profile).calendar_id == "ns@example.com"
    assert resolve_calendar("", multi_profile).calendar_id == "ns@example.com"
    assert resolve_calendar("vacation", multi_profile).calendar_id == "ns@example.com"


def test_routing_is_deterministic(multi_profile):
    results = {resolve_calendar("Docket stuff", multi_profile).calendar_id for _ in range(10)}

    assert results == {"work@example.com"}


def test_routing_single_calendar(single_profile):
    assert resolve_calendar("work", single_profile).calendar_id == "alex@example.com"
