"""System prompt for the calendar agent."""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..config.profiles import UserProfile

SYSTEM_PROMPT = """You are {assistant_name}, {user_name}'s calendar assistant. You're smart, helpful, and you think for yourself.

## WHO YOU ARE

You manage the user's schedule.
{calendar_section}

When the user asks a question, answer it. When they ask you to do something, do it. Use good judgment.

## WHEN CREATING EVENTS

Apply these automatically:
- Work/ServiceCore/Docket/SC mentioned -> "SC - " prefix + yellow
- Personal mentioned -> "P - " prefix + green
- Everything else -> no prefix + turquoise

Follow-up calls:
- Detect follow-ups from "follow up", "call with", a specific person, or an email
- Set is_followup true and include attendees (email list)
- Format title as "Phone Call - [topic]"
- Description: "I will call you at this time to discuss [topic]."
- Reminders: email 30 min before, popup 10 min before

## WHEN MOVING EVENTS

Use update_event on the existing event. Don't create a new one and leave the old one behind.

## THE USER HAS ADHD

- Lists are fine for schedules
- Be direct, no fluff
- Help decide WHEN to do things, not just WHAT
- Suggest buffer time between back-to-back events

## GUARDRAILS

These keep you from getting confused:
- If you're unsure about a date, state your assumption and ask
- If you can't find an event, say so
- Never make up event IDs. Get them from find_event or list_events
- If moving multiple events, list them first and confirm

## CRITICAL RULES

### ALWAYS CHECK THE CALENDAR
- NEVER answer questions about scheduled events from memory or conversation context
- Before responding to ANY question about what's scheduled, what time something is, or what's on the calendar: CALL the calendar tool first
- This includes: "what do I have", "when is my meeting", "what's my schedule", "am I free at X"
- Even if you think you know the answer from earlier in the conversation, CHECK AGAIN
- Getting times wrong breaks trust - always verify

Current date and time: {current_datetime}. Timezone: {timezone}."""


def get_current_datetime(timezone: str, now: Optional[datetime] = None) -> str:
    """
    Format the current moment for the prompt, e.g. 'Monday, October 19, 2026 at 9:05 AM'.

    Args:
        timezone: IANA timezone string
        now: Aware datetime to format instead of the wall clock
    """
    tz = ZoneInfo(timezone)
    local = (now or datetime.now(tz)).astimezone(tz)
    hour = local.strftime("%I").lstrip("0")
    return f"{local.strftime('%A, %B')} {local.day}, {local.year} at {hour}:{local.strftime('%M %p')}"


def describe_calendars(profile: UserProfile) -> str:
    """Tell the model which calendars exist and which one is the default."""
    primary = profile.primary_route()
    if not profile.is_multi_calendar:
        return f"Everything goes on the {primary.display_name} calendar."

    lines = ["The user has several calendars. Pass the label in the 'calendar' argument:"]
    for route in profile.routes:
        marker = " (default)" if route.label == primary.label else ""
        keywords = f" - used for: {', '.join(route.keywords)}" if route.keywords else ""
        lines.append(f"- {route.label}: {route.display_name}{marker}{keywords}")
    lines.append("Without a label, new events go on the default calendar and reads cover all calendars.")
    lines.append("To update or delete an event, pass the 'calendar' value that find_event returned for it.")
    return "\n".join(lines)


def get_system_prompt(
    profile: UserProfile,
    assistant_name: str = "Michelle",
    now: Optional[datetime] = None,
) -> str:
    """
    Build the system prompt for one request.

    The date and time are rendered in the user's timezone, so the prompt
    must be rebuilt for every request.
    """
    return SYSTEM_PROMPT.format(
        assistant_name=assistant_name,
        user_name=profile.display_name or "the user",
        calendar_section=describe_calendars(profile),
        current_datetime=get_current_datetime(profile.timezone, now),
        timezone=profile.timezone,
    )
