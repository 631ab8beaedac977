"""Pure rules applied to tool arguments before they reach the calendar.

Nothing here performs I/O, so every rule is unit-testable on its own.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..config.profiles import CalendarRoute, UserProfile
from ..gcal.models import Reminder

WORK_KEYWORDS = ("work", "servicecore", "docket")
WORK_ABBREVIATION = re.compile(r"\bsc\b")
PERSONAL_KEYWORD = "personal"

WORK_PREFIX = "SC - "
PERSONAL_PREFIX = "P - "

WORK_COLOR_ID = "5"
PERSONAL_COLOR_ID = "2"
DEFAULT_COLOR_ID = "7"

FOLLOW_UP_TOPIC = "Follow Up"
FOLLOW_UP_REMINDERS = (Reminder("email", 30), Reminder("popup", 10))


@dataclass(frozen=True)
class TaggedTitle:
    title: str
    color_id: str


@dataclass
class FollowUp:
    """Event fields produced by the follow-up call template."""

    title: str
    description: str
    reminders: List[Reminder] = field(default_factory=list)
    attendees: Optional[List[str]] = None


def apply_prefix_and_color(title: Optional[str], user_message: Optional[str]) -> TaggedTitle:
    """
    Tag a new event's title and color from the words in the title and request.

    Work wins over personal. Applying the same tag twice never doubles the prefix.
    """
    title_text = (title or "").strip()
    combined = f"{title_text} {user_message or ''}".lower()

    is_work = any(k in combined for k in WORK_KEYWORDS) or bool(WORK_ABBREVIATION.search(combined))
    if is_work:
        return TaggedTitle(_with_prefix(title_text, WORK_PREFIX), WORK_COLOR_ID)
    if PERSONAL_KEYWORD in combined:
        return TaggedTitle(_with_prefix(title_text, PERSONAL_PREFIX), PERSONAL_COLOR_ID)
    return TaggedTitle(title_text, DEFAULT_COLOR_ID)


def _with_prefix(title: str, prefix: str) -> str:
    return title if title.startswith(prefix) else f"{prefix}{title}"


def build_follow_up(
    topic: Optional[str],
    description: Optional[str] = None,
    attendees: Optional[List[str]] = None,
) -> FollowUp:
    """
    Turn a follow-up request into a phone-call event.

    A description supplied by the caller is kept; otherwise the templated
    one is used. Attendees pass through untouched.
    """
    follow_up_topic = (topic or "").strip() or FOLLOW_UP_TOPIC
    return FollowUp(
        title=f"Phone Call - {follow_up_topic}",
        description=description or f"I will call you at this time to discuss {follow_up_topic}.",
        reminders=list(FOLLOW_UP_REMINDERS),
        attendees=list(attendees) if isinstance(attendees, list) else None,
    )


def resolve_calendar(label: Optional[str], profile: UserProfile) -> CalendarRoute:
    """
    Pick the calendar a tool call targets.

    The label is matched case-insensitively against each route's label,
    display name and keywords. No label, or no match, means the primary
    calendar.
    """
    if not label:
        return profile.primary_route()

    text = label.strip().lower()
    for route in profile.routes:
        if route.label == text or route.display_name.lower() == text:
            return route
    for route in profile.routes:
        if route.label in text or any(k and k in text for k in route.keywords):
            return route
    return profile.primary_route()
