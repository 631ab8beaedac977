"""Calendar event models and the Google Calendar color palette."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

# Google Calendar event color IDs
COLORS = {
    "blue": "1",
    "green": "2",
    "purple": "3",
    "red": "4",
    "yellow": "5",
    "orange": "6",
    "turquoise": "7",
    "gray": "8",
    "bold_blue": "9",
    "bold_green": "10",
    "bold_red": "11",
}


def resolve_color(color: Optional[str]) -> Optional[str]:
    """
    Map a symbolic color name (or a raw color ID) to a Google color ID.

    Returns:
        Color ID string, or None when the name is unknown
    """
    if not color:
        return None
    key = str(color).strip().lower().replace(" ", "_")
    if key in COLORS:
        return COLORS[key]
    if key in COLORS.values():
        return key
    return None


def parse_event_time(value: str, tz: ZoneInfo) -> datetime:
    """
    Parse an event start/end value into an aware datetime.

    Date-only values (all-day events) resolve to local midnight in tz.
    """
    if "T" not in value:
        return datetime.combine(date.fromisoformat(value), time.min, tzinfo=tz)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


@dataclass
class Reminder:
    """Reminder override on an event."""

    method: str  # "email" or "popup"
    minutes: int


@dataclass
class CalendarEvent:
    """Transient copy of a remote calendar event."""

    id: str
    title: str
    start: str
    end: str
    description: Optional[str] = None
    color: Optional[str] = None
    calendar: Optional[str] = None
    link: Optional[str] = None
    all_day: bool = False
    attendees: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, item: Dict[str, Any], calendar: Optional[str] = None) -> "CalendarEvent":
        start = item.get("start", {})
        end = item.get("end", {})
        return cls(
            id=item.get("id", ""),
            title=item.get("summary", "(no title)"),
            description=item.get("description"),
            start=start.get("dateTime") or start.get("date", ""),
            end=end.get("dateTime") or end.get("date", ""),
            color=item.get("colorId"),
            calendar=calendar,
            link=item.get("htmlLink"),
            all_day="dateTime" not in start,
            attendees=[a["email"] for a in item.get("attendees", []) if a.get("email")],
        )

    def starts_at(self, tz: ZoneInfo) -> datetime:
        return parse_event_time(self.start, tz)

    def to_dict(self) -> Dict[str, Any]:
        """JSON projection handed to the agent."""
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start": self.start,
            "end": self.end,
            "calendar": self.calendar,
            "color": self.color,
        }
        if self.link:
            data["link"] = self.link
        if self.attendees:
            data["attendees"] = self.attendees
        return data


@dataclass
class EventDraft:
    """Fields for a new event."""

    title: str
    start: str
    end: str
    description: Optional[str] = None
    color_id: Optional[str] = None
    attendees: Optional[List[str]] = None
    reminders: Optional[List[Reminder]] = None


@dataclass
class EventUpdate:
    """Partial update. None means leave the field untouched."""

    title: Optional[str] = None
    description: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    color: Optional[str] = None


def events_match(a: Optional[CalendarEvent], b: Optional[CalendarEvent]) -> bool:
    """True when two events share title, start and end."""
    if a is None or b is None:
        return False
    return (a.title or "") == (b.title or "") and a.start == b.start and a.end == b.end
