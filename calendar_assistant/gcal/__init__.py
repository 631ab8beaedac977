"""Google Calendar integration."""

from .auth import SCOPES, build_credentials
from .client import GoogleCalendarGateway
from .models import COLORS, CalendarEvent, EventDraft, EventUpdate, Reminder, events_match, resolve_color

__all__ = [
    "SCOPES",
    "build_credentials",
    "GoogleCalendarGateway",
    "COLORS",
    "CalendarEvent",
    "EventDraft",
    "EventUpdate",
    "Reminder",
    "events_match",
    "resolve_color",
]
