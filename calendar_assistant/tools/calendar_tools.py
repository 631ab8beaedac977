"""Google Calendar tools exposed to the agent."""

import logging
from typing import Any, Dict, List, Optional

from ..errors import ValidationError
from ..gcal.client import GoogleCalendarGateway
from ..gcal.models import EventDraft, EventUpdate
from .base import BaseTool, ToolContext, ToolResult
from .rules import apply_prefix_and_color, build_follow_up, resolve_calendar

logger = logging.getLogger(__name__)

COLOR_CHOICES = "blue, green, purple, red, yellow, orange, turquoise, gray, bold_blue, bold_green, bold_red"

CALENDAR_PARAM = {
    "type": "string",
    "description": "Which calendar to use, by label (e.g. 'work', 'personal'). Defaults to the primary calendar.",
}

EVENT_CALENDAR_PARAM = {
    "type": "string",
    "description": (
        "Calendar holding the event. Pass the 'calendar' value of the event "
        "returned by find_event or list_events. Defaults to the primary calendar."
    ),
}


def _require(kwargs: Dict[str, Any], name: str) -> Any:
    value = kwargs.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Missing required parameter: {name}")
    return value


class CalendarTool(BaseTool):
    """Shared plumbing for tools backed by the calendar gateway."""

    def __init__(self, name: str, description: str, gateway: GoogleCalendarGateway):
        super().__init__(name=name, description=description)
        self.gateway = gateway

    @staticmethod
    def calendars_of(context: ToolContext) -> Dict[str, str]:
        """calendar ID -> display name for every calendar of the user."""
        profile = context.profile
        return {cid: profile.display_name_for(cid) for cid in profile.all_calendar_ids()}

    def _schema(self, properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required or [],
            },
        }


class ListEventsTool(CalendarTool):
    def __init__(self, gateway: GoogleCalendarGateway):
        super().__init__(
            name="list_events",
            description="List events from the calendar. Use this to see what's scheduled.",
            gateway=gateway,
        )

    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        profile = context.profile
        label = kwargs.get("calendar")

        if not label and profile.is_multi_calendar:
            events = await self.gateway.list_events_across(
                self.calendars_of(context),
                kwargs.get("start_date"),
                kwargs.get("end_date"),
                tz_name=profile.timezone,
            )
        else:
            route = resolve_calendar(label, profile)
            events = await self.gateway.list_events(
                route.calendar_id,
                kwargs.get("start_date"),
                kwargs.get("end_date"),
                tz_name=profile.timezone,
                calendar_name=route.display_name,
            )

        return ToolResult(
            success=True,
            data=[event.to_dict() for event in events],
            message=f"Found {len(events)} events",
        )

    def get_schema(self) -> Dict[str, Any]:
        return self._schema(
            {
                "start_date": {
                    "type": "string",
                    "description": "Start date/time in ISO format (e.g., '2024-01-15T00:00:00'). Defaults to now.",
                },
                "end_date": {
                    "type": "string",
                    "description": "End date/time in ISO format. Defaults to 7 days from now.",
                },
                "calendar": CALENDAR_PARAM,
            }
        )


class GetNextEventTool(CalendarTool):
    def __init__(self, gateway: GoogleCalendarGateway):
        super().__init__(
            name="get_next_event",
            description=(
                "Get the single next upcoming event today. Use this when user asks "
                "'what's next' or 'what do I have coming up'."
            ),
            gateway=gateway,
        )

    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        profile = context.profile
        include_all = kwargs.get("include_all_calendars", True)

        if include_all:
            calendars = self.calendars_of(context)
        else:
            route = resolve_calendar(kwargs.get("calendar"), profile)
            calendars = {route.calendar_id: route.display_name}

        result = await self.gateway.get_next_event(calendars, tz_name=profile.timezone)
        return ToolResult(success=True, data=result)

    def get_schema(self) -> Dict[str, Any]:
        return self._schema(
            {
                "include_all_calendars": {
                    "type": "boolean",
                    "description": "Whether to check all calendars (default true)",
                },
                "calendar": CALENDAR_PARAM,
            }
        )


class CreateEventTool(CalendarTool):
    def __init__(self, gateway: GoogleCalendarGateway):
        super().__init__(
            name="create_event",
            description="Create a new calendar event.",
            gateway=gateway,
        )

    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        profile = context.profile
        title = kwargs.get("title")
        description = kwargs.get("description")
        attendees = None
        reminders = None

        if kwargs.get("is_followup"):
            follow_up = build_follow_up(title, description, kwargs.get("attendees"))
            title = follow_up.title
            description = follow_up.description
            attendees = follow_up.attendees
            reminders = follow_up.reminders
        else:
            _require(kwargs, "title")

        tagged = apply_prefix_and_color(title, context.user_message)
        route = resolve_calendar(kwargs.get("calendar"), profile)
        draft = EventDraft(
            title=tagged.title,
            start=_require(kwargs, "start_time"),
            end=_require(kwargs, "end_time"),
            description=description,
            color_id=tagged.color_id,
            attendees=attendees,
            reminders=reminders,
        )

        event = await self.gateway.create_event(
            route.calendar_id,
            draft,
            tz_name=profile.timezone,
            calendar_name=route.display_name,
        )
        return ToolResult(
            success=True,
            data={"success": True, "event": event.to_dict()},
            message=f"Created event '{event.title}'",
        )

    def get_schema(self) -> Dict[str, Any]:
        return self._schema(
            {
                "title": {"type": "string", "description": "Event title"},
                "start_time": {
                    "type": "string",
                    "description": "Start time in ISO format (e.g., '2024-01-15T14:00:00-07:00')",
                },
                "end_time": {"type": "string", "description": "End time in ISO format"},
                "description": {
                    "type": "string",
                    "description": "Event description (optional)",
                },
                "attendees": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Attendee emails to invite (optional, follow-ups only)",
                },
                "is_followup": {
                    "type": "boolean",
                    "description": "Set true for follow-up calls to add invites/reminders and format title",
                },
                "calendar": CALENDAR_PARAM,
            },
            required=["title", "start_time", "end_time"],
        )


class UpdateEventTool(CalendarTool):
    def __init__(self, gateway: GoogleCalendarGateway):
        super().__init__(
            name="update_event",
            description="Update an existing event. First use find_event to get the event ID.",
            gateway=gateway,
        )

    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        profile = context.profile
        event_id = _require(kwargs, "event_id")
        route = resolve_calendar(kwargs.get("calendar"), profile)
        update = EventUpdate(
            title=kwargs.get("title"),
            description=kwargs.get("description"),
            start=kwargs.get("start_time"),
            end=kwargs.get("end_time"),
            color=kwargs.get("color"),
        )

        event = await self.gateway.update_event(
            route.calendar_id,
            event_id,
            update,
            tz_name=profile.timezone,
            calendar_name=route.display_name,
        )
        return ToolResult(
            success=True,
            data={"success": True, "event": event.to_dict()},
            message=f"Updated event '{event.title}'",
        )

    def get_schema(self) -> Dict[str, Any]:
        return self._schema(
            {
                "event_id": {"type": "string", "description": "The event ID to update"},
                "title": {"type": "string", "description": "New title (optional)"},
                "start_time": {
                    "type": "string",
                    "description": "New start time in ISO format (optional)",
                },
                "end_time": {
                    "type": "string",
                    "description": "New end time in ISO format (optional)",
                },
                "description": {
                    "type": "string",
                    "description": "New description (optional)",
                },
                "color": {
                    "type": "string",
                    "description": f"New color: {COLOR_CHOICES} (optional)",
                },
                "calendar": EVENT_CALENDAR_PARAM,
            },
            required=["event_id"],
        )


class DeleteEventTool(CalendarTool):
    def __init__(self, gateway: GoogleCalendarGateway):
        super().__init__(
            name="delete_event",
            description="Delete an event. First use find_event to get the event ID.",
            gateway=gateway,
        )

    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        event_id = _require(kwargs, "event_id")
        route = resolve_calendar(kwargs.get("calendar"), context.profile)
        await self.gateway.delete_event(route.calendar_id, event_id)
        return ToolResult(
            success=True,
            data={"success": True, "deleted": event_id},
            message=f"Deleted event {event_id}",
        )

    def get_schema(self) -> Dict[str, Any]:
        return self._schema(
            {
                "event_id": {"type": "string", "description": "The event ID to delete"},
                "calendar": EVENT_CALENDAR_PARAM,
            },
            required=["event_id"],
        )


class FindEventTool(CalendarTool):
    def __init__(self, gateway: GoogleCalendarGateway):
        super().__init__(
            name="find_event",
            description="Search for events by title/keyword. Returns event IDs needed for update/delete.",
            gateway=gateway,
        )

    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        profile = context.profile
        query = _require(kwargs, "query")
        label = kwargs.get("calendar")

        if not label and profile.is_multi_calendar:
            events = await self.gateway.find_event_across(
                self.calendars_of(context),
                query,
                kwargs.get("start_date"),
                kwargs.get("end_date"),
                tz_name=profile.timezone,
            )
        else:
            route = resolve_calendar(label, profile)
            events = await self.gateway.find_event(
                route.calendar_id,
                query,
                kwargs.get("start_date"),
                kwargs.get("end_date"),
                tz_name=profile.timezone,
                calendar_name=route.display_name,
            )

        return ToolResult(
            success=True,
            data=[event.to_dict() for event in events],
            message=f"Found {len(events)} events matching '{query}'",
        )

    def get_schema(self) -> Dict[str, Any]:
        return self._schema(
            {
                "query": {
                    "type": "string",
                    "description": "Search term to find in event titles",
                },
                "start_date": {
                    "type": "string",
                    "description": "Start of search range (ISO format). Defaults to start of today.",
                },
                "end_date": {
                    "type": "string",
                    "description": "End of search range (ISO format). Defaults to 30 days from now.",
                },
                "calendar": CALENDAR_PARAM,
            },
            required=["query"],
        )
