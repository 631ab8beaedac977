"""Google Calendar gateway."""

import asyncio
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
from zoneinfo import ZoneInfo

import google_auth_httplib2
import httplib2
from google.auth.transport.requests import Request
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..errors import NotFoundError, RemoteServiceError, ValidationError
from .models import CalendarEvent, EventDraft, EventUpdate, resolve_color

logger = logging.getLogger(__name__)

LIST_LIMIT = 20
FIND_LIMIT = 10
NEXT_EVENT_LIMIT = 10
LIST_DEFAULT_DAYS = 7
FIND_DEFAULT_DAYS = 30

NOTHING_SCHEDULED = "Nothing scheduled for the rest of today."


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_rfc3339(value: Optional[str], tz: ZoneInfo) -> Optional[str]:
    """
    Normalize an ISO-8601 string to an offset-qualified timestamp.

    Values without an offset are taken as local time in tz.

    Raises:
        ValidationError: If the value is not ISO-8601
    """
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            f"Invalid date/time '{value}'. Use ISO format, e.g. 2024-01-15T14:00:00-07:00"
        )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.isoformat()


def _map_http_error(error: HttpError, action: str) -> Exception:
    status = getattr(error, "status_code", None) or error.resp.status
    reason = getattr(error, "reason", None) or str(error)
    if status in (404, 410):
        return NotFoundError(f"{action}: {reason}")
    if status == 400:
        return ValidationError(f"{action}: {reason}")
    return RemoteServiceError(f"{action}: {reason}", code=str(status))


class GoogleCalendarGateway:
    """Async wrapper around the Google Calendar v3 API.

    The google client is blocking, so every request runs in a worker thread.
    """

    def __init__(
        self,
        credentials=None,
        default_timezone: str = "America/Denver",
        service=None,
        clock: Callable[[], datetime] = _now_utc,
    ):
        """
        Initialize the gateway.

        Args:
            credentials: google.auth credentials used to build the service
            default_timezone: Timezone used when a call doesn't name one
            service: Prebuilt calendar service (tests inject a mock here)
            clock: Returns the current aware UTC datetime
        """
        self.credentials = credentials
        self.default_timezone = default_timezone
        self.service = service
        self._clock = clock

    def _get_service(self):
        """Get or create Google Calendar service."""
        if self.service is None:
            if self.credentials is None:
                raise RemoteServiceError("Google Calendar credentials are not configured")
            self.service = build(
                "calendar", "v3", credentials=self.credentials, cache_discovery=False
            )
        return self.service

    def _tz(self, tz_name: Optional[str]) -> ZoneInfo:
        return ZoneInfo(tz_name or self.default_timezone)

    def _request_http(self, request):
        """Fresh transport for one request. httplib2.Http is not thread-safe."""
        credentials = self.credentials
        shared = getattr(request, "http", None)
        if credentials is None and isinstance(shared, google_auth_httplib2.AuthorizedHttp):
            credentials = shared.credentials
        if credentials is None:
            return httplib2.Http()
        return google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())

    async def _execute(self, build_request: Callable[[Any], Any], action: str) -> Any:
        service = self._get_service()

        def run():
            request = build_request(service)
            return request.execute(http=self._request_http(request))

        try:
            return await asyncio.to_thread(run)
        except HttpError as e:
            raise _map_http_error(e, action) from e

    async def validate(self) -> None:
        """Refresh the credentials once to prove they work."""
        if self.credentials is not None and hasattr(self.credentials, "refresh"):
            await asyncio.to_thread(self.credentials.refresh, Request())

    async def _list(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str,
        max_results: int,
        calendar_name: Optional[str],
        query: Optional[str] = None,
    ) -> List[CalendarEvent]:
        params = {
            "calendarId": calendar_id,
            "timeMin": time_min,
            "timeMax": time_max,
            "singleEvents": True,
            "orderBy": "startTime",
            "maxResults": max_results,
        }
        if query:
            params["q"] = query

        logger.debug(f"Listing events: {params}")
        response = await self._execute(
            lambda s: s.events().list(**params), f"list events on {calendar_id}"
        )
        return [CalendarEvent.from_api(item, calendar_name) for item in response.get("items", [])]

    async def list_events(
        self,
        calendar_id: str,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        tz_name: Optional[str] = None,
        calendar_name: Optional[str] = None,
    ) -> List[CalendarEvent]:
        """
        List events ordered by start time, recurring events expanded.

        Args:
            calendar_id: Google calendar ID
            time_min: Range start (default: now)
            time_max: Range end (default: now + 7 days)
            tz_name: Timezone for offset-less range values
            calendar_name: Display name stamped on each event

        Returns:
            Up to 20 events
        """
        start, end = self._list_range(time_min, time_max, self._tz(tz_name))
        return await self._list(calendar_id, start, end, LIST_LIMIT, calendar_name)

    async def list_events_across(
        self,
        calendars: Mapping[str, str],
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        tz_name: Optional[str] = None,
    ) -> List[CalendarEvent]:
        """
        List events from several calendars, merged and sorted by start.

        Args:
            calendars: calendar ID -> display name
            time_min: Range start (default: now)
            time_max: Range end (default: now + 7 days)
            tz_name: Timezone for offset-less values and for sorting all-day events

        Returns:
            Merged events. A calendar that fails is logged and skipped
            unless every calendar fails.
        """
        tz = self._tz(tz_name)
        start, end = self._list_range(time_min, time_max, tz)
        events = await self._fetch_many(
            calendars,
            lambda cid, name: self._list(cid, start, end, LIST_LIMIT, name),
        )
        return sorted(events, key=lambda e: e.starts_at(tz))

    def _list_range(self, time_min, time_max, tz: ZoneInfo):
        now = self._clock()
        start = to_rfc3339(time_min, tz) or now.isoformat()
        end = to_rfc3339(time_max, tz) or (now + timedelta(days=LIST_DEFAULT_DAYS)).isoformat()
        return start, end

    def _find_range(self, time_min, time_max, tz: ZoneInfo):
        now = self._clock()
        start_of_today = datetime.combine(now.astimezone(tz).date(), time.min, tzinfo=tz)
        start = to_rfc3339(time_min, tz) or start_of_today.isoformat()
        end = to_rfc3339(time_max, tz) or (now + timedelta(days=FIND_DEFAULT_DAYS)).isoformat()
        return start, end

    async def create_event(
        self,
        calendar_id: str,
        draft: EventDraft,
        tz_name: Optional[str] = None,
        calendar_name: Optional[str] = None,
    ) -> CalendarEvent:
        """
        Create an event.

        Raises:
            ValidationError: If title, start or end is missing or malformed
        """
        if not draft.start or not draft.end:
            raise ValidationError("start_time and end_time are required")

        tz_label = tz_name or self.default_timezone
        tz = self._tz(tz_name)
        body: Dict[str, Any] = {
            "summary": draft.title,
            "description": draft.description or "",
            "start": {"dateTime": to_rfc3339(draft.start, tz), "timeZone": tz_label},
            "end": {"dateTime": to_rfc3339(draft.end, tz), "timeZone": tz_label},
        }
        if draft.attendees:
            body["attendees"] = [{"email": email} for email in draft.attendees]
        if draft.reminders:
            body["reminders"] = {
                "useDefault": False,
                "overrides": [
                    {"method": r.method, "minutes": r.minutes} for r in draft.reminders
                ],
            }
        if draft.color_id:
            body["colorId"] = str(draft.color_id)

        logger.info(f"Creating event '{draft.title}' on {calendar_id}")
        created = await self._execute(
            lambda s: s.events().insert(calendarId=calendar_id, body=body),
            f"create event on {calendar_id}",
        )
        return CalendarEvent.from_api(created, calendar_name)

    async def update_event(
        self,
        calendar_id: str,
        event_id: str,
        update: EventUpdate,
        tz_name: Optional[str] = None,
        calendar_name: Optional[str] = None,
    ) -> CalendarEvent:
        """
        Read-modify-write an event. Fields left as None keep their current value.

        Raises:
            NotFoundError: If the event does not exist
        """
        tz_label = tz_name or self.default_timezone
        tz = self._tz(tz_name)

        event = await self._execute(
            lambda s: s.events().get(calendarId=calendar_id, eventId=event_id),
            f"get event {event_id}",
        )

        if update.title:
            event["summary"] = update.title
        if update.description is not None:
            event["description"] = update.description
        if update.start:
            event["start"] = {"dateTime": to_rfc3339(update.start, tz), "timeZone": tz_label}
        if update.end:
            event["end"] = {"dateTime": to_rfc3339(update.end, tz), "timeZone": tz_label}
        color_id = resolve_color(update.color)
        if color_id:
            event["colorId"] = color_id

        logger.info(f"Updating event {event_id} on {calendar_id}")
        updated = await self._execute(
            lambda s: s.events().update(calendarId=calendar_id, eventId=event_id, body=event),
            f"update event {event_id}",
        )
        return CalendarEvent.from_api(updated, calendar_name)

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        """
        Delete an event.

        Raises:
            NotFoundError: If the event does not exist (including a repeated delete)
        """
        logger.info(f"Deleting event {event_id} on {calendar_id}")
        await self._execute(
            lambda s: s.events().delete(calendarId=calendar_id, eventId=event_id),
            f"delete event {event_id}",
        )

    async def find_event(
        self,
        calendar_id: str,
        query: str,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        tz_name: Optional[str] = None,
        calendar_name: Optional[str] = None,
    ) -> List[CalendarEvent]:
        """
        Free-text search over event titles.

        Default range is start of today (user's timezone) through now + 30 days.
        """
        if not query:
            raise ValidationError("query is required")

        start, end = self._find_range(time_min, time_max, self._tz(tz_name))
        return await self._list(calendar_id, start, end, FIND_LIMIT, calendar_name, query=query)

    async def find_event_across(
        self,
        calendars: Mapping[str, str],
        query: str,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        tz_name: Optional[str] = None,
    ) -> List[CalendarEvent]:
        """Search several calendars at once. Same defaults as find_event."""
        if not query:
            raise ValidationError("query is required")

        tz = self._tz(tz_name)
        start, end = self._find_range(time_min, time_max, tz)
        events = await self._fetch_many(
            calendars,
            lambda cid, name: self._list(cid, start, end, FIND_LIMIT, name, query=query),
        )
        return sorted(events, key=lambda e: e.starts_at(tz))

    async def get_next_event(
        self,
        calendars: Union[str, Sequence[str], Mapping[str, str]],
        tz_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Find the next event between now and the end of today.

        Args:
            calendars: One calendar ID, several IDs, or a mapping of ID -> display name
            tz_name: Timezone defining "end of today"

        Returns:
            {"next": event, "remaining_count": n} or {"message": "Nothing scheduled..."}
        """
        if isinstance(calendars, str):
            calendars = {calendars: None}
        elif not isinstance(calendars, Mapping):
            calendars = {cid: None for cid in calendars}

        tz = self._tz(tz_name)
        now = self._clock()
        local_now = now.astimezone(tz)
        end_of_day = datetime.combine(
            local_now.date(), time(23, 59, 59, 999000), tzinfo=tz
        )

        events = await self._fetch_many(
            calendars,
            lambda cid, name: self._list(
                cid, now.isoformat(), end_of_day.isoformat(), NEXT_EVENT_LIMIT, name
            ),
        )
        events.sort(key=lambda e: e.starts_at(tz))

        if not events:
            return {"message": NOTHING_SCHEDULED}

        return {"next": events[0].to_dict(), "remaining_count": len(events) - 1}

    async def _fetch_many(
        self,
        calendars: Mapping[str, Optional[str]],
        fetch: Callable[[str, Optional[str]], Any],
    ) -> List[CalendarEvent]:
        """Fetch concurrently from several calendars, tolerating partial failure."""
        ids = list(calendars)
        results = await asyncio.gather(
            *(fetch(cid, calendars[cid]) for cid in ids), return_exceptions=True
        )

        events: List[CalendarEvent] = []
        failures = []
        for cid, result in zip(ids, results):
            if isinstance(result, BaseException):
                logger.error(f"Error fetching calendar {cid}: {result}")
                failures.append(result)
                continue
            events.extend(result)

        if failures and len(failures) == len(ids):
            raise failures[0]
        return events
