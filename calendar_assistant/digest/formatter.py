"""Rendering of the daily summary message."""

from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from ..gcal.models import CalendarEvent
from .weather import WeatherReport

NO_EVENTS = "_No events scheduled_"
WEATHER_UNAVAILABLE = "🌤️ Weather: unavailable"


def format_clock(value: datetime) -> str:
    """9:00 AM style, without a leading zero."""
    return f"{value.strftime('%I').lstrip('0')}:{value.strftime('%M %p')}"


def format_header(day: datetime) -> str:
    return f"📅 *Daily Summary for {day.strftime('%A, %B')} {day.day}, {day.year}*"


def format_weather(report: Optional[WeatherReport]) -> str:
    if report is None:
        return WEATHER_UNAVAILABLE
    return f"🌤️ Weather: {round(report.temperature_f)}°F, {report.condition}"


def format_event_line(event: CalendarEvent, tz: ZoneInfo) -> str:
    if event.all_day:
        return f"• All day - {event.title}"
    return f"• {format_clock(event.starts_at(tz).astimezone(tz))} - {event.title}"


def format_digest(
    events: List[CalendarEvent],
    tz_name: str,
    now: datetime,
    weather: Optional[WeatherReport] = None,
    include_weather: bool = False,
) -> str:
    """
    Render the digest text.

    Args:
        events: Today's events in any order
        tz_name: User timezone for the header date and event times
        now: Current instant
        weather: Weather report, None when it could not be fetched
        include_weather: Whether a weather line belongs in the digest at all
    """
    tz = ZoneInfo(tz_name)
    lines = [format_header(now.astimezone(tz))]
    if include_weather:
        lines.append(format_weather(weather))
    lines.append("")

    if not events:
        lines.append(NO_EVENTS)
    else:
        ordered = sorted(events, key=lambda e: e.starts_at(tz))
        lines.extend(format_event_line(event, tz) for event in ordered)

    return "\n".join(lines)
