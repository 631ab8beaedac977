"""UTC range of a user's local calendar day."""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59)


def local_day_bounds(tz_name: str, now: datetime) -> Tuple[datetime, datetime]:
    """
    Compute the UTC instants of 00:00:00 and 23:59:59 of today in tz_name.

    "Today" is the user's local date at `now`, independent of the timezone
    the process runs in. DST days come out 23 or 25 hours long.

    Args:
        tz_name: IANA timezone of the user
        now: Aware current instant

    Returns:
        (start, end) as aware UTC datetimes
    """
    tz = ZoneInfo(tz_name)
    day = now.astimezone(tz).date()
    start = _utc_instant_of(day, time.min, tz)
    end = _utc_instant_of(day, END_OF_DAY, tz)
    return start, end


def _utc_instant_of(day: date, wall: time, tz: ZoneInfo) -> datetime:
    target = datetime.combine(day, wall)
    found = _search(target, tz)
    if found is not None:
        return found

    # Wall time falls in a DST gap; approximate with the offset in force around it.
    guess = target.replace(tzinfo=timezone.utc)
    offset = guess.astimezone(tz).utcoffset() or timedelta(0)
    logger.debug(f"No exact instant for {target} in {tz.key}, using offset {offset}")
    return guess - offset


def _search(target: datetime, tz: ZoneInfo) -> Optional[datetime]:
    """Find the earliest UTC instant within a day of target whose wall time in tz is target."""
    guess = target.replace(tzinfo=timezone.utc)
    offsets = {
        (guess + timedelta(days=shift)).astimezone(tz).utcoffset()
        for shift in (-1, 0, 1)
    }
    matches = []
    for offset in offsets:
        if offset is None:
            continue
        candidate = guess - offset
        if candidate.astimezone(tz).replace(tzinfo=None) == target:
            matches.append(candidate)
    return min(matches) if matches else None
