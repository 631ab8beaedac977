"""Tests for the local-day UTC range used by the daily summary."""

from datetime import datetime, timedelta, timezone

import pytest

from calendar_assistant.digest.day_bounds import local_day_bounds


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_regular_day():
    start, end = local_day_bounds("America/Denver", utc(2026, 10, 19, 15, 0))

    assert start == utc(2026, 10, 19, 6, 0, 0)
    assert end == utc(2026, 10, 20, 5, 59, 59)


def test_spring_forward_day_is_23_hours():
    start, end = local_day_bounds("America/Denver", utc(2026, 3, 8, 18, 0))

    assert start == utc(2026, 3, 8, 7, 0, 0)
    assert end == utc(2026, 3, 9, 5, 59, 59)
    assert end - start == timedelta(hours=22, minutes=59, seconds=59)


def test_fall_back_day_is_25_hours():
    start, end = local_day_bounds("America/Denver", utc(2026, 11, 1, 18, 0))

    assert start == utc(2026, 11, 1, 6, 0, 0)
    assert end == utc(2026, 11, 2, 6, 59, 59)
    assert end - start == timedelta(hours=24, minutes=59, seconds=59)


def test_uses_users_local_date_not_utc_date():
    # 03:00 UTC on the 20th is still the evening of the 19th in Denver
    start, end = local_day_bounds("America/Denver", utc(2026, 10, 20, 3, 0))

    assert start == utc(2026, 10, 19, 6, 0, 0)
    assert end == utc(2026, 10, 20, 5, 59, 59)


def test_now_in_other_offset_gives_same_result():
    now = utc(2026, 10, 19, 15, 0)
    tokyo = now.astimezone(timezone(timedelta(hours=9)))

    assert local_day_bounds("America/Denver", tokyo) == local_day_bounds("America/Denver", now)


@pytest.mark.parametrize(
    "tz_name, expected_start",
    [
        ("UTC", utc(2026, 10, 19, 0, 0)),
        ("Asia/Kolkata", utc(2026, 10, 18, 18, 30)),
        ("Europe/London", utc(2026, 10, 18, 23, 0)),
    ],
)
def test_other_zones(tz_name, expected_start):
    start, end = local_day_bounds(tz_name, utc(2026, 10, 19, 12, 0))

    assert start == expected_start
    assert end == expected_start + timedelta(hours=23, minutes=59, seconds=59)
    assert start.tzinfo is not None
