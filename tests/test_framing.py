"""Tests for time-base and local-day framing helpers."""

from datetime import UTC, date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from zmanim_calc.time.framing import (
    instant_from_julian,
    julian_day,
    local_date,
    midpoint,
    to_utc,
)


def test_julian_day_of_j2000_calendar_date() -> None:
    """0h UTC on 2000-01-01 is Julian day 2451544.5."""
    assert julian_day(date(2000, 1, 1)) == 2451544.5


def test_instant_from_julian_keeps_minutes_continuous() -> None:
    """Negative and over-a-day minute offsets land on neighbouring UTC days."""
    jd = julian_day(date(2000, 1, 1))

    assert instant_from_julian(jd, 720.0) == datetime(2000, 1, 1, 12, 0, tzinfo=UTC)
    assert instant_from_julian(jd, -60.0) == datetime(1999, 12, 31, 23, 0, tzinfo=UTC)
    assert instant_from_julian(jd, 1500.0) == datetime(2000, 1, 2, 1, 0, tzinfo=UTC)


def test_to_utc_with_naive_datetime() -> None:
    """Naive datetimes should be treated as UTC."""
    assert to_utc(datetime(2024, 5, 12, 9, 37)) == datetime(2024, 5, 12, 9, 37, tzinfo=UTC)


def test_to_utc_with_non_utc_timezone() -> None:
    """Aware datetimes should be converted to UTC."""
    kst = timezone(timedelta(hours=9))
    assert to_utc(datetime(2024, 5, 13, 3, 5, tzinfo=kst)) == datetime(2024, 5, 12, 18, 5, tzinfo=UTC)


def test_local_date_of_instant() -> None:
    """An instant late in UTC can already be the next local day."""
    dt = datetime(2024, 6, 20, 22, 30, tzinfo=UTC)

    assert local_date(dt, ZoneInfo("Pacific/Kiritimati")) == date(2024, 6, 21)
    assert local_date(dt, ZoneInfo("America/New_York")) == date(2024, 6, 20)


def test_midpoint_propagates_absence() -> None:
    """Midpoint is None when either end is absent."""
    a = datetime(2024, 1, 1, 6, 0, tzinfo=UTC)
    b = datetime(2024, 1, 1, 18, 0, tzinfo=UTC)

    assert midpoint(a, b) == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    assert midpoint(a, None) is None
    assert midpoint(None, b) is None
