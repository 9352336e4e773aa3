"""Continuous time base and local-day framing utilities.

Instants are carried as a Julian day (0h UTC of a calendar date) plus a
signed number of minutes, and turned into a datetime only once. Minutes are
never reduced modulo a day, so events that fall on the neighbouring UTC day
keep their correct instant.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, tzinfo

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
JULIAN_DAY_UNIX_EPOCH = 2440587.5
_JULIAN_DAY_ORDINAL_OFFSET = 1721424.5


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to timezone-aware UTC, assuming UTC for naive values."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def julian_day(day: date) -> float:
    """Return the Julian day number at 0h UTC of a Gregorian date."""
    return day.toordinal() + _JULIAN_DAY_ORDINAL_OFFSET


def instant_from_julian(jd: float, minutes: float = 0.0) -> datetime:
    """Convert a Julian day plus minutes past its 0h UTC into an aware UTC datetime."""
    return UNIX_EPOCH + timedelta(days=jd - JULIAN_DAY_UNIX_EPOCH, minutes=minutes)


def local_date(dt: datetime, tz: tzinfo) -> date:
    """Return the civil date of an instant in the given timezone."""
    return to_utc(dt).astimezone(tz).date()


def midpoint(start: datetime | None, end: datetime | None) -> datetime | None:
    """Return the instant halfway between two instants, None if either is absent."""
    if start is None or end is None:
        return None
    return start + (end - start) / 2
