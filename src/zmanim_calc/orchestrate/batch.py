"""Batch computation of zmanim over a range of dates."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from zmanim_calc.contracts import Location, MethodSelection, ZmanimResult
from zmanim_calc.halacha.derivation import compute_zmanim

logger = logging.getLogger(__name__)

DEFAULT_MAX_DAYS = 366


@dataclass(frozen=True)
class DateRange:
    """Inclusive local date range for batch computation."""

    start: date
    end: date
    max_days: int | None = DEFAULT_MAX_DAYS

    @property
    def days(self) -> int:
        """Number of dates in the range."""
        return (self.end - self.start).days + 1


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield dates from `start` to `end`, both inclusive."""
    if start > end:
        raise ValueError("start must be <= end.")
    current = start
    step = timedelta(days=1)
    while current <= end:
        yield current
        current = current + step


def generate_dates(date_range: DateRange) -> list[date]:
    """Expand a date range, enforcing its `max_days` safety cap."""
    if date_range.start > date_range.end:
        raise ValueError("start must be <= end.")
    if date_range.max_days is not None and date_range.days > date_range.max_days:
        raise ValueError("date range exceeds max_days safety cap")
    return list(iter_dates(date_range.start, date_range.end))


def compute_range(
    date_range: DateRange,
    location: Location,
    methods: MethodSelection | None = None,
) -> list[ZmanimResult]:
    """Compute an independent zmanim result for every date in the range."""
    days = generate_dates(date_range)
    logger.debug("computing zmanim for %d dates at %s", len(days), location.label)
    return [compute_zmanim(day, location, methods) for day in days]
