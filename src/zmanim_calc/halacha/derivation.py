"""Halachic time derivation from solar crossings.

Every zman is a pure function of a few base instants and the shaah zmanis
of the selected convention. A missing dependency makes only the zmanim that
need it absent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, tzinfo

from zmanim_calc.astro.solar import crossing_time, sunrise, sunset
from zmanim_calc.contracts import (
    HorizonConvention,
    Location,
    MethodSelection,
    NamedZman,
    ShaahZmanis,
    ShaahZmanisConvention,
    ShaahZmanisStatus,
    ZmanimResult,
    validate_calculation_date,
)
from zmanim_calc.halacha.conventions import (
    ALOS_DEPRESSION_DEG,
    MINCHA_GEDOLAH_OFFSET_MINUTES,
    PROPORTIONAL_HOURS,
    TZEIS_DEPRESSION_DEG,
    BoundaryKind,
    DayBoundary,
    day_definition,
)
from zmanim_calc.time.framing import midpoint

logger = logging.getLogger(__name__)

_DEFAULT_METHODS = MethodSelection()


@dataclass(frozen=True, slots=True)
class BaseInstants:
    """Solar crossings every derived zman is built from."""

    sunrise: datetime | None
    sunset: datetime | None
    alos: datetime | None
    tzeis: datetime | None
    next_sunrise: datetime | None
    day_start: datetime | None
    day_end: datetime | None


def _boundary_instant(
    boundary: DayBoundary,
    day: date,
    location: Location,
    anchor: datetime | None,
    is_morning: bool,
) -> datetime | None:
    """Locate one day boundary; `anchor` is the selected sunrise or sunset."""
    if boundary.kind is BoundaryKind.HORIZON:
        return anchor
    if boundary.kind is BoundaryKind.ANGLE:
        return crossing_time(day, location, boundary.value, is_morning)
    if boundary.kind is BoundaryKind.OFFSET:
        if anchor is None:
            return None
        offset = timedelta(minutes=boundary.value)
        return anchor - offset if is_morning else anchor + offset
    raise ValueError(f"unsupported boundary kind: {boundary.kind!r}")


def base_instants(day: date, location: Location, methods: MethodSelection) -> BaseInstants:
    """Compute the engine outputs needed by the derivation rules.

    Raises:
        InvalidInputError: If `day` is outside the supported years.
    """
    validate_calculation_date(day)
    rise_elevated = methods.sunrise is HorizonConvention.ELEVATION
    set_elevated = methods.sunset is HorizonConvention.ELEVATION

    rise = sunrise(day, location, use_elevation=rise_elevated)
    set_ = sunset(day, location, use_elevation=set_elevated)
    definition = day_definition(methods.shaah_zmanis)

    return BaseInstants(
        sunrise=rise,
        sunset=set_,
        alos=crossing_time(day, location, ALOS_DEPRESSION_DEG, True),
        tzeis=crossing_time(day, location, TZEIS_DEPRESSION_DEG, False),
        next_sunrise=sunrise(day + timedelta(days=1), location, use_elevation=rise_elevated),
        day_start=_boundary_instant(definition.morning, day, location, rise, True),
        day_end=_boundary_instant(definition.evening, day, location, set_, False),
    )


def shaah_zmanis_from_bounds(
    convention: ShaahZmanisConvention,
    day_start: datetime | None,
    day_end: datetime | None,
) -> ShaahZmanis:
    """One-twelfth of `[day_start, day_end]`, flagged when absent or non-positive."""
    if day_start is None or day_end is None:
        return ShaahZmanis(
            convention=convention,
            status=ShaahZmanisStatus.UNDEFINED,
            day_start=day_start,
            day_end=day_end,
        )
    if day_end <= day_start:
        return ShaahZmanis(
            convention=convention,
            status=ShaahZmanisStatus.DEGENERATE,
            day_start=day_start,
            day_end=day_end,
        )
    return ShaahZmanis(
        convention=convention,
        status=ShaahZmanisStatus.OK,
        duration=(day_end - day_start) / 12,
        day_start=day_start,
        day_end=day_end,
    )


def shaah_zmanis(
    day: date, location: Location, methods: MethodSelection | None = None
) -> ShaahZmanis:
    """Halachic hour for the selected convention."""
    methods = methods or _DEFAULT_METHODS
    base = base_instants(day, location, methods)
    return shaah_zmanis_from_bounds(methods.shaah_zmanis, base.day_start, base.day_end)


def _after_sunrise(
    rise: datetime | None, shaah: ShaahZmanis, hours: float
) -> datetime | None:
    """Sunrise plus `hours` halachic hours of the selected convention."""
    if rise is None or shaah.status is not ShaahZmanisStatus.OK:
        return None
    assert shaah.duration is not None
    return rise + shaah.duration * hours


def _derive(kind: NamedZman, base: BaseInstants, shaah: ShaahZmanis) -> datetime | None:
    """Apply one derivation rule to precomputed inputs."""
    if kind is NamedZman.SUNRISE:
        return base.sunrise
    if kind is NamedZman.SUNSET:
        return base.sunset
    if kind is NamedZman.ALOS:
        return base.alos
    if kind is NamedZman.TZEIS:
        return base.tzeis
    if kind in PROPORTIONAL_HOURS:
        return _after_sunrise(base.sunrise, shaah, PROPORTIONAL_HOURS[kind])

    chatzos = midpoint(base.sunrise, base.sunset)
    if kind is NamedZman.CHATZOS:
        return chatzos
    if kind is NamedZman.MINCHA_GEDOLAH:
        if chatzos is None:
            return None
        return chatzos + timedelta(minutes=MINCHA_GEDOLAH_OFFSET_MINUTES)
    if kind is NamedZman.MINCHA_GEDOLAH_PROPORTIONAL:
        if chatzos is None or shaah.status is not ShaahZmanisStatus.OK:
            return None
        assert shaah.duration is not None
        return chatzos + shaah.duration / 2
    if kind is NamedZman.SOLAR_MIDNIGHT:
        return midpoint(base.sunset, base.next_sunrise)
    raise ValueError(f"unsupported zman: {kind!r}")


def derive_zman(
    kind: NamedZman,
    day: date,
    location: Location,
    methods: MethodSelection | None = None,
) -> datetime | None:
    """Derive one named zman as a UTC instant, None when not applicable."""
    methods = methods or _DEFAULT_METHODS
    base = base_instants(day, location, methods)
    shaah = shaah_zmanis_from_bounds(methods.shaah_zmanis, base.day_start, base.day_end)
    return _derive(kind, base, shaah)


def _length(start: datetime | None, end: datetime | None) -> timedelta | None:
    if start is None or end is None:
        return None
    return end - start


def _localize(value: datetime | None, tz: tzinfo) -> datetime | None:
    return value.astimezone(tz) if value is not None else None


def compute_zmanim(
    day: date, location: Location, methods: MethodSelection | None = None
) -> ZmanimResult:
    """Compute the full named-time set for one date, localized to the location's timezone."""
    methods = methods or _DEFAULT_METHODS
    base = base_instants(day, location, methods)
    shaah = shaah_zmanis_from_bounds(methods.shaah_zmanis, base.day_start, base.day_end)
    tz = location.tzinfo

    zmanim = {kind: _localize(_derive(kind, base, shaah), tz) for kind in NamedZman}

    missing = [kind.value for kind, value in zmanim.items() if value is None]
    logger.debug(
        "zmanim computed for %s at (%.4f, %.4f) methods=%s shaah=%s missing=%s",
        day.isoformat(),
        location.latitude,
        location.longitude,
        methods.to_dict(),
        shaah.status.value,
        missing,
    )

    return ZmanimResult(
        location=location,
        date=day,
        methods=methods,
        zmanim=zmanim,
        shaah_zmanis=replace(
            shaah,
            day_start=_localize(shaah.day_start, tz),
            day_end=_localize(shaah.day_end, tz),
        ),
        day_length=_length(base.sunrise, base.sunset),
        night_length=_length(base.sunset, base.next_sunrise),
    )
