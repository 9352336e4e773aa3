"""Day-boundary table for shaah zmanis conventions.

Each convention is a pair of (morning, evening) boundaries. Adding a
convention is a single entry in `SHAAH_ZMANIS_BOUNDARIES`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from zmanim_calc.contracts import HorizonConvention, NamedZman, ShaahZmanisConvention


class BoundaryKind(StrEnum):
    """How a day boundary is located."""

    HORIZON = "horizon"
    ANGLE = "angle"
    OFFSET = "offset"


@dataclass(frozen=True)
class DayBoundary:
    """One end of a halachic day.

    `value` is a depression angle in degrees for ANGLE boundaries and a
    number of minutes before sunrise / after sunset for OFFSET boundaries.
    """

    kind: BoundaryKind
    value: float = 0.0


@dataclass(frozen=True)
class DayDefinition:
    """Morning and evening boundaries of a halachic day."""

    morning: DayBoundary
    evening: DayBoundary


def _symmetric(kind: BoundaryKind, value: float = 0.0) -> DayDefinition:
    boundary = DayBoundary(kind=kind, value=value)
    return DayDefinition(morning=boundary, evening=boundary)


SHAAH_ZMANIS_BOUNDARIES: Mapping[ShaahZmanisConvention, DayDefinition] = MappingProxyType(
    {
        ShaahZmanisConvention.GRA: _symmetric(BoundaryKind.HORIZON),
        ShaahZmanisConvention.MGA: _symmetric(BoundaryKind.OFFSET, 72.0),
        ShaahZmanisConvention.DEGREES_16_1: _symmetric(BoundaryKind.ANGLE, 16.1),
        ShaahZmanisConvention.DEGREES_18: _symmetric(BoundaryKind.ANGLE, 18.0),
        ShaahZmanisConvention.DEGREES_19_8: _symmetric(BoundaryKind.ANGLE, 19.8),
        ShaahZmanisConvention.MINUTES_90: _symmetric(BoundaryKind.OFFSET, 90.0),
        ShaahZmanisConvention.MINUTES_96: _symmetric(BoundaryKind.OFFSET, 96.0),
        ShaahZmanisConvention.MINUTES_120: _symmetric(BoundaryKind.OFFSET, 120.0),
    }
)

ALOS_DEPRESSION_DEG = 16.1
TZEIS_DEPRESSION_DEG = 8.5
MINCHA_GEDOLAH_OFFSET_MINUTES = 30.0

# Shaos zmaniyos after the start of the day.
PROPORTIONAL_HOURS: Mapping[NamedZman, float] = MappingProxyType(
    {
        NamedZman.SOF_ZMAN_SHMA: 3.0,
        NamedZman.SOF_ZMAN_TEFILLAH: 4.0,
        NamedZman.MINCHA_KETANAH: 9.5,
        NamedZman.PLAG_HAMINCHA: 10.75,
    }
)

HORIZON_LABELS: Mapping[HorizonConvention, str] = MappingProxyType(
    {
        HorizonConvention.ELEVATION: "Elevation-Adjusted",
        HorizonConvention.SEA_LEVEL: "Sea-Level",
    }
)

SHAAH_ZMANIS_LABELS: Mapping[ShaahZmanisConvention, str] = MappingProxyType(
    {
        ShaahZmanisConvention.GRA: "GRA (Sunrise to Sunset)",
        ShaahZmanisConvention.MGA: "MGA (72-min Alos to Tzeis)",
        ShaahZmanisConvention.DEGREES_16_1: "16.1° Alos to Tzeis",
        ShaahZmanisConvention.DEGREES_18: "18° Alos to Tzeis",
        ShaahZmanisConvention.DEGREES_19_8: "19.8° Alos to Tzeis",
        ShaahZmanisConvention.MINUTES_90: "90-min Alos to Tzeis",
        ShaahZmanisConvention.MINUTES_96: "96-min Alos to Tzeis",
        ShaahZmanisConvention.MINUTES_120: "120-min Alos to Tzeis",
    }
)


def day_definition(convention: ShaahZmanisConvention) -> DayDefinition:
    """Return the day boundaries for a convention."""
    try:
        return SHAAH_ZMANIS_BOUNDARIES[convention]
    except KeyError as exc:
        raise ValueError(f"no day definition for convention: {convention!r}") from exc
