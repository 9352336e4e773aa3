"""Core data contracts for zmanim calculation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum
from math import isfinite
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class InvalidInputError(ValueError):
    """Raised when caller input is rejected before any computation starts."""


def resolve_timezone(timezone_id: str) -> ZoneInfo:
    """Resolve an IANA timezone id, rejecting unknown or malformed names."""
    if not timezone_id or not timezone_id.strip():
        raise InvalidInputError("timezone_id must not be empty.")
    try:
        return ZoneInfo(timezone_id)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInputError(f"unknown timezone_id: {timezone_id!r}") from exc


MIN_SUPPORTED_YEAR = 1901
MAX_SUPPORTED_YEAR = 2099


def validate_calculation_date(day: date) -> date:
    """Reject dates outside the years the solar series is accurate for."""
    if not MIN_SUPPORTED_YEAR <= day.year <= MAX_SUPPORTED_YEAR:
        raise InvalidInputError(
            f"date must be within years {MIN_SUPPORTED_YEAR}-{MAX_SUPPORTED_YEAR}."
        )
    return day


def _require_finite(value: float, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{label} must be a number.")
    if not isfinite(value):
        raise InvalidInputError(f"{label} must be finite.")


@dataclass(frozen=True, slots=True)
class Location:
    """Observer position on the WGS84 ellipsoid plus its civil timezone."""

    latitude: float
    longitude: float
    elevation_m: float = 0.0
    timezone_id: str = "UTC"
    display_name: str = ""

    def __post_init__(self) -> None:
        """Validate coordinate ranges, elevation and timezone."""
        _require_finite(self.latitude, "latitude")
        _require_finite(self.longitude, "longitude")
        _require_finite(self.elevation_m, "elevation_m")

        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidInputError("latitude must be within [-90, 90].")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidInputError("longitude must be within [-180, 180].")
        if self.elevation_m < 0.0:
            raise InvalidInputError("elevation_m must not be negative.")
        resolve_timezone(self.timezone_id)

    @property
    def tzinfo(self) -> ZoneInfo:
        """Timezone used to frame the local day and to present results."""
        return ZoneInfo(self.timezone_id)

    @property
    def label(self) -> str:
        """Display name, falling back to a coordinate-based name."""
        if self.display_name:
            return self.display_name
        return f"Custom ({self.latitude:.4f}, {self.longitude:.4f})"

    def summary(self) -> dict[str, Any]:
        """Geographic summary echoed back to presentation layers."""
        return {
            "name": self.label,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "elevation_m": self.elevation_m,
            "timezone_id": self.timezone_id,
        }


class HorizonConvention(StrEnum):
    """Whether sunrise/sunset accounts for the observer's elevation."""

    ELEVATION = "elevation"
    SEA_LEVEL = "sealevel"


class ShaahZmanisConvention(StrEnum):
    """Day-boundary conventions for the halachic hour."""

    GRA = "gra"
    MGA = "mga"
    DEGREES_16_1 = "16.1degrees"
    DEGREES_18 = "18degrees"
    DEGREES_19_8 = "19.8degrees"
    MINUTES_90 = "90min"
    MINUTES_96 = "96min"
    MINUTES_120 = "120min"


class ShaahZmanisStatus(StrEnum):
    """Outcome of a shaah zmanis computation."""

    OK = "ok"
    UNDEFINED = "undefined"
    DEGENERATE = "degenerate"


class NamedZman(StrEnum):
    """Named halachic times produced by the derivation layer."""

    ALOS = "alos"
    SUNRISE = "sunrise"
    SOF_ZMAN_SHMA = "sof_zman_shma"
    SOF_ZMAN_TEFILLAH = "sof_zman_tefillah"
    CHATZOS = "chatzos"
    MINCHA_GEDOLAH = "mincha_gedolah"
    MINCHA_GEDOLAH_PROPORTIONAL = "mincha_gedolah_proportional"
    MINCHA_KETANAH = "mincha_ketanah"
    PLAG_HAMINCHA = "plag_hamincha"
    SUNSET = "sunset"
    TZEIS = "tzeis"
    SOLAR_MIDNIGHT = "solar_midnight"


def _parse_enum(enum_cls: type[StrEnum], value: str | StrEnum, label: str) -> Any:
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInputError(f"{label} must be one of: {allowed}") from exc


@dataclass(frozen=True, slots=True)
class MethodSelection:
    """Independent convention choices for one recomputation."""

    sunrise: HorizonConvention = HorizonConvention.ELEVATION
    sunset: HorizonConvention = HorizonConvention.ELEVATION
    shaah_zmanis: ShaahZmanisConvention = ShaahZmanisConvention.GRA

    def __post_init__(self) -> None:
        """Coerce raw strings to conventions, rejecting unknown values."""
        object.__setattr__(
            self, "sunrise", _parse_enum(HorizonConvention, self.sunrise, "sunrise method")
        )
        object.__setattr__(
            self, "sunset", _parse_enum(HorizonConvention, self.sunset, "sunset method")
        )
        object.__setattr__(
            self,
            "shaah_zmanis",
            _parse_enum(ShaahZmanisConvention, self.shaah_zmanis, "shaah zmanis method"),
        )

    @classmethod
    def from_values(
        cls,
        sunrise: str | HorizonConvention = HorizonConvention.ELEVATION,
        sunset: str | HorizonConvention = HorizonConvention.ELEVATION,
        shaah_zmanis: str | ShaahZmanisConvention = ShaahZmanisConvention.GRA,
    ) -> MethodSelection:
        """Build a selection from raw strings, rejecting unknown values."""
        return cls(sunrise=sunrise, sunset=sunset, shaah_zmanis=shaah_zmanis)

    def to_dict(self) -> dict[str, str]:
        """Serialize selection values."""
        return {
            "sunrise": self.sunrise.value,
            "sunset": self.sunset.value,
            "shaah_zmanis": self.shaah_zmanis.value,
        }


@dataclass(frozen=True, slots=True)
class ShaahZmanis:
    """One-twelfth of the interval between a convention's day boundaries."""

    convention: ShaahZmanisConvention
    status: ShaahZmanisStatus
    duration: timedelta | None = None
    day_start: datetime | None = None
    day_end: datetime | None = None

    @property
    def minutes(self) -> float | None:
        """Duration in minutes, or None when not OK."""
        if self.duration is None:
            return None
        return self.duration.total_seconds() / 60.0


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _minutes(value: timedelta | None) -> float | None:
    return value.total_seconds() / 60.0 if value is not None else None


@dataclass(frozen=True, slots=True)
class ZmanimResult:
    """Fully derived zmanim for one (date, location, methods) tuple."""

    location: Location
    date: date
    methods: MethodSelection
    zmanim: dict[NamedZman, datetime | None]
    shaah_zmanis: ShaahZmanis
    day_length: timedelta | None
    night_length: timedelta | None

    def get(self, kind: NamedZman) -> datetime | None:
        """Return one zman, None when it is not applicable."""
        return self.zmanim.get(kind)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result to a JSON-compatible dictionary."""
        return {
            "location": self.location.summary(),
            "date": self.date.isoformat(),
            "methods": self.methods.to_dict(),
            "zmanim": {kind.value: _iso(self.zmanim.get(kind)) for kind in NamedZman},
            "shaah_zmanis": {
                "convention": self.shaah_zmanis.convention.value,
                "status": self.shaah_zmanis.status.value,
                "minutes": self.shaah_zmanis.minutes,
                "day_start": _iso(self.shaah_zmanis.day_start),
                "day_end": _iso(self.shaah_zmanis.day_end),
            },
            "day_length_minutes": _minutes(self.day_length),
            "night_length_minutes": _minutes(self.night_length),
        }
