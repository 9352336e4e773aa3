"""Display helpers for presenting a ZmanimResult."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, tzinfo
from types import MappingProxyType

from zmanim_calc.contracts import NamedZman, ZmanimResult

NOT_APPLICABLE = "N/A"

ZMAN_LABELS: Mapping[NamedZman, str] = MappingProxyType(
    {
        NamedZman.ALOS: "Alos Hashachar",
        NamedZman.SUNRISE: "Sunrise (Netz)",
        NamedZman.SOF_ZMAN_SHMA: "Sof Zman Shma",
        NamedZman.SOF_ZMAN_TEFILLAH: "Sof Zman Tefillah",
        NamedZman.CHATZOS: "Chatzos",
        NamedZman.MINCHA_GEDOLAH: "Mincha Gedolah",
        NamedZman.MINCHA_GEDOLAH_PROPORTIONAL: "Mincha Gedolah (proportional)",
        NamedZman.MINCHA_KETANAH: "Mincha Ketanah",
        NamedZman.PLAG_HAMINCHA: "Plag HaMincha",
        NamedZman.SUNSET: "Sunset (Shkiah)",
        NamedZman.TZEIS: "Tzeis Hakochavim",
        NamedZman.SOLAR_MIDNIGHT: "Chatzos HaLailah",
    }
)

# (anchor, anchor label, True when the zman precedes its anchor)
_RELATIVE_ANCHORS: Mapping[NamedZman, tuple[NamedZman, str, bool]] = MappingProxyType(
    {
        NamedZman.ALOS: (NamedZman.SUNRISE, "sunrise", True),
        NamedZman.SOF_ZMAN_SHMA: (NamedZman.SUNRISE, "sunrise", False),
        NamedZman.SOF_ZMAN_TEFILLAH: (NamedZman.SUNRISE, "sunrise", False),
        NamedZman.CHATZOS: (NamedZman.SUNRISE, "sunrise", False),
        NamedZman.MINCHA_GEDOLAH: (NamedZman.CHATZOS, "Chatzos", False),
        NamedZman.MINCHA_GEDOLAH_PROPORTIONAL: (NamedZman.CHATZOS, "Chatzos", False),
        NamedZman.MINCHA_KETANAH: (NamedZman.CHATZOS, "Chatzos", False),
        NamedZman.PLAG_HAMINCHA: (NamedZman.SUNSET, "sunset", True),
        NamedZman.TZEIS: (NamedZman.SUNSET, "sunset", False),
        NamedZman.SOLAR_MIDNIGHT: (NamedZman.SUNSET, "sunset", False),
    }
)


def format_time(dt: datetime | None, tz: tzinfo | None = None) -> str:
    """Format an instant as 24-hour `HH:MM:SS`, or `N/A` when absent."""
    if dt is None:
        return NOT_APPLICABLE
    if tz is not None:
        dt = dt.astimezone(tz)
    return dt.strftime("%H:%M:%S")


def format_duration(minutes: float | None) -> str:
    """Format a duration in minutes as `{h}h {m}m`."""
    if minutes is None:
        return NOT_APPLICABLE
    hours, mins = divmod(round(minutes), 60)
    return f"{hours}h {mins}m"


def minutes_between(earlier: datetime | None, later: datetime | None) -> int | None:
    """Rounded whole minutes from `earlier` to `later`."""
    if earlier is None or later is None:
        return None
    return round((later - earlier).total_seconds() / 60.0)


def describe_relative(result: ZmanimResult, kind: NamedZman) -> str:
    """Describe a zman relative to sunrise, Chatzos or sunset.

    Returns an empty string when the zman has no anchor or either instant is
    absent.
    """
    anchor_entry = _RELATIVE_ANCHORS.get(kind)
    if anchor_entry is None:
        return ""
    anchor, anchor_label, before = anchor_entry
    value = result.get(kind)
    reference = result.get(anchor)
    if before:
        diff = minutes_between(value, reference)
    else:
        diff = minutes_between(reference, value)
    if diff is None:
        return ""
    direction = "before" if before else "after"
    return f"{diff} minutes {direction} {anchor_label}"


def display_times(result: ZmanimResult) -> dict[str, str]:
    """Formatted local time for every zman, keyed by zman value."""
    tz = result.location.tzinfo
    return {kind.value: format_time(result.get(kind), tz) for kind in NamedZman}


def relative_descriptions(result: ZmanimResult) -> dict[str, str]:
    """Relative description for every zman that has an anchor."""
    return {kind.value: describe_relative(result, kind) for kind in _RELATIVE_ANCHORS}
