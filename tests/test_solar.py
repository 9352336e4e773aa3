"""Tests for the solar position engine."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from zmanim_calc.astro.solar import (
    HORIZON_DEPRESSION_DEG,
    crossing_time,
    elevation_adjustment,
    equation_of_time,
    hour_angle,
    julian_centuries,
    solar_noon,
    sun_declination,
    sunrise,
    sunset,
)
from zmanim_calc.contracts import Location
from zmanim_calc.time.framing import julian_day

JERUSALEM = Location(31.7683, 35.2137, 0.0, "Asia/Jerusalem")
NEW_YORK = Location(40.7128, -74.0060, 0.0, "America/New_York")
SYDNEY = Location(-33.8688, 151.2093, 0.0, "Australia/Sydney")
TROMSO = Location(70.0, 19.0, 0.0, "Europe/Oslo")


def _local_time(dt: datetime | None, location: Location) -> time:
    assert dt is not None
    return dt.astimezone(location.tzinfo).time()


def test_declination_near_june_solstice() -> None:
    """Declination should peak near the obliquity of the ecliptic in late June."""
    t = julian_centuries(julian_day(date(2024, 6, 20)) + 0.5)
    assert 23.3 < sun_declination(t) < 23.5


def test_declination_near_march_equinox_is_small() -> None:
    """Declination should be close to zero at the March equinox."""
    t = julian_centuries(julian_day(date(2024, 3, 20)) + 0.125)
    assert abs(sun_declination(t)) < 0.1


@pytest.mark.parametrize(
    ("day", "low", "high"),
    [
        (date(2024, 11, 3), 16.0, 16.7),
        (date(2024, 2, 11), -14.6, -13.8),
    ],
)
def test_equation_of_time_extremes(day: date, low: float, high: float) -> None:
    """Equation of time should match its well-known yearly extremes."""
    t = julian_centuries(julian_day(day) + 0.5)
    assert low < equation_of_time(t) < high


def test_elevation_adjustment_is_zero_at_sea_level() -> None:
    """No horizon dip at zero elevation."""
    assert elevation_adjustment(0.0) == 0.0


def test_elevation_adjustment_grows_with_height() -> None:
    """Horizon dip at 800 m is a little under one degree."""
    dip = elevation_adjustment(800.0)
    assert 0.90 < dip < 0.92
    assert elevation_adjustment(1600.0) > dip


def test_hour_angle_absent_when_angle_is_never_reached() -> None:
    """cos(H) outside [-1, 1] yields None rather than an error."""
    assert hour_angle(70.0, 17.0, 16.1) is None
    assert hour_angle(70.0, 17.0, HORIZON_DEPRESSION_DEG) is not None


def test_jerusalem_equinox_sunrise_and_sunset() -> None:
    """Sea-level sunrise/sunset at Jerusalem around the March equinox."""
    day = date(2024, 3, 20)
    rise = sunrise(day, JERUSALEM, use_elevation=False)
    set_ = sunset(day, JERUSALEM, use_elevation=False)

    assert time(5, 37) < _local_time(rise, JERUSALEM) < time(5, 48)
    assert time(17, 46) < _local_time(set_, JERUSALEM) < time(17, 57)


def test_new_york_summer_solstice_sunrise_and_sunset() -> None:
    """Sea-level sunrise/sunset in New York on the June solstice (EDT)."""
    day = date(2024, 6, 21)
    rise = sunrise(day, NEW_YORK, use_elevation=False)
    set_ = sunset(day, NEW_YORK, use_elevation=False)

    assert time(5, 21) < _local_time(rise, NEW_YORK) < time(5, 29)
    assert time(20, 27) < _local_time(set_, NEW_YORK) < time(20, 35)


def test_southern_hemisphere_winter_sunrise() -> None:
    """Sydney sunrise in June falls on the requested local date around 07:00."""
    day = date(2024, 6, 21)
    rise = sunrise(day, SYDNEY, use_elevation=False)

    assert rise is not None
    assert rise.astimezone(SYDNEY.tzinfo).date() == day
    assert time(6, 56) < _local_time(rise, SYDNEY) < time(7, 4)


def test_events_stay_on_requested_local_day_far_from_meridian() -> None:
    """UTC+14 at longitude -157 still yields events on the requested local date."""
    kiritimati = Location(1.8721, -157.4278, 0.0, "Pacific/Kiritimati")
    day = date(2024, 6, 21)
    rise = sunrise(day, kiritimati, use_elevation=False)
    set_ = sunset(day, kiritimati, use_elevation=False)

    assert rise is not None and set_ is not None
    assert rise.astimezone(kiritimati.tzinfo).date() == day
    assert set_.astimezone(kiritimati.tzinfo).date() == day
    assert rise < solar_noon(day, kiritimati) < set_


def test_midnight_sun_has_no_sunrise() -> None:
    """At 70N on the June solstice the sun never sets."""
    day = date(2024, 6, 21)
    assert sunrise(day, TROMSO, use_elevation=False) is None
    assert sunset(day, TROMSO, use_elevation=False) is None


def test_absence_is_independent_per_angle() -> None:
    """At 70N in early August, 16.1 degree dawn is absent while sunrise exists."""
    day = date(2024, 8, 5)
    assert crossing_time(day, TROMSO, 16.1, True) is None
    assert crossing_time(day, TROMSO, HORIZON_DEPRESSION_DEG, True) is not None
    assert crossing_time(day, TROMSO, HORIZON_DEPRESSION_DEG, False) is not None


def test_deeper_angles_are_further_from_noon() -> None:
    """Morning crossings move earlier as the depression angle grows."""
    day = date(2024, 3, 20)
    times = [crossing_time(day, JERUSALEM, angle, True) for angle in (0.833, 8.5, 16.1, 18.0, 19.8)]

    assert all(value is not None for value in times)
    assert times == sorted(times, reverse=True)


def test_elevation_advances_sunrise_and_delays_sunset() -> None:
    """Elevation-adjusted sunrise is earlier and sunset later than at sea level."""
    day = date(2024, 3, 20)
    high = Location(31.7683, 35.2137, 800.0, "Asia/Jerusalem")

    rise_sea = sunrise(day, high, use_elevation=False)
    rise_high = sunrise(day, high, use_elevation=True)
    set_sea = sunset(day, high, use_elevation=False)
    set_high = sunset(day, high, use_elevation=True)

    assert rise_sea is not None and rise_high is not None
    assert set_sea is not None and set_high is not None
    assert rise_sea - rise_high > timedelta(minutes=2)
    assert set_high - set_sea > timedelta(minutes=2)


def test_solar_noon_is_between_sunrise_and_sunset() -> None:
    """Transit must fall inside the day and near the sunrise/sunset midpoint."""
    day = date(2024, 3, 20)
    rise = sunrise(day, JERUSALEM, use_elevation=False)
    set_ = sunset(day, JERUSALEM, use_elevation=False)
    noon = solar_noon(day, JERUSALEM)

    assert rise is not None and set_ is not None
    assert rise < noon < set_
    assert abs((rise + (set_ - rise) / 2) - noon) < timedelta(minutes=1)


def test_crossing_time_deterministic() -> None:
    """The computation must be deterministic for identical inputs."""
    day = date(2024, 12, 1)
    first = crossing_time(day, SYDNEY, 16.1, True)
    second = crossing_time(day, SYDNEY, 16.1, True)

    assert first == second


_REFERENCE_LOCATIONS = [
    ("Jerusalem", 31.7683, 35.2137, 800.0, "Asia/Jerusalem"),
    ("New York", 40.7128, -74.0060, 0.0, "America/New_York"),
    ("Sydney", -33.8688, 151.2093, 0.0, "Australia/Sydney"),
    ("Oslo", 59.9139, 10.7522, 0.0, "Europe/Oslo"),
]
_REFERENCE_DATES = [
    date(2024, 1, 1) + timedelta(days=5 * step) for step in (0, 15, 30, 45, 60, 72)
]
_TWO_SECONDS = timedelta(seconds=2)


def _reference_calendar(entry: tuple[str, float, float, float, str], day: date) -> object:
    """KosherZmanim calendar (Python port) for the same observer and date."""
    pytest.importorskip("zmanim")
    from zmanim.util.geo_location import GeoLocation
    from zmanim.zmanim_calendar import ZmanimCalendar

    name, latitude, longitude, elevation, timezone_id = entry
    geo = GeoLocation(name, latitude, longitude, timezone_id, elevation=elevation)
    return ZmanimCalendar(geo_location=geo, date=day)


def _assert_same_instant(actual: datetime | None, expected: datetime | None) -> None:
    if expected is None:
        assert actual is None
        return
    assert actual is not None
    assert abs(actual - expected) <= _TWO_SECONDS, (actual, expected)


@pytest.mark.parametrize("entry", _REFERENCE_LOCATIONS, ids=lambda entry: entry[0])
@pytest.mark.parametrize("day", _REFERENCE_DATES, ids=str)
def test_crossings_match_reference_to_the_second(
    entry: tuple[str, float, float, float, str], day: date
) -> None:
    """Sunrise, sunset, 16.1 degree dawn and 8.5 degree nightfall agree within 2 s."""
    calendar = _reference_calendar(entry, day)
    name, latitude, longitude, elevation, timezone_id = entry
    location = Location(latitude, longitude, elevation, timezone_id, name)

    _assert_same_instant(sunrise(day, location), calendar.sunrise())
    _assert_same_instant(sunset(day, location), calendar.sunset())
    _assert_same_instant(sunrise(day, location, use_elevation=False), calendar.sea_level_sunrise())
    _assert_same_instant(sunset(day, location, use_elevation=False), calendar.sea_level_sunset())
    _assert_same_instant(
        crossing_time(day, location, 16.1, True), calendar.sunrise_offset_by_degrees(90.0 + 16.1)
    )
    _assert_same_instant(
        crossing_time(day, location, 8.5, False), calendar.sunset_offset_by_degrees(90.0 + 8.5)
    )
