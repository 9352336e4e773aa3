"""Solar position engine for depression-angle crossings.

Uses the NOAA solar calculator series (after Meeus, "Astronomical
Algorithms"), which keeps declination and equation of time within a few
seconds of time for 1901-2099.
"""

from __future__ import annotations

from datetime import date, datetime
from math import acos, asin, cos, degrees, radians, sin, tan

from zmanim_calc.contracts import Location
from zmanim_calc.time.framing import instant_from_julian, julian_day, local_date

SOLAR_RADIUS_DEG = 16.0 / 60.0
REFRACTION_DEG = 34.0 / 60.0
HORIZON_DEPRESSION_DEG = SOLAR_RADIUS_DEG + REFRACTION_DEG
EARTH_RADIUS_KM = 6356.9
MINUTES_PER_DEGREE = 4.0

_J2000 = 2451545.0
_DAYS_PER_CENTURY = 36525.0


def julian_centuries(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - _J2000) / _DAYS_PER_CENTURY


def sun_geometric_mean_longitude(t: float) -> float:
    """Geometric mean longitude of the sun in degrees, normalized to [0, 360)."""
    return (280.46646 + t * (36000.76983 + 0.0003032 * t)) % 360.0


def sun_geometric_mean_anomaly(t: float) -> float:
    """Geometric mean anomaly of the sun in degrees."""
    return 357.52911 + t * (35999.05029 - 0.0001537 * t)


def earth_orbit_eccentricity(t: float) -> float:
    """Eccentricity of Earth's orbit (unitless)."""
    return 0.016708634 - t * (0.000042037 + 0.0000001267 * t)


def sun_equation_of_center(t: float) -> float:
    """Equation of center of the sun in degrees."""
    m = radians(sun_geometric_mean_anomaly(t))
    return (
        sin(m) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + sin(2.0 * m) * (0.019993 - 0.000101 * t)
        + sin(3.0 * m) * 0.000289
    )


def _omega(t: float) -> float:
    return radians(125.04 - 1934.136 * t)


def sun_apparent_longitude(t: float) -> float:
    """Apparent ecliptic longitude of the sun in degrees (nutation and aberration applied)."""
    true_longitude = sun_geometric_mean_longitude(t) + sun_equation_of_center(t)
    return true_longitude - 0.00569 - 0.00478 * sin(_omega(t))


def mean_obliquity_of_ecliptic(t: float) -> float:
    """Mean obliquity of the ecliptic in degrees."""
    seconds = 21.448 - t * (46.815 + t * (0.00059 - t * 0.001813))
    return 23.0 + (26.0 + seconds / 60.0) / 60.0


def obliquity_corrected(t: float) -> float:
    """Obliquity of the ecliptic corrected for nutation, in degrees."""
    return mean_obliquity_of_ecliptic(t) + 0.00256 * cos(_omega(t))


def sun_declination(t: float) -> float:
    """Solar declination in degrees."""
    epsilon = radians(obliquity_corrected(t))
    lam = radians(sun_apparent_longitude(t))
    return degrees(asin(sin(epsilon) * sin(lam)))


def equation_of_time(t: float) -> float:
    """Equation of time in minutes (apparent minus mean solar time)."""
    epsilon = radians(obliquity_corrected(t))
    l0 = radians(sun_geometric_mean_longitude(t))
    e = earth_orbit_eccentricity(t)
    m = radians(sun_geometric_mean_anomaly(t))
    y = tan(epsilon / 2.0) ** 2

    value = (
        y * sin(2.0 * l0)
        - 2.0 * e * sin(m)
        + 4.0 * e * y * sin(m) * cos(2.0 * l0)
        - 0.5 * y * y * sin(4.0 * l0)
        - 1.25 * e * e * sin(2.0 * m)
    )
    return MINUTES_PER_DEGREE * degrees(value)


def hour_angle(lat_deg: float, declination_deg: float, depression_deg: float) -> float | None:
    """Hour angle (degrees) at which the sun's center is `depression_deg` below the horizon.

    Returns None when the sun never reaches that altitude on the day (polar
    day or night for this angle).
    """
    lat = radians(lat_deg)
    decl = radians(declination_deg)
    cos_h = (sin(radians(-depression_deg)) - sin(lat) * sin(decl)) / (cos(lat) * cos(decl))
    if cos_h > 1.0 or cos_h < -1.0:
        return None
    return degrees(acos(cos_h))


def elevation_adjustment(elevation_m: float) -> float:
    """Dip of the visible horizon in degrees for an observer `elevation_m` above sea level."""
    earth_radius_m = EARTH_RADIUS_KM * 1000.0
    return degrees(acos(earth_radius_m / (earth_radius_m + elevation_m)))


def effective_depression(depression_deg: float, elevation_m: float) -> float:
    """Depression angle including the horizon dip at the given elevation."""
    return depression_deg + elevation_adjustment(elevation_m)


def _transit_minutes(jd: float, lon_deg: float) -> float:
    """Minutes after 0h UTC of `jd` at which the sun crosses the local meridian."""
    t = julian_centuries(jd - lon_deg / 360.0)
    minutes = 720.0 - MINUTES_PER_DEGREE * lon_deg - equation_of_time(t)
    t = julian_centuries(jd + minutes / 1440.0)
    return 720.0 - MINUTES_PER_DEGREE * lon_deg - equation_of_time(t)


def _crossing_minutes(
    jd: float,
    lat_deg: float,
    lon_deg: float,
    depression_deg: float,
    is_morning: bool,
) -> float | None:
    """Minutes after 0h UTC of `jd` of a depression-angle crossing, or None."""
    sign = -1.0 if is_morning else 1.0
    # First pass evaluates the series at transit, second at the approximate crossing.
    minutes = _transit_minutes(jd, lon_deg)
    for _ in range(2):
        t = julian_centuries(jd + minutes / 1440.0)
        ha = hour_angle(lat_deg, sun_declination(t), depression_deg)
        if ha is None:
            return None
        minutes = (
            720.0
            - MINUTES_PER_DEGREE * lon_deg
            - equation_of_time(t)
            + sign * MINUTES_PER_DEGREE * ha
        )
    return minutes


def framed_julian_day(day: date, location: Location) -> float:
    """Julian day whose solar transit falls on `day` in the location's timezone.

    Locations whose civil time is far from their meridian (e.g. UTC+14 in the
    central Pacific) would otherwise get events of the neighbouring local day.
    """
    jd = julian_day(day)
    tz = location.tzinfo
    for _ in range(2):
        transit = instant_from_julian(jd, _transit_minutes(jd, location.longitude))
        shift = (day - local_date(transit, tz)).days
        if shift == 0:
            break
        jd += shift
    return jd


def solar_noon(day: date, location: Location) -> datetime:
    """Instant of the sun's meridian transit on the local date `day` (UTC)."""
    jd = framed_julian_day(day, location)
    return instant_from_julian(jd, _transit_minutes(jd, location.longitude))


def crossing_time(
    day: date,
    location: Location,
    depression_deg: float,
    is_morning: bool,
    *,
    use_elevation: bool = False,
) -> datetime | None:
    """Compute when the sun's center is `depression_deg` below the horizon.

    Args:
        day: Local calendar date in the location's timezone.
        location: Observer location; its timezone only frames the local day.
        depression_deg: Degrees below the geometric horizon (0.833 for
            standard sunrise/sunset, 16.1 for Alos, 8.5 for Tzeis, ...).
        is_morning: True for the rising (dawn) branch, False for setting.
        use_elevation: Add the horizon dip for the observer's elevation.

    Returns:
        Timezone-aware UTC datetime, or None when the sun never reaches the
        requested depression angle on that date and latitude.
    """
    depression = depression_deg
    if use_elevation:
        depression = effective_depression(depression_deg, location.elevation_m)

    jd = framed_julian_day(day, location)
    minutes = _crossing_minutes(jd, location.latitude, location.longitude, depression, is_morning)
    if minutes is None:
        return None
    return instant_from_julian(jd, minutes)


def sunrise(day: date, location: Location, *, use_elevation: bool = True) -> datetime | None:
    """Standard sunrise (0.833 degrees), optionally elevation-adjusted."""
    return crossing_time(day, location, HORIZON_DEPRESSION_DEG, True, use_elevation=use_elevation)


def sunset(day: date, location: Location, *, use_elevation: bool = True) -> datetime | None:
    """Standard sunset (0.833 degrees), optionally elevation-adjusted."""
    return crossing_time(day, location, HORIZON_DEPRESSION_DEG, False, use_elevation=use_elevation)
