"""Low-precision solar position series (NOAA / Meeus).

Every function takes Julian centuries since J2000.0 and accepts either a
Python float or a numpy array, so a whole run of dates can be evaluated in
one call. Angles are returned in degrees.
"""

from __future__ import annotations

import numpy as np

from .angles import deg_to_rad, rad_to_deg

__all__ = [
    "mean_obliquity_of_ecliptic",
    "obliquity_correction",
    "geom_mean_long_sun",
    "eccentricity_earth_orbit",
    "geom_mean_anomaly_sun",
    "sun_eq_of_center",
    "sun_true_long",
    "sun_apparent_long",
    "sun_declination",
    "equation_of_time",
]


def _wrap_degrees(angle):
    wrapped = np.mod(angle, 360.0)
    # np.mod can round a tiny negative input up to exactly 360.
    return wrapped - 360.0 * (wrapped >= 360.0)


def _omega(t):
    """Longitude of the Moon's ascending node, in degrees."""

    return 125.04 - 1934.136 * t


def mean_obliquity_of_ecliptic(t):
    seconds = 21.448 - t * (46.8150 + t * (0.00059 - t * 0.001813))
    return 23.0 + (26.0 + seconds / 60.0) / 60.0


def obliquity_correction(t):
    """Mean obliquity corrected for nutation."""

    return mean_obliquity_of_ecliptic(t) + 0.00256 * np.cos(deg_to_rad(_omega(t)))


def geom_mean_long_sun(t):
    """Geometric mean longitude of the sun, normalised into ``[0, 360)``."""

    return _wrap_degrees(280.46646 + t * (36000.76983 + 0.0003032 * t))


def eccentricity_earth_orbit(t):
    return 0.016708634 - t * (0.000042037 + 0.0000001267 * t)


def geom_mean_anomaly_sun(t):
    return 357.52911 + t * (35999.05029 - 0.0001537 * t)


def sun_eq_of_center(t):
    m_rad = deg_to_rad(geom_mean_anomaly_sun(t))
    return (
        np.sin(m_rad) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + np.sin(2.0 * m_rad) * (0.019993 - 0.000101 * t)
        + np.sin(3.0 * m_rad) * 0.000289
    )


def sun_true_long(t):
    return geom_mean_long_sun(t) + sun_eq_of_center(t)


def sun_apparent_long(t):
    """True longitude corrected for nutation and aberration."""

    return sun_true_long(t) - 0.00569 - 0.00478 * np.sin(deg_to_rad(_omega(t)))


def sun_declination(t):
    obliquity = deg_to_rad(obliquity_correction(t))
    longitude = deg_to_rad(sun_apparent_long(t))
    return rad_to_deg(np.arcsin(np.sin(obliquity) * np.sin(longitude)))


def equation_of_time(t):
    """Apparent minus mean solar time, in minutes of time.

    Positive values mean the sundial runs ahead of the clock.
    """

    epsilon = deg_to_rad(obliquity_correction(t))
    l0 = deg_to_rad(geom_mean_long_sun(t))
    e = eccentricity_earth_orbit(t)
    m = deg_to_rad(geom_mean_anomaly_sun(t))

    y = np.tan(epsilon / 2.0) ** 2
    sin_m = np.sin(m)
    e_time = (
        y * np.sin(2.0 * l0)
        - 2.0 * e * sin_m
        + 4.0 * e * y * sin_m * np.cos(2.0 * l0)
        - 0.5 * y * y * np.sin(4.0 * l0)
        - 1.25 * e * e * np.sin(2.0 * m)
    )
    return rad_to_deg(e_time) * 4.0
