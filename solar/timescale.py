"""Conversions between civil dates, Julian days and Julian centuries."""

from __future__ import annotations

import math
from datetime import date

__all__ = [
    "J2000_JD",
    "DAYS_PER_CENTURY",
    "MINUTES_PER_DAY",
    "civil_date_to_julian_day",
    "julian_day_to_century",
    "century_to_julian_day",
]

J2000_JD = 2451545.0  # JD of the J2000.0 epoch (2000-01-01 12:00 TT).
DAYS_PER_CENTURY = 36525.0
MINUTES_PER_DAY = 1440.0


def civil_date_to_julian_day(day: date) -> float:
    """Return the Julian Day at 0h of the proleptic Gregorian date *day*.

    Only the calendar date takes part; any time-of-day carried by a
    ``datetime`` argument is ignored. The result always ends in ``.5``.
    """

    year, month = day.year, day.month
    if month <= 2:
        year -= 1
        month += 12
    century = math.floor(year / 100)
    leap_correction = 2 - century + math.floor(century / 4)
    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day.day
        + leap_correction
        - 1524.5
    )


def julian_day_to_century(julian_day):
    """Julian centuries elapsed since J2000.0 (scalar or array)."""

    return (julian_day - J2000_JD) / DAYS_PER_CENTURY


def century_to_julian_day(century):
    """Inverse of :func:`julian_day_to_century`."""

    return century * DAYS_PER_CENTURY + J2000_JD
