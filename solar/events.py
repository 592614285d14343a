"""Sunrise and sunset times from the hour angle of the solar disk."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from .angles import deg_to_rad, rad_to_deg
from .position import equation_of_time, sun_declination
from .timescale import (
    MINUTES_PER_DAY,
    century_to_julian_day,
    civil_date_to_julian_day,
    julian_day_to_century,
)

__all__ = [
    "TWILIGHT_ZENITHS",
    "OFFICIAL_ZENITH",
    "GeoCoordinate",
    "NoSolarEventError",
    "SolarEvent",
    "SunTimes",
    "compute_sun_times",
    "event_time_utc",
    "hour_angle",
]

LOGGER = logging.getLogger(__name__)

# Zenith distance of the sun's centre at each event. The official value is
# the true horizon plus 0.833 degrees of refraction and solar semi-diameter.
TWILIGHT_ZENITHS: Dict[str, float] = {
    "official": 90.833,
    "civil": 96.0,
    "nautical": 102.0,
    "astronomical": 108.0,
}
OFFICIAL_ZENITH = TWILIGHT_ZENITHS["official"]


class SolarEvent(str, Enum):
    """Which horizon crossing to solve for."""

    sunrise = "sunrise"
    sunset = "sunset"


class NoSolarEventError(RuntimeError):
    """Raised when the sun does not cross the requested zenith on a date."""

    def __init__(self, event: SolarEvent, status: str) -> None:
        self.event = event
        self.status = status
        super().__init__(f"No {event.value} at this location and date ({status})")


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position in degrees; longitude is east-positive."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.latitude) or not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude must be within [-90, 90] degrees: {self.latitude}")
        if not math.isfinite(self.longitude) or not -180.0 <= self.longitude <= 180.0:
            raise ValueError(
                f"Longitude must be within [-180, 180] degrees: {self.longitude}"
            )


@dataclass(frozen=True)
class SunTimes:
    """Sunrise and sunset for one date, as aware UTC datetimes."""

    sunrise_utc: Optional[datetime]
    sunset_utc: Optional[datetime]
    status: str


def _zenith_degrees(twilight: str) -> float:
    try:
        return TWILIGHT_ZENITHS[twilight]
    except KeyError as exc:
        raise ValueError(f"Unsupported twilight selector: {twilight}") from exc


def hour_angle(
    latitude: float,
    declination: float,
    event: SolarEvent,
    zenith: float = OFFICIAL_ZENITH,
) -> float:
    """Hour angle of the sun at *zenith* distance, in radians.

    Sunrise yields a positive angle and sunset the same angle negated.

    Raises
    ------
    NoSolarEventError
        If the sun stays above (polar day) or below (polar night) the
        zenith circle for the whole day.
    """

    lat_rad = deg_to_rad(latitude)
    dec_rad = deg_to_rad(declination)
    cos_ha = np.cos(deg_to_rad(zenith)) / (np.cos(lat_rad) * np.cos(dec_rad)) - np.tan(
        lat_rad
    ) * np.tan(dec_rad)
    if not np.isfinite(cos_ha):
        raise ValueError(
            f"Hour angle undefined for latitude={latitude}, declination={declination}"
        )
    if cos_ha > 1.0:
        raise NoSolarEventError(event, "polar_night")
    if cos_ha < -1.0:
        raise NoSolarEventError(event, "polar_day")

    angle = float(np.arccos(cos_ha))
    return angle if event is SolarEvent.sunrise else -angle


def _utc_minutes(
    t: float,
    latitude: float,
    west_longitude: float,
    event: SolarEvent,
    zenith: float,
) -> Tuple[float, float, float]:
    eq_time = equation_of_time(t)
    declination = sun_declination(t)
    angle = hour_angle(latitude, declination, event, zenith)
    minutes = 720.0 + 4.0 * (west_longitude - rad_to_deg(angle)) - eq_time
    return float(minutes), float(eq_time), float(declination)


def event_time_utc(
    julian_day: float,
    latitude: float,
    longitude: float,
    event: SolarEvent,
    twilight: str = "official",
) -> float:
    """Return the event time in minutes after 0h UTC of *julian_day*.

    The sun's declination and the equation of time are first evaluated at
    0h, then once more at the approximate event instant. The result may be
    negative or exceed 1440 when the event falls on the neighbouring UTC
    date.

    Parameters
    ----------
    julian_day:
        Julian Day at 0h of the civil date, see
        :func:`solar.timescale.civil_date_to_julian_day`.
    latitude, longitude:
        Geographic coordinates in degrees (east-positive longitude).
    event:
        Sunrise or sunset.
    twilight:
        Key of :data:`TWILIGHT_ZENITHS`.
    """

    zenith = _zenith_degrees(twilight)
    west_longitude = -longitude
    t = julian_day_to_century(julian_day)

    approximate, _, _ = _utc_minutes(t, latitude, west_longitude, event, zenith)
    refined_t = julian_day_to_century(century_to_julian_day(t) + approximate / MINUTES_PER_DAY)
    minutes, eq_time, declination = _utc_minutes(
        refined_t, latitude, west_longitude, event, zenith
    )

    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug(
            json.dumps(
                {
                    "event": "solar_event_solved",
                    "kind": event.value,
                    "julian_day": julian_day,
                    "eq_time_min": round(eq_time, 6),
                    "declination_deg": round(declination, 6),
                    "utc_minutes": round(minutes, 6),
                }
            )
        )
    return minutes


def compute_sun_times(
    day: date,
    coordinate: GeoCoordinate,
    twilight: str = "official",
) -> SunTimes:
    """Compute sunrise and sunset for the civil date *day*.

    Polar conditions are reported through :attr:`SunTimes.status`
    (``"polar_day"`` or ``"polar_night"``) instead of an exception.
    """

    julian_day = civil_date_to_julian_day(day)
    utc_midnight = datetime.combine(day, time(), tzinfo=UTC)

    found: Dict[SolarEvent, Optional[datetime]] = {}
    status = "ok"
    for event in SolarEvent:
        try:
            minutes = event_time_utc(
                julian_day, coordinate.latitude, coordinate.longitude, event, twilight
            )
        except NoSolarEventError as exc:
            found[event] = None
            status = exc.status
            continue
        found[event] = utc_midnight + timedelta(minutes=minutes)

    if any(value is not None for value in found.values()):
        status = "ok"
    return SunTimes(
        sunrise_utc=found[SolarEvent.sunrise],
        sunset_utc=found[SolarEvent.sunset],
        status=status,
    )
