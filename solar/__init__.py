"""Sunrise and sunset triggers for a clock-driven scheduler."""

from .civil import (
    CivilConversionError,
    CivilTimeProvider,
    FixedOffsetProvider,
    SystemLocalProvider,
    ZoneInfoProvider,
)
from .events import (
    TWILIGHT_ZENITHS,
    GeoCoordinate,
    NoSolarEventError,
    SolarEvent,
    SunTimes,
    compute_sun_times,
    event_time_utc,
    hour_angle,
)
from .matcher import (
    MatchOutcome,
    SolarMatch,
    event_local_time,
    is_sunrise_at,
    is_sunset_at,
    match_solar_event,
    utc_reference_date,
)

__all__ = [
    "CivilConversionError",
    "CivilTimeProvider",
    "FixedOffsetProvider",
    "GeoCoordinate",
    "MatchOutcome",
    "NoSolarEventError",
    "SolarEvent",
    "SolarMatch",
    "SunTimes",
    "SystemLocalProvider",
    "TWILIGHT_ZENITHS",
    "ZoneInfoProvider",
    "compute_sun_times",
    "event_local_time",
    "event_time_utc",
    "hour_angle",
    "is_sunrise_at",
    "is_sunset_at",
    "match_solar_event",
    "utc_reference_date",
]
