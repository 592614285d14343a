"""Decide whether a local clock minute is the minute of sunrise or sunset."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from enum import Enum
from typing import Optional

from .civil import CivilConversionError, CivilTimeProvider, SystemLocalProvider
from .events import GeoCoordinate, NoSolarEventError, SolarEvent, event_time_utc
from .timescale import civil_date_to_julian_day

__all__ = [
    "MatchOutcome",
    "SolarMatch",
    "event_local_time",
    "is_sunrise_at",
    "is_sunset_at",
    "match_solar_event",
    "same_minute",
    "utc_reference_date",
]

LOGGER = logging.getLogger(__name__)


class MatchOutcome(str, Enum):
    match = "match"
    no_match = "no_match"
    no_solar_event = "no_solar_event"


@dataclass(frozen=True)
class SolarMatch:
    """Result of :func:`match_solar_event`."""

    outcome: MatchOutcome
    event_local: Optional[datetime] = None
    status: Optional[str] = None

    def __bool__(self) -> bool:
        return self.outcome is MatchOutcome.match


def same_minute(a: Optional[datetime], b: Optional[datetime]) -> bool:
    """True when both timestamps fall in the same civil minute."""

    if a is None or b is None:
        return False
    return (a.year, a.month, a.day, a.hour, a.minute) == (
        b.year,
        b.month,
        b.day,
        b.hour,
        b.minute,
    )


def utc_reference_date(
    day: date, coordinate: GeoCoordinate, provider: CivilTimeProvider
) -> date:
    """UTC date whose solution puts both events on the civil date *day*.

    Local midnight shifted by the observer's mean solar offset from UTC
    lands near 12h UTC of that date, so zones far from their solar time
    (UTC+13 and UTC+14 near the date line, UTC-12) still resolve to *day*.
    """

    midnight_utc = provider.civil_midnight_of(day)
    try:
        anchor = midnight_utc + timedelta(minutes=720.0 + 4.0 * coordinate.longitude)
    except OverflowError as exc:
        raise CivilConversionError(f"Reference date out of range for {day.isoformat()}") from exc
    return anchor.date()


def event_local_time(
    day: date,
    coordinate: GeoCoordinate,
    event: SolarEvent,
    provider: CivilTimeProvider,
    twilight: str = "official",
) -> datetime:
    """Local civil time of *event* on the civil date *day*.

    Raises
    ------
    NoSolarEventError
        For polar day or polar night.
    CivilConversionError
        If *provider* cannot convert between local time and UTC.
    """

    midnight_utc = provider.civil_midnight_of(day)
    reference = utc_reference_date(day, coordinate, provider)
    # Hours from 0h UTC of the reference date to local midnight, e.g. 5 for EST.
    delta_hours = (
        midnight_utc - datetime.combine(reference, time(), tzinfo=UTC)
    ) / timedelta(hours=1)

    minutes = event_time_utc(
        civil_date_to_julian_day(reference),
        coordinate.latitude,
        coordinate.longitude,
        event,
        twilight,
    )
    try:
        instant = midnight_utc + timedelta(minutes=minutes) - timedelta(hours=delta_hours)
    except OverflowError as exc:
        raise CivilConversionError(f"Event instant out of range for {day.isoformat()}") from exc
    return provider.utc_to_civil(instant)


def _log_conversion_failure(
    timestamp: datetime,
    event: SolarEvent,
    provider: CivilTimeProvider,
    exc: CivilConversionError,
) -> None:
    LOGGER.error(
        json.dumps(
            {
                "event": "civil_conversion_failed",
                "kind": event.value,
                "timestamp": timestamp.isoformat(),
                "provider": provider.name,
                "error": str(exc),
            }
        )
    )


def _local_fields(
    timestamp: datetime, event: SolarEvent, provider: CivilTimeProvider
) -> datetime:
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        return timestamp
    try:
        return provider.utc_to_civil(timestamp.astimezone(UTC))
    except CivilConversionError as exc:
        _log_conversion_failure(timestamp, event, provider, exc)
        raise


def _resolve_event(
    local: datetime,
    coordinate: GeoCoordinate,
    event: SolarEvent,
    provider: CivilTimeProvider,
    twilight: str,
) -> datetime:
    try:
        return event_local_time(local.date(), coordinate, event, provider, twilight)
    except CivilConversionError as exc:
        _log_conversion_failure(local, event, provider, exc)
        raise


def match_solar_event(
    timestamp: datetime,
    coordinate: GeoCoordinate,
    event: SolarEvent,
    provider: Optional[CivilTimeProvider] = None,
    twilight: str = "official",
) -> SolarMatch:
    """Compare *timestamp* with the local minute of *event* on its date.

    Naive timestamps are read as civil time of *provider* (the host time
    zone by default); aware ones are converted into it first.
    """

    if provider is None:
        provider = SystemLocalProvider()
    local = _local_fields(timestamp, event, provider)
    try:
        event_local = _resolve_event(local, coordinate, event, provider, twilight)
    except NoSolarEventError as exc:
        LOGGER.info(
            json.dumps(
                {
                    "event": "no_solar_event",
                    "kind": event.value,
                    "date": local.date().isoformat(),
                    "lat": coordinate.latitude,
                    "lon": coordinate.longitude,
                    "status": exc.status,
                }
            )
        )
        return SolarMatch(outcome=MatchOutcome.no_solar_event, status=exc.status)

    outcome = MatchOutcome.match if same_minute(local, event_local) else MatchOutcome.no_match
    return SolarMatch(outcome=outcome, event_local=event_local, status="ok")


def _is_event_at(
    event: SolarEvent,
    timestamp: datetime,
    latitude: float,
    longitude: float,
    provider: Optional[CivilTimeProvider],
    twilight: str,
) -> bool:
    coordinate = GeoCoordinate(latitude, longitude)
    if provider is None:
        provider = SystemLocalProvider()
    local = _local_fields(timestamp, event, provider)
    return same_minute(local, _resolve_event(local, coordinate, event, provider, twilight))


def is_sunrise_at(
    timestamp: datetime,
    latitude: float,
    longitude: float,
    provider: Optional[CivilTimeProvider] = None,
    twilight: str = "official",
) -> bool:
    """True if *timestamp* is the local minute of sunrise.

    Raises :class:`~solar.events.NoSolarEventError` when the sun does not
    rise at all that day, and :class:`~solar.civil.CivilConversionError`
    when the time zone conversion fails.
    """

    return _is_event_at(SolarEvent.sunrise, timestamp, latitude, longitude, provider, twilight)


def is_sunset_at(
    timestamp: datetime,
    latitude: float,
    longitude: float,
    provider: Optional[CivilTimeProvider] = None,
    twilight: str = "official",
) -> bool:
    """Sunset counterpart of :func:`is_sunrise_at`."""

    return _is_event_at(SolarEvent.sunset, timestamp, latitude, longitude, provider, twilight)
