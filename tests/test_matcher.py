from __future__ import annotations

import logging
import time
from datetime import UTC, date, datetime, timedelta

import pytest

from solar.civil import (
    CivilConversionError,
    FixedOffsetProvider,
    SystemLocalProvider,
    ZoneInfoProvider,
)
from solar.events import GeoCoordinate, NoSolarEventError, SolarEvent
from solar.matcher import (
    MatchOutcome,
    event_local_time,
    is_sunrise_at,
    is_sunset_at,
    match_solar_event,
    same_minute,
    utc_reference_date,
)

NEW_YORK = ZoneInfoProvider("America/New_York")
PHILADELPHIA = GeoCoordinate(39.95, -75.15)


class BrokenProvider:
    """Provider whose conversions always fail."""

    name = "broken"

    def civil_midnight_of(self, day: date) -> datetime:
        raise CivilConversionError(f"cannot resolve midnight of {day}")

    def utc_to_civil(self, instant: datetime) -> datetime:
        raise CivilConversionError("cannot resolve local time")


def _minutes_of(day: date):
    start = datetime(day.year, day.month, day.day)
    return [start + timedelta(minutes=offset) for offset in range(24 * 60)]


def test_philadelphia_has_one_sunrise_and_one_sunset_minute() -> None:
    day = date(2004, 11, 28)
    sunrises = [
        minute for minute in _minutes_of(day) if is_sunrise_at(minute, 39.95, -75.15, NEW_YORK)
    ]
    sunsets = [
        minute for minute in _minutes_of(day) if is_sunset_at(minute, 39.95, -75.15, NEW_YORK)
    ]
    assert sunrises == [datetime(2004, 11, 28, 7, 0)]
    assert sunsets == [datetime(2004, 11, 28, 16, 36)]


def test_seconds_are_ignored() -> None:
    assert is_sunrise_at(datetime(2004, 11, 28, 7, 0, 59), 39.95, -75.15, NEW_YORK)
    assert not is_sunrise_at(datetime(2004, 11, 28, 7, 1, 0), 39.95, -75.15, NEW_YORK)


def test_sunrise_minute_is_not_a_sunset_minute() -> None:
    assert not is_sunset_at(datetime(2004, 11, 28, 7, 0), 39.95, -75.15, NEW_YORK)
    assert not is_sunrise_at(datetime(2004, 11, 28, 16, 36), 39.95, -75.15, NEW_YORK)


@pytest.mark.parametrize(
    ("tz", "latitude", "longitude", "day", "sunrise", "sunset"),
    [
        ("America/New_York", 39.95, -75.15, date(2004, 11, 28), (7, 0), (16, 36)),
        ("America/New_York", 40.71, -74.01, date(2024, 7, 4), (5, 30), (20, 30)),
        ("Europe/London", 51.5, -0.1276, date(2024, 6, 21), (4, 43), (21, 21)),
        ("Australia/Sydney", -33.87, 151.21, date(2024, 6, 21), (7, 0), (16, 53)),
    ],
)
def test_event_local_time(tz, latitude, longitude, day, sunrise, sunset) -> None:
    provider = ZoneInfoProvider(tz)
    coordinate = GeoCoordinate(latitude, longitude)
    rise = event_local_time(day, coordinate, SolarEvent.sunrise, provider)
    set_ = event_local_time(day, coordinate, SolarEvent.sunset, provider)
    assert rise.date() == day and set_.date() == day
    assert (rise.hour, rise.minute) == sunrise
    assert (set_.hour, set_.minute) == sunset


def test_half_hour_offset_zone() -> None:
    provider = FixedOffsetProvider(5.5)
    day = date(2024, 1, 15)
    assert is_sunrise_at(datetime(2024, 1, 15, 7, 15), 28.61, 77.21, provider)
    assert is_sunset_at(datetime(2024, 1, 15, 17, 45), 28.61, 77.21, provider)
    rise = event_local_time(day, GeoCoordinate(28.61, 77.21), SolarEvent.sunrise, provider)
    assert rise.utcoffset() == timedelta(hours=5, minutes=30)


@pytest.mark.parametrize("latitude", [-59.5, -45.0, -20.0, 0.0, 23.4, 48.8, 59.5])
@pytest.mark.parametrize("longitude", [-179.0, -97.5, -3.7, 0.0, 30.0, 121.5, 179.0])
@pytest.mark.parametrize("day", [date(2023, 3, 20), date(2023, 6, 21), date(2023, 12, 21)])
def test_single_event_minute_away_from_poles(latitude, longitude, day) -> None:
    provider = FixedOffsetProvider(round(longitude / 15.0))
    coordinate = GeoCoordinate(latitude, longitude)
    rise = event_local_time(day, coordinate, SolarEvent.sunrise, provider)
    set_ = event_local_time(day, coordinate, SolarEvent.sunset, provider)
    assert rise.date() == day and set_.date() == day
    assert rise < set_

    for event, instant in ((SolarEvent.sunrise, rise), (SolarEvent.sunset, set_)):
        minute = instant.replace(second=0, microsecond=0, tzinfo=None)
        assert match_solar_event(minute, coordinate, event, provider).outcome is MatchOutcome.match
        for neighbour in (minute - timedelta(minutes=1), minute + timedelta(minutes=1)):
            result = match_solar_event(neighbour, coordinate, event, provider)
            assert result.outcome is MatchOutcome.no_match


def test_aware_timestamp_is_converted_to_provider_zone() -> None:
    at = datetime(2004, 11, 28, 12, 0, 30, tzinfo=UTC)
    result = match_solar_event(at, PHILADELPHIA, SolarEvent.sunrise, NEW_YORK)
    assert result.outcome is MatchOutcome.match
    assert result
    assert result.event_local is not None
    assert result.event_local.strftime("%H:%M") == "07:00"


@pytest.mark.parametrize(
    ("day", "status"), [(date(2024, 12, 21), "polar_night"), (date(2024, 6, 21), "polar_day")]
)
def test_polar_locations_report_no_solar_event(day: date, status: str) -> None:
    provider = ZoneInfoProvider("Europe/Oslo")
    coordinate = GeoCoordinate(85.0, 10.0)
    at = datetime(day.year, day.month, day.day, 12, 0)

    result = match_solar_event(at, coordinate, SolarEvent.sunrise, provider)
    assert result.outcome is MatchOutcome.no_solar_event
    assert result.status == status
    assert result.event_local is None
    assert not result

    with pytest.raises(NoSolarEventError) as excinfo:
        is_sunset_at(at, 85.0, 10.0, provider)
    assert excinfo.value.status == status


def test_conversion_failure_is_raised_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="solar.matcher"):
        with pytest.raises(CivilConversionError):
            match_solar_event(
                datetime(2004, 11, 28, 7, 0), PHILADELPHIA, SolarEvent.sunrise, BrokenProvider()
            )
    assert "civil_conversion_failed" in caplog.text


def test_out_of_range_date_fails_conversion() -> None:
    with pytest.raises(CivilConversionError):
        is_sunrise_at(datetime(1, 1, 1, 6, 0), 0.0, 75.0, FixedOffsetProvider(5))


def test_invalid_coordinates_rejected_before_computing() -> None:
    with pytest.raises(ValueError):
        is_sunrise_at(datetime(2004, 11, 28, 7, 0), 95.0, -75.15, NEW_YORK)
    with pytest.raises(ValueError):
        is_sunset_at(datetime(2004, 11, 28, 7, 0), 39.95, -200.0, NEW_YORK)


def test_system_local_provider_follows_host_zone(monkeypatch: pytest.MonkeyPatch) -> None:
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    try:
        assert is_sunrise_at(datetime(2004, 11, 28, 7, 0), 39.95, -75.15, SystemLocalProvider())
        assert is_sunset_at(datetime(2004, 11, 28, 16, 36), 39.95, -75.15)
    finally:
        monkeypatch.undo()
        time.tzset()


def test_same_minute() -> None:
    a = datetime(2024, 5, 1, 6, 12, 1)
    assert same_minute(a, datetime(2024, 5, 1, 6, 12, 59))
    assert not same_minute(a, datetime(2024, 5, 2, 6, 12))
    assert not same_minute(a, None)


def test_provider_validation() -> None:
    with pytest.raises(ValueError):
        ZoneInfoProvider("Mars/Olympus_Mons")
    with pytest.raises(ValueError):
        FixedOffsetProvider(24)
    with pytest.raises(ValueError):
        NEW_YORK.utc_to_civil(datetime(2004, 11, 28, 12, 0))


@pytest.mark.parametrize(
    ("tz", "latitude", "longitude", "sunrise", "sunset"),
    [
        ("Pacific/Apia", -13.83, -171.76, datetime(2024, 3, 20, 6, 30), datetime(2024, 3, 20, 18, 37)),
        ("Pacific/Kiritimati", 1.87, -157.43, datetime(2024, 3, 20, 6, 33), datetime(2024, 3, 20, 18, 40)),
    ],
)
def test_date_line_zones_match_once_per_day(tz, latitude, longitude, sunrise, sunset) -> None:
    provider = ZoneInfoProvider(tz)
    day = date(2024, 3, 20)
    sunrises = [m for m in _minutes_of(day) if is_sunrise_at(m, latitude, longitude, provider)]
    sunsets = [m for m in _minutes_of(day) if is_sunset_at(m, latitude, longitude, provider)]
    assert sunrises == [sunrise]
    assert sunsets == [sunset]


@pytest.mark.parametrize(
    ("tz", "latitude", "longitude"),
    [
        ("Pacific/Apia", -13.83, -171.76),
        ("Pacific/Kiritimati", 1.87, -157.43),
        ("Pacific/Tongatapu", -21.14, -175.2),
        ("Pacific/Pago_Pago", -14.28, -170.7),
        ("Pacific/Auckland", -36.85, 174.76),
        ("Asia/Tokyo", 35.68, 139.69),
        ("Asia/Kolkata", 28.61, 77.21),
        ("Pacific/Honolulu", 21.31, -157.86),
        ("Asia/Urumqi", 43.83, 87.62),
    ],
)
@pytest.mark.parametrize("day", [date(2024, 1, 10), date(2024, 4, 30), date(2024, 8, 15), date(2024, 11, 5)])
def test_events_land_on_requested_day_in_real_zones(tz, latitude, longitude, day) -> None:
    provider = ZoneInfoProvider(tz)
    coordinate = GeoCoordinate(latitude, longitude)
    rise = event_local_time(day, coordinate, SolarEvent.sunrise, provider)
    set_ = event_local_time(day, coordinate, SolarEvent.sunset, provider)
    assert rise.date() == day
    assert set_.date() == day
    assert rise < set_
    minute = rise.replace(second=0, microsecond=0, tzinfo=None)
    assert match_solar_event(minute, coordinate, SolarEvent.sunrise, provider)


def test_utc_reference_date() -> None:
    day = date(2024, 3, 20)
    assert utc_reference_date(day, GeoCoordinate(-13.83, -171.76), ZoneInfoProvider("Pacific/Apia")) == date(2024, 3, 19)
    assert utc_reference_date(day, PHILADELPHIA, NEW_YORK) == day
    assert utc_reference_date(day, GeoCoordinate(-33.87, 151.21), ZoneInfoProvider("Australia/Sydney")) == day
    assert utc_reference_date(day, GeoCoordinate(0.0, -179.0), FixedOffsetProvider(-12)) == day


def test_no_solar_event_log_uses_local_date(caplog: pytest.LogCaptureFixture) -> None:
    provider = ZoneInfoProvider("Pacific/Kiritimati")
    at = datetime(2024, 12, 21, 12, 0, tzinfo=UTC)  # 2024-12-22 02:00 in +14
    with caplog.at_level(logging.INFO, logger="solar.matcher"):
        result = match_solar_event(at, GeoCoordinate(85.0, -157.43), SolarEvent.sunrise, provider)
    assert result.outcome is MatchOutcome.no_solar_event
    assert '"date": "2024-12-22"' in caplog.text


def test_enum_members_are_lowercase() -> None:
    assert [member.name for member in SolarEvent] == ["sunrise", "sunset"]
    assert [member.value for member in MatchOutcome] == ["match", "no_match", "no_solar_event"]
    assert SolarEvent("sunset") is SolarEvent.sunset
