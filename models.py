"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from solar.events import SolarEvent
from solar.matcher import MatchOutcome


class Twilight(str, Enum):
    """Enumeration of supported twilight definitions."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


def _check_timezone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone: {value}") from exc
    return value


class SunQueryParams(BaseModel):
    """Validated query parameters for the ``/sun`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(
        ..., ge=-180.0, le=180.0, description="Longitude in degrees (east-positive)"
    )
    day: date = Field(..., description="Local calendar date (YYYY-MM-DD)")
    tz: Optional[str] = Field(
        None, description="IANA time zone for local times (defaults to SOLAR_TZ)"
    )
    twilight: Twilight = Field(Twilight.official, description="Twilight definition")

    @field_validator("tz")
    @classmethod
    def validate_tz(cls, value: Optional[str]) -> Optional[str]:
        return _check_timezone(value)


class MatchQueryParams(BaseModel):
    """Validated query parameters for the ``/match`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(
        ..., ge=-180.0, le=180.0, description="Longitude in degrees (east-positive)"
    )
    at: datetime = Field(
        ..., description="Local timestamp to test; an explicit offset is honoured"
    )
    event: SolarEvent = Field(SolarEvent.sunrise, description="Event to match")
    tz: Optional[str] = Field(None, description="IANA time zone of the observer")
    twilight: Twilight = Field(Twilight.official, description="Twilight definition")

    @field_validator("tz")
    @classmethod
    def validate_tz(cls, value: Optional[str]) -> Optional[str]:
        return _check_timezone(value)


class SunResponse(BaseModel):
    """Successful sunrise/sunset response payload."""

    ok: bool = True
    status: str = Field(..., description="Computation status")
    day: date = Field(..., description="Requested local date")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    timezone: str = Field(..., description="Time zone used for local times")
    twilight: Twilight = Field(..., description="Applied twilight definition")
    sunrise_utc: Optional[str] = Field(None, description="Sunrise time in UTC (ISO-8601)")
    sunset_utc: Optional[str] = Field(None, description="Sunset time in UTC (ISO-8601)")
    sunrise_local: Optional[str] = Field(None, description="Sunrise in local civil time")
    sunset_local: Optional[str] = Field(None, description="Sunset in local civil time")


class MatchResponse(BaseModel):
    """Result of testing a timestamp against a solar event."""

    ok: bool = True
    outcome: MatchOutcome
    event: SolarEvent
    at: str = Field(..., description="Tested timestamp, as local civil time")
    timezone: str
    event_local: Optional[str] = Field(
        None, description="Local minute of the event on that date"
    )
    status: Optional[str] = Field(None, description="Computation status")


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    default_timezone: str


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
