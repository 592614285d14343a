"""FastAPI application exposing sunrise/sunset times and minute matching."""

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from models import (
    ErrorResponse,
    HealthResponse,
    MatchQueryParams,
    MatchResponse,
    SunQueryParams,
    SunResponse,
)
from solar.civil import CivilConversionError, CivilTimeProvider, ZoneInfoProvider
from solar.events import GeoCoordinate, compute_sun_times
from solar.matcher import match_solar_event, utc_reference_date
from solar.settings import resolve_log_level, resolve_timezone

logging.basicConfig(level=resolve_log_level(), format="%(message)s")
LOGGER = logging.getLogger("solar-api")

APP_DESCRIPTION = (
    "Sunrise and sunset times from the NOAA solar model, and a minute-level "
    "matcher for sunrise/sunset triggered schedules"
)

DEFAULT_TIMEZONE = "UTC"


@asynccontextmanager
async def lifespan(app: FastAPI):
    global DEFAULT_TIMEZONE
    configured = resolve_timezone("UTC")
    try:
        ZoneInfoProvider(configured)
    except ValueError as exc:
        LOGGER.error(json.dumps({"event": "timezone_invalid", "error": str(exc)}))
        raise
    DEFAULT_TIMEZONE = configured
    LOGGER.info(json.dumps({"event": "startup", "default_timezone": DEFAULT_TIMEZONE}))
    yield


app = FastAPI(
    title="Solar Triggers API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)


def _format_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _format_local(dt: Optional[datetime], provider: CivilTimeProvider) -> Optional[str]:
    if dt is None:
        return None
    return provider.utc_to_civil(dt).isoformat()


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, default_timezone=DEFAULT_TIMEZONE)


@app.get(
    "/sun",
    response_model=SunResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def sun_endpoint(params: Annotated[SunQueryParams, Query()]) -> SunResponse:
    start_time = time.perf_counter()
    provider = ZoneInfoProvider(params.tz or DEFAULT_TIMEZONE)
    try:
        coordinate = GeoCoordinate(params.lat, params.lon)
        result = compute_sun_times(
            utc_reference_date(params.day, coordinate, provider),
            coordinate,
            twilight=params.twilight.value,
        )
        sunrise_local = _format_local(result.sunrise_utc, provider)
        sunset_local = _format_local(result.sunset_utc, provider)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except CivilConversionError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = SunResponse(
        status=result.status,
        day=params.day,
        latitude=params.lat,
        longitude=params.lon,
        timezone=provider.name,
        twilight=params.twilight,
        sunrise_utc=_format_utc(result.sunrise_utc),
        sunset_utc=_format_utc(result.sunset_utc),
        sunrise_local=sunrise_local,
        sunset_local=sunset_local,
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "sun",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.day.isoformat(),
                "timezone": provider.name,
                "twilight": params.twilight.value,
                "status": response.status,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response


@app.get(
    "/match",
    response_model=MatchResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def match_endpoint(params: Annotated[MatchQueryParams, Query()]) -> MatchResponse:
    provider = ZoneInfoProvider(params.tz or DEFAULT_TIMEZONE)
    at = params.at
    try:
        if at.tzinfo is not None:
            at = provider.utc_to_civil(at)
        result = match_solar_event(
            at,
            GeoCoordinate(params.lat, params.lon),
            params.event,
            provider=provider,
            twilight=params.twilight.value,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except CivilConversionError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    response = MatchResponse(
        outcome=result.outcome,
        event=params.event,
        at=at.isoformat(),
        timezone=provider.name,
        event_local=result.event_local.isoformat() if result.event_local else None,
        status=result.status,
    )
    LOGGER.info(
        json.dumps(
            {
                "event": "match",
                "kind": params.event.value,
                "lat": params.lat,
                "lon": params.lon,
                "at": response.at,
                "outcome": response.outcome.value,
            }
        )
    )
    return response
