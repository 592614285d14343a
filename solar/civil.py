"""Civil time <-> UTC conversion providers.

The solver works in UTC; turning that into wall-clock fields (and finding
the UTC instant of a local midnight) is delegated to a provider so that
callers choose the time zone rules and tests can plug in fixed offsets.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

__all__ = [
    "CivilConversionError",
    "CivilTimeProvider",
    "FixedOffsetProvider",
    "SystemLocalProvider",
    "ZoneInfoProvider",
    "provider_for",
]


class CivilConversionError(RuntimeError):
    """Raised when a civil/UTC conversion cannot be performed."""


class CivilTimeProvider(Protocol):
    name: str

    def civil_midnight_of(self, day: date) -> datetime:
        """Return the aware UTC instant of local midnight starting *day*."""

    def utc_to_civil(self, instant: datetime) -> datetime:
        """Return *instant* expressed in local civil time."""


class _TzinfoProvider:
    """Provider backed by a :class:`datetime.tzinfo`.

    ``tz=None`` means the operating system's local time zone.
    """

    name = "local"

    def __init__(self, tz: Optional[tzinfo]) -> None:
        self.tz = tz

    def civil_midnight_of(self, day: date) -> datetime:
        try:
            return datetime.combine(day, time(), tzinfo=self.tz).astimezone(UTC)
        except (OverflowError, ValueError, OSError) as exc:
            raise CivilConversionError(
                f"Cannot convert local midnight of {day.isoformat()} in {self.name} to UTC: {exc}"
            ) from exc

    def utc_to_civil(self, instant: datetime) -> datetime:
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise ValueError("instant must be timezone-aware")
        try:
            return instant.astimezone(self.tz)
        except (OverflowError, ValueError, OSError) as exc:
            raise CivilConversionError(
                f"Cannot convert {instant.isoformat()} to local time in {self.name}: {exc}"
            ) from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ZoneInfoProvider(_TzinfoProvider):
    """Civil time following an IANA time zone, daylight saving included."""

    def __init__(self, key: str) -> None:
        try:
            zone = ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {key}") from exc
        super().__init__(zone)
        self.name = key


class FixedOffsetProvider(_TzinfoProvider):
    """Civil time at a constant offset from UTC, in hours."""

    def __init__(self, offset_hours: float) -> None:
        if not -24.0 < offset_hours < 24.0:
            raise ValueError("offset_hours must be within ±24 hours")
        super().__init__(timezone(timedelta(hours=offset_hours)))
        self.name = f"UTC{offset_hours:+g}"


class SystemLocalProvider(_TzinfoProvider):
    """Civil time as configured on the host (``TZ``, ``/etc/localtime``)."""

    def __init__(self) -> None:
        super().__init__(None)


def provider_for(tz: Optional[str]) -> CivilTimeProvider:
    """Return a provider for the IANA zone *tz*, or the host zone when empty."""

    if not tz:
        return SystemLocalProvider()
    return ZoneInfoProvider(tz)
