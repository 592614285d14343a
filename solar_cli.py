"""Print local sunrise and sunset for a date and location.

Usage::

    solar-times 2004 11 28 39.95 -75.15 --tz America/New_York --days 20

Longitude is east-positive. Without ``--tz`` the ``SOLAR_TZ`` environment
variable is used, then the host's local time zone.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, timedelta
from typing import List, Optional

from solar.civil import CivilConversionError, CivilTimeProvider
from solar.events import TWILIGHT_ZENITHS, GeoCoordinate, compute_sun_times
from solar.matcher import utc_reference_date
from solar.settings import resolve_log_level, resolve_provider

LOGGER = logging.getLogger("solar-cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solar-times", description="Local sunrise and sunset times."
    )
    parser.add_argument("year", type=int)
    parser.add_argument("month", type=int)
    parser.add_argument("day", type=int)
    parser.add_argument("latitude", type=float, help="degrees, north-positive")
    parser.add_argument("longitude", type=float, help="degrees, east-positive")
    parser.add_argument("--tz", default=None, help="IANA time zone (default: SOLAR_TZ or host)")
    parser.add_argument("--days", type=int, default=1, help="number of consecutive days")
    parser.add_argument(
        "--twilight", choices=sorted(TWILIGHT_ZENITHS), default="official"
    )
    parser.add_argument(
        "--debug", action="store_true", help="log intermediate solar quantities"
    )
    return parser


def _format_line(
    day: date, coordinate: GeoCoordinate, twilight: str, provider: CivilTimeProvider
) -> str:
    reference = utc_reference_date(day, coordinate, provider)
    result = compute_sun_times(reference, coordinate, twilight=twilight)
    if result.status != "ok":
        return f"{day.isoformat()}  {result.status.replace('_', ' ')}"
    parts = [day.isoformat()]
    for label, instant in (("sunrise", result.sunrise_utc), ("sunset", result.sunset_utc)):
        text = provider.utc_to_civil(instant).strftime("%H:%M") if instant else "--:--"
        parts.append(f"{label} {text}")
    return "  ".join(parts)


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else resolve_log_level()
    logging.basicConfig(level=level, format="%(message)s")

    if ns.days < 1:
        parser.error("--days must be at least 1")
    try:
        start = date(ns.year, ns.month, ns.day)
        coordinate = GeoCoordinate(ns.latitude, ns.longitude)
        provider = resolve_provider(ns.tz)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        for offset in range(ns.days):
            print(_format_line(start + timedelta(days=offset), coordinate, ns.twilight, provider))
    except (CivilConversionError, OverflowError) as exc:
        LOGGER.error(json.dumps({"event": "civil_conversion_failed", "error": str(exc)}))
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
