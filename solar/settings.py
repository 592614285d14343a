"""Environment-driven configuration for the CLI and the HTTP API."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

from .civil import CivilTimeProvider, provider_for

LOGGER = logging.getLogger(__name__)

TIMEZONE_ENV = "SOLAR_TZ"
LOG_LEVEL_ENV = "SOLAR_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def resolve_timezone(default: Optional[str] = None) -> Optional[str]:
    """Return the configured IANA zone name, or *default* when unset."""

    value = os.environ.get(TIMEZONE_ENV, "").strip()
    return value or default


def resolve_log_level() -> int:
    """Return the numeric logging level named by ``SOLAR_LOG_LEVEL``."""

    name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"{LOG_LEVEL_ENV} is not a logging level: {name}")
    return level


def resolve_provider(tz: Optional[str] = None, default: Optional[str] = None) -> CivilTimeProvider:
    """Build the civil-time provider for *tz*, falling back to ``SOLAR_TZ``.

    With neither set (and no *default*), the host's local time zone is used.
    """

    key = tz or resolve_timezone(default)
    provider = provider_for(key)
    LOGGER.debug(json.dumps({"event": "provider_resolved", "timezone": provider.name}))
    return provider
