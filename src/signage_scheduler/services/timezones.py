"""Pick the zone in which a player's schedules are evaluated."""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TimeZoneSource = Literal["site", "customer", "utc"]


def _load_zone(name: str | None) -> tzinfo | None:
    if not name:
        return None
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown time zone %r, falling back to default", name)
        return None


def resolve_time_zone(
    source: TimeZoneSource,
    *,
    site_time_zone: str | None,
    customer_time_zone: str | None,
    default: str = "UTC",
) -> tzinfo:
    """
    Return the zone schedule dates and clock times are interpreted in.

    ``site`` prefers the site's zone, then the customer's; ``customer`` uses the
    customer's zone; ``utc`` ignores both. Missing or unknown zones fall back to
    *default*, and to UTC if that is unknown too.
    """
    candidates: list[str | None] = []
    if source == "site":
        candidates = [site_time_zone, customer_time_zone]
    elif source == "customer":
        candidates = [customer_time_zone]

    for name in [*candidates, default]:
        zone = _load_zone(name)
        if zone is not None:
            return zone
    return timezone.utc


__all__ = ["TimeZoneSource", "resolve_time_zone"]
