"""
Seeker-to-provider distance for a new booking.

A signed-in seeker's profile location is used when available; a guest may send
latitude/longitude as form text instead. The distance is informational: a bad
or missing location must never block the booking, so it degrades to None.
"""

from __future__ import annotations

import logging
from typing import Any

from proximity.core.geo import get_field, distance_between

logger = logging.getLogger(__name__)


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def resolve_seeker_location(seeker: Any = None, guest_info: Any = None) -> Any:
    """Pick the location record to measure from (profile first, then guest input)."""
    if seeker is not None:
        return seeker
    if guest_info is None:
        return None
    lat = get_field(guest_info, "latitude")
    lon = get_field(guest_info, "longitude")
    if _present(lat) and _present(lon):
        return {"latitude": float(lat), "longitude": float(lon)}
    return None


def estimate_booking_distance(*, seeker: Any = None, guest_info: Any = None, provider: Any = None) -> float | None:
    """Distance in km between the booking seeker and the provider, or None."""
    try:
        origin = resolve_seeker_location(seeker, guest_info)
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring unparseable guest location: %s", str(e))
        return None

    if origin is None or provider is None:
        if origin is None:
            logger.info("Distance skipped: seeker location not available.")
        if provider is None:
            logger.info("Distance skipped: provider location not available.")
        return None

    distance = distance_between(origin, provider)
    if distance is None:
        logger.info("Distance skipped: missing location data.")
    else:
        logger.debug("Calculated booking distance: %.2f km", distance)
    return distance


def describe_distance(distance_km: float | None) -> str:
    """Text stored on booking notifications."""
    return f"{distance_km} km" if distance_km is not None else "N/A"
