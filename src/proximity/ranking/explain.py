"""
Small display formatting helpers.

Used by the CLI to print compact distance summaries.
"""

from __future__ import annotations

from proximity.domain.models import ProviderDistance


def format_distance(distance_km: float | None) -> str | None:
    """Render a distance for display; metres below 1 km. None stays None."""
    if distance_km is None:
        return None
    if distance_km < 1:
        return f"{distance_km * 1000:.0f} m away"
    return f"{distance_km:.1f} km away"


def one_line_summary(item: ProviderDistance) -> str:
    """Render a compact single-line summary for a ranked provider."""
    provider = item.provider
    parts = [provider.name, format_distance(item.distance_km) or "distance unknown"]
    if provider.services:
        parts.append(",".join(provider.services))
    return " | ".join(parts)
