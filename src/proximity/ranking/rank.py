from __future__ import annotations

# Orchestrates proximity ranking:
# - distances are `proximity.core.geo.distance_between` values (None = unknown location)
# - the radius applies to the unrounded great-circle distance
# - radius / service / max_results filtering
# - explainable counts in `RankingResult.meta`
#
# Unknown distances are never replaced with a number; they sort after known ones
# or get dropped when a radius is requested.

import logging
from datetime import datetime, timezone

from proximity.config.settings import Settings, get_settings
from proximity.core.geo import extract_coordinates, great_circle_km, round_km
from proximity.core.spatial_index import SpatialGridIndex
from proximity.domain.models import Provider, ProviderDistance, RankingResult, Seeker

logger = logging.getLogger(__name__)


def build_provider_index(providers: list[Provider], settings: Settings | None = None) -> SpatialGridIndex[Provider]:
    settings = settings or get_settings()
    return SpatialGridIndex(
        providers,
        get_point=extract_coordinates,
        cell_size_km=settings.ranking.index_cell_size_km,
    )


def _offers(provider: Provider, service: str | None) -> bool:
    if not service:
        return True
    return service.strip().lower() in provider.services


def rank_providers(
    origin: Seeker,
    providers: list[Provider],
    *,
    radius_km: float | None = None,
    max_results: int | None = None,
    service: str | None = None,
    settings: Settings | None = None,
) -> RankingResult:
    """Order providers by distance from `origin` (nearest first)."""
    settings = settings or get_settings()
    cfg = settings.ranking
    if radius_km is None:
        radius_km = cfg.radius_km_default
    limit = int(max_results) if max_results is not None else cfg.max_results_default

    candidates = [p for p in providers if _offers(p, service)]
    here = extract_coordinates(origin)
    if here is None:
        logger.warning("Origin %s has no location; distances are unknown.", origin.id or "<anonymous>")

    located: list[tuple[float, ProviderDistance]] = []
    unknown: list[ProviderDistance] = []
    for provider in candidates:
        there = extract_coordinates(provider) if here is not None else None
        if there is None:
            unknown.append(ProviderDistance(provider=provider, distance_km=None))
            continue
        raw = great_circle_km(here.lat, here.lon, there.lat, there.lon)
        located.append((raw, ProviderDistance(provider=provider, distance_km=round_km(raw))))

    located.sort(key=lambda pair: (pair[1].distance_km, pair[1].provider.id))
    if radius_km is not None:
        located = [pair for pair in located if pair[0] <= radius_km]

    ranked = [item for _, item in located]
    if cfg.include_unknown and radius_km is None:
        ranked.extend(unknown)
    ranked = ranked[:limit]

    if unknown:
        logger.info("%d of %d providers have no known distance.", len(unknown), len(candidates))

    return RankingResult(
        generated_at=datetime.now(timezone.utc),
        origin=origin,
        results=ranked,
        meta={
            "candidates": len(candidates),
            "located": len(candidates) - len(unknown),
            "unknown": len(unknown),
            "returned": len(ranked),
            "radius_km": radius_km,
            "service": service,
        },
    )


def nearby_providers(
    origin: Seeker,
    index: SpatialGridIndex[Provider],
    *,
    radius_km: float,
    max_results: int | None = None,
    settings: Settings | None = None,
) -> RankingResult:
    """Radius query through a prebuilt index; only located providers can match."""
    settings = settings or get_settings()
    limit = int(max_results) if max_results is not None else settings.ranking.max_results_default

    point = extract_coordinates(origin)
    if point is None:
        logger.warning("Origin %s has no location; no nearby providers.", origin.id or "<anonymous>")
        hits: list[tuple[Provider, float]] = []
    else:
        hits = index.query_within(point, radius_km)
    hits.sort(key=lambda pair: (pair[1], pair[0].id))

    results = [ProviderDistance(provider=p, distance_km=d) for p, d in hits[:limit]]
    return RankingResult(
        generated_at=datetime.now(timezone.utc),
        origin=origin,
        results=results,
        meta={
            "indexed": len(index),
            "matched": len(hits),
            "returned": len(results),
            "radius_km": radius_km,
        },
    )
