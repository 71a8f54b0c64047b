"""
Geospatial helpers.

Great-circle distance between seekers and providers. A location record may carry
either flat `latitude`/`longitude` fields or a GeoJSON `Point` under
`coordinates` (axis order `[lon, lat]`). Records can be plain dicts or
attribute objects such as the Pydantic models in `proximity.domain.models`.

Missing location is not an error: it is reported as `None` all the way up.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def get_field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def round_km(value: float) -> float:
    """Round a distance to 2 decimals, halves up."""
    # Half-up rounding (0.125 -> 0.13); builtin round() would round half to even.
    return math.floor(value * 100 + 0.5) / 100


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def great_circle_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Unrounded Haversine distance in kilometers."""
    dlat = to_radians(lat2 - lat1)
    dlon = to_radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(to_radians(lat1)) * math.cos(to_radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers between two points, rounded to 2 decimals."""
    return round_km(great_circle_km(lat1, lon1, lat2, lon2))


def _geojson_pair(point: Any) -> GeoPoint | None:
    coords = get_field(point, "coordinates")
    if not coords:
        return None
    # Only the first two members matter; a third one (altitude) is ignored.
    lon = coords[0]
    lat = coords[1] if len(coords) > 1 else None
    if lat is None or lon is None:
        return None
    return GeoPoint(lat=lat, lon=lon)


def extract_coordinates(entity: Any) -> GeoPoint | None:
    """Return the entity's location, or None when it has none.

    Flat `latitude`/`longitude` fields win over the GeoJSON `coordinates` point.
    """
    lat = get_field(entity, "latitude")
    lon = get_field(entity, "longitude")
    if lat is not None and lon is not None:
        return GeoPoint(lat=lat, lon=lon)
    return _geojson_pair(get_field(entity, "coordinates"))


def distance_between(origin: Any, target: Any) -> float | None:
    """Distance in km between two location records; None if either has no location."""
    a = extract_coordinates(origin)
    if a is None:
        return None
    b = extract_coordinates(target)
    if b is None:
        return None
    return distance_km(a.lat, a.lon, b.lat, b.lon)


def distance_geojson(a: Any, b: Any) -> float | None:
    """Distance in km between two GeoJSON Points; None if either is missing."""
    if not a or not b:
        return None
    pa = _geojson_pair(a)
    pb = _geojson_pair(b)
    if pa is None or pb is None:
        return None
    return distance_km(pa.lat, pa.lon, pb.lat, pb.lon)
