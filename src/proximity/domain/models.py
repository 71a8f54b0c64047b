"""
Domain models (Pydantic).

These types are the contract between the catalog, the ranking layer and the CLI:
- location-bearing records (`Seeker`, `Provider`) in either coordinate form
- guest booking input (`GuestInfo`)
- ranked output (`ProviderDistance`, `RankingResult`)

Range checks happen here, at the model boundary. The distance functions in
`proximity.core.geo` assume they receive valid coordinates.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from proximity.core.geo import extract_coordinates


class GeoJSONPoint(BaseModel):
    """A GeoJSON Point. Axis order is `[longitude, latitude]`, optionally followed by altitude."""

    type: Literal["Point"] = "Point"
    coordinates: list[float]

    @field_validator("coordinates")
    @classmethod
    def _validate_position(cls, coords: list[float]) -> list[float]:
        if len(coords) not in (2, 3):
            raise ValueError("coordinates must be [longitude, latitude] or [longitude, latitude, altitude]")
        lon, lat = coords[0], coords[1]
        if not -180 <= lon <= 180:
            raise ValueError(f"longitude {lon} out of range [-180, 180]")
        if not -90 <= lat <= 90:
            raise ValueError(f"latitude {lat} out of range [-90, 90]")
        return coords

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> "GeoJSONPoint":
        return cls(coordinates=[lon, lat])


class LocatedRecord(BaseModel):
    """Any record that may carry a location, flat or GeoJSON (or both, or neither)."""

    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    coordinates: GeoJSONPoint | None = None

    @property
    def has_location(self) -> bool:
        return extract_coordinates(self) is not None

    def with_synced_location(self) -> "LocatedRecord":
        """Return a copy with both coordinate forms filled in from whichever is known.

        The flat fields win when both are present.
        """
        point = extract_coordinates(self)
        if point is None:
            return self
        return self.model_copy(
            update={
                "latitude": point.lat,
                "longitude": point.lon,
                "coordinates": GeoJSONPoint.from_lat_lon(point.lat, point.lon),
            }
        )


class Seeker(LocatedRecord):
    """A customer looking for a service."""

    id: str | None = None
    name: str | None = None
    address: str | None = None


class Provider(LocatedRecord):
    """A service provider candidate to rank."""

    id: str
    name: str
    services: list[str] = Field(default_factory=list)
    address: str | None = None
    phone: str | None = None

    @field_validator("services")
    @classmethod
    def _normalize_services(cls, services: list[str]) -> list[str]:
        return sorted({s.strip().lower() for s in services if s and s.strip()})


class GuestInfo(BaseModel):
    """Contact details submitted with a guest booking (location arrives as form text)."""

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    latitude: str | float | None = None
    longitude: str | float | None = None


class ProviderDistance(BaseModel):
    """One ranked output item: provider + its distance from the origin (None if unknown)."""

    provider: Provider
    distance_km: float | None = Field(default=None, ge=0)


class RankingResult(BaseModel):
    """Providers ordered by proximity to the origin."""

    generated_at: datetime
    origin: Seeker
    results: list[ProviderDistance]
    meta: dict[str, Any] = Field(default_factory=dict)
