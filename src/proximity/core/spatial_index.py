"""
Lightweight spatial indexing (grid bucket) for located records.

Used for radius queries ("providers within N km") without scanning the whole
provider list. Records without a location are not indexed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from proximity.core.geo import GeoPoint, great_circle_km, round_km

T = TypeVar("T")

_KM_PER_DEG_LAT = 110.54
_KM_PER_DEG_LON_EQUATOR = 111.32


def _to_xy_km(lat: float, lon: float, *, lat0_deg: float) -> tuple[float, float]:
    # Equirectangular projection around a reference latitude (city-scale accuracy).
    lat0 = math.radians(float(lat0_deg))
    x = float(lon) * _KM_PER_DEG_LON_EQUATOR * math.cos(lat0)
    y = float(lat) * _KM_PER_DEG_LAT
    return x, y


@dataclass(frozen=True)
class _Entry(Generic[T]):
    item: T
    point: GeoPoint
    x_km: float
    y_km: float


class SpatialGridIndex(Generic[T]):
    def __init__(
        self,
        items: list[T],
        *,
        get_point: Callable[[T], GeoPoint | None],
        cell_size_km: float = 2.0,
        lat0_deg: float | None = None,
    ):
        if float(cell_size_km) <= 0:
            raise ValueError("cell_size_km must be > 0")
        self._cell_size_km = float(cell_size_km)
        self._cells: dict[tuple[int, int], list[_Entry[T]]] = {}
        self._entries: list[_Entry[T]] = []

        located: list[tuple[T, GeoPoint]] = []
        for it in items:
            point = get_point(it)
            if point is None:
                continue
            located.append((it, GeoPoint(lat=float(point.lat), lon=float(point.lon))))

        if lat0_deg is None:
            lat0_deg = sum(p.lat for _, p in located) / len(located) if located else 0.0
        self._lat0_deg = float(lat0_deg)

        for it, point in located:
            x_km, y_km = _to_xy_km(point.lat, point.lon, lat0_deg=self._lat0_deg)
            e = _Entry(item=it, point=point, x_km=x_km, y_km=y_km)
            self._entries.append(e)
            self._cells.setdefault(self._cell_key_xy(x_km, y_km), []).append(e)

    def __len__(self) -> int:
        return len(self._entries)

    def _cell_key_xy(self, x_km: float, y_km: float) -> tuple[int, int]:
        return (int(math.floor(x_km / self._cell_size_km)), int(math.floor(y_km / self._cell_size_km)))

    def _candidates(self, origin: GeoPoint, radius_km: float, slack: float) -> list[_Entry[T]]:
        reach_km = radius_km * slack
        # Latitude band any match must fall in, and the narrowest parallel inside it.
        dlat_deg = reach_km / _KM_PER_DEG_LAT
        max_abs_lat = abs(origin.lat) + dlat_deg
        if max_abs_lat >= 89.0:
            return list(self._entries)
        dlon_deg = reach_km / (_KM_PER_DEG_LON_EQUATOR * math.cos(math.radians(max_abs_lat)))
        if dlon_deg >= 45.0 or abs(origin.lon) + dlon_deg >= 180.0:
            # Continental reach, or the projection would need to wrap at the antimeridian.
            return list(self._entries)

        x0, y0 = _to_xy_km(origin.lat, origin.lon, lat0_deg=self._lat0_deg)
        cx, cy = self._cell_key_xy(x0, y0)
        # East-west reach in projected km; wider than reach_km when the band lies poleward of lat0.
        reach_x_km = dlon_deg * _KM_PER_DEG_LON_EQUATOR * math.cos(math.radians(self._lat0_deg))
        steps_x = int(math.ceil(reach_x_km / self._cell_size_km))
        steps_y = int(math.ceil(reach_km / self._cell_size_km))

        out: list[_Entry[T]] = []
        for dx in range(-steps_x, steps_x + 1):
            for dy in range(-steps_y, steps_y + 1):
                cell = self._cells.get((cx + dx, cy + dy))
                if not cell:
                    continue
                for e in cell:
                    # Cheap bounding box filter in projected space.
                    if abs(e.x_km - x0) > reach_x_km or abs(e.y_km - y0) > reach_km:
                        continue
                    out.append(e)
        return out

    def query_within(self, origin: GeoPoint, radius_km: float) -> list[tuple[T, float]]:
        """Return `(item, distance_km)` pairs within `radius_km`, nearest first.

        The radius is compared against the unrounded distance; reported distances are rounded.
        """
        r = float(radius_km)
        if r < 0:
            return []
        out: list[tuple[T, float]] = []
        for e in self._candidates(origin, r, slack=1.15):
            d = great_circle_km(origin.lat, origin.lon, e.point.lat, e.point.lon)
            if d <= r:
                out.append((e.item, round_km(d)))
        out.sort(key=lambda pair: pair[1])
        return out

    def nearest(self, origin: GeoPoint, search_radius_km: float) -> tuple[T, float] | None:
        r = float(search_radius_km)
        if r <= 0:
            return None
        best: tuple[T, float] | None = None
        for e in self._candidates(origin, r, slack=1.25):
            d = great_circle_km(origin.lat, origin.lon, e.point.lat, e.point.lon)
            if d > r:
                continue
            if best is None or d < best[1]:
                best = (e.item, d)
        if best is None:
            return None
        return best[0], round_km(best[1])
