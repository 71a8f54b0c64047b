from __future__ import annotations

import pytest

from proximity.core.geo import GeoPoint, extract_coordinates, great_circle_km
from proximity.core.spatial_index import SpatialGridIndex


POINTS = [
    {"id": "center", "latitude": 9.03, "longitude": 38.74},
    {"id": "1km", "latitude": 9.039, "longitude": 38.74},
    {"id": "10km", "coordinates": {"type": "Point", "coordinates": [38.74, 9.12]}},
    {"id": "unknown"},
]


def _index(cell_size_km: float = 2.0) -> SpatialGridIndex[dict]:
    return SpatialGridIndex(POINTS, get_point=extract_coordinates, cell_size_km=cell_size_km)


def test_unlocated_items_are_skipped():
    assert len(_index()) == 3


@pytest.mark.parametrize("cell_size_km", [0.5, 2.0, 25.0])
def test_query_within_is_sorted_and_bounded(cell_size_km):
    hits = _index(cell_size_km).query_within(GeoPoint(lat=9.03, lon=38.74), 5)
    assert [h[0]["id"] for h in hits] == ["center", "1km"]
    assert hits[0][1] == 0.0
    assert 0.9 < hits[1][1] < 1.1


def test_query_within_large_radius():
    hits = _index().query_within(GeoPoint(lat=9.03, lon=38.74), 50)
    assert [h[0]["id"] for h in hits] == ["center", "1km", "10km"]


def test_nearest():
    index = _index()
    item, d = index.nearest(GeoPoint(lat=9.11, lon=38.74), 20)
    assert item["id"] == "10km"
    assert d < 2
    assert index.nearest(GeoPoint(lat=12.0, lon=40.0), 5) is None
    assert index.nearest(GeoPoint(lat=9.03, lon=38.74), 0) is None


def test_invalid_cell_size():
    with pytest.raises(ValueError, match="cell_size_km"):
        _index(cell_size_km=0)


def test_empty_index():
    index = SpatialGridIndex([], get_point=extract_coordinates)
    assert len(index) == 0
    assert index.query_within(GeoPoint(lat=0, lon=0), 10) == []


def test_items_far_poleward_of_reference_latitude_are_found():
    # lat0 defaults to the mean latitude (35); at 70N a degree of longitude is much shorter.
    items = [{"id": "equator", "latitude": 0.0, "longitude": 0.0}, {"id": "arctic", "latitude": 70.0, "longitude": 10.1}]
    index = SpatialGridIndex(items, get_point=extract_coordinates, cell_size_km=2.0)
    hits = index.query_within(GeoPoint(lat=70.0, lon=10.0), 5)
    assert [h[0]["id"] for h in hits] == ["arctic"]
    assert 3.7 < hits[0][1] < 3.9
    assert index.nearest(GeoPoint(lat=70.0, lon=10.0), 5)[0]["id"] == "arctic"


@pytest.mark.parametrize("origin_lat", [-60.0, -30.0, 0.0, 30.0, 60.0, 75.0])
def test_query_within_matches_brute_force_across_latitudes(origin_lat):
    items = [
        {"id": f"{dlat}:{dlon}", "latitude": origin_lat + dlat, "longitude": 20.0 + dlon}
        for dlat in (-0.2, -0.05, 0.0, 0.05, 0.2)
        for dlon in (-0.5, -0.1, 0.0, 0.1, 0.5)
    ]
    # Anchor the reference latitude far away from the queried band.
    index = SpatialGridIndex(items, get_point=extract_coordinates, cell_size_km=1.0, lat0_deg=0.0 if origin_lat else 50.0)
    origin = GeoPoint(lat=origin_lat, lon=20.0)
    expected = sorted(
        i["id"] for i in items if great_circle_km(origin.lat, origin.lon, i["latitude"], i["longitude"]) <= 15
    )
    assert sorted(h[0]["id"] for h in index.query_within(origin, 15)) == expected


def test_query_across_antimeridian():
    items = [{"id": "east", "latitude": 0.0, "longitude": 179.99}, {"id": "west", "latitude": 0.0, "longitude": -179.99}]
    index = SpatialGridIndex(items, get_point=extract_coordinates)
    hits = index.query_within(GeoPoint(lat=0.0, lon=179.99), 5)
    assert sorted(h[0]["id"] for h in hits) == ["east", "west"]


def test_radius_uses_unrounded_distance():
    items = [{"id": "inside", "latitude": 0.0, "longitude": 0.0449}, {"id": "edge", "latitude": 0.0, "longitude": 0.045002}]
    index = SpatialGridIndex(items, get_point=extract_coordinates)
    hits = index.query_within(GeoPoint(lat=0.0, lon=0.0), 5)
    # "edge" is 5.004 km away, which would round to 5.0.
    assert [h[0]["id"] for h in hits] == ["inside"]
