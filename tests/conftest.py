"""Pytest configuration and shared fixtures for route-heatmap tests."""

import random

import pytest

from route_heatmap.country_lookup import CountryIndexCache, default_index_cache


def make_polygon_feature(ring, iso_a3="", name="", holes=()):
    """Build a Polygon feature from an outer ring of [lon, lat] pairs."""
    return {
        "type": "Feature",
        "properties": {"ISO_A3": iso_a3, "NAME": name},
        "geometry": {"type": "Polygon", "coordinates": [list(ring)] + [list(h) for h in holes]},
    }


def square_ring(min_lon, min_lat, max_lon, max_lat):
    """Closed axis-aligned ring of [lon, lat] pairs."""
    return [
        [min_lon, min_lat],
        [max_lon, min_lat],
        [max_lon, max_lat],
        [min_lon, max_lat],
        [min_lon, min_lat],
    ]


@pytest.fixture
def square_country():
    """A 20x20 degree country between lon 0..20 and lat 0..20."""
    return make_polygon_feature(square_ring(0, 0, 20, 20), iso_a3="SQR", name="Squareland")


@pytest.fixture
def holed_multipolygon_country():
    """Two islands; the first one has a lake in the middle."""
    return {
        "type": "Feature",
        "properties": {"ISO_A3": "-99", "ADM0_A3": "ISL", "NAME": "Islands"},
        "geometry": {
            "type": "MultiPolygon",
            "coordinates": [
                [square_ring(-60, -30, -40, -10), square_ring(-55, -25, -45, -15)],
                [square_ring(100, 40, 110, 50)],
            ],
        },
    }


@pytest.fixture
def countries(square_country, holed_multipolygon_country):
    """Feature collection with both test countries."""
    return {
        "type": "FeatureCollection",
        "features": [square_country, holed_multipolygon_country],
    }


@pytest.fixture
def world_airports():
    """Real-looking airports spread over both hemispheres."""
    return [
        {"name": "EDDF Frankfurt", "latitude": 50.0379, "longitude": 8.5622},
        {"name": "KJFK New York", "latitude": 40.6413, "longitude": -73.7781},
        {"name": "RJTT Tokyo", "latitude": 35.5494, "longitude": 139.7798},
        {"name": "YSSY Sydney", "latitude": -33.9399, "longitude": 151.1753},
        {"name": "SBGR Sao Paulo", "latitude": -23.4356, "longitude": -46.4731},
        {"name": "FAOR Johannesburg", "latitude": -26.1337, "longitude": 28.2420},
        {"name": "OMDB Dubai", "latitude": 25.2532, "longitude": 55.3657},
        {"name": "SCEL Santiago", "latitude": -33.3930, "longitude": -70.7858},
    ]


@pytest.fixture
def spread_airports():
    """Airports far apart from each other (no pair is closer than ~30 degrees)."""
    return [
        {"name": "A", "latitude": 0.0, "longitude": 0.0},
        {"name": "B", "latitude": 0.0, "longitude": 90.0},
        {"name": "C", "latitude": 0.0, "longitude": 180.0},
        {"name": "D", "latitude": 0.0, "longitude": -90.0},
        {"name": "E", "latitude": 60.0, "longitude": 45.0},
        {"name": "F", "latitude": -60.0, "longitude": -135.0},
        {"name": "G", "latitude": 45.0, "longitude": -120.0},
        {"name": "H", "latitude": -45.0, "longitude": 120.0},
    ]


@pytest.fixture
def seeded_rng():
    """Deterministic generator for route synthesis."""
    return random.Random(1234)


@pytest.fixture
def index_cache():
    """A fresh, test-local country index cache."""
    return CountryIndexCache()


@pytest.fixture(autouse=True)
def reset_default_index_cache():
    """Reset the module-level index cache before and after each test.

    This ensures test isolation by preventing an index built in one test
    from being returned in another.
    """
    default_index_cache.clear()

    yield

    default_index_cache.clear()


@pytest.fixture
def grid_aligned_land():
    """One 36x24 degree country whose edges fall on land-cache cell boundaries."""
    return {
        "type": "FeatureCollection",
        "features": [make_polygon_feature(square_ring(0, 0, 36, 24), iso_a3="LND", name="Landia")],
    }


@pytest.fixture
def inland_airports():
    """Real airports inside grid_aligned_land plus a few in the ocean."""
    return [
        {"name": "IN1", "latitude": 4.0, "longitude": 5.0},
        {"name": "IN2", "latitude": 20.0, "longitude": 31.0},
        {"name": "IN3", "latitude": 12.0, "longitude": 18.0},
        {"name": "SEA1", "latitude": -20.0, "longitude": 10.0},
        {"name": "SEA2", "latitude": 40.0, "longitude": -30.0},
    ]
