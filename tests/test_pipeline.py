"""Tests for pipeline module."""

import random
from concurrent.futures import ThreadPoolExecutor

import pytest
from route_heatmap import generate_network
from route_heatmap.country_lookup import CountryIndex, CountryIndexCache
from route_heatmap.exceptions import ConfigurationError

SMALL = {
    "target_count": 150,
    "min_spacing_deg": 2.0,
    "route_count": 20,
    "heatmap_width": 64,
    "heatmap_height": 32,
}


class TestGenerateNetwork:
    """Tests for generate_network function."""

    def test_without_countries(self, world_airports):
        """Test a full run with no land constraints."""
        network = generate_network(None, world_airports, rng=random.Random(3), use_worker=False, **SMALL)
        assert network["index"] is None
        assert 0 < len(network["airports"]) <= 150
        assert 0 < len(network["routes"]) <= 20
        assert network["routes_by_country"] == {}

        heatmap = network["heatmap"]
        assert heatmap.ready is True
        assert heatmap.source == "sync"
        assert heatmap.values.shape == (32, 64)

        stats = network["statistics"]
        assert stats["num_airports"] == len(network["airports"])
        assert stats["num_routes"] == len(network["routes"])

    def test_with_countries(self, countries, world_airports, index_cache):
        """Test that the index is built, cached and used for country codes."""
        network = generate_network(
            countries, world_airports, rng=random.Random(3), use_worker=False, index_cache=index_cache, **SMALL
        )
        assert isinstance(network["index"], CountryIndex)
        assert countries in index_cache
        for iso3, route_ids in network["routes_by_country"].items():
            assert iso3 in ("SQR", "ISL")
            for route_id in route_ids:
                route = network["routes"][route_id]
                assert iso3 in (route["iso_a3"], route["iso_b3"])

    def test_route_endpoints_on_land(self, grid_aligned_land, inland_airports):
        """Test that every generated route starts and ends on land."""
        network = generate_network(
            grid_aligned_land, inland_airports, rng=random.Random(4), use_worker=False,
            target_count=120, min_spacing_deg=1.5, route_count=40, heatmap_width=64, heatmap_height=32,
        )
        index = network["index"]
        assert len(network["routes"]) > 0
        for route in network["routes"]:
            assert index.is_land(route["from_lat"], route["from_lon"])
            assert index.is_land(route["to_lat"], route["to_lon"])
        assert network["routes_by_country"] == {"LND": list(range(len(network["routes"])))}

    def test_index_reused(self, countries, world_airports):
        """Test that a second run reuses the cached index."""
        cache = CountryIndexCache()
        first = generate_network(countries, world_airports, use_worker=False, index_cache=cache, **SMALL)
        second = generate_network(countries, world_airports, use_worker=False, index_cache=cache, **SMALL)
        assert first["index"] is second["index"]
        assert len(cache) == 1

    def test_airports_deterministic(self, world_airports):
        """Test that airport synthesis does not depend on the route generator."""
        first = generate_network(None, world_airports, rng=random.Random(1), use_worker=False, **SMALL)
        second = generate_network(None, world_airports, rng=random.Random(2), use_worker=False, **SMALL)
        assert first["airports"] == second["airports"]

    def test_seeded_routes_reproducible(self, world_airports):
        """Test that a seeded generator reproduces the routes."""
        first = generate_network(None, world_airports, rng=random.Random(8), use_worker=False, **SMALL)
        second = generate_network(None, world_airports, rng=random.Random(8), use_worker=False, **SMALL)
        assert first["routes"] == second["routes"]

    def test_worker_heatmap(self, world_airports):
        """Test the heatmap built on a caller supplied executor."""
        with ThreadPoolExecutor(max_workers=1) as executor:
            network = generate_network(None, world_airports, rng=random.Random(3), executor=executor, **SMALL)
            heatmap = network["heatmap"]
            assert heatmap.wait(timeout=30) is True
        assert heatmap.source == "worker"
        assert heatmap.values.max() == pytest.approx(1.0)

    def test_default_worker(self, world_airports):
        """Test the heatmap built on the private worker."""
        network = generate_network(None, world_airports, rng=random.Random(3), **SMALL)
        assert network["heatmap"].wait(timeout=30) is True

    def test_empty_airports(self):
        """Test that no real airports give an empty network and a blank heatmap."""
        network = generate_network(None, [], rng=random.Random(3), use_worker=False, **SMALL)
        assert network["airports"] == []
        assert network["routes"] == []
        assert not network["heatmap"].values.any()

    @pytest.mark.parametrize(
        "override",
        [
            {"route_count": -1},
            {"min_spacing_deg": float("nan")},
            {"heatmap_width": 0},
            {"heatmap_height": 2.5},
            {"target_count": "many"},
        ],
    )
    def test_invalid_options(self, world_airports, override):
        """Test that invalid options raise before any work is done."""
        options = dict(SMALL, **override)
        with pytest.raises(ConfigurationError, match="Configuration validation failed"):
            generate_network(None, world_airports, use_worker=False, **options)

    def test_logs_summary(self, world_airports, caplog):
        """Test that the summary is logged."""
        generate_network(None, world_airports, rng=random.Random(3), use_worker=False, **SMALL)
        assert "Generated" in caplog.text
