"""End-to-end network generation.

Chains the components in the order a globe layer needs them:

1. Validate options (fail fast on caller mistakes)
2. Look up or build the country membership index (cached per collection)
3. Inflate the real airport list into a dense synthetic set
4. Build the route network over the synthetic set
5. Build the density heatmap, on a worker by default
6. Derive per-country route lists and summary statistics

Example:
    >>> network = generate_network(countries, airports, use_worker=False)
    >>> network["heatmap"].ready
    True
"""

from concurrent.futures import Executor
from typing import Any, Dict, Optional, Sequence

from .config_validator import validate_options
from .constants import (
    DEFAULT_ROUTE_COUNT,
    DEFAULT_SPACING_DEG,
    DEFAULT_TARGET_COUNT,
    HEATMAP_HEIGHT,
    HEATMAP_WIDTH,
)
from .country_lookup import CountryIndexCache, get_country_index
from .decorators import timed
from .heatmap import build_heatmap, build_heatmap_async
from .logger import logger
from .routes import build_routes
from .statistics import calculate_network_statistics, index_routes_by_country
from .synthetic_airports import inflate_airports

__all__ = ["generate_network"]


@timed
def generate_network(
    countries: Any,
    airports: Sequence[Any],
    target_count: int = DEFAULT_TARGET_COUNT,
    min_spacing_deg: float = DEFAULT_SPACING_DEG,
    route_count: int = DEFAULT_ROUTE_COUNT,
    heatmap_width: int = HEATMAP_WIDTH,
    heatmap_height: int = HEATMAP_HEIGHT,
    rng: Optional[Any] = None,
    use_worker: bool = True,
    executor: Optional[Executor] = None,
    index_cache: Optional[CountryIndexCache] = None,
) -> Dict[str, Any]:
    """
    Generate airports, routes and heatmap for a globe layer.

    Args:
        countries: Parsed GeoJSON feature collection of country boundaries
            (None disables land constraints and country codes)
        airports: Parsed real airport dicts
        target_count: Desired number of synthesized airports
        min_spacing_deg: Minimum spacing between synthesized airports
        route_count: Desired number of routes
        heatmap_width: Heatmap raster width in cells
        heatmap_height: Heatmap raster height in cells
        rng: Generator for route synthesis; unseeded if None
        use_worker: Build the heatmap on a background executor
        executor: Executor for the heatmap worker (private pool if None)
        index_cache: Cache for country indexes (module default if None)

    Returns:
        Dict with index, airports, routes, heatmap, routes_by_country and
        statistics. When use_worker is True the heatmap may still be a
        placeholder; call heatmap.wait() before reading its values.

    Raises:
        ConfigurationError: If any option is invalid
    """
    validate_options(target_count, min_spacing_deg, route_count, heatmap_width, heatmap_height)

    index = get_country_index(countries, index_cache) if countries is not None else None

    synthetic = inflate_airports(
        airports,
        country_index=index,
        target_count=target_count,
        min_spacing_deg=min_spacing_deg,
    )

    network = build_routes(synthetic, count=route_count, country_index=index, rng=rng)
    routes = network["routes"]

    if use_worker:
        heatmap = build_heatmap_async(routes, heatmap_width, heatmap_height, executor=executor)
    else:
        heatmap = build_heatmap(routes, heatmap_width, heatmap_height)

    statistics = calculate_network_statistics(synthetic, routes, strict=True)
    logger.info(
        f"Generated {statistics['num_airports']} airports and "
        f"{statistics['num_routes']} routes across {statistics['num_countries']} countries"
    )

    return {
        "index": index,
        "airports": network["airports"],
        "routes": routes,
        "heatmap": heatmap,
        "routes_by_country": index_routes_by_country(routes),
        "statistics": statistics,
    }
