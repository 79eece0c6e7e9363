"""
Route Heatmap Generator

Synthesizes a plausible global air-route network over geographic point
locations and derives a smoothed route density heatmap for rendering.
"""

__version__ = "1.0.0"

# Export key functions
from .geometry import haversine_distance, lat_lon_to_vector, vector_to_lat_lon
from .country_lookup import (
    CountryIndex,
    CountryIndexCache,
    build_country_index,
    get_country_index,
    find_country_feature,
    get_iso3_from_feature,
)
from .synthetic_airports import inflate_airports
from .routes import build_routes, pick_route_indices
from .heatmap import DensityRaster, build_heatmap, build_heatmap_async
from .statistics import (
    calculate_network_statistics,
    get_country_flight_stats,
    get_route_info,
    index_routes_by_country,
    rank_airport_hubs,
)
from .pipeline import generate_network
from .config_validator import validate_options
from .validation import validate_coordinates
from .exceptions import (
    RouteHeatmapError,
    ConfigurationError,
    InvalidCoordinateError,
    HeatmapBuildError,
)

__all__ = [
    # Geometry
    "haversine_distance",
    "lat_lon_to_vector",
    "vector_to_lat_lon",
    # Country lookup
    "CountryIndex",
    "CountryIndexCache",
    "build_country_index",
    "get_country_index",
    "find_country_feature",
    "get_iso3_from_feature",
    # Synthesis
    "inflate_airports",
    "build_routes",
    "pick_route_indices",
    # Heatmap
    "DensityRaster",
    "build_heatmap",
    "build_heatmap_async",
    # Statistics
    "calculate_network_statistics",
    "get_country_flight_stats",
    "get_route_info",
    "index_routes_by_country",
    "rank_airport_hubs",
    # Pipeline
    "generate_network",
    # Validation
    "validate_options",
    "validate_coordinates",
    # Exceptions
    "RouteHeatmapError",
    "ConfigurationError",
    "InvalidCoordinateError",
    "HeatmapBuildError",
]
