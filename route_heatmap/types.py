"""Type definitions for the route heatmap generator.

This module provides TypedDict definitions for the dict-shaped data passed
between the synthesis stages. Inputs arrive as already-parsed GeoJSON and
airport records, so keeping plain dicts avoids a conversion layer while the
TypedDicts document the expected keys.

Example:
    >>> from route_heatmap.types import AirportData
    >>> airport: AirportData = {
    ...     "name": "EDDF Frankfurt",
    ...     "latitude": 50.0379,
    ...     "longitude": 8.5622,
    ... }
"""

from typing import Any, Dict, List, Optional, Tuple, TypedDict
from typing_extensions import NotRequired

Vector3 = Tuple[float, float, float]


class Geometry(TypedDict):
    """GeoJSON geometry; only Polygon and MultiPolygon are indexed."""

    type: str
    coordinates: List[Any]  # rings of [lon, lat] pairs


class GeoFeature(TypedDict):
    """GeoJSON feature with a country boundary."""

    geometry: Optional[Geometry]
    properties: NotRequired[Dict[str, Any]]


class FeatureCollection(TypedDict):
    """GeoJSON feature collection."""

    features: List[GeoFeature]


class AirportData(TypedDict):
    """Airport location, real or synthetic."""

    latitude: float
    longitude: float
    name: NotRequired[Optional[str]]


class RouteData(TypedDict):
    """A synthetic route with arc geometry and animation parameters."""

    id: int
    from_index: int
    to_index: int
    p0: Vector3  # start point
    p1: Vector3  # arc control point
    p2: Vector3  # end point
    arc_boost: float
    speed: float
    phase: float
    seed: float
    size: float
    dir: int  # +1 animates p0 -> p2, -1 the other way
    traffic: float
    traffic_count: int
    hub: float
    distance_km: float
    from_name: str
    to_name: str
    from_lat: float
    from_lon: float
    to_lat: float
    to_lon: float
    iso_a3: str
    iso_b3: str


class RouteNetwork(TypedDict):
    """Result of route synthesis."""

    routes: List[RouteData]
    airports: NotRequired[List[AirportData]]  # valid airports routes index into


class RouteInfo(TypedDict):
    """Summary of a single route for tooltips and panels."""

    id: int
    from_name: str
    to_name: str
    from_lat: float
    from_lon: float
    to_lat: float
    to_lon: float
    distance_km: float
    traffic: float
    traffic_count: int
    dir: int
    midpoint: Vector3
    iso_a3: str
    iso_b3: str


class CountryFlightStats(TypedDict):
    """Synthetic live-traffic figures for a country."""

    now: int
    ten_min_ago: int
    routes: int


class AirportHub(TypedDict):
    """Airport ranked by route degree and traffic."""

    index: int
    score: float
    degree: int
    traffic: float
    latitude: float
    longitude: float
    name: NotRequired[Optional[str]]


class NetworkStatistics(TypedDict):
    """Summary statistics of a synthesized network."""

    num_airports: int
    num_routes: int
    num_countries: int
    total_distance_km: float
    total_distance_nm: float
    longest_route_km: float
    longest_route_nm: float
    total_planes: int
    south_share: float


__all__ = [
    "Vector3",
    "Geometry",
    "GeoFeature",
    "FeatureCollection",
    "AirportData",
    "RouteData",
    "RouteNetwork",
    "RouteInfo",
    "CountryFlightStats",
    "AirportHub",
    "NetworkStatistics",
]
