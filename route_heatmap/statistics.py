"""Statistics calculation for synthetic route networks."""

from math import floor, pi, sin, sqrt
from typing import Any, Dict, List, Optional, Sequence

from .constants import (
    HUB_RANK_MAX,
    HUB_RANK_MIN,
    HUB_RANK_PER_SQRT_ROUTE,
    HUB_SCORE_DEGREE_WEIGHT,
    HUB_SCORE_TRAFFIC_WEIGHT,
    KM_TO_NAUTICAL_MILES,
    STATS_LOOKBACK_SECONDS,
    TRAFFIC_MIN,
)
from .geometry import bezier_point, clamp
from .input_validation import validate_airport_coordinates
from .types import (
    AirportHub,
    CountryFlightStats,
    NetworkStatistics,
    RouteData,
    RouteInfo,
)
from .validation import airport_lat_lon, is_valid_airport

__all__ = [
    "index_routes_by_country",
    "compute_country_flights_at_time",
    "get_country_flight_stats",
    "get_route_info",
    "rank_airport_hubs",
    "calculate_network_statistics",
]


def index_routes_by_country(routes: Sequence[RouteData]) -> Dict[str, List[int]]:
    """
    Group route ids by the ISO-3 codes of their endpoints.

    A domestic route (same code at both ends) is listed once; routes
    without country codes are not listed at all.
    """
    by_country: Dict[str, List[int]] = {}
    for route in routes:
        iso_a = route.get("iso_a3") or ""
        iso_b = route.get("iso_b3") or ""
        if iso_a:
            by_country.setdefault(iso_a, []).append(route["id"])
        if iso_b and iso_b != iso_a:
            by_country.setdefault(iso_b, []).append(route["id"])
    return by_country


def _check_airports(airports: Sequence[Any]) -> None:
    for index, airport in enumerate(airports):
        validate_airport_coordinates(airport, f" (airport {index})")


def _route_by_id(routes: Sequence[RouteData], route_id: Any) -> Optional[RouteData]:
    """Routes are numbered by position, so the id doubles as the index."""
    if isinstance(route_id, bool) or not isinstance(route_id, int):
        return None
    if 0 <= route_id < len(routes) and routes[route_id]["id"] == route_id:
        return routes[route_id]
    for route in routes:
        if route["id"] == route_id:
            return route
    return None


def compute_country_flights_at_time(
    routes: Sequence[RouteData], route_ids: Sequence[int], time_seconds: float
) -> int:
    """
    Synthetic number of planes in the air over a set of routes.

    Smooth in time: each route's activity is a blend of two slow waves and
    a per-route wobble, scaled by its plane tier and (mildly) its traffic.

    Args:
        routes: All routes of the network
        route_ids: Ids of the routes to count; unknown ids are ignored
        time_seconds: Point in time (any epoch)

    Returns:
        Non-negative rounded plane count
    """
    total = 0.0
    for route_id in route_ids:
        route = _route_by_id(routes, route_id)
        if route is None:
            continue

        seed = route["seed"]
        w1 = 0.6 + 0.4 * sin(time_seconds * 0.019 + seed * 11.7)
        w2 = 0.65 + 0.35 * sin(time_seconds * 0.007 + route["phase"] * pi * 2 + seed * 3.9)
        w3 = 0.75 + 0.25 * sin(time_seconds * 0.003 + route["id"] * 0.8)
        activity = clamp(w1 * 0.46 + w2 * 0.38 + w3 * 0.16, 0.18, 1.15)

        traffic_boost = clamp(0.85 + (route["traffic"] - TRAFFIC_MIN) * 0.25, 0.82, 1.05)
        total += route["traffic_count"] * activity * traffic_boost

    # Half rounds up, like the display layer
    return max(0, int(floor(total + 0.5)))


def get_country_flight_stats(
    routes: Sequence[RouteData],
    iso3: Optional[str],
    time_seconds: float,
    by_country: Optional[Dict[str, List[int]]] = None,
) -> CountryFlightStats:
    """
    Current and recent plane counts for one country.

    Args:
        routes: All routes of the network
        iso3: ISO-3 country code (surrounding whitespace ignored)
        time_seconds: Point in time for "now"
        by_country: Precomputed index_routes_by_country result; built on
            the fly if None

    Returns:
        Dict with now, ten_min_ago and the number of routes touching the
        country. Unknown or empty codes give all zeros.
    """
    if by_country is None:
        by_country = index_routes_by_country(routes)

    key = (iso3 or "").strip()
    route_ids = by_country.get(key, []) if key else []

    return {
        "now": compute_country_flights_at_time(routes, route_ids, time_seconds),
        "ten_min_ago": compute_country_flights_at_time(
            routes, route_ids, time_seconds - STATS_LOOKBACK_SECONDS
        ),
        "routes": len(route_ids),
    }


def get_route_info(routes: Sequence[RouteData], route_id: Any) -> Optional[RouteInfo]:
    """
    Summary of a single route for tooltips and selection panels.

    The midpoint is the arc's Bezier point at t = 0.5, which sits above the
    globe surface like the rendered arc does.

    Returns:
        RouteInfo dict, or None for unknown ids
    """
    route = _route_by_id(routes, route_id)
    if route is None:
        return None

    midpoint = bezier_point(route["p0"], route["p1"], route["p2"], 0.5)

    return {
        "id": route["id"],
        "from_name": route["from_name"],
        "to_name": route["to_name"],
        "from_lat": route["from_lat"],
        "from_lon": route["from_lon"],
        "to_lat": route["to_lat"],
        "to_lon": route["to_lon"],
        "distance_km": route["distance_km"],
        "traffic": route["traffic"],
        "traffic_count": route["traffic_count"],
        "dir": route["dir"],
        "midpoint": midpoint,
        "iso_a3": route["iso_a3"],
        "iso_b3": route["iso_b3"],
    }


def rank_airport_hubs(
    airports: Sequence[Any],
    routes: Sequence[RouteData],
    limit: Optional[int] = None,
    strict: bool = False,
) -> List[AirportHub]:
    """
    Rank airports by how hub-like they are in the route network.

    Score = 0.62 * degree / max_degree + 0.38 * traffic / max_traffic,
    where an airport's traffic is the sum of traffic_count * traffic over
    its routes. Airports without routes are not ranked.

    Args:
        airports: The valid airports returned alongside the routes
            (from_index / to_index point into this list)
        routes: Routes from build_routes
        limit: Number of hubs to return; defaults to
            min(140, max(40, floor(sqrt(len(routes)) * 8)))
        strict: Raise on invalid airports instead of skipping them

    Returns:
        List of AirportHub dicts, best first

    Raises:
        InvalidCoordinateError: In strict mode, if any airport is invalid
    """
    if strict:
        _check_airports(airports)

    degree = [0] * len(airports)
    traffic = [0.0] * len(airports)
    for route in routes:
        load = route["traffic_count"] * route["traffic"]
        for index in (route["from_index"], route["to_index"]):
            if 0 <= index < len(airports):
                degree[index] += 1
                traffic[index] += load

    max_degree = max([1] + degree)
    max_traffic = max([1e-6] + traffic)

    scored = []
    for index, airport in enumerate(airports):
        if degree[index] <= 0 or not is_valid_airport(airport):
            continue
        deg01 = clamp(degree[index] / max_degree, 0.0, 1.0)
        traf01 = clamp(traffic[index] / max_traffic, 0.0, 1.0)
        lat, lon = airport_lat_lon(airport)
        scored.append({
            "index": index,
            "score": deg01 * HUB_SCORE_DEGREE_WEIGHT + traf01 * HUB_SCORE_TRAFFIC_WEIGHT,
            "degree": degree[index],
            "traffic": traffic[index],
            "latitude": lat,
            "longitude": lon,
            "name": airport.get("name"),
        })

    scored.sort(key=lambda hub: hub["score"], reverse=True)

    if limit is None:
        limit = min(HUB_RANK_MAX, max(HUB_RANK_MIN, int(floor(sqrt(len(routes)) * HUB_RANK_PER_SQRT_ROUTE))))

    return scored[:limit]


def calculate_network_statistics(
    airports: Sequence[Any], routes: Sequence[RouteData], strict: bool = False
) -> NetworkStatistics:
    """
    Calculate summary statistics for a generated network.

    Args:
        airports: Airport dicts (invalid entries are not counted)
        routes: Routes from build_routes
        strict: Raise on invalid airports instead of not counting them

    Returns:
        Dictionary of statistics

    Raises:
        InvalidCoordinateError: In strict mode, if any airport is invalid
    """
    if strict:
        _check_airports(airports)
    valid = [airport for airport in airports if is_valid_airport(airport)]

    stats = {
        "num_airports": len(valid),
        "num_routes": len(routes),
        "num_countries": 0,
        "total_distance_km": 0.0,
        "total_distance_nm": 0.0,
        "longest_route_km": 0.0,
        "longest_route_nm": 0.0,
        "total_planes": 0,
        "south_share": 0.0,
    }

    if valid:
        south = sum(1 for airport in valid if airport_lat_lon(airport)[0] < 0)
        stats["south_share"] = south / len(valid)

    if not routes:
        return stats

    countries = set()
    for route in routes:
        distance = route["distance_km"]
        stats["total_distance_km"] += distance
        stats["longest_route_km"] = max(stats["longest_route_km"], distance)
        stats["total_planes"] += route["traffic_count"]
        for code in (route.get("iso_a3"), route.get("iso_b3")):
            if code:
                countries.add(code)

    stats["num_countries"] = len(countries)
    stats["total_distance_nm"] = stats["total_distance_km"] * KM_TO_NAUTICAL_MILES
    stats["longest_route_nm"] = stats["longest_route_km"] * KM_TO_NAUTICAL_MILES

    return stats
