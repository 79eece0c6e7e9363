"""Synthetic route topology.

Builds a plausible airline network over a set of airports: a few well
separated hubs, long-haul links between them, medium-haul links from hubs
to anywhere and short regional hops.

Topology Construction:
1. Hub selection with farthest-point sampling on unit directions, using
   1 - dot(a, b) as the distance (0 same place, 2 antipodal)
2. Edge draws from three weighted buckets:
   - hub <-> hub (long haul, prefers large separation)
   - hub <-> any (medium haul, rejects very short hops)
   - any <-> any (regional, keeps short but not tiny separations)
   Each bucket accepts a candidate with a probability that depends on the
   separation; self edges and duplicate undirected edges are rejected
3. A relaxed fallback pass if the budget ran out before count edges

Route Derivation:
Each edge becomes a quadratic Bezier arc: the control point sits above the
normalized chord midpoint, pushed further out for longer routes (the arc
boost). Longer routes also get faster animation, bigger planes and more
traffic. Phase and seed are random; the seed also picks the direction.

Randomness:
Routes use an injectable generator (anything with a random() method). The
default is a fresh, unseeded random.Random, so the network differs between
runs; pass a seeded generator for reproducible output.
"""

import random
from math import floor, sqrt
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .constants import (
    ARC_BOOST_CHORD_SCALE,
    ARC_BOOST_MAX,
    ARC_BOOST_MIN,
    ARC_CONTROL_BASE,
    ARC_CONTROL_GAIN,
    DEFAULT_ROUTE_COUNT,
    FALLBACK_GATE,
    HUB_HUB_GATE,
    HUB_HUB_SHARE,
    HUB_SPOKE_GATE,
    HUB_SPOKE_SHARE,
    REGIONAL_GATE,
    REGIONAL_MAX_DOT,
    REGIONAL_MIN_DOT,
    ROUTE_ATTEMPTS_PER_ROUTE,
    ROUTE_FALLBACK_ATTEMPTS_PER_ROUTE,
    ROUTE_FALLBACK_MIN_ATTEMPTS,
    ROUTE_HUB_MAX,
    ROUTE_HUB_MIN,
    ROUTE_HUB_POINTS_PER_HUB,
    ROUTE_MIN_ATTEMPTS,
    ROUTE_SIZE_BASE,
    ROUTE_SIZE_GAIN,
    ROUTE_SPEED_BASE,
    ROUTE_SPEED_GAIN,
    ROUTE_SURFACE_LIFT,
    TRAFFIC_GAIN,
    TRAFFIC_MAX,
    TRAFFIC_MIN,
    TRAFFIC_SEED_JITTER,
    TRAFFIC_TIERS,
)
from .country_lookup import CountryIndex
from .decorators import timed
from .geometry import (
    chord_length,
    clamp,
    dot,
    haversine_distance,
    lat_lon_to_vector,
    normalize,
)
from .logger import logger
from .types import AirportData, RouteData, RouteNetwork, Vector3
from .validation import airport_lat_lon, is_valid_airport

__all__ = [
    "choose_hubs",
    "hub_count_for",
    "pick_route_indices",
    "derive_traffic",
    "build_routes",
]


def hub_count_for(point_count: int) -> int:
    """Number of hubs for a network over point_count airports."""
    count = min(ROUTE_HUB_MAX, max(ROUTE_HUB_MIN, point_count // ROUTE_HUB_POINTS_PER_HUB))
    return min(count, point_count)


def choose_hubs(directions: np.ndarray, hub_count: int, rng: Any) -> List[int]:
    """
    Pick hub indices with farthest-point sampling.

    Starts from a random point and repeatedly adds the point whose smallest
    distance (1 - dot) to the chosen hubs is largest. Ties go to the lowest
    index.

    Args:
        directions: Unit vectors, shape (n, 3)
        hub_count: Number of hubs to pick
        rng: Generator with a random() method

    Returns:
        List of hub indices into directions
    """
    n = len(directions)
    if n == 0 or hub_count <= 0:
        return []

    hubs = [int(rng.random() * n)]
    min_dist = 1.0 - directions @ directions[hubs[0]]

    while len(hubs) < hub_count:
        best = int(np.argmax(min_dist))
        hubs.append(best)
        min_dist = np.minimum(min_dist, 1.0 - directions @ directions[best])

    return hubs


def _gate_accept(dot_value: float, gate: Tuple[float, ...], rng: Any) -> bool:
    """Distance-dependent acceptance for long and medium haul candidates."""
    reject_above, base, gain, low, high = gate
    if dot_value > reject_above:
        return False
    accept = clamp(base + (1.0 - dot_value) * gain, low, high)
    return rng.random() <= accept


def _regional_accept(dot_value: float, rng: Any) -> bool:
    """Acceptance for short hops: close, but not on top of each other."""
    if dot_value < REGIONAL_MIN_DOT or dot_value > REGIONAL_MAX_DOT:
        return False
    base, gain, low, high = REGIONAL_GATE
    accept = clamp(base + (dot_value - REGIONAL_MIN_DOT) * gain, low, high)
    return rng.random() <= accept


def pick_route_indices(
    airports: Sequence[Any], count: int, rng: Optional[Any] = None
) -> Tuple[List[AirportData], List[Tuple[int, int]]]:
    """
    Choose the undirected edges of a synthetic route network.

    Args:
        airports: Airport dicts; invalid entries are skipped
        count: Number of edges wanted
        rng: Generator with a random() method (unseeded if None)

    Returns:
        Tuple of (valid airports, edges) where each edge is an (a, b) pair
        of indices into the valid list with a < b. There may be fewer than
        count edges if the attempt budgets ran out.
    """
    if rng is None:
        rng = random.Random()

    valid = [airport for airport in airports or [] if is_valid_airport(airport)]
    n = len(valid)
    if n < 2 or count <= 0:
        return valid, []

    dirs = [normalize(lat_lon_to_vector(*airport_lat_lon(a))) for a in valid]
    hubs = choose_hubs(np.array(dirs, dtype=np.float64), hub_count_for(n), rng)

    edges: List[Tuple[int, int]] = []
    used = set()

    def try_add(ia, ib):
        if ia == ib:
            return False
        key = (min(ia, ib), max(ia, ib))
        if key in used:
            return False
        used.add(key)
        edges.append(key)
        return True

    def pick(items):
        return items[int(rng.random() * len(items))]

    max_tries = max(ROUTE_MIN_ATTEMPTS, count * ROUTE_ATTEMPTS_PER_ROUTE)
    for _ in range(max_tries):
        if len(edges) >= count:
            break
        r = rng.random()

        # Hub <-> hub long haul
        if r < HUB_HUB_SHARE and len(hubs) >= 2:
            ia = pick(hubs)
            ib = pick(hubs)
            if ia == ib:
                continue
            if _gate_accept(dot(dirs[ia], dirs[ib]), HUB_HUB_GATE, rng):
                try_add(ia, ib)
            continue

        # Hub <-> anywhere, medium haul
        if r < HUB_SPOKE_SHARE and hubs:
            hub = pick(hubs)
            other = int(rng.random() * n)
            if hub == other:
                continue
            if _gate_accept(dot(dirs[hub], dirs[other]), HUB_SPOKE_GATE, rng):
                try_add(hub, other)
            continue

        # Regional short haul
        ia = int(rng.random() * n)
        ib = int(rng.random() * n)
        if ia == ib:
            continue
        if _regional_accept(dot(dirs[ia], dirs[ib]), rng):
            try_add(ia, ib)

    # Relax constraints if the buckets could not fill the request
    if len(edges) < count:
        short = count - len(edges)
        fallback_tries = max(ROUTE_FALLBACK_MIN_ATTEMPTS, short * ROUTE_FALLBACK_ATTEMPTS_PER_ROUTE)
        for _ in range(fallback_tries):
            if len(edges) >= count:
                break
            ia = int(rng.random() * n)
            ib = int(rng.random() * n)
            if ia == ib:
                continue
            if _gate_accept(dot(dirs[ia], dirs[ib]), FALLBACK_GATE, rng):
                try_add(ia, ib)
        logger.debug(f"Route fallback pass added {len(edges) - (count - short)} edge(s)")

    return valid, edges


def _arc_direction(p0: Vector3, p2: Vector3) -> Vector3:
    """Direction of the arc apex: the chord midpoint, projected outward."""
    mid = (p0[0] + p2[0], p0[1] + p2[1], p0[2] + p2[2])
    if chord_length(mid, (0.0, 0.0, 0.0)) > 1e-9 * chord_length(p0, (0.0, 0.0, 0.0)):
        return normalize(mid)
    # Antipodal endpoints: any direction perpendicular to the chord works
    a = normalize(p0)
    axis = (0.0, 1.0, 0.0) if abs(a[1]) < 0.9 else (1.0, 0.0, 0.0)
    return normalize((
        a[1] * axis[2] - a[2] * axis[1],
        a[2] * axis[0] - a[0] * axis[2],
        a[0] * axis[1] - a[1] * axis[0],
    ))


def derive_traffic(arc_boost: float, seed: float) -> Tuple[float, int]:
    """
    Traffic score and plane tier for a route.

    Longer routes (higher arc boost) carry more traffic; the seed adds a
    little jitter so equal-length routes differ.

    Returns:
        Tuple of (traffic in [0.62, 1.22], tier in 1..4)
    """
    base = clamp(arc_boost - ARC_BOOST_MIN, 0.0, 1.0)
    traffic = clamp(
        TRAFFIC_MIN + base * TRAFFIC_GAIN + (seed - 0.5) * TRAFFIC_SEED_JITTER,
        TRAFFIC_MIN,
        TRAFFIC_MAX,
    )
    traffic01 = clamp((traffic - TRAFFIC_MIN) / (TRAFFIC_MAX - TRAFFIC_MIN), 0.0, 0.9999)
    return traffic, 1 + int(floor(traffic01 * TRAFFIC_TIERS))


@timed
def build_routes(
    airports: Sequence[Any],
    count: int = DEFAULT_ROUTE_COUNT,
    country_index: Optional[CountryIndex] = None,
    rng: Optional[Any] = None,
    radius: float = 1.0,
) -> RouteNetwork:
    """
    Build a synthetic route network with arc geometry.

    Args:
        airports: Airport dicts with latitude/longitude (and optional name)
        count: Number of routes wanted
        country_index: Optional membership index used to tag endpoints with
            ISO-3 country codes
        rng: Generator with a random() method; unseeded if None
        radius: Globe radius used for endpoint and control point positions

    Returns:
        Dict with "routes" (list of RouteData) and "airports" (the valid
        airports the route indices refer to). Routes are empty when fewer
        than two valid airports are given.
    """
    if rng is None:
        rng = random.Random()

    valid, edges = pick_route_indices(airports, count, rng)
    if not edges:
        return {"routes": [], "airports": valid}

    degree = [0] * len(valid)
    for ia, ib in edges:
        degree[ia] += 1
        degree[ib] += 1
    max_degree = max(1, max(degree))

    iso3 = [""] * len(valid)
    if country_index is not None and len(country_index) > 0:
        iso3 = [country_index.iso3_at(*airport_lat_lon(a)) for a in valid]

    routes: List[RouteData] = []
    for ia, ib in edges:
        a = valid[ia]
        b = valid[ib]
        a_lat, a_lon = airport_lat_lon(a)
        b_lat, b_lon = airport_lat_lon(b)

        p0 = lat_lon_to_vector(a_lat, a_lon, radius * ROUTE_SURFACE_LIFT)
        p2 = lat_lon_to_vector(b_lat, b_lon, radius * ROUTE_SURFACE_LIFT)

        chord = chord_length(p0, p2)
        arc_boost = clamp(chord / (radius * ARC_BOOST_CHORD_SCALE), ARC_BOOST_MIN, ARC_BOOST_MAX)
        lift = radius * (ARC_CONTROL_BASE + arc_boost * ARC_CONTROL_GAIN)
        apex = _arc_direction(p0, p2)
        p1 = (apex[0] * lift, apex[1] * lift, apex[2] * lift)

        phase = rng.random()
        seed = rng.random()
        traffic, traffic_count = derive_traffic(arc_boost, seed)

        routes.append({
            "id": len(routes),
            "from_index": ia,
            "to_index": ib,
            "p0": p0,
            "p1": p1,
            "p2": p2,
            "arc_boost": arc_boost,
            # Animation cycles per second
            "speed": ROUTE_SPEED_BASE + arc_boost * ROUTE_SPEED_GAIN,
            "phase": phase,
            "seed": seed,
            "size": ROUTE_SIZE_BASE + arc_boost * ROUTE_SIZE_GAIN,
            "dir": 1 if seed < 0.5 else -1,
            "traffic": traffic,
            "traffic_count": traffic_count,
            "hub": clamp((degree[ia] + degree[ib]) / (2 * max_degree), 0.0, 1.0),
            "distance_km": haversine_distance(a_lat, a_lon, b_lat, b_lon),
            "from_name": str(a.get("name") or "Origin"),
            "to_name": str(b.get("name") or "Destination"),
            "from_lat": a_lat,
            "from_lon": a_lon,
            "to_lat": b_lat,
            "to_lon": b_lon,
            "iso_a3": iso3[ia],
            "iso_b3": iso3[ib],
        })

    if len(routes) < count:
        logger.debug(f"Built {len(routes)}/{count} routes over {len(valid)} airports")
    else:
        logger.debug(f"Built {len(routes)} routes over {len(valid)} airports")

    return {"routes": routes, "airports": valid}
