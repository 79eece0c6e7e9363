"""Synthetic airport generation.

This module inflates a sparse list of real airports into a dense, evenly
spaced set of land locations that reads as a plausible global network.

Key Challenges:
1. Real airport data is heavily biased towards the northern hemisphere
2. Naive lat/lon grids produce visible rings and rows on a globe
3. Uniform random points clump and leave holes
4. Antarctica ends up empty unless it is sampled on purpose
5. Visuals must be stable across reloads, so output has to be deterministic

Synthesis Stages (in priority order):
1. Seed retention: a shuffled, hemisphere-balanced sample of real airports
2. Polar guarantee: random samples in the south polar band
3. Quasi-uniform spread: a jittered golden-angle spiral over the sphere
4. Random gap fill: arcsine-latitude sampling, hemisphere gated
5. Relaxed fill: the same sampling without the hemisphere gate

Every stage has an attempt budget, so nearly landless inputs terminate with
fewer points instead of looping.

Spacing:
Uses a spatial grid for O(1) proximity lookups, like airport deduplication:
- Cells are min_spacing tall and at least min_spacing wide
- Checks the cell and its 8 neighbours; the longitude neighbourhood widens
  where cos(lat) shrinks, so the test stays exact near the poles
- Distances use the latitude-corrected metric of spacing_distance()

Land Test:
Polygon tests are the expensive part, so results are memoized per small
grid cell; nearby candidates reuse the answer of the first one tested.

Determinism:
All randomness comes from one Mulberry32 generator seeded from a fixed
constant, the number of valid input airports and the target count.
"""

from math import asin, atan2, ceil, cos, degrees, floor, pi, radians, sin, sqrt
from typing import Any, Dict, List, Optional, Tuple

from .constants import (
    DEFAULT_SPACING_DEG,
    DEFAULT_TARGET_COUNT,
    FINAL_FILL_ATTEMPTS_PER_POINT,
    FINAL_FILL_MIN_ATTEMPTS,
    GAP_FILL_ATTEMPTS_PER_POINT,
    GAP_FILL_MIN_ATTEMPTS,
    HEMISPHERE_BASE_PROBABILITY,
    HEMISPHERE_MIN_PROBABILITY,
    HEMISPHERE_PRESSURE_GAIN,
    LAND_CACHE_CELL_DEG,
    LAT_LIMIT,
    MIN_SPACING_DEG,
    MIN_TARGET_COUNT,
    POLAR_ATTEMPTS_PER_POINT,
    POLAR_MIN_ATTEMPTS,
    REAL_KEEP_FLOOR,
    REAL_KEEP_SHARE,
    RELAXED_FILL_ATTEMPTS_PER_POINT,
    RELAXED_FILL_MIN_ATTEMPTS,
    SOUTH_POLAR_BAND_LAT,
    SOUTH_POLAR_TARGET_SHARE,
    SOUTH_TARGET_SHARE,
    SPACING_MIN_COS_LAT,
    SPIRAL_ITERS_PER_POINT,
    SPIRAL_LAT_JITTER,
    SPIRAL_LON_JITTER,
    SPIRAL_MIN_ITERS,
    SPIRAL_STEP,
    SPREAD_TARGET_SHARE,
    SYNTHETIC_SEED,
)
from .country_lookup import CountryIndex
from .decorators import timed
from .geometry import clamp, clamp_lat, grid_index, spacing_distance, wrap_lon
from .logger import logger
from .prng import Mulberry32, combine_seed
from .types import AirportData
from .validation import airport_lat_lon, coerce_number, is_valid_airport

__all__ = [
    "SpacingGrid",
    "inflate_airports",
    "synthesis_seed",
]

GOLDEN_ANGLE = pi * (3 - sqrt(5))


class SpacingGrid:
    """Spatial grid answering "is anything closer than min_spacing?"."""

    def __init__(self, min_spacing_deg: float, min_cos_lat: float = SPACING_MIN_COS_LAT):
        self.min_spacing = min_spacing_deg
        self.min_cos_lat = min_cos_lat
        self.lat_cell = min_spacing_deg
        # Whole number of columns so the dateline seam is a regular boundary
        self.lon_columns = max(1, int(360.0 // min_spacing_deg))
        self.lon_cell = 360.0 / self.lon_columns
        self.cells: Dict[Tuple[int, int], List[Tuple[float, float]]] = {}

    def get_grid_key(self, lat: float, lon: float) -> Tuple[int, int]:
        """Get grid cell key for a coordinate."""
        row = grid_index(lat, -90.0, self.lat_cell)
        col = grid_index(lon, -180.0, self.lon_cell) % self.lon_columns
        return row, col

    def _neighbour_columns(self, lat: float, col: int) -> set:
        cos_lat = max(self.min_cos_lat, cos(radians(lat)))
        span = int(ceil(self.min_spacing / (cos_lat * self.lon_cell)))
        return {(col + d) % self.lon_columns for d in range(-span, span + 1)}

    def has_spacing(self, lat: float, lon: float) -> bool:
        """True if no stored point lies within min_spacing of (lat, lon)."""
        row, col = self.get_grid_key(lat, lon)
        for c in self._neighbour_columns(lat, col):
            for drow in (-1, 0, 1):
                bucket = self.cells.get((row + drow, c))
                if not bucket:
                    continue
                for other_lat, other_lon in bucket:
                    dist = spacing_distance(lat, lon, other_lat, other_lon, self.min_cos_lat)
                    if dist < self.min_spacing:
                        return False
        return True

    def add(self, lat: float, lon: float) -> None:
        """Store a point."""
        self.cells.setdefault(self.get_grid_key(lat, lon), []).append((lat, lon))


def synthesis_seed(valid_count: int, target_count: int) -> int:
    """Seed for a synthesis run over valid_count inputs."""
    return combine_seed(SYNTHETIC_SEED, valid_count << 10, target_count)


def _budget(per_point: float, minimum: int, target_count: int) -> int:
    return max(minimum, int(floor(target_count * per_point)))


@timed
def inflate_airports(
    base_airports: Any,
    country_index: Optional[CountryIndex] = None,
    target_count: int = DEFAULT_TARGET_COUNT,
    min_spacing_deg: float = DEFAULT_SPACING_DEG,
) -> List[AirportData]:
    """
    Inflate a sparse airport list into a dense, land-constrained set.

    Args:
        base_airports: Real airports as dicts with latitude/longitude (and
            optionally name); anything else is treated as empty
        country_index: Membership index deciding what is land; None (or an
            empty index) accepts every point
        target_count: Desired number of airports (floored, at least 1)
        min_spacing_deg: Minimum latitude-corrected spacing in degrees
            (at least 0.15)

    Returns:
        Up to target_count airport dicts; fewer when land is too sparse to
        fit them within the attempt budgets. Empty if no input airport is
        valid.

    Example:
        >>> airports = inflate_airports([{"latitude": 50.0, "longitude": 8.5}],
        ...                             target_count=100, min_spacing_deg=2.0)
        >>> len(airports)
        100
    """
    target_value = coerce_number(target_count)
    spacing_value = coerce_number(min_spacing_deg)
    target_count = max(MIN_TARGET_COUNT, int(floor(target_value if target_value is not None else DEFAULT_TARGET_COUNT)))
    min_spacing = max(MIN_SPACING_DEG, spacing_value if spacing_value is not None else DEFAULT_SPACING_DEG)

    source = base_airports if isinstance(base_airports, (list, tuple)) else []
    valid = [airport for airport in source if is_valid_airport(airport)]
    if not valid:
        logger.debug("No valid base airports; nothing to inflate")
        return []
    if len(valid) < len(source):
        logger.debug(f"Skipped {len(source) - len(valid)} invalid base airport(s)")

    rng = Mulberry32(synthesis_seed(len(valid), target_count))
    check_land = country_index is not None and len(country_index) > 0

    out: List[AirportData] = []
    grid = SpacingGrid(min_spacing)
    land_cache: Dict[Tuple[int, int], bool] = {}
    counts = {"north": 0, "south": 0, "south_polar": 0, "synthetic": 0}
    south_target = int(floor(target_count * SOUTH_TARGET_SHARE))
    north_target = target_count - south_target

    def is_land_cached(lat, lon):
        if not check_land:
            return True
        key = (grid_index(lat, -90.0, LAND_CACHE_CELL_DEG), grid_index(lon, -180.0, LAND_CACHE_CELL_DEG))
        cached = land_cache.get(key)
        if cached is None:
            cached = country_index.is_land(lat, lon)
            land_cache[key] = cached
        return cached

    def add(lat, lon, name=None):
        lat = clamp_lat(lat)
        lon = wrap_lon(lon)
        if not is_land_cached(lat, lon):
            return False
        if not grid.has_spacing(lat, lon):
            return False

        if not name:
            counts["synthetic"] += 1
            name = f"LND-{counts['synthetic']:05d}"
        out.append({"name": name, "latitude": lat, "longitude": lon})
        grid.add(lat, lon)
        if lat < 0:
            counts["south"] += 1
        else:
            counts["north"] += 1
        if lat <= SOUTH_POLAR_BAND_LAT:
            counts["south_polar"] += 1
        return True

    def hemisphere_accept(lat):
        is_south = lat < 0
        desired = south_target if is_south else north_target
        current = counts["south"] if is_south else counts["north"]
        pressure = (desired - current) / max(1, desired)
        probability = clamp(
            HEMISPHERE_BASE_PROBABILITY + pressure * HEMISPHERE_PRESSURE_GAIN,
            HEMISPHERE_MIN_PROBABILITY,
            1.0,
        )
        return rng.random() <= probability

    def random_lat_lon():
        # asin of a uniform variate gives an area-uniform latitude
        y = rng.random() * 2 - 1
        lat = degrees(asin(y)) * (LAT_LIMIT / 90.0)
        lon = rng.random() * 360 - 180
        return lat, lon

    # 1) Balanced subset of real airports (prevents a north-heavy start)
    max_real_keep = min(len(valid), max(REAL_KEEP_FLOOR, int(floor(target_count * REAL_KEEP_SHARE))))
    south_real = [a for a in valid if airport_lat_lon(a)[0] < 0]
    north_real = [a for a in valid if airport_lat_lon(a)[0] >= 0]
    rng.shuffle(south_real)
    rng.shuffle(north_real)

    kept_real = 0
    while kept_real < max_real_keep and (south_real or north_real):
        south_ratio = counts["south"] / max(1, south_target)
        north_ratio = counts["north"] / max(1, north_target)
        pick_south = (south_ratio <= north_ratio and bool(south_real)) or not north_real
        src = south_real.pop() if pick_south else north_real.pop()
        lat, lon = airport_lat_lon(src)
        if add(lat, lon, str(src.get("name") or f"REAL-{kept_real + 1}")):
            kept_real += 1

    if len(out) >= target_count:
        return out[:target_count]

    # 2) Antarctic band coverage so the south pole does not look empty
    south_polar_target = int(floor(target_count * SOUTH_POLAR_TARGET_SHARE))
    polar_budget = _budget(POLAR_ATTEMPTS_PER_POINT, POLAR_MIN_ATTEMPTS, target_count)
    polar_attempts = 0
    while (
        len(out) < target_count
        and counts["south_polar"] < south_polar_target
        and polar_attempts < polar_budget
    ):
        polar_attempts += 1
        lat = SOUTH_POLAR_BAND_LAT - rng.random() * (LAT_LIMIT - abs(SOUTH_POLAR_BAND_LAT))
        lon = rng.random() * 360 - 180
        add(lat, lon)
    after_polar = len(out)

    # 3) Golden-angle spiral, visited in a scrambled order from a random offset
    spread_target = min(target_count, int(floor(target_count * SPREAD_TARGET_SHARE)))
    spiral_iters = max(spread_target * SPIRAL_ITERS_PER_POINT, SPIRAL_MIN_ITERS)
    spiral_offset = int(floor(rng.random() * spiral_iters))
    theta_offset = rng.random() * pi * 2
    for i in range(spiral_iters):
        if len(out) >= spread_target:
            break
        ii = (spiral_offset + i * SPIRAL_STEP) % spiral_iters
        y = 1 - (2 * (ii + 0.5)) / spiral_iters
        r = sqrt(max(0.0, 1 - y * y))
        theta = GOLDEN_ANGLE * ii + theta_offset

        lat = degrees(asin(y)) + (rng.random() - 0.5) * min_spacing * SPIRAL_LAT_JITTER
        lon = degrees(atan2(r * sin(theta), r * cos(theta))) + (rng.random() - 0.5) * min_spacing * SPIRAL_LON_JITTER

        if abs(lat) > LAT_LIMIT:
            continue
        if not hemisphere_accept(lat):
            continue
        add(lat, lon)
    after_spiral = len(out)

    # 4) Random gap fill; avoids geometric patterns the spiral might leave
    for per_point, minimum in (
        (GAP_FILL_ATTEMPTS_PER_POINT, GAP_FILL_MIN_ATTEMPTS),
        (FINAL_FILL_ATTEMPTS_PER_POINT, FINAL_FILL_MIN_ATTEMPTS),
    ):
        budget = _budget(per_point, minimum, target_count)
        attempts = 0
        while len(out) < target_count and attempts < budget:
            attempts += 1
            lat, lon = random_lat_lon()
            if not hemisphere_accept(lat):
                continue
            add(lat, lon)
    after_gap_fill = len(out)

    # 5) Relaxed fill: drop the hemisphere gate to guarantee progress
    relaxed_budget = _budget(RELAXED_FILL_ATTEMPTS_PER_POINT, RELAXED_FILL_MIN_ATTEMPTS, target_count)
    relaxed = 0
    while len(out) < target_count and relaxed < relaxed_budget:
        relaxed += 1
        lat, lon = random_lat_lon()
        add(lat, lon)

    logger.debug(
        f"Inflated {len(valid)} airport(s) to {len(out)}/{target_count}: "
        f"{kept_real} real, {after_polar - kept_real} polar, "
        f"{after_spiral - after_polar} spiral, {after_gap_fill - after_spiral} gap fill, "
        f"{len(out) - after_gap_fill} relaxed ({counts['south']} south)"
    )
    if len(out) < target_count:
        logger.debug(f"Airport synthesis fell {target_count - len(out)} short of target")

    return out
