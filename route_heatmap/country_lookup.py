"""Country membership lookup over GeoJSON boundary polygons.

Answers "which country contains (lat, lon)?" for parsed country boundary
collections (Natural Earth style GeoJSON with Polygon and MultiPolygon
geometries).

Index Structure:
- One entry per usable feature, holding the feature and its bounding box
- Entries keep the input order of the collection
- Features without finite vertices or with unsupported geometry types are
  left out of the index entirely

Lookup Strategy:
- Bounding boxes reject most features with four comparisons
- Survivors get an exact crossing-number (ray casting) test on (lon, lat)
  treated as planar x/y
- A point is inside a polygon when it is inside the outer ring and inside
  none of the holes; a MultiPolygon matches when any part matches
- The first matching entry wins, so overlapping features resolve in input
  order

Caching:
Building is linear in the number of vertices, which is noticeable for
detailed boundary sets. CountryIndexCache memoizes built indexes by the
identity of the collection object: passing the same collection again
returns the very same CountryIndex. Changed content must be passed as a
new collection object.
"""

import threading
from math import isfinite
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .constants import ISO3_PROPERTY_KEYS, ISO3_MISSING_VALUE
from .logger import logger
from .types import GeoFeature

__all__ = [
    "CountryIndex",
    "CountryIndexCache",
    "build_country_index",
    "get_country_index",
    "find_country_feature",
    "point_in_ring",
    "point_in_polygon",
    "get_iso3_from_feature",
    "default_index_cache",
]

BoundingBox = Tuple[float, float, float, float]  # min_lat, max_lat, min_lon, max_lon

SUPPORTED_GEOMETRIES = ("Polygon", "MultiPolygon")


def point_in_ring(lon: float, lat: float, ring: Sequence[Sequence[float]]) -> bool:
    """Crossing-number test of a point against a closed ring of [lon, lat]."""
    inside = False
    n = len(ring)
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > lat) != (yj > lat):
            if lon < (xj - xi) * (lat - yi) / (yj - yi) + xi:
                inside = not inside
        j = i
    return inside


def point_in_polygon(lon: float, lat: float, polygon: Sequence[Sequence[Sequence[float]]]) -> bool:
    """Test a point against [outer_ring, hole1, hole2, ...]."""
    if not polygon:
        return False
    if not point_in_ring(lon, lat, polygon[0]):
        return False
    for hole in polygon[1:]:
        if point_in_ring(lon, lat, hole):
            return False
    return True


def _finite_vertex(coord: Any) -> Optional[Tuple[float, float]]:
    """Return (lon, lat) of a vertex, or None if it is malformed."""
    try:
        lon = float(coord[0])
        lat = float(coord[1])
    except (TypeError, ValueError, IndexError, KeyError):
        return None
    if not isfinite(lon) or not isfinite(lat):
        return None
    return lon, lat


def _clean_ring(ring: Any) -> List[Tuple[float, float]]:
    """Drop malformed vertices from a ring."""
    cleaned = []
    for coord in ring or []:
        vertex = _finite_vertex(coord)
        if vertex is not None:
            cleaned.append(vertex)
    return cleaned


def _feature_polygons(feature: Any) -> List[List[List[Tuple[float, float]]]]:
    """Return the cleaned polygons of a feature, one list of rings per part."""
    geometry = feature.get("geometry") if isinstance(feature, dict) else None
    if not isinstance(geometry, dict):
        return []

    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates") or []
    if geom_type == "Polygon":
        parts = [coordinates]
    elif geom_type == "MultiPolygon":
        parts = coordinates
    else:
        return []

    polygons = []
    for part in parts:
        rings = [_clean_ring(ring) for ring in part or []]
        # A part without an outer boundary cannot contain anything
        if rings and len(rings[0]) >= 3:
            polygons.append(rings)
    return polygons


def _bounding_box(polygons: List[List[List[Tuple[float, float]]]]) -> Optional[BoundingBox]:
    """Bounding box over every vertex of every ring, or None if empty."""
    min_lat = min_lon = float("inf")
    max_lat = max_lon = float("-inf")
    for rings in polygons:
        for ring in rings:
            for lon, lat in ring:
                min_lat = min(min_lat, lat)
                max_lat = max(max_lat, lat)
                min_lon = min(min_lon, lon)
                max_lon = max(max_lon, lon)
    if not isfinite(min_lat) or not isfinite(min_lon):
        return None
    return min_lat, max_lat, min_lon, max_lon


class IndexedFeature:
    """A feature with its cleaned polygons and bounding box."""

    __slots__ = ("feature", "polygons", "bbox")

    def __init__(self, feature: GeoFeature, polygons, bbox: BoundingBox):
        self.feature = feature
        self.polygons = polygons
        self.bbox = bbox

    def box_contains(self, lat: float, lon: float) -> bool:
        min_lat, max_lat, min_lon, max_lon = self.bbox
        return min_lat <= lat <= max_lat and min_lon <= lon <= max_lon

    def contains(self, lat: float, lon: float) -> bool:
        return any(point_in_polygon(lon, lat, polygon) for polygon in self.polygons)


class CountryIndex:
    """Ordered membership index over country features.

    Immutable after construction, so concurrent lookups need no locking.
    """

    def __init__(self, entries: List[IndexedFeature]):
        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[IndexedFeature]:
        return iter(self._entries)

    @property
    def features(self) -> List[GeoFeature]:
        """Indexed features in tie-break order."""
        return [entry.feature for entry in self._entries]

    def find(self, lat: float, lon: float) -> Optional[GeoFeature]:
        """
        Return the first feature containing the point, or None.

        Features are tested in input order; when boundaries overlap the
        earlier feature wins.
        """
        for entry in self._entries:
            if entry.box_contains(lat, lon) and entry.contains(lat, lon):
                return entry.feature
        return None

    def is_land(self, lat: float, lon: float) -> bool:
        """True if the point is inside any feature; an empty index covers everything."""
        if not self._entries:
            return True
        return self.find(lat, lon) is not None

    def iso3_at(self, lat: float, lon: float) -> str:
        """ISO-3 code of the country containing the point, or an empty string."""
        feature = self.find(lat, lon)
        return get_iso3_from_feature(feature) if feature is not None else ""


def build_country_index(collection: Any) -> CountryIndex:
    """
    Build a membership index from a GeoJSON feature collection.

    Args:
        collection: Dict with a "features" list (None is treated as empty)

    Returns:
        CountryIndex with one entry per usable feature, in input order
    """
    features = collection.get("features") if isinstance(collection, dict) else None
    entries = []
    skipped = 0

    for feature in features or []:
        polygons = _feature_polygons(feature)
        bbox = _bounding_box(polygons)
        if bbox is None:
            skipped += 1
            continue
        entries.append(IndexedFeature(feature, polygons, bbox))

    if skipped:
        logger.debug(f"Country index skipped {skipped} feature(s) without usable geometry")
    logger.debug(f"Built country index with {len(entries)} feature(s)")

    return CountryIndex(entries)


class CountryIndexCache:
    """Build-once cache of country indexes keyed by collection identity.

    The cache holds a reference to each collection it has seen so that the
    object id stays unique for as long as the entry exists.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, Tuple[Any, CountryIndex]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, collection: Any) -> bool:
        entry = self._entries.get(id(collection))
        return entry is not None and entry[0] is collection

    def get(self, collection: Any) -> CountryIndex:
        """Return the index for collection, building it on first use."""
        entry = self._entries.get(id(collection))
        if entry is not None and entry[0] is collection:
            return entry[1]

        with self._lock:
            # Another thread may have finished the build while we waited
            entry = self._entries.get(id(collection))
            if entry is not None and entry[0] is collection:
                return entry[1]
            index = build_country_index(collection)
            self._entries[id(collection)] = (collection, index)
            return index

    def clear(self) -> None:
        """Drop every cached index."""
        with self._lock:
            self._entries.clear()


# Production wiring; tests and libraries should pass their own cache
default_index_cache = CountryIndexCache()


def get_country_index(collection: Any, cache: Optional[CountryIndexCache] = None) -> CountryIndex:
    """Return the cached index for collection (default cache if none given)."""
    if cache is None:
        cache = default_index_cache
    return cache.get(collection)


def find_country_feature(index: Optional[CountryIndex], lat: float, lon: float) -> Optional[GeoFeature]:
    """Return the feature containing (lat, lon), or None without an index."""
    if index is None:
        return None
    return index.find(lat, lon)


def get_iso3_from_feature(feature: Optional[GeoFeature]) -> str:
    """
    Extract an ISO-3 country code from feature properties.

    Natural Earth spreads the code over several properties and uses "-99"
    for territories without an assigned code, so the first usable value of
    ISO_A3, ADM0_A3, BRK_A3 and SU_A3 wins.

    Example:
        >>> get_iso3_from_feature({"properties": {"ISO_A3": "-99", "ADM0_A3": "FRA"}})
        'FRA'
    """
    if not isinstance(feature, dict):
        return ""
    properties = feature.get("properties") or {}
    for key in ISO3_PROPERTY_KEYS:
        value = properties.get(key)
        if isinstance(value, str) and value and value != ISO3_MISSING_VALUE:
            return value
    return ""
