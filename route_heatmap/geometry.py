"""Geometric calculations and coordinate manipulations.

Points on the globe are mapped to 3D with +Y towards the north pole and
longitude 0 on the +X axis; `lat_lon_to_vector` and `vector_to_lat_lon`
are exact inverses of each other.
"""

from math import radians, degrees, sin, cos, sqrt, atan2, acos, floor
from typing import Sequence, Tuple

from .constants import LAT_LIMIT

# Constants
EARTH_RADIUS_KM = 6371


def haversine_distance(lat1, lon1, lat2, lon2):
    """Calculate great circle distance in kilometers between two points."""
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1-a))
    return EARTH_RADIUS_KM * c


def clamp(value, low, high):
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def clamp_lat(lat, limit=LAT_LIMIT):
    """Clamp latitude to +/- limit degrees."""
    return clamp(lat, -limit, limit)


def wrap_lon(lon):
    """Wrap longitude into [-180, 180]."""
    if -180.0 <= lon <= 180.0:
        return lon
    wrapped = (lon + 180.0) % 360.0 - 180.0
    # % maps exactly +180 to -180; keep the sign of the input
    if wrapped == -180.0 and lon > 0:
        return 180.0
    return wrapped


def lon_delta(a, b):
    """Absolute longitude difference across the dateline, in [0, 180]."""
    d = abs(a - b) % 360.0
    if d > 180.0:
        d = 360.0 - d
    return d


def lat_lon_to_vector(lat, lon, radius=1.0) -> Tuple[float, float, float]:
    """Convert latitude/longitude in degrees to a point on a sphere."""
    phi = radians(90.0 - lat)
    theta = radians(lon + 180.0)
    return (
        -radius * sin(phi) * cos(theta),
        radius * cos(phi),
        radius * sin(phi) * sin(theta),
    )


def vector_to_lat_lon(vector: Sequence[float]) -> Tuple[float, float]:
    """Convert a 3D direction back to (lat, lon) in degrees."""
    x, y, z = vector
    length = sqrt(x * x + y * y + z * z)
    if length == 0:
        return 0.0, 0.0
    lat = 90.0 - degrees(acos(clamp(y / length, -1.0, 1.0)))
    lon = wrap_lon(degrees(atan2(z, -x)) - 180.0)
    return lat, lon


def normalize(vector: Sequence[float]) -> Tuple[float, float, float]:
    """Return the unit vector in the direction of vector (zero stays zero)."""
    x, y, z = vector
    length = sqrt(x * x + y * y + z * z)
    if length == 0:
        return 0.0, 0.0, 0.0
    return x / length, y / length, z / length


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product of two 3-vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def chord_length(a: Sequence[float], b: Sequence[float]) -> float:
    """Straight-line distance between two 3D points."""
    return sqrt((a[0] - b[0])**2 + (a[1] - b[1])**2 + (a[2] - b[2])**2)


def bezier_point(p0, p1, p2, t) -> Tuple[float, float, float]:
    """Point on the quadratic Bezier curve p0 -> p1 -> p2 at parameter t."""
    omt = 1.0 - t
    k0 = omt * omt
    k1 = 2.0 * omt * t
    k2 = t * t
    return (
        p0[0] * k0 + p1[0] * k1 + p2[0] * k2,
        p0[1] * k0 + p1[1] * k1 + p2[1] * k2,
        p0[2] * k0 + p1[2] * k1 + p2[2] * k2,
    )


def spacing_distance(lat, lon, other_lat, other_lon, min_cos_lat):
    """
    Latitude-corrected angular distance in degrees.

    The longitude difference is scaled by cos(lat) of the first point so
    that points near the poles are not over-rejected; the factor is floored
    at min_cos_lat to keep the metric finite at high latitudes.
    """
    cos_lat = max(min_cos_lat, cos(radians(lat)))
    dlat = lat - other_lat
    dlon = lon_delta(lon, other_lon) * cos_lat
    return sqrt(dlat * dlat + dlon * dlon)


def grid_index(value, origin, cell_size):
    """Quantize a coordinate into an integer grid index."""
    return int(floor((value - origin) / cell_size))
