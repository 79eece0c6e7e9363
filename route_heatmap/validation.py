"""Input validation utilities for parsed airport and geometry records.

Everything here is non-raising: callers use the results to drop malformed
records, since a broken coordinate in visualization data should never stop
the pipeline.
"""

from math import isfinite
from typing import Any, Optional, Tuple

from .constants import LAT_MIN, LAT_MAX, LON_MIN, LON_MAX

__all__ = [
    "coerce_number",
    "validate_coordinates",
    "is_valid_airport",
    "airport_lat_lon",
]


def coerce_number(value: Any) -> Optional[float]:
    """
    Convert a parsed value to a finite float.

    Accepts ints, floats and numeric strings (loaders often leave CSV
    fields as text). Booleans, None, NaN and infinities are rejected.

    Returns:
        The float value, or None if it is not a usable number
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not isfinite(number):
        return None
    return number


def validate_coordinates(
    lat: Any, lon: Any, context: str = ""
) -> Tuple[bool, Optional[str]]:
    """
    Validate latitude and longitude values.

    Args:
        lat: Latitude value
        lon: Longitude value
        context: Optional context string for error messages

    Returns:
        tuple: (is_valid, error_message)
    """
    lat_value = coerce_number(lat)
    lon_value = coerce_number(lon)

    if lat_value is None:
        return False, f"Latitude must be a finite number{context}"

    if lon_value is None:
        return False, f"Longitude must be a finite number{context}"

    if lat_value < LAT_MIN or lat_value > LAT_MAX:
        return False, f"Latitude {lat_value} out of bounds (-90 to 90){context}"

    if lon_value < LON_MIN or lon_value > LON_MAX:
        return False, f"Longitude {lon_value} out of bounds (-180 to 180){context}"

    return True, None


def is_valid_airport(airport: Any) -> bool:
    """Check that an airport record has usable latitude/longitude fields."""
    if not isinstance(airport, dict):
        return False
    is_valid, _ = validate_coordinates(airport.get("latitude"), airport.get("longitude"))
    return is_valid


def airport_lat_lon(airport: dict) -> Tuple[float, float]:
    """Return (lat, lon) of a record already accepted by is_valid_airport."""
    return coerce_number(airport["latitude"]), coerce_number(airport["longitude"])
