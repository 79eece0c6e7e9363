"""Raising validators for options and strict coordinate checks.

validation.py skips bad points quietly; the functions here raise instead.
They guard caller mistakes: raster sizes and synthesis options raise
ConfigurationError, and airports checked in strict mode raise
InvalidCoordinateError.

Usage:
    validate_positive_int(width, "heatmap_width")
    validate_airport_coordinates(airport, " (airport 12)")
"""

from math import isfinite
from typing import Any, Callable, List, Union

from .exceptions import ConfigurationError, InvalidCoordinateError
from .constants import LAT_MIN, LAT_MAX, LON_MIN, LON_MAX

__all__ = [
    "validate_latitude",
    "validate_longitude",
    "validate_coordinate_pair",
    "validate_airport_coordinates",
    "validate_number",
    "validate_positive",
    "validate_positive_int",
    "validate_type",
    "ValidationContext",
]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_axis(value: Any, low: float, high: float, label: str, context: str, **coords) -> None:
    if not _is_number(value) or not isfinite(value):
        raise InvalidCoordinateError(f"{label} must be a finite number{context}", **coords)
    if not (low <= value <= high):
        raise InvalidCoordinateError(f"{label} {value} outside [{low}, {high}]{context}", **coords)


def validate_latitude(lat: Any, context: str = "") -> None:
    """Raise InvalidCoordinateError unless lat is a number in [-90, 90]."""
    _check_axis(lat, LAT_MIN, LAT_MAX, "Latitude", context, latitude=lat)


def validate_longitude(lon: Any, context: str = "") -> None:
    """Raise InvalidCoordinateError unless lon is a number in [-180, 180]."""
    _check_axis(lon, LON_MIN, LON_MAX, "Longitude", context, longitude=lon)


def validate_coordinate_pair(lat: Any, lon: Any, context: str = "") -> None:
    validate_latitude(lat, context)
    validate_longitude(lon, context)


def validate_airport_coordinates(airport: Any, context: str = "") -> None:
    """
    Validate the latitude and longitude of an airport dict.

    Args:
        airport: Airport dict with latitude and longitude keys
        context: Suffix for the error message, e.g. " (airport 3)"

    Raises:
        InvalidCoordinateError: If airport is not a dict or either
            coordinate is missing, non-numeric or out of range
    """
    if not isinstance(airport, dict):
        raise InvalidCoordinateError(f"Airport must be a dict, got {type(airport).__name__}{context}")
    validate_coordinate_pair(airport.get("latitude"), airport.get("longitude"), context)


def validate_number(value: Any, name: str = "value") -> None:
    """
    Validate that a value is a finite real number (booleans excluded).

    Raises:
        ConfigurationError: If value is not a finite number
    """
    if not _is_number(value):
        raise ConfigurationError(
            f"{name} must be a number, got {type(value).__name__}", config_key=name
        )
    if not isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}", config_key=name)


def validate_positive(value: Union[int, float], name: str = "value") -> None:
    validate_number(value, name)
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", config_key=name)


def validate_positive_int(value: Any, name: str = "value") -> None:
    """
    Validate that a value is a positive integer (booleans excluded).

    Raises:
        ConfigurationError: If value is not a positive int
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be int, got bool", config_key=name)
    validate_type(value, int, name)
    validate_positive(value, name)


def validate_type(value: Any, expected_type: type, name: str = "value") -> None:
    if not isinstance(value, expected_type):
        raise ConfigurationError(
            f"{name} must be {expected_type.__name__}, got {type(value).__name__}",
            config_key=name,
        )


class ValidationContext:
    """Collects errors from several validators and raises them together.

    Example:
        with ValidationContext("Heatmap raster size") as ctx:
            ctx.validate(width, validate_positive_int, "width")
            ctx.validate(height, validate_positive_int, "height")
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.errors: List[str] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Exceptions raised inside the block win over collected errors
        if exc_type is None and self.errors:
            details = "\n".join(f"  - {err}" for err in self.errors)
            raise ConfigurationError(f"{self.operation} failed:\n{details}")
        return False

    def validate(self, value: Any, validator: Callable[..., None], name: str) -> bool:
        """Run validator(value, name); record its message and return False on failure."""
        try:
            validator(value, name)
        except (ConfigurationError, InvalidCoordinateError) as e:
            self.errors.append(str(e))
            return False
        return True
