"""Configuration validation for the route network generator.

This module validates generation options before any expensive work
starts. It checks:

1. Airport Synthesis:
   - Target count and minimum spacing are finite numbers
   - Values below the supported minimum (they will be clamped)
   - Very large targets (synthesis gets slow)

2. Routes:
   - Route count is a non-negative integer

3. Heatmap:
   - Raster width and height are positive integers

The synthesizers themselves clamp or degrade on odd values; validation
exists to fail fast with clear messages when a caller passed something
that is almost certainly a mistake.
"""

from typing import Any, List, Tuple

from .constants import (
    DEFAULT_ROUTE_COUNT,
    DEFAULT_SPACING_DEG,
    DEFAULT_TARGET_COUNT,
    HEATMAP_HEIGHT,
    HEATMAP_WIDTH,
    LARGE_TARGET_WARNING,
    MIN_SPACING_DEG,
    MIN_TARGET_COUNT,
)
from .exceptions import ConfigurationError
from .input_validation import validate_number, validate_positive_int
from .logger import logger

__all__ = [
    "ConfigValidator",
    "validate_options",
]


class ConfigValidator:
    """Validates generation options."""

    def __init__(self) -> None:
        """Initialize the validator with empty error and warning lists."""
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(
        self,
        target_count: Any = DEFAULT_TARGET_COUNT,
        min_spacing_deg: Any = DEFAULT_SPACING_DEG,
        route_count: Any = DEFAULT_ROUTE_COUNT,
        heatmap_width: Any = HEATMAP_WIDTH,
        heatmap_height: Any = HEATMAP_HEIGHT,
    ) -> Tuple[bool, List[str], List[str]]:
        """
        Run all validation checks.

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        self.errors = []
        self.warnings = []

        self._validate_synthesis(target_count, min_spacing_deg)
        self._validate_route_count(route_count)
        self._validate_raster(heatmap_width, heatmap_height)

        return len(self.errors) == 0, self.errors, self.warnings

    def _check(self, validator, value: Any, name: str) -> bool:
        """Run a raising validator, recording its message as an error."""
        try:
            validator(value, name)
        except ConfigurationError as e:
            self.errors.append(str(e))
            return False
        return True

    def _validate_synthesis(self, target_count: Any, min_spacing_deg: Any) -> None:
        """Validate airport synthesis options."""
        if self._check(validate_number, target_count, "target_count"):
            if target_count < MIN_TARGET_COUNT:
                self.warnings.append(
                    f"target_count {target_count} is below {MIN_TARGET_COUNT}, "
                    f"using {MIN_TARGET_COUNT}"
                )
            elif target_count > LARGE_TARGET_WARNING:
                self.warnings.append(
                    f"Large target_count ({target_count}), airport synthesis may be slow"
                )
            elif target_count != int(target_count):
                self.warnings.append(
                    f"target_count {target_count} is not whole, rounding down"
                )

        if self._check(validate_number, min_spacing_deg, "min_spacing_deg"):
            if min_spacing_deg < MIN_SPACING_DEG:
                self.warnings.append(
                    f"min_spacing_deg {min_spacing_deg} is below {MIN_SPACING_DEG}, "
                    f"using {MIN_SPACING_DEG}"
                )

    def _validate_route_count(self, route_count: Any) -> None:
        """Validate the requested number of routes."""
        if isinstance(route_count, bool) or not isinstance(route_count, int):
            self.errors.append(
                f"route_count must be int, got {type(route_count).__name__} (Key: route_count)"
            )
        elif route_count < 0:
            self.errors.append(
                f"route_count must not be negative, got {route_count} (Key: route_count)"
            )
        elif route_count == 0:
            self.warnings.append("route_count is 0, the network will have no routes")

    def _validate_raster(self, width: Any, height: Any) -> None:
        """Validate heatmap raster dimensions."""
        width_ok = self._check(validate_positive_int, width, "heatmap_width")
        height_ok = self._check(validate_positive_int, height, "heatmap_height")
        if width_ok and height_ok and width != 2 * height:
            self.warnings.append(
                f"Heatmap raster {width}x{height} is not 2:1, cells will not be square in degrees"
            )


def validate_options(
    target_count: Any = DEFAULT_TARGET_COUNT,
    min_spacing_deg: Any = DEFAULT_SPACING_DEG,
    route_count: Any = DEFAULT_ROUTE_COUNT,
    heatmap_width: Any = HEATMAP_WIDTH,
    heatmap_height: Any = HEATMAP_HEIGHT,
    fail_on_warnings: bool = False,
) -> None:
    """
    Validate generation options and raise exception if invalid.

    Args:
        target_count: Desired number of synthesized airports
        min_spacing_deg: Minimum spacing between airports in degrees
        route_count: Desired number of routes
        heatmap_width: Heatmap raster width in cells
        heatmap_height: Heatmap raster height in cells
        fail_on_warnings: If True, treat warnings as errors

    Raises:
        ConfigurationError: If validation fails

    Example:
        >>> try:
        ...     validate_options(target_count=float("nan"))
        ... except ConfigurationError as e:
        ...     print(f"Configuration error: {e}")
    """
    validator = ConfigValidator()
    is_valid, errors, warnings = validator.validate_all(
        target_count, min_spacing_deg, route_count, heatmap_width, heatmap_height
    )

    for warning in warnings:
        logger.warning(warning)

    if not is_valid or (fail_on_warnings and warnings):
        error_msg = "Configuration validation failed:\n"
        if errors:
            error_msg += "\nErrors:\n" + "\n".join(f"  • {err}" for err in errors)
        if fail_on_warnings and warnings:
            error_msg += "\nWarnings (treated as errors):\n" + "\n".join(
                f"  • {warn}" for warn in warnings
            )
        raise ConfigurationError(error_msg)

    if not warnings:
        logger.debug("Configuration validation passed")
