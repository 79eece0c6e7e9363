"""Custom exceptions for the route heatmap generator.

Most failure modes in this package are handled by degrading the result
(skipping malformed vertices, returning fewer points or routes). The
exceptions below are reserved for caller mistakes in configuration and for
internal signalling around the background heatmap worker.
"""

__all__ = [
    "RouteHeatmapError",
    "ConfigurationError",
    "InvalidCoordinateError",
    "HeatmapBuildError",
]


class RouteHeatmapError(Exception):
    """Base exception for all route heatmap errors."""

    pass


class ConfigurationError(RouteHeatmapError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str = None):
        self.config_key = config_key
        if config_key:
            message = f"{message} (Key: {config_key})"
        super().__init__(message)


class InvalidCoordinateError(RouteHeatmapError):
    """Raised when a coordinate is outside its valid range."""

    def __init__(self, message: str, latitude: float = None, longitude: float = None):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(message)


class HeatmapBuildError(RouteHeatmapError):
    """Raised when a background heatmap build produced no usable grid."""

    def __init__(self, message: str, width: int = None, height: int = None):
        self.width = width
        self.height = height
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with raster size information."""
        if self.width is not None and self.height is not None:
            return f"{message} (raster: {self.width}x{self.height})"
        return message
