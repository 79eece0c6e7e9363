"""Tests for exceptions module."""

import pytest
from route_heatmap.exceptions import (
    RouteHeatmapError,
    ConfigurationError,
    InvalidCoordinateError,
    HeatmapBuildError,
)


class TestRouteHeatmapError:
    """Tests for RouteHeatmapError base exception."""

    def test_base_exception_message(self):
        """Test base exception message."""
        assert str(RouteHeatmapError("Test message")) == "Test message"

    @pytest.mark.parametrize("error_class", [ConfigurationError, InvalidCoordinateError, HeatmapBuildError])
    def test_subclasses(self, error_class):
        """Test that every package error derives from the base."""
        with pytest.raises(RouteHeatmapError):
            raise error_class("Test error")


class TestConfigurationError:
    """Tests for ConfigurationError exception."""

    def test_with_key(self):
        """Test message with config key."""
        error = ConfigurationError("must be positive", config_key="heatmap_width")
        assert error.config_key == "heatmap_width"
        assert str(error) == "must be positive (Key: heatmap_width)"

    def test_without_key(self):
        """Test message without config key."""
        error = ConfigurationError("Invalid config")
        assert error.config_key is None
        assert str(error) == "Invalid config"


class TestInvalidCoordinateError:
    """Tests for InvalidCoordinateError exception."""

    def test_attributes(self):
        """Test stored coordinates."""
        error = InvalidCoordinateError("Latitude out of range", latitude=95.0)
        assert error.latitude == 95.0
        assert error.longitude is None
        assert str(error) == "Latitude out of range"


class TestHeatmapBuildError:
    """Tests for HeatmapBuildError exception."""

    def test_with_size(self):
        """Test message with raster size."""
        error = HeatmapBuildError("Worker failed", width=512, height=256)
        assert error.width == 512
        assert error.height == 256
        assert str(error) == "Worker failed (raster: 512x256)"

    def test_partial_size(self):
        """Test that a partial size is not formatted."""
        assert str(HeatmapBuildError("Worker failed", width=512)) == "Worker failed"
