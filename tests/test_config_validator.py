"""Tests for config_validator module."""

import pytest
from route_heatmap.config_validator import ConfigValidator, validate_options
from route_heatmap.exceptions import ConfigurationError


class TestConfigValidator:
    """Tests for ConfigValidator class."""

    def test_validator_initialization(self):
        """Test ConfigValidator initialization."""
        validator = ConfigValidator()
        assert validator.errors == []
        assert validator.warnings == []

    def test_defaults_valid(self):
        """Test that the default options validate cleanly."""
        is_valid, errors, warnings = ConfigValidator().validate_all()
        assert is_valid is True
        assert errors == []
        assert warnings == []

    @pytest.mark.parametrize("target", [float("nan"), float("inf"), "many", None, True])
    def test_invalid_target(self, target):
        """Test non-numeric and non-finite targets."""
        is_valid, errors, _ = ConfigValidator().validate_all(target_count=target)
        assert is_valid is False
        assert any("target_count" in error for error in errors)

    def test_target_warnings(self):
        """Test clamped, fractional and very large targets."""
        validator = ConfigValidator()
        assert validator.validate_all(target_count=0)[2] != []
        assert validator.validate_all(target_count=12.5)[2] != []
        is_valid, _, warnings = validator.validate_all(target_count=100000)
        assert is_valid is True
        assert any("may be slow" in warning for warning in warnings)

    def test_spacing(self):
        """Test spacing validation and clamping warning."""
        validator = ConfigValidator()
        assert validator.validate_all(min_spacing_deg="wide")[0] is False
        is_valid, _, warnings = validator.validate_all(min_spacing_deg=0.01)
        assert is_valid is True
        assert any("min_spacing_deg" in warning for warning in warnings)

    @pytest.mark.parametrize("count", [-1, 2.5, "10", None, False])
    def test_invalid_route_count(self, count):
        """Test invalid route counts."""
        is_valid, errors, _ = ConfigValidator().validate_all(route_count=count)
        assert is_valid is False
        assert any("route_count" in error for error in errors)

    def test_zero_routes_warns(self):
        """Test that zero routes is allowed with a warning."""
        is_valid, _, warnings = ConfigValidator().validate_all(route_count=0)
        assert is_valid is True
        assert warnings

    @pytest.mark.parametrize("width,height", [(0, 256), (512, -1), (512.0, 256), (512, "256")])
    def test_invalid_raster(self, width, height):
        """Test invalid raster sizes."""
        is_valid, errors, _ = ConfigValidator().validate_all(heatmap_width=width, heatmap_height=height)
        assert is_valid is False
        assert errors

    def test_non_square_raster_warns(self):
        """Test a raster that is not 2:1."""
        is_valid, _, warnings = ConfigValidator().validate_all(heatmap_width=256, heatmap_height=256)
        assert is_valid is True
        assert any("2:1" in warning for warning in warnings)

    def test_errors_reset_between_runs(self):
        """Test that a second run starts from a clean slate."""
        validator = ConfigValidator()
        validator.validate_all(route_count=-1)
        is_valid, errors, _ = validator.validate_all()
        assert is_valid is True
        assert errors == []


class TestValidateOptions:
    """Tests for validate_options function."""

    def test_valid(self):
        """Test that valid options do not raise."""
        validate_options()

    def test_invalid_raises(self):
        """Test that errors raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Configuration validation failed"):
            validate_options(heatmap_width=0)

    def test_warnings_logged(self, caplog):
        """Test that warnings are logged but do not raise."""
        validate_options(route_count=0)
        assert "route_count is 0" in caplog.text

    def test_fail_on_warnings(self):
        """Test treating warnings as errors."""
        with pytest.raises(ConfigurationError, match="treated as errors"):
            validate_options(route_count=0, fail_on_warnings=True)
