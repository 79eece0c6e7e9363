"""Tests for decorators module."""

import logging

import pytest
import route_heatmap.decorators as decorators_module
from route_heatmap.decorators import timed


class TestTimedDecorator:
    """Tests for timed decorator."""

    def test_returns_result(self):
        """Test that arguments and results pass through."""

        @timed
        def combine(a, b, scale=1):
            return (a + b) * scale

        assert combine(3, 4, scale=2) == 14

    def test_preserves_function_name(self):
        """Test that timed preserves the wrapped function's metadata."""

        @timed
        def inflate_points():
            """Docstring."""

        assert inflate_points.__name__ == "inflate_points"
        assert inflate_points.__doc__ == "Docstring."

    def test_logs_timing_at_debug(self, caplog):
        """Test that the elapsed time is logged at debug level."""

        @timed
        def quick():
            return None

        with caplog.at_level(logging.DEBUG, logger="route_heatmap"):
            quick()
        assert "quick took" in caplog.text

    def test_slow_call_warning(self, caplog, monkeypatch):
        """Test that calls over the threshold produce a warning."""
        monkeypatch.setattr(decorators_module, "SLOW_CALL_SECONDS", -1.0)

        @timed
        def slow():
            return "done"

        assert slow() == "done"
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("consider optimization" in r.getMessage() for r in warnings)

    def test_no_warning_for_fast_call(self, caplog):
        """Test that fast calls do not warn."""

        @timed
        def fast():
            return 1

        fast()
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_exception_propagates(self):
        """Test that exceptions from the wrapped function propagate."""

        @timed
        def failing():
            raise ValueError("Test error")

        with pytest.raises(ValueError, match="Test error"):
            failing()

    def test_applied_to_entry_points(self):
        """Test that the expensive entry points are timed."""
        from route_heatmap.heatmap import build_heatmap
        from route_heatmap.routes import build_routes
        from route_heatmap.synthetic_airports import inflate_airports

        for func in (inflate_airports, build_routes, build_heatmap):
            assert hasattr(func, "__wrapped__")
