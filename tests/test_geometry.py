"""Tests for geometry module."""

import pytest
from route_heatmap.geometry import (
    haversine_distance,
    clamp,
    clamp_lat,
    wrap_lon,
    lon_delta,
    lat_lon_to_vector,
    vector_to_lat_lon,
    normalize,
    dot,
    chord_length,
    bezier_point,
    spacing_distance,
    grid_index,
    EARTH_RADIUS_KM,
)


class TestHaversineDistance:
    """Tests for haversine_distance function."""

    def test_zero_distance(self):
        """Test distance between same point is zero."""
        assert haversine_distance(0, 0, 0, 0) == pytest.approx(0, abs=0.01)

    def test_equator_distance(self):
        """Test distance along equator."""
        # 1 degree longitude at equator ≈ 111.32 km
        dist = haversine_distance(0, 0, 0, 1)
        assert dist == pytest.approx(111.32, abs=1)

    def test_new_york_to_london(self):
        """Test distance from New York to London."""
        # Known distance ~5570 km
        dist = haversine_distance(40.7128, -74.0060, 51.5074, -0.1278)
        assert dist == pytest.approx(5570, abs=10)

    def test_antipodal_points(self):
        """Test distance between antipodal points (opposite sides of Earth)."""
        dist = haversine_distance(0, 0, 0, 180)
        expected = EARTH_RADIUS_KM * 3.14159  # Half circumference
        assert dist == pytest.approx(expected, abs=10)


class TestClampAndWrap:
    """Tests for clamp, clamp_lat, wrap_lon and lon_delta."""

    def test_clamp(self):
        """Test clamping into a range."""
        assert clamp(5, 0, 1) == 1
        assert clamp(-5, 0, 1) == 0
        assert clamp(0.5, 0, 1) == 0.5

    def test_clamp_lat(self):
        """Test latitude clamp to +/- 89 degrees."""
        assert clamp_lat(90.0) == 89.0
        assert clamp_lat(-95.0) == -89.0
        assert clamp_lat(45.0) == 45.0

    @pytest.mark.parametrize(
        "lon,expected",
        [(0.0, 0.0), (180.0, 180.0), (-180.0, -180.0), (190.0, -170.0), (-190.0, 170.0), (540.0, 180.0), (360.0, 0.0)],
    )
    def test_wrap_lon(self, lon, expected):
        """Test longitude wrapping into [-180, 180]."""
        assert wrap_lon(lon) == pytest.approx(expected)

    def test_lon_delta_across_dateline(self):
        """Test longitude difference across the dateline."""
        assert lon_delta(179.0, -179.0) == pytest.approx(2.0)
        assert lon_delta(-10.0, 10.0) == pytest.approx(20.0)
        assert lon_delta(0.0, 180.0) == pytest.approx(180.0)


class TestVectorConversion:
    """Tests for lat_lon_to_vector and vector_to_lat_lon."""

    def test_north_pole_is_up(self):
        """Test that +Y points to the north pole."""
        assert lat_lon_to_vector(90.0, 0.0) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)

    def test_radius(self):
        """Test that the radius scales the vector."""
        assert chord_length(lat_lon_to_vector(12.0, 34.0, 2.5), (0, 0, 0)) == pytest.approx(2.5)

    def test_prime_meridian_on_x_axis(self):
        """Test the longitude orientation: lon 0 on +X, lon 180 on -X."""
        assert lat_lon_to_vector(0.0, 0.0) == pytest.approx((1.0, 0.0, 0.0), abs=1e-12)
        assert lat_lon_to_vector(0.0, 180.0) == pytest.approx((-1.0, 0.0, 0.0), abs=1e-12)

    @pytest.mark.parametrize("lat,lon", [(0.0, 0.0), (45.0, 90.0), (-33.9, 151.2), (60.0, -120.0), (-80.0, 179.0)])
    def test_round_trip(self, lat, lon):
        """Test that conversion back recovers the coordinates."""
        back_lat, back_lon = vector_to_lat_lon(lat_lon_to_vector(lat, lon, 3.0))
        assert back_lat == pytest.approx(lat, abs=1e-9)
        assert back_lon == pytest.approx(lon, abs=1e-9)

    def test_zero_vector(self):
        """Test the zero vector."""
        assert vector_to_lat_lon((0.0, 0.0, 0.0)) == (0.0, 0.0)


class TestVectorMath:
    """Tests for normalize, dot, chord_length and bezier_point."""

    def test_normalize(self):
        """Test unit vector and zero vector."""
        assert normalize((3.0, 0.0, 4.0)) == pytest.approx((0.6, 0.0, 0.8))
        assert normalize((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_dot(self):
        """Test dot products of unit vectors."""
        a = lat_lon_to_vector(0.0, 0.0)
        b = lat_lon_to_vector(0.0, 180.0)
        assert dot(a, a) == pytest.approx(1.0)
        assert dot(a, b) == pytest.approx(-1.0)

    def test_bezier_endpoints_and_midpoint(self):
        """Test quadratic Bezier evaluation."""
        p0, p1, p2 = (0.0, 0.0, 0.0), (1.0, 2.0, 0.0), (2.0, 0.0, 0.0)
        assert bezier_point(p0, p1, p2, 0.0) == pytest.approx(p0)
        assert bezier_point(p0, p1, p2, 1.0) == pytest.approx(p2)
        assert bezier_point(p0, p1, p2, 0.5) == pytest.approx((1.0, 1.0, 0.0))


class TestSpacingDistance:
    """Tests for spacing_distance and grid_index."""

    def test_equator(self):
        """Test that the metric is plain degrees on the equator."""
        assert spacing_distance(0.0, 0.0, 3.0, 4.0, 0.18) == pytest.approx(5.0)

    def test_latitude_correction(self):
        """Test longitude scaling by cos(latitude)."""
        assert spacing_distance(60.0, 0.0, 60.0, 2.0, 0.18) == pytest.approx(1.0)

    def test_cos_floor(self):
        """Test that the correction is floored near the poles."""
        assert spacing_distance(89.0, 0.0, 89.0, 10.0, 0.18) == pytest.approx(1.8)

    def test_grid_index(self):
        """Test quantization, including negative values."""
        assert grid_index(0.0, -90.0, 1.0) == 90
        assert grid_index(-89.5, -90.0, 1.0) == 0
        assert grid_index(-90.5, -90.0, 1.0) == -1
