"""
Unit tests for the Mercator projection.

pyproj's spherical Mercator (sphere radius 1/2π) serves as an independent
reference for the closed-form formulas.
"""

import math

import numpy as np
import pyproj
import pytest

from pointdensity.core.geo import Cartesian, Geographic, MercatorProjection, mercator
from pointdensity.utils.error_handling import LengthMismatchError


@pytest.fixture
def projection():
    return mercator()


class TestSinglePoint:
    """Test single-point forward and inverse projection."""

    def test_origin(self, projection):
        """Test (0, 0) maps to the origin and back."""
        point = projection.forward_single(Geographic(0.0, 0.0))
        assert point.x == pytest.approx(0.0, abs=1e-15)
        assert point.y == pytest.approx(0.0, abs=1e-15)
        location = projection.inverse_single(Cartesian(0.0, 0.0))
        assert location.longitude == pytest.approx(0.0, abs=1e-15)
        assert location.latitude == pytest.approx(0.0, abs=1e-15)

    def test_longitude_scales_to_unit_turn(self, projection):
        """Test longitude π maps to x = 0.5."""
        point = projection.forward_single(Geographic(math.pi, 0.0))
        assert point.x == pytest.approx(0.5)
        assert point.y == pytest.approx(0.0)

    def test_latitude_formula(self, projection):
        """Test y = ln(tan(π/4 + lat/2)) / 2π."""
        lat = 0.7
        expected = math.log(math.tan(math.pi / 4 + lat / 2)) / (2 * math.pi)
        assert projection.forward_single(Geographic(0.0, lat)).y == pytest.approx(expected)

    def test_northern_latitudes_positive(self, projection):
        """Test y grows with latitude and is symmetric about the equator."""
        north = projection.forward_single(Geographic(0.0, 0.5)).y
        south = projection.forward_single(Geographic(0.0, -0.5)).y
        assert north > 0
        assert south == pytest.approx(-north)

    @pytest.mark.parametrize("lon", [-math.pi, -1.0, 0.0, 0.3, math.pi])
    @pytest.mark.parametrize("lat", [-1.5, -0.8, 0.0, 0.25, 1.2, 1.5])
    def test_round_trip(self, projection, lon, lat):
        """Test inverse(forward(p)) reconstructs p for |lat| < π/2."""
        restored = projection.inverse_single(projection.forward_single(Geographic(lon, lat)))
        assert restored.longitude == pytest.approx(lon, abs=1e-12)
        assert restored.latitude == pytest.approx(lat, abs=1e-12)


class TestBatch:
    """Test batch projection and its length contract."""

    def test_forward_returns_new_list(self, projection):
        """Test batch forward without destination returns projected points in order."""
        src = [Geographic(0.0, 0.0), Geographic(math.pi, 0.0)]
        result = projection.forward(src)
        assert result == [projection.forward_single(g) for g in src]

    def test_forward_fills_destination(self, projection):
        """Test batch forward writes into a same-length destination in place."""
        src = [Geographic(math.pi, 0.0), Geographic(-math.pi, 0.0)]
        dst = [Cartesian(9.0, 9.0), Cartesian(9.0, 9.0)]
        result = projection.forward(src, dst)
        assert result is dst
        assert dst[0].x == pytest.approx(0.5)
        assert dst[1].x == pytest.approx(-0.5)

    def test_forward_length_mismatch(self, projection):
        """Test mismatched destination length raises before any write."""
        src = [Geographic(0.1, 0.1), Geographic(0.2, 0.2)]
        sentinel = Cartesian(9.0, 9.0)
        dst = [sentinel]
        with pytest.raises(LengthMismatchError) as exc_info:
            projection.forward(src, dst)
        assert exc_info.value.code == "length_mismatch"
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1
        assert dst == [sentinel]

    def test_inverse_length_mismatch(self, projection):
        """Test mismatched destination length raises for inverse batches."""
        dst = [Geographic(0.0, 0.0)] * 3
        with pytest.raises(LengthMismatchError):
            projection.inverse([Cartesian(0.0, 0.0)], dst)
        assert dst == [Geographic(0.0, 0.0)] * 3

    def test_inverse_batch_round_trip(self, projection):
        """Test batch inverse undoes batch forward."""
        src = [Geographic(0.1 * i, 0.05 * i) for i in range(-10, 11)]
        restored = projection.inverse(projection.forward(src))
        for original, back in zip(src, restored):
            assert back.longitude == pytest.approx(original.longitude, abs=1e-12)
            assert back.latitude == pytest.approx(original.latitude, abs=1e-12)

    def test_empty_batch(self, projection):
        """Test empty batches are allowed."""
        assert projection.forward([]) == []
        assert projection.inverse([], []) == []


class TestArrays:
    """Test vectorized array projection."""

    def test_arrays_match_single(self, projection):
        """Test array projection agrees with per-point projection."""
        lon = np.linspace(-3.0, 3.0, 7)
        lat = np.linspace(-1.4, 1.4, 7)
        x, y = projection.forward_arrays(lon, lat)
        for i in range(7):
            point = projection.forward_single(Geographic(lon[i], lat[i]))
            assert x[i] == pytest.approx(point.x)
            assert y[i] == pytest.approx(point.y)

    def test_arrays_round_trip(self, projection):
        """Test inverse_arrays undoes forward_arrays."""
        lon = np.linspace(-math.pi, math.pi, 50)
        lat = np.linspace(-1.5, 1.5, 50)
        back_lon, back_lat = projection.inverse_arrays(*projection.forward_arrays(lon, lat))
        np.testing.assert_allclose(back_lon, lon, atol=1e-12)
        np.testing.assert_allclose(back_lat, lat, atol=1e-12)

    def test_arrays_length_mismatch(self, projection):
        """Test unequal coordinate arrays are rejected."""
        with pytest.raises(LengthMismatchError):
            projection.forward_arrays([0.0, 0.1], [0.0])
        with pytest.raises(LengthMismatchError):
            projection.inverse_arrays([0.0], [0.0, 0.1, 0.2])

    def test_matches_pyproj_spherical_mercator(self, projection):
        """Test formulas agree with pyproj +proj=merc on a sphere of radius 1/2π."""
        reference = pyproj.Proj(proj="merc", R=1.0 / (2.0 * math.pi))
        lon = np.linspace(-3.0, 3.0, 13)
        lat = np.linspace(-1.3, 1.3, 13)
        ref_x, ref_y = reference(np.degrees(lon), np.degrees(lat))
        x, y = projection.forward_arrays(lon, lat)
        np.testing.assert_allclose(x, ref_x, rtol=1e-9, atol=1e-12)
        np.testing.assert_allclose(y, ref_y, rtol=1e-9, atol=1e-12)


def test_factory_returns_projection():
    """Test mercator() builds a MercatorProjection."""
    assert isinstance(mercator(), MercatorProjection)
