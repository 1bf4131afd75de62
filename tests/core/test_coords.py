"""Tests for pixel <-> normalized coordinate mapping."""

import numpy as np
import pytest

from juliascope.core.coords import CoordinateMapper, half_min_extent


class TestHalfMinExtent:
    def test_uses_shorter_side(self):
        assert half_min_extent(200, 100) == 50.0
        assert half_min_extent(80, 120) == 40.0


class TestToNormalized:
    def test_default_center_is_midpoint(self):
        mapper = CoordinateMapper(output_size=(100, 100), source_size=(100, 100))
        assert mapper.center == (50.0, 50.0)
        assert mapper.to_normalized(50, 50) == (0.0, 0.0)

    def test_unit_is_half_of_shorter_side(self):
        mapper = CoordinateMapper(output_size=(200, 100), source_size=(200, 100))
        assert mapper.to_normalized(150, 50) == (1.0, 0.0)
        assert mapper.to_normalized(200, 50) == (2.0, 0.0)
        assert mapper.to_normalized(100, 0) == (0.0, -1.0)

    def test_custom_center(self):
        mapper = CoordinateMapper(output_size=(100, 100), source_size=(100, 100), center=(25, 75))
        assert mapper.to_normalized(25, 75) == (0.0, 0.0)
        assert mapper.to_normalized(75, 75) == (1.0, 0.0)

    def test_vectorized(self):
        mapper = CoordinateMapper(output_size=(100, 100), source_size=(100, 100))
        nx, ny = mapper.to_normalized(np.array([0.0, 100.0]), np.array([50.0, 50.0]))
        np.testing.assert_array_equal(nx, [-1.0, 1.0])
        np.testing.assert_array_equal(ny, [0.0, 0.0])


class TestToSource:
    def test_origin_maps_to_source_center(self):
        mapper = CoordinateMapper(output_size=(300, 300), source_size=(100, 80))
        assert mapper.to_source(0.0, 0.0) == (50.0, 40.0)

    def test_uses_source_unit(self):
        mapper = CoordinateMapper(output_size=(300, 300), source_size=(100, 80))
        assert mapper.to_source(1.0, 0.0) == (90.0, 40.0)
        assert mapper.to_source(0.0, -1.0) == (50.0, 0.0)

    def test_round_trip_same_extent(self):
        mapper = CoordinateMapper(output_size=(120, 90), source_size=(120, 90))
        px, py = 17.0, 63.0
        sx, sy = mapper.to_source(*mapper.to_normalized(px, py))
        assert sx == pytest.approx(px)
        assert sy == pytest.approx(py)


class TestNormalizedDistance:
    def test_exact_threshold_values(self):
        mapper = CoordinateMapper(output_size=(100, 100), source_size=(100, 100))
        assert mapper.normalized_distance(65, 50) == 0.3
        assert mapper.normalized_distance(50, 85) == 0.7

    def test_diagonal(self):
        mapper = CoordinateMapper(output_size=(100, 100), source_size=(100, 100))
        assert mapper.normalized_distance(100, 100) == pytest.approx(np.sqrt(2))
