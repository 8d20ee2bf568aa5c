"""Tests for geometric predicates and contour preparation."""

import math

import pytest

from skeletonizer.core.geometry import (
    approx_equal,
    approx_equal_vec,
    is_point_at_infinity,
    line_distance,
    line_intersection,
    normalize_contour,
    orient,
    prepare_contour,
    ray_intersection,
    signed_area,
    window,
)
from skeletonizer.domain import Ray, Segment, Vec2

SQUARE_CCW = [Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10)]


class TestWindow:
    """Tests for the closed-loop triple iterator."""

    def test_window_wraps(self):
        assert list(window([1, 2, 3])) == [(3, 1, 2), (1, 2, 3), (2, 3, 1)]

    def test_window_empty(self):
        assert list(window([])) == []


class TestApproxEqual:
    """Tests for relative tolerance equality."""

    def test_exact(self):
        assert approx_equal(0.0, 0.0)
        assert approx_equal(5.0, 5.0)

    def test_relative(self):
        """Test that tolerance scales with magnitude."""
        assert approx_equal(1000.0, 1000.5)
        assert not approx_equal(1.0, 1.5)
        assert not approx_equal(0.0, 1e-9)

    def test_nan_never_equal(self):
        assert not approx_equal(math.nan, math.nan)
        assert not approx_equal(math.nan, 1.0)

    def test_vectors(self):
        assert approx_equal_vec(Vec2(20.0, 10.0), Vec2(20.0001, 10.0))
        assert not approx_equal_vec(Vec2(20.0, 10.0), Vec2(20.0, 11.0))


class TestOrientation:
    """Tests for signed area and orientation."""

    def test_signed_area_ccw(self):
        assert signed_area(SQUARE_CCW) == 100.0

    def test_signed_area_cw(self):
        assert signed_area(list(reversed(SQUARE_CCW))) == -100.0

    def test_signed_area_degenerate(self):
        assert signed_area([Vec2(0, 0), Vec2(1, 1)]) == 0.0

    def test_orient_keeps_matching_winding(self):
        assert orient(SQUARE_CCW, counter_clockwise=True) == SQUARE_CCW

    def test_orient_reverses(self):
        cw = list(reversed(SQUARE_CCW))
        assert orient(cw, counter_clockwise=True) == SQUARE_CCW
        assert orient(SQUARE_CCW, counter_clockwise=False) == cw


class TestNormalizeContour:
    """Tests for the normalization pre-pass."""

    def test_reverses_contour(self):
        """Test that a clean contour is only reversed."""
        assert normalize_contour(SQUARE_CCW) == list(reversed(SQUARE_CCW))

    def test_removes_collinear_point(self):
        contour = [Vec2(0, 0), Vec2(5, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10)]
        assert normalize_contour(contour) == list(reversed(SQUARE_CCW))

    def test_removes_near_duplicate(self):
        """Test that only one of two nearly equal points survives."""
        contour = [Vec2(0, 0), Vec2(10, 0), Vec2(10.0001, 0.0), Vec2(10, 10), Vec2(0, 10)]
        result = normalize_contour(contour)
        assert len(result) == 4
        assert Vec2(0, 0) in result
        assert Vec2(10, 10) in result

    def test_removes_wrapping_duplicate(self):
        """Test that a repeated closing point is dropped."""
        contour = [*SQUARE_CCW, Vec2(0, 0)]
        assert len(normalize_contour(contour)) == 4

    def test_second_pass_removes_nothing(self):
        """Test that an already normalized contour keeps every point."""
        contour = [
            Vec2(0, 0), Vec2(5, 0), Vec2(10, 0), Vec2(10.0001, 0.0),
            Vec2(10, 10), Vec2(0, 10), Vec2(0, 0),
        ]
        once = normalize_contour(contour)
        twice = normalize_contour(once)
        assert len(twice) == len(once)
        assert set(twice) == set(once)

    def test_prepare_contour_orients(self):
        """Test coercion, orientation and normalization together."""
        cw_pairs = [(0, 10), (10, 10), (10, 0), (0, 0)]
        outer = prepare_contour(cw_pairs, counter_clockwise=True)
        # Outer boundaries end up clockwise after the internal reversal
        assert signed_area(outer) < 0
        hole = prepare_contour(cw_pairs, counter_clockwise=False)
        assert signed_area(hole) > 0


class TestIntersections:
    """Tests for ray and line intersection."""

    def test_ray_intersection(self):
        a = Ray(Vec2(0, 0), Vec2(1, 1))
        b = Ray(Vec2(10, 0), Vec2(-1, 1))
        assert ray_intersection(a, b) == Vec2(5, 5)

    def test_ray_intersection_behind(self):
        """Test that rays pointing away from each other do not meet."""
        a = Ray(Vec2(0, 0), Vec2(-1, -1))
        b = Ray(Vec2(10, 0), Vec2(-1, 1))
        assert ray_intersection(a, b) is None

    def test_ray_intersection_parallel(self):
        a = Ray(Vec2(0, 0), Vec2(1, 0))
        b = Ray(Vec2(0, 1), Vec2(2, 0))
        assert ray_intersection(a, b) is None

    def test_ray_intersection_degenerate(self):
        """Test that a NaN direction never intersects."""
        a = Ray(Vec2(0, 0), Vec2(math.nan, math.nan))
        b = Ray(Vec2(10, 0), Vec2(-1, 1))
        assert ray_intersection(a, b) is None

    def test_line_intersection_extends_segments(self):
        a = Segment(Vec2(0, 0), Vec2(1, 0))
        b = Segment(Vec2(5, 1), Vec2(5, 2))
        assert line_intersection(a, b) == Vec2(5, 0)

    def test_line_intersection_parallel(self):
        a = Segment(Vec2(0, 0), Vec2(1, 0))
        b = Segment(Vec2(0, 1), Vec2(1, 1))
        assert line_intersection(a, b) is None


class TestDistances:
    """Tests for distances and sentinels."""

    def test_line_distance(self):
        edge = Segment(Vec2(0, 0), Vec2(10, 0))
        assert line_distance(edge, Vec2(5, 5)) == 5.0
        # Measured against the infinite line, not the segment
        assert line_distance(edge, Vec2(50, -3)) == 3.0

    def test_line_distance_zero_length(self):
        edge = Segment(Vec2(1, 1), Vec2(1, 1))
        assert line_distance(edge, Vec2(4, 5)) == 5.0

    def test_point_at_infinity(self):
        assert is_point_at_infinity(Vec2(1e6, 0))
        assert is_point_at_infinity(Vec2(math.inf, 0))
        assert is_point_at_infinity(Vec2(math.nan, 0))
        assert not is_point_at_infinity(Vec2(1000, 1000))

    @pytest.mark.parametrize("threshold", [1e4, 1e8])
    def test_point_at_infinity_threshold(self, threshold):
        assert is_point_at_infinity(Vec2(200, 0), threshold) == (40000 > threshold)
