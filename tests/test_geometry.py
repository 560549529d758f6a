"""Tests for slider curve endpoint resolution."""

import math

import pytest

from osu_parser.geometry.curves import get_end_point
from osu_parser.schemas.beatmap import CurveType


class TestLinear:
    def test_midpoint(self):
        assert get_end_point(CurveType.LINEAR, 50, [(0, 0), (100, 0)]) == pytest.approx((50, 0))

    def test_across_segments(self):
        end = get_end_point(CurveType.LINEAR, 150, [(0, 0), (100, 0), (100, 100)])
        assert end == pytest.approx((100, 50))

    def test_extends_past_last_point(self):
        assert get_end_point(CurveType.LINEAR, 150, [(0, 0), (100, 0)]) == pytest.approx((150, 0))


class TestBezier:
    def test_collinear_control_points(self):
        end = get_end_point(CurveType.BEZIER, 100, [(0, 0), (50, 0), (100, 0)])
        assert end == pytest.approx((100, 0), abs=1e-6)

    def test_repeated_point_splits_segments(self):
        points = [(0, 0), (100, 0), (100, 0), (100, 100)]
        end = get_end_point(CurveType.BEZIER, 150, points)
        assert end == pytest.approx((100, 50), abs=1e-6)

    def test_many_control_points(self):
        points = [(float(i), 0.0) for i in range(1200)]
        end = get_end_point(CurveType.BEZIER, 300, points)
        assert end == pytest.approx((300, 0), abs=1e-6)


class TestPassThrough:
    def test_half_circle(self):
        end = get_end_point(
            CurveType.PASS_THROUGH, math.pi * 100, [(0, 0), (100, 100), (200, 0)],
        )
        assert end == pytest.approx((200, 0), abs=1e-6)

    def test_quarter_circle(self):
        end = get_end_point(
            CurveType.PASS_THROUGH, math.pi * 50, [(0, 0), (100, 100), (200, 0)],
        )
        assert end == pytest.approx((100, 100), abs=1e-6)

    def test_collinear_falls_back_to_bezier(self):
        end = get_end_point(CurveType.PASS_THROUGH, 100, [(0, 0), (50, 0), (100, 0)])
        assert end == pytest.approx((100, 0), abs=1e-6)


class TestCatmull:
    def test_straight_line(self):
        end = get_end_point(CurveType.CATMULL, 50, [(0, 0), (100, 0)])
        assert end == pytest.approx((50, 0), abs=1e-6)


class TestUnresolved:
    def test_unknown_curve(self):
        assert get_end_point(CurveType.UNKNOWN, 100, [(0, 0), (100, 0)]) is None

    def test_single_point(self):
        assert get_end_point(CurveType.LINEAR, 100, [(0, 0)]) is None

    def test_bad_length(self):
        assert get_end_point(CurveType.LINEAR, 0, [(0, 0), (100, 0)]) is None
        assert get_end_point(CurveType.LINEAR, math.nan, [(0, 0), (100, 0)]) is None

    def test_nan_point(self):
        assert get_end_point(CurveType.LINEAR, 10, [(0, 0), (math.nan, 0)]) is None

    def test_degenerate_path(self):
        assert get_end_point(CurveType.LINEAR, 10, [(5, 5), (5, 5)]) is None

    def test_overflowing_path(self):
        assert get_end_point(CurveType.LINEAR, 10, [(-1e308, 0), (1e308, 0)]) is None
