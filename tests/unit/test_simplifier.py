"""Unit tests for Douglas-Peucker simplification."""

import math

import pytest

from handfont.core.simplifier import (
    douglas_peucker,
    perpendicular_distance,
    simplify_contour,
    simplify_contours,
)
from handfont.core.tracer import trace_contours
from handfont.domain import Bitmap, Contour, Point


def _square_bitmap() -> Bitmap:
    rows = [
        "".join("#" if 50 <= x < 150 and 50 <= y < 150 else "." for x in range(200))
        for y in range(200)
    ]
    return Bitmap.from_rows(rows)


def _ring_bitmap() -> Bitmap:
    rows = [
        "".join(
            "#" if 10 <= x < 50 and 10 <= y < 50 and not (18 <= x < 42 and 18 <= y < 42) else "."
            for x in range(60)
        )
        for y in range(60)
    ]
    return Bitmap.from_rows(rows)


def _assert_within_epsilon(original: list[Point], kept: list[Point], epsilon: float) -> None:
    """Check every dropped point lies within epsilon of the segment that replaced it."""
    indices = []
    position = 0
    for point in kept:
        position = original.index(point, position)
        indices.append(position)

    assert indices[0] == 0
    assert indices[-1] == len(original) - 1
    for first, last in zip(indices, indices[1:]):
        for i in range(first + 1, last):
            assert perpendicular_distance(original[i], original[first], original[last]) <= epsilon


class TestPerpendicularDistance:
    """Tests for point-to-segment distance."""

    def test_point_on_line(self):
        """Test a point on the segment has zero distance."""
        assert perpendicular_distance(Point(5, 0), Point(0, 0), Point(10, 0)) == 0.0

    def test_perpendicular(self):
        """Test distance perpendicular to the segment."""
        assert perpendicular_distance(Point(5, 3), Point(0, 0), Point(10, 0)) == 3.0

    def test_clamped_past_endpoint(self):
        """Test points beyond an endpoint measure to that endpoint."""
        assert perpendicular_distance(Point(13, 4), Point(0, 0), Point(10, 0)) == 5.0

    def test_degenerate_segment(self):
        """Test a zero-length segment measures to its start."""
        assert perpendicular_distance(Point(3, 4), Point(0, 0), Point(0, 0)) == 5.0


class TestDouglasPeucker:
    """Tests for open polyline simplification."""

    def test_short_input_unchanged(self):
        """Test two points or fewer are returned as-is."""
        points = [Point(0, 0), Point(1, 1)]
        assert douglas_peucker(points, 1.5) == points

    def test_collinear_points_removed(self):
        """Test interior collinear points are dropped."""
        points = [Point(x, 0) for x in range(10)]
        assert douglas_peucker(points, 1.5) == [Point(0, 0), Point(9, 0)]

    def test_corner_kept(self):
        """Test a sharp corner beyond epsilon is kept."""
        points = [Point(0, 0), Point(5, 0), Point(10, 0), Point(10, 5), Point(10, 10)]
        assert douglas_peucker(points, 1.5) == [Point(0, 0), Point(10, 0), Point(10, 10)]

    def test_small_deviation_removed(self):
        """Test a bump within epsilon is flattened."""
        points = [Point(0, 0), Point(5, 1), Point(10, 0)]
        assert douglas_peucker(points, 1.5) == [Point(0, 0), Point(10, 0)]

    def test_subset_in_order(self):
        """Test the result is an ordered subset with the same endpoints."""
        points = [Point(i, round(10 * math.sin(i / 5))) for i in range(60)]
        result = douglas_peucker(points, 1.0)
        assert result[0] == points[0]
        assert result[-1] == points[-1]
        indices = [points.index(p) for p in result]
        assert indices == sorted(indices)

    @pytest.mark.parametrize("epsilon", [0.5, 1.0, 1.5, 4.0])
    def test_dropped_points_within_epsilon(self, epsilon):
        """Test no dropped point is farther than epsilon from its kept neighbours' segment."""
        wave = [Point(i, round(12 * math.sin(i / 4) + 3 * math.cos(i / 2))) for i in range(120)]
        _assert_within_epsilon(wave, douglas_peucker(wave, epsilon), epsilon)

    def test_long_polyline_does_not_recurse(self):
        """Test very long inputs are handled without recursion limits."""
        points = [Point(i, (i % 2) * 5) for i in range(1500)]
        result = douglas_peucker(points, 1.0)
        assert len(result) == len(points)


class TestSimplifyContour:
    """Tests for closed contour simplification."""

    def test_traced_square_has_four_corners(self):
        """Test a traced 100x100 square simplifies to its four corners."""
        contour = trace_contours(_square_bitmap())[0]
        simplified = simplify_contour(contour, 1.5)
        assert simplified is not None
        assert list(simplified.points) == [
            Point(50, 50),
            Point(149, 50),
            Point(149, 149),
            Point(50, 149),
        ]

    def test_hole_flag_preserved(self):
        """Test simplification keeps the hole flag."""
        hole = Contour(
            points=(Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)),
            is_hole=True,
        )
        simplified = simplify_contour(hole, 1.5)
        assert simplified is not None
        assert simplified.is_hole

    def test_collapsed_contour_dropped(self):
        """Test a contour collapsing below 3 points returns None."""
        line = Contour(points=(Point(0, 0), Point(1, 0), Point(2, 0), Point(1, 0)))
        assert simplify_contour(line, 1.5) is None

    @pytest.mark.parametrize("epsilon", [0.5, 1.5, 5.0])
    def test_points_are_subset(self, epsilon):
        """Test simplified points come from the original contour."""
        contour = trace_contours(_square_bitmap())[0]
        simplified = simplify_contour(contour, epsilon)
        assert simplified is not None
        assert set(simplified.points) <= set(contour.points)

    @pytest.mark.parametrize("make_bitmap", [_square_bitmap, _ring_bitmap], ids=["square", "ring"])
    @pytest.mark.parametrize("epsilon", [0.5, 1.5, 5.0])
    def test_closed_contour_within_epsilon(self, make_bitmap, epsilon):
        """Test traced contours stay within epsilon of the original boundary."""
        for contour in trace_contours(make_bitmap()):
            simplified = simplify_contour(contour, epsilon)
            assert simplified is not None
            closed = list(contour.points) + [contour.points[0]]
            kept = list(simplified.points) + [contour.points[0]]
            _assert_within_epsilon(closed, kept, epsilon)

    def test_simplify_contours_drops_degenerate(self):
        """Test collapsed contours are filtered from the list."""
        square = Contour(points=(Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)))
        line = Contour(points=(Point(0, 0), Point(5, 0), Point(9, 0)))
        result = simplify_contours([square, line], 1.5)
        assert result == [square]
