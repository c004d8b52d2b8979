"""Unit tests for helpers/geometry.py: hulls, smoothing, centroids, fallback radii."""

import math
import re

import pytest

from opinion_landscape.helpers.geometry import (
    Point2D,
    _bezier_controls,
    compute_centroid,
    compute_convex_hull,
    compute_smoothed_hull,
    estimate_radius,
    is_counter_clockwise,
    smooth_hull_path,
)
from opinion_landscape.helpers.validation import InvalidArgumentError

pytestmark = pytest.mark.unit


def _segments(path):
    """Parse 'M..C..C..Z' into (start, [(c1, c2, end), ...])."""
    start = tuple(float(v) for v in re.match(r"M([^C]+)", path).group(1).split(","))
    segments = []
    for body in re.findall(r"C([^CZ]+)", path):
        nums = [float(v) for v in body.split(",")]
        segments.append(((nums[0], nums[1]), (nums[2], nums[3]), (nums[4], nums[5])))
    return start, segments


class TestIsCounterClockwise:
    def test_left_turn(self):
        assert is_counter_clockwise(Point2D(0, 0), Point2D(1, 0), Point2D(0, 1)) is True

    def test_right_turn(self):
        assert is_counter_clockwise(Point2D(0, 0), Point2D(0, 1), Point2D(1, 0)) is False

    def test_collinear_is_not_ccw(self):
        assert is_counter_clockwise(Point2D(0, 0), Point2D(1, 1), Point2D(2, 2)) is False


class TestComputeConvexHull:
    def test_empty_list(self):
        assert compute_convex_hull([]) == []

    def test_single_point(self):
        assert compute_convex_hull([Point2D(5, 5)]) == []

    def test_two_points(self):
        assert compute_convex_hull([Point2D(0, 0), Point2D(1, 1)]) == []

    def test_collinear_horizontal(self):
        pts = [Point2D(0, 0), Point2D(1, 0), Point2D(2, 0), Point2D(7, 0)]
        assert compute_convex_hull(pts) == []

    def test_collinear_diagonal_unsorted(self):
        pts = [Point2D(3, 3), Point2D(0, 0), Point2D(-2, -2), Point2D(1, 1)]
        assert compute_convex_hull(pts) == []

    def test_identical_points(self):
        pts = [Point2D(2, 2)] * 4
        assert compute_convex_hull(pts) == []

    def test_square_with_interior_point(self, square_with_center):
        hull = compute_convex_hull(square_with_center)
        assert hull == [Point2D(0, 0), Point2D(10, 0), Point2D(10, 10), Point2D(0, 10)]

    def test_triangle_in_ccw_order(self):
        pts = [Point2D(2, 3), Point2D(4, 0), Point2D(0, 0)]
        assert compute_convex_hull(pts) == [Point2D(0, 0), Point2D(4, 0), Point2D(2, 3)]

    def test_anchor_tie_broken_by_min_x(self):
        pts = [Point2D(5, 0), Point2D(3, 4), Point2D(0, 0)]
        hull = compute_convex_hull(pts)
        assert hull[0] == Point2D(0, 0)

    def test_collinear_edge_points_dropped(self):
        """Points lying on an edge (first ray and last ray) are not hull vertices."""
        pts = [
            Point2D(0, 0), Point2D(5, 0), Point2D(10, 0),
            Point2D(10, 10), Point2D(0, 10), Point2D(0, 5),
        ]
        hull = compute_convex_hull(pts)
        assert hull == [Point2D(0, 0), Point2D(10, 0), Point2D(10, 10), Point2D(0, 10)]

    def test_duplicate_points(self):
        pts = [Point2D(0, 0), Point2D(0, 0), Point2D(1, 0), Point2D(0, 1)]
        hull = compute_convex_hull(pts)
        assert hull == [Point2D(0, 0), Point2D(1, 0), Point2D(0, 1)]

    def test_all_points_on_hull(self):
        """Regular pentagon, all 5 points on the hull."""
        pts = [
            Point2D(round(math.cos(2 * math.pi * i / 5), 4), round(math.sin(2 * math.pi * i / 5), 4))
            for i in range(5)
        ]
        assert len(compute_convex_hull(pts)) == 5

    def test_accepts_dicts_and_tuples(self):
        pts = [{"x": 0, "y": 0}, (4, 0), {"x": 2, "y": 3}]
        assert compute_convex_hull(pts) == [Point2D(0, 0), Point2D(4, 0), Point2D(2, 3)]

    def test_hull_is_ccw_subset_starting_at_anchor(self):
        pts = [Point2D(x, y) for x in range(-3, 4) for y in range(-2, 3)]
        pts += [Point2D(6 * math.cos(t / 3), 4 * math.sin(t / 3)) for t in range(19)]
        hull = compute_convex_hull(pts)

        assert len(hull) >= 3
        assert hull[0] == min(pts, key=lambda p: (p.y, p.x))
        assert all(p in pts for p in hull)
        n = len(hull)
        for i in range(n):
            assert is_counter_clockwise(hull[i], hull[(i + 1) % n], hull[(i + 2) % n])

    @pytest.mark.parametrize("extra", [[], [Point2D(1, 1)], [Point2D(-1, 2), Point2D(0.5, 0.5)]])
    def test_closing_turn_ccw_with_rounding_noise(self, extra):
        """Nearly collinear points on the last ray never leave a non-convex closing turn."""
        pts = [Point2D(0, -0.4), Point2D(-0.1, -0.30000000000000004), Point2D(-0.4, 0)] + extra
        hull = compute_convex_hull(pts)

        assert hull == [] or len(hull) >= 3
        n = len(hull)
        for i in range(n):
            assert is_counter_clockwise(hull[i], hull[(i + 1) % n], hull[(i + 2) % n])

    def test_nan_coordinate_raises(self):
        with pytest.raises(InvalidArgumentError):
            compute_convex_hull([Point2D(0, 0), Point2D(float("nan"), 1), Point2D(1, 1)])

    def test_infinite_coordinate_raises(self):
        with pytest.raises(InvalidArgumentError):
            compute_convex_hull([{"x": 0, "y": float("inf")}])

    def test_malformed_point_raises(self):
        with pytest.raises(InvalidArgumentError):
            compute_convex_hull([{"x": 1}])


class TestSmoothHullPath:
    def test_fewer_than_3_points_is_empty(self):
        assert smooth_hull_path([]) == ""
        assert smooth_hull_path([Point2D(0, 0), Point2D(1, 1)]) == ""

    def test_closed_path_shape(self):
        hull = [Point2D(0, 0), Point2D(10, 0), Point2D(10, 10), Point2D(0, 10)]
        path = smooth_hull_path(hull)
        assert path.startswith("M0,0")
        assert path.endswith("Z")
        assert path.count("C") == 4

    def test_passes_through_every_vertex_in_order(self):
        hull = [Point2D(0, 0), Point2D(4, 0), Point2D(2, 3)]
        start, segments = _segments(smooth_hull_path(hull))
        assert start == (0.0, 0.0)
        ends = [seg[2] for seg in segments]
        assert ends == [(4.0, 0.0), (2.0, 3.0), (0.0, 0.0)]

    def test_tangent_continuous_at_vertices(self):
        """Incoming and outgoing control points sit on one line through each vertex."""
        hull = [Point2D(0, 0), Point2D(8, 1), Point2D(9, 7), Point2D(2, 6)]
        n = len(hull)
        for i in range(n):
            # span ending at hull[i] and span starting at hull[i]
            _, c_in = _bezier_controls(hull[i - 2], hull[i - 1], hull[i], hull[(i + 1) % n], 0.5)
            c_out, _ = _bezier_controls(hull[i - 1], hull[i], hull[(i + 1) % n], hull[(i + 2) % n], 0.5)
            v = hull[i]
            ax, ay = c_in.x - v.x, c_in.y - v.y
            bx, by = c_out.x - v.x, c_out.y - v.y
            assert ax * by - ay * bx == pytest.approx(0, abs=1e-9)
            assert ax * bx + ay * by < 0  # opposite sides of the vertex

    def test_uniform_square_controls(self):
        """With equal spans the control points are the classic 1/6 tangent offsets."""
        hull = [Point2D(0, 0), Point2D(10, 0), Point2D(10, 10), Point2D(0, 10)]
        c1, c2 = _bezier_controls(hull[3], hull[0], hull[1], hull[2], 0.5)
        assert (c1.x, c1.y) == pytest.approx((10 / 6, -10 / 6))
        assert (c2.x, c2.y) == pytest.approx((10 - 10 / 6, -10 / 6))


class TestComputeSmoothedHull:
    def test_none_for_two_points(self):
        assert compute_smoothed_hull([Point2D(0, 0), Point2D(3, 3)]) is None

    def test_none_for_collinear(self):
        assert compute_smoothed_hull([Point2D(0, 0), Point2D(1, 1), Point2D(2, 2)]) is None

    def test_hull_and_path(self, square_with_center):
        result = compute_smoothed_hull(square_with_center)
        assert result is not None
        assert len(result.hull) == 4
        assert result.path == smooth_hull_path(result.hull)

    def test_to_dict(self):
        result = compute_smoothed_hull([Point2D(0, 0), Point2D(4, 0), Point2D(2, 3)])
        data = result.to_dict()
        assert data["hull"][1] == {"x": 4.0, "y": 0.0}
        assert data["path"].startswith("M")


class TestEstimateRadius:
    def test_empty(self):
        assert estimate_radius([]) == 30

    def test_single_point(self):
        assert estimate_radius([Point2D(100, -4)]) == 40

    def test_two_close_points_use_floor(self):
        assert estimate_radius([Point2D(0, 0), Point2D(10, 0)]) == 50

    def test_two_far_points(self):
        assert estimate_radius([Point2D(0, 0), Point2D(200, 0)]) == pytest.approx(120)

    def test_small_cluster_uses_floor(self, square_with_center):
        assert estimate_radius(square_with_center) == 60

    def test_large_cluster_pads_max_distance(self):
        pts = [Point2D(0, 0), Point2D(100, 0), Point2D(0, 100), Point2D(100, 100)]
        assert estimate_radius(pts) == pytest.approx(50 * math.sqrt(2) + 20)

    def test_collinear_points_still_get_radius(self):
        pts = [Point2D(0, 0), Point2D(100, 0), Point2D(200, 0)]
        assert estimate_radius(pts) == pytest.approx(120)


class TestComputeCentroid:
    def test_empty_returns_origin(self):
        assert compute_centroid([]) == Point2D(0.0, 0.0)

    def test_two_points_midpoint(self):
        assert compute_centroid([Point2D(0, 0), Point2D(4, 4)]) == Point2D(2.0, 2.0)

    def test_rounding(self):
        pts = [Point2D(0, 0), Point2D(1, 0), Point2D(1, 1)]
        assert compute_centroid(pts) == Point2D(0.6667, 0.3333)
