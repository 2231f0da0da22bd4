"""Tests for orthogonal connector routing."""

import itertools

import pytest

from connectordraw.elbow import (
    move_segment,
    route_elbow,
    segment_is_draggable,
    stub_point,
)
from connectordraw.anchors import resolve_anchor
from connectordraw.types import Anchor, Box, Point, ShapeKind, Side


def _full_path(start, end, start_side, end_side):
    return [start, *route_elbow(start, end, start_side, end_side), end]


def _enters(box, a, b):
    """True when the axis-aligned segment a-b passes through the box interior."""
    lo_x, hi_x = sorted((a.x, b.x))
    lo_y, hi_y = sorted((a.y, b.y))
    return (
        lo_x < box.x + box.width
        and hi_x > box.x
        and lo_y < box.y + box.height
        and hi_y > box.y
    )


class TestStubs:
    def test_stub_points_outward(self):
        anchor = Point(10, 10)
        assert stub_point(anchor, Side.TOP) == Point(10, -10)
        assert stub_point(anchor, Side.BOTTOM) == Point(10, 30)
        assert stub_point(anchor, Side.LEFT) == Point(-10, 10)
        assert stub_point(anchor, Side.RIGHT, 5) == Point(15, 10)


class TestParallelSides:
    def test_same_side_makes_u_turn_past_both_stubs(self):
        route = route_elbow(Point(0, 0), Point(100, 50), Side.BOTTOM, Side.BOTTOM)
        assert route == [Point(0, 20), Point(0, 70), Point(100, 70), Point(100, 70)]

    def test_same_top_side_bulges_upward(self):
        route = route_elbow(Point(0, 0), Point(100, 50), Side.TOP, Side.TOP)
        assert route[1] == Point(0, -20)
        assert route[2] == Point(100, -20)

    def test_opposite_vertical_sides_use_midpoint_channel(self):
        route = route_elbow(Point(0, 0), Point(100, 100), Side.BOTTOM, Side.TOP)
        assert route == [Point(0, 20), Point(0, 50), Point(100, 50), Point(100, 80)]

    def test_opposite_horizontal_sides_use_midpoint_channel(self):
        route = route_elbow(Point(0, 0), Point(100, 60), Side.RIGHT, Side.LEFT)
        assert route == [Point(20, 0), Point(50, 0), Point(50, 60), Point(80, 60)]

    @pytest.mark.parametrize(
        "start_box, end_box, start_side, end_side",
        [
            # U-turn with the start shape below the end shape.
            (Box(0, 200, 100, 50), Box(200, 0, 100, 50), Side.BOTTOM, Side.BOTTOM),
            # U-turn with the start shape above the end shape.
            (Box(0, 0, 100, 50), Box(200, 200, 100, 50), Side.BOTTOM, Side.BOTTOM),
            # Z-shape with the start shape above the end shape.
            (Box(0, 0, 100, 50), Box(200, 200, 100, 50), Side.BOTTOM, Side.TOP),
            (Box(0, 0, 100, 50), Box(300, 100, 100, 50), Side.RIGHT, Side.RIGHT),
        ],
    )
    def test_channel_runs_outside_both_shapes(self, start_box, end_box, start_side, end_side):
        start = resolve_anchor(start_box, ShapeKind.RECTANGLE, Anchor(start_side))
        end = resolve_anchor(end_box, ShapeKind.RECTANGLE, Anchor(end_side))
        route = route_elbow(start, end, start_side, end_side)

        channel = (route[1], route[2])
        for box in (start_box, end_box):
            assert not _enters(box, *channel)

        path = [start, *route, end]
        for a, b in zip(path, path[1:]):
            assert not _enters(start_box, a, b)
            assert not _enters(end_box, a, b)


class TestOrthogonalSides:
    def test_single_corner(self):
        route = route_elbow(Point(0, 0), Point(100, 100), Side.BOTTOM, Side.LEFT)
        assert route == [Point(0, 20), Point(0, 100), Point(80, 100)]

    def test_backtracking_corner_is_replaced_by_detour(self):
        route = route_elbow(Point(0, 100), Point(100, 0), Side.BOTTOM, Side.LEFT)
        assert route == [Point(0, 120), Point(80, 120), Point(80, 0)]

    def test_route_never_doubles_back_into_start_stub(self):
        start = Point(0, 100)
        route = route_elbow(start, Point(100, 0), Side.BOTTOM, Side.LEFT)
        assert all(point.y >= route[0].y for point in route[1:-1])


class TestRouteProperties:
    @pytest.mark.parametrize(
        "start_side, end_side",
        list(itertools.product(list(Side), repeat=2)),
    )
    @pytest.mark.parametrize(
        "end",
        [Point(200, 150), Point(-150, 80), Point(40, -200), Point(0, 0)],
    )
    def test_every_segment_is_axis_aligned(self, start_side, end_side, end):
        path = _full_path(Point(0, 0), end, start_side, end_side)
        for a, b in zip(path, path[1:]):
            assert a.x == b.x or a.y == b.y

    @pytest.mark.parametrize(
        "start, end, start_side, end_side",
        [
            (Point(0, 0), Point(100, 100), Side.BOTTOM, Side.TOP),
            (Point(0, 0), Point(100, 100), Side.BOTTOM, Side.LEFT),
            (Point(0, 100), Point(100, 0), Side.BOTTOM, Side.LEFT),
            (Point(0, 0), Point(100, 50), Side.RIGHT, Side.RIGHT),
            (Point(0, 0), Point(-80, 120), Side.LEFT, Side.TOP),
        ],
    )
    def test_swapping_ends_reverses_route(self, start, end, start_side, end_side):
        forward = route_elbow(start, end, start_side, end_side)
        backward = route_elbow(end, start, end_side, start_side)
        assert backward == list(reversed(forward))

    def test_unknown_sides_fall_back_to_right(self):
        assert route_elbow(Point(0, 0), Point(100, 0), "up", "down") == route_elbow(
            Point(0, 0), Point(100, 0), Side.RIGHT, Side.RIGHT
        )


class TestSegmentDragging:
    def test_move_horizontal_segment(self):
        waypoints = [Point(0, 20), Point(0, 50), Point(100, 50), Point(100, 80)]
        moved = move_segment(waypoints, 1, "y", 70)
        assert moved == [Point(0, 20), Point(0, 70), Point(100, 70), Point(100, 80)]
        assert waypoints[1] == Point(0, 50)

    def test_move_vertical_segment(self):
        waypoints = [Point(20, 0), Point(50, 0), Point(50, 60), Point(80, 60)]
        moved = move_segment(waypoints, 1, "x", 35)
        assert moved[1] == Point(35, 0)
        assert moved[2] == Point(35, 60)

    def test_move_out_of_range_is_noop(self):
        waypoints = [Point(0, 20), Point(0, 50)]
        assert move_segment(waypoints, 1, "y", 10) == waypoints
        assert move_segment(waypoints, -1, "y", 10) == waypoints

    def test_middle_segment_is_draggable(self):
        points = [
            Point(0, 0), Point(0, 20), Point(0, 50),
            Point(100, 50), Point(100, 80), Point(100, 100),
        ]
        assert segment_is_draggable(points, 2)

    def test_segment_collinear_with_neighbour_is_not_draggable(self):
        points = [
            Point(0, 0), Point(0, 20), Point(0, 50),
            Point(100, 50), Point(100, 80), Point(100, 100),
        ]
        assert not segment_is_draggable(points, 0)
        assert not segment_is_draggable(points, 1)

    def test_diagonal_segment_is_not_draggable(self):
        assert not segment_is_draggable([Point(0, 0), Point(10, 10)], 0)

    def test_out_of_range_index(self):
        assert not segment_is_draggable([Point(0, 0), Point(10, 0)], 1)
