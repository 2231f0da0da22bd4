"""Tests for anchor resolution on shape outlines."""

import pytest

from connectordraw.anchors import nearest_side, resolve_anchor
from connectordraw.types import Anchor, Box, Point, ShapeKind, Side


@pytest.fixture
def box():
    return Box(0.0, 0.0, 100.0, 50.0)


class TestRectangleAnchors:
    @pytest.mark.parametrize(
        "side, expected",
        [
            (Side.TOP, Point(50, 0)),
            (Side.BOTTOM, Point(50, 50)),
            (Side.LEFT, Point(0, 25)),
            (Side.RIGHT, Point(100, 25)),
        ],
    )
    def test_side_midpoints(self, box, side, expected):
        assert resolve_anchor(box, ShapeKind.RECTANGLE, Anchor(side)) == expected

    def test_ellipse_and_diamond_share_midpoints(self, box):
        for shape in (ShapeKind.ELLIPSE, ShapeKind.DIAMOND):
            assert resolve_anchor(box, shape, Anchor(Side.RIGHT)) == Point(100, 25)

    def test_compensation_shifts_along_the_side(self, box):
        assert resolve_anchor(box, ShapeKind.RECTANGLE, Anchor(Side.TOP), 2.0) == Point(52, 0)
        assert resolve_anchor(box, ShapeKind.RECTANGLE, Anchor(Side.LEFT), 2.0) == Point(0, 27)

    def test_translation_moves_anchor_by_same_amount(self, box):
        moved = box.translated(30.0, 40.0)
        for side in Side:
            base = resolve_anchor(box, ShapeKind.RECTANGLE, Anchor(side))
            assert resolve_anchor(moved, ShapeKind.RECTANGLE, Anchor(side)) == Point(base.x + 30, base.y + 40)

    def test_offset_is_added(self, box):
        anchor = Anchor(Side.TOP, offset=Point(5, -3))
        assert resolve_anchor(box, ShapeKind.RECTANGLE, anchor) == Point(55, -3)


class TestSlantedShapes:
    def test_parallelogram_top_is_shifted_right(self, box):
        assert resolve_anchor(box, ShapeKind.PARALLELOGRAM, Anchor(Side.TOP)) == Point(60, 0)

    def test_parallelogram_other_sides(self, box):
        assert resolve_anchor(box, ShapeKind.PARALLELOGRAM, Anchor(Side.BOTTOM)) == Point(40, 50)
        assert resolve_anchor(box, ShapeKind.PARALLELOGRAM, Anchor(Side.LEFT)) == Point(10, 25)
        assert resolve_anchor(box, ShapeKind.PARALLELOGRAM, Anchor(Side.RIGHT)) == Point(90, 25)

    def test_trapezoid_sides_are_inset(self, box):
        assert resolve_anchor(box, ShapeKind.TRAPEZOID, Anchor(Side.TOP)) == Point(50, 0)
        assert resolve_anchor(box, ShapeKind.TRAPEZOID, Anchor(Side.LEFT)) == Point(10, 25)
        assert resolve_anchor(box, ShapeKind.TRAPEZOID, Anchor(Side.RIGHT)) == Point(90, 25)

    def test_document_bottom_sits_on_wave(self, box):
        assert resolve_anchor(box, ShapeKind.DOCUMENT, Anchor(Side.BOTTOM)) == Point(50, 47.5)

    def test_slanted_shapes_ignore_compensation(self, box):
        assert resolve_anchor(box, ShapeKind.PARALLELOGRAM, Anchor(Side.TOP), 2.0) == Point(60, 0)


class TestFallbacks:
    def test_unknown_side_resolves_as_right(self, box):
        assert resolve_anchor(box, ShapeKind.RECTANGLE, Anchor("north")) == Point(100, 25)

    def test_unknown_shape_uses_rectangle(self, box):
        assert resolve_anchor(box, "hexagon", Anchor(Side.TOP)) == Point(50, 0)

    def test_string_shape_is_accepted(self, box):
        assert resolve_anchor(box, "parallelogram", Anchor(Side.TOP)) == Point(60, 0)


class TestNearestSide:
    @pytest.mark.parametrize(
        "point, expected",
        [
            (Point(50, 5), Side.TOP),
            (Point(50, 45), Side.BOTTOM),
            (Point(5, 25), Side.LEFT),
            (Point(95, 25), Side.RIGHT),
        ],
    )
    def test_picks_closest_edge(self, box, point, expected):
        assert nearest_side(box, point) == expected

    def test_tie_prefers_top(self):
        square = Box(0, 0, 100, 100)
        assert nearest_side(square, Point(50, 50)) == Side.TOP
