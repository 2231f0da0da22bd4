"""Orthogonal (elbow) connector routing."""

from __future__ import annotations

from typing import List, Sequence

from .constants import STUB_LENGTH
from .types import Point, Side

# Segments whose endpoints differ by less than this on an axis count as aligned to it.
AXIS_TOLERANCE = 1.0


def stub_point(anchor: Point, side: Side, length: float = STUB_LENGTH) -> Point:
    """Move ``length`` units outward from ``anchor`` along ``side``'s normal."""
    dx, dy = Side.parse(side).outward
    return Point(anchor.x + dx * length, anchor.y + dy * length)


def _backtracks(corner: Point, stub: Point, side: Side) -> bool:
    dx, dy = side.outward
    travel = (corner.x - stub.x) * dx + (corner.y - stub.y) * dy
    return travel < 0


def route_elbow(
    start: Point,
    end: Point,
    start_side: Side,
    end_side: Side,
    stub_length: float = STUB_LENGTH,
) -> List[Point]:
    """Compute the interior of an orthogonal route between two anchors.

    Args:
        start: Anchor point the route leaves from.
        end: Anchor point the route arrives at.
        start_side: Side of the start shape, sets the first stub direction.
        end_side: Side of the end shape, sets the last stub direction.
        stub_length: Distance each stub extends before the route may turn.

    Returns:
        ``[start_stub, *corners, end_stub]``. The anchors themselves are not
        included; callers add them around the result.
    """
    start_side = Side.parse(start_side)
    end_side = Side.parse(end_side)
    s = stub_point(start, start_side, stub_length)
    e = stub_point(end, end_side, stub_length)

    if start_side.is_vertical == end_side.is_vertical:
        vertical = start_side.is_vertical
        if start_side is end_side:
            # U-turn: bulge past both stubs so the route clears both shapes.
            pick = max if start_side in (Side.BOTTOM, Side.RIGHT) else min
            channel = pick(s.y, e.y) if vertical else pick(s.x, e.x)
        else:
            channel = (s.y + e.y) / 2 if vertical else (s.x + e.x) / 2
        if vertical:
            corners = [Point(s.x, channel), Point(e.x, channel)]
        else:
            corners = [Point(channel, s.y), Point(channel, e.y)]
        return [s, *corners, e]

    if start_side.is_vertical:
        corner = Point(s.x, e.y)
        detour = Point(e.x, s.y)
    else:
        corner = Point(e.x, s.y)
        detour = Point(s.x, e.y)

    if _backtracks(corner, s, start_side) or _backtracks(corner, e, end_side):
        # Turn toward the end stub's own axis first instead of doubling back.
        corner = detour
    return [s, corner, e]


def move_segment(
    waypoints: Sequence[Point], index: int, axis: str, value: float
) -> List[Point]:
    """Shift the segment ``waypoints[index] -> waypoints[index + 1]``.

    A vertical segment moves along ``"x"``, a horizontal one along ``"y"``;
    both of its points take ``value`` on that axis. Out-of-range indexes
    return the waypoints unchanged.
    """
    points = list(waypoints)
    if index < 0 or index + 1 >= len(points):
        return points
    first, second = points[index], points[index + 1]
    if axis == "x":
        points[index] = Point(value, first.y)
        points[index + 1] = Point(value, second.y)
    elif axis == "y":
        points[index] = Point(first.x, value)
        points[index + 1] = Point(second.x, value)
    return points


def segment_is_draggable(points: Sequence[Point], index: int) -> bool:
    """Whether segment ``index`` of a polyline may be dragged sideways.

    Only axis-aligned segments qualify, and not when a neighbouring segment
    runs along the same axis: dragging would tear the collinear run apart.
    """
    if index < 0 or index + 1 >= len(points):
        return False
    p1, p2 = points[index], points[index + 1]
    is_vertical = abs(p1.x - p2.x) < AXIS_TOLERANCE
    is_horizontal = abs(p1.y - p2.y) < AXIS_TOLERANCE
    if not (is_vertical or is_horizontal):
        return False

    if index > 0:
        prev = points[index - 1]
        if (is_vertical and abs(prev.x - p1.x) < AXIS_TOLERANCE) or (
            is_horizontal and abs(prev.y - p1.y) < AXIS_TOLERANCE
        ):
            return False
    if index + 2 < len(points):
        nxt = points[index + 2]
        if (is_vertical and abs(p2.x - nxt.x) < AXIS_TOLERANCE) or (
            is_horizontal and abs(p2.y - nxt.y) < AXIS_TOLERANCE
        ):
            return False
    return True
