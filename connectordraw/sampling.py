"""Arc-length parameterisation of polylines."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .types import Point


@dataclass(frozen=True)
class PathPosition:
    """Where fraction ``t`` of a polyline's length falls."""

    point: Point
    segment_index: int
    distance: float
    total: float


def segment_lengths(points: Sequence[Point]) -> List[float]:
    return [
        math.hypot(points[i + 1].x - points[i].x, points[i + 1].y - points[i].y)
        for i in range(len(points) - 1)
    ]


def cumulative_lengths(points: Sequence[Point]) -> List[float]:
    """Distance from the first point to every point, starting with 0."""
    result = [0.0] if points else []
    running = 0.0
    for length in segment_lengths(points):
        running += length
        result.append(running)
    return result


def polyline_length(points: Sequence[Point]) -> float:
    return sum(segment_lengths(points))


def locate(points: Sequence[Point], t: float) -> PathPosition:
    """Find the point at fraction ``t`` of the polyline's total length.

    Empty input resolves to the origin and zero-length input to the first
    point. Zero-length segments are skipped, so repeated points never cause
    a division by zero.
    """
    if not points:
        return PathPosition(Point(0.0, 0.0), 0, 0.0, 0.0)
    lengths = segment_lengths(points)
    total = sum(lengths)
    if total == 0:
        return PathPosition(points[0], 0, 0.0, 0.0)
    if t <= 0:
        return PathPosition(points[0], 0, 0.0, total)
    if t >= 1:
        return PathPosition(points[-1], len(points) - 2, total, total)

    target = t * total
    walked = 0.0
    for index, length in enumerate(lengths):
        if length == 0:
            continue
        if walked + length >= target:
            p1, p2 = points[index], points[index + 1]
            fraction = (target - walked) / length
            if fraction <= 0:
                point = p1
            elif fraction >= 1:
                point = p2
            else:
                point = Point(
                    p1.x + (p2.x - p1.x) * fraction,
                    p1.y + (p2.y - p1.y) * fraction,
                )
            return PathPosition(point, index, target, total)
        walked += length

    return PathPosition(points[-1], len(points) - 2, total, total)


def sample_at(
    points: Sequence[Point], t: float, offset: Optional[Point] = None
) -> Point:
    """Return the point at fraction ``t`` along ``points``, plus ``offset``."""
    point = locate(points, t).point
    if offset is not None:
        point = point.translated(offset.x, offset.y)
    return point
