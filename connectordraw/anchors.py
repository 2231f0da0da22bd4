"""Attachment points on shape boundaries."""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from .constants import DOCUMENT_WAVE_RATIO, SLANT_RATIO
from .types import Anchor, Box, Point, ShapeKind, Side


def _midpoints(box: Box, side: Side, compensation: float) -> Tuple[float, float]:
    w, h = box.width, box.height
    if side is Side.TOP:
        return w / 2 + compensation, 0.0
    if side is Side.BOTTOM:
        return w / 2 + compensation, h
    if side is Side.LEFT:
        return 0.0, h / 2 + compensation
    return w, h / 2 + compensation


def _parallelogram(box: Box, side: Side, compensation: float) -> Tuple[float, float]:
    w, h = box.width, box.height
    slant = w * SLANT_RATIO
    if side is Side.TOP:
        return (w + slant) / 2, 0.0
    if side is Side.BOTTOM:
        return (w - slant) / 2, h
    if side is Side.LEFT:
        return slant / 2, h / 2
    return w - slant / 2, h / 2


def _trapezoid(box: Box, side: Side, compensation: float) -> Tuple[float, float]:
    w, h = box.width, box.height
    inset = w * SLANT_RATIO / 2
    if side is Side.TOP:
        return w / 2, 0.0
    if side is Side.BOTTOM:
        return w / 2, h
    if side is Side.LEFT:
        return inset, h / 2
    return w - inset, h / 2


def _document(box: Box, side: Side, compensation: float) -> Tuple[float, float]:
    w, h = box.width, box.height
    if side is Side.TOP:
        return w / 2, 0.0
    if side is Side.BOTTOM:
        # Sits on the wave notch rather than the flat box edge.
        return w / 2, h - h * DOCUMENT_WAVE_RATIO
    if side is Side.LEFT:
        return 0.0, h / 2
    return w, h / 2


_FORMULAS: Dict[ShapeKind, Callable[[Box, Side, float], Tuple[float, float]]] = {
    ShapeKind.RECTANGLE: _midpoints,
    ShapeKind.ELLIPSE: _midpoints,
    ShapeKind.DIAMOND: _midpoints,
    ShapeKind.PARALLELOGRAM: _parallelogram,
    ShapeKind.TRAPEZOID: _trapezoid,
    ShapeKind.DOCUMENT: _document,
}


def resolve_anchor(
    box: Box,
    shape: ShapeKind | str,
    anchor: Anchor,
    compensation: float = 0.0,
) -> Point:
    """Return the point on ``box``'s outline that ``anchor`` binds to.

    Args:
        box: Position and size of the shape.
        shape: Outline kind; unknown kinds use the rectangle formula.
        anchor: Side (unknown sides resolve as ``RIGHT``) and optional offset.
        compensation: Shift applied along the side for rectangle, ellipse
            and diamond midpoints so the point sits on the rendered stroke.

    Returns:
        The attachment point in document coordinates.
    """
    side = Side.parse(anchor.side)
    formula = _FORMULAS.get(ShapeKind.parse(shape), _midpoints)
    rel_x, rel_y = formula(box, side, compensation)
    point = Point(box.x + rel_x, box.y + rel_y)
    if anchor.offset is not None:
        point = point.translated(anchor.offset.x, anchor.offset.y)
    return point


def nearest_side(box: Box, point: Point) -> Side:
    """Side of ``box`` with the smallest perpendicular distance to ``point``."""
    distances = (
        (abs(point.y - box.y), Side.TOP),
        (abs(box.y + box.height - point.y), Side.BOTTOM),
        (abs(point.x - box.x), Side.LEFT),
        (abs(box.x + box.width - point.x), Side.RIGHT),
    )
    best_distance, best_side = distances[0]
    for distance, side in distances[1:]:
        if distance < best_distance:
            best_distance, best_side = distance, side
    return best_side
