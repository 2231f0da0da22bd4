"""Alignment and node snapping during drag gestures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, TYPE_CHECKING

from .anchors import nearest_side, resolve_anchor
from .constants import ALIGNMENT_THRESHOLD
from .types import (
    AlignmentCandidate,
    Anchor,
    BoundEndpoint,
    Box,
    DiagramSnapshot,
    Point,
    ShapeKind,
)

if TYPE_CHECKING:
    from .resolver import ConnectionResolver

logger = logging.getLogger(__name__)

# Maps the moving entity's hypothetical position and one of its anchors to
# the point that anchor would occupy there.
AnchorLocator = Callable[[Point, Anchor], Point]


def _identity_locator(position: Point, anchor: Anchor) -> Point:
    return position


@dataclass
class AxisLock:
    """Lock state of one axis: unlocked while ``target`` is None."""

    target: Optional[float] = None

    @property
    def locked(self) -> bool:
        return self.target is not None


@dataclass(frozen=True)
class AlignmentResult:
    """Coordinates to force per axis; None means leave the axis alone."""

    x: Optional[float] = None
    y: Optional[float] = None

    def apply(self, position: Point) -> Point:
        return Point(
            position.x if self.x is None else self.x,
            position.y if self.y is None else self.y,
        )


def find_alignment_target(
    position: Point,
    candidates: Iterable[AlignmentCandidate],
    locate: AnchorLocator = _identity_locator,
    threshold: float = ALIGNMENT_THRESHOLD,
) -> AlignmentResult:
    """Best per-axis alignment of ``position`` against ``candidates``.

    For each axis the candidate with the smallest delta under ``threshold``
    wins; the returned coordinate is the position at which the moving
    anchor would sit exactly on that candidate.
    """
    best_dx = best_dy = float("inf")
    align_x: Optional[float] = None
    align_y: Optional[float] = None
    for candidate in candidates:
        anchor_point = locate(position, candidate.my_anchor)
        delta_x = abs(anchor_point.x - candidate.endpoint.x)
        delta_y = abs(anchor_point.y - candidate.endpoint.y)
        if delta_x < threshold and delta_x < best_dx:
            best_dx = delta_x
            align_x = candidate.endpoint.x - (anchor_point.x - position.x)
        if delta_y < threshold and delta_y < best_dy:
            best_dy = delta_y
            align_y = candidate.endpoint.y - (anchor_point.y - position.y)
    return AlignmentResult(align_x, align_y)


class AlignmentSession:
    """Per-gesture alignment state with hysteresis.

    An axis locks the first frame a candidate comes within ``threshold`` and
    keeps forcing that coordinate until the dragged position strays more
    than twice the threshold from it. Create one per gesture and drop it
    when the gesture ends.
    """

    def __init__(
        self,
        threshold: float = ALIGNMENT_THRESHOLD,
        locate: AnchorLocator = _identity_locator,
    ) -> None:
        self.threshold = threshold
        self.locate = locate
        self.x_lock = AxisLock()
        self.y_lock = AxisLock()

    def evaluate(
        self, position: Point, candidates: Sequence[AlignmentCandidate]
    ) -> AlignmentResult:
        if not candidates:
            return AlignmentResult()
        x = self._step(self.x_lock, position.x, position, candidates, "x")
        y = self._step(self.y_lock, position.y, position, candidates, "y")
        return AlignmentResult(x, y)

    def _step(
        self,
        lock: AxisLock,
        value: float,
        position: Point,
        candidates: Sequence[AlignmentCandidate],
        axis: str,
    ) -> Optional[float]:
        if lock.target is not None:
            if abs(value - lock.target) > self.threshold * 2:
                logger.debug("Released %s lock at %s", axis, lock.target)
                lock.target = None
                return None
            return lock.target
        target = find_alignment_target(position, candidates, self.locate, self.threshold)
        lock.target = target.x if axis == "x" else target.y
        if lock.target is not None:
            logger.debug("Locked %s to %s", axis, lock.target)
        return lock.target

    def reset(self) -> None:
        self.x_lock = AxisLock()
        self.y_lock = AxisLock()


def collect_candidates(
    shape_id: str, snapshot: DiagramSnapshot, resolver: "ConnectionResolver"
) -> List[AlignmentCandidate]:
    """Opposite-end anchor points of every edge touching ``shape_id``.

    Ends that cannot be resolved are skipped. Edges looping back to the
    same shape offer nothing to align against and are ignored.
    """
    candidates: List[AlignmentCandidate] = []
    for edge in snapshot.edges_touching(shape_id):
        source, target = edge.source, edge.target
        if isinstance(source, BoundEndpoint) and source.shape_id == shape_id:
            mine, other = source, target
        elif isinstance(target, BoundEndpoint) and target.shape_id == shape_id:
            mine, other = target, source
        else:
            continue
        if isinstance(other, BoundEndpoint) and other.shape_id == shape_id:
            continue
        point = resolver.endpoint_point(other, snapshot)
        if point is None:
            continue
        candidates.append(AlignmentCandidate(endpoint=point, my_anchor=mine.anchor))
    return candidates


def find_snap_target(
    point: Point,
    snapshot: DiagramSnapshot,
    exclude: Optional[str] = None,
) -> Optional[BoundEndpoint]:
    """Bind ``point`` to the topmost shape strictly containing it.

    The side chosen is the one nearest to the point. ``exclude`` names the
    shape at the opposite end of the dragged edge, which never captures.
    """
    for shape in reversed(snapshot.shapes):
        if shape.id == exclude:
            continue
        box = shape.box
        if box.contains(point):
            return BoundEndpoint(shape.id, Anchor(nearest_side(box, point)))
    return None


def shape_locator(
    width: float, height: float, shape: ShapeKind, compensation: float = 0.0
) -> AnchorLocator:
    """Locator for a shape of fixed size whose top-left is the dragged position."""

    def locate(position: Point, anchor: Anchor) -> Point:
        return resolve_anchor(Box(position.x, position.y, width, height), shape, anchor, compensation)

    return locate
