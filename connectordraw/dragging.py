"""Drag gestures for DiagramModel.

Each gesture is an explicit session object created at pointer-down and
dropped at pointer-up or cancel. Sessions read a ``DiagramSnapshot`` and
return mutation records; ``DragMixin`` owns the sessions and applies the
mutations to the model.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Union, TYPE_CHECKING

from PySide6.QtCore import Signal, Slot

from .alignment import (
    AlignmentSession,
    collect_candidates,
    find_snap_target,
    shape_locator,
)
from .constants import EditorConfig
from .resolver import ConnectionResolver
from .types import (
    AlignmentCandidate,
    Anchor,
    BoundEndpoint,
    DiagramSnapshot,
    EdgeEnd,
    EndpointRebound,
    FreeEndpoint,
    Mutation,
    Point,
    ShapeMoved,
)

if TYPE_CHECKING:
    from .model import DiagramModel

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class NodeDragSession:
    """Moves one shape, aligning its anchors with the ends it connects to."""

    def __init__(
        self,
        shape_id: str,
        pointer_id: int,
        pointer: Point,
        snapshot: DiagramSnapshot,
        resolver: ConnectionResolver,
        config: EditorConfig,
    ) -> None:
        shape = snapshot.shape(shape_id)
        if shape is None:
            raise KeyError(shape_id)
        self.shape_id = shape_id
        self.pointer_id = pointer_id
        self.pointer_start = pointer
        self.origin = Point(shape.x, shape.y)
        self.config = config
        self.candidates: List[AlignmentCandidate] = collect_candidates(shape_id, snapshot, resolver)
        self.alignment = AlignmentSession(
            config.alignment_threshold,
            shape_locator(shape.width, shape.height, shape.shape, resolver.compensation),
        )

    @property
    def entity(self) -> str:
        return self.shape_id

    def move(self, pointer: Point, snapshot: DiagramSnapshot, zoom: float = 1.0) -> List[Mutation]:
        shape = snapshot.shape(self.shape_id)
        if shape is None:
            return []
        limit = self.config.pan_limit
        x = self.origin.x + (pointer.x - self.pointer_start.x) / zoom
        y = self.origin.y + (pointer.y - self.pointer_start.y) / zoom
        x = _clamp(x, -limit, limit - shape.width)
        y = _clamp(y, -limit, limit)

        position = self.alignment.evaluate(Point(x, y), self.candidates).apply(Point(x, y))
        return [ShapeMoved(self.shape_id, position.x, position.y)]


class EndpointDragSession:
    """Moves one end of an edge, aligning with and snapping onto shapes."""

    def __init__(
        self,
        edge_id: str,
        end: EdgeEnd,
        pointer_id: int,
        pointer: Point,
        snapshot: DiagramSnapshot,
        resolver: ConnectionResolver,
        config: EditorConfig,
    ) -> None:
        edge = snapshot.edge(edge_id)
        if edge is None:
            raise KeyError(edge_id)
        self.edge_id = edge_id
        self.end = end
        self.pointer_id = pointer_id
        self.pointer_start = pointer
        self.config = config
        self.resolver = resolver
        self.origin = resolver.endpoint_point(edge.endpoint(end), snapshot) or Point(0.0, 0.0)
        self.side = resolver.endpoint_side(edge.endpoint(end), end)
        self.alignment = AlignmentSession(config.alignment_threshold)

        opposite = edge.endpoint(end.opposite)
        self.opposite_shape_id = opposite.shape_id if isinstance(opposite, BoundEndpoint) else None
        self.candidates: List[AlignmentCandidate] = []
        opposite_point = resolver.endpoint_point(opposite, snapshot)
        if opposite_point is not None:
            self.candidates.append(AlignmentCandidate(opposite_point, Anchor(self.side)))

    @property
    def entity(self) -> str:
        return self.edge_id

    def move(self, pointer: Point, snapshot: DiagramSnapshot, zoom: float = 1.0) -> List[Mutation]:
        limit = self.config.pan_limit
        x = _clamp(self.origin.x + (pointer.x - self.pointer_start.x) / zoom, -limit, limit)
        y = _clamp(self.origin.y + (pointer.y - self.pointer_start.y) / zoom, -limit, limit)
        position = self.alignment.evaluate(Point(x, y), self.candidates).apply(Point(x, y))

        binding = find_snap_target(position, snapshot, exclude=self.opposite_shape_id)
        if binding is not None:
            self.alignment.reset()
            self.side = binding.anchor.side
            logger.debug("Edge %s %s snapped to %s/%s", self.edge_id, self.end.value,
                         binding.shape_id, binding.anchor.side.value)
            return [EndpointRebound(self.edge_id, self.end, binding)]
        return [EndpointRebound(self.edge_id, self.end, FreeEndpoint(position, self.side))]


DragSession = Union[NodeDragSession, EndpointDragSession]


class DragMixin:
    """Mixin providing pointer-driven drag gestures.

    Sessions are keyed by pointer id. A pointer that already drives a
    gesture, or that targets an entity another pointer is dragging, is
    ignored until that gesture ends.
    """

    # Signals (will be defined in DiagramModel)
    dragStateChanged: Signal
    zoomChanged: Signal

    # Attributes expected from DiagramModel
    _sessions: Dict[int, DragSession]
    _zoom: float
    _config: EditorConfig
    _resolver: ConnectionResolver
    snapshot: Callable[[], DiagramSnapshot]
    applyMutations: Callable[[List[Mutation]], None]

    def _init_dragging(self) -> None:
        """Initialize drag state. Call from DiagramModel.__init__."""
        self._sessions = {}
        self._zoom = 1.0

    def _get_zoom(self) -> float:
        return self._zoom

    @Slot(float)
    def setZoom(self, zoom: float) -> None:
        if zoom > 0 and zoom != self._zoom:
            self._zoom = zoom
            self.zoomChanged.emit()

    def _is_busy(self, pointer_id: int, entity: str) -> bool:
        if pointer_id in self._sessions:
            return True
        return any(session.entity == entity for session in self._sessions.values())

    def _get_dragging_node(self) -> bool:
        return any(isinstance(s, NodeDragSession) for s in self._sessions.values())

    def _get_dragging_edge(self) -> bool:
        return any(isinstance(s, EndpointDragSession) for s in self._sessions.values())

    def _start(self, session_factory: Callable[[], DragSession], pointer_id: int, entity: str) -> bool:
        if self._is_busy(pointer_id, entity):
            logger.debug("Ignoring pointer %s: %s is already being dragged", pointer_id, entity)
            return False
        try:
            session = session_factory()
        except KeyError:
            return False
        self._sessions[pointer_id] = session
        logger.info("Drag started on %s by pointer %s", entity, pointer_id)
        self.dragStateChanged.emit()
        return True

    @Slot(str, int, float, float, result=bool)
    def beginNodeDrag(self, shape_id: str, pointer_id: int, x: float, y: float) -> bool:
        return self._start(
            lambda: NodeDragSession(
                shape_id, pointer_id, Point(x, y), self.snapshot(), self._resolver, self._config
            ),
            pointer_id,
            shape_id,
        )

    @Slot(str, str, int, float, float, result=bool)
    def beginEndpointDrag(self, edge_id: str, end: str, pointer_id: int, x: float, y: float) -> bool:
        try:
            edge_end = EdgeEnd(end)
        except ValueError:
            return False
        return self._start(
            lambda: EndpointDragSession(
                edge_id, edge_end, pointer_id, Point(x, y), self.snapshot(), self._resolver, self._config
            ),
            pointer_id,
            edge_id,
        )

    @Slot(int, float, float)
    def updateDrag(self, pointer_id: int, x: float, y: float) -> None:
        session = self._sessions.get(pointer_id)
        if session is None:
            return
        self.applyMutations(session.move(Point(x, y), self.snapshot(), self._zoom))

    @Slot(int)
    def endDrag(self, pointer_id: int) -> None:
        self._finish(pointer_id, "ended")

    @Slot(int)
    def cancelDrag(self, pointer_id: int) -> None:
        # The last applied frame stays; only the session state is dropped.
        self._finish(pointer_id, "cancelled")

    def _finish(self, pointer_id: int, how: str) -> None:
        session: Optional[DragSession] = self._sessions.pop(pointer_id, None)
        if session is None:
            return
        logger.info("Drag %s on %s by pointer %s", how, session.entity, pointer_id)
        self.dragStateChanged.emit()

    def _drop_sessions_for(self, entity: str) -> None:
        stale = [pid for pid, session in self._sessions.items() if session.entity == entity]
        for pointer_id in stale:
            self._finish(pointer_id, "cancelled")
