"""Data types for connectordraw diagrams.

This module contains the geometry values, edge records and mutation
records shared by the resolver, router, sampler and drag sessions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union


class Side(Enum):
    """Face of a shape a connector may attach to."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: object) -> "Side":
        """Return the matching side, falling back to ``RIGHT``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.RIGHT

    @property
    def is_vertical(self) -> bool:
        """True for top/bottom, whose stubs leave along the y axis."""
        return self in (Side.TOP, Side.BOTTOM)

    @property
    def outward(self) -> Tuple[float, float]:
        """Unit vector pointing away from the shape."""
        return _OUTWARD[self]


_OUTWARD: Dict[Side, Tuple[float, float]] = {
    Side.TOP: (0.0, -1.0),
    Side.BOTTOM: (0.0, 1.0),
    Side.LEFT: (-1.0, 0.0),
    Side.RIGHT: (1.0, 0.0),
}


class ShapeKind(Enum):
    """Supported shape outlines."""

    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    DIAMOND = "diamond"
    PARALLELOGRAM = "parallelogram"
    TRAPEZOID = "trapezoid"
    DOCUMENT = "document"

    @classmethod
    def parse(cls, value: object) -> "ShapeKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.RECTANGLE


class PathKind(Enum):
    """How an edge travels between its two terminals."""

    STRAIGHT = "straight"
    ELBOW = "elbow"

    @classmethod
    def parse(cls, value: object) -> "PathKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.STRAIGHT


class EdgeEnd(Enum):
    """Which end of an edge an operation touches."""

    SOURCE = "source"
    TARGET = "target"

    @property
    def opposite(self) -> "EdgeEnd":
        return EdgeEnd.TARGET if self is EdgeEnd.SOURCE else EdgeEnd.SOURCE


@dataclass(frozen=True)
class Point:
    """Document-space coordinate."""

    x: float
    y: float

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Box:
    """A shape's top-left position and size."""

    x: float
    y: float
    width: float
    height: float

    def translated(self, dx: float, dy: float) -> "Box":
        return Box(self.x + dx, self.y + dy, self.width, self.height)

    def contains(self, point: Point) -> bool:
        """Return True when the point lies strictly inside the box."""
        return (
            self.x < point.x < self.x + self.width
            and self.y < point.y < self.y + self.height
        )


@dataclass(frozen=True)
class Anchor:
    """Binding to a side of a shape, with an optional pixel offset."""

    side: Side
    offset: Optional[Point] = None


@dataclass(frozen=True)
class BoundEndpoint:
    """Edge terminus attached to a shape."""

    shape_id: str
    anchor: Anchor


@dataclass(frozen=True)
class FreeEndpoint:
    """Edge terminus positioned by explicit coordinates.

    ``side`` keeps the routing direction the endpoint had before it was
    detached from a shape, so elbow routes stay stable while dragging.
    """

    point: Point
    side: Optional[Side] = None


EdgeEndpoint = Union[BoundEndpoint, FreeEndpoint]


@dataclass(frozen=True)
class EdgeLabel:
    """Text placed at fraction ``t`` of an edge's length."""

    text: str
    t: float = 0.5
    font_size: Optional[float] = None
    offset: Optional[Point] = None


@dataclass
class DiagramShape:
    """A shape displayed on the canvas."""

    id: str
    shape: ShapeKind
    x: float
    y: float
    width: float = 200.0
    height: float = 100.0
    text: str = ""

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)


@dataclass
class DiagramEdge:
    """A directed connector between two endpoints."""

    id: str
    source: EdgeEndpoint
    target: EdgeEndpoint
    path: PathKind = PathKind.STRAIGHT
    waypoints: List[Point] = field(default_factory=list)
    label: Optional[EdgeLabel] = None

    def endpoint(self, end: EdgeEnd) -> EdgeEndpoint:
        return self.source if end is EdgeEnd.SOURCE else self.target

    def shape_ids(self) -> Tuple[str, ...]:
        """Ids of the shapes this edge is bound to."""
        return tuple(
            endpoint.shape_id
            for endpoint in (self.source, self.target)
            if isinstance(endpoint, BoundEndpoint)
        )


@dataclass(frozen=True)
class AlignmentCandidate:
    """A reference point and the anchor of the moving entity compared to it."""

    endpoint: Point
    my_anchor: Anchor


@dataclass(frozen=True)
class LabelBox:
    """Estimated on-screen size of a label's background plate."""

    width: float
    height: float
    font_size: float


@dataclass(frozen=True)
class ResolvedEdge:
    """Plain geometry handed to the rendering layer."""

    edge_id: str
    points: Tuple[Point, ...]
    label_point: Optional[Point] = None
    label_box: Optional[LabelBox] = None


# --- Mutations ------------------------------------------------------------


@dataclass(frozen=True)
class ShapeMoved:
    shape_id: str
    x: float
    y: float


@dataclass(frozen=True)
class EndpointRebound:
    edge_id: str
    end: EdgeEnd
    endpoint: EdgeEndpoint


@dataclass(frozen=True)
class WaypointsChanged:
    edge_id: str
    waypoints: Tuple[Point, ...]


Mutation = Union[ShapeMoved, EndpointRebound, WaypointsChanged]


class DiagramSnapshot:
    """Read-only view of the document handed to every computation.

    The snapshot wraps the store's own mappings instead of copying them, so
    building one per frame costs nothing; callers must not mutate it.
    """

    def __init__(
        self,
        shapes: Mapping[str, DiagramShape],
        edges: Mapping[str, DiagramEdge],
        incident: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        self._shapes = shapes
        self._edges = edges
        if incident is None:
            incident = build_incidence(edges.values())
        self._incident = incident

    @classmethod
    def from_lists(
        cls, shapes: Sequence[DiagramShape], edges: Sequence[DiagramEdge]
    ) -> "DiagramSnapshot":
        return cls({s.id: s for s in shapes}, {e.id: e for e in edges})

    def shape(self, shape_id: str) -> Optional[DiagramShape]:
        return self._shapes.get(shape_id)

    def edge(self, edge_id: str) -> Optional[DiagramEdge]:
        return self._edges.get(edge_id)

    @property
    def shapes(self) -> List[DiagramShape]:
        return list(self._shapes.values())

    @property
    def edges(self) -> List[DiagramEdge]:
        return list(self._edges.values())

    def edges_touching(self, shape_id: str) -> List[DiagramEdge]:
        """Edges with at least one end bound to ``shape_id``."""
        result = []
        for edge_id in self._incident.get(shape_id, ()):
            edge = self._edges.get(edge_id)
            if edge is not None:
                result.append(edge)
        return result


def build_incidence(edges) -> Dict[str, List[str]]:
    """Map each shape id to the ids of the edges bound to it."""
    incidence: Dict[str, List[str]] = {}
    for edge in edges:
        for shape_id in set(edge.shape_ids()):
            incidence.setdefault(shape_id, []).append(edge.id)
    return incidence
