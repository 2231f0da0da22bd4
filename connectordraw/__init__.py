"""Connector geometry for a flowchart editor, built with PySide6.

Edges bind to shape sides; the engine resolves those bindings into
points, routes orthogonal elbows around shapes, places labels along the
path and keeps everything consistent while shapes and endpoints are
dragged.
"""

from .alignment import AlignmentSession, collect_candidates, find_snap_target
from .anchors import nearest_side, resolve_anchor
from .constants import SHAPE_PRESETS, EditorConfig
from .dragging import EndpointDragSession, NodeDragSession
from .elbow import move_segment, route_elbow, segment_is_draggable
from .labels import label_box, wrap_text
from .model import DiagramModel
from .resolver import ConnectionResolver
from .sampling import locate, sample_at
from .types import (
    Anchor,
    BoundEndpoint,
    Box,
    DiagramEdge,
    DiagramShape,
    DiagramSnapshot,
    EdgeEnd,
    EdgeLabel,
    FreeEndpoint,
    PathKind,
    Point,
    ShapeKind,
    Side,
)

__all__ = [
    "AlignmentSession",
    "Anchor",
    "BoundEndpoint",
    "Box",
    "ConnectionResolver",
    "DiagramEdge",
    "DiagramModel",
    "DiagramShape",
    "DiagramSnapshot",
    "EdgeEnd",
    "EdgeLabel",
    "EditorConfig",
    "EndpointDragSession",
    "FreeEndpoint",
    "NodeDragSession",
    "PathKind",
    "Point",
    "SHAPE_PRESETS",
    "ShapeKind",
    "Side",
    "collect_candidates",
    "find_snap_target",
    "label_box",
    "locate",
    "move_segment",
    "nearest_side",
    "resolve_anchor",
    "route_elbow",
    "sample_at",
    "segment_is_draggable",
    "wrap_text",
]
