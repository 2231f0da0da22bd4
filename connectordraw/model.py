"""Core DiagramModel class for connectordraw.

This module provides the Qt model holding shapes and edges. It is the
document store for the geometry engine: every computation reads a
snapshot of it and hands back mutations that it applies.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Any, Dict, List, Optional

from PySide6.QtCore import (
    QAbstractListModel,
    QModelIndex,
    Property,
    Qt,
    Signal,
    Slot,
)

from .anchors import resolve_anchor
from .constants import SHAPE_PRESETS, EditorConfig
from .dragging import DragMixin
from .elbow import move_segment, segment_is_draggable, stub_point
from .resolver import ConnectionResolver
from .types import (
    Anchor,
    BoundEndpoint,
    DiagramEdge,
    DiagramShape,
    DiagramSnapshot,
    EdgeEnd,
    EdgeEndpoint,
    EdgeLabel,
    EndpointRebound,
    FreeEndpoint,
    Mutation,
    PathKind,
    Point,
    ResolvedEdge,
    ShapeMoved,
    Side,
    WaypointsChanged,
)

logger = logging.getLogger(__name__)


def _point_dict(point: Point) -> Dict[str, float]:
    return {"x": point.x, "y": point.y}


class DiagramModel(DragMixin, QAbstractListModel):
    """Qt model exposing diagram shapes and resolved edges to QML."""

    IdRole = Qt.UserRole + 1
    ShapeRole = Qt.UserRole + 2
    XRole = Qt.UserRole + 3
    YRole = Qt.UserRole + 4
    WidthRole = Qt.UserRole + 5
    HeightRole = Qt.UserRole + 6
    TextRole = Qt.UserRole + 7

    itemsChanged = Signal()
    edgesChanged = Signal()
    dragStateChanged = Signal()
    zoomChanged = Signal()

    def __init__(self, config: Optional[EditorConfig] = None):
        super().__init__()
        self._config = config or EditorConfig()
        self._resolver = ConnectionResolver(
            self._config.stub_length, self._config.anchor_compensation
        )
        self._items: List[DiagramShape] = []
        self._shapes: Dict[str, DiagramShape] = {}
        self._edges: Dict[str, DiagramEdge] = {}
        self._incident: Dict[str, List[str]] = {}
        self._id_source = count()

        self._init_dragging()

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._id_source)}"

    def _build_shape_from_preset(
        self,
        preset_name: str,
        x: float,
        y: float,
        text: Optional[str] = None,
    ) -> Optional[DiagramShape]:
        preset = SHAPE_PRESETS.get(preset_name.lower())
        if not preset:
            return None

        label = text if text and text.strip() else preset["text"]
        return DiagramShape(
            id=self._next_id(preset_name.lower()),
            shape=preset["shape"],
            x=x,
            y=y,
            width=float(preset["width"]),
            height=float(preset["height"]),
            text=label,
        )

    def _append_shape(self, shape: DiagramShape) -> None:
        self.beginInsertRows(QModelIndex(), len(self._items), len(self._items))
        self._items.append(shape)
        self._shapes[shape.id] = shape
        self.endInsertRows()
        self.itemsChanged.emit()

    def _row_of(self, shape_id: str) -> int:
        for row, shape in enumerate(self._items):
            if shape.id == shape_id:
                return row
        return -1

    # --- Qt model overrides -------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._items)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._items)):
            return None

        shape = self._items[index.row()]
        if role == self.IdRole:
            return shape.id
        if role == self.ShapeRole:
            return shape.shape.value
        if role == self.XRole:
            return shape.x
        if role == self.YRole:
            return shape.y
        if role == self.WidthRole:
            return shape.width
        if role == self.HeightRole:
            return shape.height
        if role == self.TextRole:
            return shape.text
        return None

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return {
            self.IdRole: b"itemId",
            self.ShapeRole: b"shape",
            self.XRole: b"x",
            self.YRole: b"y",
            self.WidthRole: b"width",
            self.HeightRole: b"height",
            self.TextRole: b"text",
        }

    # --- Properties exposed to QML -----------------------------------------
    @Property(list, notify=edgesChanged)
    def edges(self) -> List[Dict[str, Any]]:
        """Resolved geometry of every edge whose ends can be resolved."""
        snapshot = self.snapshot()
        result = []
        for edge in self._edges.values():
            resolved = self._resolver.resolve(edge, snapshot)
            if resolved is not None:
                result.append(self._edge_dict(edge, resolved))
        return result

    @Property(int, notify=itemsChanged)
    def count(self) -> int:
        return len(self._items)

    @Property(int, notify=edgesChanged)
    def edgeCount(self) -> int:
        return len(self._edges)

    @Property(bool, notify=dragStateChanged)
    def isDraggingNode(self) -> bool:
        return self._get_dragging_node()

    @Property(bool, notify=dragStateChanged)
    def isDraggingEdge(self) -> bool:
        return self._get_dragging_edge()

    @Property(float, notify=zoomChanged)
    def zoom(self) -> float:
        return self._get_zoom()

    # --- Shape management ---------------------------------------------------
    @Slot(str, float, float, result=str)
    def addShape(self, preset: str, x: float, y: float) -> str:
        return self.addShapeWithText(preset, x, y, "")

    @Slot(str, float, float, str, result=str)
    def addShapeWithText(self, preset: str, x: float, y: float, text: str) -> str:
        shape = self._build_shape_from_preset(preset, x, y, text)
        if not shape:
            return ""
        self._append_shape(shape)
        return shape.id

    @Slot(str, float, float)
    def moveItem(self, item_id: str, x: float, y: float) -> None:
        self.applyMutations([ShapeMoved(item_id, x, y)])

    @Slot(str, float, float)
    def resizeItem(self, item_id: str, width: float, height: float) -> None:
        new_width = max(self._config.min_shape_size, width)
        new_height = max(self._config.min_shape_size, height)
        row = self._row_of(item_id)
        if row < 0:
            return
        shape = self._items[row]
        if shape.width == new_width and shape.height == new_height:
            return
        shape.width = new_width
        shape.height = new_height
        index = self.index(row, 0)
        self.dataChanged.emit(index, index, [self.WidthRole, self.HeightRole])
        self.itemsChanged.emit()
        self._apply_waypoints(self._resolver.refresh_connected(item_id, self.snapshot()))
        self.edgesChanged.emit()

    @Slot(str, str)
    def setItemText(self, item_id: str, text: str) -> None:
        row = self._row_of(item_id)
        if row < 0 or self._items[row].text == text:
            return
        self._items[row].text = text
        index = self.index(row, 0)
        self.dataChanged.emit(index, index, [self.TextRole])
        self.itemsChanged.emit()

    @Slot(str)
    def removeItem(self, item_id: str) -> None:
        row = self._row_of(item_id)
        if row < 0:
            return
        self._drop_sessions_for(item_id)
        touching = list(self._incident.get(item_id, ()))
        logger.debug("Removing %s with %d connected edges", item_id, len(touching))
        for edge_id in touching:
            self._drop_sessions_for(edge_id)
            self._drop_edge(edge_id)
        if touching:
            self.edgesChanged.emit()

        self.beginRemoveRows(QModelIndex(), row, row)
        self._items.pop(row)
        del self._shapes[item_id]
        self.endRemoveRows()
        self.itemsChanged.emit()

    # --- Edge management ----------------------------------------------------
    @Slot(str, str, str, str, result=str)
    def addEdge(self, from_id: str, to_id: str, from_side: str = "bottom", to_side: str = "top") -> str:
        """Connect two shapes; returns the new edge id or "" when refused."""
        if from_id == to_id or from_id not in self._shapes or to_id not in self._shapes:
            logger.debug("Refusing edge %s -> %s", from_id, to_id)
            return ""
        for edge in self._edges.values():
            if edge.shape_ids() == (from_id, to_id):
                logger.debug("Edge %s -> %s already exists", from_id, to_id)
                return ""
        edge = DiagramEdge(
            id=self._next_id("edge"),
            source=BoundEndpoint(from_id, Anchor(Side.parse(from_side))),
            target=BoundEndpoint(to_id, Anchor(Side.parse(to_side))),
        )
        self._insert_edge(edge)
        return edge.id

    @Slot(str, str, result=str)
    def addEdgeFromHandle(self, shape_id: str, side: str) -> str:
        """Start a new edge at ``shape_id``'s ``side`` with a free end just outside it."""
        shape = self._shapes.get(shape_id)
        if shape is None:
            return ""
        anchor = Anchor(Side.parse(side))
        start = resolve_anchor(shape.box, shape.shape, anchor, self._config.anchor_compensation)
        edge = DiagramEdge(
            id=self._next_id("edge"),
            source=BoundEndpoint(shape_id, anchor),
            target=FreeEndpoint(stub_point(start, anchor.side, self._config.handle_edge_length)),
        )
        self._insert_edge(edge)
        return edge.id

    @Slot(str)
    def removeEdge(self, edge_id: str) -> None:
        if edge_id not in self._edges:
            return
        self._drop_sessions_for(edge_id)
        self._drop_edge(edge_id)
        self.edgesChanged.emit()

    @Slot(str, str, str)
    def setEdgeAnchor(self, edge_id: str, end: str, side: str) -> None:
        """Move a bound end of an edge to another side of its shape."""
        edge = self._edges.get(edge_id)
        try:
            edge_end = EdgeEnd(end)
        except ValueError:
            return
        if edge is None:
            return
        endpoint = edge.endpoint(edge_end)
        if isinstance(endpoint, BoundEndpoint):
            rebound: EdgeEndpoint = BoundEndpoint(
                endpoint.shape_id, Anchor(Side.parse(side), endpoint.anchor.offset)
            )
        else:
            rebound = FreeEndpoint(endpoint.point, Side.parse(side))
        self.applyMutations([EndpointRebound(edge_id, edge_end, rebound)])

    @Slot(str, str)
    def setEdgePathKind(self, edge_id: str, path: str) -> None:
        edge = self._edges.get(edge_id)
        if edge is None:
            return
        converted = self._resolver.convert(edge, PathKind.parse(path), self.snapshot())
        if converted is not edge:
            self._edges[edge_id] = converted
            self.edgesChanged.emit()

    @Slot(str)
    def flipEdge(self, edge_id: str) -> None:
        edge = self._edges.get(edge_id)
        if edge is None:
            return
        self._edges[edge_id] = self._resolver.flip(edge, self.snapshot())
        self.edgesChanged.emit()

    @Slot(str, str, float)
    def setEdgeLabel(self, edge_id: str, text: str, t: float = 0.5) -> None:
        edge = self._edges.get(edge_id)
        if edge is None:
            return
        if not text:
            edge.label = None
        else:
            font_size = edge.label.font_size if edge.label else None
            offset = edge.label.offset if edge.label else None
            edge.label = EdgeLabel(text, min(1.0, max(0.0, t)), font_size, offset)
        self.edgesChanged.emit()

    @Slot(str, int, str, float, result=bool)
    def moveEdgeSegment(self, edge_id: str, index: int, axis: str, value: float) -> bool:
        """Drag segment ``index`` of an elbow edge's waypoints along ``axis``."""
        edge = self._edges.get(edge_id)
        if edge is None or edge.path is not PathKind.ELBOW or not edge.waypoints:
            return False
        resolved = self._resolver.resolve(edge, self.snapshot())
        # Waypoint i sits at index i + 1 of the full polyline.
        if resolved is None or not segment_is_draggable(resolved.points, index + 1):
            return False
        edge.waypoints = move_segment(edge.waypoints, index, axis, value)
        self.edgesChanged.emit()
        return True

    @Slot(str, result="QVariant")
    def edgeGeometry(self, edge_id: str) -> Dict[str, Any]:
        edge = self._edges.get(edge_id)
        if edge is None:
            return {}
        resolved = self._resolver.resolve(edge, self.snapshot())
        if resolved is None:
            return {}
        return self._edge_dict(edge, resolved)

    # --- Mutations ----------------------------------------------------------
    def applyMutations(self, mutations: List[Mutation]) -> None:
        """Write computed changes back and reroute only the affected edges."""
        edges_touched = False
        for mutation in mutations:
            if isinstance(mutation, ShapeMoved):
                if self._set_position(mutation):
                    self._apply_waypoints(
                        self._resolver.refresh_connected(mutation.shape_id, self.snapshot())
                    )
                    edges_touched = True
            elif isinstance(mutation, EndpointRebound):
                if self._set_endpoint(mutation):
                    edges_touched = True
            elif isinstance(mutation, WaypointsChanged):
                self._apply_waypoints([mutation])
                edges_touched = True
        if edges_touched:
            self.edgesChanged.emit()

    def _set_position(self, mutation: ShapeMoved) -> bool:
        row = self._row_of(mutation.shape_id)
        if row < 0:
            return False
        shape = self._items[row]
        if shape.x == mutation.x and shape.y == mutation.y:
            return False
        shape.x = mutation.x
        shape.y = mutation.y
        index = self.index(row, 0)
        self.dataChanged.emit(index, index, [self.XRole, self.YRole])
        self.itemsChanged.emit()
        return True

    def _set_endpoint(self, mutation: EndpointRebound) -> bool:
        edge = self._edges.get(mutation.edge_id)
        if edge is None or edge.endpoint(mutation.end) == mutation.endpoint:
            return False
        self._unindex(edge)
        if mutation.end is EdgeEnd.SOURCE:
            edge.source = mutation.endpoint
        else:
            edge.target = mutation.endpoint
        self._index(edge)
        change = self._resolver.refresh_edge(edge, self.snapshot())
        if change is not None:
            edge.waypoints = list(change.waypoints)
        return True

    def _apply_waypoints(self, changes: List[WaypointsChanged]) -> None:
        for change in changes:
            edge = self._edges.get(change.edge_id)
            if edge is not None:
                edge.waypoints = list(change.waypoints)

    # --- Utilities ----------------------------------------------------------
    def snapshot(self) -> DiagramSnapshot:
        return DiagramSnapshot(self._shapes, self._edges, self._incident)

    def getItem(self, item_id: str) -> Optional[DiagramShape]:
        return self._shapes.get(item_id)

    def getEdge(self, edge_id: str) -> Optional[DiagramEdge]:
        return self._edges.get(edge_id)

    def getItemAt(self, x: float, y: float) -> Optional[str]:
        for shape in reversed(self._items):
            if shape.x <= x <= shape.x + shape.width and shape.y <= y <= shape.y + shape.height:
                return shape.id
        return None

    @Slot(float, float, result=str)
    def itemIdAt(self, x: float, y: float) -> str:
        return self.getItemAt(x, y) or ""

    def _insert_edge(self, edge: DiagramEdge) -> None:
        self._edges[edge.id] = edge
        self._index(edge)
        self.edgesChanged.emit()

    def _drop_edge(self, edge_id: str) -> None:
        edge = self._edges.pop(edge_id, None)
        if edge is not None:
            self._unindex(edge)

    def _index(self, edge: DiagramEdge) -> None:
        for shape_id in set(edge.shape_ids()):
            self._incident.setdefault(shape_id, []).append(edge.id)

    def _unindex(self, edge: DiagramEdge) -> None:
        for shape_id in set(edge.shape_ids()):
            ids = self._incident.get(shape_id, [])
            if edge.id in ids:
                ids.remove(edge.id)
            if not ids:
                self._incident.pop(shape_id, None)

    @staticmethod
    def _edge_dict(edge: DiagramEdge, resolved: ResolvedEdge) -> Dict[str, Any]:
        source, target = edge.source, edge.target
        data: Dict[str, Any] = {
            "id": edge.id,
            "path": edge.path.value,
            "sourceId": source.shape_id if isinstance(source, BoundEndpoint) else "",
            "targetId": target.shape_id if isinstance(target, BoundEndpoint) else "",
            "sourceSide": ConnectionResolver.endpoint_side(source, EdgeEnd.SOURCE).value,
            "targetSide": ConnectionResolver.endpoint_side(target, EdgeEnd.TARGET).value,
            "points": [_point_dict(point) for point in resolved.points],
            "label": "",
        }
        if edge.label is not None and resolved.label_point is not None and resolved.label_box is not None:
            data.update({
                "label": edge.label.text,
                "labelX": resolved.label_point.x,
                "labelY": resolved.label_point.y,
                "labelWidth": resolved.label_box.width,
                "labelHeight": resolved.label_box.height,
                "labelFontSize": resolved.label_box.font_size,
            })
        return data
