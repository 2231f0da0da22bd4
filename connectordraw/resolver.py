"""Resolve edge records into concrete geometry.

The resolver never mutates the document: it reads a ``DiagramSnapshot``
and returns either geometry for the rendering layer or mutation records
for the store to apply.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from .anchors import resolve_anchor
from .constants import DEFAULT_SOURCE_SIDE, DEFAULT_TARGET_SIDE, STUB_LENGTH
from .elbow import route_elbow
from .labels import label_box
from .sampling import sample_at
from .types import (
    BoundEndpoint,
    DiagramEdge,
    DiagramSnapshot,
    EdgeEnd,
    EdgeEndpoint,
    FreeEndpoint,
    PathKind,
    Point,
    ResolvedEdge,
    Side,
    WaypointsChanged,
)

logger = logging.getLogger(__name__)


class ConnectionResolver:
    """Turn edges into terminal points, routes and label placements."""

    def __init__(self, stub_length: float = STUB_LENGTH, compensation: float = 0.0) -> None:
        self.stub_length = stub_length
        self.compensation = compensation

    # --- Endpoints ----------------------------------------------------------
    def endpoint_point(
        self, endpoint: EdgeEndpoint, snapshot: DiagramSnapshot
    ) -> Optional[Point]:
        """Concrete position of an endpoint, or None if its shape is gone."""
        if isinstance(endpoint, FreeEndpoint):
            return endpoint.point
        if isinstance(endpoint, BoundEndpoint):
            shape = snapshot.shape(endpoint.shape_id)
            if shape is None:
                logger.debug("Dangling endpoint: shape %s is missing", endpoint.shape_id)
                return None
            return resolve_anchor(shape.box, shape.shape, endpoint.anchor, self.compensation)
        raise TypeError(f"Unsupported endpoint: {endpoint!r}")

    @staticmethod
    def endpoint_side(endpoint: EdgeEndpoint, end: EdgeEnd) -> Side:
        """Side an elbow route leaves or enters ``endpoint`` through."""
        default = DEFAULT_SOURCE_SIDE if end is EdgeEnd.SOURCE else DEFAULT_TARGET_SIDE
        if isinstance(endpoint, BoundEndpoint):
            return Side.parse(endpoint.anchor.side)
        if isinstance(endpoint, FreeEndpoint):
            return endpoint.side or default
        raise TypeError(f"Unsupported endpoint: {endpoint!r}")

    # --- Routing ------------------------------------------------------------
    def route(self, edge: DiagramEdge, snapshot: DiagramSnapshot) -> Optional[List[Point]]:
        """Interior waypoints of an elbow edge, or None when unresolvable."""
        start = self.endpoint_point(edge.source, snapshot)
        end = self.endpoint_point(edge.target, snapshot)
        if start is None or end is None:
            return None
        return route_elbow(
            start,
            end,
            self.endpoint_side(edge.source, EdgeEnd.SOURCE),
            self.endpoint_side(edge.target, EdgeEnd.TARGET),
            self.stub_length,
        )

    def resolve(self, edge: DiagramEdge, snapshot: DiagramSnapshot) -> Optional[ResolvedEdge]:
        """Full polyline and label placement for ``edge``.

        Returns None when either end refers to a missing shape; the caller
        skips the edge for this frame.
        """
        start = self.endpoint_point(edge.source, snapshot)
        end = self.endpoint_point(edge.target, snapshot)
        if start is None or end is None:
            return None

        interior = list(edge.waypoints)
        if edge.path is PathKind.ELBOW and not interior:
            interior = route_elbow(
                start,
                end,
                self.endpoint_side(edge.source, EdgeEnd.SOURCE),
                self.endpoint_side(edge.target, EdgeEnd.TARGET),
                self.stub_length,
            )
        points = (start, *interior, end)

        if edge.label is None:
            return ResolvedEdge(edge.id, points)
        t = min(1.0, max(0.0, edge.label.t))
        return ResolvedEdge(
            edge.id,
            points,
            label_point=sample_at(points, t, edge.label.offset),
            label_box=label_box(edge.label.text, edge.label.font_size),
        )

    def refresh_edge(
        self, edge: DiagramEdge, snapshot: DiagramSnapshot
    ) -> Optional[WaypointsChanged]:
        """Recompute an elbow edge's stored route; None if nothing to do."""
        if edge.path is not PathKind.ELBOW:
            return None
        waypoints = self.route(edge, snapshot)
        if waypoints is None:
            return None
        return WaypointsChanged(edge.id, tuple(waypoints))

    def refresh_connected(
        self, shape_id: str, snapshot: DiagramSnapshot
    ) -> List[WaypointsChanged]:
        """Recompute routes for the elbow edges incident to ``shape_id`` only."""
        changes = []
        for edge in snapshot.edges_touching(shape_id):
            change = self.refresh_edge(edge, snapshot)
            if change is not None:
                changes.append(change)
        return changes

    # --- Edge transformations ----------------------------------------------
    def flip(self, edge: DiagramEdge, snapshot: DiagramSnapshot) -> DiagramEdge:
        """Swap an edge's direction, rerouting elbows and reversing authored points."""
        flipped = replace(
            edge,
            source=edge.target,
            target=edge.source,
            waypoints=list(reversed(edge.waypoints)),
        )
        if flipped.path is PathKind.ELBOW:
            waypoints = self.route(flipped, snapshot)
            if waypoints is not None:
                flipped.waypoints = waypoints
        return flipped

    def convert(
        self, edge: DiagramEdge, path: PathKind, snapshot: DiagramSnapshot
    ) -> DiagramEdge:
        """Switch an edge between straight and elbow routing."""
        if path is PathKind.STRAIGHT:
            return replace(edge, path=PathKind.STRAIGHT, waypoints=[])
        if edge.path is PathKind.ELBOW:
            return edge
        return replace(edge, path=PathKind.ELBOW, waypoints=self.route(edge, snapshot) or [])
