"""Constants and presets for connectordraw diagrams."""

from dataclasses import dataclass
from typing import Any, Dict

from .types import ShapeKind, Side


# Distance a stub extends outward from its anchor before an elbow turns.
STUB_LENGTH = 20.0

# Distance under which a dragged coordinate locks onto a reference.
ALIGNMENT_THRESHOLD = 10.0

# Shift that centres side midpoints on the rendered stroke.
ANCHOR_COMPENSATION = 2.0

# Horizontal inset of slanted shapes, as a fraction of the width.
SLANT_RATIO = 0.2

# Depth of the wave on a document shape's bottom edge, as a fraction of the height.
DOCUMENT_WAVE_RATIO = 0.05

PAN_LIMIT = 5000.0
MIN_SHAPE_SIZE = 50.0

# Length of the free edge created from a shape's connection handle.
HANDLE_EDGE_LENGTH = 50.0

DEFAULT_SOURCE_SIDE = Side.BOTTOM
DEFAULT_TARGET_SIDE = Side.TOP

DEFAULT_LABEL_FONT_SIZE = 14.0
GLYPH_WIDTH_RATIO = 0.6
LABEL_PADDING_RATIO = 1.6
LABEL_VERTICAL_PADDING_RATIO = 0.8
LABEL_MIN_WIDTH_RATIO = 2.0


@dataclass(frozen=True)
class EditorConfig:
    stub_length: float = STUB_LENGTH
    alignment_threshold: float = ALIGNMENT_THRESHOLD
    anchor_compensation: float = ANCHOR_COMPENSATION
    pan_limit: float = PAN_LIMIT
    min_shape_size: float = MIN_SHAPE_SIZE
    handle_edge_length: float = HANDLE_EDGE_LENGTH


SHAPE_PRESETS: Dict[str, Dict[str, Any]] = {
    "rectangle": {
        "shape": ShapeKind.RECTANGLE,
        "width": 200.0,
        "height": 100.0,
        "text": "Process",
    },
    "ellipse": {
        "shape": ShapeKind.ELLIPSE,
        "width": 180.0,
        "height": 90.0,
        "text": "Start / End",
    },
    "diamond": {
        "shape": ShapeKind.DIAMOND,
        "width": 160.0,
        "height": 120.0,
        "text": "Decision",
    },
    "parallelogram": {
        "shape": ShapeKind.PARALLELOGRAM,
        "width": 200.0,
        "height": 100.0,
        "text": "Input / Output",
    },
    "trapezoid": {
        "shape": ShapeKind.TRAPEZOID,
        "width": 200.0,
        "height": 100.0,
        "text": "Manual Operation",
    },
    "document": {
        "shape": ShapeKind.DOCUMENT,
        "width": 200.0,
        "height": 110.0,
        "text": "Document",
    },
}
