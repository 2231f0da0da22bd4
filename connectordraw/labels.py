"""Label size estimates.

Sizes are derived from character counts only; they size a background
plate behind the text and are never used for hit-testing.
"""

from __future__ import annotations

from typing import List, Optional

from .constants import (
    DEFAULT_LABEL_FONT_SIZE,
    GLYPH_WIDTH_RATIO,
    LABEL_MIN_WIDTH_RATIO,
    LABEL_PADDING_RATIO,
    LABEL_VERTICAL_PADDING_RATIO,
)
from .types import LabelBox


def label_box(text: str, font_size: Optional[float] = None) -> LabelBox:
    size = font_size or DEFAULT_LABEL_FONT_SIZE
    glyph_width = size * GLYPH_WIDTH_RATIO
    width = max(
        len(text) * glyph_width + size * LABEL_PADDING_RATIO,
        size * LABEL_MIN_WIDTH_RATIO,
    )
    height = size + size * LABEL_VERTICAL_PADDING_RATIO
    return LabelBox(width=width, height=height, font_size=size)


def wrap_text(text: str, max_width: float, font_size: float) -> List[str]:
    """Greedily break ``text`` into lines no wider than ``max_width``.

    A single word wider than ``max_width`` still gets a line of its own.
    """
    lines: List[str] = []
    current = ""
    for word in text.split(" "):
        candidate = word if current == "" else f"{current} {word}"
        if len(candidate) * font_size * GLYPH_WIDTH_RATIO > max_width and current != "":
            lines.append(current)
            current = word
        else:
            current = candidate
    lines.append(current)
    return lines
