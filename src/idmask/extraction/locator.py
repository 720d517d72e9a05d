"""
Sub-span Locator
================

Back-projects a substring of a line onto a sub-box of the line's bounding
box, assuming the line's visible characters share its width evenly. The
result is meant to visibly cover the substring under a solid fill, not to be
pixel-accurate.
"""

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import BoundingBox, Line

# OCR line boxes run taller than the glyphs they bound
DEFAULT_VERTICAL_PADDING = 0.15


def interpolate(
    line_bbox: BoundingBox,
    total_visible_chars: int,
    start_offset: int,
    span_length: int,
    vertical_padding: float = DEFAULT_VERTICAL_PADDING,
) -> BoundingBox:
    """
    Proportional sub-box for ``span_length`` characters starting at ``start_offset``.

    Horizontal bounds are rounded outward and clamped to the line; vertical
    bounds are shrunk by ``vertical_padding`` of the line height on each side.
    Degenerate input (no width, no characters, empty span) returns the line
    box unchanged.
    """
    if total_visible_chars <= 0 or span_length <= 0 or line_bbox.width <= 0:
        return line_bbox

    start = min(max(start_offset, 0), total_visible_chars)
    end = min(start_offset + span_length, total_visible_chars)
    if end <= start:
        return line_bbox

    char_width = line_bbox.width / total_visible_chars
    x0 = max(math.floor(line_bbox.x0 + char_width * start), line_bbox.x0)
    x1 = min(math.ceil(line_bbox.x0 + char_width * end), line_bbox.x1)

    padding = line_bbox.height * vertical_padding
    y0 = math.floor(line_bbox.y0 + padding)
    y1 = math.ceil(line_bbox.y1 - padding)
    if y1 < y0:
        y0, y1 = line_bbox.y0, line_bbox.y1

    return BoundingBox(x0=x0, y0=y0, x1=x1, y1=y1)


@dataclass(frozen=True)
class VisibleSpan:
    """
    A line's text annotated with its visible extent.

    Offsets passed to the ``locate*`` methods index the raw line text (the
    string a regex ran against); leading whitespace is discounted here so
    callers never repeat that arithmetic.
    """

    text: str
    bbox: BoundingBox
    vertical_padding: float = DEFAULT_VERTICAL_PADDING

    @classmethod
    def for_line(cls, line: Line, vertical_padding: float = DEFAULT_VERTICAL_PADDING) -> "VisibleSpan":
        return cls(text=line.text, bbox=line.bbox, vertical_padding=vertical_padding)

    @property
    def leading(self) -> int:
        return len(self.text) - len(self.text.lstrip())

    @property
    def length(self) -> int:
        return len(self.text.strip())

    def locate(self, start: int, length: int) -> BoundingBox:
        return interpolate(
            self.bbox, self.length, start - self.leading, length, self.vertical_padding
        )

    def locate_group(self, match: re.Match, group: int | str = 0) -> BoundingBox:
        start, end = match.span(group)
        return self.locate(start, end - start)

    def locate_indices(self, indices: Sequence[int]) -> BoundingBox:
        """Box covering the first through the last of ``indices``."""
        if not indices:
            return self.bbox
        first, last = min(indices), max(indices)
        return self.locate(first, last - first + 1)
