"""Line reconstruction for engines that only report words."""

import logging

from ..core.models import BoundingBox, Line, Word
from .models import line_from_words

logger = logging.getLogger(__name__)

DEFAULT_CLUSTER_TOLERANCE = 0.6


def cluster_words_into_lines(
    words: list[Word], tolerance: float = DEFAULT_CLUSTER_TOLERANCE
) -> list[Line]:
    """
    Group words into lines by vertical clustering.

    Words are walked top-to-bottom, then left-to-right. A new line opens
    whenever a word's vertical center is further than ``tolerance`` times the
    running line's height from the running line's center.

    Args:
        words: Words with no line grouping
        tolerance: Allowed center deviation as a fraction of line height

    Returns:
        Lines in reading order; words keep their encounter order
    """
    ordered = sorted(words, key=lambda w: (w.bbox.y0, w.bbox.x0))

    lines: list[Line] = []
    current: list[Word] = []
    current_box: BoundingBox | None = None

    for word in ordered:
        if current_box is not None:
            deviation = abs(word.bbox.center_y - current_box.center_y)
            if deviation > tolerance * current_box.height:
                lines.append(line_from_words(current))
                current = []
                current_box = None

        current.append(word)
        current_box = word.bbox if current_box is None else BoundingBox.union([current_box, word.bbox])

    if current:
        lines.append(line_from_words(current))

    logger.debug(f"Clustered {len(ordered)} words into {len(lines)} lines")
    return lines
