"""
OCR Data Models
===============

The raw engine output accepted by structure recovery, and the coercion
helpers that turn its loosely-typed nodes into core models.

``RawOcrOutput`` is deliberately loose: a tesseract.js-style mapping, any
object exposing the same attributes, an hOCR markup string, or plain text.
"""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from ..core.config import MaskingConfig
from ..core.models import BoundingBox, Line, Word

RawOcrOutput = Union[Mapping[str, Any], str, Any]

MAX_CONFIDENCE = 100.0


@dataclass(frozen=True)
class RecoveryStrategy:
    """One way of recovering lines from raw output, tried in a fixed order."""

    name: str
    recover: Callable[[RawOcrOutput, MaskingConfig], list[Line]]
    synthetic: bool = False


def raw_field(node: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute; ``None`` when absent."""
    if node is None or isinstance(node, str | bytes):
        return None
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def as_node_list(value: Any) -> list[Any]:
    """Child node collections must be lists or tuples; anything else is empty."""
    if isinstance(value, list | tuple):
        return list(value)
    return []


def _to_int(value: Any) -> int:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite coordinate: {value!r}")
    return round(number)


def coerce_bbox(value: Any) -> BoundingBox | None:
    """Accept the box shapes engines emit; ``None`` for anything unparseable."""
    if value is None:
        return None
    if isinstance(value, BoundingBox):
        return value

    try:
        if isinstance(value, list | tuple):
            if len(value) != 4:
                return None
            x0, y0, x1, y1 = (_to_int(v) for v in value)
        elif raw_field(value, "x0") is not None:
            x0, y0, x1, y1 = (_to_int(raw_field(value, k)) for k in ("x0", "y0", "x1", "y1"))
        elif raw_field(value, "right") is not None:
            x0, y0, x1, y1 = (
                _to_int(raw_field(value, k)) for k in ("left", "top", "right", "bottom")
            )
        elif raw_field(value, "width") is not None:
            x0 = _to_int(raw_field(value, "left"))
            y0 = _to_int(raw_field(value, "top"))
            x1 = x0 + _to_int(raw_field(value, "width"))
            y1 = y0 + _to_int(raw_field(value, "height"))
        else:
            return None
    except (TypeError, ValueError, OverflowError):
        return None

    return BoundingBox(x0=min(x0, x1), y0=min(y0, y1), x1=max(x0, x1), y1=max(y0, y1))


def coerce_confidence(value: Any) -> float:
    """Clamp to 0..100; tesseract reports -1 for rows that are not words."""
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(confidence):
        return 0.0
    return min(max(confidence, 0.0), MAX_CONFIDENCE)


def coerce_word(node: Any) -> Word | None:
    text = raw_field(node, "text")
    if not isinstance(text, str) or not text.strip():
        return None
    bbox = coerce_bbox(raw_field(node, "bbox"))
    if bbox is None:
        return None
    confidence = raw_field(node, "confidence")
    if confidence is None:
        confidence = raw_field(node, "conf")
    return Word(text=text.strip(), bbox=bbox, confidence=coerce_confidence(confidence))


def line_from_words(words: list[Word]) -> Line:
    """Reconstructed line: union box, space-joined text in the given order."""
    return Line(
        text=" ".join(word.text for word in words),
        bbox=BoundingBox.union(word.bbox for word in words),
        words=tuple(words),
    )


def coerce_line(node: Any) -> Line | None:
    words = [word for child in as_node_list(raw_field(node, "words")) if (word := coerce_word(child))]

    text = raw_field(node, "text")
    if isinstance(text, str):
        text = text.rstrip("\r\n")
    if not isinstance(text, str) or not text.strip():
        if not words:
            return None
        text = " ".join(word.text for word in words)

    bbox = coerce_bbox(raw_field(node, "bbox"))
    if bbox is None:
        if not words:
            return None
        bbox = BoundingBox.union(word.bbox for word in words)

    return Line(text=text, bbox=bbox, words=tuple(words))


def image_size_of(raw: RawOcrOutput) -> tuple[int, int] | None:
    """Engine working image size as ``(width, height)``, if reported."""
    size = raw_field(raw, "image_size")
    if size is None:
        dims = raw_field(raw, "imageDimensions")
        if dims is not None:
            size = (raw_field(dims, "width"), raw_field(dims, "height"))
    if not isinstance(size, list | tuple) or len(size) != 2:
        return None
    try:
        width, height = (_to_int(v) for v in size)
    except (TypeError, ValueError, OverflowError):
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height
