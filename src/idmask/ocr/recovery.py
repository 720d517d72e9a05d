"""
Structure Recovery
==================

Normalizes whatever an OCR engine returned into a ``RecognizedDocument``.

Engines frequently return partial structure: tesseract.js may report lines
only inside its block tree, some builds report flat words and no lines, some
callers only keep the hOCR string, and some only the text. Each shape is
handled by one recovery strategy; strategies are tried in order until one
yields lines.
"""

import logging

from ..core.config import MaskingConfig
from ..core.models import BoundingBox, Line, RecognizedDocument, Word
from .hocr import looks_like_hocr, markup_text, parse_hocr
from .layout import cluster_words_into_lines
from .models import (
    RawOcrOutput,
    RecoveryStrategy,
    as_node_list,
    coerce_line,
    coerce_word,
    image_size_of,
    raw_field,
)

logger = logging.getLogger(__name__)


def _coerce_lines(nodes: list) -> list[Line]:
    return [line for node in nodes if (line := coerce_line(node))]


def recover_block_tree(raw: RawOcrOutput, config: MaskingConfig) -> list[Line]:
    """Flatten block -> paragraph -> line trees in their original order."""
    nodes = [
        node
        for block in as_node_list(raw_field(raw, "blocks"))
        for paragraph in as_node_list(raw_field(block, "paragraphs"))
        for node in as_node_list(raw_field(paragraph, "lines"))
    ]
    return _coerce_lines(nodes)


def recover_flat_lines(raw: RawOcrOutput, config: MaskingConfig) -> list[Line]:
    return _coerce_lines(as_node_list(raw_field(raw, "lines")))


def _markup_of(raw: RawOcrOutput) -> str | None:
    if isinstance(raw, str):
        return raw if looks_like_hocr(raw) else None
    markup = raw_field(raw, "hocr")
    return markup if isinstance(markup, str) and markup.strip() else None


def recover_markup(raw: RawOcrOutput, config: MaskingConfig) -> list[Line]:
    markup = _markup_of(raw)
    if markup is None:
        return []
    return parse_hocr(markup, config.line_cluster_tolerance)


def recover_flat_words(raw: RawOcrOutput, config: MaskingConfig) -> list[Line]:
    words = [word for node in as_node_list(raw_field(raw, "words")) if (word := coerce_word(node))]
    if not words:
        return []
    return cluster_words_into_lines(words, config.line_cluster_tolerance)


def raw_text(raw: RawOcrOutput) -> str:
    """Engine-reported full text, or the visible text of a markup string."""
    if isinstance(raw, str):
        return markup_text(raw) if looks_like_hocr(raw) else raw
    text = raw_field(raw, "text")
    return text if isinstance(text, str) else ""


def recover_plain_text(raw: RawOcrOutput, config: MaskingConfig) -> list[Line]:
    """
    Fabricate geometry for text-only input.

    Lines are stacked at a fixed height and words spread at a fixed pitch, so
    the boxes are approximate placeholders rather than image positions.
    """
    height = config.synthetic_line_height
    width = config.synthetic_word_width
    pitch = width + config.synthetic_word_gap

    texts = [text.strip() for text in raw_text(raw).splitlines() if text.strip()]

    lines = []
    for row, text in enumerate(texts):
        y0 = row * height
        words = [
            Word(
                text=token,
                bbox=BoundingBox(x0=col * pitch, y0=y0, x1=col * pitch + width, y1=y0 + height),
            )
            for col, token in enumerate(text.split())
        ]
        lines.append(
            Line(text=text, bbox=BoundingBox.union(w.bbox for w in words), words=tuple(words))
        )
    return lines


RECOVERY_STRATEGIES: tuple[RecoveryStrategy, ...] = (
    RecoveryStrategy("block_tree", recover_block_tree),
    RecoveryStrategy("flat_lines", recover_flat_lines),
    RecoveryStrategy("markup", recover_markup),
    RecoveryStrategy("flat_words", recover_flat_words),
    RecoveryStrategy("plain_text", recover_plain_text, synthetic=True),
)


def _full_text(raw: RawOcrOutput, lines: list[Line]) -> str:
    try:
        text = raw_text(raw)
    except Exception as e:
        logger.warning(f"Could not read raw OCR text: {e}")
        text = ""
    if text.strip():
        return text
    return "\n".join(line.text for line in lines)


def normalize(raw: RawOcrOutput, config: MaskingConfig | None = None) -> RecognizedDocument:
    """
    Normalize raw OCR output into a ``RecognizedDocument``.

    Never raises: a strategy that fails is logged and skipped, and input
    with no recoverable text yields an empty document.

    Args:
        raw: Engine output in any supported shape
        config: Recovery settings (defaults from environment)

    Returns:
        Document whose ``words`` are the flattening of its lines' words
    """
    config = config or MaskingConfig()
    try:
        image_size = image_size_of(raw)
    except Exception as e:
        logger.warning(f"Could not read image size from raw OCR output: {e}")
        image_size = None

    for strategy in RECOVERY_STRATEGIES:
        try:
            lines = strategy.recover(raw, config)
        except Exception as e:
            logger.warning(f"Recovery strategy '{strategy.name}' failed: {e}")
            continue

        if not lines:
            continue

        if strategy.synthetic:
            logger.warning(
                f"No positional OCR data; synthesized geometry for {len(lines)} lines"
            )
        else:
            logger.debug(f"Recovered {len(lines)} lines with strategy '{strategy.name}'")

        return RecognizedDocument.from_lines(
            lines,
            full_text=_full_text(raw, lines),
            source=strategy.name,
            synthetic=strategy.synthetic,
            image_size=image_size,
        )

    logger.info("Raw OCR output contains no recoverable text")
    return RecognizedDocument(image_size=image_size)
