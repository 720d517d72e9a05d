"""
hOCR Parsing
============

Recovers lines and words from an hOCR recognition document, the HTML
markup tesseract emits with ``title="bbox x0 y0 x1 y1; x_wconf 93"``
annotations on its line and word nodes.
"""

import logging
import re

from bs4 import BeautifulSoup

from ..core.models import BoundingBox, Line, Word
from .layout import DEFAULT_CLUSTER_TOLERANCE, cluster_words_into_lines
from .models import coerce_confidence

logger = logging.getLogger(__name__)

LINE_CLASSES = ["ocr_line", "ocr_caption", "ocr_header", "ocr_textfloat"]
WORD_CLASS = "ocrx_word"

BBOX_TOKEN = re.compile(r"\bbbox\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)")
WCONF_TOKEN = re.compile(r"\bx_wconf\s+(-?\d+(?:\.\d+)?)")


def looks_like_hocr(text: str) -> bool:
    """True for markup carrying bbox annotations rather than plain text."""
    return text.lstrip().startswith("<") and BBOX_TOKEN.search(text) is not None


def parse_title_bbox(title: str | None) -> BoundingBox | None:
    if not title:
        return None
    match = BBOX_TOKEN.search(title)
    if match is None:
        return None
    x0, y0, x1, y1 = (int(v) for v in match.groups())
    return BoundingBox(x0=min(x0, x1), y0=min(y0, y1), x1=max(x0, x1), y1=max(y0, y1))


def _parse_word(node) -> Word | None:
    text = node.get_text("", strip=True)
    if not text:
        return None
    title = node.get("title") or ""
    bbox = parse_title_bbox(title)
    if bbox is None:
        return None
    conf_match = WCONF_TOKEN.search(title)
    confidence = coerce_confidence(conf_match.group(1)) if conf_match else 0.0
    return Word(text=text, bbox=bbox, confidence=confidence)


def _parse_line(node) -> Line | None:
    words = [word for child in node.find_all(class_=WORD_CLASS) if (word := _parse_word(child))]

    if words:
        text = " ".join(word.text for word in words)
    else:
        text = node.get_text(" ", strip=True)
    if not text:
        return None

    bbox = parse_title_bbox(node.get("title"))
    if bbox is None:
        if not words:
            return None
        bbox = BoundingBox.union(word.bbox for word in words)

    return Line(text=text, bbox=bbox, words=tuple(words))


def parse_hocr(markup: str, tolerance: float = DEFAULT_CLUSTER_TOLERANCE) -> list[Line]:
    """
    Parse an hOCR document into lines.

    Args:
        markup: hOCR document or fragment
        tolerance: Clustering tolerance used when the markup has words but
            no line-level nodes

    Returns:
        Lines in document order (empty if nothing usable was found)
    """
    soup = BeautifulSoup(markup, "html.parser")

    line_nodes = soup.find_all(class_=LINE_CLASSES)
    if line_nodes:
        lines = [line for node in line_nodes if (line := _parse_line(node))]
        logger.debug(f"Parsed {len(lines)} of {len(line_nodes)} hOCR line nodes")
        return lines

    words = [word for node in soup.find_all(class_=WORD_CLASS) if (word := _parse_word(node))]
    if words:
        logger.debug(f"hOCR has {len(words)} words but no line nodes, clustering")
        return cluster_words_into_lines(words, tolerance)
    return []


def markup_text(markup: str) -> str:
    """Visible text of an hOCR document, one line per line node."""
    soup = BeautifulSoup(markup, "html.parser")
    line_nodes = soup.find_all(class_=LINE_CLASSES)
    if line_nodes:
        texts = (node.get_text(" ", strip=True) for node in line_nodes)
        return "\n".join(text for text in texts if text)
    return soup.get_text(" ", strip=True)
