"""
Pytest configuration and fixtures for ID masking tests.
"""

import json
import os

import pytest
from PIL import Image

from idmask.core.config import MaskingConfig
from idmask.core.models import BoundingBox, Line, RecognizedDocument, Word


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host MASKING_/OCR_/APP_ variables out of the tests."""
    for key in list(os.environ):
        if key.startswith(("MASKING_", "OCR_", "APP_")):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def masking_config():
    """Default masking configuration."""
    return MaskingConfig(_env_file=None)


@pytest.fixture
def make_line():
    """Factory for a line with optional words."""

    def _make_line(text, x0, y0, x1, y1, words=()):
        return Line(text=text, bbox=BoundingBox(x0=x0, y0=y0, x1=x1, y1=y1), words=tuple(words))

    return _make_line


@pytest.fixture
def make_word():
    """Factory for a single word."""

    def _make_word(text, x0, y0, x1, y1, confidence=90.0):
        return Word(
            text=text, bbox=BoundingBox(x0=x0, y0=y0, x1=x1, y1=y1), confidence=confidence
        )

    return _make_word


@pytest.fixture
def make_document():
    """Factory for a document built from lines."""

    def _make_document(*lines, full_text=None):
        return RecognizedDocument.from_lines(lines, full_text=full_text, source="test")

    return _make_document


def raw_line(text, x0, y0, x1, y1, words=None):
    """tesseract.js-style line node."""
    node = {"text": text, "bbox": {"x0": x0, "y0": y0, "x1": x1, "y1": y1}}
    if words is not None:
        node["words"] = words
    return node


@pytest.fixture
def resident_card_raw():
    """Flat-lines resident registration card."""
    lines = [
        raw_line("주민등록증", 10, 10, 200, 40),
        raw_line("홍길동", 10, 50, 100, 80),
        raw_line("810627-1234567", 100, 90, 240, 120),
        raw_line("서울특별시 강남구 테헤란로 123", 10, 130, 300, 160),
        raw_line("(역삼동, 가나아파트)", 10, 165, 200, 195),
        raw_line("2020.01.15", 10, 205, 120, 235),
        raw_line("서울특별시 강남구청장", 10, 245, 250, 275),
    ]
    return {
        "text": "\n".join(line["text"] for line in lines),
        "lines": lines,
        "imageDimensions": {"width": 400, "height": 300},
    }


@pytest.fixture
def driver_license_raw():
    """Block-tree driver license."""
    lines = [
        raw_line("자동차운전면허증", 10, 10, 300, 40),
        raw_line("11-19-123456-78", 10, 50, 250, 80),
        raw_line("홍길동", 10, 90, 100, 120),
        raw_line("810627-1234567", 10, 130, 150, 160),
        raw_line("서울특별시 강남구 테헤란로 123", 10, 170, 300, 200),
        raw_line("가나아파트 101동 1001호", 10, 205, 250, 235),
        raw_line("2025.01.01~2034.12.31", 10, 245, 260, 275),
        raw_line("AB12CD", 10, 285, 70, 315),
        raw_line("2024.05.20 서울경찰청장", 10, 325, 300, 355),
    ]
    return {
        "text": "\n".join(line["text"] for line in lines),
        "blocks": [{"paragraphs": [{"lines": lines[:4]}, {"lines": lines[4:]}]}],
        "image_size": [400, 400],
    }


@pytest.fixture
def sample_hocr():
    """Minimal tesseract hOCR output."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<html><body><div class="ocr_page" title="bbox 0 0 400 200">'
        '<span class="ocr_line" title="bbox 10 20 200 50; baseline 0 -5">'
        '<span class="ocrx_word" title="bbox 10 20 90 50; x_wconf 91">주민등록증</span> '
        "</span>"
        '<span class="ocr_line" title="bbox 10 60 150 90; baseline 0 -5">'
        '<span class="ocrx_word" title="bbox 10 60 150 90; x_wconf 88">810627-1234567</span>'
        "</span>"
        "</div></body></html>"
    )


@pytest.fixture
def white_image_path(tmp_path):
    """400x300 white PNG on disk."""
    path = tmp_path / "card.png"
    Image.new("RGB", (400, 300), color="white").save(path)
    return path


@pytest.fixture
def ocr_json_path(tmp_path, resident_card_raw):
    """Resident card raw OCR dump on disk."""
    path = tmp_path / "card.json"
    path.write_text(json.dumps(resident_card_raw, ensure_ascii=False), encoding="utf-8")
    return path
