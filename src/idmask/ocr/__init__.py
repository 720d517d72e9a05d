"""
OCR Module for ID Masking
=========================

Structure recovery for raw OCR engine output, plus the Tesseract adapter
that produces such output from an image.
"""

from .engines import TesseractEngine
from .hocr import parse_hocr
from .layout import cluster_words_into_lines
from .models import RawOcrOutput, RecoveryStrategy
from .recovery import RECOVERY_STRATEGIES, normalize

__all__ = [
    "RECOVERY_STRATEGIES",
    "RawOcrOutput",
    "RecoveryStrategy",
    "TesseractEngine",
    "cluster_words_into_lines",
    "normalize",
    "parse_hocr",
]
