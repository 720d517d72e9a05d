"""
OCR Engine Adapter
==================

Tesseract collaborator that turns an image into ``RawOcrOutput``. The
masking core never calls it; the CLI and other callers run it first and
hand its output to the pipeline.
"""

import logging
from typing import Any

from ..core.config import OCRConfig
from ..core.exceptions import (
    OCREngineInitializationError,
    OCREngineNotInitializedError,
    OCRRecognitionError,
)
from ..utils.image_ops import ImageInput, load_image
from .hocr import markup_text

# Optional dependency - handled gracefully
try:
    import pytesseract
except ImportError:
    pytesseract = None

logger = logging.getLogger(__name__)


class TesseractEngine:
    """Tesseract OCR via pytesseract, reporting an hOCR document."""

    def __init__(self, config: OCRConfig | None = None):
        self.config = config or OCRConfig()
        self.is_initialized = False
        self.version: str | None = None

    def initialize(self) -> bool:
        """Check that pytesseract and the tesseract binary are usable."""
        if pytesseract is None:
            logger.warning("Tesseract not available - install with: pip install pytesseract")
            return False

        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd

        try:
            version = pytesseract.get_tesseract_version()
        except Exception:
            logger.exception("Failed to initialize Tesseract")
            return False
        else:
            self.version = str(version)
            self.is_initialized = True
            logger.info(f"Tesseract initialized successfully (version: {self.version})")
            return True

    def recognize(self, image: ImageInput) -> dict[str, Any]:
        """
        Run recognition on one image.

        Args:
            image: PIL image, numpy array or path to an image file

        Returns:
            Raw OCR mapping with ``hocr``, ``text``, ``image_size`` and ``engine`` keys
        """
        if not self.is_initialized:
            raise OCREngineNotInitializedError()

        pil_image = load_image(image)

        try:
            hocr = pytesseract.image_to_pdf_or_hocr(
                pil_image,
                extension="hocr",
                lang=self.config.language,
                timeout=self.config.timeout_seconds,
            )
        except RuntimeError as e:
            # TesseractError subclasses RuntimeError; timeouts raise a bare one
            raise OCRRecognitionError(str(e)) from e

        if isinstance(hocr, bytes):
            hocr = hocr.decode("utf-8", errors="replace")

        logger.info(f"Tesseract recognized image of size {pil_image.size}")
        return {
            "engine": "tesseract",
            "hocr": hocr,
            "text": markup_text(hocr),
            "image_size": pil_image.size,
        }

    def cleanup(self):
        """Tesseract keeps no resources between calls."""
        self.is_initialized = False

    def __enter__(self):
        if not self.is_initialized and not self.initialize():
            raise OCREngineInitializationError("tesseract", "see log for details")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
