"""Korean identity document masking: PII field extraction from OCR output."""

from .core.models import DocumentType, FieldKind, MaskingRegion, MaskingResult
from .pipeline import MaskingPipeline, process_document
from .selection import SelectionState

__version__ = "0.1.0"

__all__ = [
    "DocumentType",
    "FieldKind",
    "MaskingPipeline",
    "MaskingRegion",
    "MaskingResult",
    "SelectionState",
    "process_document",
]
