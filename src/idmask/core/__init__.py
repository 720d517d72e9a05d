"""Core components for ID masking."""

from .config import AppConfig, MaskingConfig, OCRConfig
from .exceptions import (
    ConfigurationError,
    IdMaskError,
    OCREngineError,
    ProcessingError,
    ValidationError,
)
from .models import (
    SENSITIVE_KINDS,
    BoundingBox,
    Candidate,
    DocumentType,
    FieldKind,
    Line,
    MaskingRegion,
    MaskingResult,
    RecognizedDocument,
    Word,
)

__all__ = [
    "SENSITIVE_KINDS",
    "AppConfig",
    "BoundingBox",
    "Candidate",
    "ConfigurationError",
    "DocumentType",
    "FieldKind",
    "IdMaskError",
    "Line",
    "MaskingConfig",
    "MaskingRegion",
    "MaskingResult",
    "OCRConfig",
    "OCREngineError",
    "ProcessingError",
    "RecognizedDocument",
    "ValidationError",
    "Word",
]
