"""Custom exceptions for the ID masking system."""

from typing import Any


class IdMaskError(Exception):
    """Base exception for all idmask errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class ValidationError(IdMaskError):
    """Exception raised for input validation errors."""


class ConfigurationError(IdMaskError):
    """Exception raised for configuration errors."""


class ProcessingError(IdMaskError):
    """Exception raised during general processing operations."""


class OCREngineError(IdMaskError):
    """Exception raised by the OCR engine collaborator."""


# Specific exception classes for TRY003 compliance
class OCREngineInitializationError(OCREngineError):
    """Exception raised when the OCR engine cannot be initialized."""

    def __init__(self, engine: str = "tesseract", reason: str | None = None):
        message = f"Failed to initialize OCR engine: {engine}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class OCREngineNotInitializedError(OCREngineError):
    """Exception raised when recognition is requested before initialization."""

    def __init__(self):
        super().__init__("OCR engine not initialized")


class OCRRecognitionError(OCREngineError):
    """Exception raised when the engine fails on an image."""

    def __init__(self, error: str):
        super().__init__(f"OCR recognition failed: {error}")


class InputFileNotFoundError(ProcessingError):
    """Exception raised when input file is not found."""

    def __init__(self, file_path: str):
        super().__init__(f"Input file not found: {file_path}")


class InvalidOcrJsonError(ProcessingError):
    """Exception raised when a raw OCR dump cannot be decoded."""

    def __init__(self, file_path: str, error: str):
        super().__init__(f"Invalid OCR JSON in {file_path}: {error}")


class InvalidBoxSpecError(ValidationError):
    """Exception raised for a malformed manual box specification."""

    def __init__(self, spec: str):
        super().__init__(f"Invalid box specification '{spec}', expected x0,y0,x1,y1")


class UnknownRegionError(ValidationError):
    """Exception raised when a selection names a region that does not exist."""

    def __init__(self, region_id: str):
        super().__init__(f"Unknown region id: {region_id}")


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")


class InvertedBoundingBoxError(ValueError):
    """Exception raised when a bounding box has x1 < x0 or y1 < y0."""

    def __init__(self):
        super().__init__("bounding box must satisfy x1 >= x0 and y1 >= y0")


class ConfidenceOutOfRangeError(ValueError):
    """Exception raised for word confidence outside 0..100."""

    def __init__(self, confidence: float):
        super().__init__(f"Confidence must be between 0 and 100, got {confidence}")


class WordsMismatchError(ValueError):
    """Exception raised when document words are not the flattening of its lines."""

    def __init__(self):
        super().__init__("document words must equal the flattened words of its lines")


class RatioOutOfRangeError(ValueError):
    """Exception raised for ratio settings outside 0..1."""

    def __init__(self, field_name: str):
        super().__init__(f"{field_name} must be between 0 and 1")
