"""Utility functions for image handling and redaction."""

from .image_ops import load_image
from .redaction import apply_redaction, scale_bbox

__all__ = [
    "apply_redaction",
    "load_image",
    "scale_bbox",
]
