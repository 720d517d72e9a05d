"""Image loading and conversion shared by the OCR adapter and the redaction helper."""

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from ..core.exceptions import InputFileNotFoundError, ValidationError

logger = logging.getLogger(__name__)

ImageInput = Image.Image | np.ndarray | str | Path

MIN_IMAGE_DIMENSIONS = 2
MAX_IMAGE_DIMENSIONS = 3


def load_image(image: ImageInput) -> Image.Image:
    """Accept a PIL image, a numpy array or a file path."""
    if isinstance(image, Image.Image):
        return image
    if isinstance(image, np.ndarray):
        return from_array(image)

    path = Path(image)
    if not path.exists():
        raise InputFileNotFoundError(str(path))
    with Image.open(path) as opened:
        opened.load()
        logger.debug(f"Loaded image {path} ({opened.size[0]}x{opened.size[1]}, {opened.mode})")
        return opened.copy()


def from_array(array: np.ndarray) -> Image.Image:
    if array.ndim not in (MIN_IMAGE_DIMENSIONS, MAX_IMAGE_DIMENSIONS):
        raise ValidationError(f"Unexpected image shape: {array.shape}")
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    return Image.fromarray(array)


def to_drawable(image: Image.Image) -> Image.Image:
    """Copy of ``image`` in a mode ImageDraw can fill with an RGB colour."""
    if image.mode in ("RGB", "RGBA"):
        return image.copy()
    return image.convert("RGB")
