"""Solid-fill redaction of masking regions onto a raster."""

import logging
from collections.abc import Iterable

from PIL import ImageDraw

from ..core.models import BoundingBox, MaskingRegion
from .image_ops import ImageInput, load_image, to_drawable

logger = logging.getLogger(__name__)


def scale_bbox(
    bbox: BoundingBox, source_size: tuple[int, int], target_size: tuple[int, int]
) -> BoundingBox:
    """
    Map ``bbox`` from the OCR working image onto a raster of another size.

    Args:
        bbox: Box in the pixel space of the image the engine processed
        source_size: (width, height) of that image
        target_size: (width, height) of the raster being drawn on

    Returns:
        Box scaled independently per axis, rounded outward
    """
    source_w, source_h = source_size
    target_w, target_h = target_size
    if source_w <= 0 or source_h <= 0:
        return bbox
    return bbox.scale(target_w / source_w, target_h / source_h)


def apply_redaction(
    image: ImageInput,
    regions: Iterable[MaskingRegion],
    source_size: tuple[int, int] | None = None,
    fill: tuple[int, int, int] = (0, 0, 0),
):
    """
    Draw a filled rectangle over every region on a copy of ``image``.

    Boxes are scaled from ``source_size`` when it is given and differs from
    the image size; otherwise they are drawn as-is.
    """
    redacted = to_drawable(load_image(image))
    draw = ImageDraw.Draw(redacted)
    width, height = redacted.size

    count = 0
    for region in regions:
        bbox = region.bbox
        if source_size is not None and tuple(source_size) != (width, height):
            bbox = scale_bbox(bbox, source_size, (width, height))
        x0, y0 = max(bbox.x0, 0), max(bbox.y0, 0)
        x1, y1 = min(bbox.x1, width), min(bbox.y1, height)
        if x1 <= x0 or y1 <= y0:
            logger.debug(f"Region {region.id} falls outside the image, skipped")
            continue
        # PIL rectangles include the end coordinate
        draw.rectangle([x0, y0, x1 - 1, y1 - 1], fill=fill)
        count += 1

    logger.info(f"Redacted {count} regions")
    return redacted
