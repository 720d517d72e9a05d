"""
ID Masking CLI
==============

Commands to extract masking regions from OCR output or an image, and to
write a redacted copy of an identity document.
"""

import json
import logging
import sys
from pathlib import Path

import click

from .core.config import AppConfig
from .core.exceptions import IdMaskError, InvalidBoxSpecError, InvalidOcrJsonError
from .core.models import BoundingBox, MaskingResult
from .ocr.engines import TesseractEngine
from .pipeline import MaskingPipeline
from .selection import SelectionState
from .utils.redaction import apply_redaction

# Setup logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _load_raw_json(path: Path):
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidOcrJsonError(str(path), str(e)) from e


def _parse_box(spec: str) -> BoundingBox:
    parts = spec.split(",")
    if len(parts) != 4:
        raise InvalidBoxSpecError(spec)
    try:
        x0, y0, x1, y1 = (int(part.strip()) for part in parts)
        return BoundingBox(x0=x0, y0=y0, x1=x1, y1=y1)
    except ValueError as e:
        raise InvalidBoxSpecError(spec) from e


def _recognize(config: AppConfig, image: Path):
    with TesseractEngine(config.ocr) as engine:
        return engine.recognize(image)


def _echo_result(result: MaskingResult) -> None:
    click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration YAML file (optional)",
)
@click.pass_context
def cli(ctx, verbose, config):
    """Korean ID document masking CLI."""
    try:
        app_config = AppConfig.load_with_overrides(yaml_path=config)
    except IdMaskError as e:
        logger.exception(f"Configuration failed: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(logging.DEBUG if verbose else app_config.log_level)
    ctx.obj = app_config


@cli.command(name="analyze")
@click.argument("ocr_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def analyze(config, ocr_json):
    """Extract masking regions from a raw OCR JSON dump."""
    try:
        raw = _load_raw_json(ocr_json)
        result = MaskingPipeline(config.masking).process(raw)
        _echo_result(result)
    except IdMaskError as e:
        logger.exception(f"Analysis failed: {e}")
        sys.exit(1)


@cli.command(name="detect")
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def detect(config, image):
    """Run Tesseract on an image and extract masking regions."""
    try:
        raw = _recognize(config, image)
        result = MaskingPipeline(config.masking).process(raw)
        _echo_result(result)
    except IdMaskError as e:
        logger.exception(f"Detection failed: {e}")
        sys.exit(1)


@cli.command(name="redact")
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Path to save the redacted image",
)
@click.option(
    "--ocr-json",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Raw OCR JSON for the image; Tesseract runs when omitted",
)
@click.option("--include", multiple=True, help="Region id to mask in addition to the defaults")
@click.option("--exclude", multiple=True, help="Region id to leave unmasked")
@click.option(
    "--box",
    multiple=True,
    help="Extra box x0,y0,x1,y1 in the same pixel space as the detected regions",
)
@click.pass_obj
def redact(config, image, output, ocr_json, include, exclude, box):
    """Mask the default selection, adjusted by overrides, and save the result."""
    try:
        boxes = [_parse_box(spec) for spec in box]
        raw = _load_raw_json(ocr_json) if ocr_json else _recognize(config, image)
        result = MaskingPipeline(config.masking).process(raw)

        selection = SelectionState(result)
        for region_id in include:
            selection.select(region_id)
        for region_id in exclude:
            selection.deselect(region_id)
        for bbox in boxes:
            selection.add_manual(bbox)

        regions = selection.selected_regions()
        redacted = apply_redaction(image, regions, source_size=result.image_size)
        output.parent.mkdir(parents=True, exist_ok=True)
        redacted.save(output)
        logger.info(f"Masked {len(regions)} regions, saved to {output}")
    except IdMaskError as e:
        logger.exception(f"Redaction failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
