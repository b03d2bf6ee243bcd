from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import click
from PIL import Image
from pydantic import ValidationError

from .backend import compare
from .errors import DimensionMismatch, ImageComparisonError
from .settings import settings
from .snapshots import encode_png
from .types import ComparisonOptions, RasterImage

logger = logging.getLogger(__name__)

EXIT_IDENTICAL = 0
EXIT_USAGE = 64
EXIT_DIMENSION_MISMATCH = 65
EXIT_DIFFERENT = 66

USAGE = "Usage: rastermatch image1.png image2.png [diff.png] [threshold] [detectAntiAliasing]"


def _read_image(path: Path) -> RasterImage:
    with Image.open(path) as img:
        return RasterImage.from_pil(img)


@click.command("rastermatch")
@click.argument("image1", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("image2", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("diff_output", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.argument("threshold", required=False, type=float)
@click.argument("detect_anti_aliasing", required=False)
def compare_cmd(
    image1: Path,
    image2: Path,
    diff_output: Path | None,
    threshold: float | None,
    detect_anti_aliasing: str | None,
) -> int:
    """Compare IMAGE1 and IMAGE2 pixel by pixel, optionally writing a diff PNG."""
    overrides: dict[str, object] = {}
    if threshold is not None:
        overrides["threshold"] = threshold
    if detect_anti_aliasing is not None:
        overrides["detect_anti_aliasing"] = detect_anti_aliasing != "false"

    try:
        img1 = _read_image(image1)
        img2 = _read_image(image2)
    except OSError as exc:
        click.echo(f"error: {exc}", err=True)
        return EXIT_USAGE

    if (img1.width, img1.height) != (img2.width, img2.height):
        click.echo(
            f"Image dimensions do not match: {img1.width}x{img1.height} vs {img2.width}x{img2.height}"
        )
        return EXIT_DIMENSION_MISMATCH

    output = bytearray(len(img1.data)) if diff_output else None
    try:
        options = ComparisonOptions(output=output, **overrides)
    except ValidationError as exc:
        click.echo(f"error: {exc}", err=True)
        return EXIT_USAGE

    start = time.perf_counter()
    try:
        result = compare(img1, img2, options)
    except DimensionMismatch as exc:
        click.echo(str(exc))
        return EXIT_DIMENSION_MISMATCH
    except ImageComparisonError as exc:
        click.echo(f"error: {exc}", err=True)
        return EXIT_USAGE
    elapsed_ms = (time.perf_counter() - start) * 1000

    click.echo(f"matched in: {elapsed_ms:.3f}ms")
    click.echo(f"different pixels: {result.diff_count}")
    click.echo(f"error: {round(result.diff_percentage * 100, 2):g}%")
    if result.aa_count > 0:
        click.echo(f"anti-aliased pixels: {result.aa_count}")

    if diff_output and output is not None:
        try:
            diff_output.write_bytes(encode_png(output, img1.width, img1.height))
        except OSError as exc:
            click.echo(f"error: {exc}", err=True)
            return EXIT_USAGE
        logger.info("Wrote diff image", extra={"path": str(diff_output)})

    return EXIT_DIFFERENT if result.diff_count else EXIT_IDENTICAL


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level)
    try:
        return compare_cmd.main(args=argv, standalone_mode=False)
    except click.UsageError as exc:
        click.echo(f"error: {exc.format_message()}", err=True)
        click.echo(USAGE)
        return EXIT_USAGE


def run() -> None:
    sys.exit(main())
