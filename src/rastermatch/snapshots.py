from __future__ import annotations

import base64
import io
import logging
from collections.abc import Sequence

from PIL import Image

from .backend import compare
from .types import ComparisonOptions, DiffResult, RasterImage

logger = logging.getLogger(__name__)

ImageSource = bytes | Image.Image


def _as_image(source: ImageSource) -> Image.Image:
    if isinstance(source, bytes):
        img = Image.open(io.BytesIO(source))
        try:
            img.load()
        except Exception:
            img.close()
            raise
        return img
    return source


def encode_png(data: bytes | bytearray, width: int, height: int) -> bytes:
    """Encode an RGBA8 buffer as PNG."""
    buf = io.BytesIO()
    with Image.frombytes("RGBA", (width, height), bytes(data)) as img:
        img.save(buf, format="PNG")
    return buf.getvalue()


def _mask_from_diff_output(output: bytearray, width: int, height: int) -> Image.Image:
    with Image.frombytes("RGBA", (width, height), bytes(output)) as rgba:
        alpha = rgba.getchannel("A")
    try:
        return alpha.point(lambda px: 255 if px > 0 else 0)
    finally:
        alpha.close()


def _encode_mask_png_base64(mask: Image.Image) -> str:
    buf = io.BytesIO()
    mask.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


def compare_images(
    before: ImageSource,
    after: ImageSource,
    options: ComparisonOptions | None = None,
) -> DiffResult | None:
    return compare_images_batch([(before, after)], options)[0]


def compare_images_batch(
    pairs: Sequence[tuple[ImageSource, ImageSource]],
    options: ComparisonOptions | None = None,
) -> list[DiffResult | None]:
    return [
        _compare_single_pair(idx, before, after, options)
        for idx, (before, after) in enumerate(pairs)
    ]


def _compare_single_pair(
    idx: int,
    before: ImageSource,
    after: ImageSource,
    options: ComparisonOptions | None,
) -> DiffResult | None:
    before_img: Image.Image | None = None
    after_img: Image.Image | None = None
    diff_mask: Image.Image | None = None
    try:
        before_img = _as_image(before)
        after_img = _as_image(after)
        before_raster = RasterImage.from_pil(before_img)
        after_raster = RasterImage.from_pil(after_img)
        width, height = before_raster.width, before_raster.height

        output = bytearray(len(before_raster.data))
        run_options = (options or ComparisonOptions()).model_copy(
            update={"diff_mask": True, "output": output}
        )
        result = compare(before_raster, after_raster, run_options)

        if result.diff_count == 0:
            diff_mask = Image.new("L", (width, height), 0)
        else:
            diff_mask = _mask_from_diff_output(output, width, height)

        return DiffResult(
            diff_mask_png=_encode_mask_png_base64(diff_mask),
            diff_score=result.diff_percentage,
            changed_pixels=result.diff_count,
            aa_pixels=result.aa_count,
            total_pixels=result.total_pixels,
            width=width,
            height=height,
        )
    except Exception:
        logger.exception("Failed to compare image pair %d", idx)
        return None
    finally:
        if before_img is not None and isinstance(before, bytes):
            before_img.close()
        if after_img is not None and isinstance(after, bytes):
            after_img.close()
        if diff_mask is not None:
            diff_mask.close()
