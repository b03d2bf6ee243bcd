from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from .antialias import antialiased
from .color import color_delta, draw_gray_pixel, draw_pixel
from .settings import settings
from .types import ComparisonOptions, ComparisonResult, RasterImage, build_result
from .validate import PixelBuffers, validate_input


class Engine(Protocol):
    name: str

    def compare(
        self,
        image1: RasterImage,
        image2: RasterImage,
        options: ComparisonOptions | None = None,
    ) -> ComparisonResult: ...


def _scan_rows(
    bufs: PixelBuffers,
    options: ComparisonOptions,
    y_start: int,
    y_stop: int,
) -> tuple[int, int]:
    """Classify every pixel of rows [y_start, y_stop). Writes only to those rows of the output."""
    data1, data2, words1, words2, output, width, height = bufs
    max_delta = options.max_delta
    detect_aa = options.detect_anti_aliasing
    diff_mask = options.diff_mask
    alpha = options.alpha
    aa_r, aa_g, aa_b = options.aa_color
    diff_r, diff_g, diff_b = options.diff_color
    alt_r, alt_g, alt_b = options.alt_color
    diff = 0
    aa_count = 0

    for y in range(y_start, y_stop):
        for x in range(width):
            i = y * width + x
            pos = i * 4

            delta = 0 if words1[i] == words2[i] else color_delta(data1, data2, pos, pos, False)

            if abs(delta) > max_delta:
                if detect_aa and (
                    antialiased(data1, x, y, width, height, words1, words2)
                    or antialiased(data2, x, y, width, height, words2, words1)
                ):
                    aa_count += 1
                    # anti-aliased pixels are never part of a mask
                    if output is not None and not diff_mask:
                        draw_pixel(output, pos, aa_r, aa_g, aa_b)
                else:
                    if output is not None:
                        if delta < 0:
                            draw_pixel(output, pos, alt_r, alt_g, alt_b)
                        else:
                            draw_pixel(output, pos, diff_r, diff_g, diff_b)
                    diff += 1
            elif output is not None and not diff_mask:
                draw_gray_pixel(data1, pos, alpha, output)

    return diff, aa_count


def row_batches(height: int, batch_size: int) -> list[tuple[int, int]]:
    return [(y, min(y + batch_size, height)) for y in range(0, height, batch_size)]


def draw_identical(bufs: PixelBuffers, options: ComparisonOptions) -> None:
    if bufs.output is None or options.diff_mask:
        return
    for i in range(bufs.width * bufs.height):
        draw_gray_pixel(bufs.data1, i * 4, options.alpha, bufs.output)


class PythonEngine:
    """
    Reference implementation: a row-major scan in pure Python.

    Rows are split into batches. With more than one worker the batches run on a
    thread pool; every batch writes a disjoint slice of the output, so only the
    per-batch counters need combining.
    """

    name = "python"

    def __init__(self, workers: int | None = None, row_batch_size: int | None = None) -> None:
        self.workers = workers if workers is not None else settings.workers
        self.row_batch_size = row_batch_size if row_batch_size is not None else settings.row_batch_size

    def compare(
        self,
        image1: RasterImage,
        image2: RasterImage,
        options: ComparisonOptions | None = None,
    ) -> ComparisonResult:
        if options is None:
            options = ComparisonOptions()
        bufs = validate_input(image1, image2, options.output)
        total = bufs.width * bufs.height

        if bufs.words1 == bufs.words2:
            draw_identical(bufs, options)
            return build_result(0, 0, total, True)

        batches = row_batches(bufs.height, self.row_batch_size)
        if self.workers > 1 and len(batches) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                partials = list(pool.map(lambda rows: _scan_rows(bufs, options, *rows), batches))
        else:
            partials = [_scan_rows(bufs, options, start, stop) for start, stop in batches]

        diff = sum(p[0] for p in partials)
        aa_count = sum(p[1] for p in partials)
        return build_result(diff, aa_count, total, False)
