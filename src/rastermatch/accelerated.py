"""
Vectorized engine. The colour metric and the compositor run over whole arrays;
only pixels over the threshold reach the per-pixel anti-aliasing check, which is
shared with the reference engine. Output is byte-identical to ``PythonEngine``.
"""

from __future__ import annotations

import numpy as np

from .antialias import antialiased
from .color import (
    GOLDEN,
    GOLDEN_SQ,
    I_B,
    I_G,
    I_R,
    I_WEIGHT,
    Q_B,
    Q_G,
    Q_R,
    Q_WEIGHT,
    Y_B,
    Y_G,
    Y_R,
    Y_WEIGHT,
)
from .types import ComparisonOptions, ComparisonResult, RasterImage, build_result
from .validate import validate_input


def color_deltas(pixels1: np.ndarray, pixels2: np.ndarray, index: np.ndarray) -> np.ndarray:
    """``color_delta`` for each pixel ``index`` (pixel numbers, not byte offsets)."""
    p1 = pixels1[index].astype(np.int64)
    p2 = pixels2[index].astype(np.int64)
    r1, g1, b1, a1 = p1[:, 0], p1[:, 1], p1[:, 2], p1[:, 3]
    r2, g2, b2, a2 = p2[:, 0], p2[:, 1], p2[:, 2], p2[:, 3]

    dr = (r1 - r2).astype(np.float64)
    dg = (g1 - g2).astype(np.float64)
    db = (b1 - b2).astype(np.float64)
    da = a1 - a2

    blend = (a1 < 255) | (a2 < 255)
    if blend.any():
        k = index.astype(np.int64) * 4
        rb = 48 + 159 * (k % 2)
        gb = 48 + 159 * ((k / GOLDEN).astype(np.int64) % 2)
        bb = 48 + 159 * ((k / GOLDEN_SQ).astype(np.int64) % 2)
        dr = np.where(blend, (r1 * a1 - r2 * a2 - rb * da) / 255, dr)
        dg = np.where(blend, (g1 * a1 - g2 * a2 - gb * da) / 255, dg)
        db = np.where(blend, (b1 * a1 - b2 * a2 - bb * da) / 255, db)

    y = dr * Y_R + dg * Y_G + db * Y_B
    i = dr * I_R - dg * I_G - db * I_B
    q = dr * Q_R - dg * Q_G + db * Q_B
    delta = Y_WEIGHT * y * y + I_WEIGHT * i * i + Q_WEIGHT * q * q
    return np.where(y > 0, -delta, delta)


def gray_values(pixels: np.ndarray, alpha: float) -> np.ndarray:
    p = pixels.astype(np.int64)
    val = 255 + (p[:, 0] * Y_R + p[:, 1] * Y_G + p[:, 2] * Y_B - 255) * alpha * p[:, 3] / 255
    return val.astype(np.uint8)


def _draw_background(out: np.ndarray, pixels: np.ndarray, mask: np.ndarray, alpha: float) -> None:
    gray = gray_values(pixels[mask], alpha)
    out[mask, 0] = gray
    out[mask, 1] = gray
    out[mask, 2] = gray
    out[mask, 3] = 255


def _paint(out: np.ndarray, index: np.ndarray, color: tuple[int, int, int]) -> None:
    if index.size:
        out[index, :3] = color
        out[index, 3] = 255


class NumpyEngine:
    name = "numpy"

    def compare(
        self,
        image1: RasterImage,
        image2: RasterImage,
        options: ComparisonOptions | None = None,
    ) -> ComparisonResult:
        if options is None:
            options = ComparisonOptions()
        bufs = validate_input(image1, image2, options.output)
        width, height = bufs.width, bufs.height
        total = width * height
        if total == 0:
            return build_result(0, 0, 0, True)

        words1 = np.frombuffer(bufs.data1, dtype=np.uint32)
        words2 = np.frombuffer(bufs.data2, dtype=np.uint32)
        pixels1 = np.frombuffer(bufs.data1, dtype=np.uint8).reshape(-1, 4)
        pixels2 = np.frombuffer(bufs.data2, dtype=np.uint8).reshape(-1, 4)
        out = None
        if bufs.output is not None:
            out = np.frombuffer(bufs.output, dtype=np.uint8).reshape(-1, 4)

        changed = np.flatnonzero(words1 != words2)
        if changed.size == 0:
            if out is not None and not options.diff_mask:
                _draw_background(out, pixels1, np.ones(total, dtype=bool), options.alpha)
            return build_result(0, 0, total, True)

        deltas = color_deltas(pixels1, pixels2, changed)
        over = np.abs(deltas) > options.max_delta
        candidates = changed[over]
        candidate_deltas = deltas[over]

        is_aa = np.zeros(candidates.size, dtype=bool)
        if options.detect_anti_aliasing:
            data1, data2, w1, w2 = bufs.data1, bufs.data2, bufs.words1, bufs.words2
            for n, idx in enumerate(candidates.tolist()):
                y, x = divmod(idx, width)
                is_aa[n] = antialiased(data1, x, y, width, height, w1, w2) or antialiased(
                    data2, x, y, width, height, w2, w1
                )

        aa_count = int(np.count_nonzero(is_aa))
        diff = int(candidates.size) - aa_count

        if out is not None:
            real = ~is_aa
            if not options.diff_mask:
                below = np.ones(total, dtype=bool)
                below[candidates] = False
                _draw_background(out, pixels1, below, options.alpha)
                _paint(out, candidates[is_aa], options.aa_color)
            _paint(out, candidates[real & (candidate_deltas < 0)], options.alt_color)
            _paint(out, candidates[real & (candidate_deltas >= 0)], options.diff_color)

        return build_result(diff, aa_count, total, False)
