"""
YIQ colour distance and the diff-image pixel writers.

The arithmetic here is written out in a fixed evaluation order; the accelerated
engine repeats the same expressions so both produce bit-identical floats.
"""

from __future__ import annotations

from collections.abc import MutableSequence, Sequence

# upper bound of color_delta, used to scale the threshold
MAX_YIQ_DELTA = 35215

Y_R, Y_G, Y_B = 0.29889531, 0.58662247, 0.11448223
I_R, I_G, I_B = 0.59597799, 0.27417610, 0.32180189
Q_R, Q_G, Q_B = 0.21147017, 0.52261711, 0.31114694
Y_WEIGHT, I_WEIGHT, Q_WEIGHT = 0.5053, 0.299, 0.1957

GOLDEN = 1.618033988749895
GOLDEN_SQ = 2.618033988749895


def color_delta(img1: Sequence[int], img2: Sequence[int], k: int, m: int, y_only: bool = False) -> float:
    """
    Perceptual distance between the RGBA sample at byte offset ``k`` of ``img1`` and
    the one at ``m`` of ``img2``, after Kotsarenko & Ramos, "Measuring perceived
    colour difference using YIQ NTSC transmission colour space in mobile applications".

    With ``y_only`` the signed luma difference is returned. Otherwise the squared
    distance is returned, negated when the ``img1`` sample is the brighter one.
    """
    r1 = img1[k]
    g1 = img1[k + 1]
    b1 = img1[k + 2]
    a1 = img1[k + 3]
    r2 = img2[m]
    g2 = img2[m + 1]
    b2 = img2[m + 2]
    a2 = img2[m + 3]

    dr = r1 - r2
    dg = g1 - g2
    db = b1 - b2
    da = a1 - a2

    if not dr and not dg and not db and not da:
        return 0

    if a1 < 255 or a2 < 255:
        # blend both samples over a non-axis-aligned pseudo-checkerboard
        rb = 48 + 159 * (k % 2)
        gb = 48 + 159 * (int(k / GOLDEN) % 2)
        bb = 48 + 159 * (int(k / GOLDEN_SQ) % 2)
        dr = (r1 * a1 - r2 * a2 - rb * da) / 255
        dg = (g1 * a1 - g2 * a2 - gb * da) / 255
        db = (b1 * a1 - b2 * a2 - bb * da) / 255

    y = dr * Y_R + dg * Y_G + db * Y_B

    if y_only:
        return y

    i = dr * I_R - dg * I_G - db * I_B
    q = dr * Q_R - dg * Q_G + db * Q_B

    delta = Y_WEIGHT * y * y + I_WEIGHT * i * i + Q_WEIGHT * q * q

    return -delta if y > 0 else delta


def draw_pixel(output: MutableSequence[int], pos: int, r: int, g: int, b: int) -> None:
    output[pos] = r
    output[pos + 1] = g
    output[pos + 2] = b
    output[pos + 3] = 255


def gray_value(r: int, g: int, b: int, a: int, alpha: float) -> int:
    return int(255 + (r * Y_R + g * Y_G + b * Y_B - 255) * alpha * a / 255)


def draw_gray_pixel(img: Sequence[int], pos: int, alpha: float, output: MutableSequence[int]) -> None:
    """Write the source pixel as luma blended towards white, faded by ``alpha`` and its own opacity."""
    val = gray_value(img[pos], img[pos + 1], img[pos + 2], img[pos + 3], alpha)
    draw_pixel(output, pos, val, val, val)
