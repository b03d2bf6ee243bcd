"""
Anti-aliased pixel detection, based on "Anti-aliased Pixel and Intensity Slope
Detector" by V. Vysniauskas (2009).

Two departures from the commonly copied version of this heuristic, both needed
for thin strokes and small text:

* the neighbourhood is scanned twice. The first pass only collects the darkest
  and brightest luma deltas; the second tests every neighbour tied with either
  extreme. Testing only the last extreme seen makes the answer depend on scan order.
* a tied neighbour qualifies when it sits in a flat region of *either* image.
  The stroke side of a 1px line never has three identical siblings.
"""

from __future__ import annotations

from collections.abc import Sequence

from .color import color_delta


def _window(x1: int, y1: int, width: int, height: int) -> tuple[int, int, int, int, bool]:
    x0 = max(x1 - 1, 0)
    y0 = max(y1 - 1, 0)
    x2 = min(x1 + 1, width - 1)
    y2 = min(y1 + 1, height - 1)
    on_border = x1 == x0 or x1 == x2 or y1 == y0 or y1 == y2
    return x0, y0, x2, y2, on_border


def antialiased(
    img: Sequence[int],
    x1: int,
    y1: int,
    width: int,
    height: int,
    words_a: Sequence[int],
    words_b: Sequence[int],
) -> bool:
    """Whether pixel (x1, y1) of ``img`` looks like part of an anti-aliased edge."""
    x0, y0, x2, y2, on_border = _window(x1, y1, width, height)
    pos = (y1 * width + x1) * 4
    zeroes = 1 if on_border else 0
    lo = 0
    hi = 0
    neighbours: list[tuple[float, int, int]] = []

    for x in range(x0, x2 + 1):
        for y in range(y0, y2 + 1):
            if x == x1 and y == y1:
                continue
            delta = color_delta(img, img, pos, (y * width + x) * 4, True)
            neighbours.append((delta, x, y))
            if delta == 0:
                zeroes += 1
                # too many equal neighbours, this is a flat region
                if zeroes > 2:
                    return False
            elif delta < lo:
                lo = delta
            elif delta > hi:
                hi = delta

    # an edge needs both darker and brighter neighbours
    if lo == 0 or hi == 0:
        return False

    for delta, x, y in neighbours:
        if delta == lo or delta == hi:
            if has_many_siblings(words_a, x, y, width, height) or has_many_siblings(
                words_b, x, y, width, height
            ):
                return True
    return False


def has_many_siblings(words: Sequence[int], x1: int, y1: int, width: int, height: int) -> bool:
    """Whether at least 3 neighbours of (x1, y1) share its exact packed value. A border counts as one."""
    x0, y0, x2, y2, on_border = _window(x1, y1, width, height)
    val = words[y1 * width + x1]
    zeroes = 1 if on_border else 0

    for x in range(x0, x2 + 1):
        for y in range(y0, y2 + 1):
            if x == x1 and y == y1:
                continue
            if words[y * width + x] == val:
                zeroes += 1
            if zeroes > 2:
                return True
    return False
