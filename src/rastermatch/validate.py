from __future__ import annotations

from typing import Any, NamedTuple

import numpy as np

from .errors import DimensionMismatch, InvalidBufferType, OutputSizeMismatch, SizeMismatch
from .types import RasterImage


class PixelBuffers(NamedTuple):
    """Flat byte views of validated inputs, plus 32-bit packed-word views of each image."""

    data1: memoryview
    data2: memoryview
    words1: memoryview
    words2: memoryview
    output: memoryview | None
    width: int
    height: int


def as_pixel_view(buf: Any, writable: bool = False) -> memoryview | None:
    """Return a flat unsigned-byte view of ``buf``, or None if it isn't a contiguous 8-bit buffer."""
    try:
        view = memoryview(buf)
    except TypeError:
        return None
    if view.format.lstrip("@=<>!") != "B" or view.itemsize != 1 or not view.c_contiguous:
        return None
    if writable and view.readonly:
        return None
    if view.format != "B":
        # memoryview.cast only takes native formats; share the memory as plain "B" instead
        return memoryview(np.frombuffer(view, dtype=np.uint8))
    return view.cast("B") if view.ndim != 1 else view


def validate_input(img1: RasterImage, img2: RasterImage, output: Any = None) -> PixelBuffers:
    data1 = as_pixel_view(img1.data)
    data2 = as_pixel_view(img2.data)
    if data1 is None or data2 is None:
        raise InvalidBufferType("Image data: bytes, bytearray or uint8 buffer expected.")

    out: memoryview | None = None
    if output is not None:
        out = as_pixel_view(output, writable=True)
        if out is None:
            raise InvalidBufferType("Output data: writable bytearray or uint8 buffer expected.")
        if out.nbytes != data1.nbytes:
            raise OutputSizeMismatch(data1.nbytes, out.nbytes)

    if img1.width != img2.width or img1.height != img2.height:
        raise DimensionMismatch((img1.width, img1.height), (img2.width, img2.height))
    if data1.nbytes != data2.nbytes:
        raise SizeMismatch(
            f"Image sizes do not match. Image 1 size: {data1.nbytes}, image 2 size: {data2.nbytes}"
        )
    expected = img1.width * img1.height * 4
    if data1.nbytes != expected:
        raise SizeMismatch(
            f"Image data size does not match width/height. Expecting {expected}. Got {data1.nbytes}"
        )

    return PixelBuffers(
        data1=data1,
        data2=data2,
        words1=data1.cast("I"),
        words2=data2.cast("I"),
        output=out,
        width=img1.width,
        height=img1.height,
    )
