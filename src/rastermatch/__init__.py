from __future__ import annotations

from .backend import compare, select_engine
from .errors import (
    DimensionMismatch,
    ImageComparisonError,
    InvalidBufferType,
    OutputSizeMismatch,
    SizeMismatch,
)
from .types import ComparisonOptions, ComparisonResult, RasterImage

__all__ = [
    "ComparisonOptions",
    "ComparisonResult",
    "DimensionMismatch",
    "ImageComparisonError",
    "InvalidBufferType",
    "OutputSizeMismatch",
    "RasterImage",
    "SizeMismatch",
    "compare",
    "select_engine",
]
