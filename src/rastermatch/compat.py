"""Positional-argument entry point for callers of the older ``pixelmatch`` API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .backend import compare
from .types import RGB, ComparisonOptions, RasterImage


class LegacyOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    threshold: float | None = Field(default=None, ge=0, le=1)
    # True skips anti-aliasing detection
    include_aa: bool | None = None
    alpha: float | None = Field(default=None, ge=0, le=1)
    aa_color: RGB | None = None
    diff_color: RGB | None = None
    diff_color_alt: RGB | None = None
    diff_mask: bool | None = None


def pixelmatch(
    img1: Any,
    img2: Any,
    output: Any,
    width: int,
    height: int,
    options: LegacyOptions | dict[str, Any] | None = None,
) -> int:
    """Return the number of mismatched pixels, writing the diff into ``output`` if given."""
    if options is None:
        legacy = LegacyOptions()
    elif isinstance(options, LegacyOptions):
        legacy = options
    else:
        legacy = LegacyOptions(**options)

    kwargs = legacy.model_dump(exclude_none=True, exclude={"include_aa"})
    if legacy.include_aa is not None:
        kwargs["detect_anti_aliasing"] = not legacy.include_aa
    if output is not None:
        kwargs["output"] = output

    result = compare(
        RasterImage(data=img1, width=width, height=height),
        RasterImage(data=img2, width=width, height=height),
        ComparisonOptions(**kwargs),
    )
    return result.diff_count
