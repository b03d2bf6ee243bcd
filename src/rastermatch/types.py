from __future__ import annotations

from typing import Annotated, Any

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from .color import MAX_YIQ_DELTA

Channel = Annotated[int, Field(ge=0, le=255)]
RGB = tuple[Channel, Channel, Channel]


class RasterImage(BaseModel):
    """RGBA8 interleaved pixels. ``data`` is never written to."""

    model_config = ConfigDict(frozen=True)

    data: Any
    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @classmethod
    def from_pil(cls, image: Image.Image) -> RasterImage:
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return cls(data=image.tobytes(), width=width, height=height)


class ComparisonOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: float = Field(default=0.1, ge=0, le=1)
    detect_anti_aliasing: bool = True
    alpha: float = Field(default=0.1, ge=0, le=1)
    aa_color: RGB = (255, 255, 0)
    diff_color: RGB = (255, 0, 0)
    # drawn instead of diff_color where image2 is darker
    diff_color_alt: RGB | None = None
    diff_mask: bool = False
    output: Any = None

    @property
    def max_delta(self) -> float:
        return MAX_YIQ_DELTA * self.threshold * self.threshold

    @property
    def alt_color(self) -> tuple[int, int, int]:
        return self.diff_color_alt if self.diff_color_alt is not None else self.diff_color


class ComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    diff_count: int = Field(ge=0)
    diff_percentage: float
    total_pixels: int = Field(ge=0)
    aa_count: int = Field(ge=0)
    identical: bool


def build_result(diff_count: int, aa_count: int, total_pixels: int, identical: bool) -> ComparisonResult:
    return ComparisonResult(
        diff_count=diff_count,
        diff_percentage=diff_count / total_pixels if total_pixels > 0 else 0.0,
        total_pixels=total_pixels,
        aa_count=aa_count,
        identical=identical,
    )


class DiffResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    diff_mask_png: str
    diff_score: float
    changed_pixels: int
    aa_pixels: int
    total_pixels: int
    width: int
    height: int
