from __future__ import annotations

import logging

from .accelerated import NumpyEngine
from .engine import Engine, PythonEngine
from .settings import settings
from .types import ComparisonOptions, ComparisonResult, RasterImage

logger = logging.getLogger(__name__)

ENGINES: dict[str, type[Engine]] = {
    "python": PythonEngine,
    "numpy": NumpyEngine,
}


def select_engine(name: str | None = None, pixel_count: int | None = None) -> Engine:
    name = name or settings.backend
    if name == "auto":
        if pixel_count is not None and pixel_count < settings.accelerate_min_pixels:
            name = "python"
        else:
            name = "numpy"

    engine_cls = ENGINES.get(name)
    if engine_cls is None:
        raise ValueError(f"Unknown comparison backend: {name!r}. Expected one of {sorted(ENGINES)}")
    return engine_cls()


def compare(
    image1: RasterImage,
    image2: RasterImage,
    options: ComparisonOptions | None = None,
    *,
    backend: str | None = None,
) -> ComparisonResult:
    """
    Compare two equally sized RGBA images pixel by pixel.

    When ``options.output`` is set, the diff image is composited into it in place.
    """
    engine = select_engine(backend, pixel_count=image1.width * image1.height)
    result = engine.compare(image1, image2, options)
    logger.debug(
        "Image comparison finished",
        extra={
            "engine": engine.name,
            "width": image1.width,
            "height": image1.height,
            "diff_count": result.diff_count,
            "aa_count": result.aa_count,
        },
    )
    return result
