from __future__ import annotations


class ImageComparisonError(ValueError):
    """Raised when inputs to a comparison are malformed. Always raised before any pixel is read."""


class InvalidBufferType(ImageComparisonError, TypeError):
    pass


class OutputSizeMismatch(ImageComparisonError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Output buffer size does not match. Expecting {expected}. Got {actual}")
        self.expected = expected
        self.actual = actual


class DimensionMismatch(ImageComparisonError):
    def __init__(self, size1: tuple[int, int], size2: tuple[int, int]) -> None:
        super().__init__(
            f"Image dimensions do not match: {size1[0]}x{size1[1]} vs {size2[0]}x{size2[1]}"
        )
        self.size1 = size1
        self.size2 = size2


class SizeMismatch(ImageComparisonError):
    pass
