from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from rastermatch.cli import (
    EXIT_DIFFERENT,
    EXIT_DIMENSION_MISMATCH,
    EXIT_IDENTICAL,
    EXIT_USAGE,
    main,
)


def _save(path: Path, image: Image.Image) -> str:
    image.save(path, "PNG")
    return str(path)


def _column_edge(middle: int) -> Image.Image:
    img = Image.new("RGBA", (5, 5), (0, 0, 0, 255))
    for y in range(5):
        img.putpixel((2, y), (middle, middle, middle, 255))
        img.putpixel((3, y), (255, 255, 255, 255))
        img.putpixel((4, y), (255, 255, 255, 255))
    return img


@pytest.fixture
def images(tmp_path: Path) -> dict[str, str]:
    block = Image.new("RGBA", (10, 10), (100, 100, 100, 255))
    block.paste((255, 0, 0, 255), (2, 2, 6, 6))
    return {
        "gray": _save(tmp_path / "gray.png", Image.new("RGBA", (10, 10), (100, 100, 100, 255))),
        "block": _save(tmp_path / "block.png", block),
        "small": _save(tmp_path / "small.png", Image.new("RGBA", (4, 4), (100, 100, 100, 255))),
        "edge1": _save(tmp_path / "edge1.png", _column_edge(128)),
        "edge2": _save(tmp_path / "edge2.png", _column_edge(100)),
    }


class TestCli:
    def test_identical(self, images, capsys):
        assert main([images["gray"], images["gray"]]) == EXIT_IDENTICAL
        out = capsys.readouterr().out
        assert "different pixels: 0" in out
        assert "error: 0%" in out

    def test_different(self, images, capsys):
        assert main([images["gray"], images["block"]]) == EXIT_DIFFERENT
        out = capsys.readouterr().out
        assert "different pixels: 16" in out
        assert "error: 16%" in out

    def test_dimension_mismatch(self, images, capsys):
        assert main([images["gray"], images["small"]]) == EXIT_DIMENSION_MISMATCH
        assert "Image dimensions do not match: 10x10 vs 4x4" in capsys.readouterr().out

    def test_missing_arguments(self, images):
        assert main([]) == EXIT_USAGE
        assert main([images["gray"]]) == EXIT_USAGE

    def test_missing_file(self, images, tmp_path):
        assert main([images["gray"], str(tmp_path / "nope.png")]) == EXIT_USAGE

    def test_not_an_image(self, images, tmp_path):
        junk = tmp_path / "junk.png"
        junk.write_bytes(b"not a png")
        assert main([images["gray"], str(junk)]) == EXIT_USAGE

    def test_bad_threshold(self, images, tmp_path):
        diff = str(tmp_path / "diff.png")
        assert main([images["gray"], images["block"], diff, "abc"]) == EXIT_USAGE
        assert main([images["gray"], images["block"], diff, "2"]) == EXIT_USAGE

    def test_writes_diff_image(self, images, tmp_path):
        diff = tmp_path / "diff.png"
        assert main([images["gray"], images["block"], str(diff)]) == EXIT_DIFFERENT
        with Image.open(diff) as img:
            assert img.size == (10, 10)
            assert img.mode == "RGBA"
            assert img.getpixel((3, 3)) == (255, 0, 0, 255)
            assert img.getpixel((0, 0))[3] == 255

    def test_anti_aliasing_toggle(self, images, tmp_path, capsys):
        diff = str(tmp_path / "diff.png")
        assert main([images["edge1"], images["edge2"]]) == EXIT_IDENTICAL
        assert "anti-aliased pixels: 5" in capsys.readouterr().out
        assert main([images["edge1"], images["edge2"], diff, "0.1", "false"]) == EXIT_DIFFERENT
        assert main([images["edge1"], images["edge2"], diff, "0.1", "true"]) == EXIT_IDENTICAL

    def test_unwritable_diff_path(self, images, tmp_path):
        diff = tmp_path / "missing" / "diff.png"
        assert main([images["gray"], images["block"], str(diff)]) == EXIT_USAGE
