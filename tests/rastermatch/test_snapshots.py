from __future__ import annotations

import base64
import io

from PIL import Image, ImageDraw

from rastermatch.snapshots import compare_images, compare_images_batch, encode_png
from rastermatch.types import ComparisonOptions


def _make_solid_image(width: int, height: int, color: tuple[int, int, int, int]) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


def _decode_mask(diff_mask_png: str) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(diff_mask_png)))


class TestCompareImages:
    def test_identical_images(self):
        img = _make_solid_image(100, 100, (128, 128, 128, 255))
        result = compare_images(img, img.copy())
        assert result is not None
        assert result.diff_score == 0.0
        assert result.changed_pixels == 0
        assert result.total_pixels == 100 * 100
        mask = _decode_mask(result.diff_mask_png)
        assert mask.mode == "L"
        assert mask.size == (100, 100)
        assert mask.getextrema() == (0, 0)

    def test_different_sizes(self):
        small = _make_solid_image(30, 30, (100, 100, 100, 255))
        large = _make_solid_image(50, 50, (100, 100, 100, 255))
        assert compare_images(small, large) is None

    def test_modified_block(self):
        before = _make_solid_image(100, 100, (100, 100, 100, 255))
        after = _make_solid_image(100, 100, (100, 100, 100, 255))
        draw = ImageDraw.Draw(after)
        draw.rectangle((10, 10, 29, 29), fill=(255, 0, 0, 255))
        result = compare_images(before, after)
        assert result is not None
        assert result.changed_pixels == 400
        assert result.diff_score == 0.04
        assert result.width == 100
        assert result.height == 100
        mask = _decode_mask(result.diff_mask_png)
        assert mask.getpixel((15, 15)) == 255
        assert mask.getpixel((50, 50)) == 0

    def test_bytes_input(self):
        img = _make_solid_image(30, 30, (128, 128, 128, 255))
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        img_bytes = buf.getvalue()

        result = compare_images(img_bytes, img_bytes)
        assert result is not None
        assert result.diff_score == 0.0

    def test_undecodable_bytes(self):
        img = _make_solid_image(30, 30, (128, 128, 128, 255))
        assert compare_images(b"garbage", img) is None

    def test_options_are_forwarded(self):
        before = _make_solid_image(10, 10, (100, 100, 100, 255))
        after = _make_solid_image(10, 10, (110, 110, 110, 255))
        assert compare_images(before, after).changed_pixels == 0
        result = compare_images(before, after, ComparisonOptions(threshold=0))
        assert result is not None
        assert result.changed_pixels == 100


class TestCompareImagesBatch:
    def test_batch_returns_correct_count(self):
        img1 = _make_solid_image(50, 50, (100, 100, 100, 255))
        img2 = _make_solid_image(50, 50, (200, 200, 200, 255))

        results = compare_images_batch(
            [
                (img1, img1.copy()),
                (img1, img2),
            ]
        )

        assert len(results) == 2
        assert results[0] is not None
        assert results[1] is not None
        assert results[0].diff_score == 0.0
        assert results[1].diff_score > 0.0

    def test_failed_pair_does_not_abort_batch(self):
        img1 = _make_solid_image(20, 20, (100, 100, 100, 255))
        img2 = _make_solid_image(10, 10, (100, 100, 100, 255))

        results = compare_images_batch([(img1, img2), (img1, img1.copy())])

        assert results[0] is None
        assert results[1] is not None

    def test_batch_single_pair_matches_single(self):
        before = _make_solid_image(50, 50, (100, 100, 100, 255))
        after = _make_solid_image(50, 50, (200, 200, 200, 255))

        single = compare_images(before, after)
        batch = compare_images_batch([(before, after)])[0]

        assert single is not None
        assert batch is not None
        assert single.diff_score == batch.diff_score
        assert single.changed_pixels == batch.changed_pixels


class TestEncodePng:
    def test_round_trips_pixels(self):
        data = bytes((1, 2, 3, 4, 5, 6, 7, 8))
        with Image.open(io.BytesIO(encode_png(data, 2, 1))) as img:
            assert img.size == (2, 1)
            assert img.tobytes() == data
