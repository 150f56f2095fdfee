"""Tests for the export stage: upscaling, watermark, batch isolation."""

from __future__ import annotations

import io
import re

import numpy as np
import pytest
from PIL import Image

from blockforge.errors import DecodeError, EncodeError, ProcessingError
from blockforge.export import (
    export_batch,
    export_dimensions,
    export_filename,
    export_image,
    stamp_watermark,
    watermark_metrics,
)
from blockforge.settings import PixelSettings
from blockforge.utils.loader import PillowCodec
from blockforge.utils.pixelate import pixelate
from blockforge.utils.upscale import upscale_nearest


def _checkerboard(size: int = 80, block: int = 4) -> np.ndarray:
    """RGBA checkerboard with four colors."""
    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    colors = [
        (32, 48, 112, 255),
        (240, 200, 96, 255),
        (20, 20, 24, 255),
        (220, 80, 92, 255),
    ]
    for y in range(size):
        for x in range(size):
            pixels[y, x] = colors[((x // block) + (y // block)) % len(colors)]
    return pixels


def _png_bytes(arr: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    return buf.getvalue()


def _decode(data: bytes) -> np.ndarray:
    with Image.open(io.BytesIO(data)) as im:
        return np.array(im.convert("RGBA"))


def test_upscale_replicates_each_pixel():
    rng = np.random.RandomState(3)
    native = rng.randint(0, 256, (5, 7, 4), dtype=np.uint8)
    up = upscale_nearest(native, 2)
    assert up.shape == (10, 14, 4)
    for y in range(5):
        for x in range(7):
            for dy in (0, 1):
                for dx in (0, 1):
                    np.testing.assert_array_equal(up[2 * y + dy, 2 * x + dx], native[y, x])


def test_upscale_rejects_bad_factor():
    arr = np.zeros((2, 2, 4), dtype=np.uint8)
    with pytest.raises(ValueError):
        upscale_nearest(arr, 0)
    np.testing.assert_array_equal(upscale_nearest(arr, 1), arr)


def test_watermark_metrics():
    assert watermark_metrics(100) == (12, 8)
    assert watermark_metrics(1000) == (20, 10.0)
    assert watermark_metrics(2000) == (40, 20.0)


def test_watermark_touches_only_bottom_right_area():
    arr = np.full((100, 400, 4), 255, dtype=np.uint8)
    out = stamp_watermark(arr)
    assert out.shape == arr.shape
    np.testing.assert_array_equal(out[:50], arr[:50])
    np.testing.assert_array_equal(out[:, :200], arr[:, :200])
    assert np.any(out[60:] != arr[60:])
    # translucent black only darkens
    assert np.all(out[..., :3] <= arr[..., :3])


@pytest.mark.parametrize("scale", [1, 2, 4, 3])
def test_export_dimensions_and_content(scale):
    src = _checkerboard()
    settings = PixelSettings(pixel_size=5)
    out = _decode(export_image(_png_bytes(src), settings, scale))
    assert out.shape == (80 * scale, 80 * scale, 4)
    assert export_dimensions(80, 80, scale) == (80 * scale, 80 * scale)

    expected = upscale_nearest(pixelate(src, settings), scale)
    # top half is clear of the watermark
    half = 40 * scale
    np.testing.assert_array_equal(out[:half], expected[:half])


def test_export_includes_grid():
    src = _checkerboard()
    settings = PixelSettings(pixel_size=4, show_grid=True)
    out = _decode(export_image(_png_bytes(src), settings, 2))
    native = pixelate(src, settings)
    np.testing.assert_array_equal(out[0:2, 0:2], np.broadcast_to(native[0, 0], (2, 2, 4)))


def test_export_rejects_bad_scale():
    with pytest.raises(ValueError):
        export_image(_png_bytes(_checkerboard()), PixelSettings(), 0)


def test_export_rejects_garbage():
    with pytest.raises(DecodeError):
        export_image(b"\x89PNG broken", PixelSettings(), 1)


def test_export_too_large_to_allocate_raises_processing_error():
    data = _png_bytes(np.full((10, 10, 4), 200, dtype=np.uint8))
    with pytest.raises(ProcessingError):
        export_image(data, PixelSettings(pixel_size=2), 10**6)


def test_watermark_allocation_failure_raises_processing_error(monkeypatch):
    def _no_memory(arr, text=None):
        raise MemoryError

    monkeypatch.setattr("blockforge.export.stamp_watermark", _no_memory)
    with pytest.raises(ProcessingError):
        export_image(_png_bytes(_checkerboard()), PixelSettings(), 2)


def test_decompression_bomb_raises_decode_error(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    data = _png_bytes(np.full((10, 10, 4), 200, dtype=np.uint8))
    with pytest.raises(DecodeError):
        export_image(data, PixelSettings(), 1)


class _FailingCodec(PillowCodec):
    """Encodes normally except for outputs of one given width."""

    def __init__(self, bad_width: int) -> None:
        self.bad_width = bad_width

    def encode(self, arr: np.ndarray) -> bytes:
        if arr.shape[1] == self.bad_width:
            raise EncodeError("simulated failure")
        return super().encode(arr)


def test_batch_continues_after_a_failed_scale():
    data = _png_bytes(_checkerboard())
    results = export_batch(data, PixelSettings(pixel_size=8), codec=_FailingCodec(bad_width=160))
    assert [r.scale for r in results] == [1, 2, 4]
    assert [r.ok for r in results] == [True, False, True]
    assert isinstance(results[1].error, EncodeError)
    assert _decode(results[2].data).shape == (320, 320, 4)


def test_export_filename():
    assert export_filename(2, "cat") == "pixelated-cat-2x.png"
    assert re.fullmatch(r"pixelated-4x-\d+\.png", export_filename(4))
