"""Export stage: native pixelation, integer upscaling, watermark, PNG.

Each export call starts again from the encoded source so repeated calls at
different scales share no state. Batch exports run the scales one after the
other; a failing scale is reported and the batch moves on.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .errors import ProcessingError
from .settings import PixelSettings
from .utils.loader import DEFAULT_CODEC, ImageCodec, check_rgba
from .utils.pixelate import pixelate
from .utils.upscale import upscale_nearest

Array = np.ndarray

log = logging.getLogger(__name__)

WATERMARK_TEXT = "pix.krixnx.xyz"
# black at 15% opacity
WATERMARK_FILL = (0, 0, 0, round(0.15 * 255))

BATCH_SCALES = (1, 2, 4)


@dataclass
class ExportResult:
    """Outcome of one scale in a batch export."""

    scale: int
    data: Optional[bytes] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def watermark_metrics(width: int) -> tuple[int, float]:
    """Font size and edge padding used for an output ``width`` pixels wide."""
    font_size = max(12, width // 50)
    padding = max(8, font_size / 2)
    return font_size, padding


def stamp_watermark(arr: Array, text: str = WATERMARK_TEXT) -> Array:
    """Draw translucent ``text`` into the bottom-right corner of an RGBA image.

    Parameters
    ----------
    arr : np.ndarray
        RGBA image of shape (H, W, 4), dtype=uint8. It is not modified.
    text : str
        Watermark text.

    Returns
    -------
    np.ndarray
        New array with the watermark composited in.
    """
    check_rgba(arr)
    H, W, _ = arr.shape
    font_size, padding = watermark_metrics(W)

    base = Image.fromarray(arr)
    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    font = ImageFont.load_default(size=font_size)
    # right-aligned, bottom of the text box on the padding line
    draw.text((W - padding, H - padding), text, font=font, fill=WATERMARK_FILL, anchor="rd")
    return np.array(Image.alpha_composite(base, layer), dtype=np.uint8)


def export_dimensions(width: int, height: int, scale: int) -> tuple[int, int]:
    return width * scale, height * scale


def export_filename(scale: int, file_name: Optional[str] = None) -> str:
    """Download name for an export, carrying the scale suffix."""
    if file_name:
        return f"pixelated-{file_name}-{scale}x.png"
    return f"pixelated-{scale}x-{int(time.time() * 1000)}.png"


def render_export(src: Array, settings: PixelSettings, scale: int = 1) -> Array:
    """Pixelate at native size, upscale by ``scale``, then stamp the watermark."""
    if isinstance(scale, bool) or int(scale) != scale or scale < 1:
        raise ValueError("scale must be a positive integer")
    native = pixelate(src, settings)
    H, W, _ = native.shape
    try:
        out = upscale_nearest(native, int(scale)) if scale > 1 else native
        return stamp_watermark(out)
    except MemoryError as e:
        raise ProcessingError(f"Could not allocate a {W * scale}x{H * scale} export buffer") from e


def export_image(
    data: bytes,
    settings: PixelSettings,
    scale: int = 1,
    codec: Optional[ImageCodec] = None,
) -> bytes:
    """Export encoded ``data`` at ``scale`` times its native resolution.

    Parameters
    ----------
    data : bytes
        Encoded source image.
    settings : PixelSettings
        Current pipeline settings; the grid is included when enabled.
    scale : int
        Positive integer output scale (1, 2 and 4 by convention).
    codec : ImageCodec | None
        Decode/encode capability; Pillow PNG when omitted.

    Returns
    -------
    bytes
        Encoded (PNG) watermarked image.
    """
    codec = codec or DEFAULT_CODEC
    src = codec.decode(data)
    return codec.encode(render_export(src, settings, scale))


def export_batch(
    data: bytes,
    settings: PixelSettings,
    scales: Iterable[int] = BATCH_SCALES,
    codec: Optional[ImageCodec] = None,
) -> list[ExportResult]:
    """Export every scale in turn, isolating failures per scale."""
    results: list[ExportResult] = []
    for scale in scales:
        try:
            results.append(ExportResult(scale, data=export_image(data, settings, scale, codec)))
        except Exception as exc:  # one scale must not abort the batch
            log.error("Export at %sx failed: %s", scale, exc)
            results.append(ExportResult(scale, error=exc))
    return results


__all__ = [
    "WATERMARK_TEXT",
    "BATCH_SCALES",
    "ExportResult",
    "watermark_metrics",
    "stamp_watermark",
    "export_dimensions",
    "export_filename",
    "render_export",
    "export_image",
    "export_batch",
    "upscale_nearest",
]
