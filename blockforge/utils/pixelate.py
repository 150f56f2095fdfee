"""Pixelation engine operating on NumPy arrays.

The image is tiled into ``pixel_size x pixel_size`` blocks starting at the
top-left corner (edge blocks are clipped). Each block is reduced to one
color by the sampler, passed through the selected color effect and the
palette reduction, and written back over every in-bounds pixel of the block.
An optional grid is drawn over the result.
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..effects import apply_color_effect, reduce_palette_array
from ..effects.common import to_channels
from ..errors import ProcessingError
from ..settings import PixelSettings
from .loader import DEFAULT_CODEC, ImageCodec, check_rgba
from .sampling import block_bounds, sample_blocks

Array = np.ndarray

log = logging.getLogger(__name__)

# rgba(0, 0, 0, 0.2), 1px wide
GRID_ALPHA = 0.2


def _stroke(region: Array) -> Array:
    """Composite black at ``GRID_ALPHA`` over an RGBA region (source-over)."""
    f = region.astype(np.float64)
    a = f[..., 3] / 255.0
    a_out = GRID_ALPHA + a * (1.0 - GRID_ALPHA)
    keep = (a * (1.0 - GRID_ALPHA)) / a_out
    out = np.empty_like(region)
    out[..., :3] = to_channels(f[..., :3] * keep[..., None])
    out[..., 3] = to_channels(a_out * 255.0)
    return out


def draw_grid(arr: Array, size: int) -> Array:
    """Draw block boundaries over an RGBA image.

    Lines run along every row and column whose index is a multiple of
    ``size``, including 0. The far edges (index H or W) fall outside the
    buffer. Horizontal lines are drawn first, then vertical ones, so the
    crossings are stroked twice.

    Parameters
    ----------
    arr : np.ndarray
        RGBA image of shape (H, W, 4), dtype=uint8.
    size : int
        Grid spacing (>=1).

    Returns
    -------
    np.ndarray
        New array with the grid drawn in.
    """
    check_rgba(arr)
    if size < 1:
        raise ValueError("size must be >= 1")
    H, W, _ = arr.shape
    out = arr.copy()
    rows = np.arange(0, H, size)
    cols = np.arange(0, W, size)
    out[rows, :, :] = _stroke(out[rows, :, :])
    out[:, cols, :] = _stroke(out[:, cols, :])
    return out


def pixelate(arr: Array, settings: PixelSettings) -> Array:
    """Pixelate an RGBA image array according to ``settings``.

    Parameters
    ----------
    arr : np.ndarray
        Input array of shape (H, W, 4), dtype=uint8. It is not modified.
    settings : PixelSettings
        Block size, sampling mode, color effect, palette size and grid flag.

    Returns
    -------
    np.ndarray
        Pixelated image of the same shape and dtype as the input.
    """
    check_rgba(arr)
    size = settings.pixel_size
    if settings.shape != "square":
        # Only square blocks have a renderer; other shapes draw as squares.
        log.debug("shape %r is rendered as square blocks", settings.shape)

    H, W, _ = arr.shape
    try:
        blocks = sample_blocks(arr, size, settings.sampling)

        # Effects never touch alpha; palette reduction always runs
        rgb = apply_color_effect(blocks[..., :3], settings)
        rgb = reduce_palette_array(rgb, settings.palette_size)

        small = np.empty(blocks.shape, dtype=np.uint8)
        small[..., :3] = to_channels(rgb)
        small[..., 3] = blocks[..., 3]

        # Fill each block's clipped rectangle with its color
        _, hs = block_bounds(H, size)
        _, ws = block_bounds(W, size)
        out = np.repeat(np.repeat(small, hs, axis=0), ws, axis=1)

        if settings.show_grid:
            out = draw_grid(out, size)
    except MemoryError as e:
        raise ProcessingError(f"Could not allocate a {W}x{H} output buffer") from e
    return out


def pixelate_image(
    data: bytes, settings: PixelSettings, codec: Optional[ImageCodec] = None
) -> bytes:
    """Decode, pixelate at native resolution, and re-encode (preview path).

    Raises
    ------
    DecodeError
        ``data`` is not a readable image.
    ProcessingError
        The output buffer could not be produced.
    EncodeError
        The result could not be encoded.
    """
    codec = codec or DEFAULT_CODEC
    src = codec.decode(data)
    return codec.encode(pixelate(src, settings))


__all__ = ["GRID_ALPHA", "draw_grid", "pixelate", "pixelate_image"]
