"""Block sampling: one representative RGBA color per block.

Blocks tile the image from the top-left corner in steps of ``size``. Blocks
on the right and bottom edges are clipped to the image and may be smaller
than ``size x size``; only their in-bounds pixels are sampled.

Modes
-----
- "nearest"  : the block's top-left pixel, verbatim
- "averaged" : per-channel mean over the clipped block (alpha included),
               rounded half up
"""
from __future__ import annotations

import numpy as np

Array = np.ndarray

SAMPLING_MODES = ("averaged", "nearest")


def _check_buffer(arr: Array) -> None:
    if not isinstance(arr, np.ndarray) or arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError("arr must be an RGBA image with shape (H, W, 4)")


def _rounded_mean(sums: Array, counts: Array) -> Array:
    """Integer mean with ties rounded up: floor(sum / n + 1/2)."""
    return (2 * sums + counts) // (2 * counts)


def block_bounds(length: int, size: int) -> tuple[Array, Array]:
    """Block origins and clipped extents along one axis.

    Parameters
    ----------
    length : int
        Image extent along the axis (width or height).
    size : int
        Block edge length (>=1).

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        ``(starts, extents)``; ``extents`` sum to ``length``.
    """
    if size < 1:
        raise ValueError("size must be >= 1")
    starts = np.arange(0, length, size, dtype=np.int64)
    extents = np.minimum(size, length - starts)
    return starts, extents


def sample_block(
    arr: Array, x: int, y: int, w: int, h: int, mode: str = "averaged"
) -> tuple[int, int, int, int]:
    """Sample a single block.

    Parameters
    ----------
    arr : np.ndarray
        RGBA image, shape (H, W, 4), dtype=uint8.
    x, y : int
        Top-left corner of the block.
    w, h : int
        Requested block extent; clipped to the image bounds.
    mode : str
        "averaged" or "nearest".

    Returns
    -------
    tuple[int, int, int, int]
        Representative (r, g, b, a).
    """
    _check_buffer(arr)
    H, W, _ = arr.shape
    if not (0 <= x < W and 0 <= y < H):
        raise ValueError(f"block origin ({x}, {y}) lies outside the image")
    if w < 1 or h < 1:
        raise ValueError("block extent must be >= 1")

    if mode == "nearest":
        r, g, b, a = (int(v) for v in arr[y, x])
        return r, g, b, a
    if mode == "averaged":
        block = arr[y : min(y + h, H), x : min(x + w, W)]
        sums = block.reshape(-1, 4).sum(axis=0, dtype=np.int64)
        n = block.shape[0] * block.shape[1]
        r, g, b, a = (int(v) for v in _rounded_mean(sums, np.int64(n)))
        return r, g, b, a

    raise ValueError(f"Unknown sampling mode: {mode}")


def sample_blocks(arr: Array, size: int, mode: str = "averaged") -> Array:
    """Sample every block of the image at once.

    Parameters
    ----------
    arr : np.ndarray
        RGBA image, shape (H, W, 4), dtype=uint8.
    size : int
        Block edge length (>=1).
    mode : str
        "averaged" or "nearest".

    Returns
    -------
    np.ndarray
        int64 array of shape (rows, cols, 4); entry ``[j, i]`` is the color of
        the block whose origin is ``(i * size, j * size)``.
    """
    _check_buffer(arr)
    if size < 1:
        raise ValueError("size must be >= 1")
    H, W, _ = arr.shape

    if mode == "nearest":
        return arr[0:H:size, 0:W:size, :].astype(np.int64)
    if mode == "averaged":
        ys, hs = block_bounds(H, size)
        xs, ws = block_bounds(W, size)
        # 64-bit accumulator; reduceat sums each [start, next_start) run
        sums = np.add.reduceat(arr.astype(np.int64), ys, axis=0)
        sums = np.add.reduceat(sums, xs, axis=1)
        counts = (hs[:, None] * ws[None, :])[..., None]
        return _rounded_mean(sums, counts)

    raise ValueError(f"Unknown sampling mode: {mode}")


__all__ = ["SAMPLING_MODES", "block_bounds", "sample_block", "sample_blocks"]
