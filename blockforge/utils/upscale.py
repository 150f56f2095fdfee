"""Nearest-neighbor upscaling for NumPy arrays."""
from __future__ import annotations

import numpy as np

Array = np.ndarray


def upscale_nearest(arr: Array, factor: int) -> Array:
    """Upscale an image array by an integer factor using nearest-neighbor.

    Output pixel (x, y) equals input pixel (x // factor, y // factor), so block
    edges stay hard.

    Parameters
    ----------
    arr : np.ndarray
        Input array of shape (H, W, C), dtype=uint8.
    factor : int
        Upscale factor (>=1).

    Returns
    -------
    np.ndarray
        Upscaled image array of shape (H * factor, W * factor, C).
    """
    if not isinstance(arr, np.ndarray) or arr.ndim != 3:
        raise ValueError("arr must be an image with shape (H, W, C)")
    if isinstance(factor, bool) or int(factor) != factor:
        raise ValueError("factor must be an integer")
    if factor < 1:
        raise ValueError("factor must be >= 1")
    if factor == 1:
        return arr.copy()

    f = int(factor)
    H, W, C = arr.shape
    # Allocate the full output up front, then broadcast each pixel into its f x f cell
    up = np.empty((H * f, W * f, C), dtype=np.uint8)
    up.reshape(H, f, W, f, C)[...] = arr[:, None, :, None, :]
    return up
