"""Posterization to a fixed number of levels per channel."""
from __future__ import annotations

import numpy as np

from .common import Array, as_triple, rgb_array, round_half_up


def posterize_array(rgb: Array, levels: int) -> Array:
    """Snap each channel to the upper edge of its ``256 / levels`` bucket.

    The bucket start plus half a step is rounded back onto the step grid. With
    a non-integral step this lands on fractional values; the final channel
    conversion rounds them.
    """
    if levels < 1:
        raise ValueError("levels must be >= 1")
    rgb = np.asarray(rgb, dtype=np.float64)
    step = 256.0 / levels
    centre = np.floor(rgb / step) * step + step / 2
    out = round_half_up(centre / step) * step
    return np.minimum(255.0, out)


def posterize(r: int, g: int, b: int, levels: int) -> tuple[int, int, int]:
    """Posterize a single triple."""
    return as_triple(posterize_array(rgb_array(r, g, b), levels))
