"""Luminance-based grayscale conversion."""
from __future__ import annotations

import numpy as np

from .common import Array, as_triple, rgb_array, round_half_up

# ITU-R BT.601 luma weights
LUMA_R, LUMA_G, LUMA_B = 0.299, 0.587, 0.114


def luminance(rgb: Array) -> Array:
    """Unrounded luma of an ``(..., 3)`` array, in 0..255.

    The products are summed left to right (r, then g, then b); other orders
    land one ulp off at exact .5 boundaries and change the rounded result.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    return np.asarray(rgb[..., 0] * LUMA_R + rgb[..., 1] * LUMA_G + rgb[..., 2] * LUMA_B)


def grayscale_array(rgb: Array) -> Array:
    """Replace every channel by the rounded luminance."""
    gray = round_half_up(luminance(rgb))
    return np.repeat(gray[..., None], 3, axis=-1)


def to_grayscale(r: int, g: int, b: int) -> tuple[int, int, int]:
    """Grayscale a single triple: ``round(0.299r + 0.587g + 0.114b)`` on all channels."""
    return as_triple(grayscale_array(rgb_array(r, g, b)))
