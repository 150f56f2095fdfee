"""Palette reduction onto a cubic RGB lattice.

``palette_size`` is an approximate total color budget: each channel is
snapped to multiples of ``ceil(256 / cbrt(palette_size))``. The reduction is
idempotent once values are converted back to channels.
"""
from __future__ import annotations

import math

import numpy as np

from .common import Array, as_triple, rgb_array, round_half_up


def palette_step(palette_size: int) -> int:
    """Lattice spacing for ``palette_size`` (uses an exact cube root)."""
    if palette_size < 1:
        raise ValueError("palette_size must be >= 1")
    return int(math.ceil(256.0 / float(np.cbrt(palette_size))))


def reduce_palette_array(rgb: Array, palette_size: int) -> Array:
    rgb = np.asarray(rgb, dtype=np.float64)
    if palette_size >= 256:
        return rgb
    step = palette_step(palette_size)
    return round_half_up(rgb / step) * step


def reduce_palette(r: int, g: int, b: int, palette_size: int) -> tuple[int, int, int]:
    """Reduce a single triple; identity when ``palette_size >= 256``."""
    return as_triple(reduce_palette_array(rgb_array(r, g, b), palette_size))
