"""Rounding and channel conversion shared by the color effects."""
from __future__ import annotations

import numpy as np

Array = np.ndarray


def round_half_up(x: Array) -> Array:
    """Round to nearest integer with ties going up (127.5 -> 128)."""
    return np.floor(np.asarray(x, dtype=np.float64) + 0.5)


def to_channels(x: Array) -> Array:
    """Convert float channel values to ``uint8``, rounding and clipping to 0..255."""
    return np.clip(np.rint(x), 0, 255).astype(np.uint8)


def as_triple(x: Array) -> tuple[int, int, int]:
    """Convert a length-3 float array into a clamped ``(r, g, b)`` int tuple."""
    r, g, b = to_channels(x).tolist()
    return r, g, b


def rgb_array(r: float, g: float, b: float) -> Array:
    return np.array([r, g, b], dtype=np.float64)
