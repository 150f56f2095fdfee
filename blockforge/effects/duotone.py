"""Duotone gradient mapping and hex color helpers.

The block's luminance (normalized to 0..1) is used as the mix factor of a
linear gradient running from ``color1`` (dark end) to ``color2`` (light end).
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .common import Array, as_triple, rgb_array, round_half_up
from .grayscale import luminance


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """Parse ``#rrggbb`` (leading ``#`` optional) into an ``(r, g, b)`` tuple."""
    if not isinstance(value, str):
        raise ValueError(f"Expected a hex color string, got {value!r}")
    s = value.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6:
        raise ValueError(f"Invalid hex color: {value!r}")
    try:
        n = int(s, 16)
    except ValueError:
        raise ValueError(f"Invalid hex color: {value!r}") from None
    return (n >> 16) & 255, (n >> 8) & 255, n & 255


def format_hex_color(rgb: Sequence[int]) -> str:
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def duotone_array(rgb: Array, color1: Sequence[int], color2: Sequence[int]) -> Array:
    """Map an ``(..., 3)`` array onto the color1 -> color2 gradient."""
    lum = luminance(rgb)[..., None] / 255.0
    c1 = np.asarray(color1, dtype=np.float64)
    c2 = np.asarray(color2, dtype=np.float64)
    return round_half_up(c1 + (c2 - c1) * lum)


def to_duotone(
    r: int, g: int, b: int, color1: Sequence[int], color2: Sequence[int]
) -> tuple[int, int, int]:
    """Duotone a single triple."""
    return as_triple(duotone_array(rgb_array(r, g, b), color1, color2))
