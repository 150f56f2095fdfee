"""Color effects and palette reduction with a unified entry-point.

Exported API
------------
- apply_color_effect(rgb, settings)
- to_grayscale, to_duotone, posterize, reduce_palette (single triples)
- rgb_to_hsl, hsl_to_rgb

Supported effects
-----------------
- "normal"    : color passes through unchanged
- "grayscale" : BT.601 luminance on all channels
- "duotone"   : luminance mapped onto a two-color gradient
- "posterize" : per-channel snap to 2..8 levels

Implementation notes
--------------------
The array forms operate on float arrays of shape (..., 3) and keep the exact
intermediate values; conversion back to ``uint8`` happens once, when the
engine writes blocks. Palette reduction is not an effect: the engine applies
it to every block after the selected effect.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .common import Array
from .duotone import duotone_array, format_hex_color, parse_hex_color, to_duotone
from .grayscale import grayscale_array, luminance, to_grayscale
from .hsl import hsl_to_rgb, rgb_to_hsl
from .palette import palette_step, reduce_palette, reduce_palette_array
from .posterize import posterize, posterize_array

if TYPE_CHECKING:  # pragma: no cover
    from ..settings import PixelSettings


def apply_color_effect(rgb: Array, settings: "PixelSettings") -> Array:
    """Apply the color effect selected by ``settings`` to an (..., 3) array.

    Parameters
    ----------
    rgb : np.ndarray
        Color values, shape (..., 3). Alpha must not be included.
    settings : PixelSettings
        Pipeline settings; only the color-effect fields are read.

    Returns
    -------
    np.ndarray
        float64 array of the same shape.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    if rgb.shape[-1:] != (3,):
        raise ValueError("rgb must have a trailing dimension of 3")

    effect = settings.color_effect
    if effect == "grayscale":
        return grayscale_array(rgb)
    if effect == "duotone":
        if settings.duotone_color1 is not None and settings.duotone_color2 is not None:
            return duotone_array(rgb, settings.duotone_color1, settings.duotone_color2)
        return rgb
    if effect == "posterize":
        if settings.posterize_levels:
            return posterize_array(rgb, settings.posterize_levels)
        return rgb
    if effect == "normal":
        return rgb

    raise ValueError(f"Unknown color effect: {effect}")


__all__ = [
    "apply_color_effect",
    "to_grayscale",
    "to_duotone",
    "posterize",
    "reduce_palette",
    "grayscale_array",
    "duotone_array",
    "posterize_array",
    "reduce_palette_array",
    "palette_step",
    "luminance",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "parse_hex_color",
    "format_hex_color",
]
