"""Utility functions for blockforge.

Modules:
- loader: Pillow-backed codec, bytes <-> RGBA NumPy arrays.
- sampling: One representative color per block (nearest or averaged).
- pixelate: The pixelation engine and grid overlay.
- upscale: Nearest-neighbor upscaling for integer factors.
"""
from .loader import (
    MAX_INPUT_BYTES,
    ImageCodec,
    PillowCodec,
    decode_image,
    encode_image,
    load_image,
    read_image_bytes,
    save_image,
)
from .sampling import block_bounds, sample_block, sample_blocks
from .pixelate import draw_grid, pixelate, pixelate_image
from .upscale import upscale_nearest

__all__ = [
    "MAX_INPUT_BYTES",
    "ImageCodec",
    "PillowCodec",
    "decode_image",
    "encode_image",
    "load_image",
    "read_image_bytes",
    "save_image",
    "block_bounds",
    "sample_block",
    "sample_blocks",
    "draw_grid",
    "pixelate",
    "pixelate_image",
    "upscale_nearest",
]
