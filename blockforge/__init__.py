"""blockforge: block pixelation with color effects, palette reduction and scaled export."""
from __future__ import annotations

from .errors import BlockforgeError, DecodeError, EncodeError, ProcessingError
from .export import ExportResult, export_batch, export_image, stamp_watermark
from .presets import COMMON_PRESETS, Preset, PresetStore
from .settings import PixelSettings
from .utils.loader import ImageCodec, PillowCodec, load_image, save_image
from .utils.pixelate import pixelate, pixelate_image
from .utils.upscale import upscale_nearest

__all__ = [
    "BlockforgeError",
    "DecodeError",
    "EncodeError",
    "ProcessingError",
    "ExportResult",
    "export_batch",
    "export_image",
    "stamp_watermark",
    "COMMON_PRESETS",
    "Preset",
    "PresetStore",
    "PixelSettings",
    "ImageCodec",
    "PillowCodec",
    "load_image",
    "save_image",
    "pixelate",
    "pixelate_image",
    "upscale_nearest",
]
