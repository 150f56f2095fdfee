"""Pipeline configuration: the immutable ``PixelSettings`` value object.

``PixelSettings`` is the whole external contract of the core. Every field is
supplied by the caller and validated on construction; nothing is inferred by
the engine. The persisted record layout (presets file) keeps the camelCase
keys and ``#rrggbb`` color strings used by the web front-end.
"""
from __future__ import annotations

import numbers
from dataclasses import dataclass, replace as _dc_replace
from typing import Any, Literal, Mapping, Optional, Tuple, get_args

from .effects.duotone import format_hex_color, parse_hex_color

PixelShape = Literal["square", "circle", "hex", "isometric"]
SamplingMode = Literal["averaged", "nearest"]
ColorEffect = Literal["normal", "grayscale", "duotone", "posterize"]
RGB = Tuple[int, int, int]

SHAPES: tuple[str, ...] = get_args(PixelShape)
SAMPLING_MODES: tuple[str, ...] = get_args(SamplingMode)
COLOR_EFFECTS: tuple[str, ...] = get_args(ColorEffect)

MIN_PALETTE_SIZE = 2
MAX_PALETTE_SIZE = 256
MIN_POSTERIZE_LEVELS = 2
MAX_POSTERIZE_LEVELS = 8

# dataclass field -> persisted key
_RECORD_KEYS = {
    "pixel_size": "pixelSize",
    "shape": "shape",
    "sampling": "sampling",
    "color_effect": "colorEffect",
    "palette_size": "paletteSize",
    "show_grid": "showGrid",
    "duotone_color1": "duotoneColor1",
    "duotone_color2": "duotoneColor2",
    "posterize_levels": "posterizeLevels",
}


def _check_rgb(name: str, value: Optional[RGB]) -> Optional[RGB]:
    if value is None:
        return None
    if isinstance(value, str):
        return parse_hex_color(value)
    rgb = tuple(int(c) for c in value)
    if len(rgb) != 3 or any(c < 0 or c > 255 for c in rgb):
        raise ValueError(f"{name} must be an (r, g, b) tuple with channels in 0..255")
    return rgb  # type: ignore[return-value]


def _check_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or int(value) != value:
        raise ValueError(f"{name} must be an integer")


@dataclass(frozen=True)
class PixelSettings:
    """One configuration of the pixelation pipeline."""

    pixel_size: int = 16
    shape: PixelShape = "square"
    sampling: SamplingMode = "averaged"
    color_effect: ColorEffect = "normal"
    palette_size: int = 256
    show_grid: bool = False
    duotone_color1: Optional[RGB] = None
    duotone_color2: Optional[RGB] = None
    posterize_levels: Optional[int] = None

    def __post_init__(self) -> None:
        _check_int("pixel_size", self.pixel_size)
        if self.pixel_size < 1:
            raise ValueError("pixel_size must be >= 1")
        if self.shape not in SHAPES:
            raise ValueError(f"Unknown shape: {self.shape}")
        if self.sampling not in SAMPLING_MODES:
            raise ValueError(f"Unknown sampling mode: {self.sampling}")
        if self.color_effect not in COLOR_EFFECTS:
            raise ValueError(f"Unknown color effect: {self.color_effect}")
        _check_int("palette_size", self.palette_size)
        if not MIN_PALETTE_SIZE <= self.palette_size <= MAX_PALETTE_SIZE:
            raise ValueError(
                f"palette_size must be in [{MIN_PALETTE_SIZE}, {MAX_PALETTE_SIZE}]"
            )

        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "pixel_size", int(self.pixel_size))
        object.__setattr__(self, "palette_size", int(self.palette_size))
        object.__setattr__(self, "show_grid", bool(self.show_grid))
        object.__setattr__(self, "duotone_color1", _check_rgb("duotone_color1", self.duotone_color1))
        object.__setattr__(self, "duotone_color2", _check_rgb("duotone_color2", self.duotone_color2))

        if self.posterize_levels is not None:
            _check_int("posterize_levels", self.posterize_levels)
            levels = int(self.posterize_levels)
            if not MIN_POSTERIZE_LEVELS <= levels <= MAX_POSTERIZE_LEVELS:
                raise ValueError(
                    f"posterize_levels must be in [{MIN_POSTERIZE_LEVELS}, {MAX_POSTERIZE_LEVELS}]"
                )
            object.__setattr__(self, "posterize_levels", levels)

        if self.color_effect == "duotone" and (
            self.duotone_color1 is None or self.duotone_color2 is None
        ):
            raise ValueError("duotone requires duotone_color1 and duotone_color2")
        if self.color_effect == "posterize" and self.posterize_levels is None:
            raise ValueError("posterize requires posterize_levels")

    def replace(self, **changes: Any) -> "PixelSettings":
        """Return a validated copy with ``changes`` applied."""
        return _dc_replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted record layout, omitting unset options."""
        out: dict[str, Any] = {}
        for field, key in _RECORD_KEYS.items():
            value = getattr(self, field)
            if value is None:
                continue
            if field in ("duotone_color1", "duotone_color2"):
                value = format_hex_color(value)
            out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PixelSettings":
        """Build settings from a persisted record.

        Accepts both the camelCase record keys and the dataclass field names.
        Unknown keys are ignored.
        """
        kwargs: dict[str, Any] = {}
        for field, key in _RECORD_KEYS.items():
            if key in data:
                kwargs[field] = data[key]
            elif field in data:
                kwargs[field] = data[field]
        return cls(**kwargs)


__all__ = [
    "PixelSettings",
    "PixelShape",
    "SamplingMode",
    "ColorEffect",
    "SHAPES",
    "SAMPLING_MODES",
    "COLOR_EFFECTS",
]
