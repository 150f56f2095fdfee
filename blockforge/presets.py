"""Built-in preset catalog and the user preset repository.

User presets are stored as a JSON list of ``{"name": ..., "settings": {...}}``
records. The store is owned by the presentation layer (CLI, desktop UI); the
pipeline itself never reads presets.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .settings import PixelSettings

log = logging.getLogger(__name__)

PRESETS_FILE = Path.home() / ".blockforge_presets.json"


@dataclass(frozen=True)
class Preset:
    """A named settings bundle."""

    name: str
    settings: PixelSettings

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "settings": self.settings.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Preset":
        return cls(name=str(data["name"]), settings=PixelSettings.from_dict(data["settings"]))


COMMON_PRESETS: tuple[Preset, ...] = (
    Preset("Avatar Censor", PixelSettings(pixel_size=16)),
    Preset(
        "Retro Sprite",
        PixelSettings(
            pixel_size=8,
            sampling="nearest",
            color_effect="posterize",
            palette_size=64,
            posterize_levels=4,
            show_grid=True,
        ),
    ),
    Preset("Mosaic Art", PixelSettings(pixel_size=12, shape="hex")),
    Preset(
        "Lo-Fi Poster",
        PixelSettings(
            pixel_size=10,
            color_effect="duotone",
            palette_size=32,
            duotone_color1=(0x1A, 0x1A, 0x2E),
            duotone_color2=(0xFF, 0x00, 0x6E),
        ),
    ),
    Preset("Privacy Blur", PixelSettings(pixel_size=20)),
)


class PresetStore:
    """Loads and saves user-defined presets in a JSON file."""

    def __init__(self, path: Path = PRESETS_FILE):
        """Initialize the store.

        Parameters
        ----------
        path : Path
            Presets file (defaults to ~/.blockforge_presets.json).
        """
        self.path = Path(path)

    def load(self) -> list[Preset]:
        """Load user presets, returning an empty list if none can be read.

        Returns
        -------
        list[Preset]
            Presets in stored order.
        """
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = json.load(f)
            if not isinstance(records, list):
                raise ValueError("presets file must hold a JSON list")
            return [Preset.from_dict(r) for r in records]
        except (OSError, ValueError, KeyError, TypeError) as e:
            log.warning("Could not load presets from %s: %s", self.path, e)
            return []

    def _write(self, presets: list[Preset]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([p.to_dict() for p in presets], f, indent=2)

    def save(self, name: str, settings: PixelSettings) -> list[Preset]:
        """Add a preset, replacing any existing preset with the same name.

        Parameters
        ----------
        name : str
            Preset name; surrounding whitespace is stripped.
        settings : PixelSettings
            Settings to store.

        Returns
        -------
        list[Preset]
            The updated preset list.
        """
        name = name.strip()
        if not name:
            raise ValueError("preset name must not be empty")
        presets = self.load()
        new = Preset(name, settings)
        for i, p in enumerate(presets):
            if p.name == name:
                presets[i] = new
                break
        else:
            presets.append(new)
        self._write(presets)
        return presets

    def delete(self, name: str) -> list[Preset]:
        """Remove the preset called ``name``; raises KeyError if absent."""
        presets = self.load()
        kept = [p for p in presets if p.name != name]
        if len(kept) == len(presets):
            raise KeyError(name)
        self._write(kept)
        return kept


def all_presets(store: Optional[PresetStore] = None) -> list[Preset]:
    """Built-in presets followed by the user's presets."""
    presets = list(COMMON_PRESETS)
    if store is not None:
        presets.extend(store.load())
    return presets


def find_preset(name: str, store: Optional[PresetStore] = None) -> Preset:
    """Look a preset up by name (case-insensitive); built-ins win ties."""
    wanted = name.strip().lower()
    for p in all_presets(store):
        if p.name.lower() == wanted:
            return p
    raise KeyError(name)


__all__ = ["Preset", "PresetStore", "COMMON_PRESETS", "PRESETS_FILE", "all_presets", "find_preset"]
