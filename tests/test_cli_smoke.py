"""
Smoke tests for the command line interface.

A tiny synthetic image is run through the preview and export paths so that
wiring, option handling and output naming regressions are caught early.
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
from PIL import Image

from blockforge.main import main as cli_main


def _save_gradient(path: Path, w: int = 48, h: int = 32) -> np.ndarray:
    xs = np.linspace(0, 255, w, dtype=np.uint8)
    pixels = np.zeros((h, w, 4), dtype=np.uint8)
    pixels[..., 0] = xs[None, :]
    pixels[..., 1] = 255 - xs[None, :]
    pixels[..., 2] = 90
    pixels[..., 3] = 255
    Image.fromarray(pixels).save(path)
    return pixels


def _read(path: Path) -> np.ndarray:
    with Image.open(path) as im:
        return np.array(im.convert("RGBA"))


def test_cli_preview(tmp_path):
    src = tmp_path / "in.png"
    _save_gradient(src)
    out = tmp_path / "preview.png"

    code = cli_main(["-i", str(src), "-o", str(out), "--pixel", "8", "--preview"])

    assert code == 0
    arr = _read(out)
    assert arr.shape == (32, 48, 4)
    assert np.all(arr[0:8, 0:8] == arr[0, 0])


def test_cli_multi_scale_export(tmp_path):
    src = tmp_path / "in.png"
    _save_gradient(src)
    out = tmp_path / "out.png"

    code = cli_main(
        ["-i", str(src), "-o", str(out), "--pixel", "4", "--effect", "grayscale", "--scale", "1", "2"]
    )

    assert code == 0
    assert not out.exists()
    assert _read(tmp_path / "out-1x.png").shape == (32, 48, 4)
    assert _read(tmp_path / "out-2x.png").shape == (64, 96, 4)


def test_cli_batch_with_preset_and_override(tmp_path, capsys):
    src = tmp_path / "in.png"
    _save_gradient(src)
    out = tmp_path / "sprite.png"

    code = cli_main(
        [
            "-i", str(src), "-o", str(out),
            "--preset", "Retro Sprite", "--no-grid", "--batch",
            "--presets-file", str(tmp_path / "p.json"),
        ]
    )

    assert code == 0
    for scale in (1, 2, 4):
        assert (tmp_path / f"sprite-{scale}x.png").exists()
    assert "Wrote" in capsys.readouterr().out


def test_cli_save_list_delete_presets(tmp_path, capsys):
    src = tmp_path / "in.png"
    _save_gradient(src)
    presets = tmp_path / "p.json"

    code = cli_main(
        [
            "-i", str(src), "-o", str(tmp_path / "o.png"),
            "--pixel", "6", "--effect", "duotone", "--duotone", "#000000", "#ffffff",
            "--presets-file", str(presets), "--save-preset", "Mono",
        ]
    )
    assert code == 0
    records = json.loads(presets.read_text())
    assert records[0]["name"] == "Mono"
    assert records[0]["settings"]["duotoneColor2"] == "#ffffff"

    assert cli_main(["--list-presets", "--presets-file", str(presets)]) == 0
    listing = capsys.readouterr().out
    assert "Mono [user]" in listing
    assert "Avatar Censor [built-in]" in listing

    assert cli_main(["--delete-preset", "Mono", "--presets-file", str(presets)]) == 0
    assert json.loads(presets.read_text()) == []
    assert cli_main(["--delete-preset", "Mono", "--presets-file", str(presets)]) == 2


def test_cli_argument_errors(tmp_path):
    src = tmp_path / "in.png"
    _save_gradient(src)
    out = str(tmp_path / "o.png")

    assert cli_main(["-i", str(tmp_path / "missing.png"), "-o", out]) == 2
    assert cli_main(["-i", str(src), "-o", out, "--pixel", "0"]) == 2
    assert cli_main(["-i", str(src), "-o", out, "--effect", "posterize"]) == 2
    assert cli_main(["-i", str(src), "-o", out, "--preset", "No Such Preset"]) == 2
    assert cli_main(["-i", str(src), "-o", out, "--preview", "--scale", "2"]) == 2
