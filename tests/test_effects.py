"""Tests for the color transform library."""

from __future__ import annotations

import numpy as np
import pytest

from blockforge.effects import (
    apply_color_effect,
    format_hex_color,
    hsl_to_rgb,
    palette_step,
    parse_hex_color,
    posterize,
    reduce_palette,
    rgb_to_hsl,
    to_duotone,
    to_grayscale,
)
from blockforge.settings import PixelSettings


def test_grayscale_uses_bt601_weights():
    assert to_grayscale(255, 0, 0) == (76, 76, 76)
    assert to_grayscale(0, 255, 0) == (150, 150, 150)
    assert to_grayscale(0, 0, 255) == (29, 29, 29)
    assert to_grayscale(128, 128, 128) == (128, 128, 128)


def test_grayscale_rounds_exact_half_luma_up():
    # 114 * 0.587 + 163 * 0.114 is exactly 85.5 when summed left to right
    assert to_grayscale(0, 114, 163) == (86, 86, 86)


def test_duotone_black_white_degenerates_to_gray():
    out = to_duotone(128, 128, 128, (0, 0, 0), (255, 255, 255))
    assert all(abs(c - 128) <= 1 for c in out)


def test_duotone_endpoints():
    dark, light = (26, 26, 46), (255, 0, 110)
    assert to_duotone(0, 0, 0, dark, light) == dark
    assert to_duotone(255, 255, 255, dark, light) == light


@pytest.mark.parametrize(
    "levels, rgb, expected",
    [
        (2, (0, 0, 200), (128, 128, 255)),
        (4, (0, 100, 200), (64, 128, 255)),
        (8, (0, 40, 255), (32, 64, 255)),
    ],
)
def test_posterize_snaps_to_upper_bucket_edge(levels, rgb, expected):
    assert posterize(*rgb, levels) == expected


def test_palette_step_uses_exact_cube_root():
    assert palette_step(64) == 64
    assert palette_step(8) == 128
    assert palette_step(27) == 86
    assert palette_step(2) == 204


def test_reduce_palette_identity_at_256():
    rng = np.random.RandomState(0)
    for r, g, b in rng.randint(0, 256, (200, 3)):
        assert reduce_palette(int(r), int(g), int(b), 256) == (r, g, b)


def test_reduce_palette_values():
    assert reduce_palette(100, 150, 30, 64) == (128, 128, 0)
    # 255 / 128 rounds up to 256, clamped back into range
    assert reduce_palette(255, 0, 64, 8) == (255, 0, 128)


@pytest.mark.parametrize("palette_size", [2, 8, 27, 32, 64, 100, 255])
def test_reduce_palette_idempotent(palette_size):
    for v in range(256):
        once = reduce_palette(v, 255 - v, (v * 7) % 256, palette_size)
        assert reduce_palette(*once, palette_size) == once


def test_hsl_conversions():
    assert rgb_to_hsl(255, 0, 0) == (0.0, 1.0, 0.5)
    h, s, l = rgb_to_hsl(0, 255, 0)
    assert h == pytest.approx(1 / 3)
    assert hsl_to_rgb(0.0, 1.0, 0.5) == (255, 0, 0)
    assert hsl_to_rgb(*rgb_to_hsl(128, 128, 128)) == (128, 128, 128)
    assert hsl_to_rgb(*rgb_to_hsl(30, 144, 255)) == (30, 144, 255)


def test_hex_colors():
    assert parse_hex_color("#1a1a2e") == (26, 26, 46)
    assert parse_hex_color("FF006E") == (255, 0, 110)
    assert format_hex_color((255, 0, 110)) == "#ff006e"
    with pytest.raises(ValueError):
        parse_hex_color("#12345")
    with pytest.raises(ValueError):
        parse_hex_color("#zzzzzz")


def test_apply_color_effect_dispatch():
    rgb = np.array([[10.0, 200.0, 90.0]])
    normal = apply_color_effect(rgb, PixelSettings())
    np.testing.assert_array_equal(normal, rgb)

    gray = apply_color_effect(rgb, PixelSettings(color_effect="grayscale"))
    assert np.all(gray == gray[..., :1])

    post = apply_color_effect(rgb, PixelSettings(color_effect="posterize", posterize_levels=4))
    np.testing.assert_array_equal(post, [[64.0, 255.0, 128.0]])
