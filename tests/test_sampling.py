"""Tests for block sampling."""

from __future__ import annotations

import numpy as np
import pytest

from blockforge.utils.sampling import block_bounds, sample_block, sample_blocks


def _random_rgba(h: int, w: int, seed: int = 42) -> np.ndarray:
    rng = np.random.RandomState(seed)
    return rng.randint(0, 256, (h, w, 4), dtype=np.uint8)


def test_averaged_rounds_half_up():
    arr = np.array(
        [
            [[0, 0, 0, 255], [255, 255, 255, 255]],
            [[0, 0, 0, 255], [255, 255, 255, 255]],
        ],
        dtype=np.uint8,
    )
    assert sample_block(arr, 0, 0, 2, 2, "averaged") == (128, 128, 128, 255)
    np.testing.assert_array_equal(sample_blocks(arr, 2, "averaged")[0, 0], [128, 128, 128, 255])


def test_averaged_uniform_block_is_exact():
    arr = np.zeros((6, 6, 4), dtype=np.uint8)
    arr[...] = (17, 200, 99, 180)
    assert sample_block(arr, 0, 0, 6, 6, "averaged") == (17, 200, 99, 180)


def test_nearest_returns_top_left_pixel():
    arr = _random_rgba(8, 8)
    expected = tuple(int(v) for v in arr[4, 4])
    assert sample_block(arr, 4, 4, 4, 4, "nearest") == expected
    np.testing.assert_array_equal(sample_blocks(arr, 4, "nearest")[1, 1], arr[4, 4])


def test_alpha_is_averaged():
    arr = np.zeros((1, 2, 4), dtype=np.uint8)
    arr[0, 0] = (10, 10, 10, 0)
    arr[0, 1] = (10, 10, 10, 255)
    assert sample_block(arr, 0, 0, 2, 1, "averaged") == (10, 10, 10, 128)


def test_block_bounds_clips_edge_blocks():
    starts, extents = block_bounds(10, 4)
    assert starts.tolist() == [0, 4, 8]
    assert extents.tolist() == [4, 4, 2]
    assert extents.sum() == 10


def test_edge_block_uses_only_in_bounds_pixels():
    arr = np.zeros((5, 5, 4), dtype=np.uint8)
    arr[4, 4] = (200, 100, 50, 255)
    # block at (4, 4) with size 4 is clipped to a single pixel
    assert sample_block(arr, 4, 4, 4, 4, "averaged") == (200, 100, 50, 255)
    np.testing.assert_array_equal(sample_blocks(arr, 4, "averaged")[1, 1], [200, 100, 50, 255])


def test_large_blocks_do_not_overflow():
    arr = np.full((100, 100, 4), 255, dtype=np.uint8)
    assert sample_block(arr, 0, 0, 100, 100, "averaged") == (255, 255, 255, 255)


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7])
@pytest.mark.parametrize("mode", ["averaged", "nearest"])
def test_vectorised_sampling_matches_single_block(size, mode):
    arr = _random_rgba(11, 13, seed=size)
    grid = sample_blocks(arr, size, mode)
    ys, _ = block_bounds(11, size)
    xs, _ = block_bounds(13, size)
    assert grid.shape == (len(ys), len(xs), 4)
    for j, y in enumerate(ys):
        for i, x in enumerate(xs):
            assert tuple(grid[j, i].tolist()) == sample_block(arr, int(x), int(y), size, size, mode)


def test_unknown_mode_rejected():
    arr = _random_rgba(4, 4)
    with pytest.raises(ValueError):
        sample_blocks(arr, 2, "median")
    with pytest.raises(ValueError):
        sample_block(arr, 0, 0, 2, 2, "median")
