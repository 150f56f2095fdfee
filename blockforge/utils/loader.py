"""Image decoding and encoding using Pillow, with NumPy arrays.

All processing in this project occurs on NumPy arrays. The codec below only
converts between encoded image bytes and RGBA ``uint8`` arrays of shape
(H, W, 4). It is passed into the pipeline as a capability so other codecs can
be substituted.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import Protocol, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError, EncodeError

Array = np.ndarray

MAX_INPUT_BYTES = 10 * 1024 * 1024


class ImageCodec(Protocol):
    """Decode/encode capability pair used by the pipeline."""

    def decode(self, data: bytes) -> Array: ...

    def encode(self, arr: Array) -> bytes: ...


def check_rgba(arr: Array) -> None:
    """Raise if ``arr`` is not an RGBA ``uint8`` array of shape (H, W, 4)."""
    if not isinstance(arr, np.ndarray):
        raise TypeError("arr must be a NumPy array")
    if arr.dtype != np.uint8:
        raise TypeError("arr must have dtype=uint8")
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError("arr must have shape (H, W, 4)")


class PillowCodec:
    """Default codec: reads anything Pillow can open, writes PNG."""

    format = "PNG"

    def decode(self, data: bytes) -> Array:
        """Decode image bytes into an RGBA array.

        Only the first frame of animated formats is used. Sources without an
        alpha channel come back fully opaque.
        """
        try:
            with Image.open(io.BytesIO(data)) as im:
                im.seek(0)
                arr = np.array(im.convert("RGBA"), dtype=np.uint8)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            ValueError,
            SyntaxError,
            MemoryError,
        ) as e:
            raise DecodeError(f"Failed to load image: {e}") from e
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise DecodeError("Failed to load image: empty image")
        return arr

    def encode(self, arr: Array) -> bytes:
        check_rgba(arr)
        buf = io.BytesIO()
        try:
            Image.fromarray(arr).save(buf, format=self.format)
        except (OSError, ValueError) as e:
            raise EncodeError(f"Failed to encode image: {e}") from e
        return buf.getvalue()


DEFAULT_CODEC = PillowCodec()


def decode_image(data: bytes) -> Array:
    return DEFAULT_CODEC.decode(data)


def encode_image(arr: Array) -> bytes:
    return DEFAULT_CODEC.encode(arr)


def read_image_bytes(path: Union[str, Path], max_bytes: int = MAX_INPUT_BYTES) -> bytes:
    """Read an input image file, refusing files larger than ``max_bytes``.

    Parameters
    ----------
    path : str | Path
        Path to the source image.
    max_bytes : int
        Size limit in bytes (10 MB by default).

    Returns
    -------
    bytes
        The raw, still encoded file contents.
    """
    p = Path(path)
    size = p.stat().st_size
    if size > max_bytes:
        raise ValueError(
            f"Input file is {size} bytes, larger than the {max_bytes} byte limit: {p}"
        )
    return p.read_bytes()


def load_image(path: Union[str, Path]) -> Array:
    """Load an image file into an RGBA NumPy array (uint8).

    Parameters
    ----------
    path : str | Path
        Path to an image supported by Pillow.

    Returns
    -------
    np.ndarray
        Array of shape (H, W, 4), dtype=uint8, in RGBA order.
    """
    return decode_image(read_image_bytes(path))


def save_image(arr: Array, path: Union[str, Path]) -> None:
    """Save an RGBA NumPy array (uint8) as a PNG file.

    Parameters
    ----------
    arr : np.ndarray
        Array of shape (H, W, 4), dtype=uint8.
    path : str | Path
        Output file path.
    """
    Path(path).write_bytes(encode_image(arr))
