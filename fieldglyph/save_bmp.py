"""Encoding of bitmaps as 24-bit uncompressed BMP images."""

from __future__ import annotations

import os
import struct
from typing import Union

import numpy as np

from .render import pixel_float_to_byte

__all__ = ["encode_bmp", "save_bmp"]

_BITMAP_START = 54


def _header(width: int, height: int, padded_width: int) -> bytes:
    bitmap_size = padded_width * height
    return struct.pack(
        "<HIHHIIiiHHIIIIII",
        0x4D42,
        _BITMAP_START + bitmap_size,
        0,
        0,
        _BITMAP_START,
        40,
        width,
        height,
        1,
        24,
        0,
        bitmap_size,
        2835,
        2835,
        0,
        0,
    )


def encode_bmp(bitmap: np.ndarray) -> bytes:
    """Encode a (height, width[, 1 or 3]) byte or float bitmap as BMP data.

    Row 0 of the array is the bottom row of the image. Float values are
    mapped from [0, 1] to bytes. Four-channel bitmaps cannot be stored.
    """
    array = np.asarray(bitmap)
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if array.ndim != 3 or array.shape[2] not in (1, 3, 4):
        raise ValueError("expected a bitmap of shape (height, width, 1 or 3)")
    if array.shape[2] == 4:
        raise ValueError("the BMP format does not support RGBA")
    height, width, channels = array.shape
    if np.issubdtype(array.dtype, np.floating):
        pixels = pixel_float_to_byte(array)
    else:
        pixels = array.astype(np.uint8)
    if channels == 1:
        bgr = np.repeat(pixels, 3, axis=2)
    else:
        bgr = pixels[:, :, ::-1]
    padded_width = (3 * width + 3) & ~3
    padding = bytes(padded_width - 3 * width)
    rows = (np.ascontiguousarray(bgr[y]).tobytes() + padding for y in range(height))
    return _header(width, height, padded_width) + b"".join(rows)


def save_bmp(bitmap: np.ndarray, path: Union[str, os.PathLike]) -> None:
    """Write the bitmap to path as a BMP file."""
    data = encode_bmp(bitmap)
    with open(path, "wb") as file:
        file.write(data)