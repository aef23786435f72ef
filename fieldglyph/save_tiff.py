"""Encoding of float bitmaps as uncompressed floating-point TIFF images."""

from __future__ import annotations

import os
import struct
from typing import Union

import numpy as np

__all__ = ["encode_tiff", "save_tiff"]

_SHORT = 3
_LONG = 4
_RATIONAL = 5
_FLOAT = 11


def _entry(tag: int, kind: int, count: int, value: bytes) -> bytes:
    return struct.pack("<HHI", tag, kind, count) + value


def _short(value: int) -> bytes:
    return struct.pack("<HH", value, 0)


def _header(width: int, height: int, channels: int) -> bytes:
    multi = channels > 1
    offset = struct.Struct("<I").pack
    entries = [
        _entry(0x0100, _LONG, 1, struct.pack("<i", width)),
        _entry(0x0101, _LONG, 1, struct.pack("<i", height)),
        _entry(0x0102, _SHORT, channels, offset(0xC2) if multi else _short(32)),
        _entry(0x0103, _SHORT, 1, _short(1)),
        _entry(0x0106, _SHORT, 1, _short(2 if channels >= 3 else 1)),
        _entry(0x0111, _LONG, 1, offset(0xD2 + multi * channels * 12)),
        _entry(0x0115, _SHORT, 1, _short(channels)),
        _entry(0x0116, _LONG, 1, struct.pack("<i", height)),
        _entry(0x0117, _LONG, 1, struct.pack("<i", 4 * channels * width * height)),
        _entry(0x011A, _RATIONAL, 1, offset(0xC2 + multi * channels * 2)),
        _entry(0x011B, _RATIONAL, 1, offset(0xCA + multi * channels * 2)),
        _entry(0x0128, _SHORT, 1, _short(2)),
        _entry(
            0x0153, _SHORT, channels,
            offset(0xD2 + channels * 2) if multi else _short(3),
        ),
        _entry(
            0x0154, _FLOAT, channels,
            offset(0xD2 + channels * 4) if multi else struct.pack("<f", 0.0),
        ),
        _entry(
            0x0155, _FLOAT, channels,
            offset(0xD2 + channels * 8) if multi else struct.pack("<f", 1.0),
        ),
    ]
    parts = [struct.pack("<HHI", 0x4949, 42, 8), struct.pack("<H", len(entries))]
    parts.extend(entries)
    parts.append(offset(0))
    resolution = struct.pack("<II", 300, 1) * 2
    if multi:
        parts.append(struct.pack(f"<{channels}H", *([32] * channels)))
        parts.append(resolution)
        parts.append(struct.pack(f"<{channels}H", *([3] * channels)))
        parts.append(struct.pack(f"<{channels}f", *([0.0] * channels)))
        parts.append(struct.pack(f"<{channels}f", *([1.0] * channels)))
    else:
        parts.append(resolution)
    return b"".join(parts)


def encode_tiff(bitmap: np.ndarray) -> bytes:
    """Encode a (height, width[, 1, 3 or 4]) float bitmap as TIFF data.

    Row 0 of the array is the bottom row of the image.
    """
    array = np.asarray(bitmap)
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if array.ndim != 3 or array.shape[2] not in (1, 3, 4):
        raise ValueError("expected a bitmap of shape (height, width, 1, 3 or 4)")
    height, width, channels = array.shape
    pixels = np.ascontiguousarray(array[::-1], dtype="<f4")
    return _header(width, height, channels) + pixels.tobytes()


def save_tiff(bitmap: np.ndarray, path: Union[str, os.PathLike]) -> None:
    """Write the bitmap to path as a floating-point TIFF file."""
    data = encode_tiff(bitmap)
    with open(path, "wb") as file:
        file.write(data)