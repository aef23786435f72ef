"""Reconstruction of a shape's appearance from a distance field, and 8-bit quantisation."""

from __future__ import annotations

from typing import Union

import numpy as np

__all__ = [
    "pixel_float_to_byte",
    "pixel_byte_to_float",
    "render_sdf",
    "simulate_8bit",
]

_SUPPORTED = {(1, 1), (1, 3), (3, 1), (3, 3), (4, 1), (4, 4)}


def pixel_float_to_byte(value):
    """Map a float in [0, 1] to a byte, clamping values outside the range.

    Accepts a scalar (returns an int) or an array (returns a uint8 array).
    """
    scaled = np.float32(256) * np.asarray(value, dtype=np.float32)
    scaled = np.where(np.isnan(scaled), np.float32(0), scaled)
    result = np.clip(scaled, 0, 255).astype(np.uint8)
    if result.ndim == 0:
        return int(result)
    return result


def pixel_byte_to_float(value):
    """Map a byte to a float in [0, 1].

    Accepts a scalar (returns a float) or an array (returns a float32 array).
    """
    result = np.asarray(value, dtype=np.float32) / np.float32(255)
    if result.ndim == 0:
        return float(result)
    return result


def _as_channels(bitmap: np.ndarray) -> np.ndarray:
    array = np.asarray(bitmap)
    if array.ndim == 2:
        return array[:, :, np.newaxis]
    if array.ndim != 3:
        raise ValueError("expected a bitmap of shape (height, width) or (height, width, channels)")
    return array


def _median3(values: np.ndarray) -> np.ndarray:
    a, b, c = values[..., 0], values[..., 1], values[..., 2]
    return np.maximum(np.minimum(a, b), np.minimum(np.maximum(a, b), c))


def _resample(sdf: np.ndarray, width: int, height: int) -> np.ndarray:
    """Bilinearly sample sdf at the centres of a width x height grid."""
    sdf_height, sdf_width = sdf.shape[:2]

    def axis(count: int, size: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        pos = (np.arange(count) + 0.5) * (size / count) - 0.5
        low = np.floor(pos).astype(np.int64)
        weight = pos - low
        high = np.clip(low + 1, 0, size - 1)
        low = np.clip(low, 0, size - 1)
        return low, high, weight

    left, right, lr = axis(width, sdf_width)
    bottom, top, bt = axis(height, sdf_height)
    data = sdf.astype(np.float64)
    lr = lr[np.newaxis, :, np.newaxis]
    bt = bt[:, np.newaxis, np.newaxis]

    def row(rows: np.ndarray) -> np.ndarray:
        block = data[rows]
        return (1 - lr) * block[:, left] + lr * block[:, right]

    mixed = (1 - bt) * row(bottom) + bt * row(top)
    return mixed.astype(np.float32)


def _dist_val(sd: np.ndarray, px_range: float, mid_value: float) -> np.ndarray:
    mid = np.float32(mid_value)
    if not px_range:
        return (sd > mid).astype(np.float32)
    value = (sd.astype(np.float64) - float(mid)) * px_range + 0.5
    value = np.where(np.isnan(value), 0.0, value)
    return np.clip(value, 0.0, 1.0).astype(np.float32)


def render_sdf(
    sdf: np.ndarray,
    width: int,
    height: int,
    channels: int = 1,
    px_range: float = 0.0,
    mid_value: float = 0.5,
) -> np.ndarray:
    """Render a (height, width, channels) float32 image of the shape held in sdf.

    With px_range zero the result is a hard threshold at mid_value; otherwise
    it is anti-aliased over px_range pixels of the source field.
    """
    field = _as_channels(sdf)
    sdf_height, sdf_width, sdf_channels = field.shape
    if (sdf_channels, channels) not in _SUPPORTED:
        raise ValueError(
            f"cannot render a {sdf_channels}-channel field into {channels} channels"
        )
    if width < 0 or height < 0:
        raise ValueError("output dimensions must not be negative")
    if width == 0 or height == 0:
        return np.zeros((height, width, channels), dtype=np.float32)
    if sdf_width <= 0 or sdf_height <= 0:
        raise ValueError("the distance field is empty")

    px_range = px_range * (width + height) / (sdf_width + sdf_height)
    sampled = _resample(field, width, height)

    if channels == 1:
        sd = sampled[..., 0] if sdf_channels == 1 else _median3(sampled)
        return _dist_val(sd, px_range, mid_value)[..., np.newaxis]
    if sdf_channels == 1:
        single = _dist_val(sampled[..., 0], px_range, mid_value)
        return np.repeat(single[..., np.newaxis], channels, axis=2)
    return _dist_val(sampled, px_range, mid_value)


def simulate_8bit(bitmap: np.ndarray) -> np.ndarray:
    """Snap a float bitmap in place to values representable in 8 bits; return it."""
    bitmap[...] = pixel_byte_to_float(pixel_float_to_byte(np.asarray(bitmap)))
    return bitmap