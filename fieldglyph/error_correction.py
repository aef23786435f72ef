"""Clash-based error correction of multi-channel signed distance fields."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .edge_segments import Vector2

__all__ = ["median", "detect_clash", "msdf_error_correction_legacy"]

_HALF = np.float32(0.5)


def median(a, b, c):
    """The middle value of three."""
    return max(min(a, b), min(max(a, b), c))


def detect_clash(a: Sequence[float], b: Sequence[float], threshold: float) -> bool:
    """Whether texel a clashes with its neighbour b and is the one to be corrected."""
    pairs = [(np.float32(a[i]), np.float32(b[i])) for i in range(3)]
    # Order channel pairs from the biggest to the smallest absolute difference.
    pairs.sort(key=lambda pair: abs(pair[1] - pair[0]), reverse=True)
    (_, b0), (a1, b1), (a2, b2) = pairs
    return bool(
        abs(b1 - a1) >= threshold
        # A neighbour that has already been equalised is ignored.
        and not (b0 == b1 and b0 == b2)
        # Only the texel farther from the shape's edge is flagged.
        and abs(a2 - _HALF) >= abs(b2 - _HALF)
    )


def _threshold_pair(threshold: Union[Vector2, Sequence[float]]) -> tuple[float, float]:
    if isinstance(threshold, Vector2):
        return threshold.x, threshold.y
    tx, ty = threshold
    return float(tx), float(ty)


def _equalize_clashes(
    output: np.ndarray, neighbours: Sequence[tuple[int, int, float]]
) -> None:
    height, width = output.shape[:2]
    clashes = [
        (x, y)
        for y in range(height)
        for x in range(width)
        if any(
            0 <= x + dx < width
            and 0 <= y + dy < height
            and detect_clash(output[y, x], output[y + dy, x + dx], limit)
            for dx, dy, limit in neighbours
        )
    ]
    for x, y in clashes:
        pixel = output[y, x]
        pixel[:3] = median(pixel[0], pixel[1], pixel[2])


def msdf_error_correction_legacy(
    output: np.ndarray, threshold: Union[Vector2, Sequence[float]]
) -> np.ndarray:
    """Equalise clashing texels of a (height, width, 3 or 4) field in place.

    The threshold gives the horizontal and vertical clash limits; diagonal
    neighbours use their sum. Returns the same array.
    """
    if output.ndim != 3 or output.shape[2] < 3:
        raise ValueError("expected a bitmap of shape (height, width, 3 or 4)")
    tx, ty = _threshold_pair(threshold)
    _equalize_clashes(output, [(-1, 0, tx), (1, 0, tx), (0, -1, ty), (0, 1, ty)])
    diagonal = tx + ty
    _equalize_clashes(
        output,
        [(-1, -1, diagonal), (1, -1, diagonal), (-1, 1, diagonal), (1, 1, diagonal)],
    )
    return output