"""Direct generation of signed distance fields from shapes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Union

import numpy as np

from .edge_segments import EdgeColor, EdgeSegment, SignedDistance, Vector2
from .shape_description import Shape

__all__ = [
    "generate_sdf_legacy",
    "generate_pseudo_sdf_legacy",
    "generate_msdf_legacy",
    "generate_mtsdf_legacy",
]

VectorLike = Union[Vector2, Sequence[float]]


def _as_vector(value: VectorLike) -> Vector2:
    if isinstance(value, Vector2):
        return value
    x, y = value
    return Vector2(float(x), float(y))


def _edges(shape: Shape) -> Iterator[EdgeSegment]:
    for contour in shape.contours:
        yield from contour.edges


def _samples(
    shape: Shape, width: int, height: int, scale: VectorLike, translate: VectorLike
) -> Iterator[tuple[int, int, Vector2]]:
    """Yield (column, row, point in shape space) for every pixel."""
    scale, translate = _as_vector(scale), _as_vector(translate)
    for y in range(height):
        row = height - y - 1 if shape.inverse_y_axis else y
        for x in range(width):
            yield x, row, Vector2(x + 0.5, y + 0.5) / scale - translate


@dataclass
class _Nearest:
    """The nearest edge found so far for one channel."""

    min_distance: SignedDistance = field(default_factory=SignedDistance)
    edge: Optional[EdgeSegment] = None
    param: float = 0.0

    def offer(self, edge: EdgeSegment, distance: SignedDistance, param: float) -> None:
        if distance < self.min_distance:
            self.min_distance = distance
            self.edge = edge
            self.param = param

    def pseudo_distance(self, p: Vector2) -> float:
        if self.edge is None:
            return self.min_distance.distance
        return self.edge.distance_to_pseudo_distance(
            self.min_distance, p, self.param
        ).distance


def generate_sdf_legacy(
    shape: Shape,
    width: int,
    height: int,
    distance_range: float,
    scale: VectorLike,
    translate: VectorLike,
) -> np.ndarray:
    """A (height, width, 1) field of true signed distances."""
    output = np.zeros((height, width, 1), dtype=np.float32)
    for x, row, p in _samples(shape, width, height, scale, translate):
        min_distance = SignedDistance()
        for edge in _edges(shape):
            distance, _ = edge.signed_distance(p)
            if distance < min_distance:
                min_distance = distance
        output[row, x, 0] = min_distance.distance / distance_range + 0.5
    return output


def generate_pseudo_sdf_legacy(
    shape: Shape,
    width: int,
    height: int,
    distance_range: float,
    scale: VectorLike,
    translate: VectorLike,
) -> np.ndarray:
    """A (height, width, 1) field of signed pseudo-distances."""
    output = np.zeros((height, width, 1), dtype=np.float32)
    for x, row, p in _samples(shape, width, height, scale, translate):
        nearest = _Nearest()
        for edge in _edges(shape):
            distance, param = edge.signed_distance(p)
            nearest.offer(edge, distance, param)
        output[row, x, 0] = nearest.pseudo_distance(p) / distance_range + 0.5
    return output


def _generate_multi(
    shape: Shape,
    width: int,
    height: int,
    distance_range: float,
    scale: VectorLike,
    translate: VectorLike,
    with_true_distance: bool,
) -> np.ndarray:
    channels = 4 if with_true_distance else 3
    output = np.zeros((height, width, channels), dtype=np.float32)
    flags = (EdgeColor.RED, EdgeColor.GREEN, EdgeColor.BLUE)
    for x, row, p in _samples(shape, width, height, scale, translate):
        min_distance = SignedDistance()
        nearest = [_Nearest() for _ in flags]
        for edge in _edges(shape):
            distance, param = edge.signed_distance(p)
            if distance < min_distance:
                min_distance = distance
            for flag, channel in zip(flags, nearest):
                if edge.color & flag:
                    channel.offer(edge, distance, param)
        for index, channel in enumerate(nearest):
            output[row, x, index] = channel.pseudo_distance(p) / distance_range + 0.5
        if with_true_distance:
            output[row, x, 3] = min_distance.distance / distance_range + 0.5
    return output


def generate_msdf_legacy(
    shape: Shape,
    width: int,
    height: int,
    distance_range: float,
    scale: VectorLike,
    translate: VectorLike,
) -> np.ndarray:
    """A (height, width, 3) multi-channel field; each channel follows its edge colour."""
    return _generate_multi(shape, width, height, distance_range, scale, translate, False)


def generate_mtsdf_legacy(
    shape: Shape,
    width: int,
    height: int,
    distance_range: float,
    scale: VectorLike,
    translate: VectorLike,
) -> np.ndarray:
    """A (height, width, 4) field: three colour channels plus true distance in alpha."""
    return _generate_multi(shape, width, height, distance_range, scale, translate, True)