"""Selectors that pick the nearest edge by true, pseudo or per-channel distance."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from .edge_segments import EdgeColor, EdgeSegment, SignedDistance, Vector2

__all__ = [
    "MultiDistance",
    "MultiAndTrueDistance",
    "TrueEdgeCache",
    "PseudoEdgeCache",
    "TrueDistanceSelector",
    "PseudoDistanceSelectorBase",
    "PseudoDistanceSelector",
    "MultiDistanceSelector",
    "MultiAndTrueDistanceSelector",
]

DISTANCE_DELTA_FACTOR = 1.001


def _non_zero_sign(value: float) -> int:
    return 1 if value > 0 else -1


@dataclass(slots=True)
class MultiDistance:
    """Distances for the three colour channels."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0


@dataclass(slots=True)
class MultiAndTrueDistance(MultiDistance):
    """Per-channel distances plus the true distance in the alpha channel."""

    a: float = 0.0


@dataclass(slots=True)
class TrueEdgeCache:
    """What a true-distance selector remembers about an edge between pixels."""

    point: Vector2 = field(default_factory=Vector2)
    abs_distance: float = 0.0


@dataclass(slots=True)
class PseudoEdgeCache:
    """What a pseudo-distance selector remembers about an edge between pixels."""

    point: Vector2 = field(default_factory=Vector2)
    abs_distance: float = 0.0
    a_domain_distance: float = 0.0
    b_domain_distance: float = 0.0
    a_pseudo_distance: float = 0.0
    b_pseudo_distance: float = 0.0


class TrueDistanceSelector:
    """Selects the nearest edge by its true distance."""

    def __init__(self) -> None:
        self.p = Vector2()
        self.min_distance = SignedDistance()

    def reset(self, p: Vector2) -> None:
        delta = DISTANCE_DELTA_FACTOR * (p - self.p).length()
        current = self.min_distance.distance
        self.min_distance = replace(
            self.min_distance, distance=current + _non_zero_sign(current) * delta
        )
        self.p = p

    def add_edge(
        self,
        cache: TrueEdgeCache,
        prev_edge: EdgeSegment,
        edge: EdgeSegment,
        next_edge: EdgeSegment,
    ) -> None:
        delta = DISTANCE_DELTA_FACTOR * (self.p - cache.point).length()
        if cache.abs_distance - delta <= abs(self.min_distance.distance):
            distance, _ = edge.signed_distance(self.p)
            if distance < self.min_distance:
                self.min_distance = replace(distance)
            cache.point = self.p
            cache.abs_distance = abs(distance.distance)

    def merge(self, other: TrueDistanceSelector) -> None:
        if other.min_distance < self.min_distance:
            self.min_distance = replace(other.min_distance)

    def distance(self) -> float:
        return self.min_distance.distance


class PseudoDistanceSelectorBase:
    """Tracks the nearest true distance and the nearest pseudo-distances of both signs."""

    def __init__(self) -> None:
        self.min_true_distance = SignedDistance()
        self.min_negative_pseudo_distance = -abs(self.min_true_distance.distance)
        self.min_positive_pseudo_distance = abs(self.min_true_distance.distance)
        self.near_edge: Optional[EdgeSegment] = None
        self.near_edge_param = 0.0

    @staticmethod
    def get_pseudo_distance(
        distance: float, ep: Vector2, edge_dir: Vector2
    ) -> Optional[float]:
        """The pseudo-distance along edge_dir if it beats distance, otherwise None."""
        if ep.dot(edge_dir) > 0:
            pseudo = ep.cross(edge_dir)
            if abs(pseudo) < abs(distance):
                return pseudo
        return None

    def reset(self, delta: float) -> None:
        current = self.min_true_distance.distance
        current += _non_zero_sign(current) * delta
        self.min_true_distance = replace(self.min_true_distance, distance=current)
        self.min_negative_pseudo_distance = -abs(current)
        self.min_positive_pseudo_distance = abs(current)
        self.near_edge = None
        self.near_edge_param = 0.0

    def is_edge_relevant(
        self, cache: PseudoEdgeCache, edge: EdgeSegment, p: Vector2
    ) -> bool:
        delta = DISTANCE_DELTA_FACTOR * (p - cache.point).length()

        def pseudo_relevant(domain: float, pseudo: float) -> bool:
            if domain <= 0:
                return False
            if pseudo < 0:
                return pseudo + delta >= self.min_negative_pseudo_distance
            return pseudo - delta <= self.min_positive_pseudo_distance

        return (
            cache.abs_distance - delta <= abs(self.min_true_distance.distance)
            or abs(cache.a_domain_distance) < delta
            or abs(cache.b_domain_distance) < delta
            or pseudo_relevant(cache.a_domain_distance, cache.a_pseudo_distance)
            or pseudo_relevant(cache.b_domain_distance, cache.b_pseudo_distance)
        )

    def add_edge_true_distance(
        self, edge: EdgeSegment, distance: SignedDistance, param: float
    ) -> None:
        if distance < self.min_true_distance:
            self.min_true_distance = replace(distance)
            self.near_edge = edge
            self.near_edge_param = param

    def add_edge_pseudo_distance(self, distance: float) -> None:
        if 0 >= distance > self.min_negative_pseudo_distance:
            self.min_negative_pseudo_distance = distance
        if 0 <= distance < self.min_positive_pseudo_distance:
            self.min_positive_pseudo_distance = distance

    def merge(self, other: PseudoDistanceSelectorBase) -> None:
        if other.min_true_distance < self.min_true_distance:
            self.min_true_distance = replace(other.min_true_distance)
            self.near_edge = other.near_edge
            self.near_edge_param = other.near_edge_param
        if other.min_negative_pseudo_distance > self.min_negative_pseudo_distance:
            self.min_negative_pseudo_distance = other.min_negative_pseudo_distance
        if other.min_positive_pseudo_distance < self.min_positive_pseudo_distance:
            self.min_positive_pseudo_distance = other.min_positive_pseudo_distance

    def compute_distance(self, p: Vector2) -> float:
        if self.min_true_distance.distance < 0:
            min_distance = self.min_negative_pseudo_distance
        else:
            min_distance = self.min_positive_pseudo_distance
        if self.near_edge is not None:
            distance = self.near_edge.distance_to_pseudo_distance(
                replace(self.min_true_distance), p, self.near_edge_param
            )
            if abs(distance.distance) < abs(min_distance):
                min_distance = distance.distance
        return min_distance

    def true_distance(self) -> SignedDistance:
        return replace(self.min_true_distance)


def _update_domain(
    cache: PseudoEdgeCache,
    p: Vector2,
    prev_edge: EdgeSegment,
    edge: EdgeSegment,
    next_edge: EdgeSegment,
    distance: SignedDistance,
) -> list[float]:
    """Fill in the edge's domain data in cache; return pseudo-distances found."""
    ap = p - edge.point(0)
    bp = p - edge.point(1)
    a_dir = edge.direction(0).normalize(True)
    b_dir = edge.direction(1).normalize(True)
    prev_dir = prev_edge.direction(1).normalize(True)
    next_dir = next_edge.direction(0).normalize(True)
    add = ap.dot((prev_dir + a_dir).normalize(True))
    bdd = -bp.dot((b_dir + next_dir).normalize(True))
    found: list[float] = []
    if add > 0:
        pd = distance.distance
        pseudo = PseudoDistanceSelectorBase.get_pseudo_distance(pd, ap, -a_dir)
        if pseudo is not None:
            pd = -pseudo
            found.append(pd)
        cache.a_pseudo_distance = pd
    if bdd > 0:
        pd = distance.distance
        pseudo = PseudoDistanceSelectorBase.get_pseudo_distance(pd, bp, b_dir)
        if pseudo is not None:
            pd = pseudo
            found.append(pd)
        cache.b_pseudo_distance = pd
    cache.a_domain_distance = add
    cache.b_domain_distance = bdd
    return found


class PseudoDistanceSelector(PseudoDistanceSelectorBase):
    """Selects the nearest edge by its pseudo-distance."""

    def __init__(self) -> None:
        super().__init__()
        self.p = Vector2()

    def reset(self, p: Vector2) -> None:  # type: ignore[override]
        delta = DISTANCE_DELTA_FACTOR * (p - self.p).length()
        super().reset(delta)
        self.p = p

    def add_edge(
        self,
        cache: PseudoEdgeCache,
        prev_edge: EdgeSegment,
        edge: EdgeSegment,
        next_edge: EdgeSegment,
    ) -> None:
        if not self.is_edge_relevant(cache, edge, self.p):
            return
        distance, param = edge.signed_distance(self.p)
        self.add_edge_true_distance(edge, distance, param)
        cache.point = self.p
        cache.abs_distance = abs(distance.distance)
        for pd in _update_domain(cache, self.p, prev_edge, edge, next_edge, distance):
            self.add_edge_pseudo_distance(pd)

    def distance(self) -> float:
        return self.compute_distance(self.p)


class MultiDistanceSelector:
    """Selects the nearest edge for each of the three channels by its pseudo-distance."""

    def __init__(self) -> None:
        self.p = Vector2()
        self.r = PseudoDistanceSelectorBase()
        self.g = PseudoDistanceSelectorBase()
        self.b = PseudoDistanceSelectorBase()

    def _channels(self, color: EdgeColor) -> list[PseudoDistanceSelectorBase]:
        pairs = ((EdgeColor.RED, self.r), (EdgeColor.GREEN, self.g), (EdgeColor.BLUE, self.b))
        return [selector for flag, selector in pairs if color & flag]

    def reset(self, p: Vector2) -> None:
        delta = DISTANCE_DELTA_FACTOR * (p - self.p).length()
        for selector in (self.r, self.g, self.b):
            selector.reset(delta)
        self.p = p

    def add_edge(
        self,
        cache: PseudoEdgeCache,
        prev_edge: EdgeSegment,
        edge: EdgeSegment,
        next_edge: EdgeSegment,
    ) -> None:
        channels = self._channels(edge.color)
        if not any(s.is_edge_relevant(cache, edge, self.p) for s in channels):
            return
        distance, param = edge.signed_distance(self.p)
        for selector in channels:
            selector.add_edge_true_distance(edge, distance, param)
        cache.point = self.p
        cache.abs_distance = abs(distance.distance)
        for pd in _update_domain(cache, self.p, prev_edge, edge, next_edge, distance):
            for selector in channels:
                selector.add_edge_pseudo_distance(pd)

    def merge(self, other: MultiDistanceSelector) -> None:
        self.r.merge(other.r)
        self.g.merge(other.g)
        self.b.merge(other.b)

    def distance(self) -> MultiDistance:
        return MultiDistance(
            self.r.compute_distance(self.p),
            self.g.compute_distance(self.p),
            self.b.compute_distance(self.p),
        )

    def true_distance(self) -> SignedDistance:
        distance = self.r.true_distance()
        for candidate in (self.g.true_distance(), self.b.true_distance()):
            if candidate < distance:
                distance = candidate
        return distance


class MultiAndTrueDistanceSelector(MultiDistanceSelector):
    """Per-channel pseudo-distances plus the true distance for the alpha channel."""

    def distance(self) -> MultiAndTrueDistance:  # type: ignore[override]
        multi = super().distance()
        return MultiAndTrueDistance(
            multi.r, multi.g, multi.b, self.true_distance().distance
        )