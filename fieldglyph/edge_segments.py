"""Vector primitives and the linear, quadratic and cubic edge segments of a shape."""

from __future__ import annotations

import enum
import math
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import TypeVar, Union

from .equation_solver import solve_cubic, solve_quadratic

__all__ = [
    "Vector2",
    "Point2",
    "SignedDistance",
    "EdgeColor",
    "mix",
    "EdgeSegment",
    "LinearSegment",
    "QuadraticSegment",
    "CubicSegment",
    "CUBIC_SEARCH_STARTS",
    "CUBIC_SEARCH_STEPS",
]

# Parameters of the iterative search for the closest point on a cubic curve.
CUBIC_SEARCH_STARTS = 4
CUBIC_SEARCH_STEPS = 4


def _non_zero_sign(value: float) -> int:
    return 1 if value > 0 else -1


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


@dataclass(frozen=True, slots=True)
class Vector2:
    """An immutable two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __mul__(self, other: Union[float, Vector2]) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(self.x * other.x, self.y * other.y)
        return Vector2(self.x * other, self.y * other)

    __rmul__ = __mul__

    def __truediv__(self, other: Union[float, Vector2]) -> Vector2:
        if isinstance(other, Vector2):
            return Vector2(self.x / other.x, self.y / other.y)
        return Vector2(self.x / other, self.y / other)

    def __bool__(self) -> bool:
        return bool(self.x or self.y)

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def normalize(self, allow_zero: bool = False) -> Vector2:
        """Unit vector of the same direction; a zero vector yields (0, 1) unless allow_zero."""
        length = self.length()
        if length == 0:
            return Vector2(0.0, 0.0 if allow_zero else 1.0)
        return Vector2(self.x / length, self.y / length)

    def orthonormal(self, polarity: bool = True, allow_zero: bool = False) -> Vector2:
        """Unit vector perpendicular to this one, turned left when polarity is true."""
        length = self.length()
        if length == 0:
            unit = 0.0 if allow_zero else 1.0
            return Vector2(0.0, unit if polarity else -unit)
        if polarity:
            return Vector2(-self.y / length, self.x / length)
        return Vector2(self.y / length, -self.x / length)

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2) -> float:
        return self.x * other.y - self.y * other.x


Point2 = Vector2

_T = TypeVar("_T", float, Vector2)


def mix(a: _T, b: _T, weight: float) -> _T:
    """Linear interpolation between a and b."""
    return (1 - weight) * a + weight * b


@dataclass(slots=True)
class SignedDistance:
    """A signed distance together with the alignment used to break ties."""

    distance: float = -sys.float_info.max
    dot: float = 1.0

    def __lt__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot < other.dot)

    def __gt__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a > b or (a == b and self.dot > other.dot)

    def __le__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot <= other.dot)

    def __ge__(self, other: SignedDistance) -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a > b or (a == b and self.dot >= other.dot)


class EdgeColor(enum.IntFlag):
    """Colour channels an edge contributes to."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


def _extend_bounds(
    p: Vector2, bounds: tuple[float, float, float, float]
) -> tuple[float, float, float, float]:
    left, bottom, right, top = bounds
    return min(left, p.x), min(bottom, p.y), max(right, p.x), max(top, p.y)


class EdgeSegment(ABC):
    """An edge of a contour, parametrised over [0, 1]."""

    def __init__(self, color: EdgeColor = EdgeColor.WHITE) -> None:
        self.color = color
        self.points: list[Vector2] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.points!r}, color={self.color!r})"

    def clone(self) -> EdgeSegment:
        """An independent copy of the segment."""
        return type(self)(*self.points, color=self.color)

    @abstractmethod
    def point(self, param: float) -> Vector2:
        """The point on the edge at the given parameter."""

    @abstractmethod
    def direction(self, param: float) -> Vector2:
        """The tangent direction at the given parameter."""

    @abstractmethod
    def direction_change(self, param: float) -> Vector2:
        """The second derivative at the given parameter."""

    @abstractmethod
    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        """Minimum signed distance to origin and the parameter where it occurs."""

    def distance_to_pseudo_distance(
        self, distance: SignedDistance, origin: Vector2, param: float
    ) -> SignedDistance:
        """Convert a signed distance obtained at param into a pseudo-distance."""
        if param < 0:
            direction = self.direction(0).normalize()
            aq = origin - self.point(0)
            if aq.dot(direction) < 0:
                pseudo = aq.cross(direction)
                if abs(pseudo) <= abs(distance.distance):
                    return replace(distance, distance=pseudo, dot=0.0)
        elif param > 1:
            direction = self.direction(1).normalize()
            bq = origin - self.point(1)
            if bq.dot(direction) > 0:
                pseudo = bq.cross(direction)
                if abs(pseudo) <= abs(distance.distance):
                    return replace(distance, distance=pseudo, dot=0.0)
        return distance

    @abstractmethod
    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        """Crossings with the horizontal line at y as (x, direction) pairs."""

    @abstractmethod
    def bound(
        self, left: float, bottom: float, right: float, top: float
    ) -> tuple[float, float, float, float]:
        """The given bounding box extended to enclose the segment."""

    def reverse(self) -> None:
        """Swap the start and end of the segment."""
        self.points.reverse()

    @abstractmethod
    def move_start_point(self, to: Vector2) -> None:
        """Move the start point."""

    @abstractmethod
    def move_end_point(self, to: Vector2) -> None:
        """Move the end point."""

    @abstractmethod
    def split_in_thirds(self) -> tuple[EdgeSegment, EdgeSegment, EdgeSegment]:
        """Three segments which together represent this one."""


class LinearSegment(EdgeSegment):
    """A straight line segment."""

    def __init__(self, p0: Vector2, p1: Vector2, color: EdgeColor = EdgeColor.WHITE) -> None:
        super().__init__(color)
        self.points = [p0, p1]

    def point(self, param: float) -> Vector2:
        return mix(self.points[0], self.points[1], param)

    def direction(self, param: float) -> Vector2:
        return self.points[1] - self.points[0]

    def direction_change(self, param: float) -> Vector2:
        return Vector2()

    def length(self) -> float:
        return (self.points[1] - self.points[0]).length()

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1 = self.points
        aq = origin - p0
        ab = p1 - p0
        param = aq.dot(ab) / ab.dot(ab)
        eq = (p1 if param > 0.5 else p0) - origin
        endpoint_distance = eq.length()
        if 0 < param < 1:
            ortho_distance = ab.orthonormal(False).dot(aq)
            if abs(ortho_distance) < endpoint_distance:
                return SignedDistance(ortho_distance, 0.0), param
        return (
            SignedDistance(
                _non_zero_sign(aq.cross(ab)) * endpoint_distance,
                abs(ab.normalize().dot(eq.normalize())),
            ),
            param,
        )

    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        p0, p1 = self.points
        if p0.y <= y < p1.y or p1.y <= y < p0.y:
            param = (y - p0.y) / (p1.y - p0.y)
            return [(mix(p0.x, p1.x, param), _sign(p1.y - p0.y))]
        return []

    def bound(self, left, bottom, right, top):
        bounds = (left, bottom, right, top)
        for p in self.points:
            bounds = _extend_bounds(p, bounds)
        return bounds

    def move_start_point(self, to: Vector2) -> None:
        self.points[0] = to

    def move_end_point(self, to: Vector2) -> None:
        self.points[1] = to

    def split_in_thirds(self):
        p0, p1 = self.points
        a, b = self.point(1 / 3), self.point(2 / 3)
        return (
            LinearSegment(p0, a, self.color),
            LinearSegment(a, b, self.color),
            LinearSegment(b, p1, self.color),
        )


class QuadraticSegment(EdgeSegment):
    """A quadratic Bezier curve."""

    def __init__(
        self, p0: Vector2, p1: Vector2, p2: Vector2, color: EdgeColor = EdgeColor.WHITE
    ) -> None:
        super().__init__(color)
        if p1 == p0 or p1 == p2:
            p1 = 0.5 * (p0 + p2)
        self.points = [p0, p1, p2]

    def point(self, param: float) -> Vector2:
        p0, p1, p2 = self.points
        return mix(mix(p0, p1, param), mix(p1, p2, param), param)

    def direction(self, param: float) -> Vector2:
        p0, p1, p2 = self.points
        tangent = mix(p1 - p0, p2 - p1, param)
        if not tangent:
            return p2 - p0
        return tangent

    def direction_change(self, param: float) -> Vector2:
        p0, p1, p2 = self.points
        return (p2 - p1) - (p1 - p0)

    def length(self) -> float:
        p0, p1, p2 = self.points
        ab = p1 - p0
        br = p2 - p1 - ab
        abab = ab.dot(ab)
        abbr = ab.dot(br)
        brbr = br.dot(br)
        ab_len = math.sqrt(abab)
        if brbr == 0:
            # The control point sits exactly midway: the curve is a straight line.
            return 2 * ab_len
        br_len = math.sqrt(brbr)
        crs = ab.cross(br)
        h = math.sqrt(abab + abbr + abbr + brbr)
        return (
            br_len * ((abbr + brbr) * h - abbr * ab_len)
            + crs * crs * math.log((br_len * h + abbr + brbr) / (br_len * ab_len + abbr))
        ) / (brbr * br_len)

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1, p2 = self.points
        qa = p0 - origin
        ab = p1 - p0
        br = p2 - p1 - ab
        roots = solve_cubic(
            br.dot(br), 3 * ab.dot(br), 2 * ab.dot(ab) + qa.dot(br), qa.dot(ab)
        ) or ()

        ep_dir = self.direction(0)
        min_distance = _non_zero_sign(ep_dir.cross(qa)) * qa.length()
        param = -qa.dot(ep_dir) / ep_dir.dot(ep_dir)
        ep_dir = self.direction(1)
        distance = (p2 - origin).length()
        if distance < abs(min_distance):
            min_distance = _non_zero_sign(ep_dir.cross(p2 - origin)) * distance
            param = (origin - p1).dot(ep_dir) / ep_dir.dot(ep_dir)
        for t in roots:
            if 0 < t < 1:
                qe = qa + 2 * t * ab + t * t * br
                distance = qe.length()
                if distance <= abs(min_distance):
                    min_distance = _non_zero_sign((ab + t * br).cross(qe)) * distance
                    param = t

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            dot = abs(self.direction(0).normalize().dot(qa.normalize()))
        else:
            dot = abs(self.direction(1).normalize().dot((p2 - origin).normalize()))
        return SignedDistance(min_distance, dot), param

    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        p0, p1, p2 = self.points
        hits: list[tuple[float, int]] = []
        next_dy = 1 if y > p0.y else -1
        pending_x = p0.x
        if p0.y == y:
            if p0.y < p1.y or (p0.y == p1.y and p0.y < p2.y):
                hits.append((pending_x, 1))
            else:
                next_dy = 1
        ab = p1 - p0
        br = p2 - p1 - ab
        roots = sorted(solve_quadratic(br.y, 2 * ab.y, p0.y - y) or ())
        for t in roots:
            if len(hits) >= 2:
                break
            if 0 <= t <= 1:
                pending_x = p0.x + 2 * t * ab.x + t * t * br.x
                if next_dy * (ab.y + t * br.y) >= 0:
                    hits.append((pending_x, next_dy))
                    next_dy = -next_dy
        if p2.y == y:
            if next_dy > 0 and hits:
                pending_x, _ = hits.pop()
                next_dy = -1
            if (p2.y < p1.y or (p2.y == p1.y and p2.y < p0.y)) and len(hits) < 2:
                pending_x = p2.x
                if next_dy < 0:
                    hits.append((pending_x, -1))
                    next_dy = 1
        if next_dy != (1 if y >= p2.y else -1):
            if hits:
                hits.pop()
            else:
                if abs(p2.y - y) < abs(p0.y - y):
                    pending_x = p2.x
                hits.append((pending_x, next_dy))
        return hits

    def bound(self, left, bottom, right, top):
        p0, p1, p2 = self.points
        bounds = _extend_bounds(p2, _extend_bounds(p0, (left, bottom, right, top)))
        bot = (p1 - p0) - (p2 - p1)
        if bot.x:
            param = (p1.x - p0.x) / bot.x
            if 0 < param < 1:
                bounds = _extend_bounds(self.point(param), bounds)
        if bot.y:
            param = (p1.y - p0.y) / bot.y
            if 0 < param < 1:
                bounds = _extend_bounds(self.point(param), bounds)
        return bounds

    def move_start_point(self, to: Vector2) -> None:
        p0, p1, p2 = self.points
        orig_start_dir = p0 - p1
        denominator = (p0 - p1).cross(p2 - p1)
        if denominator:
            p1 = p1 + (p0 - p1).cross(to - p0) / denominator * (p2 - p1)
        if orig_start_dir.dot(to - p1) < 0:
            p1 = self.points[1]
        self.points = [to, p1, p2]

    def move_end_point(self, to: Vector2) -> None:
        p0, p1, p2 = self.points
        orig_end_dir = p2 - p1
        denominator = (p2 - p1).cross(p0 - p1)
        if denominator:
            p1 = p1 + (p2 - p1).cross(to - p2) / denominator * (p0 - p1)
        if orig_end_dir.dot(to - p1) < 0:
            p1 = self.points[1]
        self.points = [p0, p1, to]

    def split_in_thirds(self):
        p0, p1, p2 = self.points
        a, b = self.point(1 / 3), self.point(2 / 3)
        return (
            QuadraticSegment(p0, mix(p0, p1, 1 / 3), a, self.color),
            QuadraticSegment(
                a, mix(mix(p0, p1, 5 / 9), mix(p1, p2, 4 / 9), 0.5), b, self.color
            ),
            QuadraticSegment(b, mix(p1, p2, 2 / 3), p2, self.color),
        )

    def convert_to_cubic(self) -> CubicSegment:
        """An equivalent cubic curve."""
        p0, p1, p2 = self.points
        return CubicSegment(p0, mix(p0, p1, 2 / 3), mix(p1, p2, 1 / 3), p2, self.color)


class CubicSegment(EdgeSegment):
    """A cubic Bezier curve."""

    def __init__(
        self,
        p0: Vector2,
        p1: Vector2,
        p2: Vector2,
        p3: Vector2,
        color: EdgeColor = EdgeColor.WHITE,
    ) -> None:
        super().__init__(color)
        if (p1 == p0 or p1 == p3) and (p2 == p0 or p2 == p3):
            p1 = mix(p0, p3, 1 / 3)
            p2 = mix(p0, p3, 2 / 3)
        self.points = [p0, p1, p2, p3]

    def point(self, param: float) -> Vector2:
        p0, p1, p2, p3 = self.points
        p12 = mix(p1, p2, param)
        return mix(
            mix(mix(p0, p1, param), p12, param),
            mix(p12, mix(p2, p3, param), param),
            param,
        )

    def direction(self, param: float) -> Vector2:
        p0, p1, p2, p3 = self.points
        tangent = mix(
            mix(p1 - p0, p2 - p1, param), mix(p2 - p1, p3 - p2, param), param
        )
        if not tangent:
            if param == 0:
                return p2 - p0
            if param == 1:
                return p3 - p1
        return tangent

    def direction_change(self, param: float) -> Vector2:
        p0, p1, p2, p3 = self.points
        return mix((p2 - p1) - (p1 - p0), (p3 - p2) - (p2 - p1), param)

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1, p2, p3 = self.points
        qa = p0 - origin
        ab = p1 - p0
        br = p2 - p1 - ab
        as_ = (p3 - p2) - (p2 - p1) - br

        ep_dir = self.direction(0)
        min_distance = _non_zero_sign(ep_dir.cross(qa)) * qa.length()
        param = -qa.dot(ep_dir) / ep_dir.dot(ep_dir)
        ep_dir = self.direction(1)
        distance = (p3 - origin).length()
        if distance < abs(min_distance):
            min_distance = _non_zero_sign(ep_dir.cross(p3 - origin)) * distance
            param = (ep_dir - (p3 - origin)).dot(ep_dir) / ep_dir.dot(ep_dir)

        for start in range(CUBIC_SEARCH_STARTS + 1):
            t = start / CUBIC_SEARCH_STARTS
            qe = qa + 3 * t * ab + 3 * t * t * br + t * t * t * as_
            for _ in range(CUBIC_SEARCH_STEPS):
                d1 = 3 * ab + 6 * t * br + 3 * t * t * as_
                d2 = 6 * br + 6 * t * as_
                denominator = d1.dot(d1) + qe.dot(d2)
                if denominator == 0:
                    break
                t -= qe.dot(d1) / denominator
                if t <= 0 or t >= 1:
                    break
                qe = qa + 3 * t * ab + 3 * t * t * br + t * t * t * as_
                distance = qe.length()
                if distance < abs(min_distance):
                    min_distance = _non_zero_sign(d1.cross(qe)) * distance
                    param = t

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            dot = abs(self.direction(0).normalize().dot(qa.normalize()))
        else:
            dot = abs(self.direction(1).normalize().dot((p3 - origin).normalize()))
        return SignedDistance(min_distance, dot), param

    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        p0, p1, p2, p3 = self.points
        hits: list[tuple[float, int]] = []
        next_dy = 1 if y > p0.y else -1
        pending_x = p0.x
        if p0.y == y:
            if p0.y < p1.y or (
                p0.y == p1.y and (p0.y < p2.y or (p0.y == p2.y and p0.y < p3.y))
            ):
                hits.append((pending_x, 1))
            else:
                next_dy = 1
        ab = p1 - p0
        br = p2 - p1 - ab
        as_ = (p3 - p2) - (p2 - p1) - br
        roots = sorted(solve_cubic(as_.y, 3 * br.y, 3 * ab.y, p0.y - y) or ())
        for t in roots:
            if len(hits) >= 3:
                break
            if 0 <= t <= 1:
                pending_x = p0.x + 3 * t * ab.x + 3 * t * t * br.x + t * t * t * as_.x
                if next_dy * (ab.y + 2 * t * br.y + t * t * as_.y) >= 0:
                    hits.append((pending_x, next_dy))
                    next_dy = -next_dy
        if p3.y == y:
            if next_dy > 0 and hits:
                pending_x, _ = hits.pop()
                next_dy = -1
            if (
                p3.y < p2.y
                or (p3.y == p2.y and (p3.y < p1.y or (p3.y == p1.y and p3.y < p0.y)))
            ) and len(hits) < 3:
                pending_x = p3.x
                if next_dy < 0:
                    hits.append((pending_x, -1))
                    next_dy = 1
        if next_dy != (1 if y >= p3.y else -1):
            if hits:
                hits.pop()
            else:
                if abs(p3.y - y) < abs(p0.y - y):
                    pending_x = p3.x
                hits.append((pending_x, next_dy))
        return hits

    def bound(self, left, bottom, right, top):
        p0, p1, p2, p3 = self.points
        bounds = _extend_bounds(p3, _extend_bounds(p0, (left, bottom, right, top)))
        a0 = p1 - p0
        a1 = 2 * (p2 - p1 - a0)
        a2 = p3 - 3 * p2 + 3 * p1 - p0
        for roots in (
            solve_quadratic(a2.x, a1.x, a0.x),
            solve_quadratic(a2.y, a1.y, a0.y),
        ):
            for param in roots or ():
                if 0 < param < 1:
                    bounds = _extend_bounds(self.point(param), bounds)
        return bounds

    def move_start_point(self, to: Vector2) -> None:
        self.points[1] = self.points[1] + (to - self.points[0])
        self.points[0] = to

    def move_end_point(self, to: Vector2) -> None:
        self.points[2] = self.points[2] + (to - self.points[3])
        self.points[3] = to

    def split_in_thirds(self):
        p0, p1, p2, p3 = self.points
        a, b = self.point(1 / 3), self.point(2 / 3)
        first = CubicSegment(
            p0,
            p0 if p0 == p1 else mix(p0, p1, 1 / 3),
            mix(mix(p0, p1, 1 / 3), mix(p1, p2, 1 / 3), 1 / 3),
            a,
            self.color,
        )
        second = CubicSegment(
            a,
            mix(
                mix(mix(p0, p1, 1 / 3), mix(p1, p2, 1 / 3), 1 / 3),
                mix(mix(p1, p2, 1 / 3), mix(p2, p3, 1 / 3), 1 / 3),
                2 / 3,
            ),
            mix(
                mix(mix(p0, p1, 2 / 3), mix(p1, p2, 2 / 3), 2 / 3),
                mix(mix(p1, p2, 2 / 3), mix(p2, p3, 2 / 3), 2 / 3),
                1 / 3,
            ),
            b,
            self.color,
        )
        third = CubicSegment(
            b,
            mix(mix(p1, p2, 2 / 3), mix(p2, p3, 2 / 3), 2 / 3),
            p3 if p2 == p3 else mix(p2, p3, 2 / 3),
            p3,
            self.color,
        )
        return first, second, third

    def deconverge(self, param: int, amount: float) -> None:
        """Nudge a control point so the curve no longer converges at an end."""
        direction = self.direction(param)
        normal = direction.orthonormal()
        h = (self.direction_change(param) - direction).dot(normal)
        offset = _sign(h) * math.sqrt(abs(h)) * normal
        if param == 0:
            self.points[1] = self.points[1] + amount * (direction + offset)
        elif param == 1:
            self.points[2] = self.points[2] - amount * (direction - offset)