"""Closed-form solvers for quadratic and cubic polynomial equations."""

from __future__ import annotations

import math

__all__ = ["solve_quadratic", "solve_cubic"]


def solve_quadratic(a: float, b: float, c: float) -> tuple[float, ...] | None:
    """Solve ``a*x**2 + b*x + c = 0``.

    Returns a tuple of the real roots (possibly empty), or ``None`` when
    every real number is a solution (``0 == 0``).
    """
    # A vanishing (or negligible) leading coefficient makes the equation linear.
    if a == 0 or abs(b) > 1e12 * abs(a):
        if b == 0:
            return None if c == 0 else ()
        return (-c / b,)
    discriminant = b * b - 4 * a * c
    if discriminant > 0:
        root = math.sqrt(discriminant)
        return ((-b + root) / (2 * a), (-b - root) / (2 * a))
    if discriminant == 0:
        return (-b / (2 * a),)
    return ()


def _solve_cubic_normed(a: float, b: float, c: float) -> tuple[float, ...]:
    """Solve ``x**3 + a*x**2 + b*x + c = 0``."""
    a2 = a * a
    q = (a2 - 3 * b) / 9
    r = (a * (2 * a2 - 9 * b) + 27 * c) / 54
    r2 = r * r
    q3 = q * q * q
    a /= 3
    if r2 < q3:
        t = max(-1.0, min(1.0, r / math.sqrt(q3)))
        t = math.acos(t)
        q = -2 * math.sqrt(q)
        return (
            q * math.cos(t / 3) - a,
            q * math.cos((t + 2 * math.pi) / 3) - a,
            q * math.cos((t - 2 * math.pi) / 3) - a,
        )
    u = (1 if r < 0 else -1) * (abs(r) + math.sqrt(r2 - q3)) ** (1 / 3)
    v = 0.0 if u == 0 else q / u
    first = (u + v) - a
    if u == v or abs(u - v) < 1e-12 * abs(u + v):
        return (first, -0.5 * (u + v) - a)
    return (first,)


def solve_cubic(a: float, b: float, c: float, d: float) -> tuple[float, ...] | None:
    """Solve ``a*x**3 + b*x**2 + c*x + d = 0``.

    Returns a tuple of real roots, or ``None`` when the equation
    degenerates to ``0 == 0``.
    """
    if a != 0:
        bn = b / a
        # Beyond this ratio the error is smaller when a is treated as zero.
        if abs(bn) < 1e6:
            return _solve_cubic_normed(bn, c / a, d / a)
    return solve_quadratic(b, c, d)