"""Vector and line primitives.

All functions are total: degenerate input (zero-length vectors, parallel
lines) yields the zero vector or ``None`` rather than an exception, and the
caller decides what a degenerate result means.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from ..config import GEOMETRY_EPSILON, ZERO_LENGTH
from ..core.model import Point

ZERO = Point(0.0, 0.0)


def add(a: Point, b: Point) -> Point:
    return Point(a.x + b.x, a.y + b.y)


def subtract(a: Point, b: Point) -> Point:
    """Return ``a - b``."""
    return Point(a.x - b.x, a.y - b.y)


def scale(v: Point, s: float) -> Point:
    return Point(v.x * s, v.y * s)


def dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def cross(a: Point, b: Point) -> float:
    """Z-component of the 3D cross product of two planar vectors."""
    return a.x * b.y - a.y * b.x


def length(v: Point) -> float:
    return math.hypot(v.x, v.y)


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def normalize(v: Point) -> Point:
    """Scale ``v`` to unit length; vectors shorter than ``ZERO_LENGTH`` give zero."""
    norm = length(v)
    if norm < ZERO_LENGTH:
        return ZERO
    return Point(v.x / norm, v.y / norm)


def perpendicular(v: Point) -> Point:
    """Rotate ``v`` by 90 degrees counter-clockwise."""
    return Point(-v.y, v.x)


def direction(start: Point, end: Point) -> Point:
    """Unit vector from ``start`` to ``end`` (zero vector if they coincide)."""
    return normalize(subtract(end, start))


def is_finite(point: Point) -> bool:
    return math.isfinite(point.x) and math.isfinite(point.y)


def intersect_rays(
    a_point: Point,
    a_direction: Point,
    b_point: Point,
    b_direction: Point,
    epsilon: float = GEOMETRY_EPSILON,
) -> Optional[Tuple[Point, float, float]]:
    """Intersect two infinite lines given in point/direction form.

    Returns:
        ``(point, t, u)`` with ``point = a_point + t * a_direction
        = b_point + u * b_direction``, or None when the determinant is
        within ``epsilon`` of zero (parallel or coincident lines).
    """
    denom = cross(a_direction, b_direction)
    if abs(denom) <= epsilon:
        return None

    delta = subtract(b_point, a_point)
    t = cross(delta, b_direction) / denom
    u = cross(delta, a_direction) / denom
    return add(a_point, scale(a_direction, t)), t, u


def line_intersection(
    a1: Point, a2: Point, b1: Point, b2: Point, epsilon: float = GEOMETRY_EPSILON
) -> Optional[Point]:
    """Intersection of the infinite lines through (a1, a2) and (b1, b2)."""
    result = intersect_rays(a1, subtract(a2, a1), b1, subtract(b2, b1), epsilon)
    if result is None:
        return None
    return result[0]
