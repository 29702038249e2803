"""Polygon measurements for room calculations.

Vertex lists are open rings (the first vertex is not repeated at the end).
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon

from ..core.model import Point

# Global parameters for algorithm sensitivity
DEGENERATE_AREA = 1e-4  # Centroids of polygons below this area (mm^2) use the vertex mean


def _coords(vertices: Sequence[Point]) -> tuple[np.ndarray, np.ndarray]:
    xs = np.fromiter((v.x for v in vertices), dtype=float, count=len(vertices))
    ys = np.fromiter((v.y for v in vertices), dtype=float, count=len(vertices))
    return xs, ys


def signed_area(vertices: Sequence[Point]) -> float:
    """Shoelace area; positive for counter-clockwise, negative for clockwise."""
    if len(vertices) < 3:
        return 0.0
    xs, ys = _coords(vertices)
    return float(np.dot(xs, np.roll(ys, -1)) - np.dot(np.roll(xs, -1), ys)) / 2.0


def polygon_area(vertices: Sequence[Point]) -> float:
    return abs(signed_area(vertices))


def polygon_perimeter(vertices: Sequence[Point]) -> float:
    """Length of the closed ring through ``vertices``."""
    if len(vertices) < 2:
        return 0.0
    xs, ys = _coords(vertices)
    return float(np.hypot(np.roll(xs, -1) - xs, np.roll(ys, -1) - ys).sum())


def vertex_mean(vertices: Sequence[Point]) -> Point:
    if not vertices:
        return Point(0.0, 0.0)
    xs, ys = _coords(vertices)
    return Point(float(xs.mean()), float(ys.mean()))


def polygon_centroid(vertices: Sequence[Point]) -> Point:
    """Area-weighted centroid, falling back to the vertex mean when degenerate."""
    if len(vertices) < 3:
        return vertex_mean(vertices)

    xs, ys = _coords(vertices)
    xn, yn = np.roll(xs, -1), np.roll(ys, -1)
    cross = xs * yn - xn * ys
    area = cross.sum() / 2.0
    if abs(area) < DEGENERATE_AREA:
        return vertex_mean(vertices)

    cx = float(((xs + xn) * cross).sum() / (6.0 * area))
    cy = float(((ys + yn) * cross).sum() / (6.0 * area))
    return Point(cx, cy)


def to_shapely(vertices: Sequence[Point]) -> Polygon | None:
    """Create a Shapely polygon, or None for fewer than 3 vertices."""
    if len(vertices) < 3:
        return None
    return Polygon([(v.x, v.y) for v in vertices])


def is_simple_polygon(vertices: Sequence[Point]) -> bool:
    """True if the ring is a valid (non self-intersecting) polygon."""
    polygon = to_shapely(vertices)
    return polygon is not None and polygon.is_valid


def point_in_polygon(point: Point, vertices: Sequence[Point]) -> bool:
    """Strict containment test (points on the boundary are outside)."""
    polygon = to_shapely(vertices)
    if polygon is None:
        return False
    if not polygon.is_valid:
        # Try to fix with buffer(0)
        polygon = polygon.buffer(0)
    return bool(polygon.contains(ShapelyPoint(point.x, point.y)))
