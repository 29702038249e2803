"""Validation of wall input.

Geometry code never raises on degenerate geometry; it falls back to a well
defined value instead. The checks here guard wall *construction* (the
factory and the file loader), where bad data is a caller error.
"""

from __future__ import annotations

import math
from typing import Iterable, List

from .model import Point, Wall


class InvalidWall(ValueError):
    """Raised when a wall cannot be constructed from the given data."""

    pass


def _is_finite_point(point: Point) -> bool:
    return math.isfinite(point.x) and math.isfinite(point.y)


def validate_wall(wall: Wall) -> Wall:
    """Check a single wall's invariants.

    Args:
        wall: The wall to validate.

    Returns:
        The same wall, for chaining.

    Raises:
        InvalidWall: If the id is empty, the thickness is not strictly
            positive, or a centerline coordinate is not finite.
    """
    if not wall.id:
        raise InvalidWall("Wall id must be a non-empty string")

    if not math.isfinite(wall.thickness) or wall.thickness <= 0:
        raise InvalidWall(
            f"Wall '{wall.id}' has invalid thickness {wall.thickness!r} (must be > 0)"
        )

    if not (_is_finite_point(wall.start) and _is_finite_point(wall.end)):
        raise InvalidWall(f"Wall '{wall.id}' has non-finite centerline coordinates")

    return wall


def validate_walls(walls: Iterable[Wall]) -> List[Wall]:
    """Validate every wall and reject duplicate IDs.

    Raises:
        InvalidWall: On the first invalid or duplicated wall.
    """
    seen = set()
    checked = []
    for wall in walls:
        validate_wall(wall)
        if wall.id in seen:
            raise InvalidWall(f"Duplicate wall id '{wall.id}'")
        seen.add(wall.id)
        checked.append(wall)
    return checked
