"""Offset engine: wall centerline + thickness -> parallel faces."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Tuple

from ..config import DEFAULT_WALL_MATERIAL, DEFAULT_WALL_THICKNESS
from ..core.model import Line, Point, Wall
from ..core.validators import validate_wall
from .vector import add, direction, perpendicular, scale


def compute_offset_lines(start: Point, end: Point, thickness: float) -> Tuple[Line, Line]:
    """Compute the interior and exterior faces of a centerline.

    The interior face lies on the +perpendicular (counter-clockwise) side,
    the exterior face on the other side, each ``thickness / 2`` away. Which
    physical side of the building that is belongs to the caller.

    Args:
        start: Centerline start.
        end: Centerline end.
        thickness: Wall thickness in millimetres.

    Returns:
        Tuple of (interior_line, exterior_line). A zero-length centerline
        yields both faces collapsed onto the centerline.
    """
    perp = perpendicular(direction(start, end))
    half = thickness / 2.0

    interior_line = Line(add(start, scale(perp, half)), add(end, scale(perp, half)))
    exterior_line = Line(add(start, scale(perp, -half)), add(end, scale(perp, -half)))
    return interior_line, exterior_line


def with_base_faces(wall: Wall) -> Wall:
    """Return a copy of ``wall`` carrying its untrimmed offset faces."""
    interior_line, exterior_line = compute_offset_lines(wall.start, wall.end, wall.thickness)
    return replace(wall, interior_line=interior_line, exterior_line=exterior_line)


def create_wall(
    wall_id: str,
    start: Point,
    end: Point,
    thickness: float = DEFAULT_WALL_THICKNESS,
    material: str = DEFAULT_WALL_MATERIAL,
    connected_walls: Iterable[str] = (),
) -> Wall:
    """Create a validated wall with base faces.

    Raises:
        InvalidWall: If the thickness or coordinates are invalid.
    """
    wall = Wall(
        id=wall_id,
        start=start,
        end=end,
        thickness=float(thickness),
        material=material,
        connected_walls=tuple(connected_walls),
    )
    return with_base_faces(validate_wall(wall))
