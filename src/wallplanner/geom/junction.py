"""Junction resolver: trim wall faces so that neighbours meet cleanly.

Given the full wall set, every wall's interior and exterior faces are rebuilt
from its centerline and then trimmed against the faces of the walls sharing
its endpoints. Two-wall junctions are mitered side by side; junctions of
three or more walls pick, for every face ray, the closest acceptable
intersection with another wall's face ray.

The resolver never raises. Whenever an intersection is missing, too far away
or produces a collapsed or stretched cap, the affected endpoint falls back to
its untrimmed offset, so the worst case is a visibly square corner.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import (
    GEOMETRY_EPSILON,
    JUNCTION_MAX_CAP_STRETCH_FACTOR,
    JUNCTION_MAX_TRIM_BY_LENGTH_FACTOR,
    JUNCTION_MAX_TRIM_BY_THICKNESS_FACTOR,
    JUNCTION_PARALLEL_EPSILON,
    NODE_MERGE_EPSILON,
)
from ..core.model import Endpoint, FaceSide, Line, Point, Wall
from ..core.topology import cluster_points
from .offset import compute_offset_lines
from .vector import direction, distance, intersect_rays, is_finite, midpoint

LOGGER = logging.getLogger(__name__)

SIDES: Tuple[FaceSide, FaceSide] = ("interior", "exterior")
ENDPOINTS: Tuple[Endpoint, Endpoint] = ("start", "end")

Incident = Tuple[int, Endpoint]
TrimKey = Tuple[int, Endpoint, FaceSide]


@dataclass(frozen=True)
class FaceRay:
    """A face leaving a junction node, pointing away from the node."""

    wall_index: int
    endpoint: Endpoint
    side: FaceSide
    origin: Point
    direction: Point


def max_junction_trim_distance(wall: Wall, epsilon: float = GEOMETRY_EPSILON) -> float:
    """Farthest a face endpoint of ``wall`` may move along its ray."""
    center_length = distance(wall.start, wall.end)
    by_thickness = wall.thickness * JUNCTION_MAX_TRIM_BY_THICKNESS_FACTOR
    by_length = center_length * JUNCTION_MAX_TRIM_BY_LENGTH_FACTOR
    return max(epsilon * 10.0, min(by_thickness, by_length))


def _face(faces: Tuple[Line, Line], side: FaceSide) -> Line:
    return faces[0] if side == "interior" else faces[1]


def _face_ray(wall_index: int, faces: Tuple[Line, Line], endpoint: Endpoint, side: FaceSide) -> FaceRay:
    line = _face(faces, side)
    if endpoint == "start":
        origin, towards = line.start, line.end
    else:
        origin, towards = line.end, line.start
    return FaceRay(wall_index, endpoint, side, origin, direction(origin, towards))


def _shared_nodes(walls: Sequence[Wall], tolerance: float) -> List[List[Incident]]:
    """Group wall endpoints into junction nodes with at least two incidents."""
    points: List[Point] = []
    for wall in walls:
        points.extend((wall.start, wall.end))

    nodes = []
    for group in cluster_points(points, tolerance):
        if len(group) < 2:
            continue
        nodes.append([(index // 2, ENDPOINTS[index % 2]) for index in group])
    return nodes


def _accepts(t: float, u: float, max_t: float, max_u: float, epsilon: float) -> bool:
    # Trim only in the forward ray direction from the shared node
    return -epsilon <= t <= max_t + epsilon and -epsilon <= u <= max_u + epsilon


def _resolve_pair(
    walls: Sequence[Wall],
    base: Sequence[Tuple[Line, Line]],
    first: Incident,
    second: Incident,
    epsilon: float,
    trimmed: Dict[TrimKey, Point],
) -> int:
    """Miter two walls side by side; returns the number of midpoint fallbacks."""
    (index_a, endpoint_a), (index_b, endpoint_b) = first, second
    max_a = max_junction_trim_distance(walls[index_a], epsilon)
    max_b = max_junction_trim_distance(walls[index_b], epsilon)
    fallbacks = 0

    for side in SIDES:
        ray_a = _face_ray(index_a, base[index_a], endpoint_a, side)
        ray_b = _face_ray(index_b, base[index_b], endpoint_b, side)
        hit = intersect_rays(
            ray_a.origin,
            ray_a.direction,
            ray_b.origin,
            ray_b.direction,
            max(epsilon, JUNCTION_PARALLEL_EPSILON),
        )

        if hit is not None and is_finite(hit[0]) and _accepts(hit[1], hit[2], max_a, max_b, epsilon):
            join_point = hit[0]
        else:
            # Near-collinear continuation: avoid miter spikes and close the seam
            join_point = midpoint(ray_a.origin, ray_b.origin)
            fallbacks += 1

        trimmed[(index_a, endpoint_a, side)] = join_point
        trimmed[(index_b, endpoint_b, side)] = join_point

    return fallbacks


def _resolve_pool(
    walls: Sequence[Wall],
    base: Sequence[Tuple[Line, Line]],
    incidents: Sequence[Incident],
    epsilon: float,
    trimmed: Dict[TrimKey, Point],
) -> None:
    """Trim every face ray at an N-way node against its best partner ray."""
    rays = [
        _face_ray(index, base[index], endpoint, side)
        for index, endpoint in incidents
        for side in SIDES
    ]
    parallel_epsilon = max(epsilon, JUNCTION_PARALLEL_EPSILON)

    for current in rays:
        current_max = max_junction_trim_distance(walls[current.wall_index], epsilon)
        best_penalty = math.inf
        best_distance = math.inf
        best_point: Optional[Point] = None

        for candidate in rays:
            if candidate.wall_index == current.wall_index:
                continue
            candidate_max = max_junction_trim_distance(walls[candidate.wall_index], epsilon)

            hit = intersect_rays(
                current.origin, current.direction, candidate.origin, candidate.direction, parallel_epsilon
            )
            if hit is None:
                continue
            point, t, u = hit
            if not _accepts(t, u, current_max, candidate_max, epsilon):
                continue

            penalty = 0 if candidate.side == current.side else 1
            along = abs(t)
            if penalty < best_penalty or (penalty == best_penalty and along + epsilon < best_distance):
                best_penalty = penalty
                best_distance = along
                best_point = point

        if best_point is not None and is_finite(best_point):
            trimmed[(current.wall_index, current.endpoint, current.side)] = best_point


def _validate_endpoints(
    wall: Wall,
    base: Tuple[Line, Line],
    points: Dict[FaceSide, List[Point]],
    epsilon: float,
) -> int:
    """Restore endpoints whose trimmed cap is unusable; returns restore count."""
    max_cap = wall.thickness * JUNCTION_MAX_CAP_STRETCH_FACTOR
    max_trim = max_junction_trim_distance(wall, epsilon)
    base_points = {
        "interior": [base[0].start, base[0].end],
        "exterior": [base[1].start, base[1].end],
    }
    restored = 0

    for slot in (0, 1):
        interior = points["interior"][slot]
        exterior = points["exterior"][slot]

        if is_finite(interior) and is_finite(exterior):
            cap = distance(interior, exterior)
            unusable = (
                cap <= epsilon
                or cap > max_cap
                or distance(interior, base_points["interior"][slot]) > max_trim + epsilon
                or distance(exterior, base_points["exterior"][slot]) > max_trim + epsilon
            )
        else:
            unusable = True

        if unusable:
            points["interior"][slot] = base_points["interior"][slot]
            points["exterior"][slot] = base_points["exterior"][slot]
            restored += 1

    interior_length = distance(points["interior"][0], points["interior"][1])
    exterior_length = distance(points["exterior"][0], points["exterior"][1])
    if interior_length <= epsilon or exterior_length <= epsilon:
        for side in SIDES:
            points[side] = list(base_points[side])
        restored += 1

    return restored


def rebuild_wall_faces(walls: Sequence[Wall], epsilon: float = GEOMETRY_EPSILON) -> List[Wall]:
    """Rebuild wall faces from centerlines and clean up every junction.

    Args:
        walls: The full wall set. Input walls are not modified.
        epsilon: Geometric tolerance for parametric checks.

    Returns:
        New Wall objects, in input order, with trimmed ``interior_line`` and
        ``exterior_line``. Centerlines and thickness are unchanged.
    """
    if not walls:
        return []

    base = [compute_offset_lines(wall.start, wall.end, wall.thickness) for wall in walls]
    trimmed: Dict[TrimKey, Point] = {}
    fallbacks = 0

    for incidents in _shared_nodes(walls, max(epsilon, NODE_MERGE_EPSILON)):
        if len(incidents) == 2 and incidents[0][0] != incidents[1][0]:
            fallbacks += _resolve_pair(walls, base, incidents[0], incidents[1], epsilon, trimmed)
        else:
            _resolve_pool(walls, base, incidents, epsilon, trimmed)

    rebuilt = []
    restored = 0
    for index, wall in enumerate(walls):
        interior, exterior = base[index]
        points: Dict[FaceSide, List[Point]] = {
            "interior": [interior.start, interior.end],
            "exterior": [exterior.start, exterior.end],
        }
        for slot, endpoint in enumerate(ENDPOINTS):
            for side in SIDES:
                point = trimmed.get((index, endpoint, side))
                if point is not None:
                    points[side][slot] = point

        restored += _validate_endpoints(wall, base[index], points, epsilon)
        rebuilt.append(
            replace(
                wall,
                interior_line=Line(points["interior"][0], points["interior"][1]),
                exterior_line=Line(points["exterior"][0], points["exterior"][1]),
            )
        )

    if fallbacks or restored:
        LOGGER.debug(
            "Junction cleanup: %d midpoint fallback(s), %d endpoint restore(s) over %d wall(s)",
            fallbacks,
            restored,
            len(walls),
        )
    return rebuilt
