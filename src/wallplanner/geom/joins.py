"""Join data for wall rendering.

For every wall endpoint that meets another wall this module reports the join
type, the angle between the walls and the resolved face corner points:

* miter joins intersect both walls' same-side face lines;
* butt joins clip the branch wall's faces against the host face line that
  faces the branch. Sharp endpoint-to-endpoint junctions and T-junctions
  (an endpoint landing on another wall's centerline) are butted.
"""

from __future__ import annotations

import math
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import GEOMETRY_EPSILON, MITER_MIN_ANGLE, NODE_MERGE_EPSILON
from ..core.model import Endpoint, JoinData, JoinType, Line, Point, Wall
from ..core.topology import cluster_points
from .junction import max_junction_trim_distance
from .offset import compute_offset_lines
from .vector import (
    cross,
    direction,
    distance,
    dot,
    intersect_rays,
    line_intersection,
    subtract,
)


def wall_angle(wall: Wall) -> float:
    """Angle of the wall centerline in degrees (start -> end)."""
    return math.degrees(math.atan2(wall.end.y - wall.start.y, wall.end.x - wall.start.x))


def _nearest_endpoint(wall: Wall, point: Point) -> Endpoint:
    return "start" if distance(wall.start, point) <= distance(wall.end, point) else "end"


def _outward_direction(wall: Wall, shared_point: Point) -> Point:
    """Direction along the wall pointing away from ``shared_point``."""
    if _nearest_endpoint(wall, shared_point) == "start":
        return direction(wall.start, wall.end)
    return direction(wall.end, wall.start)


def angle_between_walls(wall1: Wall, wall2: Wall, shared_point: Point) -> float:
    """Angle in degrees (0-180) between the walls' outward directions."""
    d1 = _outward_direction(wall1, shared_point)
    d2 = _outward_direction(wall2, shared_point)
    cosine = max(-1.0, min(1.0, dot(d1, d2)))
    return math.degrees(math.acos(cosine))


def signed_angle_between(dir1: Point, dir2: Point) -> float:
    """Signed angle in degrees (-180 to 180) turning from ``dir1`` to ``dir2``."""
    return math.degrees(math.atan2(cross(dir1, dir2), dot(dir1, dir2)))


def determine_join_type(angle_degrees: float) -> JoinType:
    """Miter above ``MITER_MIN_ANGLE`` degrees, butt at or below it."""
    return "miter" if angle_degrees > MITER_MIN_ANGLE else "butt"


def _faces(wall: Wall) -> Tuple[Line, Line]:
    if wall.interior_line is not None and wall.exterior_line is not None:
        return wall.interior_line, wall.exterior_line
    return compute_offset_lines(wall.start, wall.end, wall.thickness)


def _face_end(line: Line, endpoint: Endpoint) -> Tuple[Point, Point]:
    """Face corner at ``endpoint`` and the face direction pointing away from it."""
    if endpoint == "start":
        return line.start, direction(line.start, line.end)
    return line.end, direction(line.end, line.start)


def compute_miter_join(wall1: Wall, wall2: Wall, join_point: Point) -> Tuple[Point, Point]:
    """Miter vertices for two walls meeting at ``join_point``.

    Returns:
        Tuple of (interior_vertex, exterior_vertex) of ``wall1``: the
        intersections of the two walls' interior (resp. exterior) face lines.
        Parallel faces resolve to the join point.
    """
    end1 = _nearest_endpoint(wall1, join_point)
    end2 = _nearest_endpoint(wall2, join_point)
    faces1 = _faces(wall1)
    faces2 = _faces(wall2)

    vertices = []
    for face1, face2 in zip(faces1, faces2):
        origin1, dir1 = _face_end(face1, end1)
        origin2, dir2 = _face_end(face2, end2)
        hit = line_intersection(
            origin1,
            Point(origin1.x + dir1.x, origin1.y + dir1.y),
            origin2,
            Point(origin2.x + dir2.x, origin2.y + dir2.y),
        )
        vertices.append(hit if hit is not None else join_point)

    return vertices[0], vertices[1]


def _distance_to_line(point: Point, line: Line) -> float:
    return abs(cross(subtract(point, line.start), direction(line.start, line.end)))


def compute_butt_join(branch: Wall, host: Wall, join_point: Point) -> Tuple[Point, Point]:
    """Clip the branch wall's faces against the host face line facing it.

    The host face is the one nearer to the branch's far end. A branch face
    that is parallel to the host face, or would move further than the trim
    bound, keeps its untrimmed corner.

    Returns:
        Tuple of (interior_vertex, exterior_vertex) of ``branch``.
    """
    endpoint = _nearest_endpoint(branch, join_point)
    far_end = branch.end if endpoint == "start" else branch.start
    host_interior, host_exterior = _faces(host)
    if _distance_to_line(far_end, host_interior) <= _distance_to_line(far_end, host_exterior):
        host_face = host_interior
    else:
        host_face = host_exterior
    host_direction = direction(host_face.start, host_face.end)
    max_trim = max_junction_trim_distance(branch)

    vertices = []
    for face in _faces(branch):
        origin, away = _face_end(face, endpoint)
        hit = intersect_rays(origin, away, host_face.start, host_direction, GEOMETRY_EPSILON)
        if hit is not None and abs(hit[1]) <= max_trim:
            vertices.append(hit[0])
        else:
            vertices.append(origin)

    return vertices[0], vertices[1]


def _make_join(wall: Wall, other: Wall, join_point: Point, join_type: JoinType, angle: float) -> JoinData:
    if join_type == "miter":
        interior_vertex, exterior_vertex = compute_miter_join(wall, other, join_point)
    else:
        interior_vertex, exterior_vertex = compute_butt_join(wall, other, join_point)
    return JoinData(
        wall_id=wall.id,
        other_wall_id=other.id,
        endpoint=_nearest_endpoint(wall, join_point),
        join_point=join_point,
        join_type=join_type,
        angle=angle,
        interior_vertex=interior_vertex,
        exterior_vertex=exterior_vertex,
    )


def _t_junction_host(
    point: Point, walls: Sequence[Wall], skip: Iterable[int], tolerance: float
) -> Optional[int]:
    """Index of a wall whose centerline interior passes through ``point``."""
    skipped = set(skip)
    for index, host in enumerate(walls):
        if index in skipped:
            continue
        length = distance(host.start, host.end)
        if length <= GEOMETRY_EPSILON:
            continue
        along = dot(subtract(point, host.start), direction(host.start, host.end))
        if along <= tolerance or along >= length - tolerance:
            continue
        if _distance_to_line(point, Line(host.start, host.end)) <= tolerance:
            return index
    return None


def compute_joins(
    walls: Sequence[Wall], tolerance: float = NODE_MERGE_EPSILON
) -> Dict[str, List[JoinData]]:
    """Compute join data for every wall endpoint that meets another wall.

    Args:
        walls: The full wall set. Faces are taken from the walls when
            present (e.g. after junction cleanup), else from the centerline.
        tolerance: Endpoint merge and T-junction distance in millimetres.

    Returns:
        Mapping wall_id -> list of JoinData, one per endpoint per neighbour.
    """
    joins: Dict[str, List[JoinData]] = {wall.id: [] for wall in walls}
    points: List[Point] = []
    for wall in walls:
        points.extend((wall.start, wall.end))

    joined_endpoints = set()
    for group in cluster_points(points, tolerance):
        wall_indices = sorted({index // 2 for index in group})
        if len(wall_indices) < 2:
            continue
        joined_endpoints.update(group)

        for i, j in combinations(wall_indices, 2):
            for wall, other in ((walls[i], walls[j]), (walls[j], walls[i])):
                join_point = points[group[0]]
                angle = angle_between_walls(wall, other, join_point)
                joins[wall.id].append(
                    _make_join(wall, other, join_point, determine_join_type(angle), angle)
                )

    for index, point in enumerate(points):
        if index in joined_endpoints:
            continue
        wall_index = index // 2
        host_index = _t_junction_host(point, walls, (wall_index,), tolerance)
        if host_index is None:
            continue

        branch, host = walls[wall_index], walls[host_index]
        crossing = math.degrees(
            math.acos(min(1.0, abs(dot(_outward_direction(branch, point), direction(host.start, host.end)))))
        )
        joins[branch.id].append(_make_join(branch, host, point, "butt", crossing))

    return joins


def compute_wall_polygon(wall: Wall, joins: Optional[Sequence[JoinData]] = None) -> List[Point]:
    """Wall outline in rendering order.

    Returns:
        ``[interior_start, interior_end, exterior_end, exterior_start]``,
        with corners replaced by the vertices of joins owned by this wall.
    """
    interior, exterior = _faces(wall)
    corners = {
        "start": [interior.start, exterior.start],
        "end": [interior.end, exterior.end],
    }
    for join in joins or ():
        if join.wall_id != wall.id:
            continue
        corners[join.endpoint] = [join.interior_vertex, join.exterior_vertex]

    return [corners["start"][0], corners["end"][0], corners["end"][1], corners["start"][1]]
