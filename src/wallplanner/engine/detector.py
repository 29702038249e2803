"""Room detection from walls.

Walls are turned into a planar graph, every face of the graph is traced with
the half-edge structure, and each bounded face becomes a room whose polygon
is the face inset by half the thickness of its walls.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import defaultdict, deque
from dataclasses import replace
from typing import Deque, Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import (
    DEGENERATE_NORMAL,
    MM2_PER_M2,
    MM_PER_M,
    ROOM_COLORS,
    ROOM_NAME_PREFIX,
)
from ..core.model import (
    DetectedCycle,
    DetectionOptions,
    DetectionStats,
    Point,
    Room,
    RoomDetectionResult,
    Wall,
    WallGraph,
)
from ..core.topology import build_wall_graph, dangling_node_ids
from ..geom.polygon import (
    DEGENERATE_AREA,
    is_simple_polygon,
    polygon_area,
    polygon_centroid,
    polygon_perimeter,
)
from ..geom.vector import add, direction, length, perpendicular, scale
from .halfedge import build_half_edges, find_all_cycles

LOGGER = logging.getLogger(__name__)

SIGNATURE_SEPARATOR = "|"


def new_room_id() -> str:
    return f"room-{uuid.uuid4().hex[:12]}"


def room_color(index: int) -> str:
    """Palette colour for the ``index``-th room (0-based)."""
    return ROOM_COLORS[index % len(ROOM_COLORS)]


def compute_room_polygon(
    cycle: DetectedCycle, walls_by_id: Mapping[str, Wall], graph: WallGraph
) -> List[Point]:
    """Inset a traced face by half the thickness of its walls.

    Each vertex moves along the average of the two adjacent edges' left
    normals (taken along the traversal direction, scaled by half the wall
    thickness). Clockwise faces move to the right of the traversal, i.e.
    into the face.

    Args:
        cycle: A traced face.
        walls_by_id: Walls by ID, for thickness lookup.
        graph: Graph the cycle was traced on.

    Returns:
        One vertex per cycle node, in trace order.
    """
    sign = -1.0 if cycle.is_clockwise else 1.0
    count = len(cycle.node_ids)
    positions = [graph.nodes[node_id].position for node_id in cycle.node_ids]

    def edge_offset(step: int) -> Optional[Point]:
        wall = walls_by_id.get(cycle.edge_ids[step])
        if wall is None:
            return None
        normal = perpendicular(direction(positions[step], positions[(step + 1) % count]))
        return scale(normal, wall.thickness / 2.0)

    vertices = []
    for i in range(count):
        incoming = edge_offset((i - 1) % count)
        outgoing = edge_offset(i)
        if incoming is None or outgoing is None:
            vertices.append(positions[i])
            continue

        average = scale(add(incoming, outgoing), 0.5)
        if length(average) < DEGENERATE_NORMAL:
            vertices.append(positions[i])
        else:
            vertices.append(add(positions[i], scale(average, sign)))

    return vertices


def boundary_signature(wall_ids: Iterable[str]) -> str:
    """Order-independent key of a room's boundary walls."""
    return SIGNATURE_SEPARATOR.join(sorted(wall_ids))


def _empty_stats(wall_count: int, started: float) -> DetectionStats:
    return DetectionStats(
        total_nodes=0,
        total_edges=wall_count,
        cycles_found=0,
        rooms_created=0,
        execution_time_ms=(time.perf_counter() - started) * 1000.0,
    )


def detect_rooms(
    walls: Sequence[Wall], options: Optional[DetectionOptions] = None
) -> RoomDetectionResult:
    """Detect enclosed rooms in a wall set.

    Args:
        walls: Current walls.
        options: Detection parameters, defaults when omitted.

    Returns:
        RoomDetectionResult with rooms in creation order, human-readable
        warnings and run statistics. Degenerate input never raises.
    """
    options = options or DetectionOptions()
    started = time.perf_counter()

    if len(walls) < 3:
        warnings = ("Not enough walls to form a room (minimum 3)",) if walls else ()
        return RoomDetectionResult(rooms=(), warnings=warnings, stats=_empty_stats(len(walls), started))

    graph = build_wall_graph(walls, options.snap_tolerance)
    half_edges = build_half_edges(graph)
    cycles = find_all_cycles(graph, half_edges)
    walls_by_id = {wall.id: wall for wall in walls}

    warnings: List[str] = []
    rooms: List[Room] = []

    for cycle in cycles:
        # Outer faces are traced counter-clockwise, dead-end traces enclose nothing
        if options.exclude_outer_faces and cycle.signed_area > -DEGENERATE_AREA:
            continue

        polygon = compute_room_polygon(cycle, walls_by_id, graph)
        if len(polygon) < 3:
            warnings.append(f"Skipped face with {len(polygon)} vertices")
            continue

        area_mm2 = polygon_area(polygon)
        if area_mm2 <= DEGENERATE_AREA:
            warnings.append(
                f"Skipped degenerate face bounded by {', '.join(cycle.edge_ids)}"
            )
            continue

        area = area_mm2 / MM2_PER_M2
        if area < options.min_room_area or area > options.max_room_area:
            LOGGER.debug("Discarding face with area %.2f m^2 outside the room area range", area)
            continue

        if not is_simple_polygon(polygon):
            warnings.append(
                f"Room polygon bounded by {', '.join(cycle.edge_ids)} is self-intersecting"
            )

        index = len(rooms)
        rooms.append(
            Room(
                id=new_room_id(),
                name=f"{ROOM_NAME_PREFIX} {index + 1}",
                boundary_wall_ids=cycle.edge_ids,
                boundary_polygon=tuple(polygon),
                area=round(area, 2),
                perimeter=round(polygon_perimeter(polygon) / MM_PER_M, 2),
                centroid=polygon_centroid(polygon),
                color=room_color(index),
            )
        )

    dangling = dangling_node_ids(graph)
    if dangling:
        warnings.append(
            f"{len(dangling)} dangling wall endpoint(s) do not connect to another wall"
        )
    if not rooms:
        warnings.append("No enclosed rooms detected")

    stats = DetectionStats(
        total_nodes=len(graph.nodes),
        total_edges=len(graph.edges),
        cycles_found=len(cycles),
        rooms_created=len(rooms),
        execution_time_ms=(time.perf_counter() - started) * 1000.0,
    )
    LOGGER.debug(
        "Room detection: %d nodes, %d edges, %d cycles, %d rooms in %.2f ms",
        stats.total_nodes,
        stats.total_edges,
        stats.cycles_found,
        stats.rooms_created,
        stats.execution_time_ms,
    )
    return RoomDetectionResult(rooms=tuple(rooms), warnings=tuple(warnings), stats=stats)


def merge_room_detections(
    new_rooms: Sequence[Room], previous_rooms: Sequence[Room]
) -> List[Room]:
    """Carry identity from previous rooms over to newly detected ones.

    A new room whose boundary walls are exactly those of a previous room
    takes over that room's id, name, colour, overrides and linked
    furniture and equipment. Previous rooms with the same boundary are
    matched in order, each at most once.
    """
    buckets: Dict[str, Deque[Room]] = defaultdict(deque)
    for room in previous_rooms:
        buckets[boundary_signature(room.boundary_wall_ids)].append(room)

    merged = []
    for room in new_rooms:
        bucket = buckets.get(boundary_signature(room.boundary_wall_ids))
        if not bucket:
            merged.append(room)
            continue

        previous = bucket.popleft()
        override = previous.user_override
        name = override.custom_name if override and override.custom_name else previous.name
        merged.append(
            replace(
                room,
                id=previous.id,
                name=name,
                color=previous.color,
                user_override=override,
                floor_level=previous.floor_level,
                furniture_ids=previous.furniture_ids,
                hvac_equipment_ids=previous.hvac_equipment_ids,
            )
        )

    return merged
