"""Core data models for the wall geometry engine.

This module defines the value types shared by the junction pipeline
(walls, faces, joins) and the room pipeline (graph, half-edges, cycles,
rooms). Coordinates are millimetres throughout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..config import (
    DEFAULT_MAX_ROOM_AREA,
    DEFAULT_MIN_ROOM_AREA,
    DEFAULT_SNAP_TOLERANCE,
    DEFAULT_WALL_MATERIAL,
)

JoinType = Literal["miter", "butt"]
Endpoint = Literal["start", "end"]
FaceSide = Literal["interior", "exterior"]


@dataclass(frozen=True)
class Point:
    """Represents a 2D point (or vector) in millimetres.

    Attributes:
        x: The x-coordinate of the point.
        y: The y-coordinate of the point.
    """

    x: float
    y: float


@dataclass(frozen=True)
class Line:
    """A straight segment between two points."""

    start: Point
    end: Point


@dataclass(frozen=True)
class Wall:
    """Represents a straight thick wall.

    Attributes:
        id: Unique identifier for the wall.
        start: Centerline start point.
        end: Centerline end point.
        thickness: Wall thickness in millimetres, strictly positive.
        material: Material key, opaque to the geometry engine.
        connected_walls: Adjacency hints set by the drawing tool. The engine
            never reads them; see ``topology.derive_connected_walls``.
        interior_line: Face on the +perpendicular side, derived.
        exterior_line: Face on the -perpendicular side, derived.
    """

    id: str
    start: Point
    end: Point
    thickness: float
    material: str = DEFAULT_WALL_MATERIAL
    connected_walls: tuple[str, ...] = ()
    interior_line: Line | None = None
    exterior_line: Line | None = None


@dataclass(frozen=True)
class JoinData:
    """Resolved meeting of one wall endpoint with one neighbouring wall.

    Attributes:
        wall_id: Wall owning the endpoint.
        other_wall_id: Neighbouring wall at the junction.
        endpoint: Which end of ``wall_id`` is joined.
        join_point: Shared centerline point.
        join_type: ``"miter"`` or ``"butt"``.
        angle: Angle in degrees (0-180) between the outward directions.
        interior_vertex: Resolved corner of the interior face.
        exterior_vertex: Resolved corner of the exterior face.
    """

    wall_id: str
    other_wall_id: str
    endpoint: Endpoint
    join_point: Point
    join_type: JoinType
    angle: float
    interior_vertex: Point
    exterior_vertex: Point


@dataclass(frozen=True)
class GraphNode:
    """A merged wall endpoint. ``id`` is the node's index in the graph arena."""

    id: int
    position: Point
    connected_edge_ids: tuple[str, ...]


@dataclass(frozen=True)
class GraphEdge:
    """A wall as a graph edge. ``angle`` is the start->end direction in radians."""

    id: str
    start_node_id: int
    end_node_id: int
    angle: float


@dataclass(frozen=True)
class WallGraph:
    """Planar graph of a wall set, stored as node and edge arenas."""

    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]


@dataclass
class HalfEdge:
    """Directed traversal unit of the half-edge structure.

    ``twin`` and ``next`` are indices into the half-edge list they belong to.
    ``visited`` is reset at the start of every face trace.
    """

    index: int
    edge_id: str
    from_node_id: int
    to_node_id: int
    angle: float
    twin: int
    next: int | None = None
    visited: bool = False


@dataclass(frozen=True)
class DetectedCycle:
    """A closed face trace.

    Attributes:
        edge_ids: Wall IDs in trace order.
        node_ids: Node IDs in trace order (the ``from`` node of each step).
        is_clockwise: True when ``signed_area`` is negative.
        signed_area: Shoelace area in mm^2, positive for counter-clockwise.
    """

    edge_ids: tuple[str, ...]
    node_ids: tuple[int, ...]
    is_clockwise: bool
    signed_area: float


@dataclass(frozen=True)
class RoomUserOverride:
    """User customisations that survive re-detection."""

    custom_name: str | None = None
    merged_room_ids: tuple[str, ...] = ()
    virtual_boundary: tuple[Point, ...] = ()


@dataclass(frozen=True)
class Room:
    """Represents a detected room.

    Attributes:
        id: Unique identifier, stable across re-detection.
        name: Human-readable name.
        boundary_wall_ids: Wall IDs of the bounding cycle in trace order.
        boundary_polygon: Interior polygon (walls inset by half thickness).
        area: Area in square metres, rounded to 0.01.
        perimeter: Perimeter in metres, rounded to 0.01.
        centroid: Label anchor point in millimetres.
        color: Fill colour.
        user_override: Preserved user customisations, if any.
        floor_level: Storey index.
        furniture_ids: Linked furniture references.
        hvac_equipment_ids: Linked HVAC equipment references.
    """

    id: str
    name: str
    boundary_wall_ids: tuple[str, ...]
    boundary_polygon: tuple[Point, ...]
    area: float
    perimeter: float
    centroid: Point
    color: str
    user_override: RoomUserOverride | None = None
    floor_level: int = 0
    furniture_ids: tuple[str, ...] = ()
    hvac_equipment_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class DetectionOptions:
    """Options for room detection.

    Attributes:
        snap_tolerance: Endpoints closer than this (mm) share a graph node.
        min_room_area: Smaller rooms (m^2) are discarded as slivers.
        max_room_area: Larger rooms (m^2) are discarded as artifacts.
        exclude_outer_faces: Drop faces that are not traced clockwise, i.e.
            the unbounded face of each connected wall group.
    """

    snap_tolerance: float = DEFAULT_SNAP_TOLERANCE
    min_room_area: float = DEFAULT_MIN_ROOM_AREA
    max_room_area: float = DEFAULT_MAX_ROOM_AREA
    exclude_outer_faces: bool = True


@dataclass(frozen=True)
class DetectionStats:
    total_nodes: int
    total_edges: int
    cycles_found: int
    rooms_created: int
    execution_time_ms: float


@dataclass(frozen=True)
class RoomDetectionResult:
    rooms: tuple[Room, ...]
    warnings: tuple[str, ...]
    stats: DetectionStats = field(
        default_factory=lambda: DetectionStats(0, 0, 0, 0, 0.0)
    )
