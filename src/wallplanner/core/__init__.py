"""Core data models and topology for wall plans."""

from .model import (
    DetectedCycle,
    DetectionOptions,
    DetectionStats,
    GraphEdge,
    GraphNode,
    HalfEdge,
    JoinData,
    Line,
    Point,
    Room,
    RoomDetectionResult,
    RoomUserOverride,
    Wall,
    WallGraph,
)
from .topology import build_room_graph, build_wall_adjacency, build_wall_graph
from .validators import InvalidWall

__all__ = [
    "Point",
    "Line",
    "Wall",
    "JoinData",
    "GraphNode",
    "GraphEdge",
    "WallGraph",
    "HalfEdge",
    "DetectedCycle",
    "Room",
    "RoomUserOverride",
    "DetectionOptions",
    "DetectionStats",
    "RoomDetectionResult",
    "InvalidWall",
    "build_wall_graph",
    "build_wall_adjacency",
    "build_room_graph",
]
