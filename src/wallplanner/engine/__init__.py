"""Engine module for room detection.

This module provides the half-edge face tracer, the room detector and the
stateful room manager built on top of them.
"""

from .detector import boundary_signature, compute_room_polygon, detect_rooms, merge_room_detections
from .halfedge import build_half_edges, find_all_cycles
from .manager import RoomManager, RoomUpdateEvent, walls_hash

__all__ = [
    "build_half_edges",
    "find_all_cycles",
    "compute_room_polygon",
    "detect_rooms",
    "merge_room_detections",
    "boundary_signature",
    "RoomManager",
    "RoomUpdateEvent",
    "walls_hash",
]
