"""Wall Planner - wall junction cleanup and room detection for floor plans."""

__version__ = "0.1.0"

from .core.model import DetectionOptions, Point, Room, RoomDetectionResult, Wall
from .core.validators import InvalidWall
from .engine.detector import detect_rooms, merge_room_detections
from .engine.manager import RoomManager
from .geom.junction import rebuild_wall_faces
from .geom.offset import create_wall

__all__ = [
    "Point",
    "Wall",
    "Room",
    "DetectionOptions",
    "RoomDetectionResult",
    "InvalidWall",
    "create_wall",
    "rebuild_wall_faces",
    "detect_rooms",
    "merge_room_detections",
    "RoomManager",
]
