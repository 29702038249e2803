"""Parser for wall plan JSON files.

This module loads wall data from JSON files and serializes detection
results back into plain dictionaries for the command line.

Accepted layouts::

    {"walls": [{"id": "w1", "start": [0, 0], "end": [4000, 0], "thickness": 150}, ...]}
    {"walls": {"w1": {"path": "M 0,0 L 4000,0", "material": "brick"}, ...}}
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, List

from ..config import DEFAULT_WALL_MATERIAL, DEFAULT_WALL_THICKNESS
from ..core.model import Point, Room, RoomDetectionResult, Wall
from ..core.validators import InvalidWall, validate_walls
from ..geom.offset import create_wall


def _parse_svg_path(svg_path: str) -> tuple[Point, Point]:
    """Parse SVG path string to extract start and end points.

    Args:
        svg_path: SVG path string in format "M x1,y1 L x2,y2".

    Returns:
        Tuple of (start_point, end_point).

    Raises:
        ValueError: If the SVG path format is invalid.
    """
    # Pattern to match "M x1,y1 L x2,y2"
    pattern = r"M\s*([0-9.eE+-]+)[,\s]+([0-9.eE+-]+)\s*L\s*([0-9.eE+-]+)[,\s]+([0-9.eE+-]+)"
    match = re.match(pattern, svg_path.strip())

    if not match:
        raise ValueError(f"Invalid SVG path format: {svg_path}")

    x1, y1, x2, y2 = map(float, match.groups())
    return Point(x1, y1), Point(x2, y2)


def _parse_point(value: Any) -> Point:
    """Parse ``[x, y]`` or ``{"x": x, "y": y}``."""
    if isinstance(value, dict):
        return Point(float(value["x"]), float(value["y"]))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return Point(float(value[0]), float(value[1]))
    raise ValueError(f"Invalid point: {value!r}")


def _parse_wall(wall_id: str, wall_data: Dict[str, Any]) -> Wall:
    if "path" in wall_data:
        start, end = _parse_svg_path(wall_data["path"])
    else:
        start = _parse_point(wall_data["start"])
        end = _parse_point(wall_data["end"])

    return create_wall(
        wall_id,
        start,
        end,
        thickness=float(wall_data.get("thickness", DEFAULT_WALL_THICKNESS)),
        material=wall_data.get("material", DEFAULT_WALL_MATERIAL),
        connected_walls=wall_data.get("connected_walls", ()),
    )


def load_walls(path: str) -> List[Wall]:
    """Load walls from a JSON file.

    Args:
        path: Path to the JSON file containing wall data.

    Returns:
        Walls in file order, with base faces.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON data is invalid or malformed. Invalid
            thickness, coordinates or duplicate IDs raise InvalidWall.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    records = data.get("walls", []) if isinstance(data, dict) else data
    if isinstance(records, dict):
        items = [(str(wall_id), wall_data) for wall_id, wall_data in records.items()]
    elif isinstance(records, list):
        items = [
            (str(wall_data.get("id", "")) if isinstance(wall_data, dict) else f"#{position}", wall_data)
            for position, wall_data in enumerate(records)
        ]
    else:
        raise ValueError(f"Expected a list or mapping of walls in {path}")

    walls = []
    for wall_id, wall_data in items:
        if not isinstance(wall_data, dict):
            raise ValueError(f"Invalid wall data for {wall_id}: expected an object")
        try:
            walls.append(_parse_wall(wall_id, wall_data))
        except InvalidWall:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid wall data for {wall_id}: {e}") from e

    return validate_walls(walls)


def _point_to_list(point: Point) -> List[float]:
    return [point.x, point.y]


def room_to_dict(room: Room) -> Dict[str, Any]:
    """Convert a room to a JSON-ready dictionary."""
    data = {
        "id": room.id,
        "name": room.name,
        "boundary_wall_ids": list(room.boundary_wall_ids),
        "boundary_polygon": [_point_to_list(p) for p in room.boundary_polygon],
        "area": room.area,
        "perimeter": room.perimeter,
        "centroid": _point_to_list(room.centroid),
        "color": room.color,
        "floor_level": room.floor_level,
    }
    if room.user_override is not None:
        data["user_override"] = {
            "custom_name": room.user_override.custom_name,
            "merged_room_ids": list(room.user_override.merged_room_ids),
        }
    return data


def detection_result_to_dict(result: RoomDetectionResult) -> Dict[str, Any]:
    """Convert a detection result to a JSON-ready dictionary."""
    stats = result.stats
    return {
        "rooms": [room_to_dict(room) for room in result.rooms],
        "warnings": list(result.warnings),
        "stats": {
            "total_nodes": stats.total_nodes,
            "total_edges": stats.total_edges,
            "cycles_found": stats.cycles_found,
            "rooms_created": stats.rooms_created,
            "execution_time_ms": round(stats.execution_time_ms, 3),
        },
    }
