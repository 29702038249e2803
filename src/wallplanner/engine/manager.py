"""Room manager: memoized detection plus user edits on detected rooms.

The manager owns the only long-lived state of the engine: the current rooms,
the hash of the walls they were detected from and the change subscribers.
Every instance is independent.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import networkx as nx

from ..config import MM2_PER_M2, MM_PER_M, ROOM_COLORS
from ..core.model import (
    DetectionOptions,
    Point,
    Room,
    RoomDetectionResult,
    RoomUserOverride,
    Wall,
)
from ..core.topology import build_room_graph
from ..geom.polygon import (
    point_in_polygon,
    polygon_area,
    polygon_centroid,
    polygon_perimeter,
    vertex_mean,
)
from ..geom.vector import cross, subtract
from .detector import detect_rooms, merge_room_detections, new_room_id, room_color

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomUpdateEvent:
    """Change notification sent to subscribers.

    Attributes:
        kind: One of ``"redetected"``, ``"set"``, ``"updated"``,
            ``"removed"``, ``"merged"``, ``"split"``, ``"cleared"``.
        room_ids: IDs of the rooms affected by the change.
        previous_rooms: Rooms before the change.
    """

    kind: str
    room_ids: Tuple[str, ...]
    previous_rooms: Tuple[Room, ...] = ()


Subscriber = Callable[[RoomUpdateEvent], None]


def _ordered_ring(points: Sequence[Point]) -> List[Point]:
    """Order points counter-clockwise around their vertex mean."""
    center = vertex_mean(points)
    return sorted(points, key=lambda p: math.atan2(p.y - center.y, p.x - center.x))


def walls_hash(walls: Sequence[Wall]) -> str:
    """Order-independent fingerprint of wall ids and centerlines."""
    parts = sorted(
        f"{wall.id}:{wall.start.x},{wall.start.y}-{wall.end.x},{wall.end.y}" for wall in walls
    )
    return "|".join(parts)


class RoomManager:
    """Keeps the rooms of one plan in sync with its walls."""

    walls_hash = staticmethod(walls_hash)

    def __init__(self, options: Optional[DetectionOptions] = None):
        self.options = options or DetectionOptions()
        self._rooms: Dict[str, Room] = {}
        self._walls_hash: Optional[str] = None
        self._subscribers: List[Subscriber] = []
        self.last_result: Optional[RoomDetectionResult] = None

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect_from_walls(self, walls: Sequence[Wall]) -> List[Room]:
        """Re-detect rooms unless the walls are unchanged since the last run.

        Returns:
            The current rooms after detection.
        """
        current_hash = walls_hash(walls)
        if current_hash == self._walls_hash:
            LOGGER.debug("Walls unchanged, skipping room detection")
            return self.all_rooms()

        previous = tuple(self._rooms.values())
        result = detect_rooms(walls, self.options)
        rooms = merge_room_detections(result.rooms, previous)

        self.last_result = replace(result, rooms=tuple(rooms))
        self._walls_hash = current_hash
        self._rooms = {room.id: room for room in rooms}
        self._notify(RoomUpdateEvent("redetected", tuple(self._rooms), previous))
        return self.all_rooms()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all_rooms(self) -> List[Room]:
        return list(self._rooms.values())

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def room_count(self) -> int:
        return len(self._rooms)

    def rooms_at_point(self, point: Point) -> List[Room]:
        """Rooms whose polygon strictly contains ``point``."""
        return [room for room in self._rooms.values() if point_in_polygon(point, room.boundary_polygon)]

    def adjacent_rooms(self, room_id: str) -> List[Room]:
        """Rooms sharing at least one boundary wall with ``room_id``."""
        if room_id not in self._rooms:
            return []
        G: nx.Graph = build_room_graph(self._rooms.values())
        return [self._rooms[neighbor] for neighbor in sorted(G.neighbors(room_id))]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_rooms(self, rooms: Sequence[Room]) -> None:
        previous = tuple(self._rooms.values())
        self._rooms = {room.id: room for room in rooms}
        self._notify(RoomUpdateEvent("set", tuple(self._rooms), previous))

    def update_room(self, room_id: str, **changes) -> Optional[Room]:
        """Replace fields of a room; returns the updated room or None."""
        room = self._rooms.get(room_id)
        if room is None:
            return None
        updated = replace(room, **changes)
        self._rooms[room_id] = updated
        self._notify(RoomUpdateEvent("updated", (room_id,), (room,)))
        return updated

    def remove_room(self, room_id: str) -> bool:
        room = self._rooms.pop(room_id, None)
        if room is None:
            return False
        self._notify(RoomUpdateEvent("removed", (room_id,), (room,)))
        return True

    def clear(self) -> None:
        """Drop all rooms and forget the walls hash."""
        previous = tuple(self._rooms.values())
        self._rooms = {}
        self._walls_hash = None
        self.last_result = None
        self._notify(RoomUpdateEvent("cleared", (), previous))

    def rename_room(self, room_id: str, name: str) -> Optional[Room]:
        """Rename a room; the name survives re-detection."""
        room = self._rooms.get(room_id)
        if room is None:
            return None
        override = replace(room.user_override or RoomUserOverride(), custom_name=name)
        return self.update_room(room_id, name=name, user_override=override)

    def set_room_color(self, room_id: str, color: str) -> Optional[Room]:
        return self.update_room(room_id, color=color)

    def merge_rooms(self, room_id1: str, room_id2: str, new_name: Optional[str] = None) -> Optional[Room]:
        """Merge two rooms into the first one.

        This is an approximation, not a polygon union: the larger polygon is
        kept, areas are summed and the perimeter is the larger of the two.
        Without ``new_name`` the merged room is called "<room1> + <room2>".
        """
        room1 = self._rooms.get(room_id1)
        room2 = self._rooms.get(room_id2)
        if room1 is None or room2 is None or room_id1 == room_id2:
            return None

        wall_ids = list(room1.boundary_wall_ids)
        for wall_id in room2.boundary_wall_ids:
            if wall_id not in wall_ids:
                wall_ids.append(wall_id)

        override = RoomUserOverride(
            custom_name=new_name,
            merged_room_ids=(room_id1, room_id2),
        )

        merged = replace(
            room1,
            name=new_name or f"{room1.name} + {room2.name}",
            boundary_wall_ids=tuple(wall_ids),
            boundary_polygon=(
                room1.boundary_polygon
                if polygon_area(room1.boundary_polygon) >= polygon_area(room2.boundary_polygon)
                else room2.boundary_polygon
            ),
            area=round(room1.area + room2.area, 2),
            perimeter=max(room1.perimeter, room2.perimeter),
            centroid=Point(
                (room1.centroid.x + room2.centroid.x) / 2.0,
                (room1.centroid.y + room2.centroid.y) / 2.0,
            ),
            user_override=override,
            furniture_ids=room1.furniture_ids + room2.furniture_ids,
            hvac_equipment_ids=room1.hvac_equipment_ids + room2.hvac_equipment_ids,
        )

        previous = (room1, room2)
        self._rooms[room_id1] = merged
        del self._rooms[room_id2]
        self._notify(RoomUpdateEvent("merged", (room_id1, room_id2), previous))
        return merged

    def split_room(self, room_id: str, split_line: Tuple[Point, Point]) -> Optional[Tuple[Room, Room]]:
        """Split a room along a line.

        Vertices are bucketed by the side of the line they lie on and both
        split endpoints are added to each side; each bucket is then ordered
        around its vertex mean. This is an approximation, not a polygon clip:
        the halves reach out to the split endpoints. Area and perimeter are
        measured on each half's own polygon.

        Returns:
            The two resulting rooms ("<name> A" keeping the room id, and
            "<name> B"), or None if either side has fewer than three vertices
            or the room does not exist.
        """
        room = self._rooms.get(room_id)
        if room is None:
            return None

        line_start, line_end = split_line
        axis = subtract(line_end, line_start)
        left: List[Point] = []
        right: List[Point] = []
        for vertex in room.boundary_polygon:
            if cross(axis, subtract(vertex, line_start)) >= 0:
                left.append(vertex)
            else:
                right.append(vertex)
        left.extend((line_start, line_end))
        right.extend((line_start, line_end))

        if len(left) < 3 or len(right) < 3:
            return None

        override = RoomUserOverride(virtual_boundary=(line_start, line_end))
        if room.color in ROOM_COLORS:
            next_color = room_color(ROOM_COLORS.index(room.color) + 1)
        else:
            next_color = room_color(len(self._rooms))

        first = self._split_half(room, _ordered_ring(left), room.id, f"{room.name} A", room.color, override)
        second = self._split_half(room, _ordered_ring(right), new_room_id(), f"{room.name} B", next_color, override)

        self._rooms[first.id] = first
        self._rooms[second.id] = second
        self._notify(RoomUpdateEvent("split", (first.id, second.id), (room,)))
        return first, second

    @staticmethod
    def _split_half(
        room: Room,
        polygon: List[Point],
        room_id: str,
        name: str,
        color: str,
        override: RoomUserOverride,
    ) -> Room:
        return replace(
            room,
            id=room_id,
            name=name,
            boundary_polygon=tuple(polygon),
            area=round(polygon_area(polygon) / MM2_PER_M2, 2),
            perimeter=round(polygon_perimeter(polygon) / MM_PER_M, 2),
            centroid=polygon_centroid(polygon),
            color=color,
            user_override=override,
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for change events; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: RoomUpdateEvent) -> None:
        for callback in list(self._subscribers):
            callback(event)
