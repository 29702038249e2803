import pytest

from wallplanner.core.model import Point
from wallplanner.engine.manager import RoomManager, walls_hash
from wallplanner.geom.polygon import polygon_area, polygon_perimeter


@pytest.fixture
def manager(rectangle_walls):
    manager = RoomManager()
    manager.detect_from_walls(rectangle_walls)
    return manager


def test_walls_hash_ignores_order(rectangle_walls):
    assert walls_hash(rectangle_walls) == walls_hash(list(reversed(rectangle_walls)))
    assert RoomManager.walls_hash(rectangle_walls) == walls_hash(rectangle_walls)


def test_detection_is_skipped_for_unchanged_walls(rectangle_walls):
    manager = RoomManager()
    events = []
    manager.subscribe(events.append)

    first = manager.detect_from_walls(rectangle_walls)
    second = manager.detect_from_walls(list(rectangle_walls))

    assert len(events) == 1
    assert events[0].kind == "redetected"
    assert [room.id for room in first] == [room.id for room in second]
    assert manager.last_result.stats.rooms_created == 1


def test_rename_survives_redetection(manager, rectangle_walls, wall_factory):
    (room,) = manager.all_rooms()
    manager.rename_room(room.id, "Living")

    manager.detect_from_walls(rectangle_walls + [wall_factory("stub", 5000, 0, 6000, 0)])

    (redetected,) = manager.all_rooms()
    assert redetected.id == room.id
    assert redetected.name == "Living"
    assert redetected.user_override.custom_name == "Living"


def test_queries(manager):
    (room,) = manager.all_rooms()

    assert manager.room_count() == 1
    assert manager.get_room(room.id) == room
    assert manager.get_room("missing") is None
    assert manager.rooms_at_point(Point(2000, 1500)) == [room]
    assert manager.rooms_at_point(Point(9000, 1500)) == []


def test_update_and_remove(manager):
    (room,) = manager.all_rooms()

    updated = manager.set_room_color(room.id, "#ff0000")
    assert updated.color == "#ff0000"
    assert manager.update_room("missing", color="#000000") is None

    assert manager.remove_room(room.id)
    assert not manager.remove_room(room.id)
    assert manager.room_count() == 0


def test_clear_forces_redetection(manager, rectangle_walls):
    manager.clear()
    assert manager.room_count() == 0
    assert manager.last_result is None

    manager.detect_from_walls(rectangle_walls)
    assert manager.room_count() == 1


def test_unsubscribe(manager):
    events = []
    unsubscribe = manager.subscribe(events.append)
    (room,) = manager.all_rooms()

    manager.rename_room(room.id, "A")
    unsubscribe()
    manager.rename_room(room.id, "B")

    assert [event.kind for event in events] == ["updated"]


def test_adjacent_and_merge(two_room_walls):
    manager = RoomManager()
    first, second = manager.detect_from_walls(two_room_walls)

    assert manager.adjacent_rooms(first.id) == [second]
    assert manager.adjacent_rooms("missing") == []

    merged = manager.merge_rooms(first.id, second.id, new_name="Open space")

    assert merged.id == first.id
    assert merged.name == "Open space"
    assert merged.area == pytest.approx(first.area + second.area)
    assert merged.user_override.custom_name == "Open space"
    assert merged.user_override.merged_room_ids == (first.id, second.id)
    assert "mid" in merged.boundary_wall_ids
    assert manager.room_count() == 1
    assert manager.merge_rooms(first.id, "missing") is None


def test_merge_without_name_joins_both_names(two_room_walls):
    manager = RoomManager()
    first, second = manager.detect_from_walls(two_room_walls)

    merged = manager.merge_rooms(first.id, second.id)

    assert merged.name == "Room 1 + Room 2"
    assert merged.user_override.custom_name is None
    assert merged.user_override.merged_room_ids == (first.id, second.id)


def test_split_room(manager):
    (room,) = manager.all_rooms()
    split_line = (Point(1000, -100), Point(1000, 3100))

    result = manager.split_room(room.id, split_line)

    assert result is not None
    first, second = result
    assert first.id == room.id
    assert second.id != room.id
    assert (first.name, second.name) == ("Room 1 A", "Room 1 B")
    assert first.color == room.color
    assert second.color != room.color
    for half in (first, second):
        assert len(half.boundary_polygon) == 4
        assert half.area == round(polygon_area(half.boundary_polygon) / 1e6, 2)
        assert half.perimeter == round(polygon_perimeter(half.boundary_polygon) / 1000, 2)
        assert half.user_override.virtual_boundary == split_line
    assert first.area == pytest.approx(2.95)
    assert second.area == pytest.approx(9.07)
    assert manager.room_count() == 2


def test_split_outside_room_fails(manager):
    (room,) = manager.all_rooms()
    assert manager.split_room(room.id, (Point(9000, 0), Point(9000, 3000))) is None
    assert manager.split_room("missing", (Point(0, 0), Point(1, 1))) is None
