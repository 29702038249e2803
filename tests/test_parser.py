import json

import pytest

from wallplanner.core.model import Point
from wallplanner.core.validators import InvalidWall
from wallplanner.engine.detector import detect_rooms
from wallplanner.io.parser import detection_result_to_dict, load_walls


def write_json(tmp_path, data):
    path = tmp_path / "walls.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_wall_list(tmp_path):
    path = write_json(
        tmp_path,
        {
            "walls": [
                {"id": "w1", "start": [0, 0], "end": [4000, 0], "thickness": 200, "material": "brick"},
                {"id": "w2", "start": {"x": 4000, "y": 0}, "end": {"x": 4000, "y": 3000}},
            ]
        },
    )

    w1, w2 = load_walls(path)

    assert w1.thickness == 200
    assert w1.material == "brick"
    assert w1.interior_line.start == Point(0, 100)
    assert w2.end == Point(4000, 3000)
    assert w2.thickness == 150


def test_load_wall_mapping_with_svg_paths(tmp_path):
    path = write_json(
        tmp_path,
        {"walls": {"a": {"path": "M 0,0 L 1000,0", "connected_walls": ["b"]}, "b": {"path": "M 1000,0 L 1000,-500.5"}}},
    )

    a, b = load_walls(path)

    assert a.id == "a"
    assert a.connected_walls == ("b",)
    assert b.end == Point(1000, -500.5)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_walls(str(tmp_path / "missing.json"))


def test_malformed_record(tmp_path):
    path = write_json(tmp_path, {"walls": [{"id": "w1", "start": [0, 0]}]})
    with pytest.raises(ValueError, match="Invalid wall data for w1"):
        load_walls(path)


@pytest.mark.parametrize("record", [["not", "a", "wall"], 42, "w1", None])
def test_non_object_record(tmp_path, record):
    path = write_json(tmp_path, {"walls": [record]})
    with pytest.raises(ValueError, match="Invalid wall data for #0: expected an object"):
        load_walls(path)


def test_non_object_record_in_mapping(tmp_path):
    path = write_json(tmp_path, {"walls": {"w1": [0, 0, 1000, 0]}})
    with pytest.raises(ValueError, match="Invalid wall data for w1"):
        load_walls(path)


def test_invalid_svg_path(tmp_path):
    path = write_json(tmp_path, {"walls": {"a": {"path": "Z"}}})
    with pytest.raises(ValueError, match="Invalid SVG path format"):
        load_walls(path)


def test_invalid_json(tmp_path):
    path = tmp_path / "walls.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_walls(str(path))


def test_duplicate_ids(tmp_path):
    path = write_json(
        tmp_path,
        {"walls": [{"id": "w", "start": [0, 0], "end": [1, 0]}, {"id": "w", "start": [1, 0], "end": [2, 0]}]},
    )
    with pytest.raises(InvalidWall):
        load_walls(path)


def test_zero_thickness(tmp_path):
    path = write_json(tmp_path, {"walls": [{"id": "w", "start": [0, 0], "end": [1, 0], "thickness": 0}]})
    with pytest.raises(InvalidWall):
        load_walls(path)


def test_detection_result_to_dict(rectangle_walls):
    data = detection_result_to_dict(detect_rooms(rectangle_walls))

    assert data["stats"]["rooms_created"] == 1
    (room,) = data["rooms"]
    assert room["name"] == "Room 1"
    assert len(room["boundary_polygon"]) == 4
    json.dumps(data)
