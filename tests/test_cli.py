import json

import pytest
from typer.testing import CliRunner

from wallplanner.cli import app

runner = CliRunner()


@pytest.fixture
def walls_file(tmp_path):
    data = {
        "walls": [
            {"id": "bottom", "start": [0, 0], "end": [4000, 0]},
            {"id": "right", "start": [4000, 0], "end": [4000, 3000]},
            {"id": "top", "start": [4000, 3000], "end": [0, 3000]},
            {"id": "left", "start": [0, 3000], "end": [0, 0]},
        ]
    }
    path = tmp_path / "walls.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_detect(walls_file, tmp_path):
    output = tmp_path / "out" / "rooms.json"

    result = runner.invoke(app, ["detect", "--walls", str(walls_file), "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert "Room 1" in result.output
    data = json.loads(output.read_text(encoding="utf-8"))
    assert len(data["rooms"]) == 1
    assert 11.4 <= data["rooms"][0]["area"] <= 12.0


def test_detect_missing_file(tmp_path):
    result = runner.invoke(app, ["detect", "--walls", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


def test_detect_rejects_non_object_wall(tmp_path):
    path = tmp_path / "walls.json"
    path.write_text(json.dumps({"walls": [[0, 0, 4000, 0]]}), encoding="utf-8")

    result = runner.invoke(app, ["detect", "--walls", str(path)])

    assert result.exit_code == 1
    assert "expected an object" in result.output
    assert "Error" in result.output


def test_faces(walls_file):
    result = runner.invoke(app, ["faces", "--walls", str(walls_file)])
    assert result.exit_code == 0, result.output
    assert "bottom" in result.output
