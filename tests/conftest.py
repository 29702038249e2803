"""Shared fixtures for the wall planner tests."""

import pytest

from wallplanner.core.model import Point
from wallplanner.geom.offset import create_wall


def make_wall(wall_id, x1, y1, x2, y2, thickness=150.0):
    return create_wall(wall_id, Point(x1, y1), Point(x2, y2), thickness)


@pytest.fixture
def wall_factory():
    return make_wall


@pytest.fixture
def rectangle_walls():
    """4000 x 3000 mm rectangle, drawn counter-clockwise."""
    return [
        make_wall("bottom", 0, 0, 4000, 0),
        make_wall("right", 4000, 0, 4000, 3000),
        make_wall("top", 4000, 3000, 0, 3000),
        make_wall("left", 0, 3000, 0, 0),
    ]


@pytest.fixture
def two_room_walls():
    """8000 x 3000 mm rectangle split by a wall at x = 4000."""
    return [
        make_wall("b1", 0, 0, 4000, 0),
        make_wall("b2", 4000, 0, 8000, 0),
        make_wall("r", 8000, 0, 8000, 3000),
        make_wall("t2", 8000, 3000, 4000, 3000),
        make_wall("t1", 4000, 3000, 0, 3000),
        make_wall("l", 0, 3000, 0, 0),
        make_wall("mid", 4000, 0, 4000, 3000),
    ]
