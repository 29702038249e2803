import math

import pytest

from wallplanner.core.model import Point
from wallplanner.geom.junction import max_junction_trim_distance, rebuild_wall_faces
from wallplanner.geom.offset import compute_offset_lines
from wallplanner.geom.vector import distance, is_finite


def assert_point(actual, x, y, tol=1e-6):
    assert math.isclose(actual.x, x, abs_tol=tol), actual
    assert math.isclose(actual.y, y, abs_tol=tol), actual


def max_displacement(original, rebuilt):
    interior, exterior = compute_offset_lines(original.start, original.end, original.thickness)
    return max(
        distance(interior.start, rebuilt.interior_line.start),
        distance(interior.end, rebuilt.interior_line.end),
        distance(exterior.start, rebuilt.exterior_line.start),
        distance(exterior.end, rebuilt.exterior_line.end),
    )


def test_trim_bound(wall_factory):
    assert max_junction_trim_distance(wall_factory("a", 0, 0, 4000, 0)) == pytest.approx(900.0)
    assert max_junction_trim_distance(wall_factory("b", 0, 0, 100, 0)) == pytest.approx(150.0)


def test_empty_input():
    assert rebuild_wall_faces([]) == []


def test_l_corner_faces_meet(wall_factory):
    bottom = wall_factory("bottom", 0, 0, 4000, 0)
    right = wall_factory("right", 4000, 0, 4000, 3000)

    new_bottom, new_right = rebuild_wall_faces([bottom, right])

    assert_point(new_bottom.interior_line.end, 3925, 75)
    assert new_bottom.interior_line.end == new_right.interior_line.start
    assert new_bottom.exterior_line.end == new_right.exterior_line.start
    # Untouched far ends
    assert_point(new_bottom.interior_line.start, 0, 75)
    assert_point(new_right.exterior_line.end, 4075, 3000)


def test_rectangle_interior_corners(rectangle_walls):
    rebuilt = {wall.id: wall for wall in rebuild_wall_faces(rectangle_walls)}

    assert_point(rebuilt["bottom"].interior_line.start, 75, 75)
    assert_point(rebuilt["bottom"].interior_line.end, 3925, 75)
    assert_point(rebuilt["top"].interior_line.start, 3925, 2925)
    assert rebuilt["left"].interior_line.end == rebuilt["bottom"].interior_line.start


def test_input_walls_are_not_modified(rectangle_walls):
    before = [wall.interior_line for wall in rectangle_walls]
    rebuild_wall_faces(rectangle_walls)
    assert [wall.interior_line for wall in rectangle_walls] == before


@pytest.mark.parametrize("reverse_second", [False, True])
def test_collinear_walls_stay_near_base(wall_factory, reverse_second):
    first = wall_factory("a", 0, 0, 4000, 0)
    if reverse_second:
        second = wall_factory("b", 8000, 0, 4000, 0)
    else:
        second = wall_factory("b", 4000, 0, 8000, 0)

    rebuilt = rebuild_wall_faces([first, second])

    for original, wall in zip([first, second], rebuilt):
        assert max_displacement(original, wall) <= original.thickness * 6
        assert is_finite(wall.interior_line.end)


def test_three_way_junction(wall_factory):
    left = wall_factory("left", 0, 0, 2000, 0)
    right = wall_factory("right", 2000, 0, 4000, 0)
    stem = wall_factory("stem", 2000, 0, 2000, 2000)

    new_left, new_right, new_stem = rebuild_wall_faces([left, right, stem])

    assert_point(new_stem.interior_line.start, 1925, 75)
    assert_point(new_stem.exterior_line.start, 2075, 75)
    assert_point(new_left.interior_line.end, 1925, 75)
    # No acceptable partner on the far side: base corner kept
    assert_point(new_left.exterior_line.end, 2000, -75)
    for original, wall in zip([left, right, stem], [new_left, new_right, new_stem]):
        assert max_displacement(original, wall) <= max_junction_trim_distance(original) + 1e-6


def test_sharp_angle_never_spikes(wall_factory):
    first = wall_factory("a", 0, 0, 4000, 0)
    second = wall_factory("b", 4000, 0, 0, 50)

    for original, wall in zip([first, second], rebuild_wall_faces([first, second])):
        assert max_displacement(original, wall) <= max_junction_trim_distance(original) + 1e-6


def test_zero_length_wall_does_not_raise(wall_factory):
    point_wall = wall_factory("p", 10, 10, 10, 10)
    (rebuilt,) = rebuild_wall_faces([point_wall])
    assert is_finite(rebuilt.interior_line.start)
    assert rebuilt.start == Point(10, 10)
