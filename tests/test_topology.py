import math

import pytest

from wallplanner.core.model import Point
from wallplanner.core.topology import (
    build_room_graph,
    build_wall_adjacency,
    build_wall_graph,
    cluster_points,
    dangling_node_ids,
    derive_connected_walls,
    wall_graph_to_networkx,
)
from wallplanner.engine.detector import detect_rooms


def test_cluster_points_is_transitive():
    points = [Point(0, 0), Point(4, 0), Point(8, 0), Point(100, 0)]
    assert cluster_points(points, 5.0) == [[0, 1, 2], [3]]


def test_cluster_points_does_not_depend_on_order():
    points = [Point(0, 0), Point(4, 0), Point(8, 0), Point(100, 0)]
    reordered = [points[2], points[3], points[0], points[1]]

    groups = cluster_points(reordered, 5.0)

    assert sorted(len(group) for group in groups) == [1, 3]
    assert [1] in groups


def test_cluster_points_keeps_non_finite_points_apart():
    points = [Point(0, 0), Point(float("nan"), 0), Point(0, 0)]
    assert cluster_points(points, 1.0) == [[0, 2], [1]]


def test_cluster_points_empty():
    assert cluster_points([], 1.0) == []


def test_rectangle_graph(rectangle_walls):
    graph = build_wall_graph(rectangle_walls)

    assert len(graph.nodes) == 4
    assert len(graph.edges) == 4
    assert all(len(node.connected_edge_ids) == 2 for node in graph.nodes)
    assert graph.edges[0].angle == pytest.approx(0.0)
    assert graph.edges[1].angle == pytest.approx(math.pi / 2)


def test_endpoints_within_snap_tolerance_share_a_node(wall_factory):
    walls = [wall_factory("a", 0, 0, 1000, 0), wall_factory("b", 1003, 0, 1003, 1000)]

    graph = build_wall_graph(walls, snap_tolerance=5.0)

    assert len(graph.nodes) == 3
    shared = graph.nodes[graph.edges[0].end_node_id]
    assert shared.position.x == pytest.approx(1001.5)
    assert set(shared.connected_edge_ids) == {"a", "b"}


def test_degenerate_wall_is_skipped(wall_factory):
    walls = [wall_factory("a", 0, 0, 1000, 0), wall_factory("tiny", 500, 500, 502, 500)]

    graph = build_wall_graph(walls, snap_tolerance=5.0)

    assert [edge.id for edge in graph.edges] == ["a"]


def test_dangling_nodes(wall_factory):
    walls = [wall_factory("a", 0, 0, 1000, 0), wall_factory("b", 1000, 0, 1000, 1000)]
    graph = build_wall_graph(walls)

    assert len(dangling_node_ids(graph)) == 2
    assert wall_graph_to_networkx(graph).number_of_edges() == 2


def test_wall_adjacency(rectangle_walls):
    adjacency = build_wall_adjacency(rectangle_walls)

    assert adjacency["bottom"] == {"left", "right"}
    assert adjacency["top"] == {"left", "right"}


def test_derive_connected_walls(rectangle_walls):
    walls = derive_connected_walls(rectangle_walls)
    assert walls[0].connected_walls == ("left", "right")


def test_room_graph(two_room_walls):
    rooms = detect_rooms(two_room_walls).rooms

    G = build_room_graph(rooms)

    assert G.number_of_nodes() == 2
    assert G.number_of_edges() == 1
    (_, _, data), = G.edges(data=True)
    assert data["wall_ids"] == ["mid"]
