"""Topology analysis for wall sets.

This module turns wall endpoints into tolerance-merged graph nodes and walls
into graph edges, and provides the adjacency views (wall to wall, room to
room) used by the editing and HVAC layers.

Endpoints are merged with a union-find over a spatial index, so two
endpoints end up on the same node whenever a chain of endpoints, each within
tolerance of the next, connects them. The resulting partition does not
depend on the order in which walls are supplied.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Sequence, Set

import networkx as nx
import numpy as np
from networkx.utils import UnionFind
from shapely.geometry import Point as ShapelyPoint
from shapely.strtree import STRtree

from ..config import DEFAULT_SNAP_TOLERANCE, GEOMETRY_EPSILON, NODE_MERGE_EPSILON
from .model import GraphEdge, GraphNode, Point, Room, Wall, WallGraph


def _point_distance(p1: Point, p2: Point) -> float:
    """Calculate Euclidean distance between two points."""
    return math.sqrt((p1.x - p2.x) ** 2 + (p1.y - p2.y) ** 2)


def cluster_points(points: Sequence[Point], tolerance: float) -> List[List[int]]:
    """Group points lying within ``tolerance`` of each other, transitively.

    Args:
        points: Points to group.
        tolerance: Maximum distance (inclusive) between two directly merged
            points.

    Returns:
        List of groups of point indices. Each group is sorted and groups are
        ordered by their smallest index, so the output is deterministic.
        Non-finite points always form singleton groups.
    """
    if not points:
        return []

    finite = [i for i, p in enumerate(points) if math.isfinite(p.x) and math.isfinite(p.y)]
    geoms = [ShapelyPoint(points[i].x, points[i].y) for i in finite]
    uf = UnionFind(range(len(points)))

    if geoms:
        tree = STRtree(geoms)
        radius = max(tolerance, GEOMETRY_EPSILON)
        for local_i, geom in enumerate(geoms):
            i = finite[local_i]
            # query() returns indices of candidates whose envelope intersects
            for local_j in tree.query(geom.buffer(radius)):
                j = finite[int(local_j)]
                if j != i and _point_distance(points[i], points[j]) <= tolerance:
                    uf.union(i, j)

    groups = [sorted(group) for group in uf.to_sets()]
    groups.sort(key=lambda group: group[0])
    return groups


def _centroid(points: Sequence[Point]) -> Point:
    coords = np.array([(p.x, p.y) for p in points], dtype=float)
    cx, cy = coords.mean(axis=0)
    return Point(float(cx), float(cy))


def build_wall_graph(
    walls: Sequence[Wall], snap_tolerance: float = DEFAULT_SNAP_TOLERANCE
) -> WallGraph:
    """Build the planar graph of a wall set.

    Wall endpoints within ``snap_tolerance`` collapse to one node positioned
    at the centroid of the merged endpoints. Each wall becomes an edge,
    except walls whose two endpoints resolve to the same node; those are
    skipped without a warning.

    Args:
        walls: Walls to analyze.
        snap_tolerance: Endpoint merge tolerance in millimetres.

    Returns:
        WallGraph whose node IDs are indices into ``nodes``.
    """
    endpoints: List[Point] = []
    for wall in walls:
        endpoints.append(wall.start)
        endpoints.append(wall.end)

    groups = cluster_points(endpoints, snap_tolerance)
    node_of_endpoint = [0] * len(endpoints)
    positions = []
    for node_id, group in enumerate(groups):
        for index in group:
            node_of_endpoint[index] = node_id
        positions.append(_centroid([endpoints[index] for index in group]))

    edges = []
    connected: List[List[str]] = [[] for _ in groups]
    for i, wall in enumerate(walls):
        start_node = node_of_endpoint[2 * i]
        end_node = node_of_endpoint[2 * i + 1]

        # Skip degenerate walls (start = end)
        if start_node == end_node:
            continue

        edges.append(
            GraphEdge(
                id=wall.id,
                start_node_id=start_node,
                end_node_id=end_node,
                angle=math.atan2(wall.end.y - wall.start.y, wall.end.x - wall.start.x),
            )
        )
        connected[start_node].append(wall.id)
        connected[end_node].append(wall.id)

    nodes = tuple(
        GraphNode(id=node_id, position=positions[node_id], connected_edge_ids=tuple(connected[node_id]))
        for node_id in range(len(groups))
    )
    return WallGraph(nodes=nodes, edges=tuple(edges))


def wall_graph_to_networkx(graph: WallGraph) -> nx.MultiGraph:
    """Convert a WallGraph to a NetworkX multigraph.

    Nodes carry a ``position`` attribute; edges are keyed by wall ID so that
    two walls between the same pair of nodes stay distinct.
    """
    G = nx.MultiGraph()
    for node in graph.nodes:
        G.add_node(node.id, position=node.position)
    for edge in graph.edges:
        G.add_edge(edge.start_node_id, edge.end_node_id, key=edge.id, wall_id=edge.id)
    return G


def dangling_node_ids(graph: WallGraph) -> List[int]:
    """Return IDs of nodes touched by exactly one wall (open wall ends)."""
    G = wall_graph_to_networkx(graph)
    return sorted(node for node, degree in G.degree() if degree == 1)


def build_wall_adjacency(
    walls: Sequence[Wall], tolerance: float = NODE_MERGE_EPSILON
) -> Dict[str, Set[str]]:
    """Build adjacency mapping from walls to walls sharing an endpoint.

    Args:
        walls: Walls to analyze.
        tolerance: Endpoint merge tolerance in millimetres.

    Returns:
        Dictionary mapping wall_id to the set of adjacent wall IDs.
    """
    endpoints: List[Point] = []
    owners: List[str] = []
    for wall in walls:
        endpoints.extend((wall.start, wall.end))
        owners.extend((wall.id, wall.id))

    adjacency: Dict[str, Set[str]] = {wall.id: set() for wall in walls}
    for group in cluster_points(endpoints, tolerance):
        wall_ids = {owners[index] for index in group}
        for wall_id in wall_ids:
            adjacency[wall_id] |= wall_ids - {wall_id}

    return adjacency


def derive_connected_walls(
    walls: Sequence[Wall], tolerance: float = NODE_MERGE_EPSILON
) -> List[Wall]:
    """Refresh every wall's ``connected_walls`` hints from its geometry."""
    adjacency = build_wall_adjacency(walls, tolerance)
    return [
        replace(wall, connected_walls=tuple(sorted(adjacency[wall.id])))
        for wall in walls
    ]


def build_room_graph(rooms: Iterable[Room]) -> nx.Graph:
    """Build a graph representing room adjacency.

    Creates a NetworkX graph where nodes are rooms and edges join rooms that
    share at least one boundary wall.

    Args:
        rooms: Rooms to connect.

    Returns:
        NetworkX Graph; each edge has a sorted ``wall_ids`` list attribute.
    """
    G = nx.Graph()
    rooms_by_wall: Dict[str, List[str]] = defaultdict(list)

    for room in rooms:
        G.add_node(room.id, name=room.name)
        for wall_id in set(room.boundary_wall_ids):
            rooms_by_wall[wall_id].append(room.id)

    for wall_id, room_ids in rooms_by_wall.items():
        for i, first in enumerate(room_ids):
            for second in room_ids[i + 1:]:
                if first == second:
                    continue
                if G.has_edge(first, second):
                    G.edges[first, second]["wall_ids"].append(wall_id)
                    G.edges[first, second]["wall_ids"].sort()
                else:
                    G.add_edge(first, second, wall_ids=[wall_id])

    return G
