"""Half-edge face tracer.

Every wall edge of a :class:`WallGraph` becomes two directed half-edges
stored in one list: the forward half-edge of edge ``k`` sits at index
``2k`` and its twin at ``2k + 1``. Faces are enumerated by always leaving a
node through the next outgoing half-edge in counter-clockwise order from the
reverse of the arriving direction. With this rule bounded faces are traced
clockwise and the outer face of each connected wall group counter-clockwise.
"""

from __future__ import annotations

import bisect
import logging
import math
from collections import defaultdict
from typing import Dict, List, Tuple

from ..config import MAX_TRACE_STEPS
from ..core.model import DetectedCycle, HalfEdge, WallGraph
from ..geom.polygon import signed_area

LOGGER = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


def _normalize_angle(angle: float) -> float:
    angle = math.fmod(angle, TWO_PI)
    if angle < 0:
        angle += TWO_PI
    # fmod of a tiny negative number can round up to exactly 2*pi
    return 0.0 if angle >= TWO_PI else angle


def build_half_edges(graph: WallGraph) -> List[HalfEdge]:
    """Create the half-edge list of ``graph`` with ``twin`` and ``next`` links.

    Args:
        graph: Planar wall graph.

    Returns:
        List of HalfEdge, two per graph edge, indexed by position.
    """
    half_edges: List[HalfEdge] = []
    for edge in graph.edges:
        start = graph.nodes[edge.start_node_id].position
        end = graph.nodes[edge.end_node_id].position
        forward = _normalize_angle(math.atan2(end.y - start.y, end.x - start.x))
        backward = _normalize_angle(forward + math.pi)

        index = len(half_edges)
        half_edges.append(
            HalfEdge(index, edge.id, edge.start_node_id, edge.end_node_id, forward, twin=index + 1)
        )
        half_edges.append(
            HalfEdge(index + 1, edge.id, edge.end_node_id, edge.start_node_id, backward, twin=index)
        )

    # Outgoing half-edges per node, sorted by angle (CCW order)
    outgoing: Dict[int, List[Tuple[float, int]]] = defaultdict(list)
    for half_edge in half_edges:
        outgoing[half_edge.from_node_id].append((half_edge.angle, half_edge.index))
    for entries in outgoing.values():
        entries.sort()

    for half_edge in half_edges:
        entries = outgoing[half_edge.to_node_id]
        if len(entries) == 1:
            # Dead end: turn around along the twin
            half_edge.next = half_edge.twin
            continue

        reversed_angle = _normalize_angle(half_edge.angle + math.pi)
        angles = [angle for angle, _ in entries]
        position = bisect.bisect_right(angles, reversed_angle)
        half_edge.next = entries[position % len(entries)][1]

    return half_edges


def find_all_cycles(graph: WallGraph, half_edges: List[HalfEdge]) -> List[DetectedCycle]:
    """Trace every face of the half-edge structure.

    Faces with fewer than three edges, and traces that do not return to their
    starting half-edge within the safety bound, are dropped. Faces running
    over exactly the same walls collapse into one, keeping the one with the
    smallest signed area; for a simple loop of walls that is the bounded,
    clockwise side.

    Args:
        graph: The graph the half-edges were built from.
        half_edges: Output of :func:`build_half_edges`. ``visited`` flags are
            reset before tracing.

    Returns:
        List of DetectedCycle in discovery order.
    """
    for half_edge in half_edges:
        half_edge.visited = False

    max_steps = max(MAX_TRACE_STEPS, len(half_edges))
    cycles: List[DetectedCycle] = []
    seen: Dict[Tuple[str, ...], int] = {}

    for start in half_edges:
        if start.visited:
            continue

        edge_ids: List[str] = []
        node_ids: List[int] = []
        current = start
        closed = False
        for _ in range(max_steps):
            current.visited = True
            edge_ids.append(current.edge_id)
            node_ids.append(current.from_node_id)
            if current.next is None:
                break
            current = half_edges[current.next]
            if current.index == start.index:
                closed = True
                break

        if not closed:
            LOGGER.debug("Discarding unclosed face trace starting at half-edge %d", start.index)
            continue
        if len(edge_ids) < 3:
            continue

        area = signed_area([graph.nodes[node_id].position for node_id in node_ids])
        cycle = DetectedCycle(
            edge_ids=tuple(edge_ids),
            node_ids=tuple(node_ids),
            is_clockwise=area < 0,
            signed_area=area,
        )

        key = tuple(sorted(edge_ids))
        if key in seen:
            position = seen[key]
            if cycle.signed_area < cycles[position].signed_area:
                cycles[position] = cycle
            continue
        seen[key] = len(cycles)
        cycles.append(cycle)

    return cycles
