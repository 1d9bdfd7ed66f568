"""Area detection by half-edge face tracing.

Every wall contributes two directed half-edges. Starting from each
unvisited half-edge the tracer walks the face to its right, turning at
every vertex to the most clockwise neighbour, until it returns to the
start node. Closed walks with positive shoelace area are inner faces and
become candidate areas; the outer boundary walk comes out negative.

Walks are only accepted when they form a simple polygon. A walk that
passes through a vertex twice (a pinch vertex, a bridge between two
loops, a spur sticking into the room) is discarded, so that every
detected area is a cycle of distinct node ids and the result does not
depend on which half-edge a face was first reached from.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..core.model import Node, Wall
from ..core.topology import build_adjacency
from .primitives import polygon_signed_area

LOGGER = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi

HalfEdge = Tuple[str, str]


def detect_areas(nodes: Iterable[Node], walls: Iterable[Wall]) -> List[List[str]]:
    """Detect all enclosed faces of a wall graph.

    Args:
        nodes: Graph vertices.
        walls: Graph edges, in floor order.

    Returns:
        One ordered list of node ids per inner face, each of length >= 3
        with positive signed area. Empty when there are fewer than three
        nodes or fewer than three walls.
    """
    nodes = list(nodes)
    walls = list(walls)
    if len(nodes) < 3 or len(walls) < 3:
        return []

    node_map = {node.id: node for node in nodes}
    adjacency = build_adjacency(node_map, walls)
    visited: Set[HalfEdge] = set()
    areas: List[List[str]] = []

    for wall in walls:
        if wall.start_node_id not in node_map or wall.end_node_id not in node_map:
            continue
        if wall.is_degenerate:
            continue

        for start_id, next_id in (
            (wall.start_node_id, wall.end_node_id),
            (wall.end_node_id, wall.start_node_id),
        ):
            if (start_id, next_id) in visited:
                continue
            # A node of degree < 2 can never lie on a closed face.
            if len(adjacency[start_id]) < 2:
                continue

            cycle = _trace_face(start_id, next_id, adjacency, node_map, visited)
            if len(cycle) < 3:
                continue
            if _cycle_signed_area(cycle, node_map) > 0:
                areas.append(cycle)

    LOGGER.debug("Detected %d areas from %d nodes and %d walls", len(areas), len(nodes), len(walls))
    return areas


def _trace_face(
    start_id: str,
    next_id: str,
    adjacency: Mapping[str, List[str]],
    node_map: Mapping[str, Node],
    visited: Set[HalfEdge],
) -> List[str]:
    """Walk the face to the right of half-edge ``start_id -> next_id``.

    Returns:
        The node cycle, or an empty list when the walk hits a dead end,
        an already visited half-edge, or is not a simple polygon.
    """
    cycle = [start_id]
    on_cycle = {start_id}
    current = start_id

    while (current, next_id) not in visited:
        visited.add((current, next_id))

        if next_id in on_cycle:
            # Revisits a node other than the start: not a simple polygon.
            return []
        cycle.append(next_id)
        on_cycle.add(next_id)

        prev = current
        current = next_id

        neighbors = adjacency.get(current, [])
        if len(neighbors) < 2:
            return []

        next_id = _most_clockwise_neighbor(prev, current, neighbors, node_map)

        if next_id == start_id:
            visited.add((current, next_id))
            # The face must leave the start along the half-edge it entered
            # with, otherwise the start is a pinch vertex of a larger walk.
            start_neighbors = adjacency[start_id]
            if _most_clockwise_neighbor(current, start_id, start_neighbors, node_map) != cycle[1]:
                return []
            return cycle

    return []


def _most_clockwise_neighbor(
    prev_id: str,
    curr_id: str,
    neighbors: List[str],
    node_map: Mapping[str, Node],
) -> str:
    """Pick the next vertex of a face walk.

    Among the neighbours of ``curr_id`` other than ``prev_id``, returns the
    one with the smallest clockwise rotation from the direction back to
    ``prev_id``, wrapped into (0, 2*pi]. Ties go to the first neighbour in
    adjacency order. If ``prev_id`` is the only neighbour it is returned.
    """
    curr = node_map[curr_id]
    prev = node_map[prev_id]
    base_angle = math.atan2(prev.y - curr.y, prev.x - curr.x)

    candidates = [n for n in neighbors if n != prev_id]
    if not candidates:
        return neighbors[0]

    best: Optional[str] = None
    best_diff = math.inf
    for neighbor_id in candidates:
        neighbor = node_map[neighbor_id]
        angle = math.atan2(neighbor.y - curr.y, neighbor.x - curr.x)
        diff = _wrap_angle(base_angle - angle)
        if diff < best_diff:
            best_diff = diff
            best = neighbor_id

    return best


def _wrap_angle(diff: float) -> float:
    """Normalise an angle difference into (0, 2*pi]."""
    while diff <= 0:
        diff += TWO_PI
    while diff > TWO_PI:
        diff -= TWO_PI
    return diff


def _cycle_signed_area(cycle: List[str], node_map: Dict[str, Node]) -> float:
    return polygon_signed_area([(node_map[n].x, node_map[n].y) for n in cycle])
