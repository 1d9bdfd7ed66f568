"""Topology analysis for floor plan wall graphs.

This module provides the adjacency structures the detection engine walks,
the networkx views used for connectivity questions, and extraction of the
closed outer outline of a floor.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import networkx as nx

from .model import Floor, Node, Wall

LOGGER = logging.getLogger(__name__)


def build_adjacency(nodes: Mapping[str, Node], walls: Iterable[Wall]) -> Dict[str, List[str]]:
    """Build the undirected adjacency map of the wall graph.

    Every node gets an entry, including isolated ones. Walls of any type
    participate. Walls pointing at a missing node, and degenerate walls,
    are skipped.

    Args:
        nodes: Mapping of node ID to Node objects.
        walls: Walls in floor order; neighbour order follows it.

    Returns:
        Dictionary mapping node_id to the list of neighbouring node_ids.
    """
    adjacency: Dict[str, List[str]] = {node_id: [] for node_id in nodes}

    for wall in walls:
        if wall.start_node_id not in nodes or wall.end_node_id not in nodes:
            LOGGER.debug("Skipping wall %s with a missing endpoint", wall.id)
            continue
        if wall.is_degenerate:
            LOGGER.debug("Skipping degenerate wall %s", wall.id)
            continue
        adjacency[wall.start_node_id].append(wall.end_node_id)
        adjacency[wall.end_node_id].append(wall.start_node_id)

    return adjacency


def build_node_graph(floor: Floor) -> nx.Graph:
    """Build a NetworkX graph of the floor's nodes and walls.

    Graph nodes carry their ``x``/``y`` coordinates, edges carry the
    ``wall_id`` and structure ``type`` of the wall they come from.
    """
    G = nx.Graph()

    for node in floor.nodes.values():
        G.add_node(node.id, x=node.x, y=node.y)

    for wall in floor.walls.values():
        if wall.start_node_id not in floor.nodes or wall.end_node_id not in floor.nodes:
            continue
        if wall.is_degenerate:
            continue
        G.add_edge(wall.start_node_id, wall.end_node_id, wall_id=wall.id, type=wall.type)

    return G


def build_area_graph(floor: Floor) -> nx.Graph:
    """Build a graph of areas connected through shared walls.

    Two areas are linked when at least one wall bounds both of them. The
    edge records the ids of the shared walls.
    """
    G = nx.Graph()

    for area in floor.areas.values():
        G.add_node(area.id, name=area.name)

    areas = list(floor.areas.values())
    for wall in floor.walls.values():
        bounding = [area.id for area in areas if area.bounds_wall(wall)]
        for i in range(len(bounding)):
            for j in range(i + 1, len(bounding)):
                a, b = bounding[i], bounding[j]
                if G.has_edge(a, b):
                    G.edges[a, b]["wall_ids"].append(wall.id)
                else:
                    G.add_edge(a, b, wall_ids=[wall.id])

    return G


def floor_outline(floor: Floor) -> Optional[List[Tuple[float, float]]]:
    """Extract a closed outline polygon of the floor.

    Dead ends are pruned first (the 2-core of the wall graph), then the
    remaining cycle is walked from the first surviving node in floor
    order, always stepping to the first unvisited neighbour.

    Returns:
        The outline vertices, or None if fewer than three nodes survive.
    """
    G = build_node_graph(floor)
    active = set(nx.k_core(G, 2).nodes)

    if len(active) < 3:
        return None

    start = next(node_id for node_id in floor.nodes if node_id in active)

    polygon: List[Tuple[float, float]] = []
    visited = set()
    current = start
    while True:
        visited.add(current)
        node = floor.nodes[current]
        polygon.append((node.x, node.y))

        next_id = next(
            (n for n in G.adj[current] if n in active and n not in visited), None
        )
        if next_id is None:
            break
        current = next_id

    return polygon if len(polygon) >= 3 else None


def is_floor_closed(floor: Floor) -> bool:
    return floor_outline(floor) is not None
