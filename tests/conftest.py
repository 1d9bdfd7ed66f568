"""Shared fixtures for floor planner tests."""

import itertools

import pytest

from floorplanner.core.model import Floor, Node, Wall
from floorplanner.engine.selection import Selection
from floorplanner.engine.store import FloorGraph

SQUARE_NODES = {"n1": (0, 0), "n2": (400, 0), "n3": (400, 400), "n4": (0, 400)}
SQUARE_WALLS = [("n1", "n2"), ("n2", "n3"), ("n3", "n4"), ("n4", "n1")]

# Two 400x400 rooms side by side sharing the wall n2-n5 (w7)
TWO_ROOM_NODES = {
    "n1": (0, 0),
    "n2": (400, 0),
    "n3": (800, 0),
    "n4": (800, 400),
    "n5": (400, 400),
    "n6": (0, 400),
}
TWO_ROOM_WALLS = [
    ("n1", "n2"),
    ("n2", "n3"),
    ("n3", "n4"),
    ("n4", "n5"),
    ("n5", "n6"),
    ("n6", "n1"),
    ("n2", "n5"),
]


def make_floor(points, edges):
    """Floor with nodes keyed by name and walls named w1, w2, ... in order."""
    floor = Floor(id="floor-1")
    for node_id, (x, y) in points.items():
        floor.nodes[node_id] = Node(node_id, x, y)
    for i, (a, b) in enumerate(edges, 1):
        floor.walls[f"w{i}"] = Wall(f"w{i}", a, b)
    return floor


@pytest.fixture
def id_factory():
    """Deterministic id generator (id1, id2, ...)"""
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


@pytest.fixture
def commits():
    """List collecting every committed snapshot"""
    return []


@pytest.fixture
def selection():
    return Selection()


@pytest.fixture
def build_graph(id_factory, commits, selection):
    """Factory building a graph store over given nodes and walls.

    Areas are detected without committing, so ``commits`` only records the
    mutations made by the test itself.
    """

    def _build(points, edges, detect=True):
        graph = FloorGraph(
            make_floor(points, edges),
            on_commit=commits.append,
            selection=selection,
            id_factory=id_factory,
        )
        if detect:
            graph.recalculate_areas()
        return graph

    return _build


@pytest.fixture
def square_graph(build_graph):
    """One 400x400 room"""
    return build_graph(SQUARE_NODES, SQUARE_WALLS)


@pytest.fixture
def two_rooms_graph(build_graph):
    """Two adjacent 400x400 rooms sharing a wall"""
    return build_graph(TWO_ROOM_NODES, TWO_ROOM_WALLS)


@pytest.fixture
def area_with():
    """Lookup of the area whose boundary contains a node"""

    def _find(graph, node_id):
        return next(a for a in graph.areas if node_id in a.node_ids)

    return _find
