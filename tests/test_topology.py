# Floor planner imports
from floorplanner.core.model import Node, Wall
from floorplanner.core.topology import (
    build_adjacency,
    build_area_graph,
    build_node_graph,
    floor_outline,
    is_floor_closed,
)

# Third-party imports
import networkx as nx


class TestAdjacency:
    """Tests for the wall adjacency map"""

    def test_isolated_nodes_have_entries(self):
        nodes = {"a": Node("a", 0, 0), "b": Node("b", 1, 0), "lone": Node("lone", 5, 5)}
        adjacency = build_adjacency(nodes, [Wall("w1", "a", "b")])

        assert adjacency == {"a": ["b"], "b": ["a"], "lone": []}

    def test_bad_walls_skipped(self):
        nodes = {"a": Node("a", 0, 0), "b": Node("b", 1, 0)}
        walls = [Wall("w1", "a", "missing"), Wall("w2", "a", "a"), Wall("w3", "b", "a")]

        assert build_adjacency(nodes, walls) == {"a": ["b"], "b": ["a"]}

    def test_neighbour_order_follows_walls(self, square_graph):
        adjacency = build_adjacency(square_graph.floor.nodes, square_graph.walls)
        assert adjacency["n1"] == ["n2", "n4"]


class TestNetworkViews:
    """Tests for the networkx graphs built from a floor"""

    def test_node_graph(self, square_graph):
        G = build_node_graph(square_graph.floor)

        assert G.number_of_nodes() == 4
        assert G.number_of_edges() == 4
        assert G.nodes["n2"]["x"] == 400
        assert G.edges["n1", "n2"]["wall_id"] == "w1"
        assert G.edges["n1", "n2"]["type"] == "wall"
        assert nx.is_connected(G)

    def test_area_graph_links_rooms_through_shared_wall(self, two_rooms_graph, area_with):
        left = area_with(two_rooms_graph, "n1").id
        right = area_with(two_rooms_graph, "n3").id

        G = build_area_graph(two_rooms_graph.floor)

        assert set(G.nodes) == {left, right}
        assert G.edges[left, right]["wall_ids"] == ["w7"]

    def test_area_graph_without_shared_walls(self, square_graph):
        G = build_area_graph(square_graph.floor)

        assert G.number_of_nodes() == 1
        assert G.number_of_edges() == 0


class TestOutline:
    """Tests for the floor outline"""

    def test_two_rooms_outline(self, two_rooms_graph):
        outline = floor_outline(two_rooms_graph.floor)

        assert outline == [(0, 0), (400, 0), (800, 0), (800, 400), (400, 400), (0, 400)]
        assert is_floor_closed(two_rooms_graph.floor)

    def test_dead_ends_pruned(self, build_graph):
        points = {"n1": (0, 0), "n2": (400, 0), "n3": (400, 400), "n4": (0, 400), "n5": (600, 0)}
        edges = [("n1", "n2"), ("n2", "n3"), ("n3", "n4"), ("n4", "n1"), ("n2", "n5")]
        graph = build_graph(points, edges, detect=False)

        assert floor_outline(graph.floor) == [(0, 0), (400, 0), (400, 400), (0, 400)]

    def test_open_chain_is_not_closed(self, build_graph):
        graph = build_graph({"a": (0, 0), "b": (100, 0), "c": (100, 100)}, [("a", "b"), ("b", "c")], detect=False)

        assert floor_outline(graph.floor) is None
        assert not is_floor_closed(graph.floor)
