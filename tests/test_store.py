# Floor planner imports
from floorplanner.engine.store import WallPoint

# Third-party imports
import pytest


class TestNodes:
    """Tests for node mutations"""

    def test_add_node(self, build_graph, commits):
        graph = build_graph({}, [])
        node_id = graph.add_node(10, 20)

        assert graph.node_position(node_id) == (10, 20)
        assert graph.areas == []
        assert len(commits) == 1

    def test_update_node_keeps_area_identity(self, square_graph, commits):
        """Test moving a corner keeps the room without re-detection"""
        area_id = square_graph.areas[0].id
        square_graph.update_node("n3", {"x": 500})

        assert square_graph.node_position("n3") == (500, 400)
        assert [a.id for a in square_graph.areas] == [area_id]
        assert len(commits) == 1

    def test_update_node_ignores_other_fields(self, square_graph):
        square_graph.update_node("n1", {"id": "other", "y": 5})

        assert square_graph.get_node("other") is None
        assert square_graph.node_position("n1") == (0, 5)

    def test_update_node_without_commit(self, square_graph, commits):
        square_graph.update_node("n1", {"x": 1}, commit=False)
        assert commits == []

    def test_update_missing_node_is_noop(self, square_graph, commits):
        square_graph.update_node("missing", {"x": 1})
        assert commits == []

    def test_delete_through_node_bridges_walls(self, build_graph, selection):
        """Test deleting a node in the middle of a wall run joins its neighbours"""
        points = {"n1": (0, 0), "m": (200, 0), "n2": (400, 0), "n3": (400, 400), "n4": (0, 400)}
        edges = [("n1", "m"), ("m", "n2"), ("n2", "n3"), ("n3", "n4"), ("n4", "n1")]
        graph = build_graph(points, edges)
        area_id = graph.areas[0].id
        selection.select_node("m")

        graph.delete_node("m")

        assert graph.get_node("m") is None
        assert len(graph.walls) == 4
        bridge = graph.find_wall_between("n1", "n2")
        assert bridge is not None
        assert bridge.thickness == 20
        assert len(graph.areas) == 1
        assert graph.areas[0].id == area_id
        assert graph.areas[0].node_set == {"n1", "n2", "n3", "n4"}
        assert selection.selected_node_id is None

    def test_delete_middle_of_line(self, build_graph):
        """Test a three-node line collapses into one wall with the first wall's properties"""
        graph = build_graph({"a": (0, 0), "b": (100, 0), "c": (200, 0)}, [("a", "b"), ("b", "c")])
        graph.update_wall("w1", {"thickness": 30, "type": "window"})

        graph.delete_node("b")

        assert len(graph.walls) == 1
        wall = graph.walls[0]
        assert wall.pair == {"a", "c"}
        assert graph.wall_coordinates(wall) == (0, 0, 200, 0)
        assert wall.thickness == 30
        assert wall.type == "window"

    def test_delete_node_does_not_duplicate_wall(self, build_graph):
        points = {"n1": (0, 0), "n2": (400, 0), "n3": (200, 300)}
        graph = build_graph(points, [("n1", "n2"), ("n2", "n3"), ("n3", "n1")])

        graph.delete_node("n3")

        assert [w.id for w in graph.walls] == ["w1"]

    def test_delete_junction_drops_all_walls(self, two_rooms_graph):
        two_rooms_graph.delete_node("n2")

        assert sorted(w.id for w in two_rooms_graph.walls) == ["w3", "w4", "w5", "w6"]
        assert all("n2" not in a.node_ids for a in two_rooms_graph.areas)


class TestWalls:
    """Tests for wall mutations"""

    def test_add_wall_closes_room(self, build_graph, selection):
        points = {"n1": (0, 0), "n2": (300, 0), "n3": (0, 300)}
        graph = build_graph(points, [("n1", "n2"), ("n2", "n3")])
        assert graph.areas == []

        wall_id = graph.add_wall("n3", "n1")

        assert len(graph.areas) == 1
        assert graph.areas[0].node_set == {"n1", "n2", "n3"}
        assert selection.selected_wall_id == wall_id

    def test_add_wall_retargets_existing(self, square_graph, commits):
        """Test connecting an already connected pair changes the wall in place"""
        area_id = square_graph.areas[0].id
        square_graph.update_wall("w1", {"thickness": 35}, commit=False)

        wall_id = square_graph.add_wall("n2", "n1", type="door")

        assert wall_id == "w1"
        wall = square_graph.get_wall("w1")
        assert wall.type == "door"
        assert wall.door_swing == "left"
        assert wall.thickness == 20
        assert len(square_graph.walls) == 4
        assert [a.id for a in square_graph.areas] == [area_id]
        assert len(commits) == 1

    def test_add_wall_rejects_bad_endpoints(self, square_graph, commits):
        assert square_graph.add_wall("n1", "missing") is None
        assert square_graph.add_wall("n1", "n1") is None
        assert commits == []

    def test_update_wall_properties(self, square_graph):
        square_graph.update_wall("w2", {"thickness": 10, "height": 250, "start_node_id": "n4"})

        wall = square_graph.get_wall("w2")
        assert wall.thickness == 10
        assert wall.height == 250
        assert wall.start_node_id == "n2"

    def test_delete_wall_keeps_areas(self, square_graph, commits, selection):
        """Test deleting a wall leaves the room as it was"""
        area_id = square_graph.areas[0].id
        selection.select_wall("w1")

        square_graph.delete_wall("w1")

        assert square_graph.get_wall("w1") is None
        assert len(square_graph.nodes) == 4
        assert [a.id for a in square_graph.areas] == [area_id]
        assert selection.selected_wall_id is None
        assert len(commits) == 1

    def test_delete_wall_prunes_nodes_and_strips_areas(self, square_graph):
        square_graph.delete_wall("w1")
        square_graph.delete_wall("w2")

        assert square_graph.get_node("n2") is None
        assert set(square_graph.areas[0].node_ids) == {"n1", "n3", "n4"}

    def test_split_wall_keeps_surface(self, square_graph, commits):
        before = square_graph.area_surface(square_graph.areas[0].id)

        node_id = square_graph.split_wall("w1", 200, 0)

        assert square_graph.get_wall("w1") is None
        assert len(square_graph.walls) == 5
        assert len(square_graph.areas) == 1
        area = square_graph.areas[0]
        assert node_id in area.node_ids
        assert square_graph.area_surface(area.id) == pytest.approx(before)
        assert len(commits) == 1

    def test_split_wall_without_commit(self, square_graph, commits):
        square_graph.split_wall("w1", 200, 0, commit=False)
        assert commits == []

    def test_confirm_corner_selects_node(self, square_graph, selection):
        selection.select_area(square_graph.areas[0].id)
        node_id = square_graph.confirm_corner("w2", 400, 200)

        assert selection.selected_node_id == node_id
        assert selection.selected_area_id is None


class TestDoorsAndWindows:
    """Tests for insert_door_window"""

    @pytest.fixture
    def straight_wall(self, build_graph):
        """A single 300 unit wall"""
        return build_graph({"a": (0, 0), "b": (300, 0)}, [("a", "b")])

    def test_door_is_centred(self, straight_wall, selection):
        door_id = straight_wall.insert_door_window("w1", "door", 100)

        assert straight_wall.get_wall("w1") is None
        assert len(straight_wall.walls) == 3

        door = straight_wall.get_wall(door_id)
        assert door.type == "door"
        assert door.width == 100
        assert door.door_swing == "left"
        assert door.door_type == "standard"
        assert straight_wall.wall_coordinates(door) == (100, 0, 200, 0)

        lengths = sorted(straight_wall.wall_length(w) for w in straight_wall.walls)
        assert lengths == pytest.approx([100, 100, 100])
        flanks = [w for w in straight_wall.walls if w.id != door_id]
        assert all(w.type == "wall" for w in flanks)
        assert selection.selected_wall_id == door_id

    def test_window_has_no_swing(self, straight_wall):
        window_id = straight_wall.insert_door_window("w1", "window", 80, door_swing="right")

        window = straight_wall.get_wall(window_id)
        assert window.type == "window"
        assert window.door_swing is None
        assert window.door_type is None

    def test_wall_too_short(self, build_graph, commits):
        graph = build_graph({"a": (0, 0), "b": (110, 0)}, [("a", "b")])

        assert graph.insert_door_window("w1", "door", 100) is None
        assert [w.id for w in graph.walls] == ["w1"]
        assert commits == []

    @pytest.mark.parametrize("width", [0, -50])
    def test_non_positive_width(self, straight_wall, commits, width):
        assert straight_wall.insert_door_window("w1", "door", width) is None
        assert [w.id for w in straight_wall.walls] == ["w1"]
        assert commits == []

    def test_door_keeps_room_closed(self, square_graph):
        square_graph.insert_door_window("w1", "door", 90)

        assert len(square_graph.areas) == 1
        assert square_graph.area_surface(square_graph.areas[0].id) == pytest.approx(16.0)


class TestAreas:
    """Tests for area mutations"""

    def test_update_area_survives_redetection(self, square_graph):
        area_id = square_graph.areas[0].id
        square_graph.update_area(area_id, {"name": "Kitchen", "floor_type_id": "wood"})

        square_graph.add_node(1000, 1000)

        area = square_graph.get_area(area_id)
        assert area.name == "Kitchen"
        assert area.floor_type_id == "wood"

    def test_toggle_locks(self, square_graph):
        area_id = square_graph.areas[0].id

        square_graph.toggle_area_size_lock(area_id)
        square_graph.toggle_area_drag_lock(area_id)
        assert square_graph.get_area(area_id).locked_size is True
        assert square_graph.get_area(area_id).locked_dimension is True

        square_graph.toggle_area_size_lock(area_id)
        assert square_graph.get_area(area_id).locked_size is False

    def test_delete_area_keeps_shared_wall(self, two_rooms_graph, area_with):
        left = area_with(two_rooms_graph, "n1")
        right = area_with(two_rooms_graph, "n3")

        two_rooms_graph.delete_area(left.id)

        assert [a.id for a in two_rooms_graph.areas] == [right.id]
        assert two_rooms_graph.get_wall("w7") is not None
        assert two_rooms_graph.get_node("n1") is None
        assert two_rooms_graph.get_node("n6") is None

    def test_delete_only_area_clears_floor(self, square_graph, selection):
        area_id = square_graph.areas[0].id
        selection.select_area(area_id)

        square_graph.delete_area(area_id)

        assert square_graph.areas == []
        assert square_graph.walls == []
        assert square_graph.nodes == []
        assert selection.selected_area_id is None

    def test_area_walls(self, two_rooms_graph, area_with):
        left = area_with(two_rooms_graph, "n1")
        assert sorted(w.id for w in two_rooms_graph.area_walls(left.id)) == ["w1", "w5", "w6", "w7"]

    @pytest.mark.parametrize(
        "template_id, surface",
        [("square", 9.0), ("l-shape", 6.75), ("t-shape", 4.0), ("u-shape", 7.0)],
    )
    def test_templates(self, build_graph, selection, template_id, surface):
        graph = build_graph({}, [])

        area_id = graph.add_area_from_template(template_id, 0, 0, 300)

        assert area_id is not None
        assert graph.area_surface(area_id) == pytest.approx(surface)
        assert selection.selected_area_id == area_id

    def test_unknown_template(self, build_graph, commits):
        graph = build_graph({}, [])
        assert graph.add_area_from_template("hexagon", 0, 0) is None
        assert commits == []


class TestQueries:
    """Tests for picking and outline queries"""

    def test_find_nearby_node_is_strict(self, square_graph):
        assert square_graph.find_nearby_node(19, 0).id == "n1"
        assert square_graph.find_nearby_node(20, 0) is None

    def test_find_closest_wall_point(self, square_graph):
        assert square_graph.find_closest_wall_point(200, 10) == WallPoint("w1", 200, 0)
        assert square_graph.find_closest_wall_point(200, 200) is None

    def test_floor_outline(self, square_graph):
        assert len(square_graph.floor_outline) == 4
        assert square_graph.is_floor_closed

    def test_open_floor_has_no_outline(self, build_graph):
        graph = build_graph({"a": (0, 0), "b": (100, 100), "c": (200, 0)}, [("a", "b"), ("b", "c")])
        assert graph.floor_outline is None
        assert not graph.is_floor_closed
