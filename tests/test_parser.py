# Floor planner imports
from floorplanner.core.model import Wall
from floorplanner.engine.layout import Layout
from floorplanner.io.parser import (
    floor_from_dict,
    floor_to_dict,
    layout_from_dict,
    layout_to_dict,
    load_floor,
    load_layout,
    save_floor,
    save_layout,
)

# Third-party imports
import pytest


@pytest.fixture
def floor_document():
    """A floor document as written by the editor"""
    return {
        "id": "f1",
        "name": "Ground",
        "level": 0,
        "floorType": "wood",
        "width": 800,
        "height": 600,
        "nodes": [
            {"id": "n1", "x": 0, "y": 0},
            {"id": "n2", "x": 300, "y": 0},
            {"id": "n3", "x": 300, "y": 300},
        ],
        "walls": [
            {"id": "w1", "startNodeId": "n1", "endNodeId": "n2", "thickness": 15, "type": "wall"},
            {
                "id": "w2",
                "startNodeId": "n2",
                "endNodeId": "n3",
                "type": "door",
                "doorSwing": "right",
                "doorType": "entrance",
                "width": 90,
            },
        ],
        "areas": [
            {
                "id": "a1",
                "name": "Hall",
                "nodeIds": ["n1", "n2", "n3"],
                "floorTypeId": "tiles",
                "visible": False,
                "lockedSize": True,
                "lockedDimension": True,
                "rotation": 90,
            }
        ],
        "fixtures": [{"id": "sofa", "x": 10}],
    }


class TestFloorDocuments:
    """Tests for converting floors to and from JSON documents"""

    def test_parse(self, floor_document):
        floor = floor_from_dict(floor_document)

        assert floor.name == "Ground"
        assert floor.level == 0
        assert floor.floor_type == "wood"
        assert floor.nodes["n2"].x == 300
        assert floor.walls["w1"].thickness == 15
        door = floor.walls["w2"]
        assert door.door_swing == "right"
        assert door.door_type == "entrance"
        assert door.width == 90
        assert door.thickness == 20
        area = floor.areas["a1"]
        assert area.node_ids == ("n1", "n2", "n3")
        assert area.floor_type_id == "tiles"
        assert area.visible is False
        assert area.locked_size is True
        assert area.rotation == 90
        assert floor.fixtures == [{"id": "sofa", "x": 10}]

    def test_round_trip(self, floor_document):
        floor = floor_from_dict(floor_document)
        assert floor_from_dict(floor_to_dict(floor)) == floor

    def test_camel_case_keys(self, floor_document):
        data = floor_to_dict(floor_from_dict(floor_document))

        wall = data["walls"][1]
        assert wall["startNodeId"] == "n2"
        assert wall["doorSwing"] == "right"
        assert "door_swing" not in wall
        assert "flipped" not in wall
        assert data["areas"][0]["lockedDimension"] is True
        assert data["floorType"] == "wood"

    def test_legacy_locked_flag(self):
        floor = floor_from_dict({"areas": [{"id": "a1", "nodeIds": ["n1", "n2", "n3"], "locked": True}]})
        assert floor.areas["a1"].locked_size is True

    def test_defaults(self):
        floor = floor_from_dict({"walls": [{"id": "w1", "startNodeId": "a", "endNodeId": "b"}]})

        assert floor.walls["w1"] == Wall("w1", "a", "b")
        assert floor.name == "Floor 1"
        assert floor.id

    def test_malformed_records_skipped(self):
        floor = floor_from_dict(
            {
                "nodes": [{"id": "n1", "x": 0, "y": 0}, {"id": "n2", "x": "left", "y": 0}, {"x": 1}],
                "walls": [{"id": "w1", "startNodeId": "n1"}],
                "areas": [{"id": "a1", "nodeIds": "n1"}],
            }
        )

        assert list(floor.nodes) == ["n1"]
        assert floor.walls == {}
        assert floor.areas == {}

    def test_wrongly_shaped_records_skipped(self):
        floor = floor_from_dict(
            {
                "walls": [
                    {"id": "w1", "startNodeId": "a", "endNodeId": "b", "type": "arch"},
                    {"id": "w2", "startNodeId": "a", "endNodeId": "a"},
                    {"id": "w3", "startNodeId": "a", "endNodeId": "b", "type": "window"},
                ],
                "areas": [
                    {"id": "a1", "nodeIds": ["a"]},
                    {"id": "a2", "nodeIds": ["a", "b", "c"], "name": 5},
                    {"id": "a3", "nodeIds": ["a", "b", "c"], "name": "Hall"},
                ],
            }
        )

        assert list(floor.walls) == ["w3"]
        assert list(floor.areas) == ["a3"]

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            floor_from_dict([1, 2, 3])


class TestFiles:
    """Tests for reading and writing plan files"""

    def test_save_and_load_floor(self, floor_document, tmp_path):
        floor = floor_from_dict(floor_document)
        path = tmp_path / "plans" / "ground.json"

        save_floor(floor, str(path))

        assert path.exists()
        assert load_floor(str(path)) == floor

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_floor(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError):
            load_floor(str(path))


class TestLayoutDocuments:
    """Tests for multi-floor layout documents"""

    def test_round_trip(self, id_factory, tmp_path):
        layout = Layout.create("House", 1000, 800, id_factory=id_factory)
        layout.add_floor("Upstairs", 2)
        layout.graph.add_node(5, 5)
        path = tmp_path / "house.json"

        save_layout(layout, str(path))
        loaded = load_layout(str(path))

        assert loaded.name == "House"
        assert [f.name for f in loaded.floors] == ["Floor 1", "Upstairs"]
        assert loaded.current_floor_id == layout.current_floor_id
        assert loaded.floors == layout.floors

    def test_unknown_current_floor_falls_back(self):
        layout = layout_from_dict(
            {"name": "House", "currentFloorId": "gone", "floors": [{"id": "f1"}, {"id": "f2", "level": 2}]}
        )

        assert layout.current_floor_id == "f1"

    def test_document_keys(self, id_factory):
        data = layout_to_dict(Layout.create("House", 1000, 800, id_factory=id_factory))

        assert data["currentFloorId"] == data["floors"][0]["id"]
        assert data["floorType"] == "default"
