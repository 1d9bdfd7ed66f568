"""Parser for floor plan JSON files.

This module converts between the camelCase JSON documents written by the
floor editor and the ``Floor`` and ``Layout`` objects of the engine.
Malformed node, wall and area records are logged and skipped so that one
bad entry does not make a whole plan unreadable.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import DEFAULT_FLOOR_TYPE, DEFAULT_WALL_THICKNESS
from ..core.model import STRUCTURE_TYPES, Area, Floor, Node, Wall, generate_id
from ..engine.layout import Layout

LOGGER = logging.getLogger(__name__)

# JSON key -> Wall field, for the optional opening properties
_WALL_OPTIONAL = {
    "doorSwing": "door_swing",
    "doorType": "door_type",
    "width": "width",
    "height": "height",
    "flipped": "flipped",
    "locked": "locked",
}


def _parse_node(data: Dict[str, Any]) -> Node:
    return Node(id=str(data["id"]), x=float(data["x"]), y=float(data["y"]))


def _parse_wall(data: Dict[str, Any]) -> Wall:
    """Build a Wall from its record.

    Raises:
        ValueError: If the structure type is unknown or the wall starts and
            ends at the same node.
    """
    wall_type = data.get("type", "wall")
    if wall_type not in STRUCTURE_TYPES:
        raise ValueError(f"Unknown structure type {wall_type!r}")
    if str(data["startNodeId"]) == str(data["endNodeId"]):
        raise ValueError("Wall starts and ends at the same node")

    optional = {field: data[key] for key, field in _WALL_OPTIONAL.items() if data.get(key) is not None}
    return Wall(
        id=str(data["id"]),
        start_node_id=str(data["startNodeId"]),
        end_node_id=str(data["endNodeId"]),
        thickness=float(data.get("thickness", DEFAULT_WALL_THICKNESS)),
        type=wall_type,
        **optional,
    )


def _parse_area(data: Dict[str, Any]) -> Area:
    node_ids = data["nodeIds"]
    if not isinstance(node_ids, list):
        raise ValueError("nodeIds must be a list")
    if len(node_ids) < 3:
        raise ValueError(f"An area needs at least 3 nodes, got {len(node_ids)}")
    name = data.get("name", "")
    if not isinstance(name, str):
        raise ValueError(f"Area name must be a string, got {type(name).__name__}")

    # Older files store the size lock as "locked"
    locked_size = data.get("lockedSize", data.get("locked", False))

    return Area(
        id=str(data["id"]),
        name=name,
        node_ids=tuple(str(n) for n in node_ids),
        floor_type_id=data.get("floorTypeId", DEFAULT_FLOOR_TYPE),
        visible=bool(data.get("visible", True)),
        locked_size=bool(locked_size),
        locked_dimension=bool(data.get("lockedDimension", False)),
        rotation=data.get("rotation"),
    )


def _parse_records(records: Any, parse, kind: str) -> Dict[str, Any]:
    parsed = {}
    for record in records or []:
        try:
            entity = parse(record)
        except (KeyError, TypeError, ValueError) as e:
            LOGGER.warning("Skipping malformed %s record %r: %s", kind, record, e)
            continue
        parsed[entity.id] = entity
    return parsed


def floor_from_dict(data: Dict[str, Any]) -> Floor:
    """Build a Floor from its JSON document.

    Raises:
        ValueError: If the document is not a JSON object.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Floor data must be an object, got {type(data).__name__}")

    return Floor(
        id=str(data.get("id") or generate_id()),
        name=data.get("name", "Floor 1"),
        level=int(data.get("level", 1)),
        floor_type=data.get("floorType", DEFAULT_FLOOR_TYPE),
        width=data.get("width"),
        height=data.get("height"),
        nodes=_parse_records(data.get("nodes"), _parse_node, "node"),
        walls=_parse_records(data.get("walls"), _parse_wall, "wall"),
        areas=_parse_records(data.get("areas"), _parse_area, "area"),
        fixtures=list(data.get("fixtures") or []),
    )


def floor_to_dict(floor: Floor) -> Dict[str, Any]:
    walls = []
    for wall in floor.walls.values():
        record = {
            "id": wall.id,
            "startNodeId": wall.start_node_id,
            "endNodeId": wall.end_node_id,
            "thickness": wall.thickness,
            "type": wall.type,
        }
        for key, field in _WALL_OPTIONAL.items():
            value = getattr(wall, field)
            if value is not None:
                record[key] = value
        walls.append(record)

    areas = []
    for area in floor.areas.values():
        record = {
            "id": area.id,
            "name": area.name,
            "nodeIds": list(area.node_ids),
            "floorTypeId": area.floor_type_id,
            "visible": area.visible,
            "lockedSize": area.locked_size,
            "lockedDimension": area.locked_dimension,
        }
        if area.rotation is not None:
            record["rotation"] = area.rotation
        areas.append(record)

    return {
        "id": floor.id,
        "name": floor.name,
        "level": floor.level,
        "floorType": floor.floor_type,
        "width": floor.width,
        "height": floor.height,
        "nodes": [{"id": n.id, "x": n.x, "y": n.y} for n in floor.nodes.values()],
        "walls": walls,
        "areas": areas,
        "fixtures": list(floor.fixtures),
    }


def layout_from_dict(data: Dict[str, Any]) -> Layout:
    """Build a Layout from its JSON document.

    A missing or unknown ``currentFloorId`` falls back to the first floor.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Layout data must be an object, got {type(data).__name__}")

    floors = []
    for floor_data in data.get("floors") or []:
        try:
            floors.append(floor_from_dict(floor_data))
        except (TypeError, ValueError) as e:
            LOGGER.warning("Skipping malformed floor record: %s", e)

    current: Optional[str] = data.get("currentFloorId")
    if current not in {f.id for f in floors}:
        current = floors[0].id if floors else None

    return Layout(
        id=str(data.get("id") or generate_id()),
        name=data.get("name", "Layout"),
        width=data.get("width", 0),
        height=data.get("height", 0),
        floor_type=data.get("floorType", DEFAULT_FLOOR_TYPE),
        floors=floors,
        current_floor_id=current,
    )


def layout_to_dict(layout: Layout) -> Dict[str, Any]:
    return {
        "id": layout.id,
        "name": layout.name,
        "width": layout.width,
        "height": layout.height,
        "floorType": layout.floor_type,
        "currentFloorId": layout.current_floor_id,
        "floors": [floor_to_dict(f) for f in layout.floors],
    }


def _read_json(path: str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e


def _write_json(data: Dict[str, Any], path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def load_floor(path: str) -> Floor:
    """Load a floor from a JSON file.

    Args:
        path: Path to the JSON file containing the floor document.

    Returns:
        Floor object representing the plan.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is not valid JSON or not a floor document.
    """
    floor = floor_from_dict(_read_json(path))
    LOGGER.info(
        "Loaded floor %s: %d nodes, %d walls, %d areas",
        floor.id, len(floor.nodes), len(floor.walls), len(floor.areas),
    )
    return floor


def save_floor(floor: Floor, path: str) -> None:
    _write_json(floor_to_dict(floor), path)


def load_layout(path: str) -> Layout:
    """Load a multi-floor layout from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is not valid JSON or not a layout document.
    """
    layout = layout_from_dict(_read_json(path))
    LOGGER.info("Loaded layout %s with %d floors", layout.id, len(layout.floors))
    return layout


def save_layout(layout: Layout, path: str) -> None:
    _write_json(layout_to_dict(layout), path)
