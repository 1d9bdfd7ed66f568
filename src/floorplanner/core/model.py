"""Core data models for floor planning.

This module defines the fundamental data structures used to represent
a floor plan as a planar graph: nodes (wall corners), walls (edges that
may also be doors or windows) and areas (enclosed faces shown as rooms).

Entities only reference each other by id. A ``Floor`` owns one id-keyed
map per entity kind, and every cross-entity lookup goes through it.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..config import DEFAULT_FLOOR_TYPE, DEFAULT_WALL_THICKNESS

STRUCTURE_TYPES = ("wall", "door", "window")
DOOR_SWINGS = ("left", "right", "sliding")
DOOR_TYPES = ("entrance", "exit", "standard")


def generate_id() -> str:
    """Return a fresh random entity id."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Node:
    """Represents a graph vertex (a wall corner).

    Attributes:
        id: Unique identifier for the node.
        x: The x-coordinate in plan units (cm).
        y: The y-coordinate in plan units (cm), growing downwards.
    """

    id: str
    x: float
    y: float


@dataclass(frozen=True)
class Wall:
    """Represents a wall, door or window segment between two nodes.

    Attributes:
        id: Unique identifier for the wall.
        start_node_id: ID of the node the wall starts at.
        end_node_id: ID of the node the wall ends at.
        thickness: Wall thickness in plan units.
        type: One of "wall", "door" or "window".
        door_swing: Swing of a door ("left", "right" or "sliding").
        door_type: Role of a door ("entrance", "exit" or "standard").
        width: Opening width for doors and windows.
        height: Height of the segment, if known.
        flipped: Whether the opening is drawn mirrored.
        locked: Whether the segment is locked against editing.
    """

    id: str
    start_node_id: str
    end_node_id: str
    thickness: float = DEFAULT_WALL_THICKNESS
    type: str = "wall"
    door_swing: str | None = None
    door_type: str | None = None
    width: float | None = None
    height: float | None = None
    flipped: bool | None = None
    locked: bool | None = None

    @property
    def pair(self) -> frozenset:
        """Unordered endpoint pair, used to detect duplicate walls."""
        return frozenset((self.start_node_id, self.end_node_id))

    @property
    def is_degenerate(self) -> bool:
        return self.start_node_id == self.end_node_id

    def touches(self, node_id: str) -> bool:
        return self.start_node_id == node_id or self.end_node_id == node_id

    def other_end(self, node_id: str) -> str:
        """Return the endpoint opposite to ``node_id``."""
        return self.end_node_id if self.start_node_id == node_id else self.start_node_id

    def connects(self, a: str, b: str) -> bool:
        return self.pair == frozenset((a, b))


@dataclass(frozen=True)
class Area:
    """Represents an enclosed face of the wall graph, displayed as a room.

    Attributes:
        id: Unique identifier for the area.
        name: Human-readable name of the area.
        node_ids: Ordered node ids forming the polygon boundary.
        floor_type_id: Floor covering assigned by the user.
        visible: Whether the area is shown.
        locked_size: Whether the area size is locked.
        locked_dimension: Whether dragging the area is locked.
        rotation: Texture rotation in degrees.
    """

    id: str
    name: str
    node_ids: Tuple[str, ...]
    floor_type_id: str = DEFAULT_FLOOR_TYPE
    visible: bool = True
    locked_size: bool = False
    locked_dimension: bool = False
    rotation: float | None = None

    @property
    def node_set(self) -> frozenset:
        return frozenset(self.node_ids)

    def bounds_wall(self, wall: Wall) -> bool:
        """Whether both wall endpoints belong to this area."""
        return wall.start_node_id in self.node_set and wall.end_node_id in self.node_set


@dataclass(frozen=True)
class FloorSnapshot:
    """Immutable value copy of a floor's graph, taken at commit points."""

    nodes: Tuple[Node, ...]
    walls: Tuple[Wall, ...]
    areas: Tuple[Area, ...]
    fixtures: Tuple[Dict[str, Any], ...]


@dataclass
class Floor:
    """A single storey of a layout, owning its nodes, walls and areas.

    Attributes:
        id: Unique identifier for the floor.
        name: Human-readable name of the floor.
        level: Storey number.
        floor_type: Default floor covering for newly detected areas.
        width: Floor width in plan units, if known.
        height: Floor height in plan units, if known.
        nodes: Mapping of node ID to Node objects.
        walls: Mapping of wall ID to Wall objects.
        areas: Mapping of area ID to Area objects.
        fixtures: Opaque fixture records, never interpreted here.
    """

    id: str = field(default_factory=generate_id)
    name: str = "Floor 1"
    level: int = 1
    floor_type: str = DEFAULT_FLOOR_TYPE
    width: float | None = None
    height: float | None = None
    nodes: Dict[str, Node] = field(default_factory=dict)
    walls: Dict[str, Wall] = field(default_factory=dict)
    areas: Dict[str, Area] = field(default_factory=dict)
    fixtures: List[Dict[str, Any]] = field(default_factory=list)

    def referenced_node_ids(self) -> set:
        """Ids of all nodes used by at least one wall."""
        used = set()
        for wall in self.walls.values():
            used.add(wall.start_node_id)
            used.add(wall.end_node_id)
        return used

    def snapshot(self) -> FloorSnapshot:
        return FloorSnapshot(
            nodes=tuple(self.nodes.values()),
            walls=tuple(self.walls.values()),
            areas=tuple(self.areas.values()),
            fixtures=tuple(copy.deepcopy(self.fixtures)),
        )

    def restore(self, snapshot: FloorSnapshot) -> None:
        """Replace the live graph with the content of ``snapshot``."""
        self.nodes = {node.id: node for node in snapshot.nodes}
        self.walls = {wall.id: wall for wall in snapshot.walls}
        self.areas = {area.id: area for area in snapshot.areas}
        self.fixtures = copy.deepcopy(list(snapshot.fixtures))
