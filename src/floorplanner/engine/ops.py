"""Operations engine for floor editing.

This module exposes the graph store mutations as named operations so that
they can be scripted: every operation validates its parameters against
the current floor in ``precheck`` and performs the mutation in ``apply``.
Structure types are passed as ``kind`` because ``type`` names the
operation itself in a script.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from ..config import DEFAULT_TEMPLATE_SIZE, OPENING_LENGTH_SLACK
from ..core.model import STRUCTURE_TYPES
from .store import FloorGraph
from .templates import AREA_TEMPLATES


class InvalidOperation(Exception):
    """Raised when an operation cannot be applied to the current floor."""

    pass


class Operation(Protocol):
    """Protocol for floor editing operations.

    All operations must implement this interface to be compatible
    with the operation registry and execution engine.
    """

    def precheck(self, graph: FloorGraph, **kwargs: Any) -> bool:
        """Validate that the operation can be applied to the floor.

        Args:
            graph: The graph store to validate against.
            **kwargs: Operation-specific parameters.

        Returns:
            True if the operation can be applied, False otherwise.

        Raises:
            InvalidOperation: If validation fails with a specific reason.
        """
        ...

    def apply(self, graph: FloorGraph, **kwargs: Any) -> Any:
        """Apply the operation, mutating the graph store in place.

        Args:
            graph: The graph store to modify.
            **kwargs: Operation-specific parameters.

        Returns:
            The id of the created entity where there is one, else None.
        """
        ...


def _require_node(graph: FloorGraph, node: str) -> None:
    if graph.get_node(node) is None:
        raise InvalidOperation(f"Node '{node}' does not exist")


def _require_wall(graph: FloorGraph, wall: str) -> None:
    if graph.get_wall(wall) is None:
        raise InvalidOperation(f"Wall '{wall}' does not exist")


def _require_area(graph: FloorGraph, area: str) -> None:
    if graph.get_area(area) is None:
        raise InvalidOperation(f"Area '{area}' does not exist")


def _require_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Parameter '{name}' must be a number, got {value!r}")


class AddNodeOp:
    """Operation to add a free node at a position."""

    def precheck(self, graph: FloorGraph, x: float, y: float, **kwargs: Any) -> bool:
        _require_number("x", x)
        _require_number("y", y)
        return True

    def apply(self, graph: FloorGraph, x: float, y: float, **kwargs: Any) -> str:
        return graph.add_node(x, y)


class UpdateNodeOp:
    """Operation to move a node.

    Only the given coordinates change; areas keep their identity since the
    topology is untouched.
    """

    def precheck(
        self, graph: FloorGraph, node: str, x: Optional[float] = None, y: Optional[float] = None, **kwargs: Any
    ) -> bool:
        _require_node(graph, node)
        for name, value in (("x", x), ("y", y)):
            if value is not None:
                _require_number(name, value)
        return True

    def apply(
        self, graph: FloorGraph, node: str, x: Optional[float] = None, y: Optional[float] = None, **kwargs: Any
    ) -> str:
        updates = {k: v for k, v in (("x", x), ("y", y)) if v is not None}
        graph.update_node(node, updates)
        return node


class AddWallOp:
    """Operation to connect two nodes with a wall, door or window."""

    def precheck(self, graph: FloorGraph, start: str, end: str, kind: str = "wall", **kwargs: Any) -> bool:
        """Validate that the wall can be added.

        Raises:
            InvalidOperation: If a node is missing, both ends are the same
                node or the structure kind is unknown.
        """
        _require_node(graph, start)
        _require_node(graph, end)
        if start == end:
            raise InvalidOperation(f"Cannot connect node '{start}' to itself")
        if kind not in STRUCTURE_TYPES:
            raise InvalidOperation(f"Unknown structure kind '{kind}'")
        return True

    def apply(self, graph: FloorGraph, start: str, end: str, kind: str = "wall", **kwargs: Any) -> Optional[str]:
        return graph.add_wall(start, end, kind)


class UpdateWallOp:
    """Operation to change wall properties (thickness, opening details)."""

    def precheck(self, graph: FloorGraph, wall: str, kind: Optional[str] = None, **updates: Any) -> bool:
        _require_wall(graph, wall)
        if kind is not None and kind not in STRUCTURE_TYPES:
            raise InvalidOperation(f"Unknown structure kind '{kind}'")
        return True

    def apply(self, graph: FloorGraph, wall: str, kind: Optional[str] = None, **updates: Any) -> str:
        if kind is not None:
            updates["type"] = kind
        graph.update_wall(wall, updates)
        return wall


class DeleteWallOp:
    def precheck(self, graph: FloorGraph, wall: str, **kwargs: Any) -> bool:
        _require_wall(graph, wall)
        return True

    def apply(self, graph: FloorGraph, wall: str, **kwargs: Any) -> None:
        graph.delete_wall(wall)


class DeleteNodeOp:
    def precheck(self, graph: FloorGraph, node: str, **kwargs: Any) -> bool:
        _require_node(graph, node)
        return True

    def apply(self, graph: FloorGraph, node: str, **kwargs: Any) -> None:
        graph.delete_node(node)


class SplitWallOp:
    """Operation to insert a node on a wall, replacing it by two halves."""

    def precheck(self, graph: FloorGraph, wall: str, x: float, y: float, **kwargs: Any) -> bool:
        _require_wall(graph, wall)
        _require_number("x", x)
        _require_number("y", y)
        return True

    def apply(self, graph: FloorGraph, wall: str, x: float, y: float, **kwargs: Any) -> Optional[str]:
        return graph.split_wall(wall, x, y)


class DeleteAreaOp:
    def precheck(self, graph: FloorGraph, area: str, **kwargs: Any) -> bool:
        _require_area(graph, area)
        return True

    def apply(self, graph: FloorGraph, area: str, **kwargs: Any) -> None:
        graph.delete_area(area)


class UpdateAreaOp:
    """Operation to rename an area or change its floor type and flags."""

    def precheck(self, graph: FloorGraph, area: str, **updates: Any) -> bool:
        _require_area(graph, area)
        return True

    def apply(self, graph: FloorGraph, area: str, **updates: Any) -> str:
        graph.update_area(area, updates)
        return area


class InsertDoorWindowOp:
    """Operation to cut a centred door or window into a wall."""

    def precheck(
        self, graph: FloorGraph, wall: str, kind: str, width: float, **kwargs: Any
    ) -> bool:
        """Validate that the opening fits into the wall.

        Args:
            graph: The graph store containing the wall.
            wall: ID of the wall receiving the opening.
            kind: "door" or "window".
            width: Opening width in plan units.
            **kwargs: Additional parameters (door_swing, door_type).

        Returns:
            True if the opening can be inserted.

        Raises:
            InvalidOperation: If the wall doesn't exist, the kind is not an
                opening, or the wall is too short.
        """
        _require_wall(graph, wall)
        if kind not in ("door", "window"):
            raise InvalidOperation(f"Cannot insert an opening of kind '{kind}'")
        _require_number("width", width)
        if width <= 0:
            raise InvalidOperation(f"Opening width must be positive, got {width}")

        length = graph.wall_length(graph.get_wall(wall))
        if length < width + OPENING_LENGTH_SLACK:
            raise InvalidOperation(
                f"Wall '{wall}' is too short for a {kind} of width {width}. "
                f"Length {length:.1f} < required {width + OPENING_LENGTH_SLACK}"
            )
        return True

    def apply(
        self,
        graph: FloorGraph,
        wall: str,
        kind: str,
        width: float,
        door_swing: Optional[str] = None,
        door_type: Optional[str] = None,
        **kwargs: Any,
    ) -> Optional[str]:
        return graph.insert_door_window(wall, kind, width, door_swing=door_swing, door_type=door_type)


class MergeAreasOp:
    """Operation to merge two overlapping or touching areas."""

    def precheck(self, graph: FloorGraph, a: str, b: str, **kwargs: Any) -> bool:
        _require_area(graph, a)
        _require_area(graph, b)
        if a == b:
            raise InvalidOperation(f"Cannot merge area '{a}' with itself")
        return True

    def apply(self, graph: FloorGraph, a: str, b: str, **kwargs: Any) -> bool:
        return graph.merge_areas(a, b)


class AddAreaFromTemplateOp:
    """Operation to drop a template room shape at a position."""

    def precheck(
        self, graph: FloorGraph, template: str, x: float, y: float, size: float = DEFAULT_TEMPLATE_SIZE, **kwargs: Any
    ) -> bool:
        if template not in AREA_TEMPLATES:
            raise InvalidOperation(
                f"Unknown template '{template}'. Available: {', '.join(AREA_TEMPLATES)}"
            )
        _require_number("x", x)
        _require_number("y", y)
        _require_number("size", size)
        if size <= 0:
            raise InvalidOperation(f"Template size must be positive, got {size}")
        return True

    def apply(
        self, graph: FloorGraph, template: str, x: float, y: float, size: float = DEFAULT_TEMPLATE_SIZE, **kwargs: Any
    ) -> Optional[str]:
        return graph.add_area_from_template(template, x, y, size)


# Operation registry
_OPERATIONS: Dict[str, Operation] = {
    "add_node": AddNodeOp(),
    "update_node": UpdateNodeOp(),
    "add_wall": AddWallOp(),
    "update_wall": UpdateWallOp(),
    "delete_wall": DeleteWallOp(),
    "delete_node": DeleteNodeOp(),
    "split_wall": SplitWallOp(),
    "delete_area": DeleteAreaOp(),
    "update_area": UpdateAreaOp(),
    "insert_door_window": InsertDoorWindowOp(),
    "merge_areas": MergeAreasOp(),
    "add_area_from_template": AddAreaFromTemplateOp(),
}


def register_operation(name: str, operation: Operation) -> None:
    """Register a new operation in the registry.

    Args:
        name: Name of the operation.
        operation: Operation instance to register.
    """
    _OPERATIONS[name] = operation


def get_operation(name: str) -> Operation:
    """Get an operation by name.

    Raises:
        KeyError: If the operation is not registered.
    """
    if name not in _OPERATIONS:
        raise KeyError(f"Operation '{name}' is not registered")
    return _OPERATIONS[name]


def list_operations() -> List[str]:
    return list(_OPERATIONS.keys())
