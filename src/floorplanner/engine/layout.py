"""Multi-floor layouts.

A ``Layout`` groups the floors of one plan. Each floor keeps its own undo
history; the selection is shared. Editing always goes through ``graph``,
the store bound to the current floor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..config import DEFAULT_FLOOR_TYPE
from ..core.model import Floor, generate_id
from .history import History
from .selection import Selection
from .store import FloorGraph

LOGGER = logging.getLogger(__name__)

_FLOOR_FIELDS = ("name", "level", "floor_type", "width", "height")


@dataclass
class Layout:
    """A plan made of one or more floors.

    Attributes:
        id: Unique identifier for the layout.
        name: Human-readable name of the layout.
        width: Default floor width in plan units.
        height: Default floor height in plan units.
        floor_type: Default floor covering.
        floors: Floors ordered as they were added.
        current_floor_id: ID of the floor being edited, if any.
    """

    id: str = field(default_factory=generate_id)
    name: str = "Layout"
    width: float = 0
    height: float = 0
    floor_type: str = DEFAULT_FLOOR_TYPE
    floors: List[Floor] = field(default_factory=list)
    current_floor_id: Optional[str] = None
    id_factory: Optional[Callable[[], str]] = field(default=None, repr=False, compare=False)
    selection: Selection = field(default_factory=Selection, init=False, repr=False, compare=False)
    _histories: Dict[str, History] = field(default_factory=dict, init=False, repr=False, compare=False)
    _graph: Optional[FloorGraph] = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def create(
        cls,
        name: str,
        width: float,
        height: float,
        first_floor_name: str = "Floor 1",
        id_factory: Optional[Callable[[], str]] = None,
    ) -> Layout:
        """Create a layout holding a single empty floor at level 1."""
        new_id = id_factory or generate_id
        floor = Floor(id=new_id(), name=first_floor_name, level=1, width=width, height=height)
        layout = cls(
            id=new_id(),
            name=name,
            width=width,
            height=height,
            floors=[floor],
            current_floor_id=floor.id,
            id_factory=id_factory,
        )
        LOGGER.info("Created layout %s with floor %s", layout.name, floor.id)
        return layout

    def get_floor(self, floor_id: str) -> Optional[Floor]:
        return next((f for f in self.floors if f.id == floor_id), None)

    @property
    def current_floor(self) -> Optional[Floor]:
        if self.current_floor_id is None:
            return None
        return self.get_floor(self.current_floor_id)

    def history(self, floor_id: str) -> Optional[History]:
        """Undo history of a floor, started from its present state on first use."""
        floor = self.get_floor(floor_id)
        if floor is None:
            return None
        if floor_id not in self._histories:
            self._histories[floor_id] = History(floor.snapshot())
        return self._histories[floor_id]

    @property
    def graph(self) -> Optional[FloorGraph]:
        """Graph store of the current floor, committing into its history."""
        floor = self.current_floor
        if floor is None:
            return None
        if self._graph is None or self._graph.floor is not floor:
            self._graph = FloorGraph(
                floor,
                on_commit=self.history(floor.id).record,
                selection=self.selection,
                id_factory=self.id_factory,
            )
        return self._graph

    def switch_floor(self, floor_id: str) -> bool:
        if self.get_floor(floor_id) is None:
            LOGGER.warning("Cannot switch to floor %s: not found", floor_id)
            return False
        self.current_floor_id = floor_id
        self.history(floor_id)
        return True

    def add_floor(
        self, name: str, level: int, width: Optional[float] = None, height: Optional[float] = None
    ) -> Optional[str]:
        """Append an empty floor and make it current.

        Returns:
            The new floor id, or None when a floor with ``level`` exists.
        """
        if any(f.level == level for f in self.floors):
            LOGGER.warning("Floor level %s already exists", level)
            return None

        floor = Floor(
            id=(self.id_factory or generate_id)(),
            name=name,
            level=level,
            floor_type=DEFAULT_FLOOR_TYPE,
            width=width or self.width,
            height=height or self.height,
        )
        self.floors.append(floor)
        self.switch_floor(floor.id)
        return floor.id

    def delete_floor(self, floor_id: str) -> None:
        """Remove a floor and its history, moving to another floor if needed."""
        if self.get_floor(floor_id) is None:
            LOGGER.warning("Cannot delete floor %s: not found", floor_id)
            return

        self._histories.pop(floor_id, None)
        self.floors = [f for f in self.floors if f.id != floor_id]

        if self.current_floor_id == floor_id:
            self.current_floor_id = None
            if self.floors:
                self.switch_floor(self.floors[0].id)
            self.selection.clear_selection()

    def update_floor(self, floor_id: str, **updates: Any) -> None:
        """Change floor properties.

        Size changes of the current floor become the layout's default size.
        Floor properties are not part of the undo history.
        """
        floor = self.get_floor(floor_id)
        if floor is None:
            LOGGER.warning("Cannot update floor %s: not found", floor_id)
            return

        for key, value in updates.items():
            if key not in _FLOOR_FIELDS:
                LOGGER.warning("Ignoring unsupported floor field %s", key)
                continue
            setattr(floor, key, value)

        if floor_id == self.current_floor_id:
            if "width" in updates:
                self.width = updates["width"]
            if "height" in updates:
                self.height = updates["height"]

    def undo(self) -> bool:
        graph = self.graph
        if graph is None:
            return False
        snapshot = self.history(graph.floor.id).undo()
        if snapshot is None:
            return False
        graph.restore(snapshot)
        self.selection.clear_selection()
        return True

    def redo(self) -> bool:
        graph = self.graph
        if graph is None:
            return False
        snapshot = self.history(graph.floor.id).redo()
        if snapshot is None:
            return False
        graph.restore(snapshot)
        self.selection.clear_selection()
        return True

    @property
    def can_undo(self) -> bool:
        floor = self.current_floor
        return floor is not None and self.history(floor.id).can_undo

    @property
    def can_redo(self) -> bool:
        floor = self.current_floor
        return floor is not None and self.history(floor.id).can_redo

    @property
    def total_surface_area(self) -> float:
        """Sum of width times height over all floors, in plan units squared."""
        return sum((f.width or 0) * (f.height or 0) for f in self.floors)
