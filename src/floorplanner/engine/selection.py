"""Selection collaborator.

The graph store tells a selection listener which entity a mutation
created, and clears the selection when the selected entity is deleted.
Selection is exclusive: selecting one entity deselects every other kind.
"""

from __future__ import annotations

from typing import Optional, Protocol


class SelectionListener(Protocol):
    """Interface the graph store notifies about selection changes."""

    selected_wall_id: Optional[str]
    selected_node_id: Optional[str]
    selected_area_id: Optional[str]

    def select_wall(self, wall_id: Optional[str]) -> None:
        ...

    def select_node(self, node_id: Optional[str]) -> None:
        ...

    def select_area(self, area_id: Optional[str]) -> None:
        ...

    def clear_selection(self) -> None:
        ...


class Selection:
    """In-memory selection state."""

    def __init__(self) -> None:
        self.selected_wall_id: Optional[str] = None
        self.selected_node_id: Optional[str] = None
        self.selected_area_id: Optional[str] = None

    def select_wall(self, wall_id: Optional[str]) -> None:
        self.selected_wall_id = wall_id
        if wall_id:
            self.selected_node_id = None
            self.selected_area_id = None

    def select_node(self, node_id: Optional[str]) -> None:
        self.selected_node_id = node_id
        if node_id:
            self.selected_wall_id = None
            self.selected_area_id = None

    def select_area(self, area_id: Optional[str]) -> None:
        self.selected_area_id = area_id
        if area_id:
            self.selected_wall_id = None
            self.selected_node_id = None

    def clear_selection(self) -> None:
        self.selected_wall_id = None
        self.selected_node_id = None
        self.selected_area_id = None
