"""Undo/redo history fed by graph store commits.

Entries are ``FloorSnapshot`` values. Nodes, walls and areas are frozen
dataclasses held in tuples, so later live edits cannot reach back into
an entry.
"""

from __future__ import annotations

from typing import List, Optional

from ..config import HISTORY_CAPACITY
from ..core.model import FloorSnapshot


class History:
    """Linear undo history for one floor.

    Attributes:
        present: Snapshot of the last committed state.
        capacity: Maximum number of entries kept in the undo stack.
    """

    def __init__(self, initial: FloorSnapshot, capacity: int = HISTORY_CAPACITY) -> None:
        self.present = initial
        self.capacity = capacity
        self._past: List[FloorSnapshot] = []
        self._future: List[FloorSnapshot] = []

    def record(self, snapshot: FloorSnapshot) -> None:
        """Commit hook: push ``snapshot`` as the new present state."""
        self._past.append(self.present)
        if len(self._past) > self.capacity:
            self._past.pop(0)
        self.present = snapshot
        self._future = []

    def undo(self) -> Optional[FloorSnapshot]:
        """Step back one entry and return the state to restore, if any."""
        if not self._past:
            return None
        self._future.insert(0, self.present)
        self.present = self._past.pop()
        return self.present

    def redo(self) -> Optional[FloorSnapshot]:
        if not self._future:
            return None
        self._past.append(self.present)
        self.present = self._future.pop(0)
        return self.present

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)
