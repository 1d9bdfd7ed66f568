"""Planar graph store for the active floor.

``FloorGraph`` owns the authoritative nodes, walls and areas of one floor
and exposes the mutation primitives of the editor. Structural mutations
re-run area detection and reconciliation before committing; positional and
property updates do not, since they leave the topology untouched.

Every public mutation ends with at most one ``commit()``, which hands a
value snapshot of the floor to the ``on_commit`` hook (typically a
``History``). Composite operations defer their sub-steps' commits and
commit once at the end.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ..config import (
    CLOSEST_WALL_THRESHOLD,
    DEFAULT_TEMPLATE_SIZE,
    DEFAULT_WALL_THICKNESS,
    GRID_SIZE,
    NEARBY_NODE_THRESHOLD,
    OPENING_LENGTH_SLACK,
    OPENING_MIN_MARGIN,
)
from ..core.model import STRUCTURE_TYPES, Area, Floor, FloorSnapshot, Node, Wall, generate_id
from ..core.topology import floor_outline
from ..geom.detection import detect_areas
from ..geom.polygon import area_surface
from ..geom.primitives import closest_point_on_segment, point_distance, snap_to_grid
from ..geom.reconcile import reconcile_areas
from .selection import SelectionListener
from .templates import AREA_TEMPLATES

LOGGER = logging.getLogger(__name__)

CommitHook = Callable[[FloorSnapshot], None]

_NODE_FIELDS = ("x", "y")
_WALL_FIELDS = ("thickness", "type", "door_swing", "door_type", "width", "height", "flipped", "locked")
_AREA_FIELDS = ("name", "floor_type_id", "visible", "locked_size", "locked_dimension", "rotation")


@dataclass(frozen=True)
class WallPoint:
    """The closest point on a wall to a query position."""

    wall_id: str
    x: float
    y: float


def _filter_updates(kind: str, entity_id: str, updates: Mapping[str, Any], allowed: Tuple[str, ...]) -> dict:
    accepted = {k: v for k, v in updates.items() if k in allowed}
    ignored = sorted(set(updates) - set(accepted))
    if ignored:
        LOGGER.warning("Ignoring unsupported %s fields for %s: %s", kind, entity_id, ", ".join(ignored))
    return accepted


class FloorGraph:
    """Mutable wall graph of a single floor.

    Args:
        floor: Floor whose collections are edited in place.
        on_commit: Called with a snapshot at every commit point.
        selection: Notified about created and deleted entities.
        id_factory: Generator for new entity ids.
    """

    def __init__(
        self,
        floor: Optional[Floor] = None,
        *,
        on_commit: Optional[CommitHook] = None,
        selection: Optional[SelectionListener] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.floor = floor if floor is not None else Floor()
        self.on_commit = on_commit
        self.selection = selection
        self._new_id = id_factory or generate_id

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    @property
    def nodes(self) -> List[Node]:
        return list(self.floor.nodes.values())

    @property
    def walls(self) -> List[Wall]:
        return list(self.floor.walls.values())

    @property
    def areas(self) -> List[Area]:
        return list(self.floor.areas.values())

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.floor.nodes.get(node_id)

    def get_wall(self, wall_id: str) -> Optional[Wall]:
        return self.floor.walls.get(wall_id)

    def get_area(self, area_id: str) -> Optional[Area]:
        return self.floor.areas.get(area_id)

    def node_position(self, node_id: str) -> Optional[Tuple[float, float]]:
        node = self.floor.nodes.get(node_id)
        return (node.x, node.y) if node else None

    def wall_coordinates(self, wall: Wall) -> Optional[Tuple[float, float, float, float]]:
        """Return ``(x1, y1, x2, y2)`` of a wall, or None if an endpoint is missing."""
        start = self.floor.nodes.get(wall.start_node_id)
        end = self.floor.nodes.get(wall.end_node_id)
        if start is None or end is None:
            return None
        return (start.x, start.y, end.x, end.y)

    def wall_length(self, wall: Wall) -> float:
        coords = self.wall_coordinates(wall)
        if coords is None:
            return 0.0
        return point_distance(*coords)

    def find_wall_between(self, a: str, b: str) -> Optional[Wall]:
        """Find the wall connecting the unordered node pair ``a``, ``b``."""
        return next((w for w in self.floor.walls.values() if w.connects(a, b)), None)

    def area_walls(self, area_id: str) -> List[Wall]:
        """Walls whose two endpoints both belong to the area."""
        area = self.floor.areas.get(area_id)
        if area is None:
            return []
        return [w for w in self.floor.walls.values() if area.bounds_wall(w)]

    def find_nearby_node(self, x: float, y: float, threshold: float = NEARBY_NODE_THRESHOLD) -> Optional[Node]:
        """First node (in floor order) strictly closer than ``threshold``."""
        for node in self.floor.nodes.values():
            if point_distance(node.x, node.y, x, y) < threshold:
                return node
        return None

    def find_closest_wall_point(
        self, x: float, y: float, threshold: float = CLOSEST_WALL_THRESHOLD
    ) -> Optional[WallPoint]:
        """Closest point on any wall within ``threshold`` of ``(x, y)``."""
        closest = threshold
        result = None
        for wall in self.floor.walls.values():
            coords = self.wall_coordinates(wall)
            if coords is None:
                continue
            fx, fy = closest_point_on_segment(x, y, *coords)
            dist = point_distance(x, y, fx, fy)
            if dist < closest:
                closest = dist
                result = WallPoint(wall.id, fx, fy)
        return result

    def area_surface(self, area_id: str) -> float:
        """Surface of an area in square metres."""
        return area_surface(self.floor, area_id)

    @property
    def floor_outline(self) -> Optional[List[Tuple[float, float]]]:
        return floor_outline(self.floor)

    @property
    def is_floor_closed(self) -> bool:
        return self.floor_outline is not None

    # ------------------------------------------------------------------ #
    # Detection and commit
    # ------------------------------------------------------------------ #

    def recalculate_areas(self) -> None:
        """Re-detect faces and reconcile them with the current areas."""
        cycles = detect_areas(self.floor.nodes.values(), self.floor.walls.values())
        areas = reconcile_areas(
            list(self.floor.areas.values()),
            cycles,
            set(self.floor.nodes),
            default_floor_type=self.floor.floor_type,
            id_factory=self._new_id,
        )
        self.floor.areas = {area.id: area for area in areas}

    def commit(self) -> FloorSnapshot:
        """Mark the current state as durable and hand it to the commit hook."""
        snapshot = self.floor.snapshot()
        if self.on_commit is not None:
            self.on_commit(snapshot)
        return snapshot

    def restore(self, snapshot: FloorSnapshot) -> None:
        """Load a previously committed snapshot into the live floor."""
        self.floor.restore(snapshot)

    def _prune_orphaned_nodes(self) -> set:
        """Drop nodes no wall references and return their ids."""
        used = self.floor.referenced_node_ids()
        removed = {node_id for node_id in self.floor.nodes if node_id not in used}
        self.floor.nodes = {k: v for k, v in self.floor.nodes.items() if k in used}
        return removed

    # ------------------------------------------------------------------ #
    # Nodes
    # ------------------------------------------------------------------ #

    def add_node(self, x: float, y: float) -> str:
        node = Node(id=self._new_id(), x=x, y=y)
        self.floor.nodes[node.id] = node
        LOGGER.debug("Added node %s at (%s, %s)", node.id, x, y)
        self.recalculate_areas()
        self.commit()
        return node.id

    def update_node(self, node_id: str, updates: Mapping[str, Any], commit: bool = True) -> None:
        """Move a node. Topology is unchanged, so areas are not re-detected."""
        node = self.floor.nodes.get(node_id)
        if node is None:
            LOGGER.warning("Cannot update node %s: not found", node_id)
            return

        accepted = _filter_updates("node", node_id, updates, _NODE_FIELDS)
        self.floor.nodes[node_id] = dataclasses.replace(node, **accepted)
        if commit:
            self.commit()

    def delete_node(self, node_id: str) -> None:
        """Delete a node, bridging it when it sits in the middle of a wall run.

        With exactly two walls touching the node they are replaced by one wall
        between the far endpoints, keeping the first wall's properties.
        Otherwise every touching wall is dropped.
        """
        if node_id not in self.floor.nodes:
            LOGGER.warning("Cannot delete node %s: not found", node_id)
            return

        connected = [w for w in self.floor.walls.values() if w.touches(node_id)]

        if len(connected) == 2:
            w1, w2 = connected
            n1 = w1.other_end(node_id)
            n2 = w2.other_end(node_id)
            for wall in connected:
                del self.floor.walls[wall.id]

            if n1 != n2 and self.find_wall_between(n1, n2) is None:
                bridge = Wall(
                    id=self._new_id(),
                    start_node_id=n1,
                    end_node_id=n2,
                    thickness=w1.thickness,
                    type=w1.type,
                    height=w1.height,
                )
                self.floor.walls[bridge.id] = bridge
                LOGGER.debug("Bridged node %s with wall %s", node_id, bridge.id)
        else:
            for wall in connected:
                del self.floor.walls[wall.id]

        del self.floor.nodes[node_id]

        self.recalculate_areas()
        self.commit()

        if self.selection is not None and self.selection.selected_node_id == node_id:
            self.selection.select_node(None)

    # ------------------------------------------------------------------ #
    # Walls
    # ------------------------------------------------------------------ #

    def add_wall(self, start_node_id: str, end_node_id: str, type: str = "wall") -> Optional[str]:
        """Connect two nodes, or retarget the wall already connecting them."""
        if start_node_id not in self.floor.nodes or end_node_id not in self.floor.nodes:
            LOGGER.warning("Cannot add wall %s -> %s: missing node", start_node_id, end_node_id)
            return None
        if start_node_id == end_node_id:
            LOGGER.warning("Cannot add a wall from node %s to itself", start_node_id)
            return None
        if type not in STRUCTURE_TYPES:
            LOGGER.warning("Unknown structure type %r, using 'wall'", type)
            type = "wall"

        door_swing = "left" if type == "door" else None
        existing = self.find_wall_between(start_node_id, end_node_id)

        if existing is not None:
            self.floor.walls[existing.id] = dataclasses.replace(
                existing, type=type, thickness=DEFAULT_WALL_THICKNESS, door_swing=door_swing
            )
            self.commit()
            if self.selection is not None:
                self.selection.select_wall(existing.id)
            return existing.id

        wall = Wall(
            id=self._new_id(),
            start_node_id=start_node_id,
            end_node_id=end_node_id,
            thickness=DEFAULT_WALL_THICKNESS,
            type=type,
            door_swing=door_swing,
        )
        self.floor.walls[wall.id] = wall
        LOGGER.debug("Added %s %s between %s and %s", type, wall.id, start_node_id, end_node_id)
        self.recalculate_areas()
        self.commit()
        if self.selection is not None:
            self.selection.select_wall(wall.id)
        return wall.id

    def update_wall(self, wall_id: str, updates: Mapping[str, Any], commit: bool = True) -> None:
        """Change wall properties without touching its endpoints."""
        wall = self.floor.walls.get(wall_id)
        if wall is None:
            LOGGER.warning("Cannot update wall %s: not found", wall_id)
            return

        accepted = _filter_updates("wall", wall_id, updates, _WALL_FIELDS)
        self.floor.walls[wall_id] = dataclasses.replace(wall, **accepted)
        if commit:
            self.commit()

    def delete_wall(self, wall_id: str) -> None:
        """Remove a wall and the nodes it leaves unreferenced.

        Areas are not re-detected: removed node ids are only stripped from
        the areas, so a room whose loop was opened keeps its floor.
        """
        if wall_id not in self.floor.walls:
            LOGGER.warning("Cannot delete wall %s: not found", wall_id)
            return

        del self.floor.walls[wall_id]
        removed = self._prune_orphaned_nodes()

        if removed:
            for area in list(self.floor.areas.values()):
                kept = tuple(n for n in area.node_ids if n not in removed)
                if kept != area.node_ids:
                    self.floor.areas[area.id] = dataclasses.replace(area, node_ids=kept)

        self.commit()

        if self.selection is not None and self.selection.selected_wall_id == wall_id:
            self.selection.select_wall(None)

    def split_wall(self, wall_id: str, x: float, y: float, commit: bool = True) -> Optional[str]:
        """Insert a node at ``(x, y)`` and replace the wall by two halves.

        Args:
            wall_id: Wall to split.
            x: X coordinate of the new node.
            y: Y coordinate of the new node.
            commit: Whether to commit; composite operations pass False and
                commit once themselves.

        Returns:
            The id of the new node, or None if the wall does not exist.
        """
        old = self.floor.walls.get(wall_id)
        if old is None:
            LOGGER.warning("Cannot split wall %s: not found", wall_id)
            return None

        node = Node(id=self._new_id(), x=x, y=y)
        self.floor.nodes[node.id] = node

        first = Wall(
            id=self._new_id(),
            start_node_id=old.start_node_id,
            end_node_id=node.id,
            thickness=old.thickness,
            type=old.type,
            height=old.height,
        )
        second = Wall(
            id=self._new_id(),
            start_node_id=node.id,
            end_node_id=old.end_node_id,
            thickness=old.thickness,
            type=old.type,
            height=old.height,
        )
        self.floor.walls[first.id] = first
        self.floor.walls[second.id] = second
        del self.floor.walls[wall_id]
        LOGGER.debug("Split wall %s at (%s, %s) into %s and %s", wall_id, x, y, first.id, second.id)

        self.recalculate_areas()
        if commit:
            self.commit()
        return node.id

    def confirm_corner(self, wall_id: str, x: float, y: float) -> Optional[str]:
        """Split a wall at a picked corner position and select the new node."""
        node_id = self.split_wall(wall_id, x, y)
        if node_id and self.selection is not None:
            self.selection.select_area(None)
            self.selection.select_node(node_id)
        return node_id

    def insert_door_window(
        self,
        wall_id: str,
        type: str,
        width: float,
        door_swing: Optional[str] = None,
        door_type: Optional[str] = None,
    ) -> Optional[str]:
        """Cut a centred door or window of length ``width`` into a wall.

        The wall becomes three segments A->C (wall), C->D (opening) and
        D->B (wall). Flanks are kept at least ``OPENING_MIN_MARGIN`` long and
        the new nodes are snapped to the grid.

        Returns:
            The id of the opening segment, or None when the wall is missing,
            the width is not positive or the wall is too short for the opening.
        """
        if type not in ("door", "window"):
            LOGGER.warning("Cannot insert opening of type %r", type)
            return None

        if width <= 0:
            LOGGER.warning("Cannot insert %s of width %s", type, width)
            return None

        wall = self.floor.walls.get(wall_id)
        if wall is None:
            LOGGER.warning("Cannot insert %s: wall %s not found", type, wall_id)
            return None

        coords = self.wall_coordinates(wall)
        if coords is None:
            LOGGER.warning("Cannot insert %s: wall %s has a missing endpoint", type, wall_id)
            return None

        x1, y1, x2, y2 = coords
        dx = x2 - x1
        dy = y2 - y1
        wall_length = math.sqrt(dx * dx + dy * dy)

        if wall_length < width + OPENING_LENGTH_SLACK:
            LOGGER.info("Wall %s too short (%.1f) for a %s of width %s", wall_id, wall_length, type, width)
            return None

        ux = dx / wall_length
        uy = dy / wall_length

        dist_c = max(OPENING_MIN_MARGIN, wall_length / 2 - width / 2)
        dist_d = min(wall_length - OPENING_MIN_MARGIN, wall_length / 2 + width / 2)

        node_c = Node(
            id=self._new_id(),
            x=snap_to_grid(x1 + ux * dist_c, GRID_SIZE),
            y=snap_to_grid(y1 + uy * dist_c, GRID_SIZE),
        )
        node_d = Node(
            id=self._new_id(),
            x=snap_to_grid(x1 + ux * dist_d, GRID_SIZE),
            y=snap_to_grid(y1 + uy * dist_d, GRID_SIZE),
        )
        self.floor.nodes[node_c.id] = node_c
        self.floor.nodes[node_d.id] = node_d

        del self.floor.walls[wall_id]

        flank_a = Wall(
            id=self._new_id(),
            start_node_id=wall.start_node_id,
            end_node_id=node_c.id,
            thickness=wall.thickness,
            type="wall",
            height=wall.height,
        )
        opening = Wall(
            id=self._new_id(),
            start_node_id=node_c.id,
            end_node_id=node_d.id,
            thickness=wall.thickness,
            type=type,
            width=width,
            height=wall.height,
            door_swing=(door_swing or "left") if type == "door" else None,
            door_type=(door_type or "standard") if type == "door" else None,
        )
        flank_b = Wall(
            id=self._new_id(),
            start_node_id=node_d.id,
            end_node_id=wall.end_node_id,
            thickness=wall.thickness,
            type="wall",
            height=wall.height,
        )
        for segment in (flank_a, opening, flank_b):
            self.floor.walls[segment.id] = segment

        self.recalculate_areas()
        self.commit()
        if self.selection is not None:
            self.selection.select_wall(opening.id)
        return opening.id

    # ------------------------------------------------------------------ #
    # Areas
    # ------------------------------------------------------------------ #

    def update_area(self, area_id: str, updates: Mapping[str, Any], commit: bool = True) -> None:
        """Change user-assigned area properties (name, floor type, flags)."""
        area = self.floor.areas.get(area_id)
        if area is None:
            LOGGER.warning("Cannot update area %s: not found", area_id)
            return

        accepted = _filter_updates("area", area_id, updates, _AREA_FIELDS)
        self.floor.areas[area_id] = dataclasses.replace(area, **accepted)
        if commit:
            self.commit()

    def toggle_area_drag_lock(self, area_id: str) -> None:
        area = self.floor.areas.get(area_id)
        if area is not None:
            self.update_area(area_id, {"locked_dimension": not area.locked_dimension})

    def toggle_area_size_lock(self, area_id: str) -> None:
        area = self.floor.areas.get(area_id)
        if area is not None:
            self.update_area(area_id, {"locked_size": not area.locked_size})

    def delete_area(self, area_id: str) -> None:
        """Delete an area by removing the walls only it is bounded by.

        If every boundary wall is shared with another area, the first one is
        removed anyway so that the deletion always has a visible effect.
        """
        area = self.floor.areas.get(area_id)
        if area is None:
            LOGGER.warning("Cannot delete area %s: not found", area_id)
            return

        candidates = self.area_walls(area_id)
        others = [a for a in self.floor.areas.values() if a.id != area_id]
        to_remove = [w for w in candidates if not any(o.bounds_wall(w) for o in others)]
        if not to_remove and candidates:
            to_remove = [candidates[0]]

        for wall in to_remove:
            del self.floor.walls[wall.id]
        self._prune_orphaned_nodes()
        del self.floor.areas[area_id]
        LOGGER.debug("Deleted area %s and %d walls", area_id, len(to_remove))

        self.recalculate_areas()
        self.commit()

        if self.selection is not None and self.selection.selected_area_id == area_id:
            self.selection.select_area(None)

    def add_area_from_template(
        self, template_id: str, x: float, y: float, size: float = DEFAULT_TEMPLATE_SIZE
    ) -> Optional[str]:
        """Drop a ready-made room shape at ``(x, y)``.

        Returns:
            The id of the area covering the new nodes, if one was detected.
        """
        template = AREA_TEMPLATES.get(template_id)
        if template is None:
            LOGGER.warning("Unknown area template %r", template_id)
            return None

        nodes, walls = template.generate(x, y, size, self._new_id)
        for node in nodes:
            self.floor.nodes[node.id] = node
        for wall in walls:
            self.floor.walls[wall.id] = wall

        self.recalculate_areas()
        self.commit()

        new_ids = {node.id for node in nodes}
        area = next((a for a in self.floor.areas.values() if new_ids & a.node_set), None)
        if area is None:
            return None
        if self.selection is not None:
            self.selection.select_area(area.id)
        return area.id

    def merge_areas(self, area_a: str, area_b: str) -> bool:
        from .merge import merge_areas

        return merge_areas(self, area_a, area_b)

    def find_mergeable_areas(self, area_id: str) -> List[str]:
        from .merge import find_mergeable_areas

        return find_mergeable_areas(self, area_id)
