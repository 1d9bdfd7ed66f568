"""Merging of two areas into one.

Two rooms drawn so that they overlap or touch usually do not share nodes:
their walls cross, or their corners coincide without being the same node.
Rooms that only touch through a corner lying on the other room's wall are
not merged.

Merging splits crossing walls at their intersection points, folds the
second area's corners onto coinciding corners of the first, removes the
walls that collapse, duplicate or now partition the combined room, and
lets detection find the merged face.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple

from shapely.geometry import Point, Polygon

from ..config import GRID_SIZE, MERGE_POSITION_TOLERANCE, MERGE_SNAP_RADIUS
from ..core.model import Area, Node, Wall
from ..geom.polygon import area_outline
from ..geom.primitives import point_to_segment_distance, segment_intersection, snap_to_grid

if TYPE_CHECKING:
    from .store import FloorGraph

LOGGER = logging.getLogger(__name__)

Intersection = Tuple[str, str, float, float]


def _area_nodes(graph: FloorGraph, area: Area) -> List[Node]:
    nodes = []
    for node_id in area.node_ids:
        node = graph.get_node(node_id)
        if node is not None:
            nodes.append(node)
    return nodes


def _boundary_walls(graph: FloorGraph, area: Area) -> List[Wall]:
    return [w for w in graph.walls if area.bounds_wall(w)]


def _wall_intersections(graph: FloorGraph, walls_a: List[Wall], walls_b: List[Wall]) -> List[Intersection]:
    """Intersection points between two wall sets, snapped to the grid."""
    found = []
    for wa in walls_a:
        coords_a = graph.wall_coordinates(wa)
        if coords_a is None:
            continue
        for wb in walls_b:
            coords_b = graph.wall_coordinates(wb)
            if coords_b is None:
                continue

            point = segment_intersection(coords_a[:2], coords_a[2:], coords_b[:2], coords_b[2:])
            if point is not None:
                found.append(
                    (wa.id, wb.id, snap_to_grid(point[0], GRID_SIZE), snap_to_grid(point[1], GRID_SIZE))
                )
    return found


def _close(a: Node, b: Node, tolerance: float = MERGE_POSITION_TOLERANCE) -> bool:
    return abs(a.x - b.x) <= tolerance and abs(a.y - b.y) <= tolerance


def find_mergeable_areas(graph: FloorGraph, area_id: str) -> List[str]:
    """List areas that can be merged with ``area_id``.

    An area qualifies when it shares at least two corner positions with the
    given area, or when any pair of their boundary walls intersects.
    """
    area = graph.get_area(area_id)
    if area is None:
        return []

    own_nodes = _area_nodes(graph, area)
    own_walls = _boundary_walls(graph, area)
    mergeable = []

    for other in graph.areas:
        if other.id == area_id:
            continue

        other_nodes = _area_nodes(graph, other)
        shared = sum(1 for n1 in own_nodes if any(_close(n1, n2) for n2 in other_nodes))
        if shared >= 2:
            LOGGER.debug("Area %s mergeable with %s (shared corners)", other.id, area_id)
            mergeable.append(other.id)
            continue

        if _wall_intersections(graph, own_walls, _boundary_walls(graph, other)):
            LOGGER.debug("Area %s mergeable with %s (intersecting walls)", other.id, area_id)
            mergeable.append(other.id)

    return mergeable


class _SplitTracker:
    """Follows boundary walls of one area through successive splits.

    A wall can cross the other area several times. Once it has been split
    its id is gone, so every original wall id maps to the ids of the pieces
    currently standing in for it.
    """

    def __init__(self, graph: FloorGraph, walls: List[Wall]) -> None:
        self.graph = graph
        self.pieces: Dict[str, List[str]] = {w.id: [w.id] for w in walls}
        self.new_nodes: List[str] = []

    def piece_at(self, wall_id: str, x: float, y: float) -> Optional[Wall]:
        best = None
        best_dist = float("inf")
        for piece_id in self.pieces.get(wall_id, []):
            piece = self.graph.get_wall(piece_id)
            coords = self.graph.wall_coordinates(piece) if piece else None
            if coords is None:
                continue
            dist = point_to_segment_distance(x, y, *coords)
            if dist < best_dist:
                best, best_dist = piece, dist
        return best

    def split(self, wall_id: str, x: float, y: float) -> None:
        """Split the piece of ``wall_id`` passing through ``(x, y)``."""
        piece = self.piece_at(wall_id, x, y)
        if piece is None:
            return

        node_id = self.graph.split_wall(piece.id, x, y, commit=False)
        if node_id is None:
            return

        halves = [w.id for w in self.graph.walls if w.touches(node_id)]
        self.pieces[wall_id] = [p for p in self.pieces[wall_id] if p != piece.id] + halves
        self.new_nodes.append(node_id)


def _partition_walls(
    graph: FloorGraph,
    ids_a: Set[str],
    ids_b: Set[str],
    outline_a: Optional[Polygon],
    outline_b: Optional[Polygon],
) -> List[str]:
    """Walls that would split the merged room in two.

    These are walls on the common boundary of both areas and walls of one
    area running through the interior of the other.
    """
    partition = []
    for wall in graph.walls:
        coords = graph.wall_coordinates(wall)
        if coords is None:
            continue
        mid = Point((coords[0] + coords[2]) / 2, (coords[1] + coords[3]) / 2)

        in_a = wall.start_node_id in ids_a and wall.end_node_id in ids_a
        in_b = wall.start_node_id in ids_b and wall.end_node_id in ids_b

        on_a = outline_a is None or outline_a.exterior.distance(mid) <= MERGE_POSITION_TOLERANCE
        on_b = outline_b is None or outline_b.exterior.distance(mid) <= MERGE_POSITION_TOLERANCE
        # A wall with both ends in both areas only lies on the common
        # boundary when it runs along both outlines
        shared = in_a and in_b and on_a and on_b

        if (
            shared
            or (in_a and outline_b is not None and outline_b.contains(mid))
            or (in_b and outline_a is not None and outline_a.contains(mid))
        ):
            partition.append(wall.id)
    return partition


def merge_areas(graph: FloorGraph, area_id_a: str, area_id_b: str) -> bool:
    """Merge two areas into a single room.

    Args:
        graph: Store holding both areas.
        area_id_a: Area whose corners are kept when corners coincide.
        area_id_b: Area folded into the first one.

    Returns:
        True if the merge ran. False if either area does not exist, both ids
        are the same, or the areas neither cross, share a corner position
        nor share a wall.
    """
    floor = graph.floor
    area_a = floor.areas.get(area_id_a)
    area_b = floor.areas.get(area_id_b)
    if area_a is None or area_b is None:
        LOGGER.warning("Cannot merge: area %s or %s not found", area_id_a, area_id_b)
        return False
    if area_id_a == area_id_b:
        LOGGER.warning("Cannot merge area %s with itself", area_id_a)
        return False

    LOGGER.info("Merging areas %s and %s", area_id_a, area_id_b)
    outline_a = area_outline(floor, area_id_a)
    outline_b = area_outline(floor, area_id_b)
    # Splits below re-detect and may rename faces; reconcile against these
    others = {k: v for k, v in floor.areas.items() if k not in (area_id_a, area_id_b)}

    # 1. Split crossing walls at their intersection points
    walls_a = _boundary_walls(graph, area_a)
    walls_b = _boundary_walls(graph, area_b)
    intersections = _wall_intersections(graph, walls_a, walls_b)
    LOGGER.debug("Found %d intersections", len(intersections))

    tracker_a = _SplitTracker(graph, walls_a)
    tracker_b = _SplitTracker(graph, walls_b)
    for wall_a_id, wall_b_id, x, y in intersections:
        if graph.find_nearby_node(x, y, MERGE_SNAP_RADIUS) is not None:
            continue
        tracker_a.split(wall_a_id, x, y)
        tracker_b.split(wall_b_id, x, y)

    # 2. Map corners of B onto coinciding corners of A, first match wins
    nodes_a = _area_nodes(graph, area_a) + [graph.get_node(n) for n in tracker_a.new_nodes]
    nodes_b = _area_nodes(graph, area_b) + [graph.get_node(n) for n in tracker_b.new_nodes]
    mapping: Dict[str, str] = {}
    for node_b in nodes_b:
        for node_a in nodes_a:
            if _close(node_a, node_b):
                if node_a.id != node_b.id:
                    mapping[node_b.id] = node_a.id
                break
    LOGGER.debug("Node mapping: %d nodes", len(mapping))

    # 3. Rewrite wall endpoints through the mapping
    for wall in list(floor.walls.values()):
        start = mapping.get(wall.start_node_id, wall.start_node_id)
        end = mapping.get(wall.end_node_id, wall.end_node_id)
        if start != wall.start_node_id or end != wall.end_node_id:
            floor.walls[wall.id] = dataclasses.replace(wall, start_node_id=start, end_node_id=end)

    # 4. Drop degenerate walls and later duplicates of the same node pair
    seen = set()
    kept: Dict[str, Wall] = {}
    for wall in floor.walls.values():
        if wall.is_degenerate or wall.pair in seen:
            continue
        seen.add(wall.pair)
        kept[wall.id] = wall
    LOGGER.debug("Removed %d degenerate/duplicate walls", len(floor.walls) - len(kept))
    floor.walls = kept

    # 5. Remove the folded corners
    floor.nodes = {k: v for k, v in floor.nodes.items() if k not in mapping}

    # 6. Remove walls partitioning the merged room, then their stranded corners
    ids_a = {n.id for n in nodes_a}
    ids_b = {mapping.get(n.id, n.id) for n in nodes_b}
    partition = _partition_walls(graph, ids_a, ids_b, outline_a, outline_b)
    if not (tracker_a.new_nodes or tracker_b.new_nodes or mapping or partition):
        LOGGER.warning(
            "Cannot merge areas %s and %s: no crossing, shared corner or shared wall", area_id_a, area_id_b
        )
        return False
    for wall_id in partition:
        del floor.walls[wall_id]
    used = floor.referenced_node_ids()
    floor.nodes = {
        k: v for k, v in floor.nodes.items() if k in used or k not in (ids_a | ids_b)
    }
    LOGGER.debug("Removed %d partition walls", len(partition))

    # 7. Replace both areas by a fresh detection
    floor.areas = others
    graph.recalculate_areas()
    graph.commit()

    if graph.selection is not None:
        graph.selection.select_area(None)

    LOGGER.info("Merge complete, %d areas on floor", len(floor.areas))
    return True
