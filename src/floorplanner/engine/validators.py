"""Structural validation of floors.

This module provides checks for the invariants the graph store maintains:
no degenerate walls, no two walls between the same node pair, no wall or
area pointing at a node that does not exist. The store itself never
raises; these checks are run on demand (scripts, CLI, tests).
"""

from __future__ import annotations

from typing import List

from ..core.model import Floor


class InvalidFloor(Exception):
    """Raised when a floor violates graph invariants."""

    pass


def validate_no_degenerate_walls(floor: Floor) -> bool:
    """Validate that no wall starts and ends at the same node."""
    return not any(wall.is_degenerate for wall in floor.walls.values())


def validate_no_duplicate_walls(floor: Floor) -> bool:
    """Validate that every unordered node pair carries at most one wall."""
    pairs = [wall.pair for wall in floor.walls.values()]
    return len(pairs) == len(set(pairs))


def validate_wall_references(floor: Floor) -> bool:
    """Validate that both endpoints of every wall exist."""
    return all(
        wall.start_node_id in floor.nodes and wall.end_node_id in floor.nodes
        for wall in floor.walls.values()
    )


def validate_area_references(floor: Floor) -> bool:
    """Validate that every area only lists existing nodes."""
    return all(
        all(node_id in floor.nodes for node_id in area.node_ids)
        for area in floor.areas.values()
    )


def find_violations(floor: Floor) -> List[str]:
    """Describe every invariant violation found on the floor.

    Args:
        floor: The floor to validate.

    Returns:
        One message per violation, empty if the floor is valid.
    """
    violations = []

    for wall in floor.walls.values():
        if wall.is_degenerate:
            violations.append(f"Wall '{wall.id}' starts and ends at node '{wall.start_node_id}'")
        for node_id in (wall.start_node_id, wall.end_node_id):
            if node_id not in floor.nodes:
                violations.append(f"Wall '{wall.id}' references missing node '{node_id}'")

    seen = {}
    for wall in floor.walls.values():
        if wall.pair in seen:
            violations.append(f"Wall '{wall.id}' duplicates wall '{seen[wall.pair]}'")
        else:
            seen[wall.pair] = wall.id

    for area in floor.areas.values():
        missing = [node_id for node_id in area.node_ids if node_id not in floor.nodes]
        if missing:
            violations.append(f"Area '{area.id}' references missing nodes {missing}")

    return violations


def validate_all(floor: Floor) -> bool:
    """Run all validators on the floor.

    Returns:
        True if all validations pass.

    Raises:
        InvalidFloor: If any validation fails.
    """
    if not validate_wall_references(floor):
        raise InvalidFloor("Wall reference validation failed: walls point at missing nodes")

    if not validate_no_degenerate_walls(floor):
        raise InvalidFloor("Degenerate wall validation failed: walls start and end at the same node")

    if not validate_no_duplicate_walls(floor):
        raise InvalidFloor("Duplicate wall validation failed: node pairs carry more than one wall")

    if not validate_area_references(floor):
        raise InvalidFloor("Area reference validation failed: areas list missing nodes")

    return True
