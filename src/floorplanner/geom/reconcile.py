"""Reconciliation of freshly detected faces with the existing areas.

Detection only yields node cycles. Users attach a name, a floor type and
lock flags to areas, and those must survive re-detection: a detected
cycle with exactly the node set of a previous area inherits that area's
identity. Previous areas that no longer close (a wall was removed) are
kept as "broken" areas so their floor assignment is not lost, unless a
detected face has absorbed them.

Previous areas are compared through the node ids that still exist, so
deleting a node in the middle of a wall run keeps the room it bounded.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import AbstractSet, Callable, Iterable, List, Optional, Sequence, Tuple

from ..config import DEFAULT_FLOOR_TYPE
from ..core.model import Area, generate_id

LOGGER = logging.getLogger(__name__)


def _same_node_set(node_ids: Tuple[str, ...], node_set: AbstractSet[str]) -> bool:
    return len(node_ids) == len(node_set) and all(n in node_set for n in node_ids)


def _strict_subset(node_ids: Tuple[str, ...], node_set: AbstractSet[str]) -> bool:
    return len(node_ids) < len(node_set) and all(n in node_set for n in node_ids)


def reconcile_areas(
    previous_areas: Sequence[Area],
    cycles: Iterable[Sequence[str]],
    existing_node_ids: AbstractSet[str],
    default_floor_type: str = DEFAULT_FLOOR_TYPE,
    id_factory: Optional[Callable[[], str]] = None,
) -> List[Area]:
    """Map detected cycles onto previous areas.

    Args:
        previous_areas: Areas before the edit, in floor order.
        cycles: Node id cycles returned by the detection engine.
        existing_node_ids: Ids of the nodes currently on the floor.
        default_floor_type: Floor type assigned to brand new areas.
        id_factory: Generator for new area ids.

    Returns:
        Detected areas (in detection order) followed by preserved broken areas.
    """
    id_factory = id_factory or generate_id
    surviving = [
        (prev, tuple(n for n in prev.node_ids if n in existing_node_ids)) for prev in previous_areas
    ]
    new_areas: List[Area] = []

    for index, cycle in enumerate(cycles):
        node_set = frozenset(cycle)
        match = next((prev for prev, ids in surviving if _same_node_set(ids, node_set)), None)

        if match is not None:
            area = Area(
                id=match.id,
                name=match.name,
                node_ids=tuple(cycle),
                floor_type_id=match.floor_type_id,
                visible=True,
                locked_size=match.locked_size,
                locked_dimension=match.locked_dimension,
            )
        else:
            area = Area(
                id=id_factory(),
                name=f"Area {index + 1}",
                node_ids=tuple(cycle),
                floor_type_id=default_floor_type,
            )
        new_areas.append(area)

    new_node_sets = [area.node_set for area in new_areas]
    preserved: List[Area] = []

    for prev, ids in surviving:
        if not ids:
            continue
        if any(_same_node_set(ids, node_set) for node_set in new_node_sets):
            continue
        if any(_strict_subset(ids, node_set) for node_set in new_node_sets):
            continue

        if ids != prev.node_ids:
            prev = dataclasses.replace(prev, node_ids=ids)
        preserved.append(prev)

    if preserved:
        LOGGER.debug("Preserved %d broken areas", len(preserved))

    return new_areas + preserved
