"""Polygon geometry utilities for area calculations.

This module rebuilds area outlines as Shapely polygons from their node
cycles and derives surface and perimeter figures in metric units.
"""

from __future__ import annotations

from typing import List, Tuple

from shapely.geometry import Polygon

from ..config import CM2_PER_M2, CM_PER_M
from ..core.model import Floor

MIN_POLYGON_AREA = 1e-6  # Minimum area for valid polygons


def area_points(floor: Floor, area_id: str) -> List[Tuple[float, float]]:
    """Coordinates of an area's boundary, skipping node ids that no longer exist."""
    area = floor.areas.get(area_id)
    if area is None:
        return []

    points = []
    for node_id in area.node_ids:
        node = floor.nodes.get(node_id)
        if node is not None:
            points.append((node.x, node.y))
    return points


def _create_polygon_from_points(points: List[Tuple[float, float]]) -> Polygon | None:
    """Create a Shapely polygon from a list of points.

    Handles polygon validation: self-intersecting boundaries are repaired
    with ``buffer(0)``.
    """
    if len(points) < 3:
        return None

    polygon = Polygon(points)
    if not polygon.is_valid:
        polygon = polygon.buffer(0)

    if polygon.is_valid and polygon.area > MIN_POLYGON_AREA:
        return polygon

    return None


def area_outline(floor: Floor, area_id: str) -> Polygon | None:
    """Reconstruct an area outline as a Shapely polygon.

    Args:
        floor: Floor owning the area and its nodes.
        area_id: ID of the area to reconstruct.

    Returns:
        Shapely Polygon of the outline, or None if it cannot be built.
    """
    return _create_polygon_from_points(area_points(floor, area_id))


def area_surface(floor: Floor, area_id: str) -> float:
    """Calculate area surface in square metres.

    Coordinates are centimetres. Areas with fewer than three resolvable
    nodes have no surface.
    """
    polygon = area_outline(floor, area_id)
    if polygon is None:
        return 0.0
    return polygon.area / CM2_PER_M2


def area_perimeter(floor: Floor, area_id: str) -> float:
    """Calculate area perimeter in metres, or 0.0 if the outline fails."""
    polygon = area_outline(floor, area_id)
    if polygon is None:
        return 0.0
    return polygon.length / CM_PER_M
