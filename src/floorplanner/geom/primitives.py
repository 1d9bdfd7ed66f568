"""Pure geometric helpers for the wall graph.

Coordinates follow screen conventions (y grows downwards). Under that
convention the shoelace sum of a face traced by the detection engine is
positive for inner faces and negative for the unbounded outer face.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from ..config import GRID_SIZE, INTERSECTION_EPSILON

Coord = Tuple[float, float]


def point_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Calculate Euclidean distance between two points."""
    return math.sqrt((x1 - x2) ** 2 + (y1 - y2) ** 2)


def segment_intersection(
    p1: Coord, p2: Coord, p3: Coord, p4: Coord, epsilon: float = INTERSECTION_EPSILON
) -> Optional[Coord]:
    """Intersect segment p1-p2 with segment p3-p4.

    Returns:
        The intersection point, or None when the segments are parallel,
        coincident, or do not overlap within both segments. Endpoints
        count as part of a segment.
    """
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < epsilon:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def polygon_signed_area(points: Sequence[Coord]) -> float:
    """Shoelace signed area of a closed polygon.

    Args:
        points: Polygon vertices in boundary order, without repeating the first.

    Returns:
        Signed area; 0.0 for fewer than three points.
    """
    n = len(points)
    if n < 3:
        return 0.0

    total = 0.0
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return total / 2.0


def closest_point_on_segment(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> Coord:
    """Foot of the perpendicular from (px, py), clamped to the segment."""
    cx = x2 - x1
    cy = y2 - y1
    len_sq = cx * cx + cy * cy
    if len_sq == 0:
        return (x1, y1)

    param = ((px - x1) * cx + (py - y1) * cy) / len_sq
    param = min(1.0, max(0.0, param))
    return (x1 + param * cx, y1 + param * cy)


def point_to_segment_distance(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> float:
    fx, fy = closest_point_on_segment(px, py, x1, y1, x2, y2)
    return point_distance(px, py, fx, fy)


def snap_to_grid(value: float, grid: float = GRID_SIZE) -> float:
    """Round to the nearest grid multiple, halves rounding up."""
    return math.floor(value / grid + 0.5) * grid

