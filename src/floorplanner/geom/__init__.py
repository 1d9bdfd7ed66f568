"""Geometry utilities for floor planning.

This module provides the geometric primitives, the area detection engine
and the reconciliation of detected faces with existing areas.
"""

from .detection import detect_areas
from .polygon import area_outline, area_perimeter, area_surface
from .primitives import polygon_signed_area, segment_intersection
from .reconcile import reconcile_areas

__all__ = [
    "detect_areas",
    "reconcile_areas",
    "area_outline",
    "area_surface",
    "area_perimeter",
    "polygon_signed_area",
    "segment_intersection",
]
