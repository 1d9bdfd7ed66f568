"""Reading and writing floor plan JSON documents."""

from .parser import (
    floor_from_dict,
    floor_to_dict,
    layout_from_dict,
    layout_to_dict,
    load_floor,
    load_layout,
    save_floor,
    save_layout,
)

__all__ = [
    "floor_from_dict",
    "floor_to_dict",
    "layout_from_dict",
    "layout_to_dict",
    "load_floor",
    "load_layout",
    "save_floor",
    "save_layout",
]
