"""Core data models for floor planning."""

from .model import Area, Floor, FloorSnapshot, Node, Wall
from .topology import build_adjacency, build_area_graph, build_node_graph, floor_outline

__all__ = [
    "Area",
    "Floor",
    "FloorSnapshot",
    "Node",
    "Wall",
    "build_adjacency",
    "build_area_graph",
    "build_node_graph",
    "floor_outline",
]
