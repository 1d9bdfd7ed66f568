"""Floor Planner - planar wall graphs for floor plans with automatic room detection."""

__version__ = "0.1.0"
__author__ = "Marco"
__email__ = "marco@example.com"

from .core.model import Area, Floor, Node, Wall
from .engine.layout import Layout
from .engine.store import FloorGraph

__all__ = ["Area", "Floor", "FloorGraph", "Layout", "Node", "Wall"]
