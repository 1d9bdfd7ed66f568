"""Engine module for floor editing.

This module provides the graph store, its history and layout
collaborators, and the scripting API built on the operation registry.
"""

from .api import apply, apply_operations
from .layout import Layout
from .store import FloorGraph

__all__ = ["FloorGraph", "Layout", "apply", "apply_operations"]
