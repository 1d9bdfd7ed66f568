"""Area templates.

A template generates the nodes and closed wall loop of a ready-made room
shape anchored at a top-left corner. Loops are emitted in the winding the
detection engine reports as an inner face.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from ..config import DEFAULT_WALL_THICKNESS
from ..core.model import Node, Wall

Corner = Tuple[float, float]


@dataclass(frozen=True)
class AreaTemplate:
    """A named room shape.

    Attributes:
        id: Template identifier.
        name: Display name.
        description: Short description.
        corners: Function mapping (x, y, size) to the loop's corner coordinates.
    """

    id: str
    name: str
    description: str
    corners: Callable[[float, float, float], List[Corner]]

    def generate(
        self, x: float, y: float, size: float, id_factory: Callable[[], str]
    ) -> Tuple[List[Node], List[Wall]]:
        """Create the template's nodes and the walls closing them into a loop."""
        nodes = [Node(id=id_factory(), x=cx, y=cy) for cx, cy in self.corners(x, y, size)]
        walls = [
            Wall(
                id=id_factory(),
                start_node_id=node.id,
                end_node_id=nodes[(i + 1) % len(nodes)].id,
                thickness=DEFAULT_WALL_THICKNESS,
                type="wall",
            )
            for i, node in enumerate(nodes)
        ]
        return nodes, walls


def _square(x: float, y: float, size: float) -> List[Corner]:
    return [(x, y), (x + size, y), (x + size, y + size), (x, y + size)]


def _l_shape(x: float, y: float, size: float) -> List[Corner]:
    s = size / 2
    return [
        (x, y),
        (x + size, y),
        (x + size, y + s),
        (x + s, y + s),
        (x + s, y + size),
        (x, y + size),
    ]


def _t_shape(x: float, y: float, size: float) -> List[Corner]:
    s = size / 3
    return [
        (x + s, y),
        (x + 2 * s, y),
        (x + 2 * s, y + s),
        (x + size, y + s),
        (x + size, y + 2 * s),
        (x, y + 2 * s),
        (x, y + s),
        (x + s, y + s),
    ]


def _u_shape(x: float, y: float, size: float) -> List[Corner]:
    s = size / 3
    return [
        (x, y),
        (x + s, y),
        (x + s, y + 2 * s),
        (x + 2 * s, y + 2 * s),
        (x + 2 * s, y),
        (x + size, y),
        (x + size, y + size),
        (x, y + size),
    ]


AREA_TEMPLATES: Dict[str, AreaTemplate] = {
    "square": AreaTemplate("square", "Square", "A simple 4-sided area", _square),
    "l-shape": AreaTemplate("l-shape", "L Shape", "An L-shaped area", _l_shape),
    "t-shape": AreaTemplate("t-shape", "T Shape", "A T-shaped area", _t_shape),
    "u-shape": AreaTemplate("u-shape", "U Shape", "A U-shaped area", _u_shape),
}
