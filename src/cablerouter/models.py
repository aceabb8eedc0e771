"""
Data models for connection routing.

This module contains the value types shared by every stage of the routing
pipeline: node rectangles, sides, display modes, the node and connection
entities read from the store, and the ports and routes derived on each run.

Classes:
    Side: Edge of a node box a cable enters or exits from.
    DisplayMode: Active editor view; selects node geometry and overrides.
    Rect: Axis-aligned node bounding box.
    Node: A device placed on the diagram.
    Connection: A cable between two nodes, with per-mode bend overrides.
    Port: Exact attachment point of one connection end.
    PortPair: Both ports of one connection.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import (
    GRID_SIZE,
    LOGICAL_GEOMETRY,
    NETWORK_GEOMETRY,
    PHYSICAL_GEOMETRY,
    ModeGeometry,
)

Point = Tuple[float, float]

# Ordered polyline; first and last points are the port coordinates
Route = List[Point]


class Side(Enum):
    """Which side of a box a port is on."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_vertical(self) -> bool:
        """True for sides whose stub leaves vertically (top/bottom)."""
        return self in (Side.TOP, Side.BOTTOM)


class DisplayMode(Enum):
    """Editor display modes."""

    LOGICAL = "LOGICAL"
    PHYSICAL = "PHYSICAL"
    NETWORK = "NETWORK"

    @property
    def geometry(self) -> ModeGeometry:
        return _MODE_GEOMETRY[self]

    @classmethod
    def parse(cls, value: Union[str, "DisplayMode"]) -> "DisplayMode":
        """
        Convert a mode name to a DisplayMode.

        Raises:
            ValueError: If the name is not a known mode.
        """
        if isinstance(value, DisplayMode):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(
                f"unknown display mode {value!r}; expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None


_MODE_GEOMETRY = {
    DisplayMode.LOGICAL: LOGICAL_GEOMETRY,
    DisplayMode.PHYSICAL: PHYSICAL_GEOMETRY,
    DisplayMode.NETWORK: NETWORK_GEOMETRY,
}


@dataclass(frozen=True)
class Rect:
    """Bounding box for a node."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def moved_to(self, x: float, y: float) -> "Rect":
        return Rect(x, y, self.width, self.height)


@dataclass
class Node:
    """
    A device on the diagram.

    A node keeps one position per coordinate convention. Logical mode
    stores a grid cell, physical and network modes store pixels.

    Attributes:
        id: Stable node identifier.
        logical_pos: (col, row) cell in logical mode.
        physical_pos: (x, y) pixel position in physical/network modes.
        label: Display label, ignored by routing.
    """

    id: str
    logical_pos: Tuple[int, int] = (0, 0)
    physical_pos: Tuple[float, float] = (0, 0)
    label: str = ""

    def position(self, mode: DisplayMode, grid_size: float = GRID_SIZE) -> Point:
        """Top-left pixel position of this node in the given mode."""
        if mode.geometry.grid_positions:
            col, row = self.logical_pos
            return (col * grid_size, row * grid_size)
        return self.physical_pos

    def rect(
        self,
        mode: DisplayMode,
        position: Optional[Point] = None,
        grid_size: float = GRID_SIZE,
    ) -> Rect:
        """
        Bounding box of this node in the given mode.

        Args:
            mode: Display mode selecting box size and position convention.
            position: Optional live pixel position that replaces the
                stored one (used while the node is being dragged).
            grid_size: Pixel size of one logical cell.
        """
        geometry = mode.geometry
        x, y = position if position is not None else self.position(mode, grid_size)
        return Rect(x, y, geometry.box_width, geometry.box_height)


@dataclass
class Connection:
    """
    A cable between two nodes.

    Attributes:
        id: Stable connection identifier.
        source: Source node id.
        target: Target node id.
        style: Type/category/color tags; never touched by routing.
        bend_overrides: User-chosen bend X per display mode.
    """

    id: str
    source: str
    target: str
    style: Dict[str, Any] = field(default_factory=dict)
    bend_overrides: Dict[DisplayMode, float] = field(default_factory=dict)

    def __post_init__(self):
        self.bend_overrides = {
            DisplayMode.parse(mode): x for mode, x in self.bend_overrides.items()
        }

    def bend_x(self, mode: Union[str, DisplayMode]) -> Optional[float]:
        return self.bend_overrides.get(DisplayMode.parse(mode))

    def touches(self, node_id: str) -> bool:
        return node_id in (self.source, self.target)


@dataclass(frozen=True)
class Port:
    """A connection point on a box."""

    node: str
    side: Side
    x: float
    y: float
    is_source: bool = True

    @property
    def point(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class PortPair:
    """Source and target ports of one connection."""

    start: Port
    end: Port
