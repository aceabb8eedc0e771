"""
Side selection for connections.

Decides which side of the source and target boxes a cable leaves from and
arrives at. Horizontally separated boxes get an S-shaped route through
opposite sides; boxes that are stacked or nearly stacked get same-side
routing so the cable goes around them instead of cutting through.
"""

from typing import Tuple

from .config import ALIGN_THRESHOLD
from .models import Point, Rect, Side

_OUTWARD = {
    Side.TOP: (0, -1),
    Side.BOTTOM: (0, 1),
    Side.LEFT: (-1, 0),
    Side.RIGHT: (1, 0),
}


def outward_vector(side: Side) -> Point:
    """Unit vector pointing away from the box on this side."""
    return _OUTWARD[side]


def horizontal_gap(source: Rect, target: Rect) -> float:
    """
    Horizontal clearance between two boxes.

    Returns 0 when the boxes overlap horizontally.
    """
    return max(0, target.x - source.right, source.x - target.right)


def select_sides(
    source: Rect, target: Rect, threshold: float = ALIGN_THRESHOLD
) -> Tuple[Side, Side]:
    """
    Choose the exit side of the source box and entry side of the target box.

    Args:
        source: Source node rectangle for the active mode.
        target: Target node rectangle for the active mode.
        threshold: Horizontal gap below which the boxes count as stacked.

    Returns:
        (source_side, target_side)
    """
    if horizontal_gap(source, target) < threshold:
        # Stacked: route around the outside on one side
        if target.center_x >= source.center_x:
            return Side.RIGHT, Side.RIGHT
        return Side.LEFT, Side.LEFT

    if target.center_x - source.center_x > 0:
        return Side.RIGHT, Side.LEFT
    return Side.LEFT, Side.RIGHT
