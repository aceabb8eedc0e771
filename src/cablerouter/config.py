"""
Routing configuration for cablerouter.

Holds the tuning constants used across the routing pipeline and the
per-display-mode node geometry. Every constant can be overridden per
engine through RoutingSettings.
"""

from dataclasses import dataclass
from typing import Optional

# =============================================================================
# ROUTING CONFIGURATION - Adjust these values to tune routing behavior
# =============================================================================

# --- Grid (in pixels) ---

# Base position grid; nodes snap to this on drag end
GRID_SIZE = 24

# Bend snapping resolution (half of the position grid)
HALF_GRID = GRID_SIZE // 2

# --- Distance/Spacing Parameters (in pixels) ---

# Length of the straight stub leaving a port before the first turn
STUB_LENGTH = 20

# Distance between neighbouring ports on the same node side
PORT_GAP = 10

# Distance between fanned-out routes that share a start anchor
SEPARATION_GAP = 10

# Horizontal gap below which two nodes count as vertically stacked
# and get same-side routing instead of an S-shape
ALIGN_THRESHOLD = 40

# Coordinates closer than this are treated as equal
EPSILON = 0.1

# =============================================================================


@dataclass(frozen=True)
class ModeGeometry:
    """
    Node geometry used by one display mode.

    Attributes:
        box_width: Width of every node box in this mode.
        box_height: Height of every node box in this mode.
        grid_positions: True when node positions are stored as col/row
            cells of GRID_SIZE pixels, False for free pixel coordinates.
    """

    box_width: float
    box_height: float
    grid_positions: bool


# Labeled card boxes on a cell grid
LOGICAL_GEOMETRY = ModeGeometry(box_width=100, box_height=60, grid_positions=True)

# Compact device icons on a floor plan
PHYSICAL_GEOMETRY = ModeGeometry(box_width=24, box_height=24, grid_positions=False)

# Compact device icons on the network view
NETWORK_GEOMETRY = ModeGeometry(box_width=24, box_height=24, grid_positions=False)


@dataclass(frozen=True)
class RoutingSettings:
    """
    Bundle of routing parameters handed to the pipeline.

    Defaults come from the module-level constants above. When half_grid is
    not given it is derived as grid_size / 2, and nudge_step follows
    half_grid the same way.

    Attributes:
        grid_size: Node position grid.
        half_grid: Bend snapping resolution.
        stub_length: Port stub length.
        port_gap: Spacing between ports on one side.
        separation_gap: Spacing between routes sharing a start anchor.
        align_threshold: Gap below which nodes are routed same-side.
        nudge_step: Bend movement per nudge.
        spread_vertical_sides: Fan out ports on top/bottom sides along X.
            False keeps every top/bottom port on the side midpoint.
    """

    grid_size: float = GRID_SIZE
    half_grid: Optional[float] = None
    stub_length: float = STUB_LENGTH
    port_gap: float = PORT_GAP
    separation_gap: float = SEPARATION_GAP
    align_threshold: float = ALIGN_THRESHOLD
    nudge_step: Optional[float] = None
    spread_vertical_sides: bool = True

    def __post_init__(self):
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.half_grid is None:
            object.__setattr__(self, "half_grid", self.grid_size / 2)
        if self.nudge_step is None:
            object.__setattr__(self, "nudge_step", self.half_grid)


DEFAULT_SETTINGS = RoutingSettings()
