"""
cablerouter - Orthogonal cable routing for configuration diagrams

Routes cables between device boxes as clean right-angle paths: picks the
sides cables leave from, spaces cables sharing a side, snaps bends to a
half-grid, honours user bend overrides per display mode and fans out
cables that start from the same anchor.

Example:
    >>> from cablerouter import Connection, Node, compute_layout
    >>> nodes = {
    ...     "a": Node("a", physical_pos=(0, 0)),
    ...     "b": Node("b", physical_pos=(300, 120)),
    ... }
    >>> routes = compute_layout([Connection("c1", "a", "b")], nodes, "PHYSICAL")

Debug Mode Example:
    >>> engine = LayoutEngine()
    >>> trace = RouteTrace()
    >>> frame = engine.compute_frame(connections, nodes, "LOGICAL", trace=trace)
    >>> print(trace.summary())
"""

from .bend import BendDrag, BendHandle, BendOverrideEngine, NudgeDirection
from .config import DEFAULT_SETTINGS, RoutingSettings
from .debug import FrameInspector, layout_diff
from .drag import DragSession, LiveNodeAccessor
from .models import Connection, DisplayMode, Node, Port, PortPair, Rect, Side
from .pipeline import LayoutEngine, RenderFrame, compute_layout, compute_single_route
from .ports import PortAllocator
from .preview import FramePreview, render_frame_to_png
from .routing import build_bend_override_route, build_manhattan_route
from .separation import apply_path_separation
from .session import RoutingSession
from .sides import select_sides
from .snapping import simplify_orthogonal, snap_internal_segment, snap_to_half_grid
from .store import DiagramError, DiagramStore, StoreChange
from .tracer import PipelineStage, RouteTrace

__version__ = "0.3.0"

__all__ = [
    # Main API
    "compute_layout",
    "compute_single_route",
    "LayoutEngine",
    "RenderFrame",
    "RoutingSettings",
    "DEFAULT_SETTINGS",
    # Models
    "Node",
    "Connection",
    "DisplayMode",
    "Rect",
    "Side",
    "Port",
    "PortPair",
    # Pipeline stages
    "select_sides",
    "PortAllocator",
    "build_manhattan_route",
    "build_bend_override_route",
    "snap_to_half_grid",
    "snap_internal_segment",
    "simplify_orthogonal",
    "apply_path_separation",
    # Interaction
    "BendOverrideEngine",
    "BendDrag",
    "BendHandle",
    "NudgeDirection",
    "DragSession",
    "LiveNodeAccessor",
    "RoutingSession",
    # Store
    "DiagramStore",
    "DiagramError",
    "StoreChange",
    # Debug/Tracing (for development and debugging)
    "RouteTrace",
    "PipelineStage",
    "FrameInspector",
    "layout_diff",
    "FramePreview",
    "render_frame_to_png",
]
