"""
User bend overrides.

A selected connection shows a handle at the middle of its main vertical
run. Dragging the handle moves that run horizontally (snapped live to the
half-grid, vertical position locked); releasing it stores the bend X on the
connection for the current display mode only. Left/right nudges move the
bend by one half-grid step.

Once a connection has an override for the active mode, the pipeline draws
it with build_bend_override_route instead of the default route.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import DEFAULT_SETTINGS, RoutingSettings
from .models import Point, Route
from .routing import build_bend_override_route
from .snapping import primary_vertical_segment, snap_to_half_grid
from .store import ConnectionAccessor

logger = logging.getLogger(__name__)


class NudgeDirection(Enum):
    """Direction of a bend nudge key press."""

    LEFT = -1
    RIGHT = 1


@dataclass(frozen=True)
class BendHandle:
    """Position of the drag handle of one connection."""

    connection_id: str
    x: float
    y: float


def handle_for_route(
    connection_id: str, route: Optional[Route]
) -> Optional[BendHandle]:
    """Handle at the vertical midpoint of the route's longest vertical run."""
    if not route:
        return None
    segment = primary_vertical_segment(route)
    if segment is None:
        return None
    return BendHandle(connection_id, segment.x, segment.y_mid)


class BendOverrideEngine:
    """
    Bend handle interaction for one connection store.

    All calls take the RenderFrame the user is looking at; it provides
    the mode, the ports and the rendered routes.
    """

    def __init__(
        self,
        connections: ConnectionAccessor,
        settings: RoutingSettings = DEFAULT_SETTINGS,
    ):
        self.connections = connections
        self.settings = settings

    def snap(self, x: float) -> float:
        return snap_to_half_grid(x, self.settings.half_grid)

    def handle_position(self, frame, connection_id: str) -> Optional[BendHandle]:
        """Where to draw the handle of a selected connection, if anywhere."""
        return handle_for_route(connection_id, frame.route(connection_id))

    def drag_bound(self, handle: BendHandle, x: float, y: float) -> Point:
        """Constrain a dragged handle: X snaps to the half-grid, Y is locked."""
        return (self.snap(x), handle.y)

    def preview(self, frame, connection_id: str, raw_x: float) -> Optional[Route]:
        """
        Route drawn while the handle is being dragged.

        Nothing is written to the store.
        """
        pair = frame.port_pair(connection_id)
        if pair is None:
            return None
        return build_bend_override_route(
            pair.start, pair.end, self.snap(raw_x), self.settings.stub_length
        )

    def commit(self, frame, connection_id: str, raw_x: float) -> Optional[float]:
        """
        Store the snapped bend X for the frame's mode.

        Returns:
            The stored bend X, or None if the connection no longer exists.
        """
        if self.connections.get_connection(connection_id) is None:
            return None
        bend_x = self.snap(raw_x)
        self.connections.set_bend_x(connection_id, frame.mode, bend_x)
        return bend_x

    def nudge(
        self,
        frame,
        connection_id: str,
        direction: NudgeDirection,
        text_input_focused: bool = False,
    ) -> Optional[float]:
        """
        Move the bend of a selected connection by one half-grid step.

        Starts from the stored override, or from the X of the rendered bend
        when the connection has no override yet.

        Args:
            frame: Frame currently on screen.
            connection_id: Selected connection.
            direction: LEFT or RIGHT.
            text_input_focused: True while a text control has focus; the
                key press belongs to that control and is ignored here.

        Returns:
            The new bend X, or None if nothing changed.
        """
        if text_input_focused:
            return None
        if self.connections.get_connection(connection_id) is None:
            return None

        bend_x = self.connections.get_bend_x(connection_id, frame.mode)
        if bend_x is None:
            handle = self.handle_position(frame, connection_id)
            if handle is None:
                logger.debug("nudge ignored: %s has no vertical run", connection_id)
                return None
            bend_x = handle.x

        new_x = self.snap(bend_x + direction.value * self.settings.nudge_step)
        self.connections.set_bend_x(connection_id, frame.mode, new_x)
        return new_x

    def begin_drag(self, frame, connection_id: str) -> Optional["BendDrag"]:
        """Start dragging the handle of a connection drawn in `frame`."""
        handle = self.handle_position(frame, connection_id)
        if handle is None:
            return None
        return BendDrag(self, frame, handle)


class BendDrag:
    """
    One handle drag gesture.

    move() is called for every pointer-move event and returns the live
    route; release() writes the override once.
    """

    def __init__(self, engine: BendOverrideEngine, frame, handle: BendHandle):
        self.engine = engine
        self.frame = frame
        self.handle = handle
        self.route: Optional[Route] = frame.route(handle.connection_id)

    @property
    def connection_id(self) -> str:
        return self.handle.connection_id

    def move(self, x: float, y: float) -> Optional[Route]:
        bend_x, _ = self.engine.drag_bound(self.handle, x, y)
        route = self.engine.preview(self.frame, self.connection_id, bend_x)
        if route is None:
            return None
        self.route = route
        updated = handle_for_route(self.connection_id, route)
        if updated is not None:
            self.handle = BendHandle(self.connection_id, bend_x, updated.y)
        return route

    def release(self) -> Optional[float]:
        return self.engine.commit(self.frame, self.connection_id, self.handle.x)
