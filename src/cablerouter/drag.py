"""
Node drag handling.

While nodes are dragged their live pointer positions replace the stored
ones for routing only; every pointer move triggers a full pipeline run. On
release the positions are snapped to the engine's position grid, written
to the store, and the layout is computed once more from the stored data.

There is no cancel path: releasing anywhere finalizes at the last known
pointer position.
"""

import logging
from typing import Callable, Dict, Iterable, Mapping, Optional

from .config import GRID_SIZE
from .models import DisplayMode, Point, Rect
from .pipeline import LayoutEngine, RenderFrame
from .snapping import snap_to_grid
from .store import DiagramError, DiagramStore, NodeAccessor

logger = logging.getLogger(__name__)


class LiveNodeAccessor:
    """NodeAccessor that substitutes in-progress drag positions."""

    def __init__(
        self, base: NodeAccessor, live_positions: Optional[Mapping[str, Point]] = None
    ):
        self.base = base
        self.live_positions: Dict[str, Point] = dict(live_positions or {})

    def get_rect(
        self, node_id: str, mode: DisplayMode, grid_size: float = GRID_SIZE
    ) -> Optional[Rect]:
        rect = self.base.get_rect(node_id, mode, grid_size)
        if rect is None:
            return None
        live = self.live_positions.get(node_id)
        if live is not None:
            return rect.moved_to(*live)
        return rect


class DragSession:
    """
    One node drag gesture over a DiagramStore.

    Several selected nodes move together: the pointer position of the
    grabbed node defines a delta that is applied to every dragged node.

    Example:
        >>> drag = DragSession(store, DisplayMode.PHYSICAL, LayoutEngine(), ["a"])
        >>> frame = drag.move("a", 130, 52)
        >>> frame = drag.end()
    """

    def __init__(
        self,
        store: DiagramStore,
        mode: DisplayMode,
        engine: LayoutEngine,
        node_ids: Iterable[str],
        on_frame: Optional[Callable[[RenderFrame], None]] = None,
    ):
        self.store = store
        self.mode = mode
        self.engine = engine
        self.on_frame = on_frame
        self.origins: Dict[str, Point] = {}

        for node_id in node_ids:
            rect = store.get_rect(node_id, mode, engine.settings.grid_size)
            if rect is None:
                raise DiagramError(f"unknown node {node_id!r}")
            self.origins[node_id] = (rect.x, rect.y)

        self.accessor = LiveNodeAccessor(store, self.origins)
        self.finished = False

    @property
    def live_positions(self) -> Dict[str, Point]:
        return self.accessor.live_positions

    def move(self, node_id: str, x: float, y: float) -> RenderFrame:
        """
        Move the grabbed node to (x, y) and recompute the whole layout.

        Positions are free during the drag; snapping happens on release.
        """
        origin_x, origin_y = self.origins[node_id]
        dx, dy = x - origin_x, y - origin_y
        for dragged, (ox, oy) in self.origins.items():
            self.live_positions[dragged] = (ox + dx, oy + dy)
        frame = self.engine.compute_frame(self.store, self.accessor, self.mode)
        return self._emit(frame)

    def end(self) -> RenderFrame:
        """Snap dragged nodes to the grid, persist them, recompute."""
        grid = self.engine.settings.grid_size
        snapped = {
            node_id: (snap_to_grid(x, grid), snap_to_grid(y, grid))
            for node_id, (x, y) in self.live_positions.items()
            if self.store.get_node(node_id) is not None
        }
        logger.debug("drag end: %s", snapped)
        self.finished = True
        self.live_positions.clear()
        self.store.move_nodes(snapped, self.mode, grid)
        frame = self.engine.compute_frame(self.store, self.store, self.mode)
        return self._emit(frame)

    def _emit(self, frame: RenderFrame) -> RenderFrame:
        if self.on_frame is not None:
            self.on_frame(frame)
        return frame
