"""
Routing session: the glue between a diagram store and a renderer.

Data flows one way: the store notifies the session, the session re-runs
the pipeline and keeps the resulting RenderFrame, and a renderer reads
`session.frame`. The session never writes node or connection data itself;
bend overrides and drag results go through the store, which notifies the
session again.
"""

import logging
from typing import Callable, Iterable, List, Optional, Union

from .bend import BendOverrideEngine
from .config import DEFAULT_SETTINGS, RoutingSettings
from .drag import DragSession
from .models import DisplayMode
from .pipeline import LayoutEngine, RenderFrame
from .store import DiagramStore, StoreChange
from .tracer import RouteTrace

logger = logging.getLogger(__name__)

FrameListener = Callable[[RenderFrame], None]


class RoutingSession:
    """
    Keeps an up-to-date RenderFrame for a store and a display mode.

    Example:
        >>> session = RoutingSession(store, "LOGICAL")
        >>> session.frame.routes
        >>> session.bend.nudge(session.frame, "c1", NudgeDirection.RIGHT)
        >>> session.frame.routes["c1"]  # already recomputed
        >>> session.close()
    """

    def __init__(
        self,
        store: DiagramStore,
        mode: Union[DisplayMode, str] = DisplayMode.LOGICAL,
        settings: RoutingSettings = DEFAULT_SETTINGS,
        debug: bool = False,
    ):
        self.store = store
        self.mode = DisplayMode.parse(mode)
        self.engine = LayoutEngine(settings)
        self.bend = BendOverrideEngine(store, settings)
        self.debug = debug
        self.trace: Optional[RouteTrace] = None
        self.frame: RenderFrame = RenderFrame(mode=self.mode)
        self._frame_listeners: List[FrameListener] = []
        self._unsubscribe = store.subscribe(self._on_store_change)
        self.recompute()

    def on_frame(self, listener: FrameListener) -> None:
        """Call `listener` with every new frame."""
        self._frame_listeners.append(listener)

    def set_mode(self, mode: Union[DisplayMode, str]) -> RenderFrame:
        self.mode = DisplayMode.parse(mode)
        return self.recompute()

    def recompute(self) -> RenderFrame:
        """Run the pipeline on the stored data and publish the frame."""
        trace = RouteTrace() if self.debug else None
        frame = self.engine.compute_frame(
            self.store, self.store, self.mode, trace=trace
        )
        self.trace = trace
        self._publish(frame)
        return frame

    def start_drag(self, node_ids: Iterable[str]) -> DragSession:
        """Begin dragging nodes; every move publishes a live frame."""
        return DragSession(
            self.store, self.mode, self.engine, node_ids, on_frame=self._publish
        )

    def close(self) -> None:
        """Stop listening to the store."""
        self._unsubscribe()

    def _on_store_change(self, change: StoreChange) -> None:
        logger.debug("store change %s %s", change.kind.value, change.entity_ids)
        self.recompute()

    def _publish(self, frame: RenderFrame) -> None:
        self.frame = frame
        for listener in list(self._frame_listeners):
            listener(frame)
