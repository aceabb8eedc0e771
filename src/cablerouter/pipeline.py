"""
Connection layout pipeline.

Combines side selection, port allocation, route building, bend snapping
and path separation into one pure pass over the diagram:

    node rects -> sides -> ports -> routes (default or override)
        -> half-grid snapping -> path separation -> RenderFrame

The pass is re-run in full whenever diagram data changes and once per
pointer move during a node drag. Nothing is cached between runs; the
RenderFrame returned by one run is owned by the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .config import DEFAULT_SETTINGS, RoutingSettings
from .models import Connection, DisplayMode, Node, PortPair, Rect, Route, Side
from .ports import PortAllocator, collect_side_entries
from .routing import build_bend_override_route, build_manhattan_route
from .separation import apply_path_separation
from .snapping import snap_internal_segment
from .store import ConnectionAccessor, NodeAccessor, as_node_accessor
from .tracer import RouteTrace

logger = logging.getLogger(__name__)

Connections = Union[
    ConnectionAccessor, Mapping[str, Connection], Iterable[Connection]
]
Nodes = Union[NodeAccessor, Mapping[str, Node]]


@dataclass
class RenderFrame:
    """
    Result of one pipeline run.

    Attributes:
        mode: Display mode the frame was computed for.
        rects: Node rectangles used for this run, keyed by node id.
        sides: (source side, target side) per connection id.
        ports: Allocated ports per connection id.
        routes: Final polyline per connection id, in connection order.
        overridden: Ids of connections drawn with a bend override.
        dropped: Ids of connections skipped because an endpoint is missing.
    """

    mode: DisplayMode
    rects: Dict[str, Rect] = field(default_factory=dict)
    sides: Dict[str, Tuple[Side, Side]] = field(default_factory=dict)
    ports: Dict[str, PortPair] = field(default_factory=dict)
    routes: Dict[str, Route] = field(default_factory=dict)
    overridden: List[str] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)

    def route(self, connection_id: str) -> Optional[Route]:
        return self.routes.get(connection_id)

    def port_pair(self, connection_id: str) -> Optional[PortPair]:
        return self.ports.get(connection_id)


def iter_connection_list(connections: Connections) -> List[Connection]:
    """Normalize the accepted connection containers to an ordered list."""
    if hasattr(connections, "iter_connections"):
        return list(connections.iter_connections())  # type: ignore[union-attr]
    if isinstance(connections, Mapping):
        return list(connections.values())
    return list(connections)


class LayoutEngine:
    """
    Computes connection routes for a whole diagram.

    Example:
        >>> engine = LayoutEngine()
        >>> frame = engine.compute_frame(store, store, DisplayMode.LOGICAL)
        >>> frame.routes["c1"]
    """

    def __init__(self, settings: RoutingSettings = DEFAULT_SETTINGS):
        self.settings = settings
        self.allocator = PortAllocator(
            gap=settings.port_gap,
            spread_vertical_sides=settings.spread_vertical_sides,
        )

    def compute_frame(
        self,
        connections: Connections,
        nodes: Nodes,
        mode: Union[DisplayMode, str],
        trace: Optional[RouteTrace] = None,
    ) -> RenderFrame:
        """
        Run the full routing pipeline once.

        Args:
            connections: Store, mapping or iterable of connections.
            nodes: Node accessor or mapping of node id to Node.
            mode: Active display mode.
            trace: Optional RouteTrace that receives every stage.

        Returns:
            RenderFrame for this run.
        """
        mode = DisplayMode.parse(mode)
        accessor = as_node_accessor(nodes)
        settings = self.settings
        frame = RenderFrame(mode=mode)

        if trace is not None:
            trace.mode = mode.value

        # Stage 1: resolve rectangles, drop dangling connections
        live: List[Connection] = []
        for conn in iter_connection_list(connections):
            rects = [
                self._resolve(accessor, frame, node_id)
                for node_id in (conn.source, conn.target)
            ]
            if None in rects:
                frame.dropped.append(conn.id)
                logger.debug("dropping connection %s: endpoint node missing", conn.id)
                continue
            live.append(conn)

        if trace is not None:
            trace.add_stage(
                "resolve",
                {
                    "connections": len(live),
                    "nodes": len(frame.rects),
                    "dropped": list(frame.dropped),
                },
            )

        # Stage 2: sides
        table, frame.sides = collect_side_entries(
            live, frame.rects, settings.align_threshold
        )
        if trace is not None:
            trace.add_stage(
                "sides",
                {cid: f"{s.value}->{t.value}" for cid, (s, t) in frame.sides.items()},
            )

        # Stage 3: ports
        frame.ports = self.allocator.allocate(table, frame.rects)
        if trace is not None:
            trace.add_stage(
                "ports",
                {
                    cid: (pair.start.point, pair.end.point)
                    for cid, pair in frame.ports.items()
                },
            )

        # Stage 4 and 5: routes, snapping
        built: Dict[str, Route] = {}
        snapped: Dict[str, Route] = {}
        for conn in live:
            pair = frame.ports.get(conn.id)
            if pair is None:
                continue
            bend_x = conn.bend_x(mode)
            if bend_x is not None:
                route = build_bend_override_route(
                    pair.start, pair.end, bend_x, settings.stub_length
                )
                built[conn.id] = route
                # Overrides are snapped when committed
                snapped[conn.id] = route
                frame.overridden.append(conn.id)
            else:
                route = build_manhattan_route(
                    pair.start, pair.end, settings.stub_length
                )
                built[conn.id] = route
                snapped[conn.id] = snap_internal_segment(route, settings.half_grid)

        if trace is not None:
            trace.add_stage(
                "routes_built", {"overridden": list(frame.overridden)}, built
            )
            trace.add_stage(
                "routes_snapped", {"half_grid": settings.half_grid}, snapped
            )

        # Stage 6: separation across the whole frame
        frame.routes = apply_path_separation(snapped, settings.separation_gap)
        if trace is not None:
            trace.add_stage(
                "routes_separated", {"gap": settings.separation_gap}, frame.routes
            )

        return frame

    def compute_layout(
        self, connections: Connections, nodes: Nodes, mode: Union[DisplayMode, str]
    ) -> Dict[str, Route]:
        """Full pipeline result for one frame: route per connection id."""
        return self.compute_frame(connections, nodes, mode).routes

    def compute_single_route(
        self, connection: Connection, nodes: Nodes, mode: Union[DisplayMode, str]
    ) -> Optional[Route]:
        """
        Route one connection on its own, without the rest of the scene.

        Ports are allocated as if this were the only connection, so the
        result can differ from the same connection's route in a full frame.
        """
        frame = self.compute_frame([connection], nodes, mode)
        return frame.routes.get(connection.id)

    def _resolve(
        self, accessor: NodeAccessor, frame: RenderFrame, node_id: str
    ) -> Optional[Rect]:
        rect = frame.rects.get(node_id)
        if rect is None:
            rect = accessor.get_rect(node_id, frame.mode, self.settings.grid_size)
            if rect is not None:
                frame.rects[node_id] = rect
        return rect


def compute_layout(
    connections: Connections,
    nodes: Nodes,
    mode: Union[DisplayMode, str],
    settings: RoutingSettings = DEFAULT_SETTINGS,
) -> Dict[str, Route]:
    """
    Compute the routes of every connection for one frame.

    Args:
        connections: Store, mapping or iterable of connections.
        nodes: Node accessor or mapping of node id to Node.
        mode: Active display mode.
        settings: Routing parameters.

    Returns:
        Dictionary mapping connection id to its polyline. Connections with
        a missing endpoint node are absent.
    """
    return LayoutEngine(settings).compute_layout(connections, nodes, mode)


def compute_single_route(
    connection: Connection,
    nodes: Nodes,
    mode: Union[DisplayMode, str],
    settings: RoutingSettings = DEFAULT_SETTINGS,
) -> Optional[Route]:
    """Route a single connection for exporters; None if an endpoint is missing."""
    return LayoutEngine(settings).compute_single_route(connection, nodes, mode)
