"""
Port allocation on node sides.

Every connection end that lands on a node side gets its own slot along that
side. Slots are spaced evenly and centered on the side midpoint, so three
cables on a right side sit at -gap, 0 and +gap from the vertical center.

Slots are handed out in the iteration order of the connection collection.
There is no secondary sort by the position of the node at the far end, so
connections added out of spatial order can produce crossing cables.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple

from .config import ALIGN_THRESHOLD, PORT_GAP
from .models import Connection, Port, PortPair, Rect, Side
from .sides import select_sides

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SideEntry:
    """One connection end waiting for a slot on a node side."""

    connection_id: str
    is_source: bool


SideTable = Dict[str, Dict[Side, List[SideEntry]]]


def collect_side_entries(
    connections: Iterable[Connection],
    rects: Mapping[str, Rect],
    threshold: float = ALIGN_THRESHOLD,
) -> Tuple[SideTable, Dict[str, Tuple[Side, Side]]]:
    """
    Run side selection for every connection and group the ends by node side.

    Connections with a missing endpoint are skipped.

    Args:
        connections: Connections in iteration order.
        rects: Node rectangles for the active mode, keyed by node id.
        threshold: Alignment threshold forwarded to select_sides.

    Returns:
        (side table, chosen sides keyed by connection id)
    """
    table: SideTable = {node_id: {side: [] for side in Side} for node_id in rects}
    chosen: Dict[str, Tuple[Side, Side]] = {}

    for conn in connections:
        if conn.source not in rects or conn.target not in rects:
            continue
        src_side, tgt_side = select_sides(
            rects[conn.source], rects[conn.target], threshold
        )
        chosen[conn.id] = (src_side, tgt_side)
        table[conn.source][src_side].append(SideEntry(conn.id, True))
        table[conn.target][tgt_side].append(SideEntry(conn.id, False))

    return table, chosen


class PortAllocator:
    """
    Assigns concrete port coordinates to connection ends.

    Attributes:
        gap: Distance between neighbouring ports on one side.
        spread_vertical_sides: Fan top/bottom ports out along X. When False
            every port on a top or bottom side sits on the side midpoint.
    """

    def __init__(self, gap: float = PORT_GAP, spread_vertical_sides: bool = True):
        self.gap = gap
        self.spread_vertical_sides = spread_vertical_sides

    def allocate(
        self, table: SideTable, rects: Mapping[str, Rect]
    ) -> Dict[str, PortPair]:
        """
        Place every side entry and pair up the two ends of each connection.

        Args:
            table: Side entries per node and side (see collect_side_entries).
            rects: Node rectangles keyed by node id.

        Returns:
            PortPair per connection id, for connections with both ends placed.
        """
        starts: Dict[str, Port] = {}
        ends: Dict[str, Port] = {}

        for node_id, sides in table.items():
            rect = rects[node_id]
            for side, entries in sides.items():
                if not entries:
                    continue
                placed = self.place_side(node_id, rect, side, entries)
                for entry, port in zip(entries, placed):
                    if entry.is_source:
                        starts[entry.connection_id] = port
                    else:
                        ends[entry.connection_id] = port

        pairs: Dict[str, PortPair] = {}
        for conn_id, start in starts.items():
            end = ends.get(conn_id)
            if end is None:
                logger.debug("connection %s has no target port", conn_id)
                continue
            pairs[conn_id] = PortPair(start, end)
        return pairs

    def place_side(
        self, node_id: str, rect: Rect, side: Side, entries: List[SideEntry]
    ) -> List[Port]:
        """Compute port coordinates for the entries of a single side."""
        count = len(entries)
        first = -((count - 1) / 2) * self.gap
        ports = []

        for index, entry in enumerate(entries):
            offset = first + index * self.gap

            if side == Side.LEFT:
                x, y = rect.x, rect.center_y + offset
            elif side == Side.RIGHT:
                x, y = rect.right, rect.center_y + offset
            else:
                if not self.spread_vertical_sides:
                    offset = 0
                x = rect.center_x + offset
                y = rect.y if side == Side.TOP else rect.bottom

            ports.append(Port(node_id, side, x, y, entry.is_source))

        return ports
