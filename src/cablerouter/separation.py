"""
Separation of routes that share a start anchor.

Cables leaving the exact same port coordinate would otherwise draw on top
of each other. Each group of such routes is fanned out symmetrically around
its original bend by moving the first vertical run of every route.

This pass needs the whole frame, so it runs once after every route of the
frame has been built.
"""

import logging
from typing import Dict, List, Mapping

from .config import EPSILON, SEPARATION_GAP
from .models import Point, Route
from .snapping import shift_first_interior_vertical

logger = logging.getLogger(__name__)


def group_by_start(routes: Mapping[str, Route]) -> Dict[Point, List[str]]:
    """Group connection ids by the exact first point of their route."""
    groups: Dict[Point, List[str]] = {}
    for conn_id, points in routes.items():
        if len(points) < 2:
            continue
        groups.setdefault(points[0], []).append(conn_id)
    return groups


def apply_path_separation(
    routes: Mapping[str, Route], gap: float = SEPARATION_GAP
) -> Dict[str, Route]:
    """
    Fan out routes that start at the same point.

    Args:
        routes: Route per connection id, in frame order.
        gap: Distance between neighbouring vertical runs.

    Returns:
        New mapping with the same keys; routes of singleton groups are
        returned unchanged.
    """
    separated = dict(routes)

    for start, conn_ids in group_by_start(routes).items():
        count = len(conn_ids)
        if count <= 1:
            continue

        # Stable, so equal start Y keeps frame order
        ordered = sorted(conn_ids, key=lambda cid: routes[cid][0][1])
        logger.debug("separating %d routes starting at %s", count, start)

        for index, conn_id in enumerate(ordered):
            offset = (index - (count - 1) / 2) * gap
            if abs(offset) < EPSILON:
                continue
            shifted, found = shift_first_interior_vertical(routes[conn_id], offset)
            if found:
                separated[conn_id] = shifted

    return separated
