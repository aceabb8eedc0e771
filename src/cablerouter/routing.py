"""
Orthogonal route construction.

Builds the right-angle polyline between two allocated ports. Every route
starts exactly at the source port and ends exactly at the target port; the
stubs projecting out of the boxes are interior points only.
"""

from .config import STUB_LENGTH
from .models import Point, Port, Route, Side
from .sides import outward_vector
from .snapping import simplify_orthogonal


def stub_point(port: Port, buffer: float = STUB_LENGTH) -> Point:
    """Point reached by leaving the port outward for `buffer` pixels."""
    dx, dy = outward_vector(port.side)
    return (port.x + dx * buffer, port.y + dy * buffer)


def build_manhattan_route(
    start: Port, end: Port, buffer: float = STUB_LENGTH
) -> Route:
    """
    Calculate the default orthogonal route between two ports.

    Same-orientation ports get a three-leg detour through a shared bend
    line; mixed orientations meet in a single corner.

    Args:
        start: Source port.
        end: Target port.
        buffer: Stub length.

    Returns:
        Unsimplified list of (x, y) points.
    """
    p1 = stub_point(start, buffer)
    p2 = stub_point(end, buffer)
    points = [start.point, p1]

    start_vertical = start.side.is_vertical
    end_vertical = end.side.is_vertical

    if start_vertical == end_vertical:
        if start_vertical:
            mid_y = (p1[1] + p2[1]) / 2
            points.append((p1[0], mid_y))
            points.append((p2[0], mid_y))
        else:
            if start.side == end.side:
                # Same side: go around the outside of both boxes
                if start.side == Side.LEFT:
                    mid_x = min(p1[0], p2[0])
                else:
                    mid_x = max(p1[0], p2[0])
            else:
                mid_x = (p1[0] + p2[0]) / 2
            points.append((mid_x, p1[1]))
            points.append((mid_x, p2[1]))
    elif start_vertical:
        points.append((p1[0], p2[1]))
    else:
        points.append((p2[0], p1[1]))

    points.append(p2)
    points.append(end.point)
    return points


def build_bend_override_route(
    start: Port, end: Port, bend_x: float, buffer: float = STUB_LENGTH
) -> Route:
    """
    Build the S-route with its vertical run pinned at `bend_x`.

    The shape is source port, source stub, (bend_x, source stub y),
    (bend_x, target stub y), target stub, target port, simplified.
    """
    p1 = stub_point(start, buffer)
    p2 = stub_point(end, buffer)
    points = [
        start.point,
        p1,
        (bend_x, p1[1]),
        (bend_x, p2[1]),
        p2,
        end.point,
    ]
    return simplify_orthogonal(points)
