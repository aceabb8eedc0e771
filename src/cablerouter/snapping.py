"""
Grid snapping and polyline simplification.

Bends are kept on a half-grid (half of the node position grid) so cables
line up with the dot grid of the canvas. Only the main vertical run of a
route is snapped; the segments touching a port are left alone so ports
never move.

Both operations are idempotent: snapping or simplifying an already
snapped/simplified polyline returns it unchanged.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from .config import EPSILON, GRID_SIZE, HALF_GRID
from .models import Point, Route


@dataclass(frozen=True)
class SegmentInfo:
    """
    A vertical segment of a polyline.

    Attributes:
        index: Index of the segment's first point.
        x: Shared X coordinate.
        y1: Y of the first point.
        y2: Y of the second point.
        length: Absolute vertical length.
    """

    index: int
    x: float
    y1: float
    y2: float
    length: float

    @property
    def y_mid(self) -> float:
        return (self.y1 + self.y2) / 2


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def snap_to_half_grid(x: float, half_grid: float = HALF_GRID) -> float:
    """Snap a coordinate to the nearest half-grid line (ties round up)."""
    return _round_half_up(x / half_grid) * half_grid


def grid_cell(value: float, grid: float = GRID_SIZE) -> int:
    """Index of the grid line nearest to a pixel coordinate."""
    return _round_half_up(value / grid)


def snap_to_grid(value: float, grid: float = GRID_SIZE) -> float:
    """Snap a node coordinate to the base position grid."""
    return grid_cell(value, grid) * grid


def _same(a: float, b: float) -> bool:
    return abs(a - b) < EPSILON


def _collinear(a: Point, b: Point, c: Point) -> bool:
    horizontal = _same(a[1], b[1]) and _same(b[1], c[1])
    vertical = _same(a[0], b[0]) and _same(b[0], c[0])
    return horizontal or vertical


def simplify_orthogonal(points: Sequence[Point]) -> Route:
    """
    Drop interior points that are collinear with their neighbours.

    Duplicate points count as collinear, so zero-length segments disappear.
    The first and last points are always kept. The result contains no three
    consecutive collinear points.
    """
    if len(points) < 3:
        return list(points)

    simplified: Route = [points[0]]
    for point in points[1:]:
        simplified.append(point)
        while len(simplified) >= 3 and _collinear(*simplified[-3:]):
            del simplified[-2]
    return simplified


def iter_vertical_segments(
    points: Sequence[Point], first: int = 0, last: Optional[int] = None
) -> Iterator[SegmentInfo]:
    """
    Yield the non-zero vertical segments between point indices first..last.

    A segment (i, i + 1) is included when first <= i and i + 1 <= last.
    """
    if last is None:
        last = len(points) - 1
    for i in range(max(first, 0), last):
        (x1, y1), (x2, y2) = points[i], points[i + 1]
        if not _same(x1, x2):
            continue
        length = abs(y2 - y1)
        if length < EPSILON:
            continue
        yield SegmentInfo(index=i, x=x1, y1=y1, y2=y2, length=length)


def _longest(segments: Iterator[SegmentInfo]) -> Optional[SegmentInfo]:
    best = None
    for segment in segments:
        if best is None or segment.length > best.length:
            best = segment
    return best


def primary_vertical_segment(points: Sequence[Point]) -> Optional[SegmentInfo]:
    """Longest vertical segment of the whole polyline, or None."""
    if len(points) < 2:
        return None
    return _longest(iter_vertical_segments(points))


def interior_vertical_segments(points: Sequence[Point]) -> Iterator[SegmentInfo]:
    """Vertical segments that touch neither the start nor the end point."""
    return iter_vertical_segments(points, first=1, last=len(points) - 2)


def _move_segment(points: Route, index: int, x: float) -> None:
    for i in (index, index + 1):
        points[i] = (x, points[i][1])


def snap_internal_segment(
    points: Sequence[Point], half_grid: float = HALF_GRID
) -> Route:
    """
    Snap the main vertical run of a route to the half-grid.

    The route is simplified first so each port stub merges with the leg it
    continues. The longest vertical segment touching neither endpoint then
    has its X snapped, and the route is simplified again. This repeats until
    the longest such segment already sits on the half-grid.
    """
    result = simplify_orthogonal(points)

    while True:
        segment = _longest(interior_vertical_segments(result))
        if segment is None:
            return result
        snapped_x = snap_to_half_grid(segment.x, half_grid)
        if segment.x == snapped_x == result[segment.index + 1][0]:
            return result
        _move_segment(result, segment.index, snapped_x)
        result = simplify_orthogonal(result)


def shift_first_interior_vertical(points: Route, dx: float) -> Tuple[Route, bool]:
    """
    Shift the first vertical segment that touches neither endpoint by dx.

    Returns:
        (new route, whether a segment was found)
    """
    shifted = list(points)
    for segment in interior_vertical_segments(shifted):
        _move_segment(shifted, segment.index, segment.x + dx)
        return shifted, True
    return shifted, False
