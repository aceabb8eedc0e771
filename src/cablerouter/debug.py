"""
Debug utilities for cablerouter.

Key Components:
- layout_diff: Compare two layouts route-by-route
- FrameInspector: Queries over a RenderFrame (segments, bends, overlaps)

Usage:
    >>> from cablerouter.debug import layout_diff
    >>> print(layout_diff(expected_routes, frame.routes))
"""

from typing import Dict, List, Mapping, Tuple

from .models import Point, Route
from .pipeline import RenderFrame

Segment = Tuple[Point, Point]


def _format(points: Route) -> str:
    return " -> ".join(f"({x:g},{y:g})" for x, y in points)


def layout_diff(expected: Mapping[str, Route], actual: Mapping[str, Route]) -> str:
    """
    Generate a readable diff between two layouts.

    Lists connections missing from either side and, for routes present in
    both, the first point index where they differ.

    Args:
        expected: The expected routes keyed by connection id
        actual: The actual routes keyed by connection id

    Returns:
        A formatted string showing the differences
    """
    output: List[str] = ["=" * 60, "LAYOUT DIFF", "=" * 60]

    missing = [cid for cid in expected if cid not in actual]
    extra = [cid for cid in actual if cid not in expected]
    changed = [
        cid
        for cid in expected
        if cid in actual and list(expected[cid]) != list(actual[cid])
    ]

    if not (missing or extra or changed):
        output.append("No differences found.")
        return "\n".join(output)

    for cid in missing:
        output.append(f"- {cid}: missing from actual")
    for cid in extra:
        output.append(f"+ {cid}: not expected")
    for cid in changed:
        exp, act = list(expected[cid]), list(actual[cid])
        first = next(
            (i for i, (e, a) in enumerate(zip(exp, act)) if e != a),
            min(len(exp), len(act)),
        )
        output.append(f"~ {cid}: differs at point {first}")
        output.append(f"    E {_format(exp)}")
        output.append(f"    A {_format(act)}")

    return "\n".join(output)


def route_segments(points: Route) -> List[Segment]:
    """Consecutive point pairs of a route."""
    return [(points[i], points[i + 1]) for i in range(len(points) - 1)]


class FrameInspector:
    """
    Utilities for inspecting a computed frame.

    Used by tests to check routing quality without drawing anything.
    """

    def __init__(self, frame: RenderFrame):
        self._frame = frame

    def segments(self, connection_id: str) -> List[Segment]:
        return route_segments(self._frame.routes.get(connection_id, []))

    def bend_count(self, connection_id: str) -> int:
        """Number of direction changes along a route."""
        points = self._frame.routes.get(connection_id, [])
        return max(0, len(points) - 2)

    def is_orthogonal(self, connection_id: str) -> bool:
        return all(
            a[0] == b[0] or a[1] == b[1] for a, b in self.segments(connection_id)
        )

    def routes_at_node(self, node_id: str) -> Dict[str, Route]:
        """Routes whose source or target port sits on the given node."""
        result = {}
        for cid, pair in self._frame.ports.items():
            if cid not in self._frame.routes:
                continue
            if node_id in (pair.start.node, pair.end.node):
                result[cid] = self._frame.routes[cid]
        return result

    def overlapping_pairs(self) -> List[Tuple[str, str]]:
        """
        Connection pairs that share a collinear run of non-zero length.

        Touching at a single point (crossings, shared ports) is allowed.
        """
        pairs = []
        ids = list(self._frame.routes)
        for i, first in enumerate(ids):
            for second in ids[i + 1 :]:
                if self._overlap(self.segments(first), self.segments(second)):
                    pairs.append((first, second))
        return pairs

    @staticmethod
    def _overlap(first: List[Segment], second: List[Segment]) -> bool:
        for (a1, a2) in first:
            for (b1, b2) in second:
                if a1[1] == a2[1] == b1[1] == b2[1]:
                    lo = max(min(a1[0], a2[0]), min(b1[0], b2[0]))
                    hi = min(max(a1[0], a2[0]), max(b1[0], b2[0]))
                    if hi - lo > 0:
                        return True
                if a1[0] == a2[0] == b1[0] == b2[0]:
                    lo = max(min(a1[1], a2[1]), min(b1[1], b2[1]))
                    hi = min(max(a1[1], a2[1]), max(b1[1], b2[1]))
                    if hi - lo > 0:
                        return True
        return False
