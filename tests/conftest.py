"""Pytest configuration and shared fixtures for cablerouter tests."""

import pytest

from cablerouter import (
    Connection,
    DiagramStore,
    LayoutEngine,
    Node,
    Rect,
)


class FixedRects:
    """Node accessor returning the same rectangle in every mode."""

    def __init__(self, rects):
        self.rects = dict(rects)

    def get_rect(self, node_id, mode, grid_size=24):
        return self.rects.get(node_id)


def box(x, y, width=100, height=60):
    """Card-sized rectangle at (x, y)."""
    return Rect(x, y, width, height)


@pytest.fixture
def make_rects():
    """Factory building a node accessor from {node_id: Rect}."""
    return FixedRects


@pytest.fixture
def make_box():
    """Factory for card-sized rectangles."""
    return box


@pytest.fixture
def engine():
    """Default LayoutEngine instance."""
    return LayoutEngine()


@pytest.fixture
def s_shape_rects():
    """Two horizontally separated boxes, B lower than A."""
    return FixedRects({"A": box(0, 0), "B": box(300, 120)})


@pytest.fixture
def stacked_rects():
    """Two nearly stacked boxes (horizontal gap below the threshold)."""
    return FixedRects({"A": box(0, 0), "B": box(10, 200)})


@pytest.fixture
def fan_rects():
    """One source box with three targets to its right."""
    return FixedRects(
        {
            "A": box(0, 0),
            "B": box(300, 0),
            "C": box(300, 100),
            "D": box(300, 200),
        }
    )


@pytest.fixture
def fan_connections():
    """Three connections leaving A."""
    return [
        Connection("c1", "A", "B"),
        Connection("c2", "A", "C"),
        Connection("c3", "A", "D"),
    ]


@pytest.fixture
def logical_store():
    """
    Store with two logical-mode nodes and one connection.

    a sits at cell (0, 0) -> rect (0, 0, 100, 60)
    b sits at cell (12, 5) -> rect (288, 120, 100, 60)
    """
    store = DiagramStore()
    store.add_node(Node("a", logical_pos=(0, 0), physical_pos=(0, 0)))
    store.add_node(Node("b", logical_pos=(12, 5), physical_pos=(300, 120)))
    store.add_connection(Connection("c1", "a", "b"))
    return store


@pytest.fixture
def physical_store():
    """Store with three physical-mode nodes and two connections."""
    store = DiagramStore()
    store.add_node(Node("a", physical_pos=(0, 0)))
    store.add_node(Node("b", physical_pos=(300, 120)))
    store.add_node(Node("c", physical_pos=(300, 360)))
    store.add_connection(Connection("c1", "a", "b"))
    store.add_connection(Connection("c2", "b", "c"))
    return store
