"""Tests for the diagram store."""

import pytest

from cablerouter.models import Connection, DisplayMode, Node, Rect
from cablerouter.store import (
    ChangeKind,
    DiagramError,
    DiagramStore,
    NodeTable,
    as_node_accessor,
    load_store,
)


@pytest.fixture
def store():
    store = DiagramStore()
    for node_id, col in (("a", 0), ("b", 10), ("c", 20)):
        store.add_node(Node(node_id, logical_pos=(col, 0)))
    store.add_connection(Connection("ab", "a", "b"))
    store.add_connection(Connection("bc", "b", "c"))
    store.add_connection(Connection("ca", "c", "a"))
    return store


@pytest.fixture
def changes(store):
    received = []
    store.subscribe(received.append)
    return received


class TestReadAccess:
    """Tests for store lookups."""

    def test_get_rect(self, store):
        assert store.get_rect("b", DisplayMode.LOGICAL) == Rect(240, 0, 100, 60)

    def test_get_rect_missing(self, store):
        assert store.get_rect("zz", DisplayMode.LOGICAL) is None

    def test_iter_connections_in_insertion_order(self, store):
        assert [c.id for c in store.iter_connections()] == ["ab", "bc", "ca"]

    def test_connections_for_node(self, store):
        assert [c.id for c in store.connections_for_node("a")] == ["ab", "ca"]
        assert store.connections_for_node("zz") == []

    def test_graph_index(self, store):
        assert store.graph.has_edge("a", "b", key="ab")
        assert store.graph.number_of_edges() == 3

    def test_parallel_connections(self, store):
        store.add_connection(Connection("ab2", "a", "b"))
        assert [c.id for c in store.connections_for_node("b")] == ["ab", "bc", "ab2"]


class TestMutations:
    """Tests for store mutations and notifications."""

    def test_duplicate_node(self, store):
        with pytest.raises(DiagramError, match="already exists"):
            store.add_node(Node("a"))

    def test_duplicate_connection(self, store):
        with pytest.raises(DiagramError):
            store.add_connection(Connection("ab", "a", "c"))

    def test_error_is_key_error(self, store):
        with pytest.raises(KeyError):
            store.remove_connection("nope")

    def test_error_message(self, store):
        with pytest.raises(DiagramError) as excinfo:
            store.remove_node("nope")
        assert str(excinfo.value) == "unknown node 'nope'"

    def test_add_notifies(self, store, changes):
        store.add_node(Node("d"))
        assert changes[-1].kind == ChangeKind.NODE_ADDED
        assert changes[-1].entity_ids == ("d",)

    def test_move_node_logical_stores_cells(self, store, changes):
        store.move_node("a", DisplayMode.LOGICAL, 123, 50)
        assert store.get_node("a").logical_pos == (5, 2)
        assert store.get_rect("a", DisplayMode.LOGICAL) == Rect(120, 48, 100, 60)
        assert changes[-1].kind == ChangeKind.NODES_MOVED

    def test_move_node_physical_stores_pixels(self, store):
        store.move_node("a", DisplayMode.PHYSICAL, 130, 52)
        node = store.get_node("a")
        assert node.physical_pos == (130, 52)
        assert node.logical_pos == (0, 0)

    def test_move_node_logical_custom_grid(self, store):
        store.move_node("a", DisplayMode.LOGICAL, 107, 50, grid_size=20)
        assert store.get_node("a").logical_pos == (5, 3)
        assert store.get_rect("a", DisplayMode.LOGICAL, 20) == Rect(100, 60, 100, 60)

    def test_move_nodes_single_notification(self, store, changes):
        store.move_nodes({"a": (24, 24), "b": (48, 48)}, DisplayMode.NETWORK)
        assert len(changes) == 1
        assert changes[0].entity_ids == ("a", "b")

    def test_move_unknown_node_changes_nothing(self, store, changes):
        with pytest.raises(DiagramError):
            store.move_nodes({"a": (24, 24), "zz": (0, 0)}, DisplayMode.PHYSICAL)
        assert store.get_node("a").physical_pos == (0, 0)
        assert changes == []

    def test_remove_node_cascades(self, store, changes):
        removed = store.remove_node("a")

        assert removed == ["ab", "ca"]
        assert [c.id for c in store.iter_connections()] == ["bc"]
        assert "a" not in store.graph
        assert changes[-1].kind == ChangeKind.NODE_REMOVED
        assert changes[-1].entity_ids == ("a", "ab", "ca")

    def test_remove_node_without_cascade(self, store):
        removed = store.remove_node("a", cascade=False)

        assert removed == []
        assert store.get_node("a") is None
        assert [c.id for c in store.iter_connections()] == ["ab", "bc", "ca"]

    def test_remove_connection(self, store, changes):
        store.remove_connection("bc")
        assert store.get_connection("bc") is None
        assert not store.graph.has_edge("b", "c", key="bc")
        assert changes[-1].kind == ChangeKind.CONNECTION_REMOVED


class TestBendOverrides:
    """Tests for the bend override field."""

    def test_set_and_get(self, store, changes):
        store.set_bend_x("ab", DisplayMode.LOGICAL, 204)
        assert store.get_bend_x("ab", DisplayMode.LOGICAL) == 204
        assert store.get_bend_x("ab", DisplayMode.PHYSICAL) is None
        assert changes[-1].kind == ChangeKind.BEND_CHANGED

    def test_mode_name_accepted(self, store):
        store.set_bend_x("ab", "network", 96)
        assert store.get_bend_x("ab", DisplayMode.NETWORK) == 96
        assert store.get_bend_x("ab", "NETWORK") == 96

    def test_unknown_connection(self, store):
        with pytest.raises(DiagramError):
            store.set_bend_x("zz", DisplayMode.LOGICAL, 12)
        with pytest.raises(DiagramError):
            store.get_bend_x("zz", DisplayMode.LOGICAL)

    def test_override_removed_with_connection(self, store):
        store.set_bend_x("ab", DisplayMode.LOGICAL, 204)
        store.remove_connection("ab")
        store.add_connection(Connection("ab", "a", "b"))
        assert store.get_bend_x("ab", DisplayMode.LOGICAL) is None


class TestSubscription:
    """Tests for subscribe/unsubscribe."""

    def test_unsubscribe(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)
        store.add_node(Node("d"))
        unsubscribe()
        store.add_node(Node("e"))
        assert [c.entity_ids for c in received] == [("d",)]

    def test_unsubscribe_twice(self, store):
        unsubscribe = store.subscribe(lambda change: None)
        unsubscribe()
        unsubscribe()


class TestHelpers:
    """Tests for NodeTable, as_node_accessor and load_store."""

    def test_node_table(self):
        table = NodeTable({"a": Node("a", physical_pos=(5, 6))})
        assert table.get_rect("a", DisplayMode.PHYSICAL) == Rect(5, 6, 24, 24)
        assert table.get_rect("b", DisplayMode.PHYSICAL) is None

    def test_as_node_accessor(self, store):
        assert as_node_accessor(store) is store
        assert isinstance(as_node_accessor({}), NodeTable)

    def test_load_store(self):
        store = load_store(
            [Node("a"), Node("b")], [Connection("c1", "a", "b")]
        )
        assert list(store.nodes) == ["a", "b"]
        assert list(store.connections) == ["c1"]
