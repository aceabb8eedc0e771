"""
Diagram store and accessor protocols.

The routing pipeline never owns diagram data. It reads node rectangles and
connections through two narrow protocols, NodeAccessor and
ConnectionAccessor. DiagramStore is the in-memory implementation used by
the editor: one table of nodes, one table of connections (kept in insertion
order, which decides port order), and a networkx MultiDiGraph index for
node/connection incidence.

Listeners are notified after every mutation with a StoreChange. There is no
general broadcast: subscribe() returns the function that unsubscribes.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import (
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Union,
)

import networkx as nx

from .config import GRID_SIZE
from .models import Connection, DisplayMode, Node, Rect
from .snapping import grid_cell

logger = logging.getLogger(__name__)


class DiagramError(KeyError):
    """Raised when the store is asked about an unknown or duplicate id."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class NodeAccessor(Protocol):
    """Read access to node rectangles."""

    def get_rect(
        self, node_id: str, mode: DisplayMode, grid_size: float = GRID_SIZE
    ) -> Optional[Rect]:
        """
        Rectangle of a node in the given mode, or None if it is missing.

        grid_size is the pixel size of one logical cell.
        """
        ...


class ConnectionAccessor(Protocol):
    """Read access to connections plus the bend override field."""

    def iter_connections(self) -> Iterator[Connection]:
        ...

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        ...

    def get_bend_x(self, connection_id: str, mode: DisplayMode) -> Optional[float]:
        ...

    def set_bend_x(self, connection_id: str, mode: DisplayMode, bend_x: float) -> None:
        ...


class NodeTable:
    """NodeAccessor over a plain mapping of node id to Node."""

    def __init__(self, nodes: Mapping[str, Node]):
        self._nodes = nodes

    def get_rect(
        self, node_id: str, mode: DisplayMode, grid_size: float = GRID_SIZE
    ) -> Optional[Rect]:
        node = self._nodes.get(node_id)
        if node is None:
            return None
        return node.rect(mode, grid_size=grid_size)


def as_node_accessor(nodes: Union[NodeAccessor, Mapping[str, Node]]) -> NodeAccessor:
    """Wrap a plain node mapping; accessors are returned as-is."""
    if hasattr(nodes, "get_rect"):
        return nodes  # type: ignore[return-value]
    return NodeTable(nodes)  # type: ignore[arg-type]


class ChangeKind(Enum):
    """What a store mutation touched."""

    NODE_ADDED = "node_added"
    NODES_MOVED = "nodes_moved"
    NODE_REMOVED = "node_removed"
    CONNECTION_ADDED = "connection_added"
    CONNECTION_REMOVED = "connection_removed"
    BEND_CHANGED = "bend_changed"


@dataclass(frozen=True)
class StoreChange:
    """Notification payload sent to store listeners."""

    kind: ChangeKind
    entity_ids: Tuple[str, ...]


Listener = Callable[[StoreChange], None]


class DiagramStore:
    """
    In-memory registry of nodes and connections.

    Implements both NodeAccessor and ConnectionAccessor.

    Example:
        >>> store = DiagramStore()
        >>> store.add_node(Node("a", logical_pos=(0, 0)))
        >>> store.add_node(Node("b", logical_pos=(12, 0)))
        >>> store.add_connection(Connection("c1", "a", "b"))
        >>> [c.id for c in store.connections_for_node("a")]
        ['c1']
    """

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._connections: Dict[str, Connection] = {}
        self.graph: nx.MultiDiGraph = nx.MultiDiGraph()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> Mapping[str, Node]:
        return self._nodes

    @property
    def connections(self) -> Mapping[str, Connection]:
        return self._connections

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_rect(
        self, node_id: str, mode: DisplayMode, grid_size: float = GRID_SIZE
    ) -> Optional[Rect]:
        node = self._nodes.get(node_id)
        if node is None:
            return None
        return node.rect(mode, grid_size=grid_size)

    def iter_connections(self) -> Iterator[Connection]:
        return iter(list(self._connections.values()))

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def connections_for_node(self, node_id: str) -> List[Connection]:
        """Connections touching a node, in insertion order."""
        if node_id not in self.graph:
            return []
        keys = {key for _, _, key in self.graph.in_edges(node_id, keys=True)}
        keys.update(key for _, _, key in self.graph.out_edges(node_id, keys=True))
        return [conn for cid, conn in self._connections.items() if cid in keys]

    def get_bend_x(self, connection_id: str, mode: DisplayMode) -> Optional[float]:
        return self._require_connection(connection_id).bend_x(mode)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> None:
        if node.id in self._nodes:
            raise DiagramError(f"node {node.id!r} already exists")
        self._nodes[node.id] = node
        self.graph.add_node(node.id)
        self._notify(ChangeKind.NODE_ADDED, node.id)

    def move_nodes(
        self,
        positions: Mapping[str, Tuple[float, float]],
        mode: DisplayMode,
        grid_size: float = GRID_SIZE,
    ) -> None:
        """
        Store new pixel positions for several nodes in one notification.

        Logical mode keeps grid cells, so pixel positions are converted to
        the nearest col/row of grid_size pixels. Physical and network modes
        store pixels.
        """
        for node_id in positions:
            self._require_node(node_id)

        for node_id, (x, y) in positions.items():
            node = self._nodes[node_id]
            if mode.geometry.grid_positions:
                node.logical_pos = (grid_cell(x, grid_size), grid_cell(y, grid_size))
            else:
                node.physical_pos = (x, y)

        if positions:
            self._notify(ChangeKind.NODES_MOVED, *positions)

    def move_node(
        self,
        node_id: str,
        mode: DisplayMode,
        x: float,
        y: float,
        grid_size: float = GRID_SIZE,
    ) -> None:
        self.move_nodes({node_id: (x, y)}, mode, grid_size)

    def remove_node(self, node_id: str, cascade: bool = True) -> List[str]:
        """
        Delete a node.

        Args:
            node_id: Node to delete.
            cascade: Also delete every connection touching the node. With
                cascade=False the connections stay behind as dangling
                references, which the routing pipeline skips.

        Returns:
            Ids of the connections removed along with the node.
        """
        self._require_node(node_id)
        removed = []
        if cascade:
            removed = [conn.id for conn in self.connections_for_node(node_id)]
            for conn_id in removed:
                del self._connections[conn_id]
            self.graph.remove_node(node_id)
        del self._nodes[node_id]
        self._notify(ChangeKind.NODE_REMOVED, node_id, *removed)
        return removed

    def add_connection(self, connection: Connection) -> None:
        if connection.id in self._connections:
            raise DiagramError(f"connection {connection.id!r} already exists")
        self._connections[connection.id] = connection
        self.graph.add_edge(connection.source, connection.target, key=connection.id)
        self._notify(ChangeKind.CONNECTION_ADDED, connection.id)

    def remove_connection(self, connection_id: str) -> None:
        conn = self._require_connection(connection_id)
        del self._connections[connection_id]
        if self.graph.has_edge(conn.source, conn.target, key=connection_id):
            self.graph.remove_edge(conn.source, conn.target, key=connection_id)
        self._notify(ChangeKind.CONNECTION_REMOVED, connection_id)

    def set_bend_x(self, connection_id: str, mode: DisplayMode, bend_x: float) -> None:
        """Write the bend override of one connection for one mode."""
        mode = DisplayMode.parse(mode)
        conn = self._require_connection(connection_id)
        conn.bend_overrides[mode] = bend_x
        logger.debug("bend override %s[%s] = %s", connection_id, mode.value, bend_x)
        self._notify(ChangeKind.BEND_CHANGED, connection_id)

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for store changes.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: ChangeKind, *entity_ids: str) -> None:
        change = StoreChange(kind, tuple(entity_ids))
        for listener in list(self._listeners):
            listener(change)

    def _require_node(self, node_id: str) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise DiagramError(f"unknown node {node_id!r}")
        return node

    def _require_connection(self, connection_id: str) -> Connection:
        conn = self._connections.get(connection_id)
        if conn is None:
            raise DiagramError(f"unknown connection {connection_id!r}")
        return conn


def load_store(
    nodes: Iterable[Node], connections: Iterable[Connection]
) -> DiagramStore:
    """Build a store from existing nodes and connections."""
    store = DiagramStore()
    for node in nodes:
        store.add_node(node)
    for conn in connections:
        store.add_connection(conn)
    return store
