"""
Graph Store

In-memory holder for the canvas graph. Exposes mutation primitives only;
whether an edge is allowed is decided by the ConnectionValidator before
add_edge is called.
"""

from typing import Callable, Dict, List, Optional, Set, Tuple
import logging
import random
import time

from schemas.graph_data import ARROW_CLOSED, Edge, GraphSnapshot, Node, Position
from .errors import InvalidInput, UnknownEntity

logger = logging.getLogger(__name__)


class GraphStore:
    """
    Holds the current nodes and edges, keyed by id, in insertion order.

    Node ids come from the creation timestamp in milliseconds. When two nodes
    are created within the same millisecond (or the clock goes backwards) the
    next id is bumped past the last one issued, so ids never collide.

    Example usage:
        store = GraphStore()
        a = store.add_node("extract")
        b = store.add_node("load")
        store.add_edge(a.id, b.id)

        store.set_node_selected(a.id, True)
        store.remove_selected()   # removes a and, by default, a -> b
    """

    def __init__(
        self,
        canvas_width: float = 400,
        canvas_height: float = 300,
        cascade_delete: bool = True,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize an empty store.

        Args:
            canvas_width: Upper bound (exclusive) for a new node's x coordinate
            canvas_height: Upper bound (exclusive) for a new node's y coordinate
            cascade_delete: Remove edges incident to a removed node
            clock: Time source in seconds, used for node ids
            rng: Random source for default node positions
        """
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.cascade_delete = cascade_delete
        self._clock = clock
        self._rng = rng or random.Random()

        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self._last_node_id = 0
        self._issued_edge_ids: Set[str] = set()

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def node_ids(self) -> Set[str]:
        return set(self._nodes)

    def get_node(self, node_id: str) -> Node:
        if node_id not in self._nodes:
            raise UnknownEntity("node", node_id)
        return self._nodes[node_id]

    def get_edge(self, edge_id: str) -> Edge:
        if edge_id not in self._edges:
            raise UnknownEntity("edge", edge_id)
        return self._edges[edge_id]

    def find_edge(self, source: str, target: str) -> Optional[Edge]:
        """Return the edge from source to target, if one exists"""
        for edge in self._edges.values():
            if edge.source == source and edge.target == target:
                return edge
        return None

    def add_node(self, label: Optional[str]) -> Node:
        """
        Create a node with a fresh id and a random default position.

        Args:
            label: Display label, must be non-empty

        Returns:
            The created node

        Raises:
            InvalidInput: If label is None or empty
        """
        if not label:
            raise InvalidInput("Node label must be a non-empty string")

        node = Node(
            id=self._next_node_id(),
            label=label,
            position=Position(
                x=self._rng.random() * self.canvas_width,
                y=self._rng.random() * self.canvas_height,
            ),
        )
        self._nodes[node.id] = node

        logger.info(f"Added node: id={node.id}, label={label!r}")
        return node

    def add_edge(self, source: str, target: str) -> Edge:
        """
        Append an edge from source to target.

        No validation happens here. A second edge between the same pair
        is collapsed into the existing one.

        Args:
            source: Source node id
            target: Target node id

        Returns:
            The created edge, or the existing edge for this pair
        """
        existing = self.find_edge(source, target)
        if existing is not None:
            logger.debug(f"Edge {source} -> {target} already exists: {existing.id}")
            return existing

        edge = Edge(
            id=self._next_edge_id(source, target),
            source=source,
            target=target,
            marker_end=ARROW_CLOSED,
        )
        self._edges[edge.id] = edge

        logger.info(f"Added edge: id={edge.id}, {source} -> {target}")
        return edge

    def remove_where(
        self,
        node_predicate: Callable[[Node], bool],
        edge_predicate: Callable[[Edge], bool],
    ) -> Tuple[List[Node], List[Edge]]:
        """
        Remove every node and edge matching the given predicates.

        When cascade_delete is set, edges touching a removed node are
        removed as well. Otherwise they are kept and become dangling.

        Returns:
            Tuple of (removed nodes, removed edges)
        """
        removed_nodes = [n for n in self._nodes.values() if node_predicate(n)]
        removed_ids = {n.id for n in removed_nodes}

        def edge_goes(edge: Edge) -> bool:
            if edge_predicate(edge):
                return True
            return self.cascade_delete and (
                edge.source in removed_ids or edge.target in removed_ids
            )

        removed_edges = [e for e in self._edges.values() if edge_goes(e)]

        for node in removed_nodes:
            del self._nodes[node.id]
        for edge in removed_edges:
            del self._edges[edge.id]

        if not self.cascade_delete:
            dangling = [
                e.id for e in self._edges.values()
                if e.source not in self._nodes or e.target not in self._nodes
            ]
            if dangling:
                logger.warning(f"Edges left dangling after removal: {dangling}")

        if removed_nodes or removed_edges:
            logger.info(
                f"Removed {len(removed_nodes)} nodes and {len(removed_edges)} edges"
            )
        return removed_nodes, removed_edges

    def remove_selected(self) -> Tuple[List[Node], List[Edge]]:
        """Remove every node and edge flagged as selected"""
        return self.remove_where(lambda n: n.selected, lambda e: e.selected)

    def set_node_selected(self, node_id: str, selected: bool = True) -> Node:
        node = self.get_node(node_id)
        node.selected = selected
        return node

    def set_edge_selected(self, edge_id: str, selected: bool = True) -> Edge:
        edge = self.get_edge(edge_id)
        edge.selected = selected
        return edge

    def clear_selection(self) -> None:
        for node in self._nodes.values():
            node.selected = False
        for edge in self._edges.values():
            edge.selected = False

    def move_node(self, node_id: str, x: float, y: float) -> Node:
        node = self.get_node(node_id)
        node.position = Position(x=x, y=y)
        return node

    def snapshot(self) -> GraphSnapshot:
        """
        Copy the current graph for export.

        Returns:
            GraphSnapshot detached from the store
        """
        return GraphSnapshot(
            nodes=[Node.from_dict(n.to_dict()) for n in self._nodes.values()],
            edges=[Edge.from_dict(e.to_dict()) for e in self._edges.values()],
        )

    def _next_node_id(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last_node_id:
            candidate = self._last_node_id + 1
        self._last_node_id = candidate
        return str(candidate)

    def _next_edge_id(self, source: str, target: str) -> str:
        base = f"edge-{source}-{target}"
        edge_id = base
        suffix = 1
        while edge_id in self._issued_edge_ids:
            edge_id = f"{base}-{suffix}"
            suffix += 1
        self._issued_edge_ids.add(edge_id)
        return edge_id
