"""
Interaction Controller

Turns user gestures into graph store mutations and re-validates the graph
after each one. Holds no graph rules of its own.
"""

import logging
from typing import Callable, List, Optional, Tuple

from schemas.graph_data import Edge, GraphSnapshot, Node
from ..config.loader import EditorConfig
from ..graph.connection import ConnectionValidator
from ..graph.errors import InvalidInput, RejectedConnection
from ..graph.store import GraphStore
from ..graph.validator import DAGValidator, Status, ValidationReport

logger = logging.getLogger(__name__)

StatusListener = Callable[[ValidationReport], None]
RejectionListener = Callable[[RejectedConnection], None]


class InteractionController:
    """
    Sequences gestures against a single graph.

    The controller:
    1. Creates nodes from a label (silently ignoring empty labels)
    2. Connects nodes after the ConnectionValidator accepts the pair
    3. Deletes the current selection, from a button or a delete key
    4. Re-validates after every node/edge mutation and publishes the status

    Selection and position changes only touch transient fields and never
    trigger re-validation.

    Example usage:
        controller = InteractionController(EditorConfig())
        controller.on_status(lambda report: print(report.message))

        a = controller.create_node("extract")
        b = controller.create_node("load")
        controller.connect(a.id, b.id)      # prints "Valid DAG"
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        store: Optional[GraphStore] = None,
        connection_validator: Optional[ConnectionValidator] = None,
        dag_validator: Optional[DAGValidator] = None,
    ):
        """
        Initialize controller.

        Args:
            config: Editor configuration (defaults when omitted)
            store: Graph store to drive; built from config when omitted
            connection_validator: Edge admission check
            dag_validator: Graph status computation; built from config when omitted
        """
        self.config = config or EditorConfig()
        self.store = store or GraphStore(
            canvas_width=self.config.canvas.width,
            canvas_height=self.config.canvas.height,
            cascade_delete=self.config.cascade_delete,
        )
        self.connection_validator = connection_validator or ConnectionValidator()
        self.dag_validator = dag_validator or DAGValidator(min_nodes=self.config.min_nodes)

        self.last_rejection: Optional[RejectedConnection] = None
        self._status_listeners: List[StatusListener] = []
        self._rejection_listeners: List[RejectionListener] = []

        self._report = self.dag_validator.report(self.store.nodes, self.store.edges)
        logger.info(f"Controller initialized, status: {self._report.message}")

    @property
    def status(self) -> Status:
        return self._report.status

    @property
    def report(self) -> ValidationReport:
        return self._report

    def on_status(self, listener: StatusListener) -> None:
        """Register a callback invoked with the report after every re-validation"""
        self._status_listeners.append(listener)

    def on_rejected(self, listener: RejectionListener) -> None:
        """Register a callback invoked when a connect gesture is rejected"""
        self._rejection_listeners.append(listener)

    def create_node(self, label: Optional[str]) -> Optional[Node]:
        """
        Handle the "add node" gesture.

        Args:
            label: Label entered by the user

        Returns:
            The new node, or None if the label was empty
        """
        try:
            node = self.store.add_node(label)
        except InvalidInput as e:
            logger.warning(f"Node creation aborted: {e}")
            return None

        self.revalidate()
        return node

    def connect(self, source: str, target: str) -> Optional[Edge]:
        """
        Handle the "connect" gesture.

        Args:
            source: Source node id
            target: Target node id

        Reconnecting an existing pair returns the existing edge without
        re-validating, since the graph is unchanged.

        Returns:
            The new (or already existing) edge, or None if rejected
        """
        try:
            self.connection_validator.check(source, target, self.store.nodes)
        except RejectedConnection as e:
            logger.warning(str(e))
            self.last_rejection = e
            for listener in self._rejection_listeners:
                listener(e)
            return None

        self.last_rejection = None

        existing = self.store.find_edge(source, target)
        if existing is not None:
            logger.debug(f"Connection {source} -> {target} already exists: {existing.id}")
            return existing

        edge = self.store.add_edge(source, target)
        self.revalidate()
        return edge

    def delete_selected(self) -> Tuple[List[Node], List[Edge]]:
        """
        Handle the "delete selected" gesture.

        Returns:
            Tuple of (removed nodes, removed edges)
        """
        removed = self.store.remove_selected()
        self.revalidate()
        return removed

    def handle_key(self, key: str) -> bool:
        """
        Handle a key press from the view layer.

        Returns:
            True if the key triggered a delete
        """
        if key not in self.config.delete_keys:
            return False

        self.delete_selected()
        return True

    def select_node(self, node_id: str, selected: bool = True) -> Node:
        return self.store.set_node_selected(node_id, selected)

    def select_edge(self, edge_id: str, selected: bool = True) -> Edge:
        return self.store.set_edge_selected(edge_id, selected)

    def clear_selection(self) -> None:
        self.store.clear_selection()

    def move_node(self, node_id: str, x: float, y: float) -> Node:
        return self.store.move_node(node_id, x, y)

    def revalidate(self) -> Status:
        """
        Recompute the graph status and publish it to status listeners.

        Returns:
            Current Status
        """
        previous = self._report.status
        self._report = self.dag_validator.report(self.store.nodes, self.store.edges)

        if self._report.status != previous:
            logger.info(
                f"Status changed: {previous.value} -> {self._report.status.value}"
            )

        for listener in self._status_listeners:
            listener(self._report)

        return self._report.status

    def export(self) -> GraphSnapshot:
        return self.store.snapshot()
