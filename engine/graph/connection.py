"""
Connection Validator

Decides whether a candidate edge may be created on the current graph.
"""

from typing import Iterable
import logging

from schemas.graph_data import Node
from .errors import RejectedConnection

logger = logging.getLogger(__name__)


class ConnectionValidator:
    """
    Stateless check run before every edge creation.

    A connection is rejected when it is a self-loop or when either endpoint
    is not a node in the current node set.

    Example usage:
        validator = ConnectionValidator()
        if validator.is_valid_connection(src, dst, store.nodes):
            store.add_edge(src, dst)
    """

    def check(self, source: str, target: str, current_nodes: Iterable[Node]) -> None:
        """
        Validate a candidate edge.

        Args:
            source: Candidate source node id
            target: Candidate target node id
            current_nodes: Nodes currently in the graph

        Raises:
            RejectedConnection: If the edge is a self-loop or an endpoint is unknown
        """
        if source == target:
            raise RejectedConnection(source, target, "self-loop")

        node_ids = {n.id for n in current_nodes}
        if source not in node_ids:
            raise RejectedConnection(source, target, "unknown-source")
        if target not in node_ids:
            raise RejectedConnection(source, target, "unknown-target")

    def is_valid_connection(
        self, source: str, target: str, current_nodes: Iterable[Node]
    ) -> bool:
        """
        Pure boolean form of check().

        Returns:
            True if the edge may be created, False otherwise
        """
        try:
            self.check(source, target, current_nodes)
        except RejectedConnection as e:
            logger.debug(str(e))
            return False
        return True
