"""
DAG Validator

Computes the validity status of the canvas graph.
Rules are checked in priority order and the first failing rule wins:
too few nodes, self-loop, cycle, disconnected node.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Sequence, Set, Tuple
import logging

from schemas.graph_data import Edge, Node

logger = logging.getLogger(__name__)


class Status(Enum):
    """Outcome of a validation pass"""
    TOO_FEW_NODES = "TooFewNodes"
    SELF_LOOP = "SelfLoop"
    CYCLE_DETECTED = "CycleDetected"
    DISCONNECTED = "Disconnected"
    VALID = "Valid"

    @property
    def is_valid(self) -> bool:
        return self is Status.VALID


STATUS_MESSAGES: Dict[Status, str] = {
    Status.TOO_FEW_NODES: "Invalid: Need at least {min_nodes} nodes",
    Status.SELF_LOOP: "Invalid: Self-loop",
    Status.CYCLE_DETECTED: "Invalid: Cycle detected",
    Status.DISCONNECTED: "Invalid: All nodes must be connected",
    Status.VALID: "Valid DAG",
}


@dataclass
class ValidationReport:
    """
    Status plus the diagnostics behind it.

    Attributes:
        status: First failing rule, or Status.VALID
        message: Human-readable status text
        cycle: Node ids along the detected cycle, first id repeated at the end
        isolated: Node ids that touch no edge (only filled when the
                  connectivity rule was reached)
    """
    status: Status
    message: str
    cycle: List[str] = field(default_factory=list)
    isolated: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "message": self.message,
            "cycle": self.cycle,
            "isolated": self.isolated,
        }


class DAGValidator:
    """
    Validates the current graph as a DAG.

    Every call builds its adjacency list and DFS markers from scratch; nothing
    is cached between calls, so validate() is a pure function of its inputs.

    Example usage:
        validator = DAGValidator()
        status = validator.validate(store.nodes, store.edges)   # Status.VALID

        report = validator.report(store.nodes, store.edges)
        print(report.message)   # "Valid DAG"
        print(report.cycle)     # ["a", "b", "a"] when a <-> b
    """

    def __init__(self, min_nodes: int = 2):
        """
        Initialize validator.

        Args:
            min_nodes: Minimum node count for a graph to be considered at all
        """
        self.min_nodes = min_nodes

    def validate(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> Status:
        """
        Compute the status of a graph.

        Args:
            nodes: Current nodes
            edges: Current edges

        Returns:
            The first failing Status, or Status.VALID
        """
        return self.report(nodes, edges).status

    def report(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> ValidationReport:
        """
        Compute the status of a graph along with its diagnostics.

        Args:
            nodes: Current nodes
            edges: Current edges

        Returns:
            ValidationReport for the first failing rule
        """
        if len(nodes) < self.min_nodes:
            return self._result(Status.TOO_FEW_NODES)

        for edge in edges:
            if edge.source == edge.target:
                logger.debug(f"Self-loop on edge {edge.id} ({edge.source})")
                return self._result(Status.SELF_LOOP)

        node_ids = [n.id for n in nodes]
        adjacency = self._build_adjacency(node_ids, edges)

        cycle = self._find_cycle(node_ids, adjacency)
        if cycle:
            logger.debug(f"Cycle detected: {' -> '.join(cycle)}")
            return self._result(Status.CYCLE_DETECTED, cycle=cycle)

        isolated = self._find_isolated(node_ids, edges)
        if isolated:
            logger.debug(f"Nodes without edges: {isolated}")
            return self._result(Status.DISCONNECTED, isolated=isolated)

        return self._result(Status.VALID)

    def _result(self, status: Status, **diagnostics) -> ValidationReport:
        message = STATUS_MESSAGES[status].format(min_nodes=self.min_nodes)
        return ValidationReport(status=status, message=message, **diagnostics)

    def _build_adjacency(
        self, node_ids: List[str], edges: Sequence[Edge]
    ) -> Dict[str, List[str]]:
        """
        Build out-neighbor lists for every live node.

        Edges with an endpoint that is not a live node are skipped.

        Adjacency format: {node_id: [ids reachable via one outgoing edge]}
        """
        adjacency: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}

        for edge in edges:
            if edge.source not in adjacency or edge.target not in adjacency:
                logger.warning(
                    f"Ignoring dangling edge {edge.id}: {edge.source} -> {edge.target}"
                )
                continue
            adjacency[edge.source].append(edge.target)

        logger.debug(f"Built adjacency lists: {adjacency}")
        return adjacency

    def _find_cycle(
        self, node_ids: List[str], adjacency: Dict[str, List[str]]
    ) -> List[str]:
        """
        Detect a cycle using depth-first search.

        Tracks a visited set and a recursion-stack set. Reaching a neighbor
        that is still on the stack is a back edge. The traversal uses an
        explicit stack of neighbor iterators instead of recursion and is
        started from every unvisited node so disconnected parts are covered.

        Returns:
            Cycle path (first id repeated at the end), or [] if acyclic
        """
        visited: Set[str] = set()
        rec_stack: Set[str] = set()

        for start in node_ids:
            if start in visited:
                continue

            visited.add(start)
            rec_stack.add(start)
            stack: List[Tuple[str, Iterator[str]]] = [(start, iter(adjacency[start]))]

            while stack:
                node_id, neighbors = stack[-1]
                descended = False

                for neighbor in neighbors:
                    if neighbor in rec_stack:
                        path = [n for n, _ in stack]
                        return path[path.index(neighbor):] + [neighbor]
                    if neighbor not in visited:
                        visited.add(neighbor)
                        rec_stack.add(neighbor)
                        stack.append((neighbor, iter(adjacency[neighbor])))
                        descended = True
                        break

                if not descended:
                    stack.pop()
                    rec_stack.discard(node_id)

        return []

    def _find_isolated(self, node_ids: List[str], edges: Sequence[Edge]) -> List[str]:
        """
        List nodes that appear in no edge as source or target.

        This only requires every node to touch an edge; it does not require
        the graph to be a single connected component.
        """
        connected: Set[str] = set()
        for edge in edges:
            connected.add(edge.source)
            connected.add(edge.target)

        return [node_id for node_id in node_ids if node_id not in connected]
