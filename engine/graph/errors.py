"""
Graph Errors

Exceptions raised by the graph store and the connection validator.
All of them are recoverable: the operation that raised leaves the graph
unchanged.
"""


class GraphError(ValueError):
    """Base class for graph mutation errors"""


class InvalidInput(GraphError):
    """Raised when a node is created without a label"""


class UnknownEntity(GraphError):
    """Raised when a node or edge id does not resolve to a live entity"""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind}: '{entity_id}'")


class RejectedConnection(GraphError):
    """
    Raised when a candidate edge may not be created.

    Attributes:
        source: Candidate source node id
        target: Candidate target node id
        reason: "self-loop", "unknown-source" or "unknown-target"
    """

    def __init__(self, source: str, target: str, reason: str):
        self.source = source
        self.target = target
        self.reason = reason
        super().__init__(
            f"Rejected connection {source} -> {target}: {reason}"
        )
