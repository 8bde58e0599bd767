"""
Graph Module

Canvas graph storage, connection rules, and DAG validation.
"""

from .errors import GraphError, InvalidInput, RejectedConnection, UnknownEntity
from .store import GraphStore
from .connection import ConnectionValidator
from .validator import DAGValidator, Status, ValidationReport

__all__ = [
    "GraphError",
    "InvalidInput",
    "RejectedConnection",
    "UnknownEntity",
    "GraphStore",
    "ConnectionValidator",
    "DAGValidator",
    "Status",
    "ValidationReport",
]
