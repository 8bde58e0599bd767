"""
Schemas

Graph data types shared across the editor.
"""

from .graph_data import Position, Node, Edge, GraphSnapshot

__all__ = [
    "Position",
    "Node",
    "Edge",
    "GraphSnapshot",
]
