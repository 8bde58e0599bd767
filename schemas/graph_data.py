"""
Graph Data Types

Core graph types shared by the store, the validators and the gesture gateway.
Positions and selection flags are view-layer state; validation only reads
ids and edge endpoints.
"""

from dataclasses import dataclass, field
from typing import List
import json


ARROW_CLOSED = "arrowclosed"


@dataclass
class Position:
    """2D canvas coordinate"""
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        """Create Position from dictionary"""
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass
class Node:
    """
    Graph node placed on the canvas.

    The id and label are fixed at creation. Position and selection are
    mutated in place by the view layer.
    """
    id: str
    label: str
    position: Position = field(default_factory=Position)
    selected: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "label": self.label,
            "position": self.position.to_dict(),
            "selected": self.selected,
        }

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        """Create Node from dictionary"""
        position = data.get("position")
        return cls(
            id=data["id"],
            label=data["label"],
            position=Position.from_dict(position) if position else Position(),
            selected=data.get("selected", False),
        )


@dataclass
class Edge:
    """Directed edge between two nodes, drawn with an arrowhead at the target"""
    id: str
    source: str
    target: str
    marker_end: str = ARROW_CLOSED
    selected: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "marker_end": self.marker_end,
            "selected": self.selected,
        }

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        """Create Edge from dictionary"""
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            marker_end=data.get("marker_end", ARROW_CLOSED),
            selected=data.get("selected", False),
        )


@dataclass
class GraphSnapshot:
    """
    Read-only export of the whole graph.

    Used for display and debugging only; there is no import path back into
    the store.
    """
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to pretty-printed JSON string"""
        return json.dumps(self.to_dict(), indent=indent)
