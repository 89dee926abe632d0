"""Handles for nodes and relationships returned by a graph store."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GraphNode:
    """A node as seen by the store: identity, label and properties."""

    id: str
    label: str
    properties: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)


@dataclass(frozen=True)
class GraphRelationship:
    """A typed, directed relationship between two stored nodes."""

    id: str
    type: str
    source_id: str
    target_id: str
    properties: dict[str, Any] = field(default_factory=dict)

    def connects(self, a: str, b: str) -> bool:
        """True if this relationship joins `a` and `b` in either direction."""
        return {self.source_id, self.target_id} == {a, b}


@dataclass(frozen=True)
class PathLength:
    """Shortest path length between two nodes."""

    source: GraphNode
    target: GraphNode
    length: int
