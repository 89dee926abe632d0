"""Abstract graph store interface used by the upsert engine and queries.

The pipeline only needs a handful of store round trips: key lookups, node and
relationship creation, a bounded neighborhood traversal and bounded shortest
path lengths. Neo4jClient implements them in Cypher; tests use an in-memory
implementation.

Implementations are not safe for concurrent writers. Two processes loading
the same store can both miss a lookup and create the same node twice.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from ..models.graph import GraphNode, GraphRelationship, PathLength


class GraphStore(ABC):
    """Query-addressable property-graph store."""

    @abstractmethod
    def find_nodes(self, label: str, key_property: str, key_value: Any) -> list[GraphNode]:
        """Nodes of `label` whose `key_property` equals `key_value`; [] when none."""

    @abstractmethod
    def create_node(self, label: str, properties: dict[str, Any]) -> GraphNode:
        """Create a node unconditionally."""

    @abstractmethod
    def find_relationships(
        self, source: GraphNode, target: GraphNode, rel_type: str
    ) -> list[GraphRelationship]:
        """Relationships of `rel_type` joining the two nodes in either direction."""

    @abstractmethod
    def create_relationship(
        self,
        source: GraphNode,
        target: GraphNode,
        rel_type: str,
        properties: dict[str, Any] | None = None,
    ) -> GraphRelationship:
        """Create `(source)-[rel_type]->(target)` unconditionally."""

    @abstractmethod
    def neighborhood(
        self, label: str, key_property: str, key_value: Any, max_hops: int
    ) -> tuple[list[GraphNode], list[GraphRelationship]]:
        """Induced subgraph within `max_hops` of the matching node.

        The matching node comes first in the node list. Returns ([], []) when
        no node matches.
        """

    @abstractmethod
    def shortest_path_lengths(
        self, label: str, rel_types: Iterable[str], max_hops: int
    ) -> list[PathLength]:
        """Shortest path length for every ordered pair of distinct `label` nodes.

        Paths may only traverse `rel_types` (in either direction) and are at
        most `max_hops` long. Pairs without such a path are absent.
        """

    @abstractmethod
    def count_nodes(self, label: str | None = None) -> int:
        """Number of nodes, optionally restricted to one label."""

    @abstractmethod
    def count_relationships(self, rel_type: str | None = None) -> int:
        """Number of relationships, optionally restricted to one type."""

    @abstractmethod
    def reset(self) -> None:
        """Delete every node and relationship."""

    def close(self) -> None:
        """Release store resources."""

    def __enter__(self) -> "GraphStore":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
