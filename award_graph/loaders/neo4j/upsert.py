"""Find-then-create upserts over a GraphStore.

Nodes are matched on their key property and relationships on (endpoints, type)
regardless of direction, so re-running a load against a populated store
creates nothing new. Existing nodes are returned as they are: the first write
of a node's attributes wins.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from ...models.graph import GraphNode, GraphRelationship
from ..store import GraphStore
from .client import LoadMetrics


def _label_name(label: Any) -> str:
    return getattr(label, "value", label)


class GraphUpsertEngine:
    """Idempotent node and relationship upserts with per-type metrics.

    Attributes:
        store: Graph store the upserts run against
        metrics: Created/found counts accumulated across calls
    """

    def __init__(self, store: GraphStore, metrics: LoadMetrics | None = None):
        self.store = store
        self.metrics = metrics if metrics is not None else LoadMetrics()

    def upsert_node(
        self,
        label: str,
        key_property: str,
        key_value: Any,
        attributes: dict[str, Any] | None = None,
    ) -> GraphNode:
        """Return the node of `label` keyed by `key_value`, creating it if absent.

        When several nodes share the key the first is used and the ambiguity
        is logged.
        """
        label = _label_name(label)
        matches = self.store.find_nodes(label, key_property, key_value)
        if matches:
            if len(matches) > 1:
                self.metrics.ambiguous_lookups += 1
                logger.warning(
                    f"{len(matches)} {label} nodes match {key_property}={key_value!r}; "
                    f"using {matches[0].id}"
                )
            self.metrics.nodes_found[label] = self.metrics.nodes_found.get(label, 0) + 1
            return matches[0]

        properties = dict(attributes or {})
        properties[key_property] = key_value
        node = self.store.create_node(label, properties)
        self.metrics.nodes_created[label] = self.metrics.nodes_created.get(label, 0) + 1
        logger.debug(f"Created {label} node {key_property}={key_value!r}")
        return node

    def upsert_relationship(
        self, source: GraphNode, target: GraphNode, rel_type: str
    ) -> GraphRelationship:
        """Return the `rel_type` relationship joining the nodes, creating `source -> target` if absent."""
        rel_type = _label_name(rel_type)
        matches = self.store.find_relationships(source, target, rel_type)
        if matches:
            if len(matches) > 1:
                self.metrics.ambiguous_lookups += 1
                logger.warning(
                    f"{len(matches)} {rel_type} relationships join {source.id} and "
                    f"{target.id}; using {matches[0].id}"
                )
            self.metrics.relationships_found[rel_type] = (
                self.metrics.relationships_found.get(rel_type, 0) + 1
            )
            return matches[0]

        relationship = self.store.create_relationship(source, target, rel_type)
        self.metrics.relationships_created[rel_type] = (
            self.metrics.relationships_created.get(rel_type, 0) + 1
        )
        return relationship
