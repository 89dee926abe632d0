"""
Connectivity queries for award graph analysis.

Implements the read-only traversals run after a load:
- Person neighborhood: induced subgraph around one person, shaped for a
  force-directed view
- Organization distances: shortest path length between every pair of
  organizations, never traversing excluded relationship types
- Proximity summary: per-organization mean distance and neighbor count, with
  sparsely connected organizations left out of the top ranking

Queries with nothing to report return empty results rather than raising.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

import pandas as pd
from loguru import logger

from ..config.schemas import AnalysisConfig
from ..loaders.store import GraphStore
from ..models.entities import NODE_KEYS, NodeLabel, RelationshipType
from ..models.graph import GraphNode


# Property shown as a node's display name, per label
DISPLAY_PROPERTIES: dict[str, str] = {
    NodeLabel.PERSON.value: "name",
    NodeLabel.ORGANIZATION.value: "name",
    NodeLabel.AWARD.value: "title",
    NodeLabel.SUBAWARD.value: "award_number",
}

# Property used as a node's size in visualizations, per label
SIZE_PROPERTIES: dict[str, str] = {
    NodeLabel.PERSON.value: "count",
    NodeLabel.ORGANIZATION.value: "count",
    NodeLabel.AWARD.value: "subaward_count",
    NodeLabel.SUBAWARD.value: "amount",
}


@dataclass
class NeighborhoodGraph:
    """Nodes and links around one person, ready for rendering."""

    focus: str
    nodes: list[dict[str, Any]] = field(default_factory=list)
    links: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {"nodes": list(self.nodes), "links": list(self.links)}


@dataclass(frozen=True)
class OrganizationDistance:
    """Shortest path length between two organizations."""

    source: str
    target: str
    distance: int


@dataclass(frozen=True)
class OrganizationProximity:
    """How close one organization sits to the rest of the graph."""

    organization: str
    name: str
    mean_distance: float
    neighbor_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _display_name(node: GraphNode) -> str:
    value = node.get(DISPLAY_PROPERTIES.get(node.label, "name"))
    return str(value) if value not in (None, "") else node.id


def _size(node: GraphNode) -> float:
    value = node.get(SIZE_PROPERTIES.get(node.label, "count"))
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def summarize_proximity(
    distances: Sequence[OrganizationDistance], names: dict[str, str] | None = None
) -> list[OrganizationProximity]:
    """Aggregate pairwise distances to mean distance and neighbor count per source.

    Sorted by mean distance ascending, then by organization key.
    """
    if not distances:
        return []
    names = names or {}

    df = pd.DataFrame([asdict(d) for d in distances])
    summary = (
        df.groupby("source")
        .agg(mean_distance=("distance", "mean"), neighbor_count=("target", "nunique"))
        .reset_index()
        .sort_values(["mean_distance", "source"], kind="stable")
    )
    return [
        OrganizationProximity(
            organization=row.source,
            name=names.get(row.source, row.source),
            mean_distance=float(row.mean_distance),
            neighbor_count=int(row.neighbor_count),
        )
        for row in summary.itertuples(index=False)
    ]


def filter_top_proximity(
    proximity: Sequence[OrganizationProximity], min_neighbors: int, top_n: int | None = None
) -> list[OrganizationProximity]:
    """Keep organizations with at least `min_neighbors` neighbors, closest first."""
    kept = [p for p in proximity if p.neighbor_count >= min_neighbors]
    dropped = len(proximity) - len(kept)
    if dropped:
        logger.debug(f"Excluded {dropped} organizations with fewer than {min_neighbors} neighbors")
    kept.sort(key=lambda p: (p.mean_distance, p.organization))
    return kept[:top_n] if top_n is not None else kept


class ConnectivityQueries:
    """Execute connectivity analyses against a graph store."""

    def __init__(self, store: GraphStore, settings: AnalysisConfig | None = None):
        self.store = store
        self.settings = settings or AnalysisConfig()
        self._names: dict[str, str] = {}

    @property
    def traversable_types(self) -> list[str]:
        """Relationship types distance queries may traverse."""
        excluded = set(self.settings.excluded_relationship_types)
        return [t.value for t in RelationshipType if t.value not in excluded]

    def person_neighborhood(self, name: str, max_hops: int | None = None) -> NeighborhoodGraph:
        """
        Induced subgraph within `max_hops` of a person.

        Each node carries a display `name`, a `group` (its label, or the focus
        category for the queried person) and a `size`. Unknown people give an
        empty graph.
        """
        hops = max_hops or self.settings.neighborhood_hops
        label = NodeLabel.PERSON.value
        nodes, relationships = self.store.neighborhood(label, NODE_KEYS[NodeLabel.PERSON], name, hops)
        if not nodes:
            logger.info(f"No Person named {name!r}; neighborhood is empty")
            return NeighborhoodGraph(focus=name)

        focus_id = nodes[0].id
        graph = NeighborhoodGraph(focus=name)
        for node in nodes:
            graph.nodes.append(
                {
                    "id": node.id,
                    "name": _display_name(node),
                    "group": self.settings.focus_category if node.id == focus_id else node.label,
                    "size": _size(node),
                }
            )
        for rel in relationships:
            graph.links.append({"source": rel.source_id, "target": rel.target_id, "type": rel.type})

        logger.info(
            f"Neighborhood of {name!r} within {hops} hops: "
            f"{len(graph.nodes)} nodes, {len(graph.links)} links"
        )
        return graph

    def organization_distances(self) -> list[OrganizationDistance]:
        """Shortest path length for every ordered pair of connected organizations."""
        rows = self.store.shortest_path_lengths(
            NodeLabel.ORGANIZATION.value, self.traversable_types, self.settings.max_hops
        )
        key = NODE_KEYS[NodeLabel.ORGANIZATION]
        for row in rows:
            for node in (row.source, row.target):
                self._names[node.get(key, node.id)] = _display_name(node)
        distances = [
            OrganizationDistance(
                source=row.source.get(key, row.source.id),
                target=row.target.get(key, row.target.id),
                distance=row.length,
            )
            for row in rows
        ]
        logger.info(f"Found {len(distances)} organization pairs within {self.settings.max_hops} hops")
        return distances

    def organization_proximity(self) -> list[OrganizationProximity]:
        """Mean distance and neighbor count for every organization with a neighbor."""
        distances = self.organization_distances()
        return summarize_proximity(distances, self._names)

    def top_proximity(self, limit: int | None = None) -> list[OrganizationProximity]:
        """The best-connected organizations, ignoring sparsely connected ones."""
        top = filter_top_proximity(
            self.organization_proximity(),
            min_neighbors=self.settings.min_neighbors,
            top_n=limit or self.settings.top_n,
        )
        logger.info(f"Top proximity summary holds {len(top)} organizations")
        return top
