"""
Neo4j loading for the award graph.

Module Structure:
- client: Neo4jClient, the GraphStore implementation over the Bolt driver
- query_builder: Cypher for key lookups, creation, traversal and counts
- upsert: find-then-create node and relationship upserts
- awards: two-phase award graph loader (nodes, then relationships)
"""

from __future__ import annotations

from .awards import AwardGraphLoader
from .client import LoadMetrics, Neo4jClient, Neo4jConfig
from .query_builder import Neo4jQueryBuilder
from .upsert import GraphUpsertEngine


__all__ = [
    "AwardGraphLoader",
    "GraphUpsertEngine",
    "LoadMetrics",
    "Neo4jClient",
    "Neo4jConfig",
    "Neo4jQueryBuilder",
]
