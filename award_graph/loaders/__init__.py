"""Graph store abstraction and Neo4j loading."""

from .neo4j import AwardGraphLoader, GraphUpsertEngine, LoadMetrics, Neo4jClient, Neo4jConfig
from .store import GraphStore


__all__ = [
    "AwardGraphLoader",
    "GraphStore",
    "GraphUpsertEngine",
    "LoadMetrics",
    "Neo4jClient",
    "Neo4jConfig",
]
