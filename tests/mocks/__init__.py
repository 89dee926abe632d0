"""Shared mock factories for test suite."""

from tests.mocks.graph_store import InMemoryGraphStore
from tests.mocks.neo4j import Neo4jMocks

__all__ = [
    "InMemoryGraphStore",
    "Neo4jMocks",
]
