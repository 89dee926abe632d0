"""Shared fixtures for Neo4j loader tests."""

import pytest

from award_graph.loaders.neo4j.client import Neo4jConfig
from award_graph.loaders.neo4j.upsert import GraphUpsertEngine


@pytest.fixture
def neo4j_config():
    return Neo4jConfig(
        uri="bolt://localhost:7687",
        username="neo4j",
        password="password",  # pragma: allowlist secret
        database="neo4j",
    )


@pytest.fixture
def engine(memory_store):
    return GraphUpsertEngine(memory_store)
