"""Neo4j client: the GraphStore implementation backed by the Bolt driver."""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from neo4j import Driver, GraphDatabase, Session
from neo4j.exceptions import DriverError, ServiceUnavailable
from neo4j.exceptions import Neo4jError as DriverNeo4jError
from pydantic import BaseModel, Field

from ...exceptions import ErrorCode, Neo4jError
from ...models.entities import NODE_KEYS
from ...models.graph import GraphNode, GraphRelationship, PathLength
from ..store import GraphStore
from .query_builder import Neo4jQueryBuilder


class Neo4jConfig(BaseModel):
    """Neo4j connection configuration."""

    uri: str
    username: str
    password: str
    database: str = "neo4j"
    create_indexes: bool = True


class LoadMetrics(BaseModel):
    """Counts of upsert outcomes for one load."""

    nodes_created: dict[str, int] = Field(default_factory=dict)
    nodes_found: dict[str, int] = Field(default_factory=dict)
    relationships_created: dict[str, int] = Field(default_factory=dict)
    relationships_found: dict[str, int] = Field(default_factory=dict)
    ambiguous_lookups: int = 0
    skipped: int = 0
    duration_seconds: float = 0.0

    @property
    def total_nodes_created(self) -> int:
        return sum(self.nodes_created.values())

    @property
    def total_relationships_created(self) -> int:
        return sum(self.relationships_created.values())


def _to_node(data: dict[str, Any]) -> GraphNode:
    return GraphNode(id=data["id"], label=data["label"], properties=dict(data["properties"]))


def _to_relationship(data: dict[str, Any]) -> GraphRelationship:
    return GraphRelationship(
        id=data["id"],
        type=data["type"],
        source_id=data["source_id"],
        target_id=data["target_id"],
        properties=dict(data.get("properties") or {}),
    )


class Neo4jClient(GraphStore):
    """Neo4j-backed graph store.

    The driver is created lazily. Every query is a blocking auto-commit round
    trip; driver failures are raised as Neo4jError and are fatal to the run.
    """

    def __init__(self, config: Neo4jConfig) -> None:
        self.config = config
        self._driver: Driver | None = None
        logger.info(f"Neo4j client initialized for {config.uri}")

    @property
    def driver(self) -> Driver:
        """Get or create Neo4j driver."""
        if self._driver is None:
            self._driver = GraphDatabase.driver(
                self.config.uri,
                auth=(self.config.username, self.config.password),
            )
            logger.debug("Neo4j driver created")
        return self._driver

    def close(self) -> None:
        """Close Neo4j driver connection."""
        if self._driver is not None:
            self._driver.close()
            self._driver = None
            logger.debug("Neo4j driver closed")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager for Neo4j session."""
        session = self.driver.session(database=self.config.database)
        try:
            yield session
        finally:
            session.close()

    def run(self, query: str, operation: str, **params: Any) -> list[dict[str, Any]]:
        """Run one query and return its rows as dictionaries.

        Raises:
            Neo4jError: on any driver or server failure
        """
        try:
            with self.session() as session:
                return list(session.run(query, **params).data())
        except (ServiceUnavailable, DriverError) as e:
            raise Neo4jError(
                f"Neo4j unreachable during {operation}: {e}",
                query=query,
                operation=operation,
                status_code=ErrorCode.NEO4J_CONNECTION_FAILED,
                cause=e,
            ) from e
        except DriverNeo4jError as e:
            raise Neo4jError(
                f"Neo4j query failed during {operation}: {e}",
                query=query,
                operation=operation,
                cause=e,
            ) from e

    def verify(self) -> None:
        """Fail fast if the server cannot be reached."""
        self.run("RETURN 1 AS ok", operation="verify")

    def create_indexes(self) -> None:
        """Create lookup indexes for every node key property."""
        for label, key_property in NODE_KEYS.items():
            query = Neo4jQueryBuilder.build_index_query(label.value, key_property)
            self.run(query, operation="create_indexes")
            logger.debug(f"Ensured index on {label.value}.{key_property}")

    # -------------------------------------------------------------------------
    # GraphStore
    # -------------------------------------------------------------------------

    def find_nodes(self, label: str, key_property: str, key_value: Any) -> list[GraphNode]:
        query = Neo4jQueryBuilder.build_find_nodes_query(label, key_property)
        rows = self.run(query, operation="find_nodes", key_value=key_value)
        return [_to_node(row["node"]) for row in rows]

    def create_node(self, label: str, properties: dict[str, Any]) -> GraphNode:
        query = Neo4jQueryBuilder.build_create_node_query(label)
        rows = self.run(query, operation="create_node", properties=properties)
        if not rows:
            raise Neo4jError(f"CREATE returned no {label} node", query=query, operation="create_node")
        return _to_node(rows[0]["node"])

    def find_relationships(
        self, source: GraphNode, target: GraphNode, rel_type: str
    ) -> list[GraphRelationship]:
        query = Neo4jQueryBuilder.build_find_relationships_query(rel_type)
        rows = self.run(
            query, operation="find_relationships", source_id=source.id, target_id=target.id
        )
        return [_to_relationship(row["relationship"]) for row in rows]

    def create_relationship(
        self,
        source: GraphNode,
        target: GraphNode,
        rel_type: str,
        properties: dict[str, Any] | None = None,
    ) -> GraphRelationship:
        query = Neo4jQueryBuilder.build_create_relationship_query(rel_type)
        rows = self.run(
            query,
            operation="create_relationship",
            source_id=source.id,
            target_id=target.id,
            properties=properties or {},
        )
        if not rows:
            raise Neo4jError(
                f"Endpoints of {rel_type} relationship not found",
                query=query,
                operation="create_relationship",
                details={"source_id": source.id, "target_id": target.id},
            )
        return _to_relationship(rows[0]["relationship"])

    def neighborhood(
        self, label: str, key_property: str, key_value: Any, max_hops: int
    ) -> tuple[list[GraphNode], list[GraphRelationship]]:
        query = Neo4jQueryBuilder.build_neighborhood_query(label, key_property, max_hops)
        rows = self.run(query, operation="neighborhood", key_value=key_value)
        if not rows:
            return [], []
        row = rows[0]
        nodes = [_to_node(n) for n in row["nodes"]]
        relationships = [_to_relationship(r) for r in row["relationships"]]
        return nodes, relationships

    def shortest_path_lengths(
        self, label: str, rel_types: Iterable[str], max_hops: int
    ) -> list[PathLength]:
        query = Neo4jQueryBuilder.build_shortest_paths_query(label, list(rel_types), max_hops)
        rows = self.run(query, operation="shortest_path_lengths")
        return [
            PathLength(
                source=_to_node(row["source"]),
                target=_to_node(row["target"]),
                length=int(row["length"]),
            )
            for row in rows
        ]

    def count_nodes(self, label: str | None = None) -> int:
        rows = self.run(Neo4jQueryBuilder.build_count_nodes_query(label), operation="count_nodes")
        return int(rows[0]["count"]) if rows else 0

    def count_relationships(self, rel_type: str | None = None) -> int:
        rows = self.run(
            Neo4jQueryBuilder.build_count_relationships_query(rel_type),
            operation="count_relationships",
        )
        return int(rows[0]["count"]) if rows else 0

    def reset(self) -> None:
        logger.warning(f"Deleting every node in {self.config.database}")
        self.run(Neo4jQueryBuilder.build_reset_query(), operation="reset")

    def __enter__(self) -> "Neo4jClient":
        return self
