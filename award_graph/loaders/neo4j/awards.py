"""Two-phase award graph load: every node first, then per-record relationships."""

from __future__ import annotations

import time
from collections.abc import Sequence

from loguru import logger

from ...models.award import AwardRecord
from ...models.entities import NODE_KEYS, GraphEntity, NodeLabel, RelationshipType
from ...models.graph import GraphNode
from ...transformers.entity_extractor import AwardEntities
from .client import LoadMetrics
from .upsert import GraphUpsertEngine


class AwardGraphLoader:
    """Load award entities and their relationships through the upsert engine.

    Relationship wiring per record:

        (PI|co-PI)-[Based_At]->(Organization)
        (PI|co-PI)-[Applied_for]->(SubAward)
        (ProgramManager)-[Manages]->(Award)
        (SubAward)-[Awarded_to]->(Organization)
        (SubAward)-[Subaward_of]->(Award)

    Records missing a participant skip only the relationships that need it.
    """

    def __init__(self, engine: GraphUpsertEngine):
        self.engine = engine
        self.loader_name = self.__class__.__name__

    @property
    def metrics(self) -> LoadMetrics:
        return self.engine.metrics

    def _upsert_entity(self, entity: GraphEntity) -> GraphNode:
        return self.engine.upsert_node(
            entity.label.value, entity.key_property, entity.key_value, entity.to_properties()
        )

    def _resolve(self, label: NodeLabel, key_value: str | None) -> GraphNode | None:
        if not key_value:
            return None
        return self.engine.upsert_node(label.value, NODE_KEYS[label], key_value)

    def load_nodes(self, entities: AwardEntities) -> LoadMetrics:
        """Upsert every Person, Organization, Award and SubAward."""
        groups: list[tuple[str, Sequence[GraphEntity]]] = [
            ("Person", entities.people),
            ("Organization", entities.organizations),
            ("Award", entities.awards),
            ("SubAward", entities.subawards),
        ]
        for label, group in groups:
            if not group:
                logger.info(f"{self.loader_name}: No {label} nodes to load")
                continue
            logger.info(f"{self.loader_name}: Loading {len(group)} {label} nodes")
            for entity in group:
                self._upsert_entity(entity)
            logger.info(
                f"{self.loader_name}: {label} nodes - "
                f"{self.metrics.nodes_created.get(label, 0)} created, "
                f"{self.metrics.nodes_found.get(label, 0)} found"
            )
        return self.metrics

    def load_record_relationships(self, record: AwardRecord) -> None:
        """Upsert the relationships contributed by one (title-normalized) record."""
        investigators = [
            node
            for node in (self._resolve(NodeLabel.PERSON, name) for name in record.investigators)
            if node is not None
        ]
        manager = self._resolve(NodeLabel.PERSON, record.program_manager)
        organization = self._resolve(NodeLabel.ORGANIZATION, record.organization_key)
        award = self._resolve(NodeLabel.AWARD, record.title)
        subaward = self._resolve(NodeLabel.SUBAWARD, record.award_number) if award else None

        if award is None:
            logger.warning(f"Award record {record.award_number} has no title; award edges skipped")
            self.metrics.skipped += 1

        for person in investigators:
            if organization is not None:
                self.engine.upsert_relationship(person, organization, RelationshipType.BASED_AT.value)
            if subaward is not None:
                self.engine.upsert_relationship(person, subaward, RelationshipType.APPLIED_FOR.value)

        if manager is not None and award is not None:
            self.engine.upsert_relationship(manager, award, RelationshipType.MANAGES.value)

        if subaward is not None:
            if organization is not None:
                self.engine.upsert_relationship(
                    subaward, organization, RelationshipType.AWARDED_TO.value
                )
            self.engine.upsert_relationship(subaward, award, RelationshipType.SUBAWARD_OF.value)

    def load_relationships(self, records: Sequence[AwardRecord]) -> LoadMetrics:
        """Upsert relationships for every record."""
        logger.info(f"{self.loader_name}: Wiring relationships for {len(records)} records")
        for record in records:
            self.load_record_relationships(record)
        logger.info(
            f"{self.loader_name}: relationships - {self.metrics.relationships_created} created, "
            f"{self.metrics.relationships_found} found"
        )
        return self.metrics

    def load(self, records: Sequence[AwardRecord], entities: AwardEntities) -> LoadMetrics:
        """Run both phases and record the load duration."""
        start = time.perf_counter()
        self.load_nodes(entities)
        self.load_relationships(records)
        self.metrics.duration_seconds = time.perf_counter() - start
        if self.metrics.ambiguous_lookups:
            logger.warning(
                f"{self.loader_name}: {self.metrics.ambiguous_lookups} ambiguous key lookups"
            )
        logger.info(
            f"{self.loader_name}: load complete in {self.metrics.duration_seconds:.2f}s - "
            f"{self.metrics.total_nodes_created} nodes and "
            f"{self.metrics.total_relationships_created} relationships created"
        )
        return self.metrics
