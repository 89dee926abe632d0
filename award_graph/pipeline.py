"""End-to-end batch run: extract, normalize, derive entities, load, analyze.

The run is single-threaded and sequential. A store error aborts it and may
leave the graph partially populated; `reset_graph` followed by a fresh run
is the recovery path.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from .config.schemas import PipelineConfig
from .extractors.awards import AwardCsvExtractor
from .loaders.neo4j.awards import AwardGraphLoader
from .loaders.neo4j.client import LoadMetrics, Neo4jClient, Neo4jConfig
from .loaders.neo4j.upsert import GraphUpsertEngine
from .loaders.store import GraphStore
from .models.award import AwardRecord
from .queries.connectivity import ConnectivityQueries, OrganizationProximity
from .transformers.entity_extractor import AwardEntities, extract_entities
from .transformers.title_normalizer import TitleClusters, TitleNormalizer
from .utils.logging_config import log_with_context


@dataclass
class PipelineResult:
    """What one batch run read, derived, loaded and ranked."""

    run_id: str
    records: list[AwardRecord] = field(default_factory=list)
    clusters: TitleClusters | None = None
    entities: AwardEntities = field(default_factory=AwardEntities)
    metrics: LoadMetrics = field(default_factory=LoadMetrics)
    top_proximity: list[OrganizationProximity] = field(default_factory=list)

    def summary(self) -> dict[str, object]:
        return {
            "run_id": self.run_id,
            "records": len(self.records),
            "merged_title_clusters": len(self.clusters.merged_clusters) if self.clusters else 0,
            **self.entities.summary(),
            "nodes_created": self.metrics.total_nodes_created,
            "relationships_created": self.metrics.total_relationships_created,
            "ambiguous_lookups": self.metrics.ambiguous_lookups,
            "ranked_organizations": len(self.top_proximity),
        }


def build_store(config: PipelineConfig) -> Neo4jClient:
    """Create the Neo4j-backed store described by the configuration."""
    neo4j = config.neo4j
    return Neo4jClient(
        Neo4jConfig(
            uri=neo4j.uri,
            username=neo4j.username,
            password=neo4j.password,
            database=neo4j.database,
            create_indexes=neo4j.create_indexes,
        )
    )


def reset_graph(store: GraphStore) -> int:
    """Delete every node and relationship; returns the number of nodes removed."""
    removed = store.count_nodes()
    store.reset()
    logger.warning(f"Graph reset: {removed} nodes deleted")
    return removed


def extract_records(config: PipelineConfig, csv_path: Path | str | None = None) -> list[AwardRecord]:
    extractor = AwardCsvExtractor(
        csv_path or config.source.csv_path,
        delimiter=config.source.delimiter,
        encoding=config.source.encoding,
        co_pi_delimiter=config.normalization.co_pi_delimiter,
    )
    return extractor.extract()


def normalize_records(
    config: PipelineConfig, records: list[AwardRecord]
) -> tuple[list[AwardRecord], TitleClusters]:
    normalizer = TitleNormalizer(
        threshold=config.normalization.title_distance_threshold,
        case_insensitive=config.normalization.case_insensitive,
    )
    clusters = normalizer.cluster(r.title for r in records)
    return normalizer.apply(records, clusters.mapping), clusters


def load_graph(
    config: PipelineConfig,
    store: GraphStore,
    records: list[AwardRecord],
    entities: AwardEntities,
) -> LoadMetrics:
    if isinstance(store, Neo4jClient) and store.config.create_indexes:
        store.create_indexes()
    loader = AwardGraphLoader(GraphUpsertEngine(store))
    return loader.load(records, entities)


def run_pipeline(
    config: PipelineConfig,
    store: GraphStore,
    reset: bool = False,
    csv_path: Path | str | None = None,
) -> PipelineResult:
    """Run every stage against `store` and return what was produced.

    Args:
        config: Pipeline configuration
        store: Graph store to load into and query
        reset: Delete the whole graph before loading (also enabled by
            `loading.reset_before_load`)
        csv_path: Override for `source.csv_path`

    Raises:
        FileSystemError: the export file does not exist
        ExtractionError: the export cannot be parsed or lacks columns
        Neo4jError: any store failure; the run stops immediately
    """
    result = PipelineResult(run_id=uuid.uuid4().hex[:12])

    with log_with_context(stage="extract", run_id=result.run_id) as log:
        raw = extract_records(config, csv_path)
        log.info(f"Extracted {len(raw)} records")

    with log_with_context(stage="normalize", run_id=result.run_id) as log:
        result.records, result.clusters = normalize_records(config, raw)
        log.info(f"Title clusters merged: {len(result.clusters.merged_clusters)}")

    with log_with_context(stage="entities", run_id=result.run_id):
        result.entities = extract_entities(result.records, config.loading.award_search_url)

    with log_with_context(stage="load", run_id=result.run_id) as log:
        if reset or config.loading.reset_before_load:
            reset_graph(store)
        result.metrics = load_graph(config, store, result.records, result.entities)
        log.info(f"Load metrics: {result.metrics.model_dump()}")

    with log_with_context(stage="analyze", run_id=result.run_id):
        result.top_proximity = ConnectivityQueries(store, config.analysis).top_proximity()

    logger.info(f"Pipeline run {result.run_id} complete: {result.summary()}")
    return result
