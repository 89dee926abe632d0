"""Dagster assets for award extraction, normalization, Neo4j loading and analysis."""

from typing import Any

import pandas as pd
from dagster import (
    AssetCheckResult,
    AssetCheckSeverity,
    AssetExecutionContext,
    Output,
    asset,
    asset_check,
)

from ..config.loader import get_config
from ..extractors.awards import frame_to_records, records_to_frame
from ..loaders.neo4j.client import Neo4jClient
from ..models.entities import NodeLabel, RelationshipType
from ..pipeline import build_store, extract_records, load_graph, normalize_records
from ..queries.connectivity import ConnectivityQueries
from ..transformers.entity_extractor import AwardEntities, extract_entities


def _get_graph_store() -> Neo4jClient:
    """Unconnected graph store from configuration; callers verify it inside `with`."""
    return build_store(get_config())


@asset(
    description="Award rows read from the configured export",
    group_name="award_extraction",
    compute_kind="pandas",
)
def raw_award_records(context: AssetExecutionContext) -> Output[pd.DataFrame]:
    records = extract_records(get_config())
    context.log.info(f"Extracted {len(records)} award records")
    return Output(
        value=records_to_frame(records),
        metadata={"num_records": len(records)},
    )


@asset(
    description="Award rows with near-duplicate titles replaced by their canonical title",
    group_name="award_extraction",
    compute_kind="rapidfuzz",
)
def normalized_award_records(
    context: AssetExecutionContext, raw_award_records: pd.DataFrame
) -> Output[pd.DataFrame]:
    records, clusters = normalize_records(get_config(), frame_to_records(raw_award_records))
    transitive = clusters.transitive_clusters
    if transitive:
        context.log.warning(
            f"{len(transitive)} title clusters were merged transitively; review them manually"
        )
    return Output(
        value=records_to_frame(records),
        metadata={
            "num_records": len(records),
            "distinct_titles_before": len(clusters.mapping),
            "distinct_titles_after": len(set(clusters.mapping.values())),
            "merged_clusters": len(clusters.merged_clusters),
            "transitive_clusters": len(transitive),
        },
    )


@asset(
    description="People, organizations, awards and sub-awards derived from normalized records",
    group_name="award_extraction",
    compute_kind="pandas",
)
def award_entities(
    context: AssetExecutionContext, normalized_award_records: pd.DataFrame
) -> Output[AwardEntities]:
    config = get_config()
    entities = extract_entities(
        frame_to_records(normalized_award_records), config.loading.award_search_url
    )
    summary = entities.summary()
    context.log.info(f"Derived entities: {summary}")
    return Output(value=entities, metadata=summary)


@asset(
    description="Idempotent load of award entities and relationships into Neo4j",
    group_name="neo4j_loading",
    compute_kind="neo4j",
)
def award_graph_load(
    context: AssetExecutionContext,
    normalized_award_records: pd.DataFrame,
    award_entities: AwardEntities,
) -> Output[dict[str, Any]]:
    """
    Load the award graph.

    Creates the following relationships:
    - (Person)-[Based_At]->(Organization)
    - (Person)-[Applied_for]->(SubAward)
    - (Person)-[Manages]->(Award)
    - (SubAward)-[Awarded_to]->(Organization)
    - (SubAward)-[Subaward_of]->(Award)

    A store failure fails the asset; the graph may be left partially loaded.
    """
    config = get_config()
    records = frame_to_records(normalized_award_records)
    with _get_graph_store() as store:
        store.verify()
        metrics = load_graph(config, store, records, award_entities)
        subaward_nodes = store.count_nodes(NodeLabel.SUBAWARD.value)
        subaward_of = store.count_relationships(RelationshipType.SUBAWARD_OF.value)

    context.log.info(
        f"Loaded graph: {metrics.total_nodes_created} nodes and "
        f"{metrics.total_relationships_created} relationships created"
    )
    result = {
        "status": "success",
        "nodes_created": metrics.nodes_created,
        "nodes_found": metrics.nodes_found,
        "relationships_created": metrics.relationships_created,
        "relationships_found": metrics.relationships_found,
        "ambiguous_lookups": metrics.ambiguous_lookups,
        "subaward_nodes": subaward_nodes,
        "subaward_of_relationships": subaward_of,
        "duration_seconds": metrics.duration_seconds,
    }
    return Output(
        value=result,
        metadata={
            "nodes_created": metrics.total_nodes_created,
            "relationships_created": metrics.total_relationships_created,
            "ambiguous_lookups": metrics.ambiguous_lookups,
            "duration_seconds": round(metrics.duration_seconds, 2),
        },
    )


@asset_check(
    asset=award_graph_load,
    description="Every SubAward node has exactly one Subaward_of relationship",
)
def subaward_of_check(award_graph_load: dict[str, Any]) -> AssetCheckResult:
    subawards = award_graph_load.get("subaward_nodes", 0)
    edges = award_graph_load.get("subaward_of_relationships", 0)
    if subawards != edges:
        return AssetCheckResult(
            passed=False,
            severity=AssetCheckSeverity.ERROR,
            description=f"✗ {subawards} SubAward nodes but {edges} Subaward_of relationships",
            metadata={"subaward_nodes": subawards, "subaward_of_relationships": edges},
        )
    return AssetCheckResult(
        passed=True,
        description=f"✓ {subawards} SubAward nodes each resolve to one Award",
        metadata={"subaward_nodes": subawards, "subaward_of_relationships": edges},
    )


@asset(
    description="Organizations ranked by mean shortest-path distance to the rest of the graph",
    group_name="analysis",
    compute_kind="neo4j",
)
def institutional_proximity(
    context: AssetExecutionContext, award_graph_load: dict[str, Any]
) -> Output[pd.DataFrame]:
    config = get_config()
    with _get_graph_store() as store:
        store.verify()
        top = ConnectivityQueries(store, config.analysis).top_proximity()

    df = pd.DataFrame(
        [p.to_dict() for p in top],
        columns=["organization", "name", "mean_distance", "neighbor_count"],
    )
    context.log.info(f"{len(df)} organizations ranked by proximity")
    return Output(
        value=df,
        metadata={
            "num_ranked": len(df),
            "min_neighbors": config.analysis.min_neighbors,
            "max_hops": config.analysis.max_hops,
        },
    )
