"""Data models for the award graph pipeline."""

from .award import SOURCE_COLUMNS, AwardRecord, organization_key, parse_amount, parse_date
from .entities import (
    NODE_KEYS,
    Award,
    GraphEntity,
    NodeLabel,
    Organization,
    Person,
    RelationshipType,
    SubAward,
    award_url,
)
from .graph import GraphNode, GraphRelationship, PathLength


__all__ = [
    "NODE_KEYS",
    "SOURCE_COLUMNS",
    "Award",
    "AwardRecord",
    "GraphEntity",
    "GraphNode",
    "GraphRelationship",
    "NodeLabel",
    "Organization",
    "PathLength",
    "Person",
    "RelationshipType",
    "SubAward",
    "award_url",
    "organization_key",
    "parse_amount",
    "parse_date",
]
