"""Pure transformations over the in-memory award table."""

from .entity_extractor import (
    AwardEntities,
    extract_awards,
    extract_entities,
    extract_organizations,
    extract_people,
    extract_subawards,
)
from .title_normalizer import TitleCluster, TitleClusters, TitleNormalizer


__all__ = [
    "AwardEntities",
    "TitleCluster",
    "TitleClusters",
    "TitleNormalizer",
    "extract_awards",
    "extract_entities",
    "extract_organizations",
    "extract_people",
    "extract_subawards",
]
