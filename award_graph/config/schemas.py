"""Configuration schemas using Pydantic for type-safe configuration."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceConfig(BaseModel):
    """Award export (delimited text) location and format."""

    csv_path: str = Field(
        default="data/raw/awards.csv", description="Path to the award export file"
    )
    delimiter: str = Field(default=",", description="Field delimiter")
    encoding: str = Field(default="utf-8", description="File encoding")


class NormalizationConfig(BaseModel):
    """Title clustering and participant-list parsing."""

    title_distance_threshold: int = Field(
        default=5,
        ge=1,
        description="Titles closer than this edit distance are clustered together",
    )
    case_insensitive: bool = True
    co_pi_delimiter: str = ", "


class Neo4jConfig(BaseModel):
    """Configuration for Neo4j database connection."""

    uri: str = Field(default="bolt://localhost:7687", description="Neo4j Bolt URI")
    username: str = Field(default="neo4j", description="Neo4j username")
    password: str = Field(default="neo4j", description="Neo4j password")
    database: str = Field(default="neo4j", description="Neo4j database/catalog")

    create_indexes: bool = True


class LoadingConfig(BaseModel):
    """Graph loading options."""

    award_search_url: str = Field(
        default="https://www.nsf.gov/awardsearch/showAward",
        description="Base URL used to derive SubAward.url",
    )
    reset_before_load: bool = Field(
        default=False, description="Delete every node before loading"
    )


class AnalysisConfig(BaseModel):
    """Connectivity analysis settings."""

    max_hops: int = Field(default=9, ge=1, description="Shortest-path hop bound")
    excluded_relationship_types: list[str] = Field(
        default_factory=lambda: ["Manages"],
        description="Relationship types never traversed by distance queries",
    )
    min_neighbors: int = Field(
        default=11,
        ge=0,
        description="Organizations need at least this many reachable neighbors to rank",
    )
    top_n: int = Field(default=10, ge=1)
    neighborhood_hops: int = Field(default=2, ge=1)
    focus_category: str = "Focus"


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "json"
    file_path: str | None = "logs/award-graph.log"
    max_file_size_mb: int = 100
    backup_count: int = 5
    include_stage: bool = True
    include_run_id: bool = True
    include_timestamps: bool = True

    @field_validator("format")
    @classmethod
    def _normalize_format(cls, v: str) -> str:
        """Accept 'pretty'/'text' -> 'text', 'json'/'structured' -> 'json'."""
        if not isinstance(v, str):
            return v  # type: ignore[unreachable]
        vv = v.lower()
        if vv in ("pretty", "text", "plain"):
            return "text"
        if vv in ("json", "structured"):
            return "json"
        return v


class PipelineConfig(BaseModel):
    """Root configuration model for the award graph pipeline."""

    pipeline: dict[str, Any] = Field(
        default_factory=lambda: {
            "name": "award-graph",
            "version": "0.1.0",
            "environment": "development",
        }
    )

    source: SourceConfig = Field(default_factory=SourceConfig)
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    neo4j: Neo4jConfig = Field(default_factory=Neo4jConfig)
    loading: LoadingConfig = Field(default_factory=LoadingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="allow",
    )
