"""Graph entity models derived from the award table."""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .award import organization_key


class NodeLabel(str, Enum):
    """Node labels in the award graph."""

    PERSON = "Person"
    ORGANIZATION = "Organization"
    AWARD = "Award"
    SUBAWARD = "SubAward"


class RelationshipType(str, Enum):
    """Relationship types in the award graph (exact store names)."""

    BASED_AT = "Based_At"  # Person -> Organization
    AWARDED_TO = "Awarded_to"  # SubAward -> Organization
    SUBAWARD_OF = "Subaward_of"  # SubAward -> Award
    APPLIED_FOR = "Applied_for"  # Person -> SubAward
    MANAGES = "Manages"  # Person -> Award


# Key property used to identify each node type
NODE_KEYS: dict[NodeLabel, str] = {
    NodeLabel.PERSON: "name",
    NodeLabel.ORGANIZATION: "organization_key",
    NodeLabel.AWARD: "title",
    NodeLabel.SUBAWARD: "award_number",
}


class GraphEntity(BaseModel):
    """Base for entities that become nodes."""

    label: NodeLabel = NodeLabel.PERSON

    model_config = ConfigDict(frozen=True)

    @property
    def key_property(self) -> str:
        return NODE_KEYS[self.label]

    @property
    def key_value(self) -> Any:
        return getattr(self, self.key_property)

    def to_properties(self) -> dict[str, Any]:
        """Node properties as stored in the graph."""
        return self.model_dump(exclude={"label"})


class Person(GraphEntity):
    """A PI, co-PI or program manager, identified by exact name."""

    label: NodeLabel = NodeLabel.PERSON
    name: str
    count: int = Field(default=0, ge=0, description="Records referencing this person")


class Organization(GraphEntity):
    """An awardee institution, identified by (name, state, city)."""

    label: NodeLabel = NodeLabel.ORGANIZATION
    name: str
    state: str = ""
    city: str = ""
    count: int = Field(default=0, ge=0, description="Records awarded to this organization")

    @property
    def organization_key(self) -> str:
        return organization_key(self.name, self.state, self.city)

    def to_properties(self) -> dict[str, Any]:
        props = super().to_properties()
        props["organization_key"] = self.organization_key
        return props


class Award(GraphEntity):
    """A canonical parent grant, identified by its normalized title."""

    label: NodeLabel = NodeLabel.AWARD
    title: str
    abstract: str = ""
    start_date: date | None = None
    end_date: date | None = None
    subaward_count: int = Field(default=0, ge=0)

    @field_serializer("start_date", "end_date")
    def _serialize_date(self, v: date | None) -> str | None:
        return v.isoformat() if v else None


class SubAward(GraphEntity):
    """One award number: a funded increment of a parent Award."""

    label: NodeLabel = NodeLabel.SUBAWARD
    award_number: str
    amount: float | None = None
    url: str = ""
    award_title: str = Field("", description="Canonical title of the parent Award")


def award_url(base_url: str, award_number: str) -> str:
    """Deterministic award-search URL for a SubAward."""
    return f"{base_url}?AWD_ID={award_number}"
