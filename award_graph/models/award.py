"""Pydantic model for one row of the award export."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..utils.text_normalization import clean_text, split_names


# Export column name -> model field
SOURCE_COLUMNS: dict[str, str] = {
    "AwardNumber": "award_number",
    "Title": "title",
    "StartDate": "start_date",
    "EndDate": "end_date",
    "AwardedAmountToDate": "amount",
    "Abstract": "abstract",
    "Organization": "organization",
    "OrganizationState": "organization_state",
    "OrganizationCity": "organization_city",
    "PrincipalInvestigator": "principal_investigator",
    "ProgramManager": "program_manager",
    "Co-PIName(s)": "co_pis",
}

DATE_FORMATS = ("%m/%d/%Y", "%Y-%m-%d", "%m/%d/%y")


def parse_date(value: Any) -> date | None:
    """Parse export dates (MM/DD/YYYY or ISO). Unparseable values become None."""
    if value is None or isinstance(value, date):
        return value
    text = clean_text(value)
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_amount(value: Any) -> float | None:
    """Parse dollar amounts such as '$1,234.00'. Unparseable values become None."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return None if value != value else float(value)
    text = clean_text(value).replace("$", "").replace(",", "")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


class AwardRecord(BaseModel):
    """One award row: immutable once loaded.

    Field aliases match the export headers (``AwardNumber``, ``Co-PIName(s)``,
    ...) so rows read from the file validate directly; field names work too.
    """

    award_number: str = Field(..., alias="AwardNumber", min_length=1)
    title: str = Field("", alias="Title")
    start_date: date | None = Field(None, alias="StartDate")
    end_date: date | None = Field(None, alias="EndDate")
    amount: float | None = Field(None, alias="AwardedAmountToDate")
    abstract: str = Field("", alias="Abstract")
    organization: str = Field("", alias="Organization")
    organization_state: str = Field("", alias="OrganizationState")
    organization_city: str = Field("", alias="OrganizationCity")
    principal_investigator: str = Field("", alias="PrincipalInvestigator")
    program_manager: str = Field("", alias="ProgramManager")
    co_pis: tuple[str, ...] = Field(default=(), alias="Co-PIName(s)")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator(
        "award_number",
        "title",
        "abstract",
        "organization",
        "organization_state",
        "organization_city",
        "principal_investigator",
        "program_manager",
        mode="before",
    )
    @classmethod
    def _clean_strings(cls, v: Any) -> str:
        return clean_text(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, v: Any) -> date | None:
        return parse_date(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, v: Any) -> float | None:
        return parse_amount(v)

    @field_validator("co_pis", mode="before")
    @classmethod
    def _split_co_pis(cls, v: Any) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, (list, tuple)):
            return tuple(name for name in (clean_text(n) for n in v) if name)
        return split_names(v)

    @field_serializer("start_date", "end_date")
    def _serialize_date(self, v: date | None) -> str | None:
        return v.isoformat() if v else None

    @property
    def investigators(self) -> tuple[str, ...]:
        """PI followed by co-PIs, without empties or repeats."""
        names: list[str] = []
        for name in (self.principal_investigator, *self.co_pis):
            if name and name not in names:
                names.append(name)
        return tuple(names)

    @property
    def organization_key(self) -> str | None:
        """Composite (name, state, city) key, or None without an organization name."""
        if not self.organization:
            return None
        return organization_key(self.organization, self.organization_state, self.organization_city)

    def with_title(self, title: str) -> "AwardRecord":
        """Copy of this record carrying a replaced (canonical) title."""
        return self.model_copy(update={"title": title})


def _escape_key_part(part: str) -> str:
    return part.replace("\\", "\\\\").replace("|", "\\|")


def organization_key(name: str, state: str, city: str) -> str:
    """Stable string form of the Organization composite key.

    Backslashes and `|` inside a part are escaped, so distinct triples never
    share a key.
    """
    return "|".join(_escape_key_part(part) for part in (name, state, city))
