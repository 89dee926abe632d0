"""Derive deduplicated Person, Organization, Award and SubAward entities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pandas as pd
from loguru import logger

from ..models.award import AwardRecord
from ..models.entities import Award, Organization, Person, SubAward, award_url


DEFAULT_AWARD_SEARCH_URL = "https://www.nsf.gov/awardsearch/showAward"


@dataclass
class AwardEntities:
    """Entity sets derived from one normalized award table."""

    people: list[Person] = field(default_factory=list)
    organizations: list[Organization] = field(default_factory=list)
    awards: list[Award] = field(default_factory=list)
    subawards: list[SubAward] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return {
            "people": len(self.people),
            "organizations": len(self.organizations),
            "awards": len(self.awards),
            "subawards": len(self.subawards),
        }


def _participation_frame(records: Sequence[AwardRecord]) -> pd.DataFrame:
    """One row per (record, person) reference across PI, co-PI and PM roles."""
    rows = []
    for order, record in enumerate(records):
        names = [record.principal_investigator, record.program_manager, *record.co_pis]
        for name in names:
            rows.append({"award_number": record.award_number, "name": name, "order": order})
    return pd.DataFrame(rows, columns=["award_number", "name", "order"])


def extract_people(records: Sequence[AwardRecord]) -> list[Person]:
    """People referenced as PI, program manager or co-PI.

    `count` is the number of distinct records that mention the person in any
    role. Empty and whitespace-only names are dropped.
    """
    refs = _participation_frame(records)
    if refs.empty:
        return []

    refs["name"] = refs["name"].astype(str).str.strip()
    blank = refs["name"] == ""
    if blank.any():
        logger.debug(f"Dropped {int(blank.sum())} empty participant names")
    refs = refs[~blank].drop_duplicates(subset=["award_number", "name"])

    grouped = (
        refs.groupby("name", sort=False)
        .agg(count=("award_number", "size"), first=("order", "min"))
        .sort_values("first", kind="stable")
    )
    return [Person(name=name, count=int(row["count"])) for name, row in grouped.iterrows()]


def extract_organizations(records: Sequence[AwardRecord]) -> list[Organization]:
    """Organizations grouped by (name, state, city) with a record count."""
    df = pd.DataFrame(
        [
            {
                "name": r.organization,
                "state": r.organization_state,
                "city": r.organization_city,
            }
            for r in records
        ],
        columns=["name", "state", "city"],
    )
    blank = df["name"].str.strip() == ""
    if blank.any():
        logger.warning(f"{int(blank.sum())} award records have no organization name")
    df = df[~blank]
    if df.empty:
        return []

    counts = df.groupby(["name", "state", "city"], sort=False).size()
    return [
        Organization(name=name, state=state, city=city, count=int(count))
        for (name, state, city), count in counts.items()
    ]


def extract_awards(records: Sequence[AwardRecord]) -> list[Award]:
    """One Award per distinct title, described by the first record carrying it."""
    first_by_title: dict[str, AwardRecord] = {}
    counts: dict[str, int] = {}
    for record in records:
        if not record.title:
            logger.warning(f"Award record {record.award_number} has no title")
            continue
        first_by_title.setdefault(record.title, record)
        counts[record.title] = counts.get(record.title, 0) + 1

    return [
        Award(
            title=title,
            abstract=first.abstract,
            start_date=first.start_date,
            end_date=first.end_date,
            subaward_count=counts[title],
        )
        for title, first in first_by_title.items()
    ]


def extract_subawards(
    records: Sequence[AwardRecord], award_search_url: str = DEFAULT_AWARD_SEARCH_URL
) -> list[SubAward]:
    """One SubAward per titled record (award numbers are unique).

    Untitled records have no parent Award to hang off, so they yield no
    SubAward.
    """
    return [
        SubAward(
            award_number=r.award_number,
            amount=r.amount,
            url=award_url(award_search_url, r.award_number),
            award_title=r.title,
        )
        for r in records
        if r.title
    ]


def extract_entities(
    records: Sequence[AwardRecord], award_search_url: str = DEFAULT_AWARD_SEARCH_URL
) -> AwardEntities:
    """Derive every entity set from a title-normalized award table."""
    entities = AwardEntities(
        people=extract_people(records),
        organizations=extract_organizations(records),
        awards=extract_awards(records),
        subawards=extract_subawards(records, award_search_url),
    )
    logger.info(f"Extracted entities: {entities.summary()}")
    return entities
