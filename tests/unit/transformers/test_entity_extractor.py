"""Unit tests for entity derivation."""

import pytest

from award_graph.models.entities import NodeLabel
from award_graph.transformers.entity_extractor import (
    extract_awards,
    extract_entities,
    extract_organizations,
    extract_people,
    extract_subawards,
)
from tests.factories import AwardRecordFactory


pytestmark = pytest.mark.fast


@pytest.fixture
def records():
    return [
        AwardRecordFactory.create(
            award_number="1000001",
            title="Study of X",
            principal_investigator="Alice Able",
            co_pis=("Jane Doe", "John Smith"),
            program_manager="Pat Manager",
            organization="State University",
            organization_state="CA",
            organization_city="Davis",
            start_date="2020-01-01",
        ),
        AwardRecordFactory.create(
            award_number="1000002",
            title="Study of X",
            principal_investigator="Bob Baker",
            program_manager="Pat Manager",
            organization="Tech Institute",
            organization_state="MA",
            organization_city="Cambridge",
            amount=50000.0,
        ),
        AwardRecordFactory.create(
            award_number="1000003",
            title="Completely Unrelated Title",
            principal_investigator="Jane Doe",
            program_manager="Quinn Officer",
            organization="State University",
            organization_state="CA",
            organization_city="Davis",
        ),
    ]


class TestExtractPeople:
    def test_co_pis_become_distinct_people(self):
        record = AwardRecordFactory.create(
            principal_investigator="", program_manager="", co_pis=("Jane Doe", "John Smith")
        )

        people = extract_people([record])

        assert [(p.name, p.count) for p in people] == [("Jane Doe", 1), ("John Smith", 1)]

    def test_counts_distinct_records(self, records):
        counts = {p.name: p.count for p in extract_people(records)}

        assert counts == {
            "Alice Able": 1,
            "Pat Manager": 2,
            "Jane Doe": 2,
            "John Smith": 1,
            "Bob Baker": 1,
            "Quinn Officer": 1,
        }

    def test_same_person_in_two_roles_counted_once(self):
        record = AwardRecordFactory.create(
            principal_investigator="Jane Doe", program_manager="Jane Doe", co_pis=("Jane Doe",)
        )

        assert [(p.name, p.count) for p in extract_people([record])] == [("Jane Doe", 1)]

    def test_empty_names_dropped(self):
        record = AwardRecordFactory.create(principal_investigator="", program_manager="")

        assert extract_people([record]) == []

    def test_first_appearance_order(self, records):
        names = [p.name for p in extract_people(records)]
        assert names[:3] == ["Alice Able", "Pat Manager", "Jane Doe"]

    def test_no_records(self):
        assert extract_people([]) == []


class TestExtractOrganizations:
    def test_grouped_by_name_state_city(self, records):
        orgs = extract_organizations(records)

        assert [(o.organization_key, o.count) for o in orgs] == [
            ("State University|CA|Davis", 2),
            ("Tech Institute|MA|Cambridge", 1),
        ]

    def test_same_name_different_city_distinct(self):
        records = [
            AwardRecordFactory.create(award_number="1", organization_city="Davis"),
            AwardRecordFactory.create(award_number="2", organization_city="Irvine"),
        ]

        assert len(extract_organizations(records)) == 2

    def test_blank_organization_dropped(self):
        assert extract_organizations([AwardRecordFactory.create(organization="")]) == []


class TestExtractAwards:
    def test_one_award_per_title(self, records):
        awards = extract_awards(records)

        assert [(a.title, a.subaward_count) for a in awards] == [
            ("Study of X", 2),
            ("Completely Unrelated Title", 1),
        ]
        assert awards[0].start_date.isoformat() == "2020-01-01"

    def test_untitled_records_skipped(self):
        assert extract_awards([AwardRecordFactory.create(title="")]) == []


class TestExtractSubawards:
    def test_one_per_record_with_url(self, records):
        subawards = extract_subawards(records, "https://example.org/show")

        assert [s.award_number for s in subawards] == ["1000001", "1000002", "1000003"]
        assert subawards[0].url == "https://example.org/show?AWD_ID=1000001"
        assert subawards[1].amount == 50000.0
        assert subawards[1].award_title == "Study of X"

    def test_untitled_records_yield_no_subaward(self):
        assert extract_subawards([AwardRecordFactory.create(title="")]) == []


class TestExtractEntities:
    def test_summary(self, records):
        entities = extract_entities(records)

        assert entities.summary() == {
            "people": 6,
            "organizations": 2,
            "awards": 2,
            "subawards": 3,
        }
        assert entities.subawards[0].label == NodeLabel.SUBAWARD
