"""Unit tests for near-duplicate title clustering."""

import pytest

from award_graph.exceptions import TitleNormalizationError
from award_graph.transformers.title_normalizer import TitleNormalizer
from tests.factories import AwardRecordFactory


pytestmark = pytest.mark.fast


@pytest.fixture
def normalizer():
    return TitleNormalizer(threshold=5)


class TestIsMatch:
    def test_prefix_article_matches(self, normalizer):
        assert normalizer.is_match("Study of X", "A Study of X")

    def test_unrelated_titles_do_not_match(self, normalizer):
        assert not normalizer.is_match("Study of X", "Completely Unrelated Title")

    def test_threshold_is_exclusive(self, normalizer):
        assert normalizer.is_match("Study of X", "Study of XXXXX")  # distance 4
        assert not normalizer.is_match("Study of X", "Study of XXXXXX")  # distance 5

    def test_case_insensitive_by_default(self, normalizer):
        assert normalizer.is_match("study of x", "STUDY OF X")

    def test_case_sensitive(self):
        assert not TitleNormalizer(case_insensitive=False).is_match("study of x", "STUDY OF X")

    def test_invalid_threshold(self):
        with pytest.raises(TitleNormalizationError):
            TitleNormalizer(threshold=0)


class TestCluster:
    def test_near_duplicates_collapse(self, normalizer):
        result = normalizer.cluster(["Study of X", "A Study of X", "Completely Unrelated Title"])

        assert result.mapping == {
            "Study of X": "Study of X",
            "A Study of X": "Study of X",
            "Completely Unrelated Title": "Completely Unrelated Title",
        }
        assert len(result.clusters) == 2
        assert len(result.merged_clusters) == 1

    def test_most_frequent_title_wins(self, normalizer):
        result = normalizer.cluster(["Study of X", "A Study of X", "A Study of X"])
        assert result.mapping["Study of X"] == "A Study of X"

    def test_tie_goes_to_first_seen(self, normalizer):
        result = normalizer.cluster(["A Study of X", "Study of X"])
        assert set(result.mapping.values()) == {"A Study of X"}

    def test_single_linkage_is_transitive(self, normalizer):
        titles = ["Ocean Carbon Flux", "Ocean Carbon Flux III", "Ocean Carbon Flux III IV"]
        assert not normalizer.is_match(titles[0], titles[2])

        result = normalizer.cluster(titles)

        assert len(result.clusters) == 1
        assert result.clusters[0].members == titles
        assert result.clusters[0].transitive is True
        assert len(result.transitive_clusters) == 1

    def test_direct_cluster_not_flagged(self, normalizer):
        result = normalizer.cluster(["Study of X", "A Study of X"])
        assert result.transitive_clusters == []

    def test_empty_titles_never_cluster(self, normalizer):
        result = normalizer.cluster(["", "abc", "abd"])

        assert result.mapping[""] == ""
        assert result.mapping["abc"] == result.mapping["abd"] == "abc"

    def test_empty_input(self, normalizer):
        result = normalizer.cluster([])

        assert result.mapping == {}
        assert result.clusters == []

    def test_normalize_returns_mapping(self, normalizer):
        assert normalizer.normalize(["Study of X", "A Study of X"]) == {
            "Study of X": "Study of X",
            "A Study of X": "Study of X",
        }


class TestApply:
    def test_records_get_canonical_titles(self, normalizer):
        records = [
            AwardRecordFactory.create(award_number="1", title="Study of X"),
            AwardRecordFactory.create(award_number="2", title="A Study of X"),
            AwardRecordFactory.create(award_number="3", title="Completely Unrelated Title"),
        ]

        normalized = normalizer.apply(records)

        assert [r.title for r in normalized] == [
            "Study of X",
            "Study of X",
            "Completely Unrelated Title",
        ]
        assert records[1].title == "A Study of X"
        assert normalized[0] is records[0]

    def test_precomputed_mapping(self, normalizer):
        records = [AwardRecordFactory.create(title="Old Title")]

        normalized = normalizer.apply(records, mapping={"Old Title": "New Title"})

        assert normalized[0].title == "New Title"
