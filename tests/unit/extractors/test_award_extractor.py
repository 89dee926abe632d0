"""Unit tests for the award export extractor."""

import pandas as pd
import pytest

from award_graph.exceptions import ErrorCode, ExtractionError, FileSystemError
from award_graph.extractors.awards import (
    REQUIRED_COLUMNS,
    AwardCsvExtractor,
    frame_to_records,
    records_to_frame,
)
from tests.factories import export_row, write_award_csv


pytestmark = pytest.mark.fast


class TestReadFrame:
    def test_missing_file(self, tmp_path):
        extractor = AwardCsvExtractor(tmp_path / "missing.csv")

        with pytest.raises(FileSystemError) as exc_info:
            extractor.read_frame()

        assert exc_info.value.details["file_path"].endswith("missing.csv")
        assert exc_info.value.status_code == ErrorCode.FILE_NOT_FOUND

    def test_reads_strings_without_nan(self, sample_csv):
        df = AwardCsvExtractor(sample_csv).read_frame()

        assert len(df) == 3
        assert df.loc[0, "AwardNumber"] == "1000001"
        assert df.loc[1, "Co-PIName(s)"] == ""

    def test_header_whitespace_stripped(self, tmp_path):
        path = tmp_path / "awards.csv"
        frame = pd.DataFrame([export_row("1000001")])
        frame.columns = [f" {c} " for c in frame.columns]
        frame.to_csv(path, index=False)

        df = AwardCsvExtractor(path).read_frame()

        assert list(df.columns) == list(REQUIRED_COLUMNS)

    def test_custom_delimiter(self, tmp_path):
        path = tmp_path / "awards.tsv"
        pd.DataFrame([export_row("1000001")]).to_csv(path, sep="\t", index=False)

        records = AwardCsvExtractor(path, delimiter="\t").extract()

        assert [r.award_number for r in records] == ["1000001"]


class TestRecordsFromFrame:
    def test_extract_sample(self, sample_csv):
        records = AwardCsvExtractor(sample_csv).extract()

        assert [r.award_number for r in records] == ["1000001", "1000002", "1000003"]
        assert records[0].co_pis == ("Jane Doe", "John Smith")
        assert records[0].amount == 100000.0

    def test_missing_columns(self):
        df = pd.DataFrame([{"AwardNumber": "1", "Title": "x"}])

        with pytest.raises(ExtractionError) as exc_info:
            AwardCsvExtractor("unused.csv").records_from_frame(df)

        assert "PrincipalInvestigator" in exc_info.value.details["missing_columns"]

    def test_rows_without_award_number_skipped(self, tmp_path):
        path = write_award_csv(
            tmp_path / "awards.csv", [export_row("1000001"), export_row(""), export_row("1000002")]
        )
        extractor = AwardCsvExtractor(path)

        records = extractor.extract()

        assert [r.award_number for r in records] == ["1000001", "1000002"]
        assert len(extractor.skipped_rows) == 1

    def test_repeated_award_numbers_skipped(self, tmp_path):
        path = write_award_csv(
            tmp_path / "awards.csv",
            [export_row("1000001", title="First"), export_row("1000001", title="Second")],
        )
        extractor = AwardCsvExtractor(path)

        records = extractor.extract()

        assert len(records) == 1
        assert records[0].title == "First"
        assert len(extractor.skipped_rows) == 1

    def test_co_pi_delimiter_configurable(self, tmp_path):
        path = write_award_csv(
            tmp_path / "awards.csv", [export_row("1000001", co_pis="Jane Doe; John Smith")]
        )

        records = AwardCsvExtractor(path, co_pi_delimiter="; ").extract()

        assert records[0].co_pis == ("Jane Doe", "John Smith")


class TestFrameConversion:
    def test_records_to_frame_and_back(self, sample_csv):
        records = AwardCsvExtractor(sample_csv).extract()

        df = records_to_frame(records)

        assert list(df["award_number"]) == ["1000001", "1000002", "1000003"]
        assert frame_to_records(df) == records

    def test_empty(self):
        df = records_to_frame([])

        assert df.empty
        assert "award_number" in df.columns
        assert frame_to_records(df) == []
