"""Source extraction for the award graph pipeline."""

from .awards import REQUIRED_COLUMNS, AwardCsvExtractor, frame_to_records, records_to_frame


__all__ = ["REQUIRED_COLUMNS", "AwardCsvExtractor", "frame_to_records", "records_to_frame"]
