"""Award export extraction into typed AwardRecord rows."""

from pathlib import Path

import pandas as pd
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ErrorCode, ExtractionError, FileSystemError, wrap_exception
from ..models.award import SOURCE_COLUMNS, AwardRecord
from ..utils.text_normalization import split_names


REQUIRED_COLUMNS = tuple(SOURCE_COLUMNS)


class AwardCsvExtractor:
    """Read the delimited award export into an in-memory table of AwardRecords.

    Architecture: delimited file -> pandas DataFrame (all strings) -> AwardRecord list

    Rows without an award number and repeated award numbers are skipped and
    logged; they are data-quality conditions, not failures.
    """

    def __init__(
        self,
        csv_path: Path | str,
        delimiter: str = ",",
        encoding: str = "utf-8",
        co_pi_delimiter: str = ", ",
    ):
        self.csv_path = Path(csv_path)
        self.delimiter = delimiter
        self.encoding = encoding
        self.co_pi_delimiter = co_pi_delimiter
        self.skipped_rows: list[dict[str, str]] = []

    def read_frame(self) -> pd.DataFrame:
        """Read the export as a string-typed DataFrame."""
        if not self.csv_path.exists():
            raise FileSystemError(
                f"Award export not found: {self.csv_path}",
                file_path=str(self.csv_path),
                operation="read_frame",
                status_code=ErrorCode.FILE_NOT_FOUND,
            )

        try:
            df = pd.read_csv(
                self.csv_path,
                sep=self.delimiter,
                encoding=self.encoding,
                dtype=str,
                keep_default_na=False,
            )
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise wrap_exception(
                e,
                ExtractionError,
                message=f"Failed to parse award export: {e}",
                component="extractor.awards",
                operation="read_frame",
                details={"file_path": str(self.csv_path)},
            ) from e

        df.columns = [str(c).strip() for c in df.columns]
        logger.info(f"Read {len(df)} rows from {self.csv_path}")
        return df

    def extract(self) -> list[AwardRecord]:
        """Read and convert the export into AwardRecords."""
        return self.records_from_frame(self.read_frame())

    def records_from_frame(self, df: pd.DataFrame) -> list[AwardRecord]:
        """Validate columns and convert every usable row."""
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ExtractionError(
                "Award export is missing required columns",
                component="extractor.awards",
                operation="records_from_frame",
                details={"missing_columns": missing},
            )

        records: list[AwardRecord] = []
        seen: set[str] = set()
        self.skipped_rows = []

        for row in df[list(REQUIRED_COLUMNS)].to_dict(orient="records"):
            row = dict(row)
            row["Co-PIName(s)"] = split_names(row.get("Co-PIName(s)"), self.co_pi_delimiter)
            try:
                record = AwardRecord.model_validate(row)
            except PydanticValidationError as e:
                logger.warning(
                    f"Skipping malformed award row (award number {row.get('AwardNumber')!r}): "
                    f"{e.error_count()} validation errors"
                )
                self.skipped_rows.append(row)
                continue

            if record.award_number in seen:
                logger.warning(f"Skipping repeated award number {record.award_number}")
                self.skipped_rows.append(row)
                continue

            seen.add(record.award_number)
            records.append(record)

        logger.info(
            f"Extracted {len(records)} award records ({len(self.skipped_rows)} rows skipped)"
        )
        return records


def records_to_frame(records: list[AwardRecord]) -> pd.DataFrame:
    """Convert records to a DataFrame keyed by model field names."""
    columns = list(AwardRecord.model_fields)
    if not records:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([r.model_dump() for r in records], columns=columns)


def frame_to_records(df: pd.DataFrame) -> list[AwardRecord]:
    """Inverse of records_to_frame."""
    if df.empty:
        return []
    return [AwardRecord.model_validate(row) for row in df.to_dict(orient="records")]
