from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from ..excel.reader import SpreadsheetError, read_spreadsheet
from ..models.error_record import ErrorRecord, row_number_from_message
from ..models.lithology import REQUIRED_COLUMNS
from ..models.statistics import DatasetStatistics
from ..models.validation_result import ValidationResult
from ..models.well import WellDataset
from ..models.well_row import NormalizedRow
from .statistics import compute_statistics
from .transformer import transform_rows
from .validator import validate_structure

"""Upload entry point: parse -> validate -> transform -> aggregate.

Every rejection is raised as ``UploadRejected`` carrying the payload returned
to the user (``{error, details, suggestions}``); the transform and aggregate
stages never fail for input that passed the parser.
"""

__all__ = [
    "DEFAULT_MAX_FILE_SIZE_BYTES",
    "STRUCTURE_SUGGESTIONS",
    "FileTooLargeError",
    "UploadRejected",
    "UploadResult",
    "process_upload",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024

STRUCTURE_SUGGESTIONS: tuple[str, ...] = (
    f"Ensure your Excel file contains all required columns: {', '.join(REQUIRED_COLUMNS)}",
    "Check that percentage values are between 0 and 1",
    "Verify that DEPTH values are positive numbers",
    "Ensure DT and GR values are numeric",
)


class FileTooLargeError(SpreadsheetError):
    error_type = "FILE_TOO_LARGE"
    error = "File too large"


class UploadRejected(Exception):
    """User-correctable upload rejection (HTTP 400 equivalent)."""

    def __init__(
        self,
        error: str,
        details: list[str],
        *,
        error_type: str,
        suggestions: list[str] | None = None,
        validation: ValidationResult | None = None,
    ) -> None:
        super().__init__(f"{error}: {'; '.join(details)}")
        self.error = error
        self.details = details
        self.error_type = error_type
        self.suggestions = suggestions
        self.validation = validation

    @classmethod
    def from_spreadsheet_error(cls, exc: SpreadsheetError) -> UploadRejected:
        return cls(exc.error, [exc.detail], error_type=exc.error_type)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, "details": list(self.details)}
        if self.suggestions:
            payload["suggestions"] = list(self.suggestions)
        return payload

    def to_error_records(self, file_name: str) -> list[ErrorRecord]:
        """One ErrorRecord per detail line (row -1 for file-level problems)."""
        return [
            ErrorRecord.create(
                file=file_name,
                row=row_number_from_message(detail),
                error_type=self.error_type,
                message=detail,
            )
            for detail in self.details
        ]


@dataclass(frozen=True)
class UploadResult:
    file_name: str
    rows: list[NormalizedRow]
    statistics: DatasetStatistics
    validation: ValidationResult

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def dataset(self) -> WellDataset:
        return WellDataset(rows=tuple(self.rows), statistics=self.statistics)

    def to_payload(self) -> dict[str, Any]:
        return {
            "message": "File uploaded and processed successfully",
            "rows": [r.to_dict() for r in self.rows],
            "totalRows": self.total_rows,
            "statistics": self.statistics.to_dict(),
            "validation": {
                "isValid": self.validation.is_valid,
                "columnsFound": list(self.validation.columns),
                "warnings": list(self.validation.errors),
            },
        }


def _source_size(source: str | Path | bytes | BinaryIO) -> int | None:
    if isinstance(source, (bytes, bytearray)):
        return len(source)
    if isinstance(source, (str, Path)):
        try:
            return Path(source).stat().st_size
        except OSError:
            return None  # decode step reports unreadable files
    return None


def process_upload(
    source: str | Path | bytes | BinaryIO,
    file_name: str | None = None,
    *,
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
) -> UploadResult:
    """Run the full upload pipeline for one spreadsheet.

    Args:
        source: path, raw bytes or binary file object
        file_name: original file name; its extension selects the decoder
        max_file_size_bytes: uploads above this size are rejected

    Raises:
        UploadRejected: for decode failures and structure violations
    """
    if file_name is None:
        if not isinstance(source, (str, Path)):
            raise ValueError("file_name is required when source is not a path")
        file_name = Path(source).name

    try:
        size = _source_size(source)
        if size is not None and size > max_file_size_bytes:
            limit_mb = max_file_size_bytes / (1024 * 1024)
            raise FileTooLargeError(f"Maximum size is {limit_mb:g}MB.")
        sheet = read_spreadsheet(source, Path(file_name).suffix)
    except SpreadsheetError as e:
        logger.info(f"upload rejected: file={file_name} type={e.error_type}")
        raise UploadRejected.from_spreadsheet_error(e) from e

    validation = validate_structure(sheet.rows, sheet.columns)
    if not validation.is_valid:
        logger.info(f"upload rejected: file={file_name} errors={len(validation.errors)}")
        raise UploadRejected(
            "Invalid Excel file structure",
            list(validation.errors),
            error_type="STRUCTURE_INVALID",
            suggestions=list(STRUCTURE_SUGGESTIONS),
            validation=validation,
        )

    rows = transform_rows(sheet.rows)
    statistics = compute_statistics(rows)
    logger.info(f"upload accepted: file={file_name} rows={len(rows)}")
    return UploadResult(
        file_name=file_name,
        rows=rows,
        statistics=statistics,
        validation=validation,
    )
