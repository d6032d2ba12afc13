"""Domain models for the well drilling data assistant.

This package contains the value objects passed between the spreadsheet
pipeline stages and the chat services.
"""

from .error_record import ErrorRecord
from .ingest_result import FileStat, FileStatus, IngestResult
from .lithology import CATEGORY_COLUMNS, CATEGORY_NAMES, PERCENTAGE_COLUMNS, REQUIRED_COLUMNS
from .statistics import DatasetStatistics, DepthRange
from .validation_result import ValidationResult
from .well import Anomaly, WellDataset, WellSummary
from .well_row import NormalizedRow

__all__ = [
    # Column contract
    "CATEGORY_COLUMNS",
    "CATEGORY_NAMES",
    "PERCENTAGE_COLUMNS",
    "REQUIRED_COLUMNS",
    # Pipeline models
    "NormalizedRow",
    "ValidationResult",
    "DatasetStatistics",
    "DepthRange",
    # Chat context models
    "WellSummary",
    "WellDataset",
    "Anomaly",
    # Logging / batch models
    "ErrorRecord",
    "FileStat",
    "FileStatus",
    "IngestResult",
]
