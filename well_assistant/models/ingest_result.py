from __future__ import annotations

import statistics
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Batch ingest result models.

Aggregated outcome of importing every spreadsheet found in the configured
source directory, plus per-file statistics and batch timing helpers.
"""


class FileStatus(Enum):
    """Outcome of a single spreadsheet in a batch ingest.

    - ACCEPTED: parsed, validated and (when a DB is attached) persisted
    - REJECTED: parser or validator refused the file
    - FAILED: accepted by the pipeline but persisting it failed
    """
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-file ingest statistics."""
    file_name: str
    status: FileStatus
    rows: int  # accepted rows (0 when rejected)
    elapsed_seconds: float
    error: str | None = None
    total_batches: int = 0
    avg_batch_seconds: float = 0.0


@dataclass(frozen=True)
class IngestResult:
    """Aggregated results of one ``ingest`` run."""
    accepted_files: int
    rejected_files: int
    failed_files: int
    total_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # total_rows / elapsed
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.accepted_files + self.rejected_files + self.failed_files


class BatchStatsAccumulator:
    """Collects per-batch insert timings for a FileStat."""

    def __init__(self) -> None:
        self.batch_times: list[float] = []

    def add_batch_time(self, elapsed_seconds: float) -> None:
        self.batch_times.append(elapsed_seconds)

    def get_stats(self) -> tuple[int, float]:
        """Return ``(total_batches, avg_batch_seconds)``."""
        if not self.batch_times:
            return (0, 0.0)
        return (len(self.batch_times), statistics.mean(self.batch_times))
