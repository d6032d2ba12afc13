from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..config.loader import AppConfig
from ..db.well_store import create_well, record_uploaded_file, save_well_rows
from ..excel.reader import SUPPORTED_EXTENSIONS
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.ingest_result import BatchStatsAccumulator, FileStat, FileStatus, IngestResult
from .progress import ProgressTracker
from .upload import UploadRejected, UploadResult, process_upload

"""Batch ingest of every spreadsheet in the configured source directory.

Each file runs through the upload pipeline. Accepted files are persisted in
their own transaction when a cursor is given (cursor=None is mock mode: the
pipeline runs, nothing is written). Rejections and DB failures are recorded
in the error log and never stop the run.
"""

__all__ = [
    "IMPORTED_WELL_STATUS",
    "IngestError",
    "ingest_directory",
    "scan_spreadsheets",
]

logger = logging.getLogger(__name__)

IMPORTED_WELL_STATUS = "Imported"


class IngestError(Exception):
    """Fatal error that prevents the whole run (e.g. missing directory)."""


def scan_spreadsheets(directory: Path) -> list[Path]:
    """List .xlsx/.xls files in ``directory`` (non-recursive, sorted by name)."""
    if not directory.exists():
        raise IngestError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise IngestError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
        )
    except OSError as e:
        raise IngestError(f"Error reading directory {directory}: {e}") from e


def _persist(cursor: Any, path: Path, upload: UploadResult) -> tuple[int, float]:
    """Write one accepted file in a single transaction; returns batch stats."""
    accumulator = BatchStatsAccumulator()
    cursor.execute("BEGIN")
    try:
        record_uploaded_file(cursor, str(path), path.name, path.stat().st_size)
        depth_range = upload.statistics.depth_range
        well_id = create_well(
            cursor,
            path.stem,
            depth_range.max if depth_range is not None else None,
            IMPORTED_WELL_STATUS,
        )
        save_well_rows(
            cursor,
            well_id,
            upload.rows,
            metrics_callback=lambda m: accumulator.add_batch_time(m.elapsed_seconds),
        )
        cursor.execute("COMMIT")
    except Exception:
        cursor.execute("ROLLBACK")
        raise
    return accumulator.get_stats()


def _ingest_file(
    path: Path,
    config: AppConfig,
    cursor: Any,
    error_log: ErrorLogBuffer,
) -> FileStat:
    start = datetime.now(UTC)

    def elapsed() -> float:
        return (datetime.now(UTC) - start).total_seconds()

    try:
        upload = process_upload(path, path.name, max_file_size_bytes=config.max_file_size_bytes)
    except UploadRejected as e:
        error_log.extend(e.to_error_records(path.name))
        logger.warning(f"rejected: {path.name} ({len(e.details)} problem(s))")
        return FileStat(path.name, FileStatus.REJECTED, 0, elapsed(), error=e.error)

    batches, avg_batch = 0, 0.0
    if cursor is not None:
        try:
            batches, avg_batch = _persist(cursor, path, upload)
        except Exception as e:
            error_log.append(ErrorRecord.create(path.name, -1, "DB_INSERT_ERROR", str(e)))
            logger.error(f"persist failed: {path.name}: {e}")
            return FileStat(path.name, FileStatus.FAILED, 0, elapsed(), error=str(e))

    logger.info(f"accepted: {path.name} rows={upload.total_rows}")
    return FileStat(
        path.name,
        FileStatus.ACCEPTED,
        upload.total_rows,
        elapsed(),
        total_batches=batches,
        avg_batch_seconds=avg_batch,
    )


def ingest_directory(
    config: AppConfig,
    cursor: Any = None,
    error_log: ErrorLogBuffer | None = None,
) -> IngestResult:
    """Ingest every spreadsheet under ``config.source_directory``.

    Raises:
        IngestError: when the directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    paths = scan_spreadsheets(Path(config.source_directory))

    stats: list[FileStat] = []
    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            stat = _ingest_file(path, config, cursor, error_log)
            stats.append(stat)
            progress.finish_file(status=stat.status.value, rows=stat.rows)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    total_rows = sum(s.rows for s in stats)
    return IngestResult(
        accepted_files=sum(1 for s in stats if s.status is FileStatus.ACCEPTED),
        rejected_files=sum(1 for s in stats if s.status is FileStatus.REJECTED),
        failed_files=sum(1 for s in stats if s.status is FileStatus.FAILED),
        total_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=total_rows / elapsed if elapsed > 0 else 0.0,
        file_stats=stats,
    )
