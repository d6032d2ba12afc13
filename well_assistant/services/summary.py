from __future__ import annotations

from ..models.ingest_result import IngestResult

"""SUMMARY line rendering for the ingest command.

Format:
SUMMARY files={total}/{total} accepted={a} rejected={r} failed={f} rows={rows}
elapsed_sec={elapsed} throughput_rps={throughput}
"""

__all__ = [
    "format_metric",
    "render_summary_line",
]


def format_metric(value: float) -> str:
    """Integral values without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: IngestResult) -> str:
    """
    >>> from datetime import datetime, timezone
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> render_summary_line(IngestResult(
    ...     accepted_files=1, rejected_files=1, failed_files=0, total_rows=300,
    ...     start_time=t, end_time=t, elapsed_seconds=2.0, throughput_rows_per_sec=150.0))
    'SUMMARY files=2/2 accepted=1 rejected=1 failed=0 rows=300 elapsed_sec=2 throughput_rps=150'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"accepted={result.accepted_files} "
        f"rejected={result.rejected_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"elapsed_sec={format_metric(result.elapsed_seconds)} "
        f"throughput_rps={format_metric(result.throughput_rows_per_sec)}"
    )
