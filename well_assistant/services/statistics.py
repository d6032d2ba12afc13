from __future__ import annotations

from collections.abc import Sequence

from ..models.statistics import DatasetStatistics, DepthRange
from ..models.well_row import NormalizedRow

"""Dataset statistics aggregation.

Averages deliberately treat a missing DT/GR as 0 and divide by the total row
count, so missing values pull the average down. Downstream fixtures depend on
this exact arithmetic; do not switch to a non-null mean.
"""

__all__ = [
    "InsufficientDataError",
    "compute_depth_range",
    "compute_statistics",
]


class InsufficientDataError(Exception):
    """Raised when statistics are requested for an empty row set."""


def compute_depth_range(rows: Sequence[NormalizedRow]) -> DepthRange | None:
    depths = [r.depth for r in rows if r.depth is not None]
    if not depths:
        return None
    return DepthRange(min=min(depths), max=max(depths))


def compute_statistics(rows: Sequence[NormalizedRow]) -> DatasetStatistics:
    """Compute dataset-level summary statistics.

    Raises:
        InsufficientDataError: if ``rows`` is empty
    """
    if not rows:
        raise InsufficientDataError("statistics require at least one data row")

    total = len(rows)
    distribution: dict[str, int] = {}
    for row in rows:
        distribution[row.dominant_category] = distribution.get(row.dominant_category, 0) + 1

    return DatasetStatistics(
        total_rows=total,
        depth_range=compute_depth_range(rows),
        averages={
            "DT": sum((r.dt or 0.0) for r in rows) / total,
            "GR": sum((r.gr or 0.0) for r in rows) / total,
        },
        category_distribution=distribution,
    )
