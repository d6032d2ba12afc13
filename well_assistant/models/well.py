from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .statistics import DatasetStatistics
from .well_row import NormalizedRow

"""Chat-side context models: the selected well and the uploaded dataset."""

__all__ = [
    "WellSummary",
    "WellDataset",
    "Anomaly",
]


@dataclass(frozen=True)
class WellSummary:
    """Well selected by the user (name, current depth in metres, status)."""
    name: str
    depth: float | None
    status: str
    id: int | None = None


@dataclass(frozen=True)
class WellDataset:
    """Rows and statistics of one processed upload.

    ``statistics`` may be None when the caller only kept the rows.
    """
    rows: Sequence[NormalizedRow] = field(default_factory=tuple)
    statistics: DatasetStatistics | None = None

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class Anomaly:
    depth: float | None
    type: str  # composition_error / dt_extreme / gr_extreme
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"depth": self.depth, "type": self.type, "description": self.description}
