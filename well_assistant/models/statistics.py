from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Dataset-level statistics models.

Derived read-only values, recomputed per upload and never mutated in place.
"""

__all__ = [
    "DepthRange",
    "DatasetStatistics",
]


@dataclass(frozen=True)
class DepthRange:
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def to_dict(self) -> dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class DatasetStatistics:
    """Summary statistics over a set of NormalizedRows.

    Attributes:
        total_rows: Number of rows aggregated
        depth_range: Min/max over non-null depths; None when no row has a depth
        averages: ``{"DT": float, "GR": float}``; nulls count as 0 in the sum
            and the divisor is ``total_rows``
        category_distribution: Sparse count of rows per dominant category
    """
    total_rows: int
    depth_range: DepthRange | None
    averages: dict[str, float] = field(default_factory=dict)
    category_distribution: dict[str, int] = field(default_factory=dict)

    @property
    def average_dt(self) -> float:
        return self.averages.get("DT", 0.0)

    @property
    def average_gr(self) -> float:
        return self.averages.get("GR", 0.0)

    def ranked_categories(self) -> list[tuple[str, int]]:
        """Categories ordered by descending count (stable for equal counts)."""
        return sorted(self.category_distribution.items(), key=lambda kv: kv[1], reverse=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRows": self.total_rows,
            "depthRange": self.depth_range.to_dict() if self.depth_range is not None else None,
            "averages": dict(self.averages),
            "categoryDistribution": dict(self.category_distribution),
        }
