from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""NormalizedRow model for the drilling data pipeline.

A NormalizedRow is one spreadsheet data row after numeric coercion. Category
percentages are fractions (0..1 in principle) keyed by category name in the
fixed category order.
"""

__all__ = [
    "NormalizedRow",
]


@dataclass(frozen=True)
class NormalizedRow:
    """Logical representation of one data row after transformation.

    ``row_index`` is 1-based over data rows (the header row is not counted).
    ``depth``/``dt``/``gr`` are ``None`` when the source cell was absent or
    non-numeric; category percentages fall back to 0.0 instead.
    """
    row_index: int
    depth: float | None
    category_percentages: dict[str, float] = field(default_factory=dict)
    dt: float | None = None
    gr: float | None = None
    dominant_category: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowIndex": self.row_index,
            "depth": self.depth,
            "categoryPercentages": dict(self.category_percentages),
            "dt": self.dt,
            "gr": self.gr,
            "dominantCategory": self.dominant_category,
        }
