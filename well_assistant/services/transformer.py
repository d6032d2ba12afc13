from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from ..models.lithology import CATEGORY_COLUMNS, DEPTH_COLUMN, DT_COLUMN, GR_COLUMN
from ..models.well_row import NormalizedRow

"""Row transformation: raw records -> NormalizedRow.

Coercion is total and never raises. A row that failed validation but is
transformed anyway still yields a structurally valid NormalizedRow; bad values
are dropped silently (strictness lives in the validator).

Coercion rules (kept identical to the upload API's historical output):
- category percentages: unparsable or zero -> 0.0
- DEPTH / DT / GR: unparsable or zero -> None (not 0)
"""

__all__ = [
    "coerce_float",
    "dominant_category",
    "transform_row",
    "transform_rows",
]

# leading decimal literal, like a lenient float parse ("12.5m" -> 12.5)
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:inf(?:inity)?|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.IGNORECASE)


def coerce_float(value: Any) -> float | None:
    """Parse a cell value as float; None when it cannot be parsed (or is NaN)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        m = _FLOAT_PREFIX.match(value.strip())
        if not m:
            return None
        result = float(m.group(0))
    else:
        return None
    if math.isnan(result):
        return None
    return result


def dominant_category(percentages: Mapping[str, float]) -> str:
    """Category with the greatest share; the first maximum in category order wins."""
    best_name = ""
    best_value = -math.inf
    for name in CATEGORY_COLUMNS:
        value = percentages.get(name, 0.0)
        if value > best_value:
            best_name, best_value = name, value
    return best_name


def transform_row(record: Mapping[str, Any], row_index: int) -> NormalizedRow:
    percentages = {
        name: coerce_float(record.get(column)) or 0.0
        for name, column in CATEGORY_COLUMNS.items()
    }
    return NormalizedRow(
        row_index=row_index,
        depth=coerce_float(record.get(DEPTH_COLUMN)) or None,
        category_percentages=percentages,
        dt=coerce_float(record.get(DT_COLUMN)) or None,
        gr=coerce_float(record.get(GR_COLUMN)) or None,
        dominant_category=dominant_category(percentages),
    )


def transform_rows(records: Sequence[Mapping[str, Any]]) -> list[NormalizedRow]:
    """Transform records in order; output has the same length as the input."""
    return [transform_row(record, index + 1) for index, record in enumerate(records)]
