from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from ..models.lithology import (
    DEPTH_COLUMN,
    LOG_COLUMNS,
    PERCENTAGE_COLUMNS,
    REQUIRED_COLUMNS,
)
from ..models.validation_result import ValidationResult

"""Structure validation for uploaded drilling spreadsheets.

Every rule is checked on every row and all violations are collected; nothing
short-circuits, so a single round trip gives the user the complete list of
fixes. The validator only reports problems, it never strips values.
"""

__all__ = [
    "COMPOSITION_SUM_TOLERANCE",
    "is_number",
    "validate_structure",
]

COMPOSITION_SUM_TOLERANCE = 0.01


def is_number(value: Any) -> bool:
    """True for real int/float cell values (bool and numeric strings excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _composition_value(value: Any) -> float:
    # absent / null / non-number -> 0 in the sum
    if _is_empty(value) or not is_number(value):
        return 0.0
    return float(value)


def validate_structure(
    records: Sequence[Mapping[str, Any]],
    columns: Sequence[str] | None = None,
) -> ValidationResult:
    """Validate parsed records against the required column contract.

    Args:
        records: Data rows keyed by header name (header row excluded)
        columns: Header names; defaults to the keys of the first record

    Returns:
        ValidationResult with every violation, in row order after the
        missing-columns message
    """
    if columns is None:
        columns = list(records[0].keys()) if records else []
    header = tuple(columns)
    errors: list[str] = []

    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        errors.append(f"Missing required columns: {', '.join(missing)}")

    for index, row in enumerate(records):
        row_num = index + 1

        depth = row.get(DEPTH_COLUMN)
        if not _is_empty(depth):
            if not is_number(depth) or depth < 0:
                errors.append(f"Row {row_num}: {DEPTH_COLUMN} must be a positive number")

        for col in PERCENTAGE_COLUMNS:
            value = row.get(col)
            if not _is_empty(value):
                if not is_number(value) or value < 0 or value > 1:
                    errors.append(f"Row {row_num}: {col} must be a number between 0 and 1")

        for col in LOG_COLUMNS:
            value = row.get(col)
            if not _is_empty(value) and not is_number(value):
                errors.append(f"Row {row_num}: {col} must be a number")

        composition_sum = sum(_composition_value(row.get(col)) for col in PERCENTAGE_COLUMNS)
        # 0.99 / 1.01 are inside the tolerance; round away binary float noise first
        if round(abs(composition_sum - 1), 9) > COMPOSITION_SUM_TOLERANCE:
            errors.append(
                f"Row {row_num}: Rock composition percentages should sum to approximately 1.0 "
                f"(current sum: {composition_sum:.3f})"
            )

    return ValidationResult(
        errors=tuple(errors),
        total_rows=len(records),
        columns=header,
    )
