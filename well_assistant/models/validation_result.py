from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""ValidationResult model.

Built once per upload by the structure validator. ``total_rows`` and
``columns`` are filled even when the file is rejected so the caller can report
what was seen.
"""

__all__ = [
    "ValidationResult",
]


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[str, ...]  # 検出順 (行順)
    total_rows: int
    columns: tuple[str, ...]  # header order

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "totalRows": self.total_rows,
            "columns": list(self.columns),
        }
