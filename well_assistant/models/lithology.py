from __future__ import annotations

"""Column contract for uploaded drilling spreadsheets.

The header names are matched verbatim (including the ``%`` prefix and case).
DT is recorded in μs/ft and GR in API units.
"""

__all__ = [
    "CATEGORY_COLUMNS",
    "CATEGORY_NAMES",
    "DEPTH_COLUMN",
    "DT_COLUMN",
    "GR_COLUMN",
    "LOG_COLUMNS",
    "PERCENTAGE_COLUMNS",
    "REQUIRED_COLUMNS",
    "DT_UNIT",
    "GR_UNIT",
]

DEPTH_COLUMN = "DEPTH"
DT_COLUMN = "DT"
GR_COLUMN = "GR"

# category name -> spreadsheet column. 順序は dominant 判定の tie-break に使う
CATEGORY_COLUMNS: dict[str, str] = {
    "Shale": "%SH",
    "Sandstone": "%SS",
    "Limestone": "%LS",
    "Dolomite": "%DOL",
    "Anhydrite": "%ANH",
    "Coal": "%Coal",
    "Salt": "%Salt",
}

CATEGORY_NAMES: tuple[str, ...] = tuple(CATEGORY_COLUMNS)
PERCENTAGE_COLUMNS: tuple[str, ...] = tuple(CATEGORY_COLUMNS.values())
LOG_COLUMNS: tuple[str, ...] = (DT_COLUMN, GR_COLUMN)

REQUIRED_COLUMNS: tuple[str, ...] = (DEPTH_COLUMN, *PERCENTAGE_COLUMNS, *LOG_COLUMNS)

DT_UNIT = "μs/ft"
GR_UNIT = "API"
