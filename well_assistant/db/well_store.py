from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from ..models.lithology import CATEGORY_NAMES
from ..models.well import WellSummary
from ..models.well_row import NormalizedRow
from ..services.transformer import dominant_category
from .batch_insert import BatchMetrics, InsertResult, batch_insert

"""PostgreSQL storage for wells, their normalized rows, uploads and chat history.

All functions take an open psycopg2 cursor; transaction boundaries belong to
the caller (one transaction per ingested file).
"""

__all__ = [
    "SCHEMA_DDL",
    "WELL_DATA_COLUMNS",
    "create_schema",
    "create_well",
    "get_well",
    "save_well_rows",
    "fetch_well_rows",
    "record_uploaded_file",
    "record_chat",
]

SCHEMA_DDL: tuple[str, ...] = (
    """CREATE TABLE IF NOT EXISTS wells (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        depth DOUBLE PRECISION,
        status TEXT,
        created_at TIMESTAMPTZ DEFAULT now()
    )""",
    """CREATE TABLE IF NOT EXISTS well_data (
        id SERIAL PRIMARY KEY,
        well_id INTEGER REFERENCES wells (id),
        depth DOUBLE PRECISION,
        shale_percent DOUBLE PRECISION,
        sandstone_percent DOUBLE PRECISION,
        limestone_percent DOUBLE PRECISION,
        dolomite_percent DOUBLE PRECISION,
        anhydrite_percent DOUBLE PRECISION,
        coal_percent DOUBLE PRECISION,
        salt_percent DOUBLE PRECISION,
        dt DOUBLE PRECISION,
        gr DOUBLE PRECISION,
        dominant_rock_type TEXT,
        created_at TIMESTAMPTZ DEFAULT now()
    )""",
    """CREATE TABLE IF NOT EXISTS uploaded_files (
        id SERIAL PRIMARY KEY,
        filename TEXT NOT NULL,
        original_name TEXT,
        file_size BIGINT,
        uploaded_at TIMESTAMPTZ DEFAULT now()
    )""",
    """CREATE TABLE IF NOT EXISTS chat_history (
        id SERIAL PRIMARY KEY,
        session_id TEXT,
        message TEXT NOT NULL,
        response TEXT NOT NULL,
        well_id INTEGER REFERENCES wells (id),
        uploaded_file_id INTEGER REFERENCES uploaded_files (id),
        created_at TIMESTAMPTZ DEFAULT now()
    )""",
)

# category name -> well_data column
_CATEGORY_DB_COLUMNS: dict[str, str] = {
    name: f"{name.lower()}_percent" for name in CATEGORY_NAMES
}

WELL_DATA_COLUMNS: tuple[str, ...] = (
    "well_id",
    "depth",
    *_CATEGORY_DB_COLUMNS.values(),
    "dt",
    "gr",
    "dominant_rock_type",
)


def create_schema(cursor: Any) -> None:
    for ddl in SCHEMA_DDL:
        cursor.execute(ddl)


def create_well(cursor: Any, name: str, depth: float | None, status: str) -> int:
    cursor.execute(
        "INSERT INTO wells (name, depth, status) VALUES (%s, %s, %s) RETURNING id",
        (name, depth, status),
    )
    return cursor.fetchone()[0]


def get_well(cursor: Any, well_id: int) -> WellSummary | None:
    cursor.execute("SELECT id, name, depth, status FROM wells WHERE id = %s", (well_id,))
    row = cursor.fetchone()
    if row is None:
        return None
    return WellSummary(id=row[0], name=row[1], depth=row[2], status=row[3] or "")


def _row_values(well_id: int, row: NormalizedRow) -> tuple[Any, ...]:
    return (
        well_id,
        row.depth,
        *(row.category_percentages.get(name, 0.0) for name in _CATEGORY_DB_COLUMNS),
        row.dt,
        row.gr,
        row.dominant_category,
    )


def save_well_rows(
    cursor: Any,
    well_id: int,
    rows: Sequence[NormalizedRow],
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    return batch_insert(
        cursor,
        "well_data",
        WELL_DATA_COLUMNS,
        (_row_values(well_id, r) for r in rows),
        metrics_callback=metrics_callback,
    )


def fetch_well_rows(cursor: Any, well_id: int) -> list[NormalizedRow]:
    """Load a well's rows ordered by depth; row_index follows that order."""
    cols = ", ".join(WELL_DATA_COLUMNS[1:])
    cursor.execute(
        f"SELECT {cols} FROM well_data WHERE well_id = %s ORDER BY depth",
        (well_id,),
    )
    result: list[NormalizedRow] = []
    n_categories = len(_CATEGORY_DB_COLUMNS)
    for index, rec in enumerate(cursor.fetchall(), start=1):
        depth = rec[0]
        shares = {
            name: float(v or 0.0)
            for name, v in zip(_CATEGORY_DB_COLUMNS, rec[1:1 + n_categories], strict=True)
        }
        dt, gr, dominant = rec[1 + n_categories:]
        result.append(NormalizedRow(
            row_index=index,
            depth=depth,
            category_percentages=shares,
            dt=dt,
            gr=gr,
            dominant_category=dominant or dominant_category(shares),
        ))
    return result


def record_uploaded_file(cursor: Any, filename: str, original_name: str, file_size: int) -> int:
    cursor.execute(
        "INSERT INTO uploaded_files (filename, original_name, file_size) VALUES (%s, %s, %s) RETURNING id",
        (filename, original_name, file_size),
    )
    return cursor.fetchone()[0]


def record_chat(
    cursor: Any,
    session_id: str,
    message: str,
    response: str,
    well_id: int | None = None,
) -> int:
    cursor.execute(
        "INSERT INTO chat_history (session_id, message, response, well_id) "
        "VALUES (%s, %s, %s, %s) RETURNING id",
        (session_id, message, response, well_id),
    )
    return cursor.fetchone()[0]
