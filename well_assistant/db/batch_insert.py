from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

"""Batched INSERT via psycopg2.extras.execute_values.

Callers pass rows already mapped to the target column order. Driver errors
are wrapped in BatchInsertError so the ingest service can roll back the
file's transaction and continue with the next file.
"""

__all__ = [
    "BatchInsertError",
    "BatchMetrics",
    "InsertResult",
    "batch_insert",
]


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing of a single execute_values call."""
    batch_size: int
    elapsed_seconds: float
    start_time: float  # time.time()
    end_time: float


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int
    returned_values: list[tuple[Any, ...]] | None = None


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    returning: str | None = None,
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """Insert ``rows`` into ``table`` in pages of ``page_size``.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: 対象テーブル名 (固定文字列のみ渡すこと)
    columns: 挿入列
    rows: 行シーケンス (columns と同順)
    returning: 返却列 (例 ``"id"``); 指定時は fetchall() 結果を返す
    page_size: execute_values の page_size
    metrics_callback: receives one BatchMetrics per call; not invoked when
        ``rows`` is empty
    """
    rows_list = list(rows)
    if not rows_list:
        return InsertResult(inserted_rows=0, returned_values=[] if returning else None)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    if returning:
        sql += f" RETURNING {returning}"

    start_time = time.time()
    returned = None
    try:
        returned = execute_values(cursor, sql, rows_list, page_size=page_size, fetch=bool(returning))
    except Exception as e:
        raise BatchInsertError(str(e)) from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(BatchMetrics(
                batch_size=len(rows_list),
                elapsed_seconds=end_time - start_time,
                start_time=start_time,
                end_time=end_time,
            ))

    return InsertResult(inserted_rows=len(rows_list), returned_values=returned if returning else None)
