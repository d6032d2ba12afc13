from __future__ import annotations

import pytest

from well_assistant.db.well_store import (
    SCHEMA_DDL,
    WELL_DATA_COLUMNS,
    create_schema,
    create_well,
    fetch_well_rows,
    get_well,
    record_chat,
    record_uploaded_file,
    save_well_rows,
)


class DummyCursor:
    def __init__(self, fetchone=None, fetchall=None) -> None:
        self.executed: list[tuple[str, tuple | None]] = []
        self._fetchone = list(fetchone or [])
        self._fetchall = fetchall or []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def fetchone(self):
        return self._fetchone.pop(0) if self._fetchone else None

    def fetchall(self):
        return self._fetchall


@pytest.fixture()
def inserted(monkeypatch):
    import well_assistant.db.batch_insert as bi

    captured: dict = {}

    def fake_execute_values(cursor, sql, rows, page_size=1000, fetch=False):
        captured["sql"] = sql
        captured["rows"] = list(rows)

    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    return captured


def test_create_schema_runs_every_ddl():
    cur = DummyCursor()
    create_schema(cur)
    assert [sql for sql, _ in cur.executed] == list(SCHEMA_DDL)


def test_create_well_returns_id():
    cur = DummyCursor(fetchone=[(7,)])

    assert create_well(cur, "Well-A", 2500.0, "Active") == 7
    assert cur.executed[0][1] == ("Well-A", 2500.0, "Active")


def test_get_well():
    cur = DummyCursor(fetchone=[(3, "Well-C", 1800.0, "Drilling")])

    well = get_well(cur, 3)

    assert well.id == 3
    assert well.name == "Well-C"
    assert well.depth == 1800.0
    assert well.status == "Drilling"
    assert get_well(DummyCursor(), 99) is None


def test_save_well_rows_column_order(inserted, scenario_a_rows):
    res = save_well_rows(DummyCursor(), 5, scenario_a_rows)

    assert res.inserted_rows == 3
    assert "INSERT INTO well_data" in inserted["sql"]
    first = inserted["rows"][0]
    assert len(first) == len(WELL_DATA_COLUMNS)
    assert first[0] == 5
    assert first[1] == 100.0
    assert first[2:9] == pytest.approx((0.25, 0.35, 0.20, 0.10, 0.05, 0.03, 0.02))
    assert first[9:] == (80.0, 45.0, "Sandstone")


def test_fetch_well_rows_rebuilds_normalized_rows():
    cur = DummyCursor(fetchall=[
        (100.0, 0.25, 0.35, 0.20, 0.10, 0.05, 0.03, 0.02, 80.0, 45.0, "Sandstone"),
        (200.0, 0.60, 0.10, None, None, None, None, None, None, 120.0, None),
    ])

    rows = fetch_well_rows(cur, 5)

    assert [r.row_index for r in rows] == [1, 2]
    assert rows[0].dominant_category == "Sandstone"
    assert rows[1].category_percentages["Limestone"] == 0.0
    assert rows[1].dt is None
    assert rows[1].dominant_category == "Shale"
    assert "ORDER BY depth" in cur.executed[0][0]


def test_record_uploaded_file_and_chat():
    cur = DummyCursor(fetchone=[(11,), (12,)])

    assert record_uploaded_file(cur, "/data/a.xlsx", "a.xlsx", 2048) == 11
    assert record_chat(cur, "session_x", "hi", "hello", well_id=3) == 12
    assert cur.executed[1][1] == ("session_x", "hi", "hello", 3)
