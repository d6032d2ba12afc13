# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from well_assistant.logging.init import reset_logging
from well_assistant.models.lithology import REQUIRED_COLUMNS
from well_assistant.services.transformer import transform_rows

SCENARIO_A_SHARES = {
    "%SH": 0.25, "%SS": 0.35, "%LS": 0.20, "%DOL": 0.10,
    "%ANH": 0.05, "%Coal": 0.03, "%Salt": 0.02,
}


def make_record(depth: Any, dt: Any, gr: Any, **shares: Any) -> dict[str, Any]:
    """Build a raw record keyed by header name; shares default to the Scenario A mix."""
    record: dict[str, Any] = {"DEPTH": depth}
    record.update(SCENARIO_A_SHARES)
    for key, value in shares.items():
        record[f"%{key}"] = value
    record["DT"] = dt
    record["GR"] = gr
    return record


@pytest.fixture(autouse=True)
def _reset_logger():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
upload:
  max_file_size_mb: 5
llm:
  model: gpt-4o-mini
  max_tokens: 300
  temperature: 0.2
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: wells
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "assistant.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def record() -> Callable[..., dict[str, Any]]:
    return make_record


@pytest.fixture()
def scenario_a_records() -> list[dict[str, Any]]:
    return [
        make_record(100, 80, 45),
        make_record(200, 85, 50),
        make_record(300, 90, 55),
    ]


@pytest.fixture()
def scenario_a_rows(scenario_a_records):
    return transform_rows(scenario_a_records)


@pytest.fixture()
def make_excel() -> Callable[..., Path]:
    """Write ``records`` (dicts) to an .xlsx with a header row of ``columns``."""

    def _make(
        path: Path,
        records: list[dict[str, Any]],
        columns: list[str] | tuple[str, ...] = REQUIRED_COLUMNS,
    ) -> Path:
        rows: list[list[Any]] = [list(columns)]
        rows.extend([r.get(c) for c in columns] for r in records)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name="Data", header=False, index=False)
        return path

    return _make
