from __future__ import annotations

import pytest

from well_assistant.models.statistics import DatasetStatistics
from well_assistant.services.statistics import (
    InsufficientDataError,
    compute_depth_range,
    compute_statistics,
)
from well_assistant.services.transformer import transform_rows


def test_scenario_a_statistics(scenario_a_rows):
    stats = compute_statistics(scenario_a_rows)

    assert stats.total_rows == 3
    assert stats.averages == {"DT": 85.0, "GR": 50.0}
    assert stats.depth_range.min == 100.0
    assert stats.depth_range.max == 300.0
    assert stats.category_distribution == {"Sandstone": 3}


def test_missing_logs_count_as_zero(record):
    rows = transform_rows([record(100, 80, 40), record(200, None, None)])

    stats = compute_statistics(rows)

    assert stats.average_dt == 40.0
    assert stats.average_gr == 20.0


def test_distribution_is_sparse(record):
    rows = transform_rows([
        record(100, 80, 45, SH=0.6, SS=0.1),
        record(200, 80, 45),
        record(300, 80, 45, SH=0.6, SS=0.1),
    ])

    stats = compute_statistics(rows)

    assert stats.category_distribution == {"Shale": 2, "Sandstone": 1}
    assert stats.ranked_categories() == [("Shale", 2), ("Sandstone", 1)]


def test_depth_range_none_when_no_depths(record):
    rows = transform_rows([record(None, 80, 45), record("?", 85, 50)])

    assert compute_depth_range(rows) is None
    stats = compute_statistics(rows)
    assert stats.depth_range is None
    assert stats.to_dict()["depthRange"] is None


def test_empty_rows_rejected():
    with pytest.raises(InsufficientDataError):
        compute_statistics([])


def test_ranked_categories_stable_for_ties():
    stats = DatasetStatistics(
        total_rows=4,
        depth_range=None,
        category_distribution={"Coal": 1, "Shale": 2, "Salt": 1},
    )
    assert stats.ranked_categories() == [("Shale", 2), ("Coal", 1), ("Salt", 1)]


def test_statistics_to_dict(scenario_a_rows):
    d = compute_statistics(scenario_a_rows).to_dict()
    assert d == {
        "totalRows": 3,
        "depthRange": {"min": 100.0, "max": 300.0},
        "averages": {"DT": 85.0, "GR": 50.0},
        "categoryDistribution": {"Sandstone": 3},
    }
