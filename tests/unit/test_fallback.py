from __future__ import annotations

import pytest

from well_assistant.models.statistics import DatasetStatistics
from well_assistant.models.well import WellDataset, WellSummary
from well_assistant.services.fallback import (
    generate_data_insights,
    generate_drilling_recommendations,
    generate_fallback_response,
)
from well_assistant.services.statistics import compute_statistics
from well_assistant.services.transformer import transform_rows


@pytest.fixture()
def dataset(scenario_a_rows) -> WellDataset:
    return WellDataset(rows=tuple(scenario_a_rows), statistics=compute_statistics(scenario_a_rows))


def _stats_only(distribution: dict[str, int], dt: float, gr: float) -> WellDataset:
    return WellDataset(statistics=DatasetStatistics(
        total_rows=sum(distribution.values()),
        depth_range=None,
        averages={"DT": dt, "GR": gr},
        category_distribution=distribution,
    ))


def test_depth_without_context():
    assert generate_fallback_response("What is the depth?") == (
        "Depth information is not available. Please select a well or upload drilling data "
        "to see depth analysis."
    )


def test_depth_from_well():
    well = WellSummary(name="Well-A", depth=2500.0, status="Active")
    assert generate_fallback_response("current depth?", well) == (
        "The current drilling depth for Well-A is 2500m. This is a active well."
    )


def test_depth_from_dataset_takes_precedence(dataset):
    well = WellSummary(name="Well-A", depth=2500.0, status="Active")
    assert generate_fallback_response("depth range?", well, dataset) == (
        "Based on your uploaded data, the depth range spans from 100m to 300m "
        "(total interval: 200.0m). The data contains 3 measurement points across this interval."
    )


def test_same_input_same_output(dataset):
    for message in ["What is the depth?", "analyze", "any problem?", "hi"]:
        assert generate_fallback_response(message, None, dataset) == generate_fallback_response(
            message, None, dataset
        )


def test_composition_with_data(dataset):
    response = generate_fallback_response("What is the composition?", None, dataset)
    assert response.startswith("Based on your uploaded data, the rock composition analysis shows: Sandstone: 100.0%.")
    assert "across 3 intervals" in response


def test_composition_without_data():
    response = generate_fallback_response("Tell me about sandstone")
    assert response.endswith("Please upload your Excel file to see specific composition analysis.")


def test_dt_interpretation(dataset):
    response = generate_fallback_response("Explain the DT values", None, dataset)
    assert response.startswith(
        "Your uploaded data shows an average DT of 85.0 μs/ft, indicating moderate porosity"
    )


def test_dt_dense_formation():
    response = generate_fallback_response("dt?", None, _stats_only({"Limestone": 2}, 55.0, 30.0))
    assert "indicating relatively dense, low-porosity formations" in response


def test_gr_interpretation(dataset):
    response = generate_fallback_response("gamma ray?", None, dataset)
    assert response.startswith(
        "Your uploaded data shows an average GR of 50.0 API, indicating mixed lithology"
    )


def test_gr_without_data():
    assert "Upload your data to see specific GR analysis." in generate_fallback_response("GR meaning")


def test_analysis_with_data(dataset):
    assert generate_fallback_response("Please analyze this", None, dataset) == (
        "Based on your 3 data points: 200.0m interval analyzed, Sandstone is dominant (100.0%), "
        "DT averages 85.0 μs/ft, GR averages 50.0 API. This analysis can help optimize drilling "
        "parameters, predict formation challenges, and plan completion strategies."
    )


def test_analysis_without_data():
    assert generate_fallback_response("analysis please").startswith(
        "To provide detailed analysis, I need access to your drilling data."
    )


def test_data_insights_without_statistics():
    assert generate_data_insights(None) == "insufficient data for analysis"


def test_recommendations_for_sandstone(dataset):
    assert generate_fallback_response("Any recommendations?", None, dataset) == (
        "Drilling recommendations based on your data: Significant sandstone intervals - "
        "consider PDC bits for optimal ROP."
    )


def test_recommendations_shale_and_logs():
    text = generate_drilling_recommendations(_stats_only({"Shale": 3, "Limestone": 1}, 120.0, 130.0))

    assert "High shale content detected" in text
    assert "High DT values suggest porous formations" in text
    assert "High GR readings indicate clay-rich zones" in text
    assert "Carbonate formations present" not in text


def test_recommendations_carbonates():
    text = generate_drilling_recommendations(_stats_only({"Limestone": 1, "Dolomite": 1, "Coal": 2}, 80.0, 40.0))
    assert text == (
        "Drilling recommendations based on your data: Carbonate formations present - "
        "roller cone bits may be more effective."
    )


def test_recommendations_default():
    text = generate_drilling_recommendations(_stats_only({"Anhydrite": 2}, 80.0, 50.0))
    assert text.endswith("maintain current drilling parameters and monitor for changes.")


def test_recommendations_without_data():
    assert generate_fallback_response("I need advice").startswith(
        "For specific drilling recommendations, I would need to analyze your formation data."
    )


def test_problem_lists_anomalies(record):
    rows = transform_rows([record(100, 80, 45, SH=0.60), record(200, 80, 45)])
    dataset = WellDataset(rows=tuple(rows), statistics=compute_statistics(rows))

    response = generate_fallback_response("Any problems?", None, dataset)

    assert response.startswith(
        "I've identified 1 potential issues in your data: Depth 100m: rock composition sums to 135.0%."
    )


def test_problem_without_anomalies(dataset):
    assert generate_fallback_response("any trouble expected?", None, dataset).startswith(
        "Your data appears consistent without obvious anomalies."
    )


def test_general_response(dataset):
    assert generate_fallback_response("hello", None, dataset).startswith(
        "I have access to your drilling data with 3 measurement points."
    )
    assert generate_fallback_response("hello").startswith("I'm here to help with drilling data analysis")
