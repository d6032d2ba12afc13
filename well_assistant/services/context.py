from __future__ import annotations

from ..models.lithology import DT_UNIT, GR_UNIT
from ..models.well import WellDataset, WellSummary
from .formatting import format_number
from .insights import DataInsights
from .intent import MessageIntent

"""System prompt assembly for the LLM chat path.

compose_context() never fails: every missing input simply drops the
sentences that depend on it.
"""

__all__ = [
    "PERSONA",
    "CLOSING_INSTRUCTIONS",
    "INTENT_FOCUS",
    "compose_context",
]

PERSONA = (
    "You are an AI assistant specialized in oil drilling data analysis with expertise in "
    "geological interpretation, drilling parameters, and formation evaluation."
)

CLOSING_INSTRUCTIONS = (
    "Provide helpful, accurate, and specific information about drilling data analysis, "
    "geological interpretation, and drilling recommendations. Use technical terminology "
    "appropriately and explain complex concepts clearly. When referencing data, be specific "
    "about values and trends."
)

DATASET_COLUMNS_SENTENCE = (
    "detailed rock composition analysis including: DEPTH, Shale (%SH), Sandstone (%SS), "
    "Limestone (%LS), Dolomite (%DOL), Anhydrite (%ANH), Coal (%Coal), Salt (%Salt) percentages, "
    "DT (Delta Time), and GR (Gamma Ray) measurements"
)

INTENT_FOCUS: dict[MessageIntent, str] = {
    MessageIntent.ROCK_COMPOSITION: "Focus on geological interpretation and rock composition analysis.",
    MessageIntent.DT_ANALYSIS: "Focus on Delta Time measurements and porosity/density implications.",
    MessageIntent.GR_ANALYSIS: "Focus on Gamma Ray readings and clay content interpretation.",
    MessageIntent.RECOMMENDATION_REQUEST: "Provide specific, actionable drilling recommendations based on the data.",
    MessageIntent.DATA_ANALYSIS: "Provide comprehensive data analysis with specific insights and patterns.",
    MessageIntent.PROBLEM_SOLVING: "Focus on identifying and solving potential drilling challenges.",
}


def _dataset_sentences(dataset: WellDataset) -> list[str]:
    parts = [f"Available drilling data includes {dataset.row_count} data points with {DATASET_COLUMNS_SENTENCE}."]
    stats = dataset.statistics
    if stats is None:
        return parts

    summary = []
    if stats.depth_range is not None:
        summary.append(
            f"Depth range {format_number(stats.depth_range.min)}m to {format_number(stats.depth_range.max)}m"
        )
    summary.append(f"Average DT: {stats.average_dt:.2f} {DT_UNIT}")
    summary.append(f"Average GR: {stats.average_gr:.2f} {GR_UNIT}")
    parts.append(f"Data summary: {', '.join(summary)}.")

    total = sum(stats.category_distribution.values())
    if total:
        top = ", ".join(
            f"{name}: {count} intervals ({count / total * 100:.1f}%)"
            for name, count in stats.ranked_categories()[:3]
        )
        parts.append(f"Dominant rock types: {top}.")
    return parts


def _insight_sentences(insights: DataInsights) -> list[str]:
    parts: list[str] = []
    if insights.rock_composition is not None:
        common = insights.rock_composition.most_common()
        if common is not None:
            parts.append(f"Most common rock type: {common[0]} ({common[1]} intervals).")
    if insights.log_parameters is not None:
        dt = insights.log_parameters.dt
        gr = insights.log_parameters.gr
        parts.append(
            f"DT range: {dt.min:.1f}-{dt.max:.1f} {DT_UNIT} (trend: {dt.trend.value}), "
            f"GR range: {gr.min:.1f}-{gr.max:.1f} {GR_UNIT} (trend: {gr.trend.value})."
        )
    if insights.anomalies:
        kinds = ", ".join(a.type for a in insights.anomalies)
        parts.append(
            f"Data anomalies detected: {len(insights.anomalies)} potential issues including {kinds}."
        )
    return parts


def compose_context(
    intent: MessageIntent,
    well: WellSummary | None = None,
    dataset: WellDataset | None = None,
    insights: DataInsights | None = None,
) -> str:
    """Build the system prompt text for one chat message."""
    parts = [PERSONA]
    if well is not None:
        parts.append(f"Current well: {well.name}, Depth: {format_number(well.depth)}m, Status: {well.status}.")
    if dataset is not None:
        parts.extend(_dataset_sentences(dataset))
    if insights is not None:
        parts.extend(_insight_sentences(insights))
    focus = INTENT_FOCUS.get(intent)
    if focus:
        parts.append(focus)
    parts.append(CLOSING_INSTRUCTIONS)
    return " ".join(parts)
