from __future__ import annotations

from collections.abc import Callable

from ..models.lithology import DT_UNIT, GR_UNIT
from ..models.well import WellDataset, WellSummary
from .formatting import format_number
from .insights import detect_anomalies

"""Deterministic rule-based responder.

Used when the LLM call fails and directly as an offline "expert system".
The output depends only on the message text and the supplied well/dataset:
no randomness, no clock.

FALLBACK_RULES is an ordered (keywords, handler) table evaluated against the
lower-cased message; the first rule with a matching keyword answers, and
``_general_response`` answers everything else.
"""

__all__ = [
    "FALLBACK_RULES",
    "generate_fallback_response",
    "generate_data_insights",
    "generate_drilling_recommendations",
]

Handler = Callable[[WellSummary | None, WellDataset | None], str]

# DT (μs/ft) / GR (API) interpretation buckets
DT_DENSE_BELOW = 60
DT_POROUS_ABOVE = 100
GR_CLEAN_BELOW = 50
GR_SHALY_ABOVE = 100

SHALE_SHARE_LIMIT = 40
SANDSTONE_SHARE_LIMIT = 30
CARBONATE_SHARE_LIMIT = 25


def _has_statistics(dataset: WellDataset | None) -> bool:
    return dataset is not None and dataset.statistics is not None


def _depth_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if _has_statistics(dataset) and dataset.statistics.depth_range is not None:
        rng = dataset.statistics.depth_range
        return (
            f"Based on your uploaded data, the depth range spans from {format_number(rng.min)}m "
            f"to {format_number(rng.max)}m (total interval: {rng.span:.1f}m). The data contains "
            f"{dataset.row_count} measurement points across this interval."
        )
    if well is not None:
        return (
            f"The current drilling depth for {well.name} is {format_number(well.depth)}m. "
            f"This is a {well.status.lower()} well."
        )
    return (
        "Depth information is not available. Please select a well or upload drilling data "
        "to see depth analysis."
    )


def _composition_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if _has_statistics(dataset) and dataset.statistics.category_distribution:
        stats = dataset.statistics
        total = sum(stats.category_distribution.values())
        dominant = ", ".join(
            f"{name}: {count / total * 100:.1f}%" for name, count in stats.ranked_categories()[:3]
        )
        return (
            f"Based on your uploaded data, the rock composition analysis shows: {dominant}. "
            f"This distribution across {total} intervals indicates the geological complexity of "
            "your formation. The dominant rock types will influence drilling parameters, mud "
            "selection, and completion strategies."
        )
    return (
        "Rock composition data shows the geological makeup of the formation with detailed "
        "percentages for Shale (%SH), Sandstone (%SS), Limestone (%LS), Dolomite (%DOL), "
        "Anhydrite (%ANH), Coal (%Coal), and Salt (%Salt). This data helps identify formation "
        "types and drilling challenges. Please upload your Excel file to see specific "
        "composition analysis."
    )


def _dt_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if _has_statistics(dataset):
        avg = dataset.statistics.average_dt
        if avg < DT_DENSE_BELOW:
            interpretation = (
                "indicating relatively dense, low-porosity formations "
                "(likely carbonates or tight sandstones)"
            )
        elif avg > DT_POROUS_ABOVE:
            interpretation = (
                "suggesting higher porosity formations or potentially unconsolidated sediments"
            )
        else:
            interpretation = "indicating moderate porosity formations typical of many reservoir rocks"
        return (
            f"Your uploaded data shows an average DT of {avg:.1f} {DT_UNIT}, {interpretation}. "
            "DT measurements help evaluate porosity and rock density, which are crucial for "
            "reservoir characterization and drilling optimization."
        )
    return (
        "DT (Delta Time) measurements indicate acoustic travel time through the formation. "
        f"Lower DT values (40-60 {DT_UNIT}) typically suggest denser rocks like carbonates, while "
        f"higher values (80-140 {DT_UNIT}) indicate more porous formations like sandstones. "
        "Upload your data to see specific DT analysis."
    )


def _gr_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if _has_statistics(dataset):
        avg = dataset.statistics.average_gr
        if avg < GR_CLEAN_BELOW:
            interpretation = (
                "indicating clean formations (sandstones or carbonates) with low clay content"
            )
        elif avg > GR_SHALY_ABOVE:
            interpretation = "suggesting shale-rich or clay-bearing formations"
        else:
            interpretation = "indicating mixed lithology with moderate clay content"
        return (
            f"Your uploaded data shows an average GR of {avg:.1f} {GR_UNIT}, {interpretation}. "
            "GR readings help distinguish between clean reservoir rocks and clay-rich formations, "
            "guiding completion and stimulation strategies."
        )
    return (
        "GR (Gamma Ray) readings measure natural radioactivity in the formation. Lower GR values "
        "(0-50 API) typically indicate clean sandstones or carbonates, while higher values "
        "(100+ API) suggest shale or clay-rich formations. Upload your data to see specific GR "
        "analysis."
    )


def generate_data_insights(dataset: WellDataset | None) -> str:
    """Comma-joined insight summary used by the analysis branch."""
    if not _has_statistics(dataset):
        return "insufficient data for analysis"
    stats = dataset.statistics
    insights: list[str] = []

    if stats.depth_range is not None:
        insights.append(f"{stats.depth_range.span:.1f}m interval analyzed")

    ranked = stats.ranked_categories()
    if ranked and dataset.row_count:
        name, count = ranked[0]
        insights.append(f"{name} is dominant ({count / dataset.row_count * 100:.1f}%)")

    if stats.average_dt:
        insights.append(f"DT averages {stats.average_dt:.1f} {DT_UNIT}")
    if stats.average_gr:
        insights.append(f"GR averages {stats.average_gr:.1f} {GR_UNIT}")
    return ", ".join(insights)


def _analysis_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if dataset is not None:
        return (
            f"Based on your {dataset.row_count} data points: {generate_data_insights(dataset)}. "
            "This analysis can help optimize drilling parameters, predict formation challenges, "
            "and plan completion strategies."
        )
    return (
        "To provide detailed analysis, I need access to your drilling data. Please upload your "
        "Excel file containing depth, rock composition (%SH, %SS, %LS, %DOL, %ANH, %Coal, %Salt), "
        "DT, and GR measurements for comprehensive formation evaluation."
    )


def generate_drilling_recommendations(dataset: WellDataset | None) -> str:
    """Rule-based recommendations from the dominant-category shares and log averages."""
    if not _has_statistics(dataset):
        return "Upload data required for specific recommendations."
    stats = dataset.statistics
    distribution = stats.category_distribution
    total = sum(distribution.values())
    recommendations: list[str] = []

    def share(*names: str) -> float:
        if not total:
            return 0.0
        return sum(distribution.get(n, 0) for n in names) / total * 100

    if share("Shale") > SHALE_SHARE_LIMIT:
        recommendations.append(
            "High shale content detected - use inhibitive mud system to prevent wellbore instability"
        )
    if share("Sandstone") > SANDSTONE_SHARE_LIMIT:
        recommendations.append("Significant sandstone intervals - consider PDC bits for optimal ROP")
    if share("Limestone", "Dolomite") > CARBONATE_SHARE_LIMIT:
        recommendations.append("Carbonate formations present - roller cone bits may be more effective")

    if stats.average_dt > DT_POROUS_ABOVE:
        recommendations.append(
            "High DT values suggest porous formations - monitor for potential lost circulation"
        )
    elif stats.average_dt < DT_DENSE_BELOW:
        recommendations.append("Low DT values indicate dense formations - expect slower drilling rates")

    if stats.average_gr > GR_SHALY_ABOVE:
        recommendations.append(
            "High GR readings indicate clay-rich zones - use appropriate mud additives for shale control"
        )

    if not recommendations:
        recommendations.append(
            "Formation appears relatively uniform - maintain current drilling parameters and "
            "monitor for changes"
        )
    return f"Drilling recommendations based on your data: {'; '.join(recommendations)}."


def _recommendation_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if _has_statistics(dataset):
        return generate_drilling_recommendations(dataset)
    return (
        "For specific drilling recommendations, I would need to analyze your formation data. "
        "Generally, consider: 1) Monitor drilling parameters closely based on lithology changes, "
        "2) Adjust mud weight based on formation pressure and rock strength, 3) Select appropriate "
        "bit types for dominant rock formations, 4) Plan casing points at formation boundaries. "
        "Upload your data for tailored recommendations."
    )


def _problem_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if dataset is not None:
        anomalies = detect_anomalies(dataset.rows)
        if anomalies:
            listed = "; ".join(a.description for a in anomalies[:3])
            return (
                f"I've identified {len(anomalies)} potential issues in your data: {listed}. "
                "These anomalies could indicate measurement errors, formation changes, or "
                "drilling challenges that need attention."
            )
        return (
            "Your data appears consistent without obvious anomalies. Common drilling challenges "
            "include: formation pressure changes, wellbore instability in shales, lost circulation "
            "in fractured formations, and bit balling in clay-rich zones."
        )
    return (
        "Common drilling challenges include: formation pressure variations, wellbore instability "
        "in shales, lost circulation, stuck pipe, and bit performance issues. Upload your data to "
        "identify specific challenges in your formation."
    )


def _general_response(well: WellSummary | None, dataset: WellDataset | None) -> str:
    if dataset is not None:
        return (
            f"I have access to your drilling data with {dataset.row_count} measurement points. "
            "I can help analyze rock composition, interpret DT and GR logs, identify formation "
            "characteristics, and provide drilling recommendations. What specific aspect would "
            "you like to explore?"
        )
    return (
        "I'm here to help with drilling data analysis including rock composition interpretation, "
        "log analysis (DT, GR), formation evaluation, and drilling optimization. Please ask about "
        "specific measurements or upload your Excel data for detailed analysis."
    )


FALLBACK_RULES: tuple[tuple[tuple[str, ...], Handler], ...] = (
    (("depth",), _depth_response),
    (("composition", "shale", "sandstone", "limestone", "dolomite"), _composition_response),
    (("dt", "delta time"), _dt_response),
    (("gr", "gamma ray"), _gr_response),
    (("analyze", "analysis"), _analysis_response),
    (("recommend", "suggestion", "advice"), _recommendation_response),
    (("problem", "issue", "challenge", "trouble"), _problem_response),
)


def generate_fallback_response(
    message: str,
    well: WellSummary | None = None,
    dataset: WellDataset | None = None,
) -> str:
    lowered = message.lower()
    for keywords, handler in FALLBACK_RULES:
        if any(k in lowered for k in keywords):
            return handler(well, dataset)
    return _general_response(well, dataset)
