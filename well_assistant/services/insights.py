from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..models.lithology import CATEGORY_NAMES, DT_UNIT, GR_UNIT
from ..models.well import Anomaly
from ..models.well_row import NormalizedRow
from .formatting import format_number

"""Derived data insights for the chat assistant.

Rock composition summary, DT/GR ranges with trend direction, and anomaly
detection. These feed both the LLM context and the offline responder.
"""

__all__ = [
    "Trend",
    "ParameterSummary",
    "LogParameters",
    "RockComposition",
    "DataInsights",
    "TREND_STABLE_THRESHOLD",
    "MAX_ANOMALIES",
    "calculate_trend",
    "analyze_rock_composition",
    "analyze_log_parameters",
    "detect_anomalies",
    "build_insights",
]

TREND_STABLE_THRESHOLD = 0.01
MAX_ANOMALIES = 5

# composition sum in percent units: 100 ± 15
COMPOSITION_TARGET_PERCENT = 100.0
COMPOSITION_TOLERANCE_PERCENT = 15.0
DT_LIMITS = (30.0, 250.0)
GR_LIMITS = (0.0, 400.0)


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class ParameterSummary:
    average: float
    min: float
    max: float
    trend: Trend


@dataclass(frozen=True)
class LogParameters:
    dt: ParameterSummary
    gr: ParameterSummary


@dataclass(frozen=True)
class RockComposition:
    dominant_counts: dict[str, int]
    average_share: dict[str, float]
    variability: dict[str, float]  # population standard deviation

    def most_common(self) -> tuple[str, int] | None:
        if not self.dominant_counts:
            return None
        return max(self.dominant_counts.items(), key=lambda kv: kv[1])


@dataclass(frozen=True)
class DataInsights:
    total_points: int
    rock_composition: RockComposition | None = None
    log_parameters: LogParameters | None = None
    anomalies: list[Anomaly] = field(default_factory=list)


def calculate_trend(values: Sequence[float]) -> Trend:
    """Direction of the least-squares slope of ``values`` against their index."""
    n = len(values)
    if n < 2:
        return Trend.INSUFFICIENT_DATA
    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    sum_x2 = n * (n - 1) * (2 * n - 1) / 6
    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    if abs(slope) < TREND_STABLE_THRESHOLD:
        return Trend.STABLE
    return Trend.INCREASING if slope > 0 else Trend.DECREASING


def analyze_rock_composition(rows: Sequence[NormalizedRow]) -> RockComposition | None:
    if not rows:
        return None
    counts: dict[str, int] = {}
    for row in rows:
        counts[row.dominant_category] = counts.get(row.dominant_category, 0) + 1

    averages: dict[str, float] = {}
    variability: dict[str, float] = {}
    for name in CATEGORY_NAMES:
        values = [row.category_percentages.get(name, 0.0) for row in rows]
        mean = sum(values) / len(values)
        averages[name] = mean
        variability[name] = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    return RockComposition(dominant_counts=counts, average_share=averages, variability=variability)


def _summarize(values: list[float]) -> ParameterSummary:
    if not values:
        return ParameterSummary(average=0.0, min=0.0, max=0.0, trend=calculate_trend(values))
    return ParameterSummary(
        average=sum(values) / len(values),
        min=min(values),
        max=max(values),
        trend=calculate_trend(values),
    )


def analyze_log_parameters(rows: Sequence[NormalizedRow]) -> LogParameters | None:
    """DT/GR summaries over non-null values only (unlike the dataset averages)."""
    if not rows:
        return None
    return LogParameters(
        dt=_summarize([r.dt for r in rows if r.dt is not None]),
        gr=_summarize([r.gr for r in rows if r.gr is not None]),
    )


def detect_anomalies(rows: Sequence[NormalizedRow]) -> list[Anomaly]:
    """Flag composition-sum, DT and GR outliers; at most MAX_ANOMALIES, in row order."""
    anomalies: list[Anomaly] = []
    for row in rows:
        depth = format_number(row.depth)
        total_percent = sum(row.category_percentages.values()) * 100
        if abs(total_percent - COMPOSITION_TARGET_PERCENT) > COMPOSITION_TOLERANCE_PERCENT:
            anomalies.append(Anomaly(
                depth=row.depth,
                type="composition_error",
                description=f"Depth {depth}m: rock composition sums to {total_percent:.1f}%",
            ))
        if row.dt and (row.dt < DT_LIMITS[0] or row.dt > DT_LIMITS[1]):
            anomalies.append(Anomaly(
                depth=row.depth,
                type="dt_extreme",
                description=f"Depth {depth}m: extreme DT value ({format_number(row.dt)} {DT_UNIT})",
            ))
        if row.gr and (row.gr < GR_LIMITS[0] or row.gr > GR_LIMITS[1]):
            anomalies.append(Anomaly(
                depth=row.depth,
                type="gr_extreme",
                description=f"Depth {depth}m: extreme GR value ({format_number(row.gr)} {GR_UNIT})",
            ))
    return anomalies[:MAX_ANOMALIES]


def build_insights(rows: Sequence[NormalizedRow]) -> DataInsights:
    return DataInsights(
        total_points=len(rows),
        rock_composition=analyze_rock_composition(rows),
        log_parameters=analyze_log_parameters(rows),
        anomalies=detect_anomalies(rows),
    )
