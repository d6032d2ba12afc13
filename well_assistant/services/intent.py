from __future__ import annotations

from enum import Enum

"""Keyword-based message intent classification.

INTENT_RULES is evaluated top to bottom; the first rule with a keyword
contained in the lower-cased message wins. Anything else is a general inquiry.
"""

__all__ = [
    "MessageIntent",
    "INTENT_RULES",
    "classify_message",
]


class MessageIntent(str, Enum):
    DEPTH_INQUIRY = "depth_inquiry"
    ROCK_COMPOSITION = "rock_composition"
    DT_ANALYSIS = "dt_analysis"
    GR_ANALYSIS = "gr_analysis"
    RECOMMENDATION_REQUEST = "recommendation_request"
    DATA_ANALYSIS = "data_analysis"
    PROBLEM_SOLVING = "problem_solving"
    GENERAL_INQUIRY = "general_inquiry"


INTENT_RULES: tuple[tuple[tuple[str, ...], MessageIntent], ...] = (
    (("depth", "drilling depth"), MessageIntent.DEPTH_INQUIRY),
    (("rock", "composition", "shale", "sandstone", "limestone", "dolomite"), MessageIntent.ROCK_COMPOSITION),
    (("dt", "delta time"), MessageIntent.DT_ANALYSIS),
    (("gr", "gamma ray"), MessageIntent.GR_ANALYSIS),
    (("recommend", "suggest", "advice"), MessageIntent.RECOMMENDATION_REQUEST),
    (("analyze", "analysis", "interpret"), MessageIntent.DATA_ANALYSIS),
    (("problem", "issue", "challenge"), MessageIntent.PROBLEM_SOLVING),
)


def classify_message(message: str) -> MessageIntent:
    lowered = message.lower()
    for keywords, intent in INTENT_RULES:
        if any(k in lowered for k in keywords):
            return intent
    return MessageIntent.GENERAL_INQUIRY
