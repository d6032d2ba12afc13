from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ..models.well import WellDataset, WellSummary
from .context import compose_context
from .fallback import generate_fallback_response
from .insights import build_insights
from .intent import MessageIntent, classify_message

"""Chat entry point.

ChatService builds the system prompt, calls the injected ``generate``
capability (retried once), and substitutes the rule-based fallback on any
failure. An LLM failure never reaches the caller.
"""

__all__ = [
    "ChatResult",
    "ChatService",
    "Generate",
    "new_session_id",
]

logger = logging.getLogger(__name__)

Generate = Callable[[str, str], str]


def new_session_id() -> str:
    return f"session_{uuid.uuid4().hex[:16]}"


@dataclass(frozen=True)
class ChatResult:
    response: str
    is_ai_response: bool
    session_id: str
    intent: MessageIntent
    timestamp: str  # ISO8601 UTC

    def to_payload(self) -> dict[str, Any]:
        return {
            "response": self.response,
            "sessionId": self.session_id,
            "isAIResponse": self.is_ai_response,
            "timestamp": self.timestamp,
        }


class ChatService:
    """Answer chat messages with the LLM, falling back to the offline responder.

    Args:
        generate: ``generate(system_prompt, user_message) -> str``; None means
            offline mode (always fallback)
        retries: extra attempts after the first failed call
    """

    def __init__(self, generate: Generate | None, *, retries: int = 1) -> None:
        self.generate = generate
        self.retries = retries

    def _try_generate(self, system_prompt: str, message: str) -> str | None:
        if self.generate is None:
            return None
        attempts = 1 + max(self.retries, 0)
        for attempt in range(1, attempts + 1):
            try:
                return self.generate(system_prompt, message)
            except Exception as e:
                logger.warning(f"llm call failed (attempt {attempt}/{attempts}): {e}")
        return None

    def respond(
        self,
        message: str,
        well: WellSummary | None = None,
        dataset: WellDataset | None = None,
        session_id: str | None = None,
    ) -> ChatResult:
        if not message or not message.strip():
            raise ValueError("Message is required")

        intent = classify_message(message)
        insights = build_insights(dataset.rows) if dataset is not None and dataset.rows else None
        system_prompt = compose_context(intent, well=well, dataset=dataset, insights=insights)

        response = self._try_generate(system_prompt, message)
        is_ai = response is not None
        if response is None:
            response = generate_fallback_response(message, well, dataset)

        logger.info(f"chat: intent={intent.value} ai={is_ai}")
        return ChatResult(
            response=response,
            is_ai_response=is_ai,
            session_id=session_id or new_session_id(),
            intent=intent,
            timestamp=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        )
