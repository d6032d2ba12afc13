from __future__ import annotations

import logging
from dataclasses import dataclass

from openai import OpenAI

"""OpenAI-backed text generation capability.

An ``OpenAIGenerator`` instance is the ``generate(system_prompt, user_message)``
callable injected into ChatService. It holds no global state; the API key and
model settings come from the application config.
"""

__all__ = [
    "LLMSettings",
    "LLMUnavailableError",
    "OpenAIGenerator",
    "PLACEHOLDER_API_KEY",
]

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "your-openai-api-key-here"


class LLMUnavailableError(Exception):
    """Raised when the LLM capability cannot produce a completion."""


@dataclass(frozen=True)
class LLMSettings:
    model: str = "gpt-3.5-turbo"
    max_tokens: int = 500
    temperature: float = 0.7
    timeout_seconds: float = 30.0
    base_url: str | None = None


class OpenAIGenerator:
    """Chat-completion call with a bounded timeout.

    The client is created lazily so that a missing API key only surfaces when a
    completion is actually requested (and is then absorbed by the fallback).
    """

    def __init__(self, api_key: str | None, settings: LLMSettings | None = None) -> None:
        self.api_key = api_key
        self.settings = settings or LLMSettings()
        self._client: OpenAI | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def _get_client(self) -> OpenAI:
        if not self.configured:
            raise LLMUnavailableError("OPENAI_API_KEY is not configured")
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout_seconds,
                max_retries=0,  # retry policy lives in ChatService
            )
        return self._client

    def __call__(self, system_prompt: str, user_message: str) -> str:
        client = self._get_client()
        try:
            completion = client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
            )
        except Exception as e:
            raise LLMUnavailableError(f"chat completion failed: {e}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise LLMUnavailableError("chat completion returned no content")
        logger.debug(f"llm: model={self.settings.model} chars={len(content)}")
        return content
