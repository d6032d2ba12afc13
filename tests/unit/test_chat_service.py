from __future__ import annotations

from types import SimpleNamespace

import pytest

from well_assistant.models.well import WellDataset
from well_assistant.services.chat import ChatService, new_session_id
from well_assistant.services.context import PERSONA
from well_assistant.services.fallback import generate_fallback_response
from well_assistant.services.intent import MessageIntent
from well_assistant.services.llm import (
    PLACEHOLDER_API_KEY,
    LLMSettings,
    LLMUnavailableError,
    OpenAIGenerator,
)
from well_assistant.services.statistics import compute_statistics


class FakeGenerator:
    def __init__(self, replies: list[str | Exception]) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[str, str]] = []

    def __call__(self, system_prompt: str, user_message: str) -> str:
        self.calls.append((system_prompt, user_message))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def test_ai_response_used_when_generator_succeeds():
    gen = FakeGenerator(["The depth is 2500m."])

    result = ChatService(gen).respond("What is the depth?", session_id="session_abc")

    assert result.response == "The depth is 2500m."
    assert result.is_ai_response is True
    assert result.session_id == "session_abc"
    assert result.intent is MessageIntent.DEPTH_INQUIRY
    system_prompt, message = gen.calls[0]
    assert system_prompt.startswith(PERSONA)
    assert message == "What is the depth?"


def test_retry_once_then_succeed():
    gen = FakeGenerator([LLMUnavailableError("timeout"), "ok"])

    result = ChatService(gen).respond("hello")

    assert result.response == "ok"
    assert result.is_ai_response is True
    assert len(gen.calls) == 2


def test_fallback_after_retries_exhausted(scenario_a_rows):
    dataset = WellDataset(rows=tuple(scenario_a_rows), statistics=compute_statistics(scenario_a_rows))
    gen = FakeGenerator([RuntimeError("boom"), RuntimeError("boom again")])

    result = ChatService(gen).respond("What is the depth?", dataset=dataset)

    assert len(gen.calls) == 2
    assert result.is_ai_response is False
    assert result.response == generate_fallback_response("What is the depth?", None, dataset)


def test_offline_mode_uses_fallback():
    result = ChatService(None).respond("What is the depth?")

    assert result.is_ai_response is False
    assert result.response.startswith("Depth information is not available.")


def test_prompt_includes_dataset_context(scenario_a_rows):
    dataset = WellDataset(rows=tuple(scenario_a_rows), statistics=compute_statistics(scenario_a_rows))
    gen = FakeGenerator(["fine"])

    ChatService(gen).respond("analyze the shale", dataset=dataset)

    assert "Available drilling data includes 3 data points" in gen.calls[0][0]


@pytest.mark.parametrize("message", ["", "   "])
def test_empty_message_rejected(message):
    with pytest.raises(ValueError):
        ChatService(None).respond(message)


def test_payload_shape():
    payload = ChatService(None).respond("hi").to_payload()

    assert set(payload) == {"response", "sessionId", "isAIResponse", "timestamp"}
    assert payload["sessionId"].startswith("session_")
    assert payload["timestamp"].endswith("Z")


def test_session_ids_are_unique():
    assert new_session_id() != new_session_id()


@pytest.mark.parametrize("key", [None, "", PLACEHOLDER_API_KEY])
def test_generator_without_key_is_unavailable(key):
    gen = OpenAIGenerator(key)

    assert gen.configured is False
    with pytest.raises(LLMUnavailableError):
        gen("system", "hello")


def test_missing_key_falls_back_in_chat():
    result = ChatService(OpenAIGenerator(None)).respond("What is the depth?")
    assert result.is_ai_response is False


def _fake_client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_generator_sends_settings_and_returns_content():
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="answer"))])

    gen = OpenAIGenerator("sk-test", LLMSettings(model="gpt-4o-mini", max_tokens=200, temperature=0.1))
    gen._client = _fake_client(create)

    assert gen("sys prompt", "question") == "answer"
    assert captured["model"] == "gpt-4o-mini"
    assert captured["max_tokens"] == 200
    assert captured["messages"] == [
        {"role": "system", "content": "sys prompt"},
        {"role": "user", "content": "question"},
    ]


def test_generator_wraps_client_errors():
    def create(**kwargs):
        raise TimeoutError("read timeout")

    gen = OpenAIGenerator("sk-test")
    gen._client = _fake_client(create)

    with pytest.raises(LLMUnavailableError):
        gen("sys", "q")


def test_generator_empty_content_is_unavailable():
    gen = OpenAIGenerator("sk-test")
    gen._client = _fake_client(lambda **kw: SimpleNamespace(choices=[]))

    with pytest.raises(LLMUnavailableError):
        gen("sys", "q")
