"""Shared fixtures for unit tests: a scripted chat model that replaces OpenAI."""

from __future__ import annotations

from typing import Any, Callable, Union

import pytest
from langchain_core.messages import AIMessage, BaseMessage

Scripted = Union[str, AIMessage, BaseException]


class ScriptedChatModel:
    """Returns queued responses in order and records every invocation."""

    def __init__(self, responses: list[Scripted]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[list[BaseMessage], dict[str, Any]]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def invoke(self, messages: list[BaseMessage], **kwargs: Any) -> AIMessage:
        self.calls.append((list(messages), kwargs))
        if not self._responses:
            raise AssertionError(f"Unexpected model call #{len(self.calls)}")
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, str):
            return AIMessage(content=item)
        return item


@pytest.fixture
def scripted_llm(monkeypatch) -> Callable[..., ScriptedChatModel]:
    """Install a ScriptedChatModel as the client every agent receives."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")

    def _install(*responses: Scripted) -> ScriptedChatModel:
        model = ScriptedChatModel(list(responses))
        monkeypatch.setattr("agents.base_agent.get_llm", lambda api_key, model_name: model)
        return model

    return _install
