"""Tests for the OpenAI sentiment backend."""
from __future__ import annotations

import importlib
import sys
from types import ModuleType, SimpleNamespace

import pytest

from feedback_insights.exceptions import OpenAIClientError, UpstreamDegradation


class _DummyCompletions:
    """Minimal stub mimicking ``client.chat.completions``."""

    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):  # noqa: D401 – simple stub
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(content):
    completions = _DummyCompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _install_openai_stub(monkeypatch, content='[{"label":"positive","score":0.9}]'):
    """Insert a fake ``openai`` module into ``sys.modules``."""

    created = {}

    class _FakeOpenAI:
        def __init__(self, api_key):
            created["api_key"] = api_key
            self.chat = SimpleNamespace(completions=_DummyCompletions(content))

    fake_openai = ModuleType("openai")
    fake_openai.OpenAI = _FakeOpenAI  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "openai", fake_openai)
    return created


def reload_client_module():
    """Ensure a fresh import state for openai_client module."""

    if "feedback_insights.openai_client" in sys.modules:
        del sys.modules["feedback_insights.openai_client"]
    return importlib.import_module("feedback_insights.openai_client")


def test_missing_api_key_raises(monkeypatch):
    _install_openai_stub(monkeypatch)
    oc = reload_client_module()

    with pytest.raises(OpenAIClientError):
        oc.get_openai_client("")


def test_client_is_built_with_key(monkeypatch):
    created = _install_openai_stub(monkeypatch)
    oc = reload_client_module()

    oc.get_openai_client("test-key")
    assert created["api_key"] == "test-key"


def test_classify_parses_label_score_array():
    oc = reload_client_module()
    client, completions = _client(
        'Sure! [{"label":"negative","score":0.7},{"label":"neutral","score":0.3}]'
    )

    out = oc.classify_sentiment("pay is bad", client=client, model="m", timeout=2)

    assert out == [
        {"label": "negative", "score": 0.7},
        {"label": "neutral", "score": 0.3},
    ]
    assert completions.kwargs["model"] == "m"
    assert completions.kwargs["temperature"] == 0
    assert completions.kwargs["timeout"] == 2
    assert "pay is bad" in completions.kwargs["messages"][1]["content"]


@pytest.mark.parametrize("content", ["no json here", '["positive"]', "[not json]"])
def test_classify_rejects_malformed_content(content):
    oc = reload_client_module()
    client, _ = _client(content)
    with pytest.raises(UpstreamDegradation):
        oc.classify_sentiment("x", client=client, model="m")


def test_make_predictor_end_to_end(monkeypatch):
    _install_openai_stub(monkeypatch)
    oc = reload_client_module()

    predict = oc.make_predictor(api_key="k", model="gpt-test", timeout=1)
    assert predict("great team") == [{"label": "positive", "score": 0.9}]
