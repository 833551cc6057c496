"""OpenAI-backed sentiment classifier.

The model is asked for the same ``[{"label": ..., "score": ...}]`` payload a
HuggingFace text-classification endpoint returns, so both backends feed the
same :class:`~feedback_insights.analysis.sentiment.RemoteClassifierStrategy`.
"""
from __future__ import annotations

import json
import re
import types
from typing import Any, Callable, Dict, List

from feedback_insights.exceptions import OpenAIClientError, UpstreamDegradation

# Capture first JSON array in the model response (robust to extra text)
_ARRAY_RE = re.compile(r"\[[\s\S]*?\]")

_PROMPT_SYSTEM = (
    "You are a precise sentiment classifier for employee feedback. "
    "Return ONLY a minified JSON array with one object per label "
    '(positive, neutral, negative) like [{"label":"positive","score":0.8},'
    '{"label":"neutral","score":0.15},{"label":"negative","score":0.05}]. '
    "Scores are probabilities between 0 and 1."
)


def _load_openai() -> types.ModuleType:
    """Import ``openai`` lazily.

    Loading is deferred so that unit tests can inject a stub into
    ``sys.modules`` before this function runs.
    """

    import importlib

    return importlib.import_module("openai")


def get_openai_client(api_key: str) -> Any:
    """Return an ``openai.OpenAI`` client configured with *api_key*.

    Raises
    ------
    OpenAIClientError
        If *api_key* is empty.
    """

    if not api_key:
        raise OpenAIClientError("OPENAI_API_KEY environment variable is not set.")
    openai = _load_openai()
    return openai.OpenAI(api_key=api_key)


def _parse_predictions(content: str) -> List[Dict[str, Any]]:
    match = _ARRAY_RE.search(content)
    if not match:
        raise UpstreamDegradation("Model response lacked JSON array")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise UpstreamDegradation("Failed to parse JSON from model response") from exc
    if not isinstance(data, list) or not all(isinstance(x, dict) for x in data):
        raise UpstreamDegradation("Expected JSON array of label/score objects")
    return data


def classify_sentiment(
    text: str,
    *,
    client: Any,
    model: str,
    timeout: float = 10.0,
) -> List[Dict[str, Any]]:
    """Ask *model* for label/score pairs describing *text*."""

    messages = [
        {"role": "system", "content": _PROMPT_SYSTEM},
        {"role": "user", "content": "Classify the sentiment of:\n" + text},
    ]
    completion = client.chat.completions.create(
        model=model,
        messages=messages,
        temperature=0,
        timeout=timeout,
    )
    try:
        content: str = completion.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise UpstreamDegradation("Model response missing expected fields") from exc
    return _parse_predictions(content or "")


def make_predictor(*, api_key: str, model: str, timeout: float) -> Callable[[str], Any]:
    """Build a predictor bound to a configured OpenAI client."""

    client = get_openai_client(api_key)

    def _predict(text: str) -> List[Dict[str, Any]]:
        return classify_sentiment(text, client=client, model=model, timeout=timeout)

    return _predict
