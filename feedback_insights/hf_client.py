"""HuggingFace inference API client for sentiment classification."""
from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from feedback_insights.exceptions import UpstreamDegradation

logger = logging.getLogger(__name__)


def query_sentiment(text: str, *, token: str, url: str, timeout: float = 10.0) -> Any:
    """POST *text* to the inference endpoint and return the decoded JSON.

    Raises
    ------
    UpstreamDegradation
        On a non-success status code or an undecodable body.
    requests.RequestException
        On transport errors (including timeouts).
    """

    response = requests.post(
        url,
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        },
        json={"inputs": text},
        timeout=timeout,
    )
    if not response.ok:
        raise UpstreamDegradation(f"HF API error: {response.status_code}")

    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamDegradation("HF API returned a non-JSON body") from exc


def make_predictor(*, token: str, url: str, timeout: float) -> Callable[[str], Any]:
    """Bind credentials so the result can be handed to a sentiment strategy."""

    def _predict(text: str) -> Any:
        logger.debug("Requesting HF sentiment for %d chars", len(text))
        return query_sentiment(text, token=token, url=url, timeout=timeout)

    return _predict
