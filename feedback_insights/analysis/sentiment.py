"""Overall sentiment scoring.

The scorer delegates to a :class:`SentimentStrategy` chosen at construction:

* :class:`RemoteClassifierStrategy` wraps a remote label/confidence
  classifier (HuggingFace inference or OpenAI) and degrades to the neutral
  fallback on any failure.
* :class:`LocalFallbackStrategy` always answers neutral.

Callers only ever see :class:`SentimentScorer.score_overall`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Protocol

from feedback_insights.exceptions import UpstreamDegradation

_logger = logging.getLogger(__name__)


class SentimentLabel(str, Enum):
    """Enumeration of supported sentiment classes."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Intensity(str, Enum):
    """Four-tier bucketing of how strong a sentiment reading is."""

    MILD = "mild"
    MODERATE = "moderate"
    STRONG = "strong"
    EXTREME = "extreme"


def intensity_for(score: float, confidence: float) -> Intensity:
    """Bucket ``|score| * confidence`` into an :class:`Intensity` tier."""

    adjusted = abs(score) * confidence
    if adjusted >= 0.8:
        return Intensity.EXTREME
    if adjusted >= 0.6:
        return Intensity.STRONG
    if adjusted >= 0.3:
        return Intensity.MODERATE
    return Intensity.MILD


@dataclass(frozen=True)
class SentimentResult:
    """Structured sentiment analysis output."""

    label: SentimentLabel
    score: float  # range -1.0 .. 1.0
    confidence: float  # range 0.0 .. 1.0
    intensity: Intensity

    @classmethod
    def build(
        cls, label: SentimentLabel, score: float, confidence: float
    ) -> "SentimentResult":
        """Create a result, deriving ``intensity`` from score and confidence."""
        return cls(
            label=label,
            score=score,
            confidence=confidence,
            intensity=intensity_for(score, confidence),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label.value,
            "score": self.score,
            "confidence": self.confidence,
            "intensity": self.intensity.value,
        }


NEUTRAL_FALLBACK = SentimentResult.build(SentimentLabel.NEUTRAL, 0.0, 0.5)


class SentimentStrategy(Protocol):
    """Anything able to turn text into a :class:`SentimentResult`."""

    name: str

    def score(self, text: str) -> SentimentResult:
        ...


class LocalFallbackStrategy:
    """Used when no remote classifier is configured."""

    name = "local-fallback"

    def score(self, text: str) -> SentimentResult:  # noqa: ARG002 – text unused
        return NEUTRAL_FALLBACK


def _pick_best(payload: Any) -> Mapping[str, Any]:
    """Return the highest-confidence ``{label, score}`` entry in *payload*.

    Accepts a single object, a list of objects, or a batch-style list whose
    first element is such a list.  On equal scores the later entry wins.
    """

    candidates: Any = payload
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], list):
        candidates = candidates[0]
    if isinstance(candidates, Mapping):
        candidates = [candidates]

    if not isinstance(candidates, list) or not candidates:
        raise UpstreamDegradation("Classifier payload contained no predictions")

    entries: List[Mapping[str, Any]] = []
    for item in candidates:
        if not isinstance(item, Mapping):
            raise UpstreamDegradation(f"Unexpected prediction entry: {item!r}")
        confidence = item.get("score")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise UpstreamDegradation("Prediction score missing or not numeric")
        entries.append(item)

    best = entries[0]
    for entry in entries[1:]:
        if float(entry["score"]) >= float(best["score"]):
            best = entry
    return best


def _to_result(best: Mapping[str, Any]) -> SentimentResult:
    confidence = max(0.0, min(1.0, float(best["score"])))
    label_raw = str(best.get("label", "")).lower()

    if label_raw == SentimentLabel.POSITIVE.value:
        return SentimentResult.build(SentimentLabel.POSITIVE, confidence, confidence)
    if label_raw == SentimentLabel.NEGATIVE.value:
        return SentimentResult.build(SentimentLabel.NEGATIVE, -confidence, confidence)
    return SentimentResult.build(SentimentLabel.NEUTRAL, 0.0, confidence)


class RemoteClassifierStrategy:
    """Score text with a remote label/confidence classifier.

    *predict* receives the text and returns the raw classifier payload.  It
    may raise anything; every failure resolves to :data:`NEUTRAL_FALLBACK`.
    """

    def __init__(self, predict: Callable[[str], Any], *, name: str = "remote") -> None:
        self._predict = predict
        self.name = name

    def score(self, text: str) -> SentimentResult:
        try:
            payload = self._predict(text)
            return _to_result(_pick_best(payload))
        except Exception as exc:  # noqa: BLE001 – remote failures never propagate
            _logger.warning(
                "Remote sentiment classifier '%s' failed, using neutral fallback: %s",
                self.name,
                exc,
                exc_info=True,
            )
            return NEUTRAL_FALLBACK


class SentimentScorer:
    """Compute the overall sentiment of a piece of feedback."""

    def __init__(self, strategy: SentimentStrategy) -> None:
        self._strategy = strategy

    @property
    def strategy_name(self) -> str:
        return self._strategy.name

    def score_overall(self, text: str) -> SentimentResult:
        """Classify *text* as positive/neutral/negative."""
        return self._strategy.score(text)
