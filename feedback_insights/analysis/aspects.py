"""Keyword-gated sentiment scoring per feedback aspect.

Each aspect is scored from the same generic positive/negative word tally;
the aspect's own keywords only decide whether (and how strongly) the aspect
is considered discussed.  Magnitude saturates once three keywords appear.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterator, Tuple

from feedback_insights.analysis.lexicon import (
    COMPENSATION,
    DEFAULT_LEXICON,
    GROWTH_OPPORTUNITIES,
    MANAGEMENT,
    WORK_ENVIRONMENT,
    Lexicon,
)
from feedback_insights.analysis.sentiment import SentimentLabel, SentimentResult

# Aspects carry no confidence signal of their own
ASPECT_CONFIDENCE = 0.8

_LABEL_THRESHOLD = 0.2
_SATURATION_KEYWORDS = 3

AspectResult = SentimentResult


@dataclass(frozen=True)
class AspectScores:
    """All four aspect results, always produced together."""

    work_environment: AspectResult
    management: AspectResult
    compensation: AspectResult
    growth_opportunities: AspectResult

    def items(self) -> Iterator[Tuple[str, AspectResult]]:
        yield WORK_ENVIRONMENT, self.work_environment
        yield MANAGEMENT, self.management
        yield COMPENSATION, self.compensation
        yield GROWTH_OPPORTUNITIES, self.growth_opportunities

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {key: result.to_dict() for key, result in self.items()}


def _count_present(text: str, terms: FrozenSet[str]) -> int:
    return sum(1 for term in terms if term in text)


def label_for(score: float) -> SentimentLabel:
    """Map an aspect score onto a label using the +/-0.2 dead zone."""

    if score > _LABEL_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < -_LABEL_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def aspect_score(keyword_count: int, positive_count: int, negative_count: int) -> float:
    """Combine keyword relevance with the shared polarity tally."""

    if keyword_count == 0:
        return 0.0
    ratio = (positive_count - negative_count) / max(positive_count + negative_count, 1)
    return ratio * min(keyword_count / _SATURATION_KEYWORDS, 1.0)


def score_aspects(text: str, lexicon: Lexicon = DEFAULT_LEXICON) -> AspectScores:
    """Score *text* for every aspect defined in *lexicon*."""

    lowered = text.lower()
    positive_count = _count_present(lowered, lexicon.positive_words)
    negative_count = _count_present(lowered, lexicon.negative_words)

    results: Dict[str, AspectResult] = {}
    for key in (WORK_ENVIRONMENT, MANAGEMENT, COMPENSATION, GROWTH_OPPORTUNITIES):
        keyword_count = _count_present(lowered, lexicon.aspect_keywords[key])
        score = aspect_score(keyword_count, positive_count, negative_count)
        results[key] = SentimentResult.build(label_for(score), score, ASPECT_CONFIDENCE)

    return AspectScores(**results)
