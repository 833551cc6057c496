"""Shared fixtures: deterministic scorer, record factory and stores."""
from __future__ import annotations

import datetime
import itertools
from typing import Any, Callable, Dict

import pytest

from feedback_insights.analysis.aspects import score_aspects
from feedback_insights.analysis.sentiment import (
    LocalFallbackStrategy,
    SentimentLabel,
    SentimentResult,
    SentimentScorer,
)
from feedback_insights.store import Department, InMemoryFeedbackStore
from feedback_insights.submission import FeedbackRecord

NOW = datetime.datetime(2026, 10, 18, 15, 30, tzinfo=datetime.timezone.utc)

ENGINEERING = Department(id="dept-eng", name="Engineering")
SALES = Department(id="dept-sales", name="Sales")


def valid_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "isAnonymous": True,
        "departmentId": ENGINEERING.id,
        "overallRating": 4,
        "workEnvironmentRating": 4,
        "managementRating": 3,
        "compensationRating": 3,
        "growthOpportunitiesRating": 4,
        "comments": "The office is quiet and the team is helpful.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def fallback_scorer() -> SentimentScorer:
    return SentimentScorer(LocalFallbackStrategy())


@pytest.fixture()
def store() -> InMemoryFeedbackStore:
    return InMemoryFeedbackStore(departments=[ENGINEERING, SALES])


@pytest.fixture()
def make_record() -> Callable[..., FeedbackRecord]:
    """Factory building already-scored records without the processor."""

    counter = itertools.count(1)

    def _make(
        *,
        rating: int = 4,
        score: float = 0.0,
        label: str = "neutral",
        confidence: float = 0.5,
        department_id: str = ENGINEERING.id,
        submitted_at: datetime.datetime = NOW,
        comments: str = "Nothing special to report here.",
        suggestions: str | None = None,
    ) -> FeedbackRecord:
        return FeedbackRecord(
            id=f"rec-{next(counter)}",
            submitted_at=submitted_at,
            is_anonymous=True,
            submitter_name=None,
            department_id=department_id,
            overall_rating=rating,
            work_environment_rating=rating,
            management_rating=rating,
            compensation_rating=rating,
            growth_opportunities_rating=rating,
            comments=comments,
            suggestions=suggestions,
            redacted_comments=comments,
            redacted_suggestions=suggestions,
            contains_pii=False,
            sentiment=SentimentResult.build(SentimentLabel(label), score, confidence),
            aspects=score_aspects(comments),
        )

    return _make
