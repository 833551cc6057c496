"""Tests for the transport-neutral request handlers."""
from __future__ import annotations

import datetime
from unittest.mock import MagicMock, patch

import pytest

from feedback_insights.analysis.sentiment import RemoteClassifierStrategy, SentimentScorer
from feedback_insights.exceptions import StorageError
from feedback_insights.handlers import FeedbackHandlers
from feedback_insights.submission import SubmissionProcessor

from conftest import ENGINEERING, NOW, valid_payload


@pytest.fixture()
def handlers(fallback_scorer, store) -> FeedbackHandlers:
    processor = SubmissionProcessor(fallback_scorer, clock=lambda: NOW)
    return FeedbackHandlers(processor, store, clock=lambda: NOW)


def test_submit_success(handlers, store):
    status, body = handlers.submit_feedback(valid_payload())
    assert status == 201
    assert body["success"] is True
    assert body["message"] == "Feedback submitted successfully"
    assert store.get(body["id"]) is not None


def test_submit_validation_error_has_field_details(handlers, store):
    status, body = handlers.submit_feedback(valid_payload(overallRating=7))
    assert status == 400
    assert body["error"] == "Invalid form data"
    assert "overallRating" in body["details"]
    assert store.count() == 0


def test_submit_rejects_non_object(handlers):
    status, body = handlers.submit_feedback(["not", "a", "dict"])  # type: ignore[arg-type]
    assert status == 400
    assert "body" in body["details"]


def test_submit_storage_error_is_generic(fallback_scorer):
    store = MagicMock()
    store.insert.side_effect = StorageError("connection refused")
    handlers = FeedbackHandlers(SubmissionProcessor(fallback_scorer), store)

    status, body = handlers.submit_feedback(valid_payload())

    assert status == 500
    assert body == {"error": "Failed to submit feedback"}


def test_submit_unexpected_error_is_generic(handlers):
    with patch.object(
        SubmissionProcessor, "submit", side_effect=RuntimeError("kaboom")
    ):
        status, body = handlers.submit_feedback(valid_payload())
    assert status == 500
    assert body == {"error": "Internal server error"}


def test_analytics_reflects_submissions(handlers):
    handlers.submit_feedback(valid_payload(overallRating=5))
    handlers.submit_feedback(valid_payload(overallRating=2))

    status, body = handlers.get_analytics()

    assert status == 200
    assert body["overview"]["totalFeedback"] == 2
    assert body["overview"]["avgOverallRating"] == 3.5
    assert body["departmentStats"][ENGINEERING.name]["total"] == 2
    assert len(body["trendData"]) == 7
    assert body["trendData"][-1]["count"] == 2


def test_analytics_failure_returns_no_partial_data(fallback_scorer):
    store = MagicMock()
    store.list_all.side_effect = StorageError("down")
    handlers = FeedbackHandlers(SubmissionProcessor(fallback_scorer), store)

    status, body = handlers.get_analytics()

    assert status == 500
    assert body == {"error": "Failed to fetch analytics data"}


def test_analytics_report_is_markdown(handlers):
    handlers.submit_feedback(valid_payload())
    status, body = handlers.get_analytics_report()
    assert status == 200
    assert "Employee Feedback Dashboard" in body
    assert "Engineering" in body


def test_feedback_page_is_redacted_and_paginated(handlers):
    for i in range(3):
        handlers.submit_feedback(
            valid_payload(comments=f"Email me at person{i}@example.com")
        )

    status, body = handlers.get_feedback_page(page=2, limit=2)

    assert status == 200
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}
    assert len(body["data"]) == 1
    item = body["data"][0]
    assert "@" not in item["comments"]
    assert item["department"] == ENGINEERING.name
    assert item["sentimentLabel"] == "neutral"
    assert set(item["aspects"]) == {
        "work_environment",
        "management",
        "compensation",
        "growth_opportunities",
    }


def test_feedback_page_clamps_bad_paging(handlers):
    status, body = handlers.get_feedback_page(page=0, limit=0)
    assert status == 200
    assert body["pagination"]["page"] == 1
    assert body["pagination"]["limit"] == 1
    assert body["pagination"]["totalPages"] == 0


def test_export(handlers):
    handlers.submit_feedback(valid_payload(comments='He said "hi" to Jane Doe'))
    status, body = handlers.export_feedback()
    assert status == 200
    lines = body.split("\n")
    assert lines[0].startswith("ID,Submission Type")
    assert '"He said ""hi"" to [REDACTED]"' in lines[1]


def test_departments(handlers):
    status, body = handlers.get_departments()
    assert status == 200
    assert [d["name"] for d in body] == ["Engineering", "Sales"]


def test_unknown_department_rolls_up_as_unknown(handlers):
    handlers.submit_feedback(valid_payload(departmentId="missing"))
    _, body = handlers.get_analytics()
    assert body["departmentStats"] == {
        "Unknown": {
            "total": 1,
            "avgRating": 4.0,
            "avgSentiment": 0.0,
            "sentimentCounts": {"positive": 0, "negative": 0, "neutral": 1},
        }
    }


def test_default_clock_is_now(fallback_scorer, store):
    handlers = FeedbackHandlers(SubmissionProcessor(fallback_scorer), store)
    handlers.submit_feedback(valid_payload())
    _, body = handlers.get_analytics()
    today = datetime.datetime.now().astimezone().date().isoformat()
    assert body["trendData"][-1]["date"] == today
    assert body["trendData"][-1]["count"] == 1


def test_default_clock_is_local_aware(fallback_scorer, store):
    handlers = FeedbackHandlers(SubmissionProcessor(fallback_scorer), store)
    now = handlers._clock()
    assert now.tzinfo is not None
    assert now.utcoffset() == datetime.datetime.now().astimezone().utcoffset()


@pytest.mark.parametrize("page, limit", [("abc", 2), (1, "ten"), (None, None)])
def test_feedback_page_ignores_unparseable_paging(handlers, page, limit):
    handlers.submit_feedback(valid_payload())
    status, body = handlers.get_feedback_page(page=page, limit=limit)
    assert status == 200
    assert body["pagination"]["page"] >= 1
    assert body["pagination"]["limit"] >= 1
    assert body["pagination"]["total"] == 1


def test_feedback_page_parses_numeric_strings(handlers):
    status, body = handlers.get_feedback_page(page="2", limit="5")
    assert status == 200
    assert body["pagination"]["page"] == 2
    assert body["pagination"]["limit"] == 5


def test_export_with_no_records_is_not_found(handlers):
    status, body = handlers.export_feedback()
    assert status == 404
    assert body == {"error": "No data to export"}


def test_analyze_sentiment_uses_configured_scorer(store):
    predict = MagicMock(return_value=[{"label": "negative", "score": 0.9}])
    scorer = SentimentScorer(RemoteClassifierStrategy(predict))
    handlers = FeedbackHandlers(SubmissionProcessor(scorer), store)

    status, body = handlers.analyze_sentiment({"text": "the commute is awful"})

    assert status == 200
    predict.assert_called_once_with("the commute is awful")
    assert body["label"] == "negative"
    assert body["score"] == pytest.approx(-0.9)
    assert body["confidence"] == pytest.approx(0.9)
    assert body["intensity"] == "extreme"


def test_analyze_sentiment_without_remote_is_neutral(handlers):
    status, body = handlers.analyze_sentiment({"text": "fine"})
    assert status == 200
    assert body == {
        "label": "neutral",
        "score": 0.0,
        "confidence": 0.5,
        "intensity": "mild",
    }


@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": 42}, ["text"]])
def test_analyze_sentiment_requires_text(handlers, payload):
    status, body = handlers.analyze_sentiment(payload)
    assert status == 400
    assert body == {"error": "Text is required"}
