"""Unit tests for dashboard rendering."""
from __future__ import annotations

from unittest.mock import patch

from feedback_insights.reporting import context
from feedback_insights.reporting.aggregator import aggregate
from feedback_insights.reporting.render import render_dashboard

from conftest import ENGINEERING, NOW


def test_render_dashboard_basic(make_record):
    records = [
        make_record(rating=5, score=0.9, label="positive", confidence=0.9),
        make_record(rating=1, score=-0.8, label="negative", confidence=0.9),
    ]
    snapshot = aggregate(
        records, now=NOW, departments={ENGINEERING.id: ENGINEERING.name}
    )

    out = render_dashboard(snapshot)

    assert "2026-10-18" in out
    assert "Total feedback: 2" in out
    assert "Average overall rating: 3.0" in out
    assert "Engineering: 2 responses" in out
    assert "Work Environment" in out
    assert "😊" in out and "🙁" in out


def test_render_empty_snapshot():
    out = render_dashboard(aggregate([], now=NOW))
    assert "Total feedback: 0" in out
    assert "_No feedback yet._" in out


def test_render_uses_context_builder(make_record):
    snapshot = aggregate([make_record()], now=NOW)
    with patch(
        "feedback_insights.reporting.render.build_dashboard_context",
        wraps=context.build_dashboard_context,
    ) as builder:
        render_dashboard(snapshot)
    builder.assert_called_once_with(snapshot)
