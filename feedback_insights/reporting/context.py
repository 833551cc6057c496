"""Context dataclass for rendering the analytics dashboard summary.

This module defines `DashboardContext`, a typed container holding every
value expected by `reporting/templates/analytics.md.j2`.  Building the
context is kept apart from rendering so the numbers can be unit-tested
without touching template strings.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from feedback_insights.reporting import config
from feedback_insights.reporting.models import AnalyticsSnapshot

__all__ = [
    "DashboardContext",
    "build_dashboard_context",
]

ASPECT_TITLES = {
    "work_environment": "Work Environment",
    "management": "Management",
    "compensation": "Compensation",
    "growth_opportunities": "Growth Opportunities",
}


@dataclass(slots=True)
class DashboardContext:
    """Container with all fields used by the dashboard template."""

    # Header & meta
    date: str  # ISO-8601 date of the snapshot
    overview: Dict[str, Any]

    # Sentiment
    emoji_bar: str
    sentiment_counts: Dict[str, int]
    intensity_distribution: Dict[str, Dict[str, int]] = field(default_factory=dict)

    # Breakdown tables
    departments: List[Dict[str, Any]] = field(default_factory=list)
    ratings: List[Dict[str, Any]] = field(default_factory=list)
    trend: List[Dict[str, Any]] = field(default_factory=list)
    aspects: List[Dict[str, Any]] = field(default_factory=list)

    version: str = "1"

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) for Jinja rendering."""
        return asdict(self)

    __call__ = to_dict


# dashboard order: praise first, complaints last
_LABEL_EMOJI = (("positive", "😊"), ("neutral", "😐"), ("negative", "🙁"))


def _emoji_bar(counts: Dict[str, int], max_emoji: int = config.MAX_EMOJI_BAR) -> str:
    """Draw the feedback sentiment distribution as one row of emojis.

    Each label gets a share of *max_emoji* proportional to its response
    count; a label with at least one response always shows one emoji.
    """

    total = sum(counts.get(label, 0) for label, _ in _LABEL_EMOJI)
    if not total:
        return ""
    bar = []
    for label, emoji in _LABEL_EMOJI:
        count = counts.get(label, 0)
        width = round(count * max_emoji / total)
        bar.append(emoji * (max(width, 1) if count else 0))
    return "".join(bar)


def build_dashboard_context(snapshot: AnalyticsSnapshot) -> DashboardContext:
    """Convert an :class:`AnalyticsSnapshot` into a :class:`DashboardContext`.

    All numbers come from ``snapshot.to_dict()`` so the template shows the
    same rounded values as the JSON API.
    """

    data = snapshot.to_dict()

    departments = [
        {"name": name, **stats}
        for name, stats in sorted(
            data["departmentStats"].items(), key=lambda item: item[0]
        )
    ]
    ratings = [
        {"rating": rating, "count": count}
        for rating, count in sorted(data["ratingDistribution"].items(), reverse=True)
    ]
    aspects = [
        {"key": key, "title": ASPECT_TITLES.get(key, key), **summary}
        for key, summary in data["aspectSummary"].items()
    ]
    trend = data["trendData"]

    return DashboardContext(
        date=trend[-1]["date"] if trend else "",
        overview=data["overview"],
        emoji_bar=_emoji_bar(data["sentimentDistribution"], config.MAX_EMOJI_BAR),
        sentiment_counts=data["sentimentDistribution"],
        intensity_distribution=data["intensityDistribution"],
        departments=departments,
        ratings=ratings,
        trend=trend,
        aspects=aspects,
        version=os.getenv("REPORT_VERSION", "0.1"),
    )
