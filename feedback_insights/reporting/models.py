"""Data structures for the analytics snapshot.

Values are stored at full precision; :meth:`AnalyticsSnapshot.to_dict` is
the presentation boundary where averages get rounded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from feedback_insights.reporting import config


def _r(value: float) -> float:
    return round(value, config.ROUND_DIGITS)


def empty_label_counts() -> Dict[str, int]:
    return {"positive": 0, "negative": 0, "neutral": 0}


@dataclass(slots=True)
class Overview:
    total_feedback: int = 0
    avg_overall_rating: float = 0.0
    avg_sentiment: float = 0.0
    recent_feedback: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFeedback": self.total_feedback,
            "avgOverallRating": _r(self.avg_overall_rating),
            "avgSentiment": _r(self.avg_sentiment),
            "recentFeedback": self.recent_feedback,
        }


@dataclass(slots=True)
class DepartmentStats:
    total: int = 0
    avg_rating: float = 0.0
    avg_sentiment: float = 0.0
    sentiment_counts: Dict[str, int] = field(default_factory=empty_label_counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "avgRating": _r(self.avg_rating),
            "avgSentiment": _r(self.avg_sentiment),
            "sentimentCounts": dict(self.sentiment_counts),
        }


@dataclass(slots=True)
class TrendPoint:
    date: str  # ISO-8601 calendar date
    count: int = 0
    avg_sentiment: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "count": self.count,
            "avgSentiment": _r(self.avg_sentiment),
        }


@dataclass(slots=True)
class AspectSummary:
    """Rollup of one aspect across all records."""

    avg_score: float = 0.0
    mentions: int = 0
    label: str = "neutral"
    intensity: str = "mild"
    label_counts: Dict[str, int] = field(default_factory=empty_label_counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avgScore": _r(self.avg_score),
            "mentions": self.mentions,
            "label": self.label,
            "intensity": self.intensity,
            "labelCounts": dict(self.label_counts),
        }


@dataclass(slots=True)
class AnalyticsSnapshot:
    """Dashboard metrics recomputed from the full record collection."""

    overview: Overview
    sentiment_distribution: Dict[str, int]
    department_stats: Dict[str, DepartmentStats]
    rating_distribution: Dict[int, int]
    trend: List[TrendPoint]
    intensity_distribution: Dict[str, Dict[str, int]] = field(default_factory=dict)
    aspect_summary: Dict[str, AspectSummary] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready mapping with rounded averages."""
        return {
            "overview": self.overview.to_dict(),
            "sentimentDistribution": dict(self.sentiment_distribution),
            "departmentStats": {
                name: stats.to_dict() for name, stats in self.department_stats.items()
            },
            "ratingDistribution": dict(self.rating_distribution),
            "trendData": [point.to_dict() for point in self.trend],
            "intensityDistribution": {
                label: dict(counts)
                for label, counts in self.intensity_distribution.items()
            },
            "aspectSummary": {
                key: summary.to_dict() for key, summary in self.aspect_summary.items()
            },
        }
