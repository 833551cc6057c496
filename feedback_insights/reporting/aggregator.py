"""Aggregate stored feedback records into an :class:`AnalyticsSnapshot`."""

from __future__ import annotations

import datetime
import logging
from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Sequence

from feedback_insights.analysis.aspects import ASPECT_CONFIDENCE, label_for
from feedback_insights.analysis.lexicon import ASPECT_KEYS
from feedback_insights.analysis.sentiment import Intensity, intensity_for
from feedback_insights.reporting import config
from feedback_insights.reporting.models import (
    AnalyticsSnapshot,
    AspectSummary,
    DepartmentStats,
    Overview,
    TrendPoint,
    empty_label_counts,
)
from feedback_insights.submission import FeedbackRecord

logger = logging.getLogger(__name__)

UNKNOWN_DEPARTMENT = "Unknown"


def _mean(total: float, count: int) -> float:
    return total / count if count else 0.0


def _sentiment_score(record: FeedbackRecord) -> float:
    sentiment = getattr(record, "sentiment", None)
    return float(sentiment.score) if sentiment is not None else 0.0


def _rating(record: FeedbackRecord) -> Optional[int]:
    """Return the overall rating, or ``None`` when it is missing or malformed."""

    rating = getattr(record, "overall_rating", None)
    if isinstance(rating, bool) or not isinstance(rating, int):
        return None
    return rating if 1 <= rating <= 5 else None


def _submitted_at(record: FeedbackRecord) -> Optional[datetime.datetime]:
    submitted_at = getattr(record, "submitted_at", None)
    return submitted_at if isinstance(submitted_at, datetime.datetime) else None


def _sentiment_label(record: FeedbackRecord) -> str:
    sentiment = getattr(record, "sentiment", None)
    if sentiment is None or not sentiment.label:
        return "neutral"
    return sentiment.label.value


def _localize(ts: datetime.datetime, now: datetime.datetime) -> datetime.datetime:
    """Express *ts* in the same clock as *now* so they can be compared.

    An aware *now* defines the timezone; a naive *now* means local time.
    """

    if now.tzinfo is None:
        if ts.tzinfo is None:
            return ts
        return ts.astimezone().replace(tzinfo=None)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=now.tzinfo)
    return ts.astimezone(now.tzinfo)


def _trend(
    records: Sequence[FeedbackRecord], now: datetime.datetime
) -> List[TrendPoint]:
    today = now.date()
    first_day = today - datetime.timedelta(days=config.TREND_DAYS - 1)

    counts: Dict[datetime.date, int] = defaultdict(int)
    totals: Dict[datetime.date, float] = defaultdict(float)
    for record in records:
        submitted_at = _submitted_at(record)
        if submitted_at is None:
            continue
        day = _localize(submitted_at, now).date()
        if first_day <= day <= today:
            counts[day] += 1
            totals[day] += _sentiment_score(record)

    points: List[TrendPoint] = []
    for offset in range(config.TREND_DAYS - 1, -1, -1):
        day = today - datetime.timedelta(days=offset)
        points.append(
            TrendPoint(
                date=day.isoformat(),
                count=counts[day],
                avg_sentiment=_mean(totals[day], counts[day]),
            )
        )
    return points


def _aspect_summary(records: Sequence[FeedbackRecord]) -> Dict[str, AspectSummary]:
    summaries: Dict[str, AspectSummary] = {}
    for key in ASPECT_KEYS:
        summary = AspectSummary()
        total = 0.0
        for record in records:
            aspects = getattr(record, "aspects", None)
            if aspects is None:
                continue
            result = getattr(aspects, key)
            total += result.score
            if result.score != 0:
                summary.mentions += 1
            summary.label_counts[result.label.value] += 1
        summary.avg_score = _mean(total, len(records))
        summary.label = label_for(summary.avg_score).value
        summary.intensity = intensity_for(summary.avg_score, ASPECT_CONFIDENCE).value
        summaries[key] = summary
    return summaries


def aggregate(
    records: Sequence[FeedbackRecord],
    now: Optional[datetime.datetime] = None,
    departments: Optional[Mapping[str, str]] = None,
) -> AnalyticsSnapshot:
    """Roll *records* up into dashboard metrics.

    Pure and total: an empty collection yields zero-valued metrics.  The
    result is only valid for the records passed in.  Calendar days are
    taken in the timezone of *now*, which defaults to the local clock.
    """

    if now is None:
        now = datetime.datetime.now().astimezone()
    records = list(records)
    departments = departments or {}
    total = len(records)

    recent_cutoff = now - datetime.timedelta(days=config.RECENT_WINDOW_DAYS)
    rating_sum = 0.0
    rated = 0
    sentiment_sum = 0.0
    recent = 0

    sentiment_distribution = empty_label_counts()
    rating_distribution: Dict[int, int] = {rating: 0 for rating in range(1, 6)}
    intensity_distribution: Dict[str, Dict[str, int]] = {
        label: {tier.value: 0 for tier in Intensity} for label in sentiment_distribution
    }

    dept_totals: Dict[str, Dict[str, float]] = defaultdict(
        lambda: {"rating": 0.0, "rated": 0, "sentiment": 0.0}
    )
    department_stats: Dict[str, DepartmentStats] = {}

    for record in records:
        score = _sentiment_score(record)
        label = _sentiment_label(record)

        rating = _rating(record)
        if rating is not None:
            rating_sum += rating
            rated += 1
        sentiment_sum += score
        submitted_at = _submitted_at(record)
        if submitted_at is not None and _localize(submitted_at, now) >= recent_cutoff:
            recent += 1

        sentiment_distribution[label] = sentiment_distribution.get(label, 0) + 1
        if rating is not None:
            rating_distribution[rating] = rating_distribution.get(rating, 0) + 1
        sentiment = getattr(record, "sentiment", None)
        if sentiment is not None and label in intensity_distribution:
            intensity_distribution[label][sentiment.intensity.value] += 1

        dept_name = departments.get(record.department_id) or UNKNOWN_DEPARTMENT
        stats = department_stats.setdefault(dept_name, DepartmentStats())
        stats.total += 1
        if rating is not None:
            dept_totals[dept_name]["rating"] += rating
            dept_totals[dept_name]["rated"] += 1
        dept_totals[dept_name]["sentiment"] += score
        if label in stats.sentiment_counts:
            stats.sentiment_counts[label] += 1

    for dept_name, stats in department_stats.items():
        totals = dept_totals[dept_name]
        stats.avg_rating = _mean(totals["rating"], int(totals["rated"]))
        stats.avg_sentiment = _mean(totals["sentiment"], stats.total)

    overview = Overview(
        total_feedback=total,
        avg_overall_rating=_mean(rating_sum, rated),
        avg_sentiment=_mean(sentiment_sum, total),
        recent_feedback=recent,
    )
    logger.debug("Aggregated %d feedback records", total)

    return AnalyticsSnapshot(
        overview=overview,
        sentiment_distribution=sentiment_distribution,
        department_stats=department_stats,
        rating_distribution=rating_distribution,
        trend=_trend(records, now),
        intensity_distribution=intensity_distribution,
        aspect_summary=_aspect_summary(records),
    )
