"""CSV export of stored feedback.

Only redacted text leaves the system; the original comments and the PII flag
are never exported.
"""
from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from feedback_insights.submission import FeedbackRecord

UNKNOWN_DEPARTMENT = "Unknown"


def quote_text(value: Optional[str]) -> str:
    """Wrap *value* in double quotes, doubling any embedded quotes."""
    return '"' + (value or "").replace('"', '""') + '"'


# (header, cell builder) in export order
_Column = Tuple[str, Callable[[FeedbackRecord, str], Any]]

COLUMNS: Tuple[_Column, ...] = (
    ("ID", lambda rec, _dept: rec.id),
    (
        "Submission Type",
        lambda rec, _dept: "Anonymous" if rec.is_anonymous else "Named",
    ),
    ("Submitter Name", lambda rec, _dept: rec.submitter_name or "N/A"),
    ("Department", lambda _rec, dept: dept),
    ("Overall Rating", lambda rec, _dept: rec.overall_rating),
    ("Work Environment Rating", lambda rec, _dept: rec.work_environment_rating),
    ("Management Rating", lambda rec, _dept: rec.management_rating),
    ("Compensation Rating", lambda rec, _dept: rec.compensation_rating),
    (
        "Growth Opportunities Rating",
        lambda rec, _dept: rec.growth_opportunities_rating,
    ),
    ("Comments", lambda rec, _dept: quote_text(rec.redacted_comments)),
    ("Suggestions", lambda rec, _dept: quote_text(rec.redacted_suggestions)),
    ("Sentiment Score", lambda rec, _dept: rec.sentiment.score),
    ("Sentiment Label", lambda rec, _dept: rec.sentiment.label.value),
    ("Confidence Score", lambda rec, _dept: rec.sentiment.confidence),
    ("Submitted At", lambda rec, _dept: rec.submitted_at.isoformat()),
)

HEADERS: List[str] = [header for header, _ in COLUMNS]


def export_csv(
    records: Sequence[FeedbackRecord],
    departments: Optional[Mapping[str, str]] = None,
) -> str:
    """Render *records* newest first, one line per record after the header."""

    departments = departments or {}
    ordered = sorted(records, key=lambda rec: rec.submitted_at, reverse=True)

    lines = [",".join(HEADERS)]
    for record in ordered:
        dept = departments.get(record.department_id) or UNKNOWN_DEPARTMENT
        lines.append(",".join(str(build(record, dept)) for _, build in COLUMNS))
    return "\n".join(lines)
