"""Unit tests for the CSV export."""
from __future__ import annotations

import datetime

from feedback_insights.reporting.export import HEADERS, export_csv, quote_text

from conftest import ENGINEERING, NOW


def test_header_only_for_empty_collection():
    assert export_csv([]) == ",".join(HEADERS)


def test_fixed_column_order():
    assert HEADERS == [
        "ID",
        "Submission Type",
        "Submitter Name",
        "Department",
        "Overall Rating",
        "Work Environment Rating",
        "Management Rating",
        "Compensation Rating",
        "Growth Opportunities Rating",
        "Comments",
        "Suggestions",
        "Sentiment Score",
        "Sentiment Label",
        "Confidence Score",
        "Submitted At",
    ]


def test_quote_text_doubles_quotes():
    assert quote_text('say "cheese"') == '"say ""cheese"""'
    assert quote_text(None) == '""'


def test_row_contents_and_ordering(make_record):
    older = make_record(
        rating=2,
        comments='Too many "quick" meetings, sorry',
        submitted_at=NOW - datetime.timedelta(days=1),
    )
    newer = make_record(rating=5, suggestions="More snacks", department_id="x")

    lines = export_csv([older, newer], {ENGINEERING.id: ENGINEERING.name}).split("\n")

    assert len(lines) == 3
    assert lines[1].startswith(f"{newer.id},Anonymous,N/A,Unknown,5,")
    assert '"More snacks"' in lines[1]
    assert lines[2].startswith(f"{older.id},Anonymous,N/A,Engineering,2,")
    assert '"Too many ""quick"" meetings, sorry",""' in lines[2]
    assert lines[2].endswith(older.submitted_at.isoformat())


def test_unredacted_text_is_never_exported(make_record):
    import dataclasses

    record = dataclasses.replace(
        make_record(),
        comments="secret from bob@example.com",
        redacted_comments="secret from [REDACTED]",
        contains_pii=True,
    )
    out = export_csv([record])
    assert "bob@example.com" not in out
    assert "[REDACTED]" in out
