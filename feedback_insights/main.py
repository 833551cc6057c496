"""Command-line entry point.

Loads submissions from a JSON file, runs them through the pipeline and
prints either the dashboard summary or the CSV export:

    feedback-insights submissions.json --departments departments.json --csv
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from feedback_insights.app import create_app
from feedback_insights.store import Department

logger = logging.getLogger(__name__)


def _load_json(path: str):
    return json.loads(Path(path).read_text(encoding="utf-8"))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="feedback-insights")
    parser.add_argument("submissions", help="JSON file holding a list of submissions")
    parser.add_argument(
        "--departments",
        help='JSON file holding [{"id": ..., "name": ...}] department entries',
    )
    parser.add_argument(
        "--csv", action="store_true", help="print the CSV export instead of the report"
    )
    args = parser.parse_args(argv)

    departments = []
    if args.departments:
        departments = [
            Department(id=d["id"], name=d["name"], description=d.get("description"))
            for d in _load_json(args.departments)
        ]

    app = create_app(departments=departments)
    rejected = 0
    for index, payload in enumerate(_load_json(args.submissions)):
        status, body = app.handlers.submit_feedback(payload)
        if status != 201:
            rejected += 1
            logger.warning("Submission #%d rejected (%d): %s", index, status, body)

    if args.csv:
        status, body = app.handlers.export_feedback()
    else:
        status, body = app.handlers.get_analytics_report()

    if status != 200:
        logger.error("Could not build output: %s", body)
        return 1

    sys.stdout.write(body + "\n")
    return 1 if rejected else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
