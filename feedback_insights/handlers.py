import datetime
import logging
import math
from typing import Any, Callable, Mapping, Optional, Tuple

from feedback_insights.exceptions import StorageError, ValidationError
from feedback_insights.reporting import config as report_config
from feedback_insights.reporting.aggregator import UNKNOWN_DEPARTMENT, aggregate
from feedback_insights.reporting.export import export_csv
from feedback_insights.reporting.render import render_dashboard
from feedback_insights.store import FeedbackStore
from feedback_insights.submission import RawSubmission, SubmissionProcessor

logger = logging.getLogger(__name__)

Response = Tuple[int, Any]

_INTERNAL_ERROR = {"error": "Internal server error"}


def _positive_int(value: Any, default: int) -> int:
    """Parse a paging parameter; unparseable values use *default*."""

    try:
        return max(int(value), 1)
    except (TypeError, ValueError, OverflowError):
        return default


class FeedbackHandlers:
    """Request handlers independent of any web framework.

    Every method returns ``(status_code, body)``.  Validation problems are
    reported with field detail; every other failure is logged and mapped to
    a generic error with no partial data.
    """

    def __init__(
        self,
        processor: SubmissionProcessor,
        store: FeedbackStore,
        clock: Optional[Callable[[], datetime.datetime]] = None,
    ) -> None:
        self._processor = processor
        self._store = store
        # trend days follow the server's local calendar
        self._clock = clock or (lambda: datetime.datetime.now().astimezone())

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    def submit_feedback(self, payload: Mapping[str, Any]) -> Response:
        """Validate, redact, score and store one submission."""

        try:
            if not isinstance(payload, Mapping):
                raise ValidationError({"body": "Expected a JSON object"})
            raw = RawSubmission.from_payload(payload)
            record_id = self._processor.submit(raw, self._store)
        except ValidationError as exc:
            logger.info("Rejected feedback submission: %s", exc)
            return 400, {"error": "Invalid form data", "details": exc.errors}
        except StorageError as exc:
            logger.error("Database error: %s", exc, exc_info=True)
            return 500, {"error": "Failed to submit feedback"}
        except Exception as exc:  # noqa: BLE001 – never leak internals
            logger.error("Feedback submission error: %s", exc, exc_info=True)
            return 500, dict(_INTERNAL_ERROR)

        return 201, {
            "success": True,
            "id": record_id,
            "message": "Feedback submitted successfully",
        }

    def analyze_sentiment(self, payload: Mapping[str, Any]) -> Response:
        """Score ``payload["text"]`` with the configured sentiment scorer."""

        text = payload.get("text") if isinstance(payload, Mapping) else None
        if not text or not isinstance(text, str):
            return 400, {"error": "Text is required"}
        try:
            result = self._processor.scorer.score_overall(text)
        except Exception as exc:  # noqa: BLE001
            logger.error("Sentiment analysis error: %s", exc, exc_info=True)
            return 500, dict(_INTERNAL_ERROR)
        return 200, result.to_dict()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_analytics(self) -> Response:
        """Return a freshly computed analytics snapshot."""

        try:
            snapshot = aggregate(
                self._store.list_all(),
                now=self._clock(),
                departments=self._store.department_names(),
            )
            return 200, snapshot.to_dict()
        except Exception as exc:  # noqa: BLE001
            logger.error("Analytics error: %s", exc, exc_info=True)
            return 500, {"error": "Failed to fetch analytics data"}

    def get_analytics_report(self) -> Response:
        """Return the markdown dashboard summary."""

        try:
            snapshot = aggregate(
                self._store.list_all(),
                now=self._clock(),
                departments=self._store.department_names(),
            )
            return 200, render_dashboard(snapshot)
        except Exception as exc:  # noqa: BLE001
            logger.error("Analytics report error: %s", exc, exc_info=True)
            return 500, {"error": "Failed to fetch analytics data"}

    def get_feedback_page(
        self, page: int = 1, limit: int = report_config.DEFAULT_PAGE_SIZE
    ) -> Response:
        """Return one page of redacted feedback plus pagination info."""

        page = _positive_int(page, 1)
        limit = _positive_int(limit, report_config.DEFAULT_PAGE_SIZE)
        offset = (page - 1) * limit
        try:
            records, total = self._store.list_page(offset, limit)
            names = self._store.department_names()
        except Exception as exc:  # noqa: BLE001
            logger.error("Database error: %s", exc, exc_info=True)
            return 500, {"error": "Failed to fetch feedback data"}

        data = [
            record.to_public_dict(names.get(record.department_id) or UNKNOWN_DEPARTMENT)
            for record in records
        ]
        return 200, {
            "data": data,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    def export_feedback(self) -> Response:
        """Return every stored record as CSV text, or 404 when there is none."""

        try:
            records = self._store.list_all()
            if not records:
                return 404, {"error": "No data to export"}
            return 200, export_csv(records, self._store.department_names())
        except Exception as exc:  # noqa: BLE001
            logger.error("Export error: %s", exc, exc_info=True)
            return 500, dict(_INTERNAL_ERROR)

    def get_departments(self) -> Response:
        try:
            departments = self._store.list_departments()
        except Exception as exc:  # noqa: BLE001
            logger.error("Departments fetch error: %s", exc, exc_info=True)
            return 500, {"error": "Failed to fetch departments"}
        return 200, [dept.to_dict() for dept in departments]

