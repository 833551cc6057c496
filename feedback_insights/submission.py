"""Submission intake: validation, redaction, scoring and record assembly."""
from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from feedback_insights.analysis.aspects import AspectScores, score_aspects
from feedback_insights.analysis.lexicon import DEFAULT_LEXICON, Lexicon
from feedback_insights.analysis.redact import redact, redact_optional
from feedback_insights.analysis.sentiment import SentimentResult, SentimentScorer
from feedback_insights.exceptions import ValidationError

if TYPE_CHECKING:  # pragma: no cover
    from feedback_insights.store import FeedbackStore

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 2000

# (attribute, payload key, display name)
RATING_FIELDS = (
    ("overall_rating", "overallRating", "Overall"),
    ("work_environment_rating", "workEnvironmentRating", "Work environment"),
    ("management_rating", "managementRating", "Management"),
    ("compensation_rating", "compensationRating", "Compensation"),
    ("growth_opportunities_rating", "growthOpportunitiesRating", "Growth opportunities"),
)

_REQUIRED_MESSAGES = {
    key: f"{display} rating must be between 1-5" for _, key, display in RATING_FIELDS
}
_REQUIRED_MESSAGES.update(
    {
        "departmentId": "Please select a department",
        "comments": "Comments are required",
        "suggestions": "Suggestions must be text",
        "name": "Name is required when not submitting anonymously",
    }
)
_TOO_LONG_MESSAGES = {
    "comments": f"Comments must be less than {MAX_TEXT_LENGTH} characters",
    "suggestions": f"Suggestions must be less than {MAX_TEXT_LENGTH} characters",
}

# bools and numeric strings are rejected, not coerced
Rating = Annotated[int, Field(strict=True, ge=1, le=5)]


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """Collapse pydantic's error list into one message per payload key."""

    errors: Dict[str, str] = {}
    for error in exc.errors():
        key = str(error["loc"][0]) if error["loc"] else "body"
        if error["type"] == "string_too_long" and key in _TOO_LONG_MESSAGES:
            message = _TOO_LONG_MESSAGES[key]
        else:
            message = _REQUIRED_MESSAGES.get(key, error["msg"])
        errors.setdefault(key, message)
    return errors


class RawSubmission(BaseModel):
    """One employee's feedback exactly as entered, keyed like the JSON form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_anonymous: bool = Field(default=False, alias="isAnonymous")
    department_id: str = Field(alias="departmentId", min_length=1)
    overall_rating: Rating = Field(alias="overallRating")
    work_environment_rating: Rating = Field(alias="workEnvironmentRating")
    management_rating: Rating = Field(alias="managementRating")
    compensation_rating: Rating = Field(alias="compensationRating")
    growth_opportunities_rating: Rating = Field(alias="growthOpportunitiesRating")
    comments: str = Field(max_length=MAX_TEXT_LENGTH)
    suggestions: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)
    # validated after is_anonymous so the anonymity flag is known
    name: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("comments")
    @classmethod
    def _comments_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Comments are required")
        return value

    @field_validator("suggestions", mode="before")
    @classmethod
    def _blank_suggestions_are_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("name")
    @classmethod
    def _name_unless_anonymous(
        cls, value: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        if not info.data.get("is_anonymous", False) and not (value and value.strip()):
            raise ValueError("Name is required when not submitting anonymously")
        return value

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawSubmission":
        """Validate a camelCase JSON payload.

        Raises :class:`~feedback_insights.exceptions.ValidationError` with one
        message per offending field; every field is checked before raising.
        """

        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError(field_errors(exc)) from exc


@dataclass(frozen=True)
class FeedbackRecord:
    """Persisted, append-only result of processing one submission."""

    id: str
    submitted_at: datetime.datetime
    is_anonymous: bool
    submitter_name: Optional[str]
    department_id: str
    overall_rating: int
    work_environment_rating: int
    management_rating: int
    compensation_rating: int
    growth_opportunities_rating: int
    comments: str
    suggestions: Optional[str]
    redacted_comments: str
    redacted_suggestions: Optional[str]
    contains_pii: bool
    sentiment: SentimentResult
    aspects: AspectScores

    def to_public_dict(self, department_name: str = "Unknown") -> Dict[str, Any]:
        """Listing view: redacted text only, camelCase keys."""

        return {
            "id": self.id,
            "isAnonymous": self.is_anonymous,
            "submitterName": self.submitter_name,
            "department": department_name,
            "overallRating": self.overall_rating,
            "workEnvironmentRating": self.work_environment_rating,
            "managementRating": self.management_rating,
            "compensationRating": self.compensation_rating,
            "growthOpportunitiesRating": self.growth_opportunities_rating,
            "comments": self.redacted_comments,
            "suggestions": self.redacted_suggestions,
            "containsPII": self.contains_pii,
            "sentimentScore": self.sentiment.score,
            "sentimentLabel": self.sentiment.label.value,
            "confidenceScore": self.sentiment.confidence,
            "sentimentIntensity": self.sentiment.intensity.value,
            "aspects": self.aspects.to_dict(),
            "submittedAt": self.submitted_at.isoformat(),
        }


class SubmissionProcessor:
    """Turn a :class:`RawSubmission` into a :class:`FeedbackRecord`.

    The sequence is validate → redact → score overall → score aspects →
    assemble.  Nothing is persisted unless every step succeeds.
    """

    def __init__(
        self,
        scorer: SentimentScorer,
        *,
        lexicon: Lexicon = DEFAULT_LEXICON,
        clock: Callable[[], datetime.datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._scorer = scorer
        self._lexicon = lexicon
        self._clock = clock
        self._id_factory = id_factory

    @property
    def scorer(self) -> SentimentScorer:
        return self._scorer

    @staticmethod
    def validate(raw: Union[RawSubmission, Mapping[str, Any]]) -> RawSubmission:
        """Return *raw* as a validated :class:`RawSubmission`.

        Submissions are validated when built, so only plain payloads need
        checking here.
        """

        if isinstance(raw, RawSubmission):
            return raw
        return RawSubmission.from_payload(raw)

    def process(self, raw: Union[RawSubmission, Mapping[str, Any]]) -> FeedbackRecord:
        """Validate, redact and score *raw*; return the record to persist."""

        raw = self.validate(raw)

        comments = redact(raw.comments)
        suggestions = redact_optional(raw.suggestions)
        contains_pii = comments.contained_pii or bool(
            suggestions and suggestions.contained_pii
        )

        combined_text = f"{raw.comments} {raw.suggestions or ''}"
        sentiment = self._scorer.score_overall(combined_text)
        aspects = score_aspects(combined_text, self._lexicon)

        return FeedbackRecord(
            id=self._id_factory(),
            submitted_at=self._clock(),
            is_anonymous=raw.is_anonymous,
            submitter_name=None if raw.is_anonymous else raw.name,
            department_id=raw.department_id,
            overall_rating=raw.overall_rating,
            work_environment_rating=raw.work_environment_rating,
            management_rating=raw.management_rating,
            compensation_rating=raw.compensation_rating,
            growth_opportunities_rating=raw.growth_opportunities_rating,
            comments=raw.comments,
            suggestions=raw.suggestions,
            redacted_comments=comments.redacted_text,
            redacted_suggestions=suggestions.redacted_text if suggestions else None,
            contains_pii=contains_pii,
            sentiment=sentiment,
            aspects=aspects,
        )

    def submit(
        self, raw: Union[RawSubmission, Mapping[str, Any]], store: "FeedbackStore"
    ) -> str:
        """Process *raw* and hand the record to *store*; return its id."""

        record = self.process(raw)
        record_id = store.insert(record)
        logger.info(
            "Stored feedback %s (pii=%s, sentiment=%s)",
            record_id,
            record.contains_pii,
            record.sentiment.label.value,
        )
        return record_id
