"""Project-wide custom exception types."""
from __future__ import annotations

from typing import Dict, Optional


class FeedbackError(RuntimeError):
    """Base class for errors raised by the feedback pipeline."""


class ValidationError(FeedbackError):
    """Raised when a submission is malformed or out of range.

    ``errors`` maps the offending field name to a human-readable message.
    """

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None) -> None:
        self.errors: Dict[str, str] = dict(errors)
        if message is None:
            message = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(message)


class UpstreamDegradation(FeedbackError):
    """Raised by remote sentiment backends; always recovered by the scorer."""


class StorageError(FeedbackError):
    """Raised when the persistence layer fails to write or read records."""


class OpenAIClientError(FeedbackError):
    """Raised when OpenAI configuration is invalid (e.g., missing API key)."""
