"""Pattern-based PII redaction for free-text feedback.

Matchers run in a fixed order over the progressively redacted text, so a
later matcher only sees what earlier ones left behind.  Detection is
heuristic: the name matcher flags *any* two adjacent capitalized words.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

REDACTION_MARKER = "[REDACTED]"


@dataclass(frozen=True)
class RedactionResult:
    """Redacted text plus a flag telling whether anything was replaced."""

    redacted_text: str
    contained_pii: bool


# (category, matcher, replacement) applied in order; ASCII-only \d and \b
PII_MATCHERS: Tuple[Tuple[str, Pattern[str], str], ...] = (
    (
        "email",
        re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b", re.ASCII),
        REDACTION_MARKER,
    ),
    ("ssn", re.compile(r"\b\d{3}-\d{2}-\d{4}\b", re.ASCII), REDACTION_MARKER),
    ("phone", re.compile(r"\b\d{3}-\d{3}-\d{4}\b", re.ASCII), REDACTION_MARKER),
    ("phone_10_digit", re.compile(r"\b\d{10}\b", re.ASCII), REDACTION_MARKER),
    ("name", re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+\b", re.ASCII), REDACTION_MARKER),
)


def redact(text: str) -> RedactionResult:
    """Replace every PII match in *text* with the redaction marker."""

    redacted = text
    for _category, pattern, replacement in PII_MATCHERS:
        redacted = pattern.sub(replacement, redacted)
    return RedactionResult(redacted_text=redacted, contained_pii=redacted != text)


def redact_optional(text: Optional[str]) -> Optional[RedactionResult]:
    """Like :func:`redact` but passes ``None`` through for missing fields."""

    if text is None:
        return None
    return redact(text)
