"""Runtime configuration loaded from environment variables.

Call :func:`load_settings` after ``dotenv.load_dotenv()`` so values from a
local ``.env`` file are visible.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_HF_SENTIMENT_URL = (
    "https://router.huggingface.co/hf-inference/models/"
    "cardiffnlp/twitter-roberta-base-sentiment-latest"
)
DEFAULT_OPENAI_SENTIMENT_MODEL = "gpt-4.1"

PROVIDER_HUGGINGFACE = "huggingface"
PROVIDER_OPENAI = "openai"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the environment-driven configuration."""

    hf_token: Optional[str] = None
    hf_sentiment_url: str = DEFAULT_HF_SENTIMENT_URL
    sentiment_provider: str = PROVIDER_HUGGINGFACE
    openai_api_key: Optional[str] = None
    openai_sentiment_model: str = DEFAULT_OPENAI_SENTIMENT_MODEL
    sentiment_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    max_stored_feedback: Optional[int] = None


def _get_optional_positive_int(name: str) -> Optional[int]:
    raw_val = os.getenv(name)
    if not raw_val:
        return None
    try:
        parsed = int(raw_val)
    except ValueError:
        logger.warning("Invalid %s value '%s'; must be integer.", name, raw_val)
        return None
    if parsed <= 0:
        logger.warning("Ignoring %s=%s (must be positive int)", name, raw_val)
        return None
    return parsed


def _get_float(name: str, default: float) -> float:
    raw_val = os.getenv(name)
    if not raw_val:
        return default
    try:
        return float(raw_val)
    except ValueError:
        logger.warning("Invalid %s value '%s'; using %s.", name, raw_val, default)
        return default


def load_settings() -> Settings:
    """Build :class:`Settings` from the current process environment."""

    return Settings(
        hf_token=os.getenv("HF_TOKEN") or os.getenv("HUGGINGFACE_API_KEY") or None,
        hf_sentiment_url=os.getenv("HF_SENTIMENT_URL", DEFAULT_HF_SENTIMENT_URL),
        sentiment_provider=os.getenv(
            "SENTIMENT_PROVIDER", PROVIDER_HUGGINGFACE
        ).lower(),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_sentiment_model=os.getenv(
            "OPENAI_SENTIMENT_MODEL", DEFAULT_OPENAI_SENTIMENT_MODEL
        ),
        sentiment_timeout_seconds=_get_float("SENTIMENT_TIMEOUT_SECONDS", 10.0),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_stored_feedback=_get_optional_positive_int("MAX_STORED_FEEDBACK"),
    )


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging the same way for every entry point."""

    logging.basicConfig(format=LOG_FORMAT, level=level)
