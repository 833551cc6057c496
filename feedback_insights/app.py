"""Application wiring for the feedback pipeline.

``create_app`` loads ``.env``, configures logging, picks the sentiment
strategy from the available credentials and returns a :class:`FeedbackApp`
whose handlers a web framework (or the CLI in ``main.py``) can call.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from dotenv import load_dotenv

from feedback_insights import hf_client, openai_client
from feedback_insights.analysis.sentiment import (
    LocalFallbackStrategy,
    RemoteClassifierStrategy,
    SentimentScorer,
    SentimentStrategy,
)
from feedback_insights.config import (
    PROVIDER_OPENAI,
    Settings,
    configure_logging,
    load_settings,
)
from feedback_insights.exceptions import OpenAIClientError
from feedback_insights.handlers import FeedbackHandlers
from feedback_insights.store import Department, FeedbackStore, InMemoryFeedbackStore
from feedback_insights.submission import SubmissionProcessor

logger = logging.getLogger(__name__)


def build_strategy(settings: Settings) -> SentimentStrategy:
    """Return the remote strategy when credentials exist, else the fallback."""

    if settings.sentiment_provider == PROVIDER_OPENAI and settings.openai_api_key:
        try:
            predict = openai_client.make_predictor(
                api_key=settings.openai_api_key,
                model=settings.openai_sentiment_model,
                timeout=settings.sentiment_timeout_seconds,
            )
            return RemoteClassifierStrategy(predict, name="openai")
        except (OpenAIClientError, ImportError) as exc:
            logger.warning("OpenAI sentiment unavailable, falling back: %s", exc)
            return LocalFallbackStrategy()

    if settings.hf_token:
        predict = hf_client.make_predictor(
            token=settings.hf_token,
            url=settings.hf_sentiment_url,
            timeout=settings.sentiment_timeout_seconds,
        )
        return RemoteClassifierStrategy(predict, name="huggingface")

    return LocalFallbackStrategy()


def build_scorer(settings: Settings) -> SentimentScorer:
    scorer = SentimentScorer(build_strategy(settings))
    logger.info("Sentiment strategy: %s", scorer.strategy_name)
    return scorer


@dataclass
class FeedbackApp:
    """Fully wired pipeline: settings, store, processor and handlers."""

    settings: Settings
    store: FeedbackStore
    processor: SubmissionProcessor
    handlers: FeedbackHandlers


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[FeedbackStore] = None,
    departments: Optional[Iterable[Department]] = None,
) -> FeedbackApp:
    """Build a :class:`FeedbackApp`.

    Args:
        settings: Explicit settings; loaded from the environment (and a
            ``.env`` file) when omitted.
        store: Persistence collaborator; an in-memory store by default.
        departments: Seed departments for the default in-memory store.
    """

    if settings is None:
        load_dotenv()
        settings = load_settings()
    configure_logging(settings.log_level)

    if store is None:
        store = InMemoryFeedbackStore(
            departments=list(departments or []),
            max_records=settings.max_stored_feedback,
        )

    processor = SubmissionProcessor(build_scorer(settings))
    handlers = FeedbackHandlers(processor, store)
    return FeedbackApp(
        settings=settings, store=store, processor=processor, handlers=handlers
    )
