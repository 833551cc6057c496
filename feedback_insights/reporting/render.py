"""Render the analytics dashboard summary using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from feedback_insights.reporting.context import build_dashboard_context
from feedback_insights.reporting.models import AnalyticsSnapshot

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Markdown output; HTML escaping would mangle apostrophes and quotes.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_dashboard(snapshot: AnalyticsSnapshot) -> str:
    """Render a markdown dashboard summary from an :class:`AnalyticsSnapshot`."""

    context = build_dashboard_context(snapshot)
    template = _env.get_template("analytics.md.j2")
    text = template.render(**context.to_dict())
    logger.debug("Dashboard rendered for %s len=%d", context.date, len(text))
    return text
