"""Configuration constants for the reporting pipeline."""
from __future__ import annotations

import os

# Records submitted within this many days count as "recent"
RECENT_WINDOW_DAYS: int = int(os.getenv("REPORT_RECENT_WINDOW_DAYS", "30"))

# Number of calendar days in the trend series
TREND_DAYS: int = 7

# Decimal places used when presenting averages
ROUND_DIGITS: int = int(os.getenv("REPORT_ROUND_DIGITS", "2"))

# Maximum number of emojis displayed in the sentiment bar
MAX_EMOJI_BAR: int = int(os.getenv("REPORT_MAX_EMOJI_BAR", "20"))

# Default page size for the feedback listing
DEFAULT_PAGE_SIZE: int = int(os.getenv("REPORT_DEFAULT_PAGE_SIZE", "10"))
