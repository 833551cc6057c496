"""Keyword and sentiment word lists used by the aspect analyzer.

Terms are matched as lowercase substrings, so stems such as ``"frustrat"``
cover several inflections. Padded terms such as ``" but "`` only match as
whole words.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping

WORK_ENVIRONMENT = "work_environment"
MANAGEMENT = "management"
COMPENSATION = "compensation"
GROWTH_OPPORTUNITIES = "growth_opportunities"

ASPECT_KEYS = (WORK_ENVIRONMENT, MANAGEMENT, COMPENSATION, GROWTH_OPPORTUNITIES)


@dataclass(frozen=True)
class Lexicon:
    """Immutable bundle of aspect keywords and generic sentiment words."""

    aspect_keywords: Mapping[str, FrozenSet[str]]
    positive_words: FrozenSet[str]
    negative_words: FrozenSet[str]


DEFAULT_LEXICON = Lexicon(
    aspect_keywords=MappingProxyType(
        {
            WORK_ENVIRONMENT: frozenset(
                {
                    "work environment",
                    "environment",
                    "office",
                    "workplace",
                    "culture",
                    "atmosphere",
                    "team",
                    "colleague",
                    "coworker",
                    "co-worker",
                    "remote",
                    "hybrid",
                    "work-life",
                    "work life",
                    "balance",
                    "workload",
                    "desk",
                }
            ),
            MANAGEMENT: frozenset(
                {
                    "management",
                    "manager",
                    "boss",
                    "supervisor",
                    "leadership",
                    "leader",
                    "director",
                    "executive",
                    "team lead",
                    "communication",
                    "decision",
                    "micromanag",
                }
            ),
            COMPENSATION: frozenset(
                {
                    "compensation",
                    "salary",
                    "pay",
                    "paid",
                    "wage",
                    "bonus",
                    "benefit",
                    "raise",
                    "pension",
                    "insurance",
                    "stock",
                    "equity",
                    "overtime",
                }
            ),
            GROWTH_OPPORTUNITIES: frozenset(
                {
                    "growth",
                    "career",
                    "promotion",
                    "promoted",
                    "training",
                    "learning",
                    "develop",
                    "opportunit",
                    "mentor",
                    "skill",
                    "advancement",
                    "certification",
                    "course",
                }
            ),
        }
    ),
    positive_words=frozenset(
        {
            "good",
            "great",
            "excellent",
            "amazing",
            "awesome",
            "fantastic",
            "wonderful",
            "love",
            "enjoy",
            "happy",
            "helpful",
            "supportive",
            "friendly",
            "flexible",
            "fair",
            "appreciate",
            "satisfied",
            "rewarding",
            "positive",
            "best",
        }
    ),
    negative_words=frozenset(
        {
            "bad",
            "poor",
            "terrible",
            "awful",
            "horrible",
            "worst",
            "hate",
            "toxic",
            "stress",
            "frustrat",
            "anger",
            "angry",
            "disappoint",
            "unfair",
            "underpaid",
            "overworked",
            "lack",
            "unhappy",
            "negative",
            "ignored",
            # contrast markers usually introduce the complaint
            " but ",
            "however",
        }
    ),
)
