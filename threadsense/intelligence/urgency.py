"""
Urgency & Importance Scoring — ThreadSense

Keyword driven scores for a single thread:
- urgency: how soon someone should look (0-1, clamped)
- importance: how much is at stake (0-1, clamped)
- priority: 0.6 * urgency + 0.4 * importance

Keyword hits are counted per occurrence, so a thread that says "urgent"
five times scores higher than one that says it once.
"""

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from threadsense.models import Message
from threadsense.text.language import is_japanese_char

logger = logging.getLogger(__name__)


LEVEL_LOW = "low"
LEVEL_MEDIUM = "medium"
LEVEL_HIGH = "high"
LEVEL_CRITICAL = "critical"


@dataclass(frozen=True)
class UrgencyConfig:
    urgent_keywords: tuple[str, ...] = (
        "urgent",
        "asap",
        "immediately",
        "emergency",
        "critical",
        "now",
        "today",
        "deadline",
        "blocker",
        "blocking",
        "priority",
        "rush",
        "fast",
        "quick",
        "hurry",
        "緊急",
        "至急",
        "急ぎ",
        "すぐ",
        "今すぐ",
    )
    keyword_weight: float = 0.2
    medium_message_threshold: int = 10
    high_message_threshold: int = 20
    message_count_weight: float = 0.3


@dataclass(frozen=True)
class ImportanceConfig:
    important_keywords: tuple[str, ...] = (
        "decision",
        "approve",
        "budget",
        "launch",
        "release",
        "client",
        "customer",
        "revenue",
        "milestone",
        "strategic",
        "executive",
        "board",
        "ceo",
        "director",
        "manager",
        "contract",
        "agreement",
        "legal",
        "compliance",
        "audit",
        "決定",
        "承認",
        "予算",
        "リリース",
        "クライアント",
        "顧客",
        "売上",
        "マイルストーン",
        "戦略的",
        "重要",
    )
    participant_weight: float = 0.05
    message_weight: float = 0.02
    keyword_weight: float = 0.1
    max_participant_score: float = 0.3
    max_message_score: float = 0.4


DEFAULT_URGENCY_CONFIG = UrgencyConfig()
DEFAULT_IMPORTANCE_CONFIG = ImportanceConfig()


@dataclass
class UrgencyScore:
    score: float
    urgent_keywords: list[str] = field(default_factory=list)
    message_count_factor: float = 0.0

    @property
    def level(self) -> str:
        return get_urgency_level(self.score)

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 3),
            "level": self.level,
            "urgent_keywords": self.urgent_keywords,
            "message_count_factor": round(self.message_count_factor, 3),
        }


@dataclass
class ImportanceScore:
    score: float
    participant_factor: float = 0.0
    message_factor: float = 0.0
    keyword_factor: float = 0.0
    important_keywords: list[str] = field(default_factory=list)

    @property
    def level(self) -> str:
        return get_importance_level(self.score)

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 3),
            "level": self.level,
            "participant_factor": round(self.participant_factor, 3),
            "message_factor": round(self.message_factor, 3),
            "keyword_factor": round(self.keyword_factor, 3),
            "important_keywords": self.important_keywords,
        }


# =============================================================================
# KEYWORD COUNTING
# =============================================================================


def extract_combined_text(messages: Sequence[Message]) -> str:
    """All message bodies joined by spaces, lowercased."""
    return " ".join(m.text or "" for m in messages).lower().strip()


def _keyword_pattern(keyword: str) -> re.Pattern:
    lower = re.escape(keyword.lower())
    if is_japanese_char(keyword):
        return re.compile(lower)
    return re.compile(rf"\b{lower}\b", re.ASCII)


def count_keywords(text: str, keywords: Iterable[str]) -> dict[str, int]:
    """Occurrences of each keyword found in text; absent keywords are omitted."""
    counts: dict[str, int] = {}
    for keyword in keywords:
        hits = len(_keyword_pattern(keyword).findall(text))
        if hits:
            counts[keyword] = hits
    return counts


def calculate_keyword_score(keyword_counts: dict[str, int], weight: float) -> float:
    return sum(count * weight for count in keyword_counts.values())


def calculate_message_count_factor(message_count: int, config: UrgencyConfig) -> float:
    """Busy threads feel urgent: +weight above the medium threshold, 2x above high."""
    if message_count > config.high_message_threshold:
        return config.message_count_weight * 2
    if message_count > config.medium_message_threshold:
        return config.message_count_weight
    return 0.0


# =============================================================================
# SCORES
# =============================================================================


def calculate_urgency_score(
    messages: Sequence[Message],
    config: UrgencyConfig = DEFAULT_URGENCY_CONFIG,
) -> UrgencyScore:
    text = extract_combined_text(messages)
    keyword_counts = count_keywords(text, config.urgent_keywords)
    keyword_score = calculate_keyword_score(keyword_counts, config.keyword_weight)
    message_count_factor = calculate_message_count_factor(len(messages), config)

    return UrgencyScore(
        score=min(1.0, keyword_score + message_count_factor),
        urgent_keywords=list(keyword_counts),
        message_count_factor=message_count_factor,
    )


def calculate_importance_score(
    messages: Sequence[Message],
    participant_count: int | None = None,
    config: ImportanceConfig = DEFAULT_IMPORTANCE_CONFIG,
) -> ImportanceScore:
    """
    Keyword importance of a thread.

    `participant_count` defaults to the number of distinct authors in
    `messages`.
    """
    if participant_count is None:
        participant_count = len({m.user for m in messages if m.user})

    text = extract_combined_text(messages)
    keyword_counts = count_keywords(text, config.important_keywords)

    participant_factor = min(config.max_participant_score, participant_count * config.participant_weight)
    message_factor = min(config.max_message_score, len(messages) * config.message_weight)
    keyword_factor = calculate_keyword_score(keyword_counts, config.keyword_weight)

    return ImportanceScore(
        score=min(1.0, participant_factor + message_factor + keyword_factor),
        participant_factor=participant_factor,
        message_factor=message_factor,
        keyword_factor=keyword_factor,
        important_keywords=list(keyword_counts),
    )


def get_urgency_level(score: float) -> str:
    if score >= 0.8:
        return LEVEL_CRITICAL
    if score >= 0.6:
        return LEVEL_HIGH
    if score >= 0.3:
        return LEVEL_MEDIUM
    return LEVEL_LOW


def get_importance_level(score: float) -> str:
    if score >= 0.8:
        return LEVEL_CRITICAL
    if score >= 0.6:
        return LEVEL_HIGH
    if score >= 0.4:
        return LEVEL_MEDIUM
    return LEVEL_LOW


def calculate_priority_score(
    urgency: UrgencyScore,
    importance: ImportanceScore,
    urgency_weight: float = 0.6,
    importance_weight: float = 0.4,
) -> float:
    return urgency.score * urgency_weight + importance.score * importance_weight


def is_thread_urgent(urgency: UrgencyScore, threshold: float = 0.5) -> bool:
    return urgency.score >= threshold


def is_thread_important(importance: ImportanceScore, threshold: float = 0.4) -> bool:
    return importance.score >= threshold


def get_thread_priority(urgency: UrgencyScore, importance: ImportanceScore) -> str:
    """
    Classify a thread as critical / high / normal / low.

    Urgent AND important is always critical; either one alone is at
    least high.
    """
    urgent = is_thread_urgent(urgency)
    important = is_thread_important(importance)
    priority = calculate_priority_score(urgency, importance)

    if priority >= 0.8 or (urgent and important):
        return "critical"
    if priority >= 0.6 or urgent or important:
        return "high"
    if priority >= 0.3:
        return "normal"
    return "low"
