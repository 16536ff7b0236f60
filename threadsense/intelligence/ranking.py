"""
Thread Ranking — ThreadSense

Two cross-thread scores:

Importance (identify the threads that need attention)
    Weighted sum over opt-in criteria. The four basic criteria sum to
    at most 1.0; the three enhancement criteria (tfidf_relevance,
    time_decay, engagement) need a RankingContext and push the total
    past 1.0 when all are enabled. The sum is not renormalized.

Relatedness (link a thread to similar ones)
    Weighted sum of keyword overlap, participant overlap, temporal
    proximity and a coarse topic similarity. Identical threads score
    exactly 1.0.
"""

import logging
import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from threadsense.intelligence.action_items import (
    DEFAULT_ACTION_ITEM_CONFIG,
    ActionItemConfig,
    extract_action_items_from_messages,
)
from threadsense.intelligence.relevance import (
    DEFAULT_RELEVANCE_CONFIG,
    RelevanceConfig,
    RelevanceScorer,
)
from threadsense.intelligence.timeline import parse_timestamp
from threadsense.intelligence.urgency import (
    DEFAULT_URGENCY_CONFIG,
    LEVEL_CRITICAL,
    LEVEL_HIGH,
    LEVEL_MEDIUM,
    UrgencyConfig,
    calculate_urgency_score,
)
from threadsense.models import ConversationThread, Message

logger = logging.getLogger(__name__)


# =============================================================================
# CRITERIA & WEIGHTS
# =============================================================================

PARTICIPANT_COUNT = "participant_count"
MESSAGE_COUNT = "message_count"
URGENCY_KEYWORDS = "urgency_keywords"
MENTION_FREQUENCY = "mention_frequency"
TFIDF_RELEVANCE = "tfidf_relevance"
TIME_DECAY = "time_decay"
ENGAGEMENT = "engagement"

BASIC_CRITERIA = (PARTICIPANT_COUNT, MESSAGE_COUNT, URGENCY_KEYWORDS, MENTION_FREQUENCY)
ENHANCED_CRITERIA = (TFIDF_RELEVANCE, TIME_DECAY, ENGAGEMENT)
IMPORTANCE_CRITERIA = BASIC_CRITERIA + ENHANCED_CRITERIA

IMPORTANCE_WEIGHTS = {
    PARTICIPANT_COUNT: 0.2,  # saturates at 10 participants
    MESSAGE_COUNT: 0.3,  # saturates at 20 messages
    MENTION_FREQUENCY: 0.1,  # saturates at 5 mentions
    TFIDF_RELEVANCE: 0.2,
    TIME_DECAY: 0.15,
    ENGAGEMENT: 0.25,
}

URGENCY_LEVEL_POINTS = {
    LEVEL_CRITICAL: 0.4,
    LEVEL_HIGH: 0.3,
    LEVEL_MEDIUM: 0.2,
}
URGENCY_LEVEL_DEFAULT_POINTS = 0.1

PARTICIPANT_SATURATION = 10
MESSAGE_SATURATION = 20
MENTION_SATURATION = 5

KEYWORD_OVERLAP = "keyword_overlap"
PARTICIPANT_OVERLAP = "participant_overlap"
TEMPORAL_PROXIMITY = "temporal_proximity"
TOPIC_SIMILARITY = "topic_similarity"

RELATIONSHIP_TYPES = (KEYWORD_OVERLAP, PARTICIPANT_OVERLAP, TEMPORAL_PROXIMITY, TOPIC_SIMILARITY)

RELATEDNESS_WEIGHTS = {
    KEYWORD_OVERLAP: 0.4,
    PARTICIPANT_OVERLAP: 0.3,
    TEMPORAL_PROXIMITY: 0.2,
    TOPIC_SIMILARITY: 0.1,
}

TEMPORAL_WINDOW_SECONDS = 7 * 24 * 60 * 60
TEMPORAL_DECAY_SECONDS = TEMPORAL_WINDOW_SECONDS / 3
MIN_OVERLAP_WORD_LENGTH = 4

RANKING_MENTION_RE = re.compile(r"<@[UW][A-Z0-9]+>")
UNKNOWN_PARTICIPANT = "unknown"


@dataclass(frozen=True)
class RankingConfig:
    importance_threshold: float = 0.7
    importance_limit: int = 10
    similarity_threshold: float = 0.3
    max_related_results: int = 10


DEFAULT_RANKING_CONFIG = RankingConfig()


@dataclass(frozen=True)
class RankingContext:
    """Search query and reference time that unlock the enhancement criteria."""

    search_query: str = ""
    reference_time: float | None = None  # epoch seconds; None means wall clock


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class ThreadProfile:
    """The per-thread facts that ranking and relatedness compare."""

    thread_ts: str
    message_count: int
    participants: set[str]
    words: set[str]
    urgency_level: str
    action_item_count: int
    anchor_time: float | None


@dataclass
class ThreadImportance:
    thread_ts: str
    score: float
    breakdown: dict[str, float] = field(default_factory=dict)
    urgency_level: str = "low"
    message_count: int = 0
    participant_count: int = 0
    action_item_count: int = 0

    def to_dict(self) -> dict:
        return {
            "thread_ts": self.thread_ts,
            "score": round(self.score, 3),
            "breakdown": {k: round(v, 3) for k, v in self.breakdown.items()},
            "urgency_level": self.urgency_level,
            "message_count": self.message_count,
            "participant_count": self.participant_count,
            "action_item_count": self.action_item_count,
        }


@dataclass
class RelatedThread:
    thread_ts: str
    score: float
    breakdown: dict[str, float] = field(default_factory=dict)
    urgency_level: str = "low"
    message_count: int = 0
    action_item_count: int = 0

    def to_dict(self) -> dict:
        return {
            "thread_ts": self.thread_ts,
            "score": round(self.score, 3),
            "breakdown": {k: round(v, 3) for k, v in self.breakdown.items()},
            "urgency_level": self.urgency_level,
            "message_count": self.message_count,
            "action_item_count": self.action_item_count,
        }


# =============================================================================
# HELPERS
# =============================================================================


def _overlap_words(messages: Sequence[Message]) -> set[str]:
    text = " ".join(m.text or "" for m in messages).lower()
    return {w for w in text.split() if len(w) >= MIN_OVERLAP_WORD_LENGTH}


def _participants(messages: Sequence[Message]) -> set[str]:
    return {m.user or UNKNOWN_PARTICIPANT for m in messages}


def _anchor_time(thread: ConversationThread) -> float | None:
    anchor = parse_timestamp(thread.thread_ts)
    if anchor is not None:
        return anchor
    for message in thread.messages:
        anchor = parse_timestamp(message.ts)
        if anchor is not None:
            return anchor
    return None


def jaccard(a: set, b: set) -> float:
    """|a ∩ b| / |a ∪ b|; 0 when both are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def count_mentions(messages: Iterable[Message]) -> int:
    return sum(len(RANKING_MENTION_RE.findall(m.text or "")) for m in messages)


def build_thread_profile(
    thread: ConversationThread,
    urgency_config: UrgencyConfig = DEFAULT_URGENCY_CONFIG,
    action_config: ActionItemConfig = DEFAULT_ACTION_ITEM_CONFIG,
) -> ThreadProfile:
    messages = thread.messages
    return ThreadProfile(
        thread_ts=thread.thread_ts,
        message_count=len(messages),
        participants={m.user for m in messages if m.user},
        words=_overlap_words(messages),
        urgency_level=calculate_urgency_score(messages, urgency_config).level,
        action_item_count=len(
            extract_action_items_from_messages(messages, action_config).action_items
        ),
        anchor_time=_anchor_time(thread),
    )


# =============================================================================
# IMPORTANCE
# =============================================================================


def resolve_importance_criteria(
    criteria: Sequence[str] | None,
    context: RankingContext | None,
) -> tuple[str, ...]:
    """
    Criteria that will actually be scored.

    None selects the basic criteria, plus the enhancement criteria when
    a context is given. Enhancement criteria are dropped without a
    context. Unknown names raise ValueError.
    """
    if criteria is None:
        selected = BASIC_CRITERIA + (ENHANCED_CRITERIA if context else ())
    else:
        unknown = [c for c in criteria if c not in IMPORTANCE_CRITERIA]
        if unknown:
            raise ValueError(f"Unknown importance criteria: {', '.join(unknown)}")
        selected = tuple(dict.fromkeys(criteria))

    if context is None:
        selected = tuple(c for c in selected if c not in ENHANCED_CRITERIA)
    return selected


def compute_thread_importance(
    thread: ConversationThread,
    criteria: Sequence[str] | None = None,
    context: RankingContext | None = None,
    urgency_config: UrgencyConfig = DEFAULT_URGENCY_CONFIG,
    action_config: ActionItemConfig = DEFAULT_ACTION_ITEM_CONFIG,
    relevance_config: RelevanceConfig = DEFAULT_RELEVANCE_CONFIG,
) -> ThreadImportance:
    """Importance score of one thread with its per-criterion breakdown."""
    messages = thread.messages
    selected = resolve_importance_criteria(criteria, context)
    urgency_level = calculate_urgency_score(messages, urgency_config).level
    participant_count = len(_participants(messages))
    breakdown: dict[str, float] = {}

    if PARTICIPANT_COUNT in selected:
        breakdown[PARTICIPANT_COUNT] = (
            min(participant_count / PARTICIPANT_SATURATION, 1.0)
            * IMPORTANCE_WEIGHTS[PARTICIPANT_COUNT]
        )

    if MESSAGE_COUNT in selected:
        breakdown[MESSAGE_COUNT] = (
            min(len(messages) / MESSAGE_SATURATION, 1.0) * IMPORTANCE_WEIGHTS[MESSAGE_COUNT]
        )

    if URGENCY_KEYWORDS in selected:
        breakdown[URGENCY_KEYWORDS] = URGENCY_LEVEL_POINTS.get(
            urgency_level, URGENCY_LEVEL_DEFAULT_POINTS
        )

    if MENTION_FREQUENCY in selected:
        breakdown[MENTION_FREQUENCY] = (
            min(count_mentions(messages) / MENTION_SATURATION, 1.0)
            * IMPORTANCE_WEIGHTS[MENTION_FREQUENCY]
        )

    if context is not None and any(c in selected for c in ENHANCED_CRITERIA):
        breakdown.update(_enhanced_criteria(messages, selected, context, relevance_config))

    return ThreadImportance(
        thread_ts=thread.thread_ts,
        score=sum(breakdown.values()),
        breakdown=breakdown,
        urgency_level=urgency_level,
        message_count=len(messages),
        participant_count=participant_count,
        action_item_count=len(
            extract_action_items_from_messages(messages, action_config).action_items
        ),
    )


def _enhanced_criteria(
    messages: Sequence[Message],
    selected: Sequence[str],
    context: RankingContext,
    relevance_config: RelevanceConfig,
) -> dict[str, float]:
    scorer = RelevanceScorer(relevance_config)
    values: dict[str, float] = {}
    if not messages:
        return {c: 0.0 for c in ENHANCED_CRITERIA if c in selected}

    if TFIDF_RELEVANCE in selected:
        scores = scorer.calculate_tfidf_scores(messages, context.search_query)
        values[TFIDF_RELEVANCE] = sum(scores) / len(scores) * IMPORTANCE_WEIGHTS[TFIDF_RELEVANCE]

    if TIME_DECAY in selected:
        timed = [m for m in messages if parse_timestamp(m.ts) is not None]
        decay = 0.0
        if timed:
            latest = max(timed, key=lambda m: parse_timestamp(m.ts))
            decay = scorer.calculate_time_decay(latest.ts, context.reference_time)
        values[TIME_DECAY] = decay * IMPORTANCE_WEIGHTS[TIME_DECAY]

    if ENGAGEMENT in selected:
        engagement = sum(scorer.calculate_engagement_score(m) for m in messages) / len(messages)
        values[ENGAGEMENT] = engagement * IMPORTANCE_WEIGHTS[ENGAGEMENT]

    return values


# =============================================================================
# RELATEDNESS
# =============================================================================


def resolve_relationship_types(relationship_types: Sequence[str] | None) -> tuple[str, ...]:
    if relationship_types is None:
        return RELATIONSHIP_TYPES
    unknown = [t for t in relationship_types if t not in RELATIONSHIP_TYPES]
    if unknown:
        raise ValueError(f"Unknown relationship types: {', '.join(unknown)}")
    return tuple(dict.fromkeys(relationship_types))


def temporal_proximity(reference_time: float | None, candidate_time: float | None) -> float:
    """exp(-dt / (7d / 3)) for threads less than a week apart, else 0."""
    if reference_time is None or candidate_time is None:
        return 0.0
    delta = abs(reference_time - candidate_time)
    if delta >= TEMPORAL_WINDOW_SECONDS:
        return 0.0
    return math.exp(-delta / TEMPORAL_DECAY_SECONDS)


def topic_similarity(reference: ThreadProfile, candidate: ThreadProfile) -> float:
    """
    Coarse shape similarity in [0, 1]:
    0.5 for equal urgency level, 0.3 scaled by message-count similarity,
    0.2 when both do or both do not contain action items.
    """
    score = 0.0
    if reference.urgency_level == candidate.urgency_level:
        score += 0.5

    longest = max(reference.message_count, candidate.message_count)
    if longest == 0:
        score += 0.3
    else:
        score += 0.3 * (1 - abs(reference.message_count - candidate.message_count) / longest)

    if (reference.action_item_count > 0) == (candidate.action_item_count > 0):
        score += 0.2

    return score


def compute_relatedness(
    reference: ThreadProfile,
    candidate: ThreadProfile,
    relationship_types: Sequence[str] | None = None,
) -> RelatedThread:
    """Similarity of candidate to reference with the per-signal breakdown."""
    selected = resolve_relationship_types(relationship_types)
    breakdown: dict[str, float] = {}

    if KEYWORD_OVERLAP in selected:
        breakdown[KEYWORD_OVERLAP] = (
            jaccard(reference.words, candidate.words) * RELATEDNESS_WEIGHTS[KEYWORD_OVERLAP]
        )

    if PARTICIPANT_OVERLAP in selected:
        breakdown[PARTICIPANT_OVERLAP] = (
            jaccard(reference.participants, candidate.participants)
            * RELATEDNESS_WEIGHTS[PARTICIPANT_OVERLAP]
        )

    if TEMPORAL_PROXIMITY in selected:
        breakdown[TEMPORAL_PROXIMITY] = (
            temporal_proximity(reference.anchor_time, candidate.anchor_time)
            * RELATEDNESS_WEIGHTS[TEMPORAL_PROXIMITY]
        )

    if TOPIC_SIMILARITY in selected:
        breakdown[TOPIC_SIMILARITY] = (
            topic_similarity(reference, candidate) * RELATEDNESS_WEIGHTS[TOPIC_SIMILARITY]
        )

    return RelatedThread(
        thread_ts=candidate.thread_ts,
        score=sum(breakdown.values()),
        breakdown=breakdown,
        urgency_level=candidate.urgency_level,
        message_count=candidate.message_count,
        action_item_count=candidate.action_item_count,
    )
