"""
Thread Intelligence Engine for ThreadSense.

Single entry point that runs every analyzer over a thread and
assembles the results, plus the two cross-thread operations used when
scanning a channel: ranking threads by importance and finding threads
related to a reference thread.

Usage:
    from threadsense.intelligence.engine import perform_comprehensive_analysis
    analysis = perform_comprehensive_analysis(messages)

    from threadsense.intelligence.engine import identify_important_threads
    result = identify_important_threads(threads, threshold=0.5)
"""

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from threadsense.contracts import enforce_invariants_strict
from threadsense.intelligence.action_items import (
    ActionItemExtractionResult,
    extract_action_items_from_messages,
)
from threadsense.intelligence.decisions import DecisionExtractionResult, DecisionExtractor
from threadsense.intelligence.keywords import TopicExtractionResult, extract_topics_from_thread
from threadsense.intelligence.ranking import (
    RankingContext,
    RelatedThread,
    ThreadImportance,
    build_thread_profile,
    compute_relatedness,
    compute_thread_importance,
    resolve_importance_criteria,
    resolve_relationship_types,
)
from threadsense.intelligence.sentiment import SentimentAnalysisResult, analyze_sentiment
from threadsense.intelligence.timeline import (
    ActivityPeriod,
    ConversationGap,
    TimelineAnalysis,
    UserParticipationStats,
    build_thread_timeline,
    find_conversation_gaps,
    find_high_activity_periods,
    get_user_participation_stats,
)
from threadsense.intelligence.urgency import (
    ImportanceScore,
    UrgencyScore,
    calculate_importance_score,
    calculate_urgency_score,
)
from threadsense.models import ConversationThread, Message, coerce_messages, coerce_threads
from threadsense.observability import AnalysisContext
from threadsense.settings import DEFAULT_ANALYSIS_CONFIG, AnalysisConfig
from threadsense.text.language import count_words_in_text

logger = logging.getLogger(__name__)


# =============================================================================
# RESULTS
# =============================================================================


@dataclass
class AnalysisMetadata:
    analysis_timestamp: str
    generation_time_seconds: float
    message_count: int
    participant_count: int
    word_count: int
    has_multilingual_content: bool
    max_topics: int

    def to_dict(self) -> dict:
        return {
            "analysis_timestamp": self.analysis_timestamp,
            "generation_time_seconds": round(self.generation_time_seconds, 4),
            "message_count": self.message_count,
            "participant_count": self.participant_count,
            "word_count": self.word_count,
            "has_multilingual_content": self.has_multilingual_content,
            "max_topics": self.max_topics,
        }


@dataclass
class ComprehensiveAnalysis:
    sentiment: SentimentAnalysisResult
    topics: TopicExtractionResult
    urgency: UrgencyScore
    importance: ImportanceScore
    action_items: ActionItemExtractionResult
    timeline: TimelineAnalysis
    activity_periods: list[ActivityPeriod]
    conversation_gaps: list[ConversationGap]
    participation: UserParticipationStats
    decisions: DecisionExtractionResult
    metadata: AnalysisMetadata

    def to_dict(self) -> dict:
        return {
            "sentiment": self.sentiment.to_dict(),
            "topics": self.topics.to_dict(),
            "urgency": self.urgency.to_dict(),
            "importance": self.importance.to_dict(),
            "action_items": self.action_items.to_dict(),
            "timeline": self.timeline.to_dict(),
            "activity_periods": [p.to_dict() for p in self.activity_periods],
            "conversation_gaps": [g.to_dict() for g in self.conversation_gaps],
            "participation": self.participation.to_dict(),
            "decisions": self.decisions.to_dict(),
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class QuickAnalysis:
    sentiment: SentimentAnalysisResult
    topic_count: int
    urgency_level: str
    action_item_count: int
    duration: float  # minutes

    def to_dict(self) -> dict:
        return {
            "sentiment": self.sentiment.to_dict(),
            "topic_count": self.topic_count,
            "urgency_level": self.urgency_level,
            "action_item_count": self.action_item_count,
            "duration": round(self.duration, 3),
        }


@dataclass
class ImportantThreadsResult:
    important_threads: list[ThreadImportance] = field(default_factory=list)
    total: int = 0  # threads at or above threshold, before the limit
    criteria: list[str] = field(default_factory=list)
    threshold: float = 0.0

    def to_dict(self) -> dict:
        return {
            "important_threads": [t.to_dict() for t in self.important_threads],
            "total": self.total,
            "criteria": self.criteria,
            "threshold": self.threshold,
        }


@dataclass
class RelatedThreadsResult:
    related_threads: list[RelatedThread] = field(default_factory=list)
    total: int = 0  # candidates at or above threshold, before the cap
    reference_thread: str = ""
    relationship_types: list[str] = field(default_factory=list)
    similarity_threshold: float = 0.0

    def to_dict(self) -> dict:
        return {
            "related_threads": [t.to_dict() for t in self.related_threads],
            "total": self.total,
            "reference_thread": self.reference_thread,
            "relationship_types": self.relationship_types,
            "similarity_threshold": self.similarity_threshold,
        }


# =============================================================================
# SINGLE-THREAD ANALYSIS
# =============================================================================


def perform_comprehensive_analysis(
    messages: Iterable[Message | Mapping[str, Any]],
    participant_count: int | None = None,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> ComprehensiveAnalysis:
    """
    Run every analyzer over one thread.

    Pipeline:
    1. Coerce input records to Message
    2. Sentiment, topics, urgency, importance, action items
    3. Timeline, activity bursts, silences, per-user participation
    4. Decisions
    5. Check the assembled result against the analysis invariants

    Args:
        messages: Thread messages in chronological order
        participant_count: Known participant count; defaults to distinct authors

    Raises:
        pydantic.ValidationError: If a raw record cannot be read as a Message
        InvariantViolation: If the assembled result is inconsistent
    """
    start_time = time.time()
    thread_messages = coerce_messages(messages)

    with AnalysisContext(operation="comprehensive_analysis"):
        if participant_count is None:
            participant_count = len({m.user for m in thread_messages if m.user})

        sentiment = analyze_sentiment(thread_messages, config.sentiment)
        topics = extract_topics_from_thread(thread_messages, config.topics)
        urgency = calculate_urgency_score(thread_messages, config.urgency)
        importance = calculate_importance_score(
            thread_messages, participant_count, config.importance
        )
        action_items = extract_action_items_from_messages(thread_messages, config.action_items)

        timeline = build_thread_timeline(thread_messages)
        activity_periods = find_high_activity_periods(
            timeline.events,
            config.timeline.window_minutes,
            config.timeline.min_messages,
        )
        gaps = find_conversation_gaps(timeline.events, config.timeline.min_gap_minutes)
        participation = get_user_participation_stats(timeline.events)

        decisions = DecisionExtractor.from_config(config.decisions).extract_decisions(
            thread_messages
        )

        analysis = ComprehensiveAnalysis(
            sentiment=sentiment,
            topics=topics,
            urgency=urgency,
            importance=importance,
            action_items=action_items,
            timeline=timeline,
            activity_periods=activity_periods,
            conversation_gaps=gaps,
            participation=participation,
            decisions=decisions,
            metadata=AnalysisMetadata(
                analysis_timestamp=datetime.now().isoformat(),
                generation_time_seconds=time.time() - start_time,
                message_count=len(thread_messages),
                participant_count=participant_count,
                word_count=sum(count_words_in_text(m.text) for m in thread_messages),
                has_multilingual_content=(
                    topics.has_japanese_content and topics.has_english_content
                ),
                max_topics=config.topics.max_topics,
            ),
        )

        enforce_invariants_strict(analysis.to_dict())

        logger.debug(
            "Thread analyzed",
            extra={
                "message_count": len(thread_messages),
                "topic_count": len(topics.topics),
                "action_item_count": len(action_items.action_items),
                "urgency_level": urgency.level,
                "generation_time_seconds": round(time.time() - start_time, 4),
            },
        )

    return analysis


def perform_quick_analysis(
    messages: Iterable[Message | Mapping[str, Any]],
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> QuickAnalysis:
    """Headline numbers for one thread; what channel scans use per thread."""
    thread_messages = coerce_messages(messages)

    sentiment = analyze_sentiment(thread_messages, config.sentiment)
    topics = extract_topics_from_thread(thread_messages, config.topics)
    urgency = calculate_urgency_score(thread_messages, config.urgency)
    action_items = extract_action_items_from_messages(thread_messages, config.action_items)
    timeline = build_thread_timeline(thread_messages)

    return QuickAnalysis(
        sentiment=sentiment,
        topic_count=len(topics.topics),
        urgency_level=urgency.level,
        action_item_count=len(action_items.action_items),
        duration=timeline.total_duration,
    )


# =============================================================================
# CROSS-THREAD OPERATIONS
# =============================================================================


def identify_important_threads(
    threads: Iterable[ConversationThread | Mapping[str, Any]],
    criteria: Sequence[str] | None = None,
    threshold: float | None = None,
    limit: int | None = None,
    context: RankingContext | None = None,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> ImportantThreadsResult:
    """
    Threads whose importance score reaches `threshold`, best first.

    Args:
        threads: Threads to rank
        criteria: Criterion names to score; None selects the basic four
            (plus the enhancement criteria when `context` is given)
        threshold: Minimum score; defaults to config.ranking.importance_threshold (0.7)
        limit: Maximum threads returned; defaults to config.ranking.importance_limit (10)
        context: Search query and reference time for the enhancement criteria

    Raises:
        ValueError: If criteria names an unknown criterion
    """
    if threshold is None:
        threshold = config.ranking.importance_threshold
    if limit is None:
        limit = config.ranking.importance_limit

    selected = resolve_importance_criteria(criteria, context)
    candidates = coerce_threads(threads)

    with AnalysisContext(operation="identify_important_threads"):
        scored = []
        for thread in candidates:
            with AnalysisContext(thread_ts=thread.thread_ts):
                importance = compute_thread_importance(
                    thread,
                    selected,
                    context,
                    urgency_config=config.urgency,
                    action_config=config.action_items,
                    relevance_config=config.relevance,
                )
                logger.debug(
                    "Scored thread importance",
                    extra={"score": round(importance.score, 3), "breakdown": importance.breakdown},
                )
            scored.append(importance)
        important = [t for t in scored if t.score >= threshold]
        important.sort(key=lambda t: t.score, reverse=True)

        logger.debug(
            "Ranked threads by importance",
            extra={
                "thread_count": len(candidates),
                "important_count": len(important),
                "threshold": threshold,
                "criteria": list(selected),
            },
        )

    return ImportantThreadsResult(
        important_threads=important[: max(limit, 0)],
        total=len(important),
        criteria=list(selected),
        threshold=threshold,
    )


def find_related_threads(
    reference: ConversationThread | Mapping[str, Any],
    candidates: Iterable[ConversationThread | Mapping[str, Any]],
    relationship_types: Sequence[str] | None = None,
    threshold: float | None = None,
    max_results: int | None = None,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> RelatedThreadsResult:
    """
    Candidate threads similar to `reference`, most similar first.

    A candidate sharing the reference's thread_ts is the reference
    itself and is skipped.

    Args:
        relationship_types: Signals to combine; None enables all four
        threshold: Minimum similarity; defaults to config.ranking.similarity_threshold (0.3)
        max_results: Cap on returned threads; defaults to config.ranking.max_related_results (10)

    Raises:
        ValueError: If relationship_types names an unknown signal
    """
    if threshold is None:
        threshold = config.ranking.similarity_threshold
    if max_results is None:
        max_results = config.ranking.max_related_results

    selected = resolve_relationship_types(relationship_types)
    reference_thread = coerce_threads([reference])[0]
    candidate_threads = coerce_threads(candidates)

    with AnalysisContext(operation="find_related_threads"):
        reference_profile = build_thread_profile(
            reference_thread, config.urgency, config.action_items
        )
        related = []
        for candidate in candidate_threads:
            if candidate.thread_ts == reference_thread.thread_ts:
                continue
            with AnalysisContext(thread_ts=candidate.thread_ts):
                profile = build_thread_profile(candidate, config.urgency, config.action_items)
                relation = compute_relatedness(reference_profile, profile, selected)
                logger.debug(
                    "Compared thread",
                    extra={"score": round(relation.score, 3), "breakdown": relation.breakdown},
                )
            if relation.score >= threshold:
                related.append(relation)

        related.sort(key=lambda r: r.score, reverse=True)

        logger.debug(
            "Found related threads",
            extra={
                "reference_thread": reference_thread.thread_ts,
                "candidate_count": len(candidate_threads),
                "related_count": len(related),
                "threshold": threshold,
            },
        )

    return RelatedThreadsResult(
        related_threads=related[: max(max_results, 0)],
        total=len(related),
        reference_thread=reference_thread.thread_ts,
        relationship_types=list(selected),
        similarity_threshold=threshold,
    )
