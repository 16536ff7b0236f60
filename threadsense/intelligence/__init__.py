"""
ThreadSense Thread Intelligence Layer.

Single entry point for thread intelligence:
- Topic and keyword extraction (English, Japanese, mixed)
- Action item extraction with priority and status
- Timeline, activity bursts and silences
- Urgency, importance and relevance scoring
- Thread ranking and related-thread search

Usage:
    # Full analysis of one thread
    from threadsense.intelligence import perform_comprehensive_analysis
    analysis = perform_comprehensive_analysis(messages)

    # Channel scan
    from threadsense.intelligence import identify_important_threads, find_related_threads
    ranked = identify_important_threads(threads)
    related = find_related_threads(threads[0], threads[1:])

    # Individual components
    from threadsense.intelligence import extract_keywords, build_thread_timeline
"""

# Action items
from .action_items import (
    DEFAULT_ACTION_ITEM_CONFIG,
    ActionItem,
    ActionItemConfig,
    ActionItemExtractionResult,
    extract_action_items_from_message,
    extract_action_items_from_messages,
    extract_mentions,
)

# Decisions
from .decisions import DEFAULT_DECISION_CONFIG, Decision, DecisionConfig, DecisionExtractor

# Keywords / topics
from .keywords import (
    DEFAULT_TOPIC_CONFIG,
    KeywordAnalysis,
    TopicExtractionConfig,
    TopicExtractionResult,
    extract_keywords,
    extract_topics_from_thread,
    get_topic_relevance,
)

# Narrative
from .narrative import NarrativeBuilder

# Ranking
from .ranking import (
    RankingContext,
    RelatedThread,
    ThreadImportance,
    compute_relatedness,
    compute_thread_importance,
)

# Relevance
from .relevance import RelevanceScore, RelevanceScorer

# Sentiment
from .sentiment import SentimentAnalysisResult, analyze_sentiment

# Timeline
from .timeline import (
    ActivityPeriod,
    ConversationGap,
    TimelineAnalysis,
    TimelineEvent,
    build_thread_timeline,
    build_timeline_events,
    find_conversation_gaps,
    find_high_activity_periods,
    parse_timestamp,
)

# Urgency / importance
from .urgency import (
    ImportanceScore,
    UrgencyScore,
    calculate_importance_score,
    calculate_urgency_score,
    get_urgency_level,
)

# Main engine functions
from .engine import (  # noqa: E402
    ComprehensiveAnalysis,
    QuickAnalysis,
    find_related_threads,
    identify_important_threads,
    perform_comprehensive_analysis,
    perform_quick_analysis,
)

__all__ = [
    # Engine
    "perform_comprehensive_analysis",
    "perform_quick_analysis",
    "identify_important_threads",
    "find_related_threads",
    "ComprehensiveAnalysis",
    "QuickAnalysis",
    # Keywords
    "extract_keywords",
    "extract_topics_from_thread",
    "get_topic_relevance",
    "KeywordAnalysis",
    "TopicExtractionConfig",
    "TopicExtractionResult",
    "DEFAULT_TOPIC_CONFIG",
    # Action items
    "extract_mentions",
    "extract_action_items_from_message",
    "extract_action_items_from_messages",
    "ActionItem",
    "ActionItemConfig",
    "ActionItemExtractionResult",
    "DEFAULT_ACTION_ITEM_CONFIG",
    # Timeline
    "parse_timestamp",
    "build_timeline_events",
    "build_thread_timeline",
    "find_high_activity_periods",
    "find_conversation_gaps",
    "TimelineEvent",
    "TimelineAnalysis",
    "ActivityPeriod",
    "ConversationGap",
    # Scoring
    "calculate_urgency_score",
    "calculate_importance_score",
    "get_urgency_level",
    "UrgencyScore",
    "ImportanceScore",
    "RelevanceScorer",
    "RelevanceScore",
    "RankingContext",
    "ThreadImportance",
    "RelatedThread",
    "compute_thread_importance",
    "compute_relatedness",
    # Supplements
    "analyze_sentiment",
    "SentimentAnalysisResult",
    "DecisionExtractor",
    "DecisionConfig",
    "DEFAULT_DECISION_CONFIG",
    "Decision",
    "NarrativeBuilder",
]
