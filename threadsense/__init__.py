# ThreadSense - Thread Intelligence Core
"""
Rule-based analysis of conversation threads: bilingual topics, action
items, timelines and scores for ranking and linking threads.

Exports for the CLI and other consumers.
"""

from .intelligence import (
    find_related_threads,
    identify_important_threads,
    perform_comprehensive_analysis,
    perform_quick_analysis,
)
from .models import ConversationThread, Message, Reaction, coerce_messages, coerce_threads
from .settings import AnalysisConfig, ConfigError, load_analysis_config

__version__ = "0.1.0"

__all__ = [
    "perform_comprehensive_analysis",
    "perform_quick_analysis",
    "identify_important_threads",
    "find_related_threads",
    "Message",
    "Reaction",
    "ConversationThread",
    "coerce_messages",
    "coerce_threads",
    "AnalysisConfig",
    "ConfigError",
    "load_analysis_config",
]
