"""
Observability module: structured logging and analysis scopes.

Usage:
    from threadsense.observability import get_logger, AnalysisContext

    logger = get_logger(__name__)
    logger.info("Scoring thread", extra={"thread_ts": "1700000000.000100"})

    with AnalysisContext(operation="comprehensive_analysis", thread_ts=ts):
        logger.info("Analysis started")  # carries analysis_id, operation, thread_ts
"""

from .context import (
    AnalysisContext,
    AnalysisScope,
    generate_analysis_id,
    get_analysis_id,
    get_analysis_scope,
)
from .logging import HumanFormatter, JSONFormatter, configure_logging, get_logger

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "JSONFormatter",
    "HumanFormatter",
    # Context
    "AnalysisContext",
    "generate_analysis_id",
    "get_analysis_id",
    "get_analysis_scope",
    "AnalysisScope",
]
