"""
ThreadSense CLI

Command-line access to thread analysis over exported JSON files.

Usage:
    threadsense analyze thread.json              # Full analysis as JSON
    threadsense analyze thread.json --quick      # Headline numbers only
    threadsense analyze thread.json --summary    # Plain-text summaries
    threadsense rank threads.json [--threshold 0.5] [--limit 5]
    threadsense rank threads.json --query "deploy" --now 1700000000
    threadsense related threads.json --ref 1700000000.000100

Input files:
    analyze: a JSON list of messages [{"ts", "user", "text"}, ...]
    rank, related: a JSON list of threads [{"thread_ts", "messages": [...]}, ...]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from threadsense import config
from threadsense.intelligence.engine import (
    find_related_threads,
    identify_important_threads,
    perform_comprehensive_analysis,
    perform_quick_analysis,
)
from threadsense.intelligence.narrative import NarrativeBuilder
from threadsense.intelligence.ranking import (
    IMPORTANCE_CRITERIA,
    RELATIONSHIP_TYPES,
    RankingContext,
)
from threadsense.models import coerce_threads
from threadsense.observability import configure_logging
from threadsense.settings import ConfigError, load_analysis_config

logger = logging.getLogger(__name__)


def _read_json(path: str) -> Any:
    with open(Path(path), encoding="utf-8") as f:
        return json.load(f)


def _emit(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def cmd_analyze(args, analysis_config):
    """Analyze one thread."""
    messages = _read_json(args.file)
    if not isinstance(messages, list):
        print("❌ analyze expects a JSON list of messages", file=sys.stderr)
        return 1

    if args.quick:
        _emit(perform_quick_analysis(messages, analysis_config).to_dict())
        return 0

    analysis = perform_comprehensive_analysis(messages, config=analysis_config)
    if args.summary:
        builder = NarrativeBuilder()
        print(builder.build_timeline_summary(analysis.timeline))
        print()
        print(builder.build_action_item_summary(analysis.action_items))
        print()
        print(builder.build_priority_summary(analysis.urgency, analysis.importance))
        return 0

    _emit(analysis.to_dict())
    return 0


def cmd_rank(args, analysis_config):
    """Rank threads by importance."""
    threads = _read_json(args.file)
    context = None
    if args.query is not None or args.now is not None:
        context = RankingContext(search_query=args.query or "", reference_time=args.now)

    result = identify_important_threads(
        threads,
        criteria=args.criteria,
        threshold=args.threshold,
        limit=args.limit,
        context=context,
        config=analysis_config,
    )
    _emit(result.to_dict())
    return 0


def cmd_related(args, analysis_config):
    """Find threads related to a reference thread."""
    threads = coerce_threads(_read_json(args.file))
    reference = next((t for t in threads if t.thread_ts == args.ref), None)
    if reference is None:
        print(f"❌ Reference thread {args.ref} not found in {args.file}", file=sys.stderr)
        return 1

    result = find_related_threads(
        reference,
        threads,
        relationship_types=args.types,
        threshold=args.threshold,
        max_results=args.max_results,
        config=analysis_config,
    )
    _emit(result.to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="threadsense", description="ThreadSense CLI")
    parser.add_argument(
        "--config", default=config.CONFIG_PATH, help="YAML analysis profile"
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Log level")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=config.log_format_as_json(),
        help="Emit logs as JSON",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # analyze
    p = subparsers.add_parser("analyze", help="Analyze one thread")
    p.add_argument("file", help="JSON list of messages")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--quick", action="store_true", help="Headline numbers only")
    mode.add_argument("--summary", action="store_true", help="Plain-text summaries")

    # rank
    p = subparsers.add_parser("rank", help="Rank threads by importance")
    p.add_argument("file", help="JSON list of threads")
    p.add_argument("--threshold", type=float, help="Minimum importance score")
    p.add_argument("--limit", type=int, help="Max threads")
    p.add_argument("--criteria", nargs="+", choices=IMPORTANCE_CRITERIA, help="Criteria to score")
    p.add_argument("--query", help="Search query for tf-idf relevance")
    p.add_argument("--now", type=float, help="Reference time (epoch seconds) for time decay")

    # related
    p = subparsers.add_parser("related", help="Find related threads")
    p.add_argument("file", help="JSON list of threads")
    p.add_argument("--ref", required=True, help="thread_ts of the reference thread")
    p.add_argument("--threshold", type=float, help="Minimum similarity score")
    p.add_argument("--max-results", type=int, help="Max threads")
    p.add_argument("--types", nargs="+", choices=RELATIONSHIP_TYPES, help="Signals to combine")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level, json_format=args.json_logs)

    # Dispatch
    commands = {
        "analyze": cmd_analyze,
        "rank": cmd_rank,
        "related": cmd_related,
    }

    try:
        analysis_config = load_analysis_config(args.config)
        return commands[args.command](args, analysis_config)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"❌ Cannot read input: {exc}", file=sys.stderr)
        return 1
    except (ConfigError, ValidationError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"❌ {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
