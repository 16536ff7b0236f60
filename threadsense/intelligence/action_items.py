"""
Action Item Extraction — ThreadSense

Finds task-like lines in thread messages and classifies them by
priority (high / medium / low) and status (open / in_progress /
completed) from bilingual keyword lists.

Works line by line: a message with three bullet points can yield three
action items. English indicators match on word boundaries with a
substring fallback for compounds ("re-review", "todos"); Japanese
indicators match as plain substrings since the text is unsegmented.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from threadsense.models import Message
from threadsense.text.language import is_japanese_char

logger = logging.getLogger(__name__)


PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_ORDER = {PRIORITY_LOW: 1, PRIORITY_MEDIUM: 2, PRIORITY_HIGH: 3}

STATUS_OPEN = "open"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"

MAX_ACTION_TEXT_LENGTH = 500
MIN_ACTION_TEXT_LENGTH = 5  # cleaned text must be longer than this

MENTION_RE = re.compile(r"<@(\w+)>", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")
_BULLET_RE = re.compile(r"^[-•*]\s*")
_ORDINAL_RE = re.compile(r"^\d+\.\s*")


@dataclass(frozen=True)
class ActionItemConfig:
    """Indicator and classification keyword lists. All overridable."""

    action_indicators: tuple[str, ...] = (
        "todo",
        "action item",
        "need to",
        "should",
        "will",
        "task",
        "follow up",
        "next step",
        "assign",
        "assigned",
        "do",
        "implement",
        "fix",
        "update",
        "create",
        "add",
        "remove",
        "delete",
        "check",
        "verify",
        "test",
        "review",
        "やる",
        "する",
        "しなければ",
        "タスク",
        "やること",
        "対応",
        "作業",
        "実装",
        "修正",
        "確認",
        "レビュー",
    )
    high_priority_keywords: tuple[str, ...] = (
        "urgent",
        "critical",
        "immediately",
        "asap",
        "priority",
        "blocker",
        "blocking",
        "emergency",
        "now",
        "today",
        "緊急",
        "至急",
        "重要",
        "すぐ",
        "今すぐ",
    )
    medium_priority_keywords: tuple[str, ...] = (
        "important",
        "soon",
        "this week",
        "by friday",
        "deadline",
        "schedule",
        "planned",
        "今週",
        "重要",
        "期限",
    )
    completed_keywords: tuple[str, ...] = (
        "done",
        "completed",
        "finished",
        "resolved",
        "closed",
        "fixed",
        "solved",
        "complete",
        "ready",
        "delivered",
        "完了",
        "終了",
        "解決",
        "修正済み",
        "対応済み",
    )
    in_progress_keywords: tuple[str, ...] = (
        "working on",
        "in progress",
        "started",
        "began",
        "ongoing",
        "processing",
        "handling",
        "implementing",
        "developing",
        "作業中",
        "進行中",
        "実装中",
        "対応中",
        "開発中",
    )


DEFAULT_ACTION_ITEM_CONFIG = ActionItemConfig()


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class ActionItem:
    text: str
    mentioned_users: list[str]
    priority: str  # low | medium | high
    status: str  # open | in_progress | completed
    extracted_from_message_ts: str

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "mentioned_users": self.mentioned_users,
            "priority": self.priority,
            "status": self.status,
            "extracted_from_message_ts": self.extracted_from_message_ts,
        }


@dataclass
class PriorityAnalysis:
    priority: str
    keywords_found: list[str]
    priority_level: int  # 1=low, 2=medium, 3=high


@dataclass
class StatusAnalysis:
    status: str
    keywords_found: list[str]
    confidence: float


@dataclass
class ActionItemExtractionResult:
    action_items: list[ActionItem] = field(default_factory=list)
    total_action_indicators: int = 0
    action_indicators_found: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "action_items": [item.to_dict() for item in self.action_items],
            "total_action_indicators": self.total_action_indicators,
            "action_indicators_found": self.action_indicators_found,
        }


@dataclass
class ActionItemStatistics:
    total: int
    by_priority: dict[str, int]
    by_status: dict[str, int]
    assigned_count: int
    unassigned_count: int
    completion_rate: float

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_priority": self.by_priority,
            "by_status": self.by_status,
            "assigned_count": self.assigned_count,
            "unassigned_count": self.unassigned_count,
            "completion_rate": round(self.completion_rate, 3),
        }


# =============================================================================
# MATCHING
# =============================================================================


def _word_boundary_pattern(indicator: str) -> re.Pattern:
    # ASCII \b so a Latin keyword glued to Japanese text still matches
    return re.compile(rf"\b{re.escape(indicator)}\b", re.ASCII)


def _contains_indicator(lower_text: str, indicator: str) -> bool:
    lower_indicator = indicator.lower()
    if is_japanese_char(indicator):
        return lower_indicator in lower_text
    if _word_boundary_pattern(lower_indicator).search(lower_text):
        return True
    return lower_indicator in lower_text


def extract_mentions(text: str) -> list[str]:
    """User ids from <@U123> style mentions, in order of appearance."""
    return [match for match in MENTION_RE.findall(text) if match]


def contains_action_indicators(line: str, indicators: Sequence[str]) -> bool:
    lower_line = line.lower()
    return any(_contains_indicator(lower_line, indicator) for indicator in indicators)


def find_action_indicators(text: str, indicators: Sequence[str]) -> list[str]:
    """Indicators present in text, in configuration order."""
    lower_text = text.lower()
    return [indicator for indicator in indicators if _contains_indicator(lower_text, indicator)]


def analyze_priority(
    text: str,
    config: ActionItemConfig = DEFAULT_ACTION_ITEM_CONFIG,
) -> PriorityAnalysis:
    """Any high keyword wins; otherwise any medium keyword; otherwise low."""
    high = find_action_indicators(text, config.high_priority_keywords)
    if high:
        return PriorityAnalysis(PRIORITY_HIGH, high, PRIORITY_ORDER[PRIORITY_HIGH])

    medium = find_action_indicators(text, config.medium_priority_keywords)
    if medium:
        return PriorityAnalysis(PRIORITY_MEDIUM, medium, PRIORITY_ORDER[PRIORITY_MEDIUM])

    return PriorityAnalysis(PRIORITY_LOW, [], PRIORITY_ORDER[PRIORITY_LOW])


def analyze_status(
    text: str,
    config: ActionItemConfig = DEFAULT_ACTION_ITEM_CONFIG,
) -> StatusAnalysis:
    """
    Completed keywords beat in-progress keywords.

    Confidence: completed 0.7 + 0.1/keyword, in progress 0.6 +
    0.1/keyword, both capped at 1.0; open is a flat 0.5.
    """
    completed = find_action_indicators(text, config.completed_keywords)
    if completed:
        return StatusAnalysis(STATUS_COMPLETED, completed, min(1.0, 0.7 + len(completed) * 0.1))

    in_progress = find_action_indicators(text, config.in_progress_keywords)
    if in_progress:
        return StatusAnalysis(
            STATUS_IN_PROGRESS, in_progress, min(1.0, 0.6 + len(in_progress) * 0.1)
        )

    return StatusAnalysis(STATUS_OPEN, [], 0.5)


def clean_action_item_text(text: str) -> str:
    """Trim, collapse whitespace, drop a leading bullet or "1." marker, cap length."""
    text = _WHITESPACE_RE.sub(" ", text.strip())
    text = _BULLET_RE.sub("", text, count=1)
    text = _ORDINAL_RE.sub("", text, count=1)
    return text[:MAX_ACTION_TEXT_LENGTH]


# =============================================================================
# EXTRACTION
# =============================================================================


def extract_action_items_from_message(
    message: Message,
    config: ActionItemConfig = DEFAULT_ACTION_ITEM_CONFIG,
) -> list[ActionItem]:
    if not message.text:
        return []

    items: list[ActionItem] = []
    for raw_line in message.text.split("\n"):
        line = raw_line.strip()
        if not line or not contains_action_indicators(line, config.action_indicators):
            continue

        cleaned = clean_action_item_text(line)
        if len(cleaned) <= MIN_ACTION_TEXT_LENGTH:
            continue

        items.append(
            ActionItem(
                text=cleaned,
                mentioned_users=extract_mentions(line),
                priority=analyze_priority(line, config).priority,
                status=analyze_status(line, config).status,
                extracted_from_message_ts=message.ts or "",
            )
        )

    return items


def extract_action_items_from_messages(
    messages: Sequence[Message],
    config: ActionItemConfig = DEFAULT_ACTION_ITEM_CONFIG,
) -> ActionItemExtractionResult:
    """Action items across a thread plus the distinct indicators seen."""
    all_items: list[ActionItem] = []
    indicators_found: dict[str, None] = {}

    for message in messages:
        all_items.extend(extract_action_items_from_message(message, config))
        if message.text:
            for indicator in find_action_indicators(message.text, config.action_indicators):
                indicators_found.setdefault(indicator, None)

    logger.debug(
        "Extracted action items",
        extra={"action_item_count": len(all_items), "indicator_count": len(indicators_found)},
    )

    return ActionItemExtractionResult(
        action_items=all_items,
        total_action_indicators=len(indicators_found),
        action_indicators_found=list(indicators_found),
    )


# =============================================================================
# GROUPING & STATISTICS
# =============================================================================


def group_action_items_by_priority(items: Sequence[ActionItem]) -> dict[str, list[ActionItem]]:
    return {
        PRIORITY_HIGH: [i for i in items if i.priority == PRIORITY_HIGH],
        PRIORITY_MEDIUM: [i for i in items if i.priority == PRIORITY_MEDIUM],
        PRIORITY_LOW: [i for i in items if i.priority == PRIORITY_LOW],
    }


def group_action_items_by_status(items: Sequence[ActionItem]) -> dict[str, list[ActionItem]]:
    return {
        STATUS_OPEN: [i for i in items if i.status == STATUS_OPEN],
        STATUS_IN_PROGRESS: [i for i in items if i.status == STATUS_IN_PROGRESS],
        STATUS_COMPLETED: [i for i in items if i.status == STATUS_COMPLETED],
    }


def get_action_items_for_users(
    items: Sequence[ActionItem],
    user_ids: Sequence[str],
) -> list[ActionItem]:
    wanted = set(user_ids)
    return [i for i in items if any(u in wanted for u in i.mentioned_users)]


def get_action_item_statistics(items: Sequence[ActionItem]) -> ActionItemStatistics:
    by_priority = group_action_items_by_priority(items)
    by_status = group_action_items_by_status(items)
    assigned = sum(1 for i in items if i.mentioned_users)
    completion_rate = len(by_status[STATUS_COMPLETED]) / len(items) if items else 0.0

    return ActionItemStatistics(
        total=len(items),
        by_priority={k: len(v) for k, v in by_priority.items()},
        by_status={k: len(v) for k, v in by_status.items()},
        assigned_count=assigned,
        unassigned_count=len(items) - assigned,
        completion_rate=completion_rate,
    )


def filter_action_items_by_priority(
    items: Sequence[ActionItem],
    min_priority: str,
) -> list[ActionItem]:
    """Items at or above min_priority (low < medium < high)."""
    min_level = PRIORITY_ORDER.get(min_priority, 1)
    return [i for i in items if PRIORITY_ORDER[i.priority] >= min_level]


def get_incomplete_action_items(items: Sequence[ActionItem]) -> list[ActionItem]:
    return [i for i in items if i.status != STATUS_COMPLETED]
