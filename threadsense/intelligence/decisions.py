"""
Decision Extraction — ThreadSense

Picks out messages that record a decision ("we decided to ship on
Friday", "予算を承認しました"). A message qualifies when it contains a
decision keyword and its confidence clears MIN_DECISION_CONFIDENCE.

Confidence:
    0.4  base
  + 0.4  explicit marker ("DECISION:", "officially", 正式に, ...)
  + 0.15 per distinct decision keyword, at most 0.3
  + 0.1  text longer than 20 characters
  + 0.1  formal phrasing ("we have", しました, ...)
  capped at 1.0
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from threadsense.models import Message
from threadsense.text.language import extract_plain_text, is_japanese_char

logger = logging.getLogger(__name__)


MIN_DECISION_CONFIDENCE = 0.7

ENGLISH_DECISION_KEYWORDS = (
    "decided",
    "decide",
    "decision",
    "approved",
    "approve",
    "approval",
    "resolved",
    "resolve",
    "resolution",
    "agreed",
    "agree",
    "agreement",
    "confirmed",
    "confirm",
    "confirmation",
    "concluded",
    "conclude",
    "conclusion",
    "settled",
    "settle",
    "settlement",
    "finalized",
    "finalize",
    "final",
    "chosen",
    "choose",
    "choice",
    "selected",
    "select",
    "selection",
)

JAPANESE_DECISION_KEYWORDS = (
    "決定",
    "決めた",
    "決める",
    "承認",
    "許可",
    "認める",
    "解決",
    "解決した",
    "合意",
    "同意",
    "賛成",
    "確認",
    "確定",
    "結論",
    "結果",
    "選択",
    "選んだ",
    "最終",
    "最終的",
)

HIGH_CONFIDENCE_INDICATORS = (
    "DECISION:",
    "DECISION -",
    "決定：",
    "結論：",
    "officially",
    "formally",
    "正式に",
    "公式に",
)

FORMAL_PHRASES = ("we have", "it has been", "team has", "しました", "ます", "決定")


@dataclass(frozen=True)
class DecisionConfig:
    english_keywords: tuple[str, ...] = ENGLISH_DECISION_KEYWORDS
    japanese_keywords: tuple[str, ...] = JAPANESE_DECISION_KEYWORDS
    min_confidence: float = MIN_DECISION_CONFIDENCE  # exclusive


DEFAULT_DECISION_CONFIG = DecisionConfig()


@dataclass
class Decision:
    text: str
    confidence: float
    keywords: list[str]
    message_index: int
    timestamp: str
    language: str  # en | ja
    participant: str | None = None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "confidence": round(self.confidence, 3),
            "keywords": self.keywords,
            "message_index": self.message_index,
            "timestamp": self.timestamp,
            "language": self.language,
            "participant": self.participant,
        }


@dataclass
class DecisionExtractionResult:
    decisions: list[Decision] = field(default_factory=list)
    total_messages: int = 0

    def to_dict(self) -> dict:
        return {
            "decisions": [d.to_dict() for d in self.decisions],
            "total_messages": self.total_messages,
        }


class DecisionExtractor:
    """Keyword-based decision detection over English and Japanese text."""

    def __init__(
        self,
        english_keywords: Sequence[str] = ENGLISH_DECISION_KEYWORDS,
        japanese_keywords: Sequence[str] = JAPANESE_DECISION_KEYWORDS,
        min_confidence: float = MIN_DECISION_CONFIDENCE,
    ):
        self.english_keywords = tuple(english_keywords)
        self.japanese_keywords = tuple(japanese_keywords)
        self.min_confidence = min_confidence

    @classmethod
    def from_config(cls, config: DecisionConfig = DEFAULT_DECISION_CONFIG) -> "DecisionExtractor":
        return cls(config.english_keywords, config.japanese_keywords, config.min_confidence)

    def extract_decisions(self, messages: Sequence[Message]) -> DecisionExtractionResult:
        decisions: list[Decision] = []

        for index, message in enumerate(messages):
            if not message.text or not self.is_decision_message(message):
                continue

            confidence = self.calculate_confidence(message.text)
            if confidence <= self.min_confidence:
                continue

            decisions.append(
                Decision(
                    text=extract_plain_text(message.text),
                    confidence=confidence,
                    keywords=self.find_keywords(message.text),
                    message_index=index,
                    timestamp=message.ts,
                    language="ja" if is_japanese_char(message.text) else "en",
                    participant=message.user,
                )
            )

        logger.debug("Extracted decisions", extra={"decision_count": len(decisions)})
        return DecisionExtractionResult(decisions=decisions, total_messages=len(messages))

    def is_decision_message(self, message: Message) -> bool:
        return bool(message.text) and bool(self.find_keywords(message.text))

    def find_keywords(self, text: str) -> list[str]:
        """Decision keywords contained in text, English first, no duplicates."""
        lower = text.lower()
        found = [k for k in self.english_keywords if k.lower() in lower]
        found += [k for k in self.japanese_keywords if k in text]
        return list(dict.fromkeys(found))

    def calculate_confidence(self, text: str) -> float:
        lower = text.lower()
        confidence = 0.4

        if any(indicator.lower() in lower for indicator in HIGH_CONFIDENCE_INDICATORS):
            confidence += 0.4

        keyword_count = len(self.find_keywords(text))
        if keyword_count:
            confidence += min(0.3, keyword_count * 0.15)

        if len(text) > 20:
            confidence += 0.1

        if any(phrase in text for phrase in FORMAL_PHRASES):
            confidence += 0.1

        return min(1.0, confidence)
