"""
Sentiment — ThreadSense

Keyword-count sentiment for a thread. Crude on purpose: counts
positive and negative words and calls the thread positive or negative
only when one side outweighs the other by `threshold`.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from threadsense.models import Message

SENTIMENT_POSITIVE = "positive"
SENTIMENT_NEGATIVE = "negative"
SENTIMENT_NEUTRAL = "neutral"


@dataclass(frozen=True)
class SentimentConfig:
    positive_words: tuple[str, ...] = (
        "good",
        "great",
        "excellent",
        "awesome",
        "perfect",
        "love",
        "like",
        "happy",
        "yes",
        "agree",
        "amazing",
        "fantastic",
        "wonderful",
        "brilliant",
        "outstanding",
        "success",
        "achieved",
        "completed",
        "solved",
        "resolved",
    )
    negative_words: tuple[str, ...] = (
        "bad",
        "terrible",
        "awful",
        "hate",
        "dislike",
        "angry",
        "no",
        "disagree",
        "problem",
        "issue",
        "error",
        "bug",
        "broken",
        "failed",
        "wrong",
        "difficult",
        "hard",
        "stuck",
        "blocked",
        "frustrated",
    )
    threshold: float = 1.2


DEFAULT_SENTIMENT_CONFIG = SentimentConfig()


@dataclass
class SentimentAnalysisResult:
    sentiment: str
    positive_count: int
    negative_count: int
    total_words: int

    def to_dict(self) -> dict:
        return {
            "sentiment": self.sentiment,
            "positive_count": self.positive_count,
            "negative_count": self.negative_count,
            "total_words": self.total_words,
        }


def _word_pattern(word: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(word.lower())}\b", re.ASCII)


def count_word_occurrences(text: str, words: Sequence[str]) -> int:
    return sum(len(_word_pattern(word).findall(text)) for word in words)


def analyze_sentiment(
    messages: Sequence[Message],
    config: SentimentConfig = DEFAULT_SENTIMENT_CONFIG,
) -> SentimentAnalysisResult:
    text = " ".join(m.text or "" for m in messages).lower().strip()
    if not text:
        return SentimentAnalysisResult(SENTIMENT_NEUTRAL, 0, 0, 0)

    positive = count_word_occurrences(text, config.positive_words)
    negative = count_word_occurrences(text, config.negative_words)

    sentiment = SENTIMENT_NEUTRAL
    if positive > negative * config.threshold:
        sentiment = SENTIMENT_POSITIVE
    elif negative > positive * config.threshold:
        sentiment = SENTIMENT_NEGATIVE

    return SentimentAnalysisResult(
        sentiment=sentiment,
        positive_count=positive,
        negative_count=negative,
        total_words=len(text.split()),
    )


def get_sentiment_score(result: SentimentAnalysisResult) -> float:
    """Net sentiment in [-1, 1]: (positive - negative) / words, scaled by 10."""
    if result.total_words == 0:
        return 0.0
    net = (result.positive_count - result.negative_count) / result.total_words
    return max(-1.0, min(1.0, net * 10))


def is_sentiment_reliable(result: SentimentAnalysisResult) -> bool:
    """At least two sentiment words in at least ten words of text."""
    return result.positive_count + result.negative_count >= 2 and result.total_words >= 10


def explain_sentiment(result: SentimentAnalysisResult) -> str:
    if result.total_words == 0:
        return "No text available for sentiment analysis."

    if result.positive_count + result.negative_count == 0:
        return (
            "Neutral sentiment - no clear positive or negative indicators "
            f"found in {result.total_words} words."
        )

    reliability = "reliable" if is_sentiment_reliable(result) else "limited"
    ratio = (
        f"{result.positive_count / result.negative_count:.1f}"
        if result.negative_count
        else "infinite"
    )
    return (
        f"{result.sentiment.capitalize()} sentiment ({reliability} analysis) - "
        f"{result.positive_count} positive vs {result.negative_count} negative indicators "
        f"(ratio: {ratio}) in {result.total_words} total words."
    )
