"""
Keyword / Topic Extraction — ThreadSense

Builds a weighted term table from thread text in English, Japanese or
both. Japanese tokens are normalized to dictionary form and split on
particles; English tokens are lowercased and stopword-filtered;
identifiers and acronyms found anywhere in the text get a small bonus.

Weights accumulate by addition in first-seen order, so ties in the
final ranking resolve to whichever term appeared first.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from threadsense.models import Message
from threadsense.text.conjugation import normalize_conjugation
from threadsense.text.language import (
    clean_text,
    detect_language_content,
    has_kanji,
    is_japanese_char,
    is_katakana,
    tokenize_text,
)
from threadsense.text.stopwords import ENGLISH_STOP_WORDS, JAPANESE_STOP_WORDS

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

NORMALIZED_TOKEN_WEIGHT = 2.0  # conjugated form reduced to its base
WHOLE_TOKEN_WEIGHT = 1.5
SEGMENT_WEIGHT = 1.0  # particle-split piece of a longer token
ENGLISH_TOKEN_WEIGHT = 1.0
SPECIAL_PATTERN_WEIGHT = 0.5
SCRIPT_PREFERENCE_BONUS = 0.5

MAX_WHOLE_TOKEN_LENGTH = 10
MIN_ENGLISH_TOKEN_LENGTH = 4
MAX_SPECIAL_PATTERN_LENGTH = 20

# を に で と は が も や か ら ま へ よ り
_PARTICLES = "をにでとはがもやからまへより"
PARTICLE_SPLIT_RE = re.compile(f"(?=[{_PARTICLES}])|(?<=[{_PARTICLES}])")

SPECIAL_PATTERNS = (
    re.compile(r"[a-zA-Z][a-zA-Z0-9_-]{4,}"),  # technical identifiers
    re.compile(r"[A-Z]{2,}"),  # acronyms
)


@dataclass(frozen=True)
class TopicExtractionConfig:
    """Tunables for keyword extraction."""

    max_topics: int = 20
    min_word_length: int = 2
    japanese_stop_words: frozenset[str] = JAPANESE_STOP_WORDS
    english_stop_words: frozenset[str] = ENGLISH_STOP_WORDS
    prefer_kanji: bool = True
    prefer_katakana: bool = True
    enable_conjugation_normalization: bool = True


DEFAULT_TOPIC_CONFIG = TopicExtractionConfig()


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class KeywordAnalysis:
    """Ranked keywords plus the full weight table they were cut from."""

    keywords: list[str]
    frequency: dict[str, float]
    normalized_text: str
    language: str

    def to_dict(self) -> dict:
        return {
            "keywords": self.keywords,
            "frequency": {term: round(weight, 3) for term, weight in self.frequency.items()},
            "normalized_text": self.normalized_text,
            "language": self.language,
        }


@dataclass
class TopicExtractionResult:
    """Topics for a whole thread."""

    topics: list[str] = field(default_factory=list)
    word_counts: dict[str, float] = field(default_factory=dict)
    has_japanese_content: bool = False
    has_english_content: bool = False

    def to_dict(self) -> dict:
        return {
            "topics": self.topics,
            "word_counts": {term: round(weight, 3) for term, weight in self.word_counts.items()},
            "has_japanese_content": self.has_japanese_content,
            "has_english_content": self.has_english_content,
        }


@dataclass
class TopicSummary:
    total_topics: int
    total_frequency: float
    average_relevance: float
    language_distribution: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "total_topics": self.total_topics,
            "total_frequency": round(self.total_frequency, 3),
            "average_relevance": round(self.average_relevance, 3),
            "language_distribution": self.language_distribution,
        }


# =============================================================================
# TOKEN PROCESSING
# =============================================================================


def _script_weight(base: float, term: str, config: TopicExtractionConfig) -> float:
    weight = base
    if config.prefer_kanji and has_kanji(term):
        weight += SCRIPT_PREFERENCE_BONUS
    if config.prefer_katakana and is_katakana(term):
        weight += SCRIPT_PREFERENCE_BONUS
    return weight


def _normalize(term: str, config: TopicExtractionConfig) -> str:
    if not config.enable_conjugation_normalization:
        return term
    return normalize_conjugation(term)


def process_japanese_token(
    token: str,
    config: TopicExtractionConfig = DEFAULT_TOPIC_CONFIG,
) -> list[tuple[str, float]]:
    """
    Weighted terms for one token containing Japanese text.

    Two passes:
    1. The whole token, normalized. Base weight 2.0 if normalization
       changed it, 1.5 if it was already a base form. Only kept when it
       contains Kanji or is pure Katakana.
    2. Segments produced by splitting around particle characters, base
       weight 1.0, skipping terms already emitted by pass 1.

    Kanji and Katakana terms get +0.5 each when the matching preference
    flag is on.
    """
    stop_words = config.japanese_stop_words
    results: list[tuple[str, float]] = []
    seen: set[str] = set()

    if (
        config.min_word_length <= len(token) <= MAX_WHOLE_TOKEN_LENGTH
        and token not in stop_words
    ):
        normalized = _normalize(token, config)
        was_normalized = normalized != token

        if not was_normalized or normalized not in stop_words:
            if has_kanji(normalized) or is_katakana(normalized):
                base = NORMALIZED_TOKEN_WEIGHT if was_normalized else WHOLE_TOKEN_WEIGHT
                results.append((normalized, _script_weight(base, normalized, config)))
                seen.add(normalized)

    for segment in PARTICLE_SPLIT_RE.split(token):
        if len(segment) < config.min_word_length or segment in stop_words:
            continue

        normalized = _normalize(segment, config)
        if normalized in seen or normalized in stop_words:
            continue

        segment_has_kanji = has_kanji(normalized)
        segment_is_katakana = is_katakana(normalized)
        qualifies = (
            (segment_has_kanji or segment_is_katakana) and len(normalized) >= 2
        ) or len(normalized) >= 3
        if qualifies:
            results.append((normalized, _script_weight(SEGMENT_WEIGHT, normalized, config)))
            seen.add(normalized)

    return results


def process_english_token(
    token: str,
    config: TopicExtractionConfig = DEFAULT_TOPIC_CONFIG,
) -> tuple[str, float] | None:
    """Lowercased token with weight 1.0, or None if short or a stopword."""
    lower = token.lower()
    if len(lower) >= MIN_ENGLISH_TOKEN_LENGTH and lower not in config.english_stop_words:
        return lower, ENGLISH_TOKEN_WEIGHT
    return None


def extract_special_patterns(
    text: str,
    english_stop_words: frozenset[str] = ENGLISH_STOP_WORDS,
) -> dict[str, float]:
    """Technical identifiers and acronyms, +0.5 per occurrence."""
    counts: dict[str, float] = {}
    for pattern in SPECIAL_PATTERNS:
        for match in pattern.findall(text):
            lower = match.lower()
            if lower not in english_stop_words and len(match) <= MAX_SPECIAL_PATTERN_LENGTH:
                counts[lower] = counts.get(lower, 0.0) + SPECIAL_PATTERN_WEIGHT
    return counts


# =============================================================================
# EXTRACTION
# =============================================================================


def extract_keywords(
    text: str,
    config: TopicExtractionConfig = DEFAULT_TOPIC_CONFIG,
) -> KeywordAnalysis:
    """
    Extract ranked keywords from free text.

    Keywords are sorted by descending weight (stable, so equal weights
    keep first-seen order) and cut to config.max_topics.
    """
    cleaned = clean_text(text)
    language = detect_language_content(cleaned)
    word_counts: dict[str, float] = {}

    for token in tokenize_text(cleaned):
        if len(token) < config.min_word_length:
            continue

        if is_japanese_char(token):
            for segment, weight in process_japanese_token(token, config):
                word_counts[segment] = word_counts.get(segment, 0.0) + weight
        else:
            result = process_english_token(token, config)
            if result:
                term, weight = result
                word_counts[term] = word_counts.get(term, 0.0) + weight

    for term, weight in extract_special_patterns(cleaned, config.english_stop_words).items():
        word_counts[term] = word_counts.get(term, 0.0) + weight

    ranked = sorted(word_counts.items(), key=lambda item: item[1], reverse=True)
    keywords = [term for term, _ in ranked[: max(config.max_topics, 0)]]

    return KeywordAnalysis(
        keywords=keywords,
        frequency=dict(word_counts),
        normalized_text=cleaned,
        language=language.primary_language,
    )


def extract_topics_from_thread(
    messages: Sequence[Message],
    config: TopicExtractionConfig = DEFAULT_TOPIC_CONFIG,
) -> TopicExtractionResult:
    """Topics across all message bodies of a thread."""
    text = " ".join(message.text or "" for message in messages)

    if not text.strip():
        return TopicExtractionResult()

    analysis = extract_keywords(text, config)
    language = detect_language_content(text)
    logger.debug(
        "Extracted topics",
        extra={"topic_count": len(analysis.keywords), "term_count": len(analysis.frequency)},
    )

    return TopicExtractionResult(
        topics=analysis.keywords,
        word_counts=analysis.frequency,
        has_japanese_content=language.has_japanese,
        has_english_content=language.has_english,
    )


def get_topic_relevance(topic: str, analysis: TopicExtractionResult) -> float:
    """Weight of topic relative to the heaviest term (0-1)."""
    frequency = analysis.word_counts.get(topic, 0.0)
    if frequency == 0:
        return 0.0

    max_frequency = max(analysis.word_counts.values())
    if max_frequency == 0:
        return 0.0

    return frequency / max_frequency


def filter_topics_by_relevance(
    analysis: TopicExtractionResult,
    min_relevance: float = 0.1,
) -> list[str]:
    return [t for t in analysis.topics if get_topic_relevance(t, analysis) >= min_relevance]


def get_topic_summary(analysis: TopicExtractionResult) -> TopicSummary:
    """Totals, mean relevance and per-script topic counts."""
    distribution = {"japanese": 0, "english": 0, "mixed": 0}
    for topic in analysis.topics:
        has_japanese = is_japanese_char(topic)
        has_english = bool(re.search(r"[a-zA-Z]", topic))
        if has_japanese and has_english:
            distribution["mixed"] += 1
        elif has_japanese:
            distribution["japanese"] += 1
        else:
            distribution["english"] += 1

    total_topics = len(analysis.topics)
    average = (
        sum(get_topic_relevance(t, analysis) for t in analysis.topics) / total_topics
        if total_topics
        else 0.0
    )

    return TopicSummary(
        total_topics=total_topics,
        total_frequency=sum(analysis.word_counts.values()),
        average_relevance=average,
        language_distribution=distribution,
    )
