"""
Relevance Scoring — ThreadSense

Scores messages against a search query by combining three signals:
- TF-IDF content match (all query terms must appear), normalized so the
  best message scores 1.0
- time decay: exponential with a configurable half life
- engagement: reactions, replies and mentions

composite = 0.4 * tfidf + 0.25 * time_decay + 0.2 * engagement

Pass `now` (epoch seconds) to score against a fixed reference time;
leaving it out uses the wall clock.
"""

import logging
import math
import re
import time
from collections.abc import Sequence
from dataclasses import dataclass

from threadsense.intelligence.timeline import parse_timestamp
from threadsense.models import Message
from threadsense.text.language import clean_text, is_japanese_char, tokenize_text

logger = logging.getLogger(__name__)


ENGAGEMENT_MENTION_RE = re.compile(r"<@[A-Z0-9]+>")
ENGAGEMENT_NORMALIZER = 10.0


@dataclass(frozen=True)
class RelevanceConfig:
    tfidf_weight: float = 0.4
    time_decay_weight: float = 0.25
    engagement_weight: float = 0.2
    time_decay_half_life_hours: float = 24.0
    reaction_weight: float = 0.3
    reply_weight: float = 0.5
    mention_weight: float = 0.2


DEFAULT_RELEVANCE_CONFIG = RelevanceConfig()


@dataclass
class RelevanceScore:
    tfidf_score: float = 0.0
    time_decay_score: float = 0.0
    engagement_score: float = 0.0
    composite_score: float = 0.0
    confidence: float = 0.0

    def to_dict(self) -> dict:
        return {
            "tfidf_score": round(self.tfidf_score, 3),
            "time_decay_score": round(self.time_decay_score, 3),
            "engagement_score": round(self.engagement_score, 3),
            "composite_score": round(self.composite_score, 3),
            "confidence": round(self.confidence, 3),
        }


def _query_terms(query: str) -> list[str]:
    return list(dict.fromkeys(t.lower() for t in tokenize_text(clean_text(query))))


def _term_frequency(term: str, text: str) -> int:
    # Japanese text is unsegmented, so count substring hits instead of words
    if is_japanese_char(term):
        return text.count(term)
    return len(re.findall(rf"\b{re.escape(term)}\b", text, re.ASCII))


class RelevanceScorer:
    """Scores a batch of messages against a query."""

    def __init__(self, config: RelevanceConfig = DEFAULT_RELEVANCE_CONFIG):
        self.config = config

    def calculate_tfidf_scores(self, messages: Sequence[Message], query: str) -> list[float]:
        """
        Per-message TF-IDF against query, scaled to [0, 1] by the best score.

        A message that misses any query term scores 0.
        """
        scores = [0.0] * len(messages)
        terms = _query_terms(query)
        if not terms or not messages:
            return scores

        texts = [clean_text(m.text or "").lower() for m in messages]
        token_lists = [tokenize_text(text) for text in texts]
        frequencies = [[_term_frequency(term, text) for term in terms] for text in texts]

        document_count = len(messages)
        idf = []
        for i in range(len(terms)):
            df = sum(1 for row in frequencies if row[i] > 0)
            idf.append(math.log(1 + document_count / df) if df else 0.0)

        for index, (row, tokens) in enumerate(zip(frequencies, token_lists)):
            if not all(row):
                continue
            length_norm = math.sqrt(max(len(tokens), 1))
            scores[index] = sum(tf * weight for tf, weight in zip(row, idf)) / length_norm

        best = max(scores)
        if best > 0:
            scores = [s / best for s in scores]
        return scores

    def calculate_time_decay(self, ts: str, now: float | None = None) -> float:
        """exp(-ln2 / half_life * age_hours); future messages 1, bad timestamps 0."""
        timestamp = parse_timestamp(ts)
        if timestamp is None:
            return 0.0

        reference = time.time() if now is None else now
        hours = (reference - timestamp) / 3600
        if hours < 0:
            return 1.0

        decay_rate = math.log(2) / self.config.time_decay_half_life_hours
        return max(0.0, min(1.0, math.exp(-decay_rate * hours)))

    def calculate_engagement_score(self, message: Message) -> float:
        """(0.3*reactions + 0.5*replies + 0.2*mentions) / 10, capped at 1."""
        score = 0.0
        if message.reactions:
            score += sum(r.count for r in message.reactions) * self.config.reaction_weight
        if message.reply_count > 0:
            score += message.reply_count * self.config.reply_weight
        if message.text:
            score += len(ENGAGEMENT_MENTION_RE.findall(message.text)) * self.config.mention_weight
        return min(1.0, score / ENGAGEMENT_NORMALIZER)

    def calculate_relevance(
        self,
        messages: Sequence[Message],
        query: str,
        now: float | None = None,
    ) -> list[RelevanceScore]:
        """
        One RelevanceScore per input message, in input order.

        Messages without a timestamp get an all-zero score and take no
        part in the TF-IDF statistics.
        """
        reference = time.time() if now is None else now
        valid_indexes = [i for i, m in enumerate(messages) if m.ts]
        valid = [messages[i] for i in valid_indexes]
        tfidf_scores = self.calculate_tfidf_scores(valid, query)

        results = [RelevanceScore() for _ in messages]
        for index, message, tfidf in zip(valid_indexes, valid, tfidf_scores):
            time_decay = self.calculate_time_decay(message.ts, reference)
            engagement = self.calculate_engagement_score(message)

            composite = (
                tfidf * self.config.tfidf_weight
                + time_decay * self.config.time_decay_weight
                + engagement * self.config.engagement_weight
            )

            confidence = 0.5
            if tfidf > 0:
                confidence += 0.3
            if engagement > 0:
                confidence += 0.2

            results[index] = RelevanceScore(
                tfidf_score=tfidf,
                time_decay_score=time_decay,
                engagement_score=engagement,
                composite_score=composite,
                confidence=min(1.0, confidence),
            )

        logger.debug(
            "Scored message relevance",
            extra={"message_count": len(messages), "scored_count": len(valid)},
        )
        return results

    def rerank(
        self,
        messages: Sequence[Message],
        query: str,
        now: float | None = None,
    ) -> list[Message]:
        """Messages sorted by composite relevance, best first (stable)."""
        scores = self.calculate_relevance(messages, query, now)
        order = sorted(
            range(len(messages)), key=lambda i: scores[i].composite_score, reverse=True
        )
        return [messages[i] for i in order]
