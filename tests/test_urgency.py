"""
Tests for urgency, importance and priority scoring.
"""

import pytest

from threadsense.intelligence import action_items, sentiment, urgency
from threadsense.intelligence.urgency import (
    ImportanceScore,
    UrgencyConfig,
    UrgencyScore,
    calculate_importance_score,
    calculate_message_count_factor,
    calculate_priority_score,
    calculate_urgency_score,
    count_keywords,
    get_importance_level,
    get_thread_priority,
    get_urgency_level,
)
from threadsense.models import Message


def _thread(*texts, users=None):
    users = users or ["U1"] * len(texts)
    return [Message(ts=str(i), user=u, text=t) for i, (t, u) in enumerate(zip(texts, users))]


class TestKeywordCounting:
    def test_counts_occurrences(self):
        assert count_keywords("urgent urgent asap", ("urgent", "asap", "now")) == {
            "urgent": 2,
            "asap": 1,
        }

    def test_word_boundaries(self):
        assert count_keywords("i know it", ("now",)) == {}

    def test_japanese_substring(self):
        assert count_keywords("これは緊急です", ("緊急",)) == {"緊急": 1}

    def test_keyword_patterns_keep_no_state(self):
        helpers = (
            urgency._keyword_pattern,
            action_items._word_boundary_pattern,
            sentiment._word_pattern,
        )
        for helper in helpers:
            assert not hasattr(helper, "cache_info")
        assert count_keywords("ship it", ("ship",)) == {"ship": 1}
        assert count_keywords("ship it", ("it",)) == {"it": 1}

    def test_regex_metacharacters_escaped(self):
        assert count_keywords("version 5.0 shipped", ("5.0",)) == {"5.0": 1}
        assert count_keywords("5x0", ("5.0",)) == {}


class TestUrgency:
    def test_keywords(self):
        score = calculate_urgency_score(_thread("This is urgent, fix ASAP"))
        assert score.score == pytest.approx(0.4)
        assert score.urgent_keywords == ["urgent", "asap"]
        assert score.level == "medium"

    def test_clamped(self):
        score = calculate_urgency_score(_thread("urgent " * 6))
        assert score.score == 1.0
        assert score.level == "critical"

    def test_message_count_factor(self):
        config = UrgencyConfig()
        assert calculate_message_count_factor(10, config) == 0.0
        assert calculate_message_count_factor(11, config) == pytest.approx(0.3)
        assert calculate_message_count_factor(21, config) == pytest.approx(0.6)

    def test_busy_thread(self):
        score = calculate_urgency_score(_thread(*["ok"] * 25))
        assert score.score == pytest.approx(0.6)
        assert score.level == "high"

    def test_japanese(self):
        score = calculate_urgency_score(_thread("緊急です"))
        assert score.score == pytest.approx(0.2)
        assert score.level == "low"

    def test_empty(self):
        score = calculate_urgency_score([])
        assert score.score == 0.0
        assert score.urgent_keywords == []


class TestImportance:
    def test_factors(self):
        score = calculate_importance_score(
            _thread("client budget", "approval pending", "ok", users=["U1", "U2", "U3"])
        )
        assert score.participant_factor == pytest.approx(0.15)
        assert score.message_factor == pytest.approx(0.06)
        assert score.keyword_factor == pytest.approx(0.2)
        assert score.score == pytest.approx(0.41)
        assert score.level == "medium"

    def test_explicit_participant_count(self):
        score = calculate_importance_score(_thread("hi"), participant_count=10)
        # participant factor saturates at 0.3
        assert score.participant_factor == pytest.approx(0.3)

    def test_clamped(self):
        text = "decision budget launch release client customer revenue milestone contract legal"
        users = [f"U{i}" for i in range(30)]
        score = calculate_importance_score(_thread(*[text] * 30, users=users))
        assert score.score == 1.0

    def test_anonymous_messages_not_participants(self):
        messages = [Message(ts="1", text="hello"), Message(ts="2", user="U1", text="hi")]
        assert calculate_importance_score(messages).participant_factor == pytest.approx(0.05)


class TestLevels:
    @pytest.mark.parametrize(
        "score,level",
        [(0.8, "critical"), (0.6, "high"), (0.3, "medium"), (0.29, "low"), (0.0, "low")],
    )
    def test_urgency_levels(self, score, level):
        assert get_urgency_level(score) == level

    @pytest.mark.parametrize(
        "score,level",
        [(0.8, "critical"), (0.6, "high"), (0.4, "medium"), (0.39, "low")],
    )
    def test_importance_levels(self, score, level):
        assert get_importance_level(score) == level


class TestPriority:
    def test_priority_score(self):
        assert calculate_priority_score(UrgencyScore(0.5), ImportanceScore(0.5)) == pytest.approx(0.5)

    def test_urgent_and_important_is_critical(self):
        assert get_thread_priority(UrgencyScore(0.5), ImportanceScore(0.4)) == "critical"

    def test_urgent_alone_is_high(self):
        assert get_thread_priority(UrgencyScore(0.5), ImportanceScore(0.0)) == "high"

    def test_normal(self):
        assert get_thread_priority(UrgencyScore(0.45), ImportanceScore(0.35)) == "normal"

    def test_low(self):
        assert get_thread_priority(UrgencyScore(0.1), ImportanceScore(0.1)) == "low"
