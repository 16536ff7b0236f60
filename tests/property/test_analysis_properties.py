"""
Property-based tests for analysis invariants using Hypothesis.

These tests stress the analyzers with random inputs to find edge cases.
"""

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from threadsense.contracts import enforce_invariants
from threadsense.intelligence.engine import perform_comprehensive_analysis
from threadsense.intelligence.keywords import (
    TopicExtractionConfig,
    extract_keywords,
    extract_topics_from_thread,
    get_topic_relevance,
)
from threadsense.intelligence.ranking import build_thread_profile, compute_relatedness
from threadsense.intelligence.relevance import RelevanceScorer
from threadsense.intelligence.timeline import build_timeline_events, find_high_activity_periods
from threadsense.intelligence.urgency import calculate_urgency_score
from threadsense.models import ConversationThread, Message
from threadsense.text.conjugation import normalize_conjugation
from threadsense.text.language import tokenize_text

JAPANESE_ALPHABET = (
    "あいうえおかきくけこさしすせそたちつてとなにぬねのはひふへほまみむめもやゆよらりるれろわをん"
    "がぎぐげござじずぜぞだでどばびぶべぼっゃゅょ"
    "アイウエオカキクケコサシスセソタチツテトナニヌネノレビューデプロイ"
    "食実装確認修正書読飲遊待言高美静雨学生見行"
)

WORDS = st.sampled_from(
    [
        "deploy",
        "urgent",
        "review",
        "todo",
        "fix",
        "the",
        "pipeline",
        "done",
        "API",
        "実装しています",
        "確認しました",
        "至急",
        "レビュー",
        "<@U1>",
        "asap",
        "lunch",
    ]
)
TEXTS = st.lists(WORDS, min_size=0, max_size=12).map(" ".join)


# ============================================================================
# Text Processing
# ============================================================================


@given(st.text(alphabet=JAPANESE_ALPHABET, max_size=12))
def test_conjugation_normalization_idempotent(word: str):
    """Normalizing twice gives the same answer as normalizing once."""
    once = normalize_conjugation(word)
    assert normalize_conjugation(once) == once


@given(st.text(max_size=40))
def test_conjugation_total(word: str):
    """Normalization never raises and returns text."""
    assert isinstance(normalize_conjugation(word), str)


@given(st.text(max_size=80))
def test_tokens_never_empty_or_spaced(text: str):
    for token in tokenize_text(text):
        assert token
        assert not any(ch.isspace() for ch in token)


# ============================================================================
# Keywords
# ============================================================================


@given(TEXTS, st.integers(min_value=0, max_value=10))
def test_keyword_count_bounded(text: str, max_topics: int):
    result = extract_keywords(text, TopicExtractionConfig(max_topics=max_topics))
    assert len(result.keywords) <= max_topics
    assert all(weight > 0 for weight in result.frequency.values())


@given(st.lists(TEXTS, min_size=1, max_size=5))
def test_topic_relevance_in_unit_interval(texts: list[str]):
    result = extract_topics_from_thread([Message(ts=str(i), text=t) for i, t in enumerate(texts)])
    for topic in result.topics:
        assert 0.0 < get_topic_relevance(topic, result) <= 1.0


# ============================================================================
# Timeline
# ============================================================================


@given(
    st.lists(st.integers(min_value=0, max_value=20000), min_size=0, max_size=30),
    st.integers(min_value=1, max_value=60),
    st.integers(min_value=1, max_value=5),
)
def test_activity_periods_disjoint(offsets: list[int], window: int, min_messages: int):
    messages = [Message(ts=str(t), user=f"U{t % 3}") for t in sorted(offsets)]
    periods = find_high_activity_periods(build_timeline_events(messages), window, min_messages)
    ordered = sorted(periods, key=lambda p: p.start_time)
    for earlier, later in zip(ordered, ordered[1:]):
        assert later.start_time >= earlier.end_time
    assert all(p.message_count >= min_messages for p in periods)


# ============================================================================
# Scores
# ============================================================================


@given(st.lists(TEXTS, min_size=0, max_size=30))
def test_urgency_clamped(texts: list[str]):
    score = calculate_urgency_score([Message(ts="1", text=t) for t in texts]).score
    assert 0.0 <= score <= 1.0


@given(st.lists(TEXTS, min_size=1, max_size=6), TEXTS)
def test_tfidf_scores_in_unit_interval(texts: list[str], query: str):
    messages = [Message(ts=str(i), text=t) for i, t in enumerate(texts)]
    scores = RelevanceScorer().calculate_tfidf_scores(messages, query)
    assert len(scores) == len(messages)
    assert all(0.0 <= s <= 1.0 + 1e-9 for s in scores)


def _thread(thread_ts: int, texts: list[str], users: list[str]) -> ConversationThread:
    return ConversationThread(
        thread_ts=str(thread_ts),
        messages=tuple(
            Message(ts=str(thread_ts + i), user=u, text=t)
            for i, (t, u) in enumerate(zip(texts, users))
        ),
    )


USERS = st.lists(st.sampled_from(["U1", "U2", "U3", "U4"]), min_size=6, max_size=6)


@given(
    st.lists(TEXTS, min_size=1, max_size=6),
    st.lists(TEXTS, min_size=1, max_size=6),
    USERS,
    USERS,
    st.integers(min_value=0, max_value=10**6),
)
def test_relatedness_symmetric_and_bounded(texts_a, texts_b, users_a, users_b, offset):
    a = build_thread_profile(_thread(1700000000, texts_a, users_a))
    b = build_thread_profile(_thread(1700000000 + offset, texts_b, users_b))
    forward = compute_relatedness(a, b).score
    backward = compute_relatedness(b, a).score
    assert abs(forward - backward) < 1e-9
    assert 0.0 <= forward <= 1.0 + 1e-9


@given(st.lists(TEXTS, min_size=1, max_size=6), USERS)
def test_identical_threads_fully_related(texts, users):
    profile = build_thread_profile(_thread(1700000000, texts, users))
    assume(profile.words)
    assert abs(compute_relatedness(profile, profile).score - 1.0) < 1e-9


# ============================================================================
# End-to-End
# ============================================================================


@settings(max_examples=30, deadline=None)
@given(
    st.lists(
        st.tuples(st.integers(min_value=0, max_value=100000), TEXTS),
        min_size=0,
        max_size=12,
    )
)
def test_comprehensive_analysis_satisfies_invariants(rows):
    messages = [{"ts": str(ts), "user": f"U{ts % 4}", "text": text} for ts, text in rows]
    analysis = perform_comprehensive_analysis(messages).to_dict()
    assert enforce_invariants(analysis) == []
