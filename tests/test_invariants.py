"""
Tests for analysis invariants (threadsense.contracts).
"""

import pytest

from threadsense.contracts import (
    ALL_INVARIANTS,
    InvariantViolation,
    enforce_invariants,
    enforce_invariants_strict,
)
from threadsense.contracts.invariants import (
    check_action_items_well_formed,
    check_activity_periods_disjoint,
    check_timeline_follows_messages,
    check_topic_count_within_bound,
    check_topics_have_weight,
    check_urgency_in_range,
)
from threadsense.intelligence.engine import perform_comprehensive_analysis


def _analysis(**overrides) -> dict:
    analysis = {
        "topics": {"topics": ["deploy"], "word_counts": {"deploy": 2.0}},
        "urgency": {"score": 0.4},
        "action_items": {
            "action_items": [{"text": "fix the build", "priority": "high", "status": "open"}]
        },
        "timeline": {"events": [{"message_index": 0}, {"message_index": 2}]},
        "activity_periods": [
            {"start_time": 0, "end_time": 1800},
            {"start_time": 1800, "end_time": 3600},
        ],
        "metadata": {"max_topics": 20, "message_count": 3},
    }
    analysis.update(overrides)
    return analysis


class TestIndividualInvariants:
    def test_valid_analysis_passes(self):
        for invariant in ALL_INVARIANTS:
            invariant(_analysis())

    def test_topic_bound(self):
        analysis = _analysis(metadata={"max_topics": 0, "message_count": 3})
        with pytest.raises(InvariantViolation):
            check_topic_count_within_bound(analysis)

    def test_topic_weight(self):
        analysis = _analysis(topics={"topics": ["ghost"], "word_counts": {}})
        with pytest.raises(InvariantViolation, match="ghost"):
            check_topics_have_weight(analysis)

    def test_overlapping_periods(self):
        analysis = _analysis(
            activity_periods=[
                {"start_time": 0, "end_time": 1800},
                {"start_time": 900, "end_time": 2700},
            ]
        )
        with pytest.raises(InvariantViolation, match="overlap"):
            check_activity_periods_disjoint(analysis)

    def test_short_action_item(self):
        analysis = _analysis(
            action_items={"action_items": [{"text": "do it", "priority": "low", "status": "open"}]}
        )
        with pytest.raises(InvariantViolation):
            check_action_items_well_formed(analysis)

    def test_unknown_status(self):
        analysis = _analysis(
            action_items={
                "action_items": [{"text": "fix the build", "priority": "low", "status": "maybe"}]
            }
        )
        with pytest.raises(InvariantViolation, match="status"):
            check_action_items_well_formed(analysis)

    def test_timeline_order(self):
        analysis = _analysis(timeline={"events": [{"message_index": 2}, {"message_index": 1}]})
        with pytest.raises(InvariantViolation):
            check_timeline_follows_messages(analysis)

    def test_more_events_than_messages(self):
        events = [{"message_index": i} for i in range(5)]
        with pytest.raises(InvariantViolation):
            check_timeline_follows_messages(_analysis(timeline={"events": events}))

    def test_urgency_range(self):
        with pytest.raises(InvariantViolation):
            check_urgency_in_range(_analysis(urgency={"score": 1.5}))


class TestEnforcement:
    def test_collects_all_violations(self):
        analysis = _analysis(urgency={"score": -1}, topics={"topics": ["x"], "word_counts": {}})
        violations = enforce_invariants(analysis)
        assert len(violations) == 2
        assert all(v.startswith("INVARIANT_VIOLATION:") for v in violations)

    def test_strict_raises(self):
        with pytest.raises(InvariantViolation):
            enforce_invariants_strict(_analysis(urgency={"score": 2}))

    def test_real_analysis_clean(self, english_thread, japanese_thread):
        for thread in (english_thread, japanese_thread, []):
            analysis = perform_comprehensive_analysis(thread).to_dict()
            assert enforce_invariants(analysis) == []
