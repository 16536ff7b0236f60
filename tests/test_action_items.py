"""
Tests for action item extraction, classification and statistics.
"""

import pytest

from threadsense.intelligence.action_items import (
    MAX_ACTION_TEXT_LENGTH,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_OPEN,
    ActionItemConfig,
    analyze_priority,
    analyze_status,
    clean_action_item_text,
    contains_action_indicators,
    extract_action_items_from_message,
    extract_action_items_from_messages,
    extract_mentions,
    filter_action_items_by_priority,
    get_action_item_statistics,
    get_action_items_for_users,
    get_incomplete_action_items,
    group_action_items_by_status,
)
from threadsense.models import Message


class TestMentions:
    def test_extracts_in_order(self):
        assert extract_mentions("<@U123> and <@W456> please") == ["U123", "W456"]

    def test_no_mentions(self):
        assert extract_mentions("nobody here") == []

    def test_labelled_mention_not_matched(self):
        assert extract_mentions("<@U1|alice>") == []


class TestIndicators:
    def test_word_match(self):
        assert contains_action_indicators("we need to ship", ("need to",))

    def test_substring_fallback(self):
        assert contains_action_indicators("re-review this", ("review",))
        assert contains_action_indicators("two todos left", ("todo",))

    def test_japanese_substring(self):
        assert contains_action_indicators("明日までに対応お願いします", ("対応",))

    def test_case_insensitive(self):
        assert contains_action_indicators("TODO: ship", ("todo",))

    def test_no_match(self):
        assert not contains_action_indicators("lunch plans", ("review", "対応"))


class TestPriority:
    def test_high_beats_medium(self):
        analysis = analyze_priority("urgent, deadline is soon")
        assert analysis.priority == PRIORITY_HIGH
        assert analysis.priority_level == 3

    def test_medium(self):
        analysis = analyze_priority("finish this week")
        assert analysis.priority == PRIORITY_MEDIUM
        assert analysis.keywords_found == ["this week"]

    def test_low(self):
        analysis = analyze_priority("someday maybe")
        assert analysis.priority == PRIORITY_LOW
        assert analysis.keywords_found == []

    def test_japanese(self):
        assert analyze_priority("至急対応").priority == PRIORITY_HIGH
        assert analyze_priority("期限は金曜").priority == PRIORITY_MEDIUM


class TestStatus:
    def test_completed_beats_in_progress(self):
        analysis = analyze_status("was in progress, now done")
        assert analysis.status == STATUS_COMPLETED

    def test_completed_confidence(self):
        analysis = analyze_status("fixed and done")
        assert analysis.keywords_found == ["done", "fixed"]
        assert analysis.confidence == pytest.approx(0.9)

    def test_in_progress(self):
        analysis = analyze_status("実装中です")
        assert analysis.status == STATUS_IN_PROGRESS
        assert analysis.confidence == pytest.approx(0.7)

    def test_open(self):
        analysis = analyze_status("please look at this")
        assert analysis.status == STATUS_OPEN
        assert analysis.confidence == pytest.approx(0.5)

    def test_confidence_capped(self):
        analysis = analyze_status("done completed finished resolved closed fixed")
        assert analysis.confidence == pytest.approx(1.0)


class TestCleanText:
    def test_bullet_and_whitespace(self):
        assert clean_action_item_text("  -   fix   the   build ") == "fix the build"

    def test_ordinal(self):
        assert clean_action_item_text("1. review the PR") == "review the PR"

    def test_length_cap(self):
        assert len(clean_action_item_text("x" * 600)) == MAX_ACTION_TEXT_LENGTH


class TestExtraction:
    def test_one_item_per_line(self):
        message = Message(
            ts="100.1",
            user="U1",
            text="- TODO: fix the login bug urgently <@U2>\n- review the rollback plan\nthanks",
        )
        items = extract_action_items_from_message(message)
        assert [i.text for i in items] == [
            "TODO: fix the login bug urgently <@U2>",
            "review the rollback plan",
        ]
        assert items[0].mentioned_users == ["U2"]
        assert items[0].priority == PRIORITY_HIGH
        assert items[0].status == STATUS_OPEN
        assert items[0].extracted_from_message_ts == "100.1"

    def test_short_lines_dropped(self):
        message = Message(ts="1", text="do it")
        assert extract_action_items_from_message(message) == []

    def test_empty_message(self):
        assert extract_action_items_from_message(Message(ts="1")) == []

    def test_japanese_line(self):
        items = extract_action_items_from_message(Message(ts="1", text="至急レビューをお願いします"))
        assert len(items) == 1
        assert items[0].priority == PRIORITY_HIGH

    def test_custom_indicators(self):
        config = ActionItemConfig(action_indicators=("ship it",))
        message = Message(ts="1", text="let's ship it tonight\nreview later")
        items = extract_action_items_from_message(message, config)
        assert [i.text for i in items] == ["let's ship it tonight"]

    def test_thread_indicators_deduplicated(self):
        messages = [
            Message(ts="1", text="please review the draft"),
            Message(ts="2", text="review again tomorrow"),
        ]
        result = extract_action_items_from_messages(messages)
        assert len(result.action_items) == 2
        assert result.action_indicators_found.count("review") == 1
        assert result.total_action_indicators == len(result.action_indicators_found)

    def test_items_well_formed(self, english_thread):
        result = extract_action_items_from_messages(english_thread)
        assert result.action_items
        for item in result.action_items:
            assert 5 < len(item.text) <= MAX_ACTION_TEXT_LENGTH
            assert item.priority in (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)
            assert item.status in (STATUS_OPEN, STATUS_IN_PROGRESS, STATUS_COMPLETED)


class TestStatistics:
    @pytest.fixture
    def items(self):
        messages = [
            Message(ts="1", text="urgent: fix the login page <@U1>"),
            Message(ts="2", text="review the docs this week"),
            Message(ts="3", text="update the changelog, done"),
        ]
        return extract_action_items_from_messages(messages).action_items

    def test_statistics(self, items):
        stats = get_action_item_statistics(items)
        assert stats.total == 3
        assert stats.by_priority == {"high": 1, "medium": 1, "low": 1}
        assert stats.by_status["completed"] == 1
        assert stats.assigned_count == 1
        assert stats.unassigned_count == 2
        assert stats.completion_rate == pytest.approx(1 / 3)

    def test_empty_statistics(self):
        stats = get_action_item_statistics([])
        assert stats.total == 0
        assert stats.completion_rate == 0.0

    def test_filter_by_priority(self, items):
        assert len(filter_action_items_by_priority(items, PRIORITY_MEDIUM)) == 2
        assert len(filter_action_items_by_priority(items, PRIORITY_HIGH)) == 1

    def test_for_users(self, items):
        assert [i.mentioned_users for i in get_action_items_for_users(items, ["U1"])] == [["U1"]]

    def test_incomplete(self, items):
        assert len(get_incomplete_action_items(items)) == 2

    def test_group_by_status_keys(self, items):
        assert set(group_action_items_by_status(items)) == {"open", "in_progress", "completed"}
