"""
Tests for DecisionExtractor.
"""

import pytest

from threadsense.intelligence.decisions import DecisionConfig, DecisionExtractor
from threadsense.models import Message


@pytest.fixture
def extractor():
    return DecisionExtractor()


class TestConfidence:
    def test_explicit_decision(self, extractor):
        text = "DECISION: we have decided to ship on Friday"
        assert extractor.calculate_confidence(text) == 1.0

    def test_weak_agreement(self, extractor):
        # base 0.4 + one keyword 0.15
        assert extractor.calculate_confidence("I agree") == pytest.approx(0.55)

    def test_keyword_bonus_capped(self, extractor):
        keywords = extractor.find_keywords("decided approved confirmed")
        assert len(keywords) >= 3
        # 0.4 + 0.3 (capped) + 0.1 (length)
        assert extractor.calculate_confidence("decided approved confirmed") == pytest.approx(0.8)


class TestExtraction:
    def test_extracts_confident_decisions(self, extractor):
        messages = [
            Message(ts="1", user="U1", text="what should we do?"),
            Message(ts="2", user="U2", text="DECISION: we have decided to ship on Friday"),
            Message(ts="3", user="U3", text="I agree"),
        ]
        result = extractor.extract_decisions(messages)
        assert result.total_messages == 3
        assert len(result.decisions) == 1

        decision = result.decisions[0]
        assert decision.message_index == 1
        assert decision.participant == "U2"
        assert decision.language == "en"
        assert decision.keywords[:2] == ["decided", "decide"]

    def test_japanese_decision(self, extractor):
        result = extractor.extract_decisions([Message(ts="5", user="U1", text="予算を正式に承認しました")])
        assert len(result.decisions) == 1
        assert result.decisions[0].language == "ja"
        assert result.decisions[0].timestamp == "5"

    def test_threshold_is_exclusive(self):
        extractor = DecisionExtractor(min_confidence=1.0)
        message = Message(ts="1", text="DECISION: we have decided to ship on Friday")
        assert extractor.extract_decisions([message]).decisions == []

    def test_no_text(self, extractor):
        assert extractor.extract_decisions([Message(ts="1")]).decisions == []

    def test_decision_text_is_plain(self, extractor):
        message = Message(ts="1", text="DECISION: *ship* on Friday, we have decided <@U1>")
        (decision,) = extractor.extract_decisions([message]).decisions
        assert decision.text == "DECISION: ship on Friday, we have decided"


class TestFromConfig:
    def test_config_values(self):
        config = DecisionConfig(english_keywords=("ship",), min_confidence=0.5)
        extractor = DecisionExtractor.from_config(config)
        assert extractor.english_keywords == ("ship",)
        assert extractor.min_confidence == 0.5
        # "I agree" no longer matches once the keyword list is replaced
        assert not extractor.is_decision_message(Message(ts="1", text="I agree"))
