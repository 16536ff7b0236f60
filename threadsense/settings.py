"""
Analysis profile loading for ThreadSense.

An analysis profile is a YAML file that overrides any of the built-in
analysis defaults, section by section:

    topics:
      max_topics: 15
      extra_english_stop_words: [thread, slack]
    action_items:
      action_indicators: [todo, "need to", 対応]
    timeline:
      window_minutes: 15
    ranking:
      similarity_threshold: 0.4
    decisions:
      min_confidence: 0.8

Unknown sections and keys, wrong types and out-of-range values are
rejected with ConfigError. A missing or unreadable file is not an error:
it is logged and the defaults are used.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from threadsense.intelligence.action_items import DEFAULT_ACTION_ITEM_CONFIG, ActionItemConfig
from threadsense.intelligence.decisions import DEFAULT_DECISION_CONFIG, DecisionConfig
from threadsense.intelligence.keywords import DEFAULT_TOPIC_CONFIG, TopicExtractionConfig
from threadsense.intelligence.ranking import DEFAULT_RANKING_CONFIG, RankingConfig
from threadsense.intelligence.relevance import DEFAULT_RELEVANCE_CONFIG, RelevanceConfig
from threadsense.intelligence.sentiment import DEFAULT_SENTIMENT_CONFIG, SentimentConfig
from threadsense.intelligence.timeline import DEFAULT_TIMELINE_CONFIG, TimelineConfig
from threadsense.intelligence.urgency import (
    DEFAULT_IMPORTANCE_CONFIG,
    DEFAULT_URGENCY_CONFIG,
    ImportanceConfig,
    UrgencyConfig,
)

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when an analysis profile has invalid content."""

    pass


@dataclass(frozen=True)
class AnalysisConfig:
    """Every analysis tunable, grouped by the component it configures."""

    topics: TopicExtractionConfig = DEFAULT_TOPIC_CONFIG
    action_items: ActionItemConfig = DEFAULT_ACTION_ITEM_CONFIG
    timeline: TimelineConfig = DEFAULT_TIMELINE_CONFIG
    urgency: UrgencyConfig = DEFAULT_URGENCY_CONFIG
    importance: ImportanceConfig = DEFAULT_IMPORTANCE_CONFIG
    relevance: RelevanceConfig = DEFAULT_RELEVANCE_CONFIG
    ranking: RankingConfig = DEFAULT_RANKING_CONFIG
    sentiment: SentimentConfig = DEFAULT_SENTIMENT_CONFIG
    decisions: DecisionConfig = DEFAULT_DECISION_CONFIG
    source: str | None = field(default=None, compare=False)  # profile path, if any


DEFAULT_ANALYSIS_CONFIG = AnalysisConfig()


# =============================================================================
# PROFILE SCHEMA
# =============================================================================


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TopicsSection(_Section):
    max_topics: int | None = Field(default=None, ge=0)
    min_word_length: int | None = Field(default=None, ge=1)
    prefer_kanji: bool | None = None
    prefer_katakana: bool | None = None
    enable_conjugation_normalization: bool | None = None
    english_stop_words: list[str] | None = None
    japanese_stop_words: list[str] | None = None
    extra_english_stop_words: list[str] = []
    extra_japanese_stop_words: list[str] = []


class ActionItemsSection(_Section):
    action_indicators: list[str] | None = None
    high_priority_keywords: list[str] | None = None
    medium_priority_keywords: list[str] | None = None
    completed_keywords: list[str] | None = None
    in_progress_keywords: list[str] | None = None


class TimelineSection(_Section):
    window_minutes: float | None = Field(default=None, gt=0)
    min_messages: int | None = Field(default=None, ge=1)
    min_gap_minutes: float | None = Field(default=None, ge=0)


class UrgencySection(_Section):
    urgent_keywords: list[str] | None = None
    keyword_weight: float | None = Field(default=None, ge=0)
    medium_message_threshold: int | None = Field(default=None, ge=0)
    high_message_threshold: int | None = Field(default=None, ge=0)
    message_count_weight: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _thresholds_ordered(self) -> "UrgencySection":
        medium = self.medium_message_threshold
        high = self.high_message_threshold
        if medium is not None and high is not None and high < medium:
            raise ValueError("high_message_threshold must be >= medium_message_threshold")
        return self


class ImportanceSection(_Section):
    important_keywords: list[str] | None = None
    participant_weight: float | None = Field(default=None, ge=0)
    message_weight: float | None = Field(default=None, ge=0)
    keyword_weight: float | None = Field(default=None, ge=0)
    max_participant_score: float | None = Field(default=None, ge=0)
    max_message_score: float | None = Field(default=None, ge=0)


class RelevanceSection(_Section):
    tfidf_weight: float | None = Field(default=None, ge=0)
    time_decay_weight: float | None = Field(default=None, ge=0)
    engagement_weight: float | None = Field(default=None, ge=0)
    time_decay_half_life_hours: float | None = Field(default=None, gt=0)
    reaction_weight: float | None = Field(default=None, ge=0)
    reply_weight: float | None = Field(default=None, ge=0)
    mention_weight: float | None = Field(default=None, ge=0)


class RankingSection(_Section):
    importance_threshold: float | None = Field(default=None, ge=0)
    importance_limit: int | None = Field(default=None, ge=1)
    similarity_threshold: float | None = Field(default=None, ge=0, le=1)
    max_related_results: int | None = Field(default=None, ge=1)


class SentimentSection(_Section):
    positive_words: list[str] | None = None
    negative_words: list[str] | None = None
    threshold: float | None = Field(default=None, gt=0)


class DecisionsSection(_Section):
    english_keywords: list[str] | None = None
    japanese_keywords: list[str] | None = None
    min_confidence: float | None = Field(default=None, ge=0, le=1)


class AnalysisProfile(_Section):
    topics: TopicsSection = TopicsSection()
    action_items: ActionItemsSection = ActionItemsSection()
    timeline: TimelineSection = TimelineSection()
    urgency: UrgencySection = UrgencySection()
    importance: ImportanceSection = ImportanceSection()
    relevance: RelevanceSection = RelevanceSection()
    ranking: RankingSection = RankingSection()
    sentiment: SentimentSection = SentimentSection()
    decisions: DecisionsSection = DecisionsSection()


# =============================================================================
# LOADING
# =============================================================================


def _overrides(section: BaseModel) -> dict[str, Any]:
    """Explicitly set, non-null fields, with lists frozen to tuples."""
    values = {}
    for key, value in section.model_dump(exclude_none=True, exclude_unset=True).items():
        values[key] = tuple(value) if isinstance(value, list) else value
    return values


def _topic_config(section: TopicsSection) -> TopicExtractionConfig:
    values = _overrides(section)
    extra_english = values.pop("extra_english_stop_words", ())
    extra_japanese = values.pop("extra_japanese_stop_words", ())

    english = frozenset(values.pop("english_stop_words", DEFAULT_TOPIC_CONFIG.english_stop_words))
    japanese = frozenset(
        values.pop("japanese_stop_words", DEFAULT_TOPIC_CONFIG.japanese_stop_words)
    )
    return dataclasses.replace(
        DEFAULT_TOPIC_CONFIG,
        english_stop_words=english | {w.lower() for w in extra_english},
        japanese_stop_words=japanese | frozenset(extra_japanese),
        **values,
    )


def build_analysis_config(data: dict[str, Any], source: str | None = None) -> AnalysisConfig:
    """
    Validate a parsed profile and merge it over the defaults.

    Raises:
        ConfigError: If the profile has unknown keys or invalid values
    """
    try:
        profile = AnalysisProfile.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid analysis profile {source or '<inline>'}: {exc}") from exc

    return AnalysisConfig(
        topics=_topic_config(profile.topics),
        action_items=dataclasses.replace(DEFAULT_ACTION_ITEM_CONFIG, **_overrides(profile.action_items)),
        timeline=dataclasses.replace(DEFAULT_TIMELINE_CONFIG, **_overrides(profile.timeline)),
        urgency=dataclasses.replace(DEFAULT_URGENCY_CONFIG, **_overrides(profile.urgency)),
        importance=dataclasses.replace(DEFAULT_IMPORTANCE_CONFIG, **_overrides(profile.importance)),
        relevance=dataclasses.replace(DEFAULT_RELEVANCE_CONFIG, **_overrides(profile.relevance)),
        ranking=dataclasses.replace(DEFAULT_RANKING_CONFIG, **_overrides(profile.ranking)),
        sentiment=dataclasses.replace(DEFAULT_SENTIMENT_CONFIG, **_overrides(profile.sentiment)),
        decisions=dataclasses.replace(DEFAULT_DECISION_CONFIG, **_overrides(profile.decisions)),
        source=source,
    )


def _load_yaml(config_path: Path) -> dict:
    """Load YAML profile, return empty dict on failure."""
    if not config_path.exists():
        logger.warning("Analysis profile not found at %s, using defaults", config_path)
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as exc:
        logger.error("Failed to load analysis profile %s: %s", config_path, exc)
        return {}


def load_analysis_config(config_path: str | Path | None = None) -> AnalysisConfig:
    """
    Load an analysis profile, falling back to defaults.

    Args:
        config_path: YAML profile path. None means built-in defaults.

    Raises:
        ConfigError: If the file parses but its content is invalid
    """
    if config_path is None:
        return DEFAULT_ANALYSIS_CONFIG

    path = Path(config_path)
    data = _load_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError(f"Analysis profile {path} must be a mapping, got {type(data).__name__}")

    config = build_analysis_config(data, source=str(path))
    logger.debug("Loaded analysis profile", extra={"profile": str(path)})
    return config
