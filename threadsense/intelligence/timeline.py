"""
Timeline & Activity — ThreadSense

Turns a thread's messages into a timeline of events and derives
pacing statistics from it: response times, message velocity, bursts
of activity and long silences.

Timestamps are epoch seconds carried as text ("1700000000.000100").
Messages whose timestamp does not parse are left out of the timeline
rather than rejected.
"""

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from threadsense.models import Message

logger = logging.getLogger(__name__)


UNKNOWN_USER = "unknown"
EVENT_TYPE_MESSAGE = "message"

# Leading decimal number, ignoring whatever follows ("12abc" -> 12)
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class TimelineConfig:
    window_minutes: float = 30
    min_messages: int = 3
    min_gap_minutes: float = 60


DEFAULT_TIMELINE_CONFIG = TimelineConfig()


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class TimelineEvent:
    timestamp: str  # original text
    user_id: str
    event_type: str
    content: str | None
    message_index: int  # position in the source message list
    time_since_start: float  # minutes since the first timed event

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "user_id": self.user_id,
            "event_type": self.event_type,
            "content": self.content,
            "message_index": self.message_index,
            "time_since_start": round(self.time_since_start, 3),
        }


@dataclass
class TimelineAnalysis:
    events: list[TimelineEvent] = field(default_factory=list)
    total_duration: float = 0.0  # minutes
    average_response_time: float = 0.0  # minutes
    message_velocity: float = 0.0  # messages per hour

    def to_dict(self) -> dict:
        return {
            "events": [e.to_dict() for e in self.events],
            "total_duration": round(self.total_duration, 3),
            "average_response_time": round(self.average_response_time, 3),
            "message_velocity": round(self.message_velocity, 3),
        }


@dataclass
class ActivityPeriod:
    start_time: float  # epoch seconds
    end_time: float
    message_count: int
    participants: list[str]

    def overlaps(self, other: "ActivityPeriod") -> bool:
        return self.start_time < other.end_time and self.end_time > other.start_time

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "message_count": self.message_count,
            "participants": self.participants,
        }


@dataclass
class ConversationGap:
    start_time: float
    end_time: float
    duration_minutes: float

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_minutes": round(self.duration_minutes, 3),
        }


@dataclass
class MostActiveUser:
    user_id: str
    message_count: int


@dataclass
class UserParticipationStats:
    total_users: int
    user_message_counts: dict[str, int]
    most_active_user: MostActiveUser | None
    user_response_times: dict[str, list[float]]

    def to_dict(self) -> dict:
        most_active = None
        if self.most_active_user:
            most_active = {
                "user_id": self.most_active_user.user_id,
                "message_count": self.most_active_user.message_count,
            }
        return {
            "total_users": self.total_users,
            "user_message_counts": self.user_message_counts,
            "most_active_user": most_active,
            "user_response_times": {
                user: [round(t, 3) for t in times]
                for user, times in self.user_response_times.items()
            },
        }


# =============================================================================
# PRIMITIVES
# =============================================================================


def parse_timestamp(ts: str | None) -> float | None:
    """
    Parse an epoch-seconds timestamp leniently.

    Reads the leading number and ignores any trailing text; returns None
    when there is no leading number at all.

        parse_timestamp("1700000000.0001") -> 1700000000.0001
        parse_timestamp("12abc") -> 12.0
        parse_timestamp("not-a-number") -> None
    """
    if not ts:
        return None
    match = _LEADING_NUMBER_RE.match(ts)
    if not match:
        return None
    value = float(match.group(1))
    return value if math.isfinite(value) else None


def calculate_time_difference(start_ts: float, end_ts: float) -> float:
    """Seconds between two timestamps, in minutes."""
    return (end_ts - start_ts) / 60


def _consecutive_deltas(events: Sequence[TimelineEvent]) -> list[float]:
    deltas: list[float] = []
    for previous, current in zip(events, events[1:]):
        previous_time = parse_timestamp(previous.timestamp)
        current_time = parse_timestamp(current.timestamp)
        if previous_time is not None and current_time is not None:
            deltas.append(calculate_time_difference(previous_time, current_time))
    return deltas


# =============================================================================
# TIMELINE
# =============================================================================


def build_timeline_events(messages: Sequence[Message]) -> list[TimelineEvent]:
    """
    One event per message with a parseable timestamp.

    Minutes are measured from the first parseable timestamp in the list.
    """
    events: list[TimelineEvent] = []
    start_time: float | None = None

    for index, message in enumerate(messages):
        timestamp = parse_timestamp(message.ts)
        if timestamp is None:
            continue
        if start_time is None:
            start_time = timestamp

        events.append(
            TimelineEvent(
                timestamp=message.ts,
                user_id=message.user or UNKNOWN_USER,
                event_type=EVENT_TYPE_MESSAGE,
                content=message.text,
                message_index=index,
                time_since_start=calculate_time_difference(start_time, timestamp),
            )
        )

    return events


def calculate_response_times(events: Sequence[TimelineEvent]) -> list[float]:
    """Minutes between each pair of consecutive events."""
    return _consecutive_deltas(events)


def calculate_average_response_time(response_times: Sequence[float]) -> float:
    if not response_times:
        return 0.0
    return sum(response_times) / len(response_times)


def calculate_message_velocity(
    events: Sequence[TimelineEvent],
    total_duration_minutes: float,
) -> float:
    """Messages per hour; 0 when the thread has no measurable duration."""
    if total_duration_minutes <= 0 or not events:
        return 0.0
    return len(events) / (total_duration_minutes / 60)


def get_total_duration(events: Sequence[TimelineEvent]) -> float:
    """Minutes from first to last event; 0 for fewer than two events."""
    if len(events) < 2:
        return 0.0

    first_time = parse_timestamp(events[0].timestamp)
    last_time = parse_timestamp(events[-1].timestamp)
    if first_time is None or last_time is None:
        return 0.0

    return calculate_time_difference(first_time, last_time)


def build_thread_timeline(messages: Sequence[Message]) -> TimelineAnalysis:
    events = build_timeline_events(messages)
    total_duration = get_total_duration(events)
    response_times = calculate_response_times(events)

    return TimelineAnalysis(
        events=events,
        total_duration=total_duration,
        average_response_time=calculate_average_response_time(response_times),
        message_velocity=calculate_message_velocity(events, total_duration),
    )


# =============================================================================
# PARTICIPATION
# =============================================================================


def group_events_by_user(events: Sequence[TimelineEvent]) -> dict[str, list[TimelineEvent]]:
    """Events per user id, users in first-seen order."""
    groups: dict[str, list[TimelineEvent]] = {}
    for event in events:
        groups.setdefault(event.user_id, []).append(event)
    return groups


def get_user_participation_stats(events: Sequence[TimelineEvent]) -> UserParticipationStats:
    """
    Per-user message counts and gaps between a user's own messages.

    The most active user is the one with the strictly greatest count;
    on a tie the user seen first keeps the title.
    """
    groups = group_events_by_user(events)
    message_counts: dict[str, int] = {}
    response_times: dict[str, list[float]] = {}
    most_active: MostActiveUser | None = None

    for user_id, user_events in groups.items():
        count = len(user_events)
        message_counts[user_id] = count
        if most_active is None or count > most_active.message_count:
            most_active = MostActiveUser(user_id=user_id, message_count=count)
        response_times[user_id] = _consecutive_deltas(user_events)

    return UserParticipationStats(
        total_users=len(groups),
        user_message_counts=message_counts,
        most_active_user=most_active,
        user_response_times=response_times,
    )


# =============================================================================
# ACTIVITY PERIODS & GAPS
# =============================================================================


def find_high_activity_periods(
    events: Sequence[TimelineEvent],
    window_minutes: float = DEFAULT_TIMELINE_CONFIG.window_minutes,
    min_messages: int = DEFAULT_TIMELINE_CONFIG.min_messages,
) -> list[ActivityPeriod]:
    """
    Bursts of at least `min_messages` events within `window_minutes`.

    Every event opens a candidate window [t, t + window]; the window
    collects that event and the following ones up to the first event
    past the window end (events are assumed to be in time order).
    Overlapping candidates are then resolved by _deduplicate_periods.
    """
    window_seconds = window_minutes * 60
    candidates: list[ActivityPeriod] = []

    for i, event in enumerate(events):
        start_time = parse_timestamp(event.timestamp)
        if start_time is None:
            continue

        end_time = start_time + window_seconds
        count = 0
        participants: dict[str, None] = {}

        for later in events[i:]:
            event_time = parse_timestamp(later.timestamp)
            if event_time is None:
                continue
            if event_time > end_time:
                break
            count += 1
            participants.setdefault(later.user_id or UNKNOWN_USER, None)

        if count >= min_messages:
            candidates.append(
                ActivityPeriod(
                    start_time=start_time,
                    end_time=end_time,
                    message_count=count,
                    participants=list(participants),
                )
            )

    return _deduplicate_periods(candidates)


def _deduplicate_periods(periods: list[ActivityPeriod]) -> list[ActivityPeriod]:
    """
    Single left-to-right sweep over candidates sorted by start time.

    A candidate that overlaps nothing kept so far is kept. One that
    overlaps replaces the first overlapping kept period, but only when
    it has strictly more messages. Greedy and order dependent; this is
    not an optimal interval schedule.
    """
    if len(periods) <= 1:
        return periods

    kept: list[ActivityPeriod] = []
    for current in sorted(periods, key=lambda p: p.start_time):
        overlap_index = next(
            (i for i, existing in enumerate(kept) if current.overlaps(existing)),
            None,
        )
        if overlap_index is None:
            kept.append(current)
        elif current.message_count > kept[overlap_index].message_count:
            kept[overlap_index] = current

    return kept


def find_conversation_gaps(
    events: Sequence[TimelineEvent],
    min_gap_minutes: float = DEFAULT_TIMELINE_CONFIG.min_gap_minutes,
) -> list[ConversationGap]:
    """Silences of at least `min_gap_minutes` between consecutive events."""
    gaps: list[ConversationGap] = []
    for previous, current in zip(events, events[1:]):
        previous_time = parse_timestamp(previous.timestamp)
        current_time = parse_timestamp(current.timestamp)
        if previous_time is None or current_time is None:
            continue

        duration = calculate_time_difference(previous_time, current_time)
        if duration >= min_gap_minutes:
            gaps.append(ConversationGap(previous_time, current_time, duration))

    return gaps
