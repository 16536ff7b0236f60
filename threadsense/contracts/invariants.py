"""
Invariants Module — Semantic Correctness Checks.

Each check inspects the serialized form of a thread analysis (the dict
produced by ComprehensiveAnalysis.to_dict()) and raises
InvariantViolation when the result contradicts itself. They run on
every comprehensive analysis, not only in tests; a violation means a
bug in the analyzers, never bad input.
"""

VALID_PRIORITIES = frozenset({"low", "medium", "high"})
VALID_STATUSES = frozenset({"open", "in_progress", "completed"})
MIN_ACTION_TEXT_LENGTH = 6
MAX_ACTION_TEXT_LENGTH = 500


class InvariantViolation(Exception):
    """Raised when a thread analysis invariant is violated."""

    pass


# =============================================================================
# INVARIANT FUNCTIONS
# =============================================================================


def check_topic_count_within_bound(analysis: dict) -> None:
    """
    INVARIANT: Never more topics than the configured maximum.

    Raises:
        InvariantViolation: If len(topics) > metadata.max_topics
    """
    topics = analysis.get("topics", {}).get("topics", [])
    max_topics = analysis.get("metadata", {}).get("max_topics")
    if max_topics is None:
        return

    if len(topics) > max_topics:
        raise InvariantViolation(f"{len(topics)} topics returned, bound is {max_topics}")


def check_topics_have_weight(analysis: dict) -> None:
    """
    INVARIANT: Every reported topic has a positive weight, so its
    relevance (weight / max weight) lies in (0, 1].

    Raises:
        InvariantViolation: If a topic is missing from word_counts or has weight <= 0
    """
    topics_section = analysis.get("topics", {})
    word_counts = topics_section.get("word_counts", {})

    bad = [t for t in topics_section.get("topics", []) if word_counts.get(t, 0) <= 0]
    if bad:
        raise InvariantViolation(f"Topics without positive weight: {bad[:5]}")


def check_activity_periods_disjoint(analysis: dict) -> None:
    """
    INVARIANT: High-activity periods never overlap.

    Raises:
        InvariantViolation: If any two periods share an open interval
    """
    periods = sorted(
        analysis.get("activity_periods", []),
        key=lambda p: p["start_time"],
    )
    for earlier, later in zip(periods, periods[1:]):
        if later["start_time"] < earlier["end_time"]:
            raise InvariantViolation(
                f"Activity periods overlap: [{earlier['start_time']}, {earlier['end_time']}] "
                f"and [{later['start_time']}, {later['end_time']}]"
            )


def check_action_items_well_formed(analysis: dict) -> None:
    """
    INVARIANT: Action items carry a known priority and status and
    cleaned text of 6-500 characters.

    Raises:
        InvariantViolation: On the first malformed item
    """
    items = analysis.get("action_items", {}).get("action_items", [])
    for item in items:
        text_length = len(item.get("text", ""))
        if not MIN_ACTION_TEXT_LENGTH <= text_length <= MAX_ACTION_TEXT_LENGTH:
            raise InvariantViolation(f"Action item text length {text_length} out of range")
        if item.get("priority") not in VALID_PRIORITIES:
            raise InvariantViolation(f"Unknown action item priority: {item.get('priority')}")
        if item.get("status") not in VALID_STATUSES:
            raise InvariantViolation(f"Unknown action item status: {item.get('status')}")


def check_timeline_follows_messages(analysis: dict) -> None:
    """
    INVARIANT: Timeline events keep source order and never outnumber
    the messages they came from.

    Raises:
        InvariantViolation: If message_index is not strictly increasing
            or there are more events than messages
    """
    events = analysis.get("timeline", {}).get("events", [])
    message_count = analysis.get("metadata", {}).get("message_count", len(events))

    if len(events) > message_count:
        raise InvariantViolation(f"{len(events)} timeline events for {message_count} messages")

    indexes = [e["message_index"] for e in events]
    if any(b <= a for a, b in zip(indexes, indexes[1:])):
        raise InvariantViolation(f"Timeline events out of message order: {indexes}")


def check_urgency_in_range(analysis: dict) -> None:
    """
    INVARIANT: Urgency is clamped to [0, 1].

    Raises:
        InvariantViolation: If the urgency score is outside [0, 1]
    """
    urgency = analysis.get("urgency")
    if not urgency:
        return

    score = urgency.get("score", 0.0)
    if not 0.0 <= score <= 1.0:
        raise InvariantViolation(f"Urgency score {score} outside [0, 1]")


# =============================================================================
# INVARIANT REGISTRY
# =============================================================================

ALL_INVARIANTS = [
    check_topic_count_within_bound,
    check_topics_have_weight,
    check_activity_periods_disjoint,
    check_action_items_well_formed,
    check_timeline_follows_messages,
    check_urgency_in_range,
]


def enforce_invariants(analysis: dict) -> list[str]:
    """
    Run all invariants. Returns list of violations.

    Returns:
        List of violation messages. Empty = pass.
    """
    violations = []

    for invariant in ALL_INVARIANTS:
        try:
            invariant(analysis)
        except InvariantViolation as e:
            violations.append(f"INVARIANT_VIOLATION: {str(e)}")

    return violations


def enforce_invariants_strict(analysis: dict) -> None:
    """
    Strict enforcement — raises on first violation.

    Raises:
        InvariantViolation: If any invariant fails
    """
    for invariant in ALL_INVARIANTS:
        invariant(analysis)
