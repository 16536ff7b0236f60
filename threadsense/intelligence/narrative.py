"""
Narrative Builder — ThreadSense

Plain-text summaries of thread analysis results. Template driven; the
output is meant for terminals and log lines, not for any particular
chat formatting.
"""

import logging

from threadsense.intelligence.action_items import (
    ActionItemExtractionResult,
    get_action_item_statistics,
)
from threadsense.intelligence.timeline import TimelineAnalysis, get_user_participation_stats
from threadsense.intelligence.urgency import (
    ImportanceScore,
    UrgencyScore,
    calculate_priority_score,
)

logger = logging.getLogger(__name__)


class NarrativeBuilder:
    """Generates human-readable summaries from analysis results."""

    def build_timeline_summary(self, timeline: TimelineAnalysis) -> str:
        stats = get_user_participation_stats(timeline.events)
        most_active = stats.most_active_user

        lines = [
            "Timeline Summary:",
            f"• Duration: {timeline.total_duration / 60:.1f} hours "
            f"({timeline.total_duration:.0f} minutes)",
            f"• Messages: {len(timeline.events)}",
            f"• Participants: {stats.total_users}",
            f"• Message Velocity: {timeline.message_velocity:.1f} messages/hour",
            f"• Average Response Time: {timeline.average_response_time:.1f} minutes",
            f"• Most Active User: {most_active.user_id if most_active else 'N/A'} "
            f"({most_active.message_count if most_active else 0} messages)",
        ]
        return "\n".join(lines)

    def build_action_item_summary(self, extraction: ActionItemExtractionResult) -> str:
        stats = get_action_item_statistics(extraction.action_items)
        by_priority = stats.by_priority
        by_status = stats.by_status

        lines = [
            "Action Items Summary:",
            f"• Total: {stats.total}",
            f"• Priority Distribution: {by_priority['high']} high, "
            f"{by_priority['medium']} medium, {by_priority['low']} low",
            f"• Status: {by_status['open']} open, {by_status['in_progress']} in progress, "
            f"{by_status['completed']} completed",
            f"• Assignment: {stats.assigned_count} assigned, "
            f"{stats.unassigned_count} unassigned",
            f"• Completion Rate: {stats.completion_rate * 100:.1f}%",
            f"• Action Indicators Found: {', '.join(extraction.action_indicators_found)}",
        ]
        return "\n".join(lines)

    def build_priority_summary(self, urgency: UrgencyScore, importance: ImportanceScore) -> str:
        priority = calculate_priority_score(urgency, importance)

        lines = [
            "Priority Analysis:",
            f"• Overall Priority: {priority * 100:.1f}%",
            f"• Urgency: {urgency.level} ({urgency.score * 100:.1f}%)",
            f"• Importance: {importance.level} ({importance.score * 100:.1f}%)",
        ]
        if urgency.urgent_keywords:
            lines.append(f"• Urgent keywords found: {', '.join(urgency.urgent_keywords)}")
        if importance.important_keywords:
            lines.append(f"• Important keywords found: {', '.join(importance.important_keywords)}")
        lines.append(f"• Message activity factor: {urgency.message_count_factor * 100:.1f}%")
        lines.append(f"• Participant factor: {importance.participant_factor * 100:.1f}%")
        return "\n".join(lines)
