"""Operational logging: structured ops events for the match lifecycle."""

from .ops_events import (
    OPS_LOGGER_NAME,
    log_achievements_issued,
    log_command_rejected,
    log_event_applied,
    log_event_undone,
    log_match_completed,
    log_match_started,
    log_notification_sent,
    log_notification_suppressed,
    log_persistence_failure,
    log_stats_aggregated,
    log_stats_aggregation_start,
)

__all__ = [
    "OPS_LOGGER_NAME",
    "log_achievements_issued",
    "log_command_rejected",
    "log_event_applied",
    "log_event_undone",
    "log_match_completed",
    "log_match_started",
    "log_notification_sent",
    "log_notification_suppressed",
    "log_persistence_failure",
    "log_stats_aggregated",
    "log_stats_aggregation_start",
]
