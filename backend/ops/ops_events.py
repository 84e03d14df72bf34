"""
Structured ops events for match lifecycle milestones.
Log-level + structured event dict; deterministic (no random ids).
Timestamps only in log output, never in persisted state.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict

OPS_LOGGER_NAME = "ops_events"


def _logger() -> logging.Logger:
    return logging.getLogger(OPS_LOGGER_NAME)


def _event(event_type: str, /, level: int = logging.INFO, **kwargs: Any) -> None:
    """Emit a structured ops event (deterministic keys; no random ids)."""
    msg = f"ops_event={event_type} " + " ".join(f"{k}={v!r}" for k, v in sorted(kwargs.items()))
    _logger().log(level, msg, extra={"ops_event_type": event_type, "ops_event": {**kwargs}})


def log_match_started(match_id: str, sport_id: str, batting_team_id: str | None = None) -> None:
    payload: Dict[str, Any] = {"match_id": match_id, "sport_id": sport_id}
    if batting_team_id:
        payload["batting_team_id"] = batting_team_id
    _event("match_started", **payload)


def log_event_applied(match_id: str, event_id: str, event_type: str, points: int, event_count: int) -> None:
    """Log one score event folded into a match (event_count is the log length after append)."""
    _event(
        "event_applied",
        match_id=match_id,
        event_id=event_id,
        event_type=event_type,
        points=points,
        event_count=event_count,
    )


def log_event_undone(match_id: str, event_id: str, event_count: int) -> None:
    _event("event_undone", match_id=match_id, event_id=event_id, event_count=event_count)


def log_match_completed(match_id: str, winner_id: str | None, home_score: int, away_score: int) -> None:
    """Log match completion; winner_id None means a draw."""
    _event(
        "match_completed",
        match_id=match_id,
        winner_id=winner_id,
        home_score=home_score,
        away_score=away_score,
    )


def log_achievements_issued(match_id: str, achievement_count: int, certificate_count: int) -> None:
    _event(
        "achievements_issued",
        match_id=match_id,
        achievement_count=achievement_count,
        certificate_count=certificate_count,
    )


def log_command_rejected(command: str, match_id: str, reason: str) -> None:
    """Log a lifecycle command that was a no-op (invalid transition, missing match, duplicate end)."""
    _event("command_rejected", command=command, match_id=match_id, reason=reason)


def log_persistence_failure(operation: str, entity_id: str, error: str) -> None:
    """Log a failed write; local state is kept."""
    _event("persistence_failure", level=logging.WARNING, operation=operation, entity_id=entity_id, error=error)


def log_notification_sent(key: str, notification_type: str) -> None:
    _event("notification_sent", key=key, notification_type=notification_type)


def log_notification_suppressed(key: str, reason: str) -> None:
    """reason is one of: disabled, type_disabled, duplicate."""
    _event("notification_suppressed", key=key, reason=reason)


def log_stats_aggregation_start(sport_id: str, time_range: str) -> float:
    """Log aggregation start; return start time for duration calculation."""
    _event("stats_aggregation_start", sport_id=sport_id, time_range=time_range)
    return time.perf_counter()


def log_stats_aggregated(
    sport_id: str,
    match_count: int,
    duration_seconds: float,
    counts: Dict[str, int] | None = None,
) -> None:
    """Log aggregation summary (matches considered, rows per stat domain)."""
    payload: Dict[str, Any] = {
        "sport_id": sport_id,
        "match_count": match_count,
        "duration_seconds": round(duration_seconds, 4),
    }
    if counts is not None:
        payload["counts"] = {k: v for k, v in sorted(counts.items())}
    _event("stats_aggregated", **payload)
