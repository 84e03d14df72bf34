"""
Match selection for stats: sport, tournament, time range and status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Literal, Optional, Sequence

from domain.match import STATS_STATUSES, Match

TimeRange = Literal["all_time", "last_12_months", "custom"]


@dataclass(frozen=True)
class StatsFilters:
    sport_id: str
    time_range: TimeRange = "all_time"
    tournament_id: Optional[str] = None
    date_from: Optional[datetime] = None  # custom range, inclusive
    date_to: Optional[datetime] = None  # custom range, inclusive


def parse_match_date(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 match date; naive values are treated as UTC. None when unparseable."""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def rolling_cutoff(now: datetime) -> datetime:
    """Same calendar day one year earlier (Feb 29 falls back to Feb 28)."""
    now = _aware(now)
    try:
        return now.replace(year=now.year - 1)
    except ValueError:
        return now.replace(year=now.year - 1, day=28)


def _in_time_range(match: Match, filters: StatsFilters, now: datetime) -> bool:
    if filters.time_range == "all_time":
        return True
    played = parse_match_date(match.date)
    if played is None:
        return False
    if filters.time_range == "last_12_months":
        return played >= rolling_cutoff(now)
    if filters.date_from is not None and played < _aware(filters.date_from):
        return False
    if filters.date_to is not None and played > _aware(filters.date_to):
        return False
    return True


def filter_matches(
    matches: Sequence[Match],
    filters: StatsFilters,
    now: Optional[datetime] = None,
) -> List[Match]:
    """Matches that qualify for aggregation, in their original order."""
    now = now or datetime.now(timezone.utc)
    out: List[Match] = []
    for m in matches:
        if m.sport_id != filters.sport_id:
            continue
        if filters.tournament_id and m.tournament_id != filters.tournament_id:
            continue
        if not _in_time_range(m, filters, now):
            continue
        if m.status not in STATS_STATUSES:
            continue
        out.append(m)
    return out
