"""
Leaderboard orderings over an aggregated StatsReport.

- BAT: runs, then average, then strike rate (all descending).
- BOWL: wickets descending, then average and economy ascending.
- FIELD: catches + run outs + stumpings, then catches (descending).
- GOALS: goals, then assists. ASSISTS: assists, then goals.

Sorting is stable, so equal rows keep their first-appearance order.
"""

from __future__ import annotations

from typing import List, Literal, Union

from stats.model import BattingStat, BowlingStat, FieldingStat, FootballStat, StatsReport

LeaderboardCategory = Literal["BAT", "BOWL", "FIELD", "GOALS", "ASSISTS"]
LEADERBOARD_CATEGORIES = ("BAT", "BOWL", "FIELD", "GOALS", "ASSISTS")

LeaderboardRow = Union[BattingStat, BowlingStat, FieldingStat, FootballStat]


def sort_leaderboard(report: StatsReport, category: str) -> List[LeaderboardRow]:
    """Rows of the stat domain behind ``category``, best first. Unknown category -> ValueError."""
    if category == "BAT":
        return sorted(
            report.batting_stats,
            key=lambda s: (-s.runs, -s.average, -s.strike_rate),
        )
    if category == "BOWL":
        return sorted(
            report.bowling_stats,
            key=lambda s: (-s.wickets, s.average, s.economy),
        )
    if category == "FIELD":
        return sorted(
            report.fielding_stats,
            key=lambda s: (-(s.catches + s.runouts + s.stumpings), -s.catches),
        )
    if category == "GOALS":
        return sorted(report.football_stats, key=lambda s: (-s.goals, -s.assists))
    if category == "ASSISTS":
        return sorted(report.football_stats, key=lambda s: (-s.assists, -s.goals))
    raise ValueError(f"unknown leaderboard category: {category}")
