"""
Cross-match statistics: filtering, pure aggregation and leaderboard orderings.
"""

from stats.aggregate import aggregate, safe_div
from stats.filters import StatsFilters, filter_matches
from stats.leaderboard import LEADERBOARD_CATEGORIES, sort_leaderboard
from stats.model import (
    BattingStat,
    BowlingStat,
    FieldingStat,
    FootballStat,
    StatsReport,
    TeamStat,
)

__all__ = [
    "aggregate",
    "safe_div",
    "StatsFilters",
    "filter_matches",
    "LEADERBOARD_CATEGORIES",
    "sort_leaderboard",
    "BattingStat",
    "BowlingStat",
    "FieldingStat",
    "FootballStat",
    "StatsReport",
    "TeamStat",
]
