"""
Stat records produced by the aggregation. Transient: rebuilt on every call, never persisted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass
class BattingStat:
    player_id: str
    matches: int = 0
    innings: int = 0
    runs: int = 0
    balls: int = 0
    average: float = 0.0
    strike_rate: float = 0.0
    highest_score: int = 0
    fifties: int = 0
    hundreds: int = 0


@dataclass
class BowlingStat:
    player_id: str
    matches: int = 0
    innings: int = 0
    balls: int = 0
    overs: str = "0.0"  # display form, e.g. "10.4"
    wickets: int = 0
    runs_conceded: int = 0
    average: float = 0.0
    economy: float = 0.0
    best_bowling_wickets: int = 0
    best_bowling_runs: int = 0
    three_wickets: int = 0
    five_wickets: int = 0


@dataclass
class FieldingStat:
    player_id: str
    matches: int = 0
    catches: int = 0
    runouts: int = 0
    stumpings: int = 0
    total_dismissals: int = 0


@dataclass
class FootballStat:
    player_id: str
    matches: int = 0
    goals: int = 0
    assists: int = 0
    minutes_played: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    goals_per_match: float = 0.0
    clean_sheets: int = 0
    hat_tricks: int = 0


@dataclass
class TeamStat:
    """Standings row. ``matches``/wins/losses/draws count completed matches only;
    run totals and averages cover every included appearance."""

    team_id: str
    matches: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    win_percentage: float = 0.0
    appearances: int = 0
    total_runs_scored: int = 0
    total_runs_conceded: int = 0
    avg_runs_scored: float = 0.0
    avg_runs_conceded: float = 0.0


@dataclass
class StatsReport:
    """All stat domains for one filter set, each list in first-appearance order."""

    batting_stats: List[BattingStat] = field(default_factory=list)
    bowling_stats: List[BowlingStat] = field(default_factory=list)
    fielding_stats: List[FieldingStat] = field(default_factory=list)
    football_stats: List[FootballStat] = field(default_factory=list)
    team_stats: List[TeamStat] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batting_stats": [asdict(s) for s in self.batting_stats],
            "bowling_stats": [asdict(s) for s in self.bowling_stats],
            "fielding_stats": [asdict(s) for s in self.fielding_stats],
            "football_stats": [asdict(s) for s in self.football_stats],
            "team_stats": [asdict(s) for s in self.team_stats],
        }
