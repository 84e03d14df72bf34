"""
Pure aggregation of player and team statistics over a match snapshot. No I/O; deterministic.

Each stat domain keeps its own match counter: a player who only bowled counts
towards bowling matches and never towards batting. Rates are derived after all
raw totals are folded, with zero-safe division.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Sequence

from domain.match import Match, Participant, PlayerStats
from domain.sports import FOOTBALL
from stats.filters import StatsFilters, filter_matches
from stats.model import (
    BattingStat,
    BowlingStat,
    FieldingStat,
    FootballStat,
    StatsReport,
    TeamStat,
)


@dataclass
class _Accumulators:
    batting: Dict[str, BattingStat] = field(default_factory=dict)
    bowling: Dict[str, BowlingStat] = field(default_factory=dict)
    fielding: Dict[str, FieldingStat] = field(default_factory=dict)
    football: Dict[str, FootballStat] = field(default_factory=dict)


def safe_div(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


def overs_display(balls: int) -> str:
    return f"{balls // 6}.{balls % 6}"


def _has_football_fields(ps: PlayerStats) -> bool:
    return ps.goals is not None or ps.assists is not None or ps.minutes_played is not None


def _fold_team(teams: Dict[str, TeamStat], match: Match, side: Participant, opponent: Participant) -> None:
    if not side.id:
        return
    t = teams.setdefault(side.id, TeamStat(team_id=side.id))
    t.appearances += 1
    t.total_runs_scored += side.score
    t.total_runs_conceded += opponent.score
    if match.status != "completed":
        return
    t.matches += 1
    if match.winner_id == side.id:
        t.wins += 1
    elif match.winner_id:
        t.losses += 1
    else:
        t.draws += 1


def _fold_player(acc: _Accumulators, ps: PlayerStats, opponent: Participant, football_mode: bool) -> None:
    batting, bowling, fielding, football = acc.batting, acc.bowling, acc.fielding, acc.football
    pid = ps.player_id

    runs = ps.runs or 0
    balls = ps.balls or 0
    if balls > 0 or runs > 0:
        b = batting.setdefault(pid, BattingStat(player_id=pid))
        b.matches += 1
        b.innings += 1
        b.runs += runs
        b.balls += balls
        b.highest_score = max(b.highest_score, runs)
        if runs >= 100:
            b.hundreds += 1
        elif runs >= 50:
            b.fifties += 1

    balls_bowled = ps.balls_bowled or 0
    if balls_bowled > 0:
        wickets = ps.wickets or 0
        conceded = ps.runs_conceded or 0
        bo = bowling.setdefault(pid, BowlingStat(player_id=pid))
        first_spell = bo.innings == 0
        bo.matches += 1
        bo.innings += 1
        bo.balls += balls_bowled
        bo.wickets += wickets
        bo.runs_conceded += conceded
        if (
            first_spell
            or wickets > bo.best_bowling_wickets
            or (wickets == bo.best_bowling_wickets and conceded < bo.best_bowling_runs)
        ):
            bo.best_bowling_wickets = wickets
            bo.best_bowling_runs = conceded
        if wickets >= 5:
            bo.five_wickets += 1
        elif wickets >= 3:
            bo.three_wickets += 1

    catches = ps.catches or 0
    runouts = ps.runouts or 0
    if catches > 0 or runouts > 0:
        f = fielding.setdefault(pid, FieldingStat(player_id=pid))
        f.matches += 1
        f.catches += catches
        f.runouts += runouts
        f.total_dismissals += catches + runouts

    goals = ps.goals or 0
    assists = ps.assists or 0
    minutes = ps.minutes_played or 0
    if (football_mode or goals > 0 or assists > 0 or minutes > 0) and _has_football_fields(ps):
        fb = football.setdefault(pid, FootballStat(player_id=pid))
        fb.matches += 1
        fb.goals += goals
        fb.assists += assists
        fb.minutes_played += minutes
        fb.yellow_cards += ps.yellow_cards or 0
        fb.red_cards += ps.red_cards or 0
        if opponent.score == 0:
            fb.clean_sheets += 1
        if goals >= 3:
            fb.hat_tricks += 1


def aggregate(
    matches: Sequence[Match],
    filters: StatsFilters,
    now: Optional[datetime] = None,
) -> StatsReport:
    """
    Fold qualifying matches into batting, bowling, fielding, football and team stats.
    Pure: the same matches and filters always produce the same report.
    """
    included = filter_matches(matches, filters, now=now)
    football_mode = filters.sport_id == FOOTBALL

    players = _Accumulators()
    teams: Dict[str, TeamStat] = {}

    for m in included:
        sides = ((m.home_participant, m.away_participant), (m.away_participant, m.home_participant))
        for side, opponent in sides:
            _fold_team(teams, m, side, opponent)
        for side, opponent in sides:
            for ps in side.players:
                _fold_player(players, ps, opponent, football_mode)

    report = StatsReport()

    for b in players.batting.values():
        # dismissals are not tracked per player; innings stands in for them
        b.average = round(safe_div(b.runs, b.innings), 2)
        b.strike_rate = round(safe_div(b.runs * 100, b.balls), 2)
        report.batting_stats.append(b)

    for bo in players.bowling.values():
        bo.overs = overs_display(bo.balls)
        bo.average = round(safe_div(bo.runs_conceded, bo.wickets), 2)
        bo.economy = round(safe_div(bo.runs_conceded, bo.balls / 6), 2)
        report.bowling_stats.append(bo)

    report.fielding_stats.extend(players.fielding.values())

    for fb in players.football.values():
        fb.goals_per_match = round(safe_div(fb.goals, fb.matches), 2)
        report.football_stats.append(fb)

    for t in teams.values():
        t.win_percentage = round(safe_div(t.wins * 100, t.matches), 1)
        t.avg_runs_scored = round(safe_div(t.total_runs_scored, t.appearances), 1)
        t.avg_runs_conceded = round(safe_div(t.total_runs_conceded, t.appearances), 1)
        report.team_stats.append(t)

    return report
