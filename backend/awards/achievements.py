"""
Achievement derivation from final per-player match stats.

Cricket (any sport except football):
- Player of the Match: highest runs + wickets*20, awarded when impact >= 20.
- Century: runs >= 100. Half Century: 50 <= runs < 100 (a century suppresses it).
- Five Wickets: wickets >= 5.
Football:
- Player of the Match: highest goals*20 + assists*10, awarded when impact >= 20.
- Hat-Trick: goals >= 3.

Ids are derived from (match, type, player) so re-deriving yields identical ids.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from domain.awards import Achievement
from domain.match import PlayerStats
from domain.sports import is_football

POTM_MIN_IMPACT = 20
CENTURY_RUNS = 100
HALF_CENTURY_RUNS = 50
FIVE_WICKETS = 5
HAT_TRICK_GOALS = 3


def impact_score(stat: PlayerStats, sport_id: str) -> int:
    """Weighted contribution used to pick the Player of the Match."""
    if is_football(sport_id):
        return (stat.goals or 0) * 20 + (stat.assists or 0) * 10
    return (stat.runs or 0) + (stat.wickets or 0) * 20


def _achievement_id(match_id: str, kind: str, player_id: str) -> str:
    return f"{match_id}:{kind}:{player_id}"


def _potm_description(stat: PlayerStats, sport_id: str) -> str:
    parts: List[str] = []
    if is_football(sport_id):
        if stat.goals:
            parts.append(f"{stat.goals} goals")
        if stat.assists:
            parts.append(f"{stat.assists} assists")
    else:
        if stat.runs:
            parts.append(f"{stat.runs} runs")
        if stat.wickets:
            parts.append(f"{stat.wickets} wickets")
    return " & ".join(parts) or "All-round performance"


def pick_player_of_the_match(stats: Sequence[PlayerStats], sport_id: str) -> Optional[PlayerStats]:
    """Highest-impact candidate, the later one wins ties; None when nobody reaches the threshold."""
    best: Optional[PlayerStats] = None
    best_impact = -1
    for stat in stats:
        impact = impact_score(stat, sport_id)
        if impact >= best_impact:
            best, best_impact = stat, impact
    if best is None or best_impact < POTM_MIN_IMPACT:
        return None
    return best


def derive_achievements(
    match_id: str,
    sport_id: str,
    stats: Sequence[PlayerStats],
    date: str,
) -> List[Achievement]:
    """Achievements earned in one completed match, Player of the Match first."""
    out: List[Achievement] = []

    potm = pick_player_of_the_match(stats, sport_id)
    if potm is not None:
        out.append(Achievement(
            id=_achievement_id(match_id, "potm", potm.player_id),
            type="player_of_the_match",
            title="Player of the Match",
            player_id=potm.player_id,
            match_id=match_id,
            date=date,
            description=_potm_description(potm, sport_id),
        ))

    for stat in stats:
        if is_football(sport_id):
            goals = stat.goals or 0
            if goals >= HAT_TRICK_GOALS:
                out.append(Achievement(
                    id=_achievement_id(match_id, "hattrick", stat.player_id),
                    type="hat_trick",
                    title="Hat-Trick",
                    player_id=stat.player_id,
                    match_id=match_id,
                    date=date,
                    description=f"Scored {goals} goals",
                ))
            continue

        runs = stat.runs or 0
        wickets = stat.wickets or 0
        if runs >= CENTURY_RUNS:
            out.append(Achievement(
                id=_achievement_id(match_id, "100", stat.player_id),
                type="century",
                title="Century",
                player_id=stat.player_id,
                match_id=match_id,
                date=date,
                description=f"Scored {runs} runs",
            ))
        elif runs >= HALF_CENTURY_RUNS:
            out.append(Achievement(
                id=_achievement_id(match_id, "50", stat.player_id),
                type="half_century",
                title="Half Century",
                player_id=stat.player_id,
                match_id=match_id,
                date=date,
                description=f"Scored {runs} runs",
            ))
        if wickets >= FIVE_WICKETS:
            out.append(Achievement(
                id=_achievement_id(match_id, "5w", stat.player_id),
                type="five_wickets",
                title="Five Wickets",
                player_id=stat.player_id,
                match_id=match_id,
                date=date,
                description=f"Taken {wickets} wickets",
            ))
    return out
