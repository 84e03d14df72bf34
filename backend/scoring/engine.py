"""
Score engine: apply one ScoreEvent to a Match and return the new Match.

Pure and deterministic. Inputs are never mutated: the match is deep-copied
before any counter changes, and the event is appended verbatim to the end of
the log.

Rules:
- Batting side: event.team_id, else match.current_batting_team_id, else home.
  An id matching neither side skips counter updates (event is still logged).
- Cricket: score += points; wickets += 1 on is_wicket; legal deliveries count
  as balls (wides and no-balls do not).
- Football: score += 1 on goal events only.
- Placeholder player ids ("own goal", "unknown", ...) are never attributed.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from domain.match import LiveState, Match, Participant, PlayerStats, ScoreEvent
from domain.sports import is_football

logger = logging.getLogger(__name__)

BALLS_PER_OVER = 6

PLACEHOLDER_PLAYER_IDS = frozenset({"", "unknown", "own goal", "own_goal", "og", "none"})

_CRICKET_COUNTERS = ("runs", "balls", "wickets", "balls_bowled", "runs_conceded", "catches", "runouts")
_FOOTBALL_COUNTERS = ("goals", "assists", "yellow_cards", "red_cards")


def is_attributable(player_id: Optional[str]) -> bool:
    """True when ``player_id`` names a real player rather than a placeholder."""
    if player_id is None:
        return False
    return player_id.strip().lower() not in PLACEHOLDER_PLAYER_IDS


def is_wide_or_no_ball(event: ScoreEvent) -> bool:
    return event.extras is not None and event.extras.type in ("wide", "no_ball")


def is_legal_delivery(event: ScoreEvent) -> bool:
    """A ball that counts towards the over."""
    if is_wide_or_no_ball(event):
        return False
    if event.type == "delivery":
        return True
    if event.type == "wicket":
        return True
    # byes and leg byes are legal balls recorded as extras
    return event.extras is not None


def _add(stat: PlayerStats, field: str, amount: int) -> None:
    setattr(stat, field, (getattr(stat, field) or 0) + amount)


def _update_player_stat(
    participant: Participant,
    player_id: Optional[str],
    football: bool,
    updater: Callable[[PlayerStats], None],
) -> None:
    """Update or create the entry for ``player_id`` inside ``participant.players``."""
    if not is_attributable(player_id):
        return
    stat = next((p for p in participant.players if p.player_id == player_id), None)
    if stat is None:
        counters = _FOOTBALL_COUNTERS if football else _CRICKET_COUNTERS
        stat = PlayerStats(player_id=player_id, **{name: 0 for name in counters})
        participant.players.append(stat)
    updater(stat)


def _resolve_sides(match: Match, event: ScoreEvent) -> tuple[Optional[Participant], Optional[Participant]]:
    team_id = event.team_id or match.current_batting_team_id or match.home_participant.id
    side = match.participant(team_id)
    if side is None:
        return None, None
    return side, match.opponent(side.id)


def _apply_cricket(match: Match, event: ScoreEvent) -> None:
    batting, bowling = _resolve_sides(match, event)
    if batting is None or bowling is None:
        logger.warning("Event %s has no resolvable batting side in match %s", event.id, match.id)
        return

    wide_or_nb = is_wide_or_no_ball(event)
    legal = is_legal_delivery(event)

    batting.score += event.points
    if event.is_wicket:
        batting.wickets += 1
    if legal:
        batting.balls += 1
        batting.overs = batting.balls // BALLS_PER_OVER

    def _batter(p: PlayerStats) -> None:
        if event.runs_scored is not None:
            _add(p, "runs", event.runs_scored)
        if not wide_or_nb:
            _add(p, "balls", 1)

    def _bowler(p: PlayerStats) -> None:
        extra_runs = event.extras.runs if (wide_or_nb and event.extras is not None) else 0
        _add(p, "runs_conceded", (event.runs_scored or 0) + extra_runs)
        if not wide_or_nb:
            _add(p, "balls_bowled", 1)
        if event.is_wicket and (event.dismissal is None or event.dismissal.type != "run_out"):
            _add(p, "wickets", 1)

    def _fielder(p: PlayerStats) -> None:
        if event.dismissal is not None and event.dismissal.type == "caught":
            _add(p, "catches", 1)
        if event.dismissal is not None and event.dismissal.type == "run_out":
            _add(p, "runouts", 1)

    _update_player_stat(batting, event.batter_id or event.scorer_id, False, _batter)
    _update_player_stat(bowling, event.bowler_id, False, _bowler)
    if event.dismissal is not None:
        _update_player_stat(bowling, event.dismissal.fielder_id, False, _fielder)

    state = match.live_state
    if event.batter_id:
        state.striker_id = event.batter_id
    if event.non_striker_id:
        state.non_striker_id = event.non_striker_id
    if event.bowler_id:
        state.bowler_id = event.bowler_id
    if (event.runs_scored or 0) % 2 != 0:
        state.striker_id, state.non_striker_id = state.non_striker_id, state.striker_id
    if legal:
        state.balls_in_current_over += 1
        if state.balls_in_current_over >= BALLS_PER_OVER:
            state.current_over += 1
            state.balls_in_current_over = 0
            state.striker_id, state.non_striker_id = state.non_striker_id, state.striker_id
            state.bowler_id = None


def _apply_football(match: Match, event: ScoreEvent) -> None:
    team, _ = _resolve_sides(match, event)
    if team is None:
        logger.warning("Event %s has no resolvable team in match %s", event.id, match.id)
        return

    if event.type == "goal":
        team.score += 1

    def _scorer(p: PlayerStats) -> None:
        if event.type == "goal":
            _add(p, "goals", 1)
        if event.type == "card" and event.card_type == "yellow":
            _add(p, "yellow_cards", 1)
        if event.type == "card" and event.card_type == "red":
            _add(p, "red_cards", 1)

    _update_player_stat(team, event.scorer_id, True, _scorer)
    _update_player_stat(team, event.assist_id, True, lambda p: _add(p, "assists", 1))

    if event.type == "period_start" and event.period:
        match.live_state.current_period = event.period


def apply_event(match: Match, event: ScoreEvent) -> Match:
    """Return a new Match with ``event`` applied and appended to the log."""
    updated = match.model_copy(deep=True)
    if updated.live_state is None:
        updated.live_state = LiveState()

    if is_football(updated.sport_id):
        _apply_football(updated, event)
    else:
        _apply_cricket(updated, event)

    updated.events.append(event.model_copy(deep=True))
    return updated


def _reset_participant(participant: Participant) -> Participant:
    return participant.model_copy(
        update={"score": 0, "wickets": 0, "balls": 0, "overs": 0, "players": [], "result": None},
        deep=True,
    )


def recalculate_match(match: Match) -> Match:
    """Rebuild derived totals by replaying the event log in order over a reset match."""
    reset = match.model_copy(
        update={
            "events": [],
            "home_participant": _reset_participant(match.home_participant),
            "away_participant": _reset_participant(match.away_participant),
            "live_state": LiveState(),
        },
        deep=True,
    )
    rebuilt = reset
    for event in match.events:
        rebuilt = apply_event(rebuilt, event)
    # results belong to completion, not to the event log
    rebuilt.home_participant.result = match.home_participant.result
    rebuilt.away_participant.result = match.away_participant.result
    return rebuilt
