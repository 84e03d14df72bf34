"""
Canonical match model: matches, participants, score events and per-player counters.

Sport-agnostic shape shared by the score engine, the lifecycle controller and the
stats aggregation. Counters that do not apply to a sport stay ``None``.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

MatchStatus = Literal["draft", "scheduled", "created", "live", "completed", "cancelled", "locked"]
EventType = Literal[
    "delivery",
    "extra",
    "wicket",
    "milestone",
    "period_start",
    "period_end",
    "info",
    "goal",
    "card",
    "substitution",
]
ExtraType = Literal["wide", "no_ball", "bye", "leg_bye", "penalty"]
DismissalType = Literal["bowled", "caught", "lbw", "run_out", "stumped", "hit_wicket", "retired", "other"]
ParticipantResult = Literal["win", "loss", "draw"]

# Statuses from which a match may be started.
STARTABLE_STATUSES = ("draft", "scheduled", "created")
# Statuses whose matches feed the stats aggregation.
STATS_STATUSES = ("completed", "live")


class Extras(BaseModel):
    """Extra runs awarded on a delivery."""

    type: ExtraType
    runs: int = Field(0, ge=0, description="Runs from the extra itself")


class Dismissal(BaseModel):
    """How a batter got out."""

    type: DismissalType
    fielder_id: Optional[str] = Field(None, description="Who took the catch or effected the run out")
    batsman_id: Optional[str] = Field(None, description="Who got out")


class ScoreEvent(BaseModel):
    """One atomic scoring action. Appended verbatim to the match event log."""

    id: str
    timestamp: str = Field(..., description="ISO-8601 time the event was recorded")
    type: EventType = "delivery"
    points: int = Field(0, description="Net scoring contribution (bat runs + extras)")
    description: str = ""
    team_id: Optional[str] = None
    match_time: Optional[str] = None

    # Cricket
    batter_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    runs_scored: Optional[int] = None
    extras: Optional[Extras] = None
    is_wicket: bool = False
    dismissal: Optional[Dismissal] = None
    over_number: Optional[int] = None
    ball_in_over: Optional[int] = None

    # Football
    scorer_id: Optional[str] = None
    assist_id: Optional[str] = None
    card_type: Optional[Literal["yellow", "red"]] = None
    period: Optional[int] = None


class PlayerStats(BaseModel):
    """Per-player, per-match counters owned by a participant."""

    player_id: str

    # Cricket
    runs: Optional[int] = None
    balls: Optional[int] = None
    wickets: Optional[int] = None
    balls_bowled: Optional[int] = None
    runs_conceded: Optional[int] = None
    catches: Optional[int] = None
    runouts: Optional[int] = None

    # Football
    goals: Optional[int] = None
    assists: Optional[int] = None
    minutes_played: Optional[int] = None
    yellow_cards: Optional[int] = None
    red_cards: Optional[int] = None


class Squad(BaseModel):
    player_ids: List[str] = Field(default_factory=list)
    captain_id: Optional[str] = None
    wicket_keeper_id: Optional[str] = None
    goalkeeper_id: Optional[str] = None


class Participant(BaseModel):
    """One side of a match with its running totals."""

    id: str
    name: str
    score: int = 0
    wickets: int = 0
    balls: int = 0
    overs: int = 0
    result: Optional[ParticipantResult] = None
    players: List[PlayerStats] = Field(default_factory=list)
    squad: Optional[Squad] = None


class Toss(BaseModel):
    winner_team_id: str
    decision: Literal["BAT", "BOWL", "KICK_OFF", "DEFEND_GOAL"]


class LiveState(BaseModel):
    """Who is on strike and where the innings is (cricket), or the period (football)."""

    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    current_over: int = 0
    balls_in_current_over: int = 0
    current_period: int = 1


class Match(BaseModel):
    """A single contest between two participants."""

    id: str
    sport_id: str
    date: str = Field(..., description="Scheduled start (ISO-8601)")
    location: str = ""
    status: MatchStatus = "draft"
    home_participant: Participant
    away_participant: Participant
    events: List[ScoreEvent] = Field(default_factory=list)
    live_state: Optional[LiveState] = None
    current_batting_team_id: Optional[str] = None
    toss: Optional[Toss] = None
    winner_id: Optional[str] = None
    tournament_id: Optional[str] = None
    stage: Optional[str] = None
    actual_start_time: Optional[str] = None
    actual_end_time: Optional[str] = None
    created_by_user_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.home_participant.name} vs {self.away_participant.name}"

    def participant(self, team_id: Optional[str]) -> Optional[Participant]:
        """Return the participant with ``team_id``, or None."""
        if team_id is None:
            return None
        if self.home_participant.id == team_id:
            return self.home_participant
        if self.away_participant.id == team_id:
            return self.away_participant
        return None

    def opponent(self, team_id: str) -> Optional[Participant]:
        if self.home_participant.id == team_id:
            return self.away_participant
        if self.away_participant.id == team_id:
            return self.home_participant
        return None
