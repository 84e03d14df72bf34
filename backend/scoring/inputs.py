"""
Score inputs accepted by the lifecycle controller and their normalization.

Two shapes are accepted:
- LegacyScoreInput: a bare (runs, is_wicket) pair from the quick-scoring pad.
- ScoreEventInput: a partial ScoreEvent carrying any of the detailed fields.

normalize_score_input() turns either into a canonical ScoreEvent (id, timestamp,
type, description and points always set) before it reaches the score engine.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from domain.match import Dismissal, EventType, Extras, Match, ScoreEvent
from scoring.engine import BALLS_PER_OVER


class LegacyScoreInput(BaseModel):
    kind: Literal["legacy"] = "legacy"
    runs: int = Field(0, ge=0)
    is_wicket: bool = False


class ScoreEventInput(BaseModel):
    kind: Literal["event"] = "event"
    type: Optional[EventType] = None
    points: Optional[int] = None
    description: Optional[str] = None
    team_id: Optional[str] = None
    match_time: Optional[str] = None
    batter_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    runs_scored: Optional[int] = Field(None, ge=0)
    extras: Optional[Extras] = None
    is_wicket: bool = False
    dismissal: Optional[Dismissal] = None
    scorer_id: Optional[str] = None
    assist_id: Optional[str] = None
    card_type: Optional[Literal["yellow", "red"]] = None
    period: Optional[int] = None


ScoreInput = Union[LegacyScoreInput, ScoreEventInput]


def new_event_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def legacy_description(balls: int, runs: int, is_wicket: bool) -> str:
    """Commentary line for a quick-scored ball, e.g. ``Over 0.1 - FOUR!``."""
    label = f"Over {balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER + 1}"
    if is_wicket:
        return f"{label} - WICKET!"
    if runs == 4:
        return f"{label} - FOUR!"
    if runs == 6:
        return f"{label} - SIX!"
    return f"{label} - {runs} runs"


def _default_description(event_type: str, points: int, is_wicket: bool, card_type: Optional[str]) -> str:
    if is_wicket:
        return "Wicket"
    if event_type == "goal":
        return "Goal"
    if event_type == "card" and card_type:
        return f"{card_type.capitalize()} card"
    return f"{points} runs"


def normalize_score_input(
    match: Match,
    score_input: ScoreInput,
    event_id: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> ScoreEvent:
    """Build the canonical ScoreEvent for ``score_input`` in the context of ``match``."""
    event_id = event_id or new_event_id()
    timestamp = timestamp or utc_now_iso()

    if isinstance(score_input, LegacyScoreInput):
        batting_team_id = match.current_batting_team_id or match.home_participant.id
        batting = match.participant(batting_team_id)
        balls = batting.balls if batting is not None else 0
        return ScoreEvent(
            id=event_id,
            timestamp=timestamp,
            type="wicket" if score_input.is_wicket else "delivery",
            points=score_input.runs,
            description=legacy_description(balls, score_input.runs, score_input.is_wicket),
            team_id=batting_team_id,
            runs_scored=score_input.runs,
            is_wicket=score_input.is_wicket,
        )

    fields = score_input.model_dump(exclude={"kind"}, exclude_none=True)
    event_type = fields.pop("type", None) or "delivery"
    points = fields.pop("points", None)
    if points is None:
        extra_runs = score_input.extras.runs if score_input.extras is not None else 0
        points = (score_input.runs_scored or 0) + extra_runs
    description = fields.pop("description", None) or _default_description(
        event_type, points, score_input.is_wicket, score_input.card_type
    )
    return ScoreEvent(
        id=event_id,
        timestamp=timestamp,
        type=event_type,
        points=points,
        description=description,
        **fields,
    )
