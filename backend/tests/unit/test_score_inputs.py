"""Normalization of legacy and detailed score inputs into ScoreEvents."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.match import Extras
from scoring.inputs import (
    LegacyScoreInput,
    ScoreEventInput,
    legacy_description,
    normalize_score_input,
)


@pytest.mark.parametrize(
    "balls,runs,is_wicket,expected",
    [
        (0, 4, False, "Over 0.1 - FOUR!"),
        (5, 6, False, "Over 0.6 - SIX!"),
        (6, 1, False, "Over 1.1 - 1 runs"),
        (10, 0, True, "Over 1.5 - WICKET!"),
    ],
)
def test_legacy_description(balls, runs, is_wicket, expected) -> None:
    assert legacy_description(balls, runs, is_wicket) == expected


def test_legacy_input_targets_current_batting_team(make_match) -> None:
    match = make_match(status="live", current_batting_team_id="a1")
    event = normalize_score_input(match, LegacyScoreInput(runs=2), event_id="e1", timestamp="t1")
    assert event.id == "e1"
    assert event.timestamp == "t1"
    assert event.team_id == "a1"
    assert event.type == "delivery"
    assert event.points == 2
    assert event.runs_scored == 2


def test_legacy_input_rejects_negative_runs() -> None:
    with pytest.raises(ValidationError):
        LegacyScoreInput(runs=-1)


def test_event_input_derives_points_from_runs_and_extras(make_match) -> None:
    match = make_match(status="live")
    event = normalize_score_input(
        match,
        ScoreEventInput(type="extra", team_id="h1", runs_scored=0, extras=Extras(type="no_ball", runs=1)),
        event_id="e1",
        timestamp="t1",
    )
    assert event.points == 1
    assert event.description == "1 runs"
    assert event.extras.type == "no_ball"


def test_event_input_keeps_explicit_fields(make_match) -> None:
    match = make_match(status="live")
    event = normalize_score_input(
        match,
        ScoreEventInput(type="delivery", points=4, description="Cover drive", team_id="h1", batter_id="p1"),
    )
    assert event.points == 4
    assert event.description == "Cover drive"
    assert event.batter_id == "p1"
    assert event.id
    assert event.timestamp


def test_event_input_default_descriptions(make_match) -> None:
    match = make_match(sport_id="s3", status="live")
    goal = normalize_score_input(match, ScoreEventInput(type="goal", team_id="h1"))
    card = normalize_score_input(match, ScoreEventInput(type="card", team_id="h1", card_type="yellow"))
    wicket = normalize_score_input(make_match(status="live"), ScoreEventInput(type="wicket", is_wicket=True))
    assert goal.description == "Goal"
    assert card.description == "Yellow card"
    assert wicket.description == "Wicket"


def test_event_input_defaults_type_to_delivery(make_match) -> None:
    event = normalize_score_input(make_match(status="live"), ScoreEventInput(runs_scored=3))
    assert event.type == "delivery"
    assert event.points == 3
