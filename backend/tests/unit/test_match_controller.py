"""
Tests for the match lifecycle controller: state transitions, persistence
failure handling, completion side effects and per-match serialization.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

import pytest

from domain.match import PlayerStats, Toss
from domain.people import CurrentUser, PlayerProfile, Team, TeamMember
from lifecycle.commands import InitialAssignments
from lifecycle.controller import MatchController, batting_team_from_toss, decide_result, final_player_stats
from lifecycle.errors import MatchCreationError, PersistenceError
from lifecycle.ports import InMemoryMatchStore
from notifications import InMemoryNotificationStore, NotificationCenter
from ops.ops_events import OPS_LOGGER_NAME
from scoring.inputs import LegacyScoreInput, ScoreEventInput

FIXED_NOW = "2025-03-01T12:00:00+00:00"
ADMIN = CurrentUser(id="u_admin", role="admin", name="League Office")
PLAYER = CurrentUser(id="u_player", role="player")


class FailingStore(InMemoryMatchStore):
    """Every match update fails; everything else succeeds."""

    async def save_match_update(self, match_id: str, partial: Dict[str, Any]) -> None:
        raise PersistenceError("save_match_update", "database is locked")


class BrokenCreateStore(InMemoryMatchStore):
    async def create_match(self, match) -> None:
        raise PersistenceError("create_match", "disk full")


class YieldingStore(InMemoryMatchStore):
    """Suspends on every achievement write so concurrent commands can interleave."""

    async def create_achievement(self, achievement) -> None:
        await asyncio.sleep(0)
        await super().create_achievement(achievement)


def _controller(store, clock, optimistic: bool = True):
    center = NotificationCenter(InMemoryNotificationStore())
    controller = MatchController(store, notifications=center, optimistic=optimistic, clock=clock)
    return controller, center


async def _seeded(make_match, fixed_clock, store_cls=InMemoryMatchStore, optimistic: bool = True, **match_fields):
    store = store_cls()
    controller, center = _controller(store, fixed_clock, optimistic=optimistic)
    await controller.add_match(make_match(**match_fields))
    return controller, center, store


# --- pure helpers ---


def test_batting_team_from_toss(make_match) -> None:
    assert batting_team_from_toss(make_match()) is None
    assert batting_team_from_toss(make_match(toss=Toss(winner_team_id="a1", decision="BAT"))) == "a1"
    assert batting_team_from_toss(make_match(toss=Toss(winner_team_id="a1", decision="BOWL"))) == "h1"
    assert batting_team_from_toss(make_match(toss=Toss(winner_team_id="h1", decision="BOWL"))) == "a1"


def test_decide_result(make_match) -> None:
    assert decide_result(make_match(home_score=10, away_score=5)) == ("h1", "win", "loss")
    assert decide_result(make_match(home_score=3, away_score=5)) == ("a1", "loss", "win")
    assert decide_result(make_match(home_score=5, away_score=5)) == (None, "draw", "draw")


def test_final_player_stats_fills_missing_with_zero() -> None:
    recorded = [PlayerStats(player_id="p1", runs=20, balls=15, minutes_played=None)]
    final = final_player_stats(["p1", "p2"], recorded)
    assert [s.player_id for s in final] == ["p1", "p2"]
    assert final[0].runs == 20 and final[0].wickets == 0
    assert final[1].runs == 0 and final[1].goals == 0
    assert final[1].minutes_played is None


# --- add / update ---


@pytest.mark.asyncio
async def test_add_match_stamps_creator_and_goes_first(make_match, fixed_clock) -> None:
    store = InMemoryMatchStore()
    controller, _ = _controller(store, fixed_clock)
    await controller.add_match(make_match("m1"))
    created = await controller.add_match(make_match("m2"), user=PLAYER)
    assert created.created_by_user_id == "u_player"
    assert [m.id for m in controller.list_matches()] == ["m2", "m1"]
    assert set(store.matches) == {"m1", "m2"}
    assert controller.can_score_match("m2", PLAYER) is True
    assert controller.can_score_match("m1", PLAYER) is False


@pytest.mark.asyncio
async def test_add_match_failure_raises_and_keeps_state(make_match, fixed_clock) -> None:
    controller, _ = _controller(BrokenCreateStore(), fixed_clock)
    with pytest.raises(MatchCreationError):
        await controller.add_match(make_match())
    assert controller.list_matches() == []


@pytest.mark.asyncio
async def test_add_match_duplicate_id_raises(make_match, fixed_clock) -> None:
    controller, _, _ = await _seeded(make_match, fixed_clock)
    with pytest.raises(MatchCreationError):
        await controller.add_match(make_match())


@pytest.mark.asyncio
async def test_update_match_rules(make_match, fixed_clock) -> None:
    controller, _, store = await _seeded(make_match, fixed_clock)
    result = await controller.update_match("m1", {"location": "Hill Oval", "status": "scheduled"})
    assert result.applied is True
    assert controller.get_match("m1").location == "Hill Oval"
    assert store.matches["m1"].status == "scheduled"

    rejected = await controller.update_match("m1", {"status": "live"})
    assert (rejected.applied, rejected.reason) == (False, "invalid_status")
    with pytest.raises(ValueError):
        await controller.update_match("m1", {"events": []})
    missing = await controller.update_match("nope", {"location": "x"})
    assert missing.reason == "not_found"


# --- start / score / undo ---


@pytest.mark.asyncio
async def test_start_goes_live_and_notifies_once(make_match, fixed_clock) -> None:
    controller, center, store = await _seeded(make_match, fixed_clock)
    result = await controller.start("m1")
    assert result.applied is True
    assert result.match.status == "live"
    assert result.match.actual_start_time == FIXED_NOW
    assert store.matches["m1"].status == "live"
    assert [n.key for n in center.notifications] == ["match_start:m1"]
    assert center.notifications[0].body == "Lions vs Tigers is now live"

    again = await controller.start("m1")
    assert (again.applied, again.reason) == (False, "invalid_status")
    assert len(center.notifications) == 1


@pytest.mark.asyncio
async def test_start_with_assignments_uses_toss(make_match, fixed_clock) -> None:
    controller, _, _ = await _seeded(
        make_match, fixed_clock, toss=Toss(winner_team_id="h1", decision="BOWL")
    )
    result = await controller.start("m1", InitialAssignments(striker_id="a_p1", non_striker_id="a_p2", bowler_id="h_b1"))
    assert result.match.current_batting_team_id == "a1"
    assert result.match.live_state.striker_id == "a_p1"
    assert result.match.live_state.bowler_id == "h_b1"


@pytest.mark.asyncio
async def test_start_unknown_match_is_noop(make_match, fixed_clock, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    controller, _ = _controller(InMemoryMatchStore(), fixed_clock)
    result = await controller.start("ghost")
    assert (result.applied, result.reason, result.match) == (False, "not_found", None)
    assert "command_rejected" in caplog.text


@pytest.mark.asyncio
async def test_score_requires_live(make_match, fixed_clock) -> None:
    controller, _, _ = await _seeded(make_match, fixed_clock)
    result = await controller.score("m1", LegacyScoreInput(runs=4))
    assert (result.applied, result.reason) == (False, "invalid_status")
    assert controller.get_match("m1").events == []


@pytest.mark.asyncio
async def test_score_updates_match_store_and_feed(make_match, fixed_clock) -> None:
    controller, _, store = await _seeded(make_match, fixed_clock)
    await controller.start("m1")
    result = await controller.score("m1", LegacyScoreInput(runs=4))
    assert result.applied is True and result.error is None
    match = controller.get_match("m1")
    assert match.home_participant.score == 4
    assert match.events[0].timestamp == FIXED_NOW
    assert store.matches["m1"].home_participant.score == 4
    assert [f.title for f in controller.state.feed] == ["Lions: Over 0.1 - FOUR!"]
    assert store.feed[0].type == "match_update"


@pytest.mark.asyncio
async def test_score_detailed_event_for_away_side(make_match, fixed_clock) -> None:
    controller, _, _ = await _seeded(make_match, fixed_clock, sport_id="s3")
    await controller.start("m1")
    await controller.score("m1", ScoreEventInput(type="goal", team_id="a1", scorer_id="a9"))
    match = controller.get_match("m1")
    assert (match.home_participant.score, match.away_participant.score) == (0, 1)
    assert controller.state.feed[0].title == "Tigers: Goal"


@pytest.mark.asyncio
async def test_undo_rebuilds_from_remaining_events(make_match, fixed_clock) -> None:
    controller, _, store = await _seeded(make_match, fixed_clock)
    await controller.start("m1")
    await controller.score("m1", LegacyScoreInput(runs=4))
    await controller.score("m1", LegacyScoreInput(runs=6))
    result = await controller.undo("m1")
    assert result.applied is True
    assert result.match.home_participant.score == 4
    assert len(result.match.events) == 1
    assert store.matches["m1"].home_participant.score == 4

    await controller.undo("m1")
    empty = await controller.undo("m1")
    assert (empty.applied, empty.reason) == (False, "no_events")


# --- persistence failures ---


@pytest.mark.asyncio
async def test_optimistic_failure_keeps_local_state(make_match, fixed_clock, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    store = FailingStore([make_match(status="live")])
    controller, _ = _controller(store, fixed_clock, optimistic=True)
    await controller.refresh()
    result = await controller.score("m1", LegacyScoreInput(runs=2))
    assert result.applied is True
    assert "database is locked" in result.error
    assert controller.get_match("m1").home_participant.score == 2
    assert store.matches["m1"].home_participant.score == 0
    assert "persistence_failure" in caplog.text


@pytest.mark.asyncio
async def test_pessimistic_failure_leaves_state_unchanged(make_match, fixed_clock) -> None:
    store = FailingStore([make_match(status="live")])
    controller, _ = _controller(store, fixed_clock, optimistic=False)
    await controller.refresh()
    result = await controller.score("m1", LegacyScoreInput(runs=2))
    assert result.applied is False
    assert result.error
    assert controller.get_match("m1").home_participant.score == 0
    assert controller.state.feed == []


# --- end ---


@pytest.mark.asyncio
async def test_end_completes_and_awards(make_match, fixed_clock) -> None:
    controller, center, store = await _seeded(
        make_match,
        fixed_clock,
        status="live",
        home_score=180,
        away_score=150,
        home_players=[PlayerStats(player_id="p1", runs=120, balls=90)],
        away_players=[PlayerStats(player_id="b1", balls_bowled=24, runs_conceded=30, wickets=1)],
    )
    lions = Team(id="h1", name="Lions", members=[TeamMember(player_id="p1"), TeamMember(player_id="p2")])
    players = [PlayerProfile(id="p1", first_name="Asha", last_name="Rao")]

    result = await controller.end("m1", [lions], players=players, user=ADMIN)
    assert result.applied is True and result.error is None
    match = result.match
    assert match.status == "completed"
    assert match.winner_id == "h1"
    assert (match.home_participant.result, match.away_participant.result) == ("win", "loss")
    assert match.actual_end_time == FIXED_NOW
    assert [p.player_id for p in match.home_participant.players] == ["p1", "p2"]
    assert match.home_participant.players[1].runs == 0
    # away side had no roster: recorded stats are kept
    assert match.away_participant.players[0].wickets == 1

    achievements = controller.achievements_for("m1")
    assert [a.id for a in achievements] == ["m1:potm:p1", "m1:100:p1"]
    certificates = controller.certificates_for("m1")
    assert [c.type for c in certificates].count("participation") == 3
    assert [c.type for c in certificates].count("achievement") == 2
    assert certificates[0].recipient_name == "Asha Rao"
    assert certificates[0].metadata.organizer_name == "League Office"
    assert certificates[0].issuer_id == "u_admin"
    assert set(store.achievements) == {"m1:potm:p1", "m1:100:p1"}
    assert len(store.certificates) == 5
    assert {f.id for f in controller.state.feed} == {"m1:potm:p1:feed", "m1:100:p1:feed"}
    assert store.matches["m1"].status == "completed"

    assert center.notifications[0].key == "match_result:m1"
    assert center.notifications[0].body == "Lions won: Lions 180 - 150 Tigers"


@pytest.mark.asyncio
async def test_end_is_idempotent(make_match, fixed_clock) -> None:
    controller, center, store = await _seeded(
        make_match, fixed_clock, status="live", home_players=[PlayerStats(player_id="p1", runs=64, balls=40)]
    )
    first = await controller.end("m1", [])
    second = await controller.end("m1", [])
    assert first.applied is True
    assert (second.applied, second.reason) == (False, "already_ended")
    assert len(controller.achievements_for("m1")) == 2
    assert len(store.achievements) == 2
    assert len([n for n in center.notifications if n.type == "match_result"]) == 1


@pytest.mark.asyncio
async def test_end_skipped_when_achievements_exist(make_match, fixed_clock) -> None:
    controller, _, _ = await _seeded(
        make_match, fixed_clock, status="live", home_players=[PlayerStats(player_id="p1", runs=64, balls=40)]
    )
    await controller.end("m1", [])
    controller.state.matches["m1"] = controller.get_match("m1").model_copy(update={"status": "live"})
    again = await controller.end("m1", [])
    assert (again.applied, again.reason) == (False, "already_ended")
    assert len(controller.achievements_for("m1")) == 2


@pytest.mark.asyncio
async def test_end_draw(make_match, fixed_clock) -> None:
    controller, center, _ = await _seeded(make_match, fixed_clock, status="live", home_score=5, away_score=5)
    result = await controller.end("m1", [])
    assert result.match.winner_id is None
    assert result.match.home_participant.result == "draw"
    assert controller.achievements_for("m1") == []
    assert center.notifications[0].body == "Match drawn: Lions 5 - 5 Tigers"


@pytest.mark.asyncio
async def test_concurrent_end_runs_once(make_match, fixed_clock) -> None:
    store = YieldingStore()
    controller, _ = _controller(store, fixed_clock)
    await controller.add_match(
        make_match(status="live", home_players=[PlayerStats(player_id="p1", runs=101, balls=70, wickets=5)])
    )
    results = await asyncio.gather(controller.end("m1", []), controller.end("m1", []))
    assert sorted(r.applied for r in results) == [False, True]
    assert [r.reason for r in results if not r.applied] == ["already_ended"]
    assert len(controller.achievements_for("m1")) == 3
    assert len(store.achievements) == 3


@pytest.mark.asyncio
async def test_pessimistic_end_failure_keeps_match_live(make_match, fixed_clock) -> None:
    store = FailingStore([make_match(status="live")])
    controller, center = _controller(store, fixed_clock, optimistic=False)
    await controller.refresh()
    result = await controller.end("m1", [])
    assert result.applied is False
    assert controller.get_match("m1").status == "live"
    assert center.notifications == []


@pytest.mark.asyncio
async def test_retried_end_without_achievements_issues_certificates_once(make_match, fixed_clock) -> None:
    store = FailingStore([make_match(status="live", home_players=[PlayerStats(player_id="p1", runs=10, balls=8)])])
    controller, _ = _controller(store, fixed_clock, optimistic=False)
    await controller.refresh()
    lions = Team(id="h1", name="Lions", members=[TeamMember(player_id="p1")])

    first = await controller.end("m1", [lions])
    second = await controller.end("m1", [lions])
    assert (first.applied, second.applied) == (False, False)
    assert controller.achievements_for("m1") == []
    assert [c.id for c in controller.certificates_for("m1")] == ["m1:participation:p1"]
    assert list(store.certificates) == ["m1:participation:p1"]


@pytest.mark.asyncio
async def test_pessimistic_end_with_stored_achievements_stays_live(make_match, fixed_clock) -> None:
    store = FailingStore([make_match(status="live", home_players=[PlayerStats(player_id="p1", runs=64, balls=40)])])
    controller, _ = _controller(store, fixed_clock, optimistic=False)
    await controller.refresh()

    first = await controller.end("m1", [])
    retry = await controller.end("m1", [])
    assert first.applied is False
    assert (retry.applied, retry.reason) == (False, "already_ended")
    assert controller.get_match("m1").status == "live"
    assert len(store.achievements) == 2


# --- refresh / scorers / follow ---


@pytest.mark.asyncio
async def test_refresh_rebuilds_live_matches_from_log(make_match, fixed_clock) -> None:
    store = InMemoryMatchStore()
    controller, _ = _controller(store, fixed_clock)
    await controller.add_match(make_match(status="live"))
    await controller.score("m1", LegacyScoreInput(runs=4))
    await controller.score("m1", LegacyScoreInput(runs=1))

    stale = store.matches["m1"].model_copy(deep=True)
    stale.home_participant.score = 0
    store.matches["m1"] = stale

    fresh, _ = _controller(store, fixed_clock)
    result = await fresh.refresh()
    assert result.applied is True
    assert fresh.get_match("m1").home_participant.score == 5


@pytest.mark.asyncio
async def test_scorer_assignment(make_match, fixed_clock) -> None:
    controller, _, store = await _seeded(make_match, fixed_clock)
    scorer = await controller.assign_scorer("m1", "u_player", by=ADMIN)
    assert scorer is not None
    assert scorer.id.startswith("ms_")
    assert scorer.assigned_at == FIXED_NOW
    assert controller.can_score_match("m1", PLAYER) is True
    assert await controller.assign_scorer("m1", "u_player", by=ADMIN) is None
    assert await controller.assign_scorer("m1", "u_other", by=PLAYER) is None
    assert [s.user_id for s in controller.get_match_scorers("m1")] == ["u_player"]

    assert await controller.remove_scorer("m1", "u_player", by=PLAYER) is False
    assert await controller.remove_scorer("m1", "u_player", by=ADMIN) is True
    assert controller.get_match_scorers("m1") == []
    assert store.scorers == {}
    assert controller.can_score_match("m1", None) is False


def test_toggle_follow(fixed_clock) -> None:
    controller, _ = _controller(InMemoryMatchStore(), fixed_clock)
    assert controller.toggle_follow_match("m1") is True
    assert controller.toggle_follow_match("m1") is False
    assert controller.state.followed_matches == set()
