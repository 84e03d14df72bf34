"""
Integration tests: SQLAlchemy match and notification stores on a file-backed
aiosqlite database, and the controller running on top of them.
"""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest
import pytest_asyncio

from core.database import DatabaseManager
from domain.awards import Achievement
from domain.match import LiveState, ScoreEvent, Toss
from domain.people import MatchScorer, Team, TeamMember
from lifecycle.controller import MatchController
from lifecycle.errors import PersistenceError
from notifications import NotificationCenter, NotificationEvent
from notifications.model import NotificationPreferences
from scoring.inputs import LegacyScoreInput
from services.sql_match_store import SqlMatchStore
from services.sql_notification_store import SqlNotificationStore

FIXED_NOW = "2025-03-01T12:00:00+00:00"


@pytest_asyncio.fixture
async def db(tmp_path: Path):
    manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'scoreheroes.db'}")
    await manager.init()
    await manager.create_schema()
    yield manager
    await manager.dispose()


def _achievement(match_id: str = "m1") -> Achievement:
    return Achievement(
        id=f"{match_id}:potm:p1",
        type="player_of_the_match",
        title="Player of the Match",
        player_id="p1",
        match_id=match_id,
        date=FIXED_NOW,
        description="64 runs",
    )


@pytest.mark.asyncio
async def test_match_round_trip(db, make_match) -> None:
    store = SqlMatchStore(db)
    match = make_match(
        status="live",
        tournament_id="t1",
        toss=Toss(winner_team_id="a1", decision="BOWL"),
        live_state=LiveState(striker_id="p1", non_striker_id="p2", bowler_id="b1"),
        events=[ScoreEvent(id="e1", timestamp=FIXED_NOW, points=4, runs_scored=4, team_id="h1")],
    )
    await store.create_match(match)
    loaded = await store.load_matches()
    assert loaded == [match]


@pytest.mark.asyncio
async def test_partial_update_touches_only_given_fields(db, make_match) -> None:
    store = SqlMatchStore(db)
    await store.create_match(make_match(location="Riverside Ground"))
    await store.save_match_update("m1", {"status": "live", "actual_start_time": FIXED_NOW})
    (loaded,) = await store.load_matches()
    assert loaded.status == "live"
    assert loaded.actual_start_time == FIXED_NOW
    assert loaded.location == "Riverside Ground"


@pytest.mark.asyncio
async def test_update_errors_raise_persistence_error(db, make_match) -> None:
    store = SqlMatchStore(db)
    await store.create_match(make_match())
    with pytest.raises(PersistenceError):
        await store.save_match_update("ghost", {"status": "live"})
    with pytest.raises(PersistenceError):
        await store.save_match_update("m1", {"colour": "red"})


@pytest.mark.asyncio
async def test_duplicate_rows_raise_persistence_error(db, make_match) -> None:
    store = SqlMatchStore(db)
    await store.create_match(make_match())
    with pytest.raises(PersistenceError) as info:
        await store.create_match(make_match())
    assert info.value.operation == "create_match"

    await store.create_achievement(_achievement())
    with pytest.raises(PersistenceError):
        await store.create_achievement(_achievement())
    assert [a.id for a in await store.load_achievements()] == ["m1:potm:p1"]


@pytest.mark.asyncio
async def test_scorers_unique_per_match_and_user(db) -> None:
    store = SqlMatchStore(db)
    first = MatchScorer(id="ms_1", match_id="m1", user_id="u1", assigned_by="admin", assigned_at=FIXED_NOW)
    await store.create_scorer(first)
    with pytest.raises(PersistenceError):
        await store.create_scorer(first.model_copy(update={"id": "ms_2"}))
    assert await store.load_scorers() == [first]
    await store.delete_scorer("ms_1")
    await store.delete_scorer("ms_1")
    assert await store.load_scorers() == []


@pytest.mark.asyncio
async def test_controller_state_survives_restart(db, make_match) -> None:
    store = SqlMatchStore(db)
    controller = MatchController(store, clock=lambda: FIXED_NOW)
    await controller.add_match(make_match())
    await controller.start("m1")
    await controller.score("m1", LegacyScoreInput(runs=4))
    await controller.score("m1", LegacyScoreInput(runs=6))
    await controller.undo("m1")
    lions = Team(id="h1", name="Lions", members=[TeamMember(player_id="p1")])
    ended = await controller.end("m1", [lions])
    assert ended.applied is True and ended.error is None

    restarted = MatchController(SqlMatchStore(db), clock=lambda: FIXED_NOW)
    result = await restarted.refresh()
    assert result.applied is True
    match = restarted.get_match("m1")
    assert match.status == "completed"
    assert match.home_participant.score == 4
    assert match.winner_id == "h1"
    assert len(match.events) == 1
    assert [c.id for c in restarted.certificates_for("m1")] == ["m1:participation:p1"]

    again = await restarted.end("m1", [lions])
    assert again.reason == "already_ended"

    certificates = await store.load_certificates("m1")
    assert [c.id for c in certificates] == ["m1:participation:p1"]
    assert certificates[0].metadata.team_name == "Lions"


@pytest.mark.asyncio
async def test_notification_store_round_trip(db) -> None:
    store = SqlNotificationStore(db)
    center = NotificationCenter(store)
    await center.load()
    assert center.preferences == NotificationPreferences()

    first = await center.maybe_notify(
        NotificationEvent(type="match_start", title="Match started", body="Lions vs Tigers is now live", key="match_start:m1")
    )
    await center.maybe_notify(
        NotificationEvent(type="match_result", title="Match result", body="Lions won", key="match_result:m1")
    )
    await center.set_preferences(tournament_event=False)
    await center.dismiss(first.id)

    reloaded = NotificationCenter(SqlNotificationStore(db))
    await reloaded.load()
    assert [n.key for n in reloaded.notifications] == ["match_result:m1"]
    assert reloaded.used_keys == {"match_start:m1", "match_result:m1"}
    assert reloaded.preferences.tournament_event is False

    await reloaded.clear_all()
    assert await store.load_notifications() == []
    assert sorted(await store.load_used_keys()) == ["match_result:m1", "match_start:m1"]


@pytest.mark.asyncio
async def test_in_memory_database_shares_tables_across_sessions(make_match) -> None:
    manager = DatabaseManager("sqlite+aiosqlite:///:memory:")
    await manager.init()
    await manager.create_schema()
    try:
        store = SqlMatchStore(manager)
        await store.create_match(make_match())
        await store.save_match_update("m1", {"status": "scheduled"})
        assert [m.status for m in await store.load_matches()] == ["scheduled"]
    finally:
        await manager.dispose()
