"""
SQLAlchemy-backed MatchPersistence.

Each call runs in its own DatabaseManager session (commit on success, rollback on
error). SQLAlchemyError is translated into PersistenceError so callers never see
driver exceptions.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import DatabaseManager
from domain.awards import Achievement, Certificate, CertificateMetadata
from domain.feed import FeedItem
from domain.match import LiveState, Match, Participant, ScoreEvent, Toss
from domain.people import MatchScorer
from lifecycle.errors import PersistenceError
from models.achievement import AchievementRow
from models.certificate import CertificateRow
from models.feed_item import FeedItemRow
from models.match import MatchRow
from models.match_scorer import MatchScorerRow
from repositories.achievement_repo import AchievementRepository
from repositories.certificate_repo import CertificateRepository
from repositories.feed_repo import FeedRepository
from repositories.match_repo import MatchRepository
from repositories.scorer_repo import MatchScorerRepository

logger = logging.getLogger(__name__)

# Match fields stored as JSON text, by column
_JSON_COLUMNS = {
    "home_participant": "home_participant_json",
    "away_participant": "away_participant_json",
    "events": "events_json",
    "live_state": "live_state_json",
    "toss": "toss_json",
}
_PLAIN_COLUMNS = (
    "sport_id",
    "date",
    "location",
    "status",
    "tournament_id",
    "stage",
    "winner_id",
    "current_batting_team_id",
    "created_by_user_id",
    "actual_start_time",
    "actual_end_time",
)


def _dumps(value: Any) -> str | None:
    if value is None:
        return None
    return json.dumps(value, separators=(",", ":"))


def match_to_row(match: Match, now: datetime) -> MatchRow:
    data = match.model_dump(mode="json")
    row = MatchRow(id=match.id, created_at_utc=now, updated_at_utc=now)
    for name in _PLAIN_COLUMNS:
        setattr(row, name, data[name])
    for name, column in _JSON_COLUMNS.items():
        setattr(row, column, _dumps(data[name]))
    return row


def row_to_match(row: MatchRow) -> Match:
    live_state = json.loads(row.live_state_json) if row.live_state_json else None
    toss = json.loads(row.toss_json) if row.toss_json else None
    return Match(
        id=row.id,
        sport_id=row.sport_id,
        date=row.date,
        location=row.location or "",
        status=row.status,
        tournament_id=row.tournament_id,
        stage=row.stage,
        winner_id=row.winner_id,
        current_batting_team_id=row.current_batting_team_id,
        created_by_user_id=row.created_by_user_id,
        actual_start_time=row.actual_start_time,
        actual_end_time=row.actual_end_time,
        home_participant=Participant.model_validate(json.loads(row.home_participant_json)),
        away_participant=Participant.model_validate(json.loads(row.away_participant_json)),
        events=[ScoreEvent.model_validate(e) for e in json.loads(row.events_json or "[]")],
        live_state=LiveState.model_validate(live_state) if live_state is not None else None,
        toss=Toss.model_validate(toss) if toss is not None else None,
    )


def apply_partial(row: MatchRow, partial: Dict[str, Any], now: datetime) -> None:
    """Write JSON-ready Match field values onto ``row``. Unknown keys raise PersistenceError."""
    for name, value in partial.items():
        if name in _JSON_COLUMNS:
            setattr(row, _JSON_COLUMNS[name], _dumps(value))
        elif name in _PLAIN_COLUMNS:
            setattr(row, name, value)
        else:
            raise PersistenceError("save_match_update", f"unknown match field {name!r}")
    row.updated_at_utc = now


class SqlMatchStore:
    """MatchPersistence over the async SQLAlchemy models."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with self._db.session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.warning("Match store %s failed: %s", operation, e)
            raise PersistenceError(operation, str(e)) from e

    async def load_matches(self) -> List[Match]:
        async with self._session("load_matches") as session:
            rows = await MatchRepository(session).list_all()
            return [row_to_match(r) for r in rows]

    async def load_achievements(self) -> List[Achievement]:
        async with self._session("load_achievements") as session:
            rows = await AchievementRepository(session).list_all()
            return [
                Achievement(
                    id=r.id,
                    type=r.type,
                    title=r.title,
                    player_id=r.player_id,
                    match_id=r.match_id,
                    date=r.date,
                    description=r.description,
                )
                for r in rows
            ]

    async def load_scorers(self) -> List[MatchScorer]:
        async with self._session("load_scorers") as session:
            rows = await MatchScorerRepository(session).list_all()
            return [
                MatchScorer(
                    id=r.id,
                    match_id=r.match_id,
                    user_id=r.user_id,
                    assigned_by=r.assigned_by,
                    assigned_at=r.assigned_at,
                )
                for r in rows
            ]

    async def load_certificates(self, match_id: Optional[str] = None) -> List[Certificate]:
        async with self._session("load_certificates") as session:
            repo = CertificateRepository(session)
            rows = await (repo.list_all() if match_id is None else repo.list_by_match(match_id))
            return [
                Certificate(
                    id=r.id,
                    template_id=r.template_id,
                    type=r.type,
                    recipient_id=r.recipient_id,
                    recipient_name=r.recipient_name,
                    match_id=r.match_id,
                    tournament_id=r.tournament_id,
                    achievement_id=r.achievement_id,
                    title=r.title,
                    description=r.description,
                    date=r.date,
                    issue_date=r.issue_date,
                    issuer_id=r.issuer_id,
                    verification_hash=r.verification_hash,
                    status=r.status,
                    metadata=CertificateMetadata.model_validate(json.loads(r.metadata_json)),
                )
                for r in rows
            ]

    async def create_match(self, match: Match) -> None:
        async with self._session("create_match") as session:
            await MatchRepository(session).add(match_to_row(match, datetime.now(timezone.utc)))

    async def save_match_update(self, match_id: str, partial: Dict[str, Any]) -> None:
        async with self._session("save_match_update") as session:
            row = await MatchRepository(session).get_by_id(match_id)
            if row is None:
                raise PersistenceError("save_match_update", f"match {match_id} not found")
            apply_partial(row, partial, datetime.now(timezone.utc))

    async def create_achievement(self, achievement: Achievement) -> None:
        async with self._session("create_achievement") as session:
            await AchievementRepository(session).add(AchievementRow(**achievement.model_dump()))

    async def create_certificate(self, certificate: Certificate) -> None:
        data = certificate.model_dump(mode="json", exclude={"metadata"})
        async with self._session("create_certificate") as session:
            await CertificateRepository(session).add(
                CertificateRow(**data, metadata_json=_dumps(certificate.metadata.model_dump(mode="json")))
            )

    async def create_feed_item(self, item: FeedItem) -> None:
        async with self._session("create_feed_item") as session:
            await FeedRepository(session).add(FeedItemRow(**item.model_dump()))

    async def create_scorer(self, scorer: MatchScorer) -> None:
        async with self._session("create_scorer") as session:
            await MatchScorerRepository(session).add(MatchScorerRow(**scorer.model_dump()))

    async def delete_scorer(self, scorer_id: str) -> None:
        async with self._session("delete_scorer") as session:
            await MatchScorerRepository(session).delete_by_id(scorer_id)
