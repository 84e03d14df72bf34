"""
SQLAlchemy-backed NotificationStore. SQLAlchemyError becomes PersistenceError.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import DatabaseManager
from lifecycle.errors import PersistenceError
from models.notification import NotificationKeyRow, NotificationPreferenceRow, NotificationRow
from notifications.model import NotificationPreferences, NotificationRecord
from repositories.notification_repo import (
    PREFERENCES_ROW_ID,
    NotificationKeyRepository,
    NotificationPreferenceRepository,
    NotificationRepository,
)

logger = logging.getLogger(__name__)


class SqlNotificationStore:
    """NotificationStore over the async SQLAlchemy models."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with self._db.session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.warning("Notification store %s failed: %s", operation, e)
            raise PersistenceError(operation, str(e)) from e

    async def load_notifications(self) -> List[NotificationRecord]:
        async with self._session("load_notifications") as session:
            rows = await NotificationRepository(session).list_newest_first()
            return [
                NotificationRecord(
                    id=r.id,
                    type=r.type,
                    title=r.title,
                    body=r.body,
                    key=r.key,
                    timestamp=r.timestamp,
                    related_match_id=r.related_match_id,
                    related_tournament_id=r.related_tournament_id,
                )
                for r in rows
            ]

    async def load_used_keys(self) -> List[str]:
        async with self._session("load_used_keys") as session:
            return await NotificationKeyRepository(session).list_keys()

    async def load_preferences(self) -> NotificationPreferences:
        async with self._session("load_preferences") as session:
            row = await NotificationPreferenceRepository(session).get()
            if row is None:
                return NotificationPreferences()
            return NotificationPreferences(
                enabled=row.enabled,
                match_start=row.match_start,
                match_result=row.match_result,
                tournament_event=row.tournament_event,
            )

    async def save_notification(self, record: NotificationRecord) -> None:
        async with self._session("save_notification") as session:
            await NotificationRepository(session).add(NotificationRow(**record.model_dump()))

    async def save_used_key(self, key: str) -> None:
        async with self._session("save_used_key") as session:
            repo = NotificationKeyRepository(session)
            if not await repo.exists(key):
                await repo.add(NotificationKeyRow(key=key, used_at_utc=datetime.now(timezone.utc)))

    async def delete_notification(self, notification_id: str) -> None:
        async with self._session("delete_notification") as session:
            await NotificationRepository(session).delete_by_id(notification_id)

    async def clear_notifications(self) -> None:
        async with self._session("clear_notifications") as session:
            await NotificationRepository(session).delete_all()

    async def save_preferences(self, preferences: NotificationPreferences) -> None:
        async with self._session("save_preferences") as session:
            repo = NotificationPreferenceRepository(session)
            row = await repo.get()
            if row is None:
                await repo.add(NotificationPreferenceRow(id=PREFERENCES_ROW_ID, **preferences.model_dump()))
                return
            for name, value in preferences.model_dump().items():
                setattr(row, name, value)
