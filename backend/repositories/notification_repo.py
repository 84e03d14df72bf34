from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select

from models.notification import NotificationKeyRow, NotificationPreferenceRow, NotificationRow
from .base import BaseRepository

PREFERENCES_ROW_ID = 1


class NotificationRepository(BaseRepository[NotificationRow]):
    model = NotificationRow

    async def list_newest_first(self) -> List[NotificationRow]:
        return await self._scalars(
            select(NotificationRow).order_by(NotificationRow.timestamp.desc(), NotificationRow.id)
        )

    async def delete_all(self) -> None:
        await self.session.execute(delete(NotificationRow))


class NotificationKeyRepository(BaseRepository[NotificationKeyRow]):
    """Used dedup keys. Rows are only ever added."""

    model = NotificationKeyRow

    async def exists(self, key: str) -> bool:
        return await self.get_by_id(key) is not None

    async def list_keys(self) -> List[str]:
        return await self._scalars(select(NotificationKeyRow.key).order_by(NotificationKeyRow.used_at_utc))


class NotificationPreferenceRepository(BaseRepository[NotificationPreferenceRow]):
    model = NotificationPreferenceRow

    async def get(self) -> Optional[NotificationPreferenceRow]:
        return await self.get_by_id(PREFERENCES_ROW_ID)
