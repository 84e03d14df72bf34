from __future__ import annotations

from typing import List

from sqlalchemy import select

from models.achievement import AchievementRow
from .base import BaseRepository


class AchievementRepository(BaseRepository[AchievementRow]):
    model = AchievementRow

    async def list_all(self) -> List[AchievementRow]:
        return await self._scalars(select(AchievementRow).order_by(AchievementRow.date, AchievementRow.id))
