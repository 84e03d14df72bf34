from __future__ import annotations

from typing import List

from sqlalchemy import select

from models.match import MatchRow
from .base import BaseRepository


class MatchRepository(BaseRepository[MatchRow]):
    model = MatchRow

    async def list_all(self) -> List[MatchRow]:
        """All matches, most recently created first."""
        return await self._scalars(select(MatchRow).order_by(MatchRow.created_at_utc.desc(), MatchRow.id))
