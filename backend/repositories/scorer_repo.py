from __future__ import annotations

from typing import List

from sqlalchemy import select

from models.match_scorer import MatchScorerRow
from .base import BaseRepository


class MatchScorerRepository(BaseRepository[MatchScorerRow]):
    model = MatchScorerRow

    async def list_all(self) -> List[MatchScorerRow]:
        return await self._scalars(select(MatchScorerRow).order_by(MatchScorerRow.assigned_at, MatchScorerRow.id))
