from __future__ import annotations

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Data access for one mapped row type inside a caller-owned session.

    Subclasses set ``model``. Writes are flushed so constraint violations surface
    at the call site, but never committed: the DatabaseManager session used by
    the store commits or rolls back the whole operation.
    """

    model: Type[T]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id_value: Any) -> Optional[T]:
        return await self.session.get(self.model, id_value)

    async def add(self, row: T) -> T:
        self.session.add(row)
        await self.session.flush()
        return row

    async def delete_by_id(self, id_value: Any) -> bool:
        """Delete the row with this primary key. False when there is none."""
        row = await self.get_by_id(id_value)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def _scalars(self, stmt: Select) -> List[Any]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
