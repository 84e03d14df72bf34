from __future__ import annotations

from typing import List

from sqlalchemy import select

from models.certificate import CertificateRow
from .base import BaseRepository


class CertificateRepository(BaseRepository[CertificateRow]):
    model = CertificateRow

    async def list_by_match(self, match_id: str) -> List[CertificateRow]:
        """Certificates issued for one match, participation before achievement."""
        stmt = (
            select(CertificateRow)
            .where(CertificateRow.match_id == match_id)
            .order_by(CertificateRow.type.desc(), CertificateRow.id)
        )
        return await self._scalars(stmt)

    async def list_all(self) -> List[CertificateRow]:
        stmt = select(CertificateRow).order_by(
            CertificateRow.match_id, CertificateRow.type.desc(), CertificateRow.id
        )
        return await self._scalars(stmt)
