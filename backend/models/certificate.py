from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class CertificateRow(Base):
    """Issued certificate; metadata is the snapshot taken at issue time."""

    __tablename__ = "certificates"

    id: Mapped[str] = mapped_column(String(250), primary_key=True)
    template_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    recipient_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    recipient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    match_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    tournament_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    achievement_id: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[str] = mapped_column(String(40), nullable=False)
    issue_date: Mapped[str] = mapped_column(String(40), nullable=False)
    issuer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    verification_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    metadata_json: Mapped[str] = mapped_column(Text, nullable=False)
