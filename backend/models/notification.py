from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class NotificationRow(Base):
    """In-app notification record."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    key: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    related_match_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    related_tournament_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class NotificationKeyRow(Base):
    """Dedup key that has produced a notification. Survives dismiss and clear."""

    __tablename__ = "notification_keys"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    used_at_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class NotificationPreferenceRow(Base):
    """Single-row table (id=1) holding the notification toggles."""

    __tablename__ = "notification_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    match_start: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    match_result: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    tournament_event: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
