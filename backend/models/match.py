from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class MatchRow(Base):
    """One match. Participants, event log, live state and toss are stored as JSON text."""

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    sport_id: Mapped[str] = mapped_column(String(16), nullable=False)
    date: Mapped[str] = mapped_column(String(40), nullable=False)  # ISO-8601 as given
    location: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    tournament_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    stage: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    winner_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    current_batting_team_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_by_user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    actual_start_time: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    actual_end_time: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    home_participant_json: Mapped[str] = mapped_column(Text, nullable=False)
    away_participant_json: Mapped[str] = mapped_column(Text, nullable=False)
    events_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    live_state_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    toss_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_match_sport_status", "sport_id", "status"),
    )
