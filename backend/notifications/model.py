"""
Notification payloads, stored records and user toggles.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

NotificationType = Literal["match_start", "match_result", "tournament_event"]


class NotificationEvent(BaseModel):
    """A candidate notification. ``key`` identifies it across sessions for deduplication."""

    type: NotificationType
    title: str
    body: str
    key: str
    related_match_id: Optional[str] = None
    related_tournament_id: Optional[str] = None


class NotificationRecord(BaseModel):
    id: str
    type: NotificationType
    title: str
    body: str
    key: str
    timestamp: str
    related_match_id: Optional[str] = None
    related_tournament_id: Optional[str] = None


class NotificationPreferences(BaseModel):
    """Global switch plus one switch per notification type. All on by default."""

    enabled: bool = True
    match_start: bool = True
    match_result: bool = True
    tournament_event: bool = True

    def allows(self, notification_type: str) -> bool:
        if not self.enabled:
            return False
        return bool(getattr(self, notification_type, False))
