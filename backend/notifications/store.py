"""
Notification store port. The SQLAlchemy implementation lives in services/;
InMemoryNotificationStore keeps state in lists and never fails.
"""

from __future__ import annotations

from typing import List, Protocol

from notifications.model import NotificationPreferences, NotificationRecord


class NotificationStore(Protocol):
    """Protocol for notification records, used dedup keys and preferences."""

    async def load_notifications(self) -> List[NotificationRecord]:
        """Newest first."""
        ...

    async def load_used_keys(self) -> List[str]:
        ...

    async def load_preferences(self) -> NotificationPreferences:
        ...

    async def save_notification(self, record: NotificationRecord) -> None:
        ...

    async def save_used_key(self, key: str) -> None:
        ...

    async def delete_notification(self, notification_id: str) -> None:
        ...

    async def clear_notifications(self) -> None:
        ...

    async def save_preferences(self, preferences: NotificationPreferences) -> None:
        ...


class InMemoryNotificationStore:
    def __init__(self) -> None:
        self.records: List[NotificationRecord] = []
        self.used_keys: List[str] = []
        self.preferences = NotificationPreferences()

    async def load_notifications(self) -> List[NotificationRecord]:
        return list(self.records)

    async def load_used_keys(self) -> List[str]:
        return list(self.used_keys)

    async def load_preferences(self) -> NotificationPreferences:
        return self.preferences

    async def save_notification(self, record: NotificationRecord) -> None:
        self.records.insert(0, record)

    async def save_used_key(self, key: str) -> None:
        if key not in self.used_keys:
            self.used_keys.append(key)

    async def delete_notification(self, notification_id: str) -> None:
        self.records = [r for r in self.records if r.id != notification_id]

    async def clear_notifications(self) -> None:
        self.records = []

    async def save_preferences(self, preferences: NotificationPreferences) -> None:
        self.preferences = preferences
