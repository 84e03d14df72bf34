"""
Deduplicated in-app notifications with per-type toggles.
"""

from notifications.center import NotificationCenter, PlatformNotifier
from notifications.model import (
    NotificationEvent,
    NotificationPreferences,
    NotificationRecord,
    NotificationType,
)
from notifications.store import InMemoryNotificationStore, NotificationStore

__all__ = [
    "InMemoryNotificationStore",
    "NotificationCenter",
    "NotificationEvent",
    "NotificationPreferences",
    "NotificationRecord",
    "NotificationStore",
    "NotificationType",
    "PlatformNotifier",
]
