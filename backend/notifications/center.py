"""
Notification deduplicator.

maybe_notify() records a notification at most once per key, across sessions:
- suppressed when the global toggle or the per-type toggle is off;
- suppressed when the key was used before;
- otherwise the record is prepended, the key recorded and both persisted.
The platform notifier (desktop / push) is fire-and-forget: its failures are
logged and never affect what was recorded.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Set

from lifecycle.errors import PersistenceError
from notifications.model import NotificationEvent, NotificationPreferences, NotificationRecord
from notifications.store import NotificationStore
from ops.ops_events import log_notification_sent, log_notification_suppressed, log_persistence_failure

logger = logging.getLogger(__name__)

# (title, body) -> None, or a coroutine function with the same signature
PlatformNotifier = Callable[[str, str], Any]


class NotificationCenter:
    """In-memory notification state mirrored to a NotificationStore."""

    def __init__(
        self,
        store: NotificationStore,
        notifier: Optional[PlatformNotifier] = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._pending: Set[asyncio.Task] = set()
        self.notifications: List[NotificationRecord] = []
        self.used_keys: Set[str] = set()
        self.preferences = NotificationPreferences()

    async def load(self) -> None:
        """Restore records, used keys and preferences from the store."""
        self.notifications = await self._store.load_notifications()
        self.used_keys = set(await self._store.load_used_keys())
        self.preferences = await self._store.load_preferences()

    async def maybe_notify(self, event: NotificationEvent) -> Optional[NotificationRecord]:
        """Record ``event`` unless suppressed. Returns the new record, or None when suppressed."""
        if not self.preferences.enabled:
            log_notification_suppressed(event.key, "disabled")
            return None
        if not self.preferences.allows(event.type):
            log_notification_suppressed(event.key, "type_disabled")
            return None
        if event.key in self.used_keys:
            log_notification_suppressed(event.key, "duplicate")
            return None

        record = NotificationRecord(
            id=uuid.uuid4().hex,
            type=event.type,
            title=event.title,
            body=event.body,
            key=event.key,
            timestamp=datetime.now(timezone.utc).isoformat(),
            related_match_id=event.related_match_id,
            related_tournament_id=event.related_tournament_id,
        )
        self.notifications.insert(0, record)
        self.used_keys.add(event.key)
        log_notification_sent(event.key, event.type)

        # used keys persist even when the record write fails
        try:
            await self._store.save_used_key(event.key)
        except PersistenceError as e:
            log_persistence_failure("save_used_key", event.key, str(e))
        try:
            await self._store.save_notification(record)
        except PersistenceError as e:
            log_persistence_failure("save_notification", record.id, str(e))

        self._fire_platform(event.title, event.body)
        return record

    def _fire_platform(self, title: str, body: str) -> None:
        if self._notifier is None:
            return
        try:
            result = self._notifier(title, body)
        except Exception:
            logger.warning("Platform notifier failed", exc_info=True)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending.add(task)
            task.add_done_callback(self._on_platform_done)

    def _on_platform_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Platform notifier failed: %s", exc)

    async def dismiss(self, notification_id: str) -> bool:
        """Remove one record. The key stays used. False when no such record."""
        before = len(self.notifications)
        self.notifications = [n for n in self.notifications if n.id != notification_id]
        if len(self.notifications) == before:
            return False
        try:
            await self._store.delete_notification(notification_id)
        except PersistenceError as e:
            log_persistence_failure("delete_notification", notification_id, str(e))
        return True

    async def clear_all(self) -> None:
        """Drop every record; used keys are kept so cleared notifications do not come back."""
        self.notifications = []
        try:
            await self._store.clear_notifications()
        except PersistenceError as e:
            log_persistence_failure("clear_notifications", "*", str(e))

    async def set_preferences(self, **changes: bool) -> NotificationPreferences:
        """Update any of enabled / match_start / match_result / tournament_event."""
        unknown = set(changes) - set(NotificationPreferences.model_fields)
        if unknown:
            raise ValueError(f"unknown notification preference(s): {sorted(unknown)}")
        self.preferences = self.preferences.model_copy(update=changes)
        try:
            await self._store.save_preferences(self.preferences)
        except PersistenceError as e:
            log_persistence_failure("save_preferences", "preferences", str(e))
        return self.preferences
