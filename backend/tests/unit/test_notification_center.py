"""
Tests for the notification deduplicator: per-key suppression, toggles,
dismiss/clear semantics and platform notifier isolation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Tuple

import pytest

from lifecycle.errors import PersistenceError
from notifications import NotificationCenter, NotificationEvent, InMemoryNotificationStore
from ops.ops_events import OPS_LOGGER_NAME


def _start_event(match_id: str = "m1") -> NotificationEvent:
    return NotificationEvent(
        type="match_start",
        title="Match started",
        body="Lions vs Tigers is now live",
        key=f"match_start:{match_id}",
        related_match_id=match_id,
    )


class _FailingStore(InMemoryNotificationStore):
    async def save_notification(self, record) -> None:
        raise PersistenceError("save_notification", "disk full")


@pytest.mark.asyncio
async def test_same_key_notifies_once() -> None:
    center = NotificationCenter(InMemoryNotificationStore())
    first = await center.maybe_notify(_start_event())
    second = await center.maybe_notify(_start_event())
    assert first is not None
    assert second is None
    assert len(center.notifications) == 1
    assert "match_start:m1" in center.used_keys


@pytest.mark.asyncio
async def test_newest_first() -> None:
    center = NotificationCenter(InMemoryNotificationStore())
    await center.maybe_notify(_start_event("m1"))
    await center.maybe_notify(_start_event("m2"))
    assert [n.related_match_id for n in center.notifications] == ["m2", "m1"]


@pytest.mark.asyncio
async def test_global_toggle_suppresses_without_using_key(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    center = NotificationCenter(InMemoryNotificationStore())
    await center.set_preferences(enabled=False)
    assert await center.maybe_notify(_start_event()) is None
    assert "match_start:m1" not in center.used_keys
    assert "notification_suppressed" in caplog.text and "disabled" in caplog.text

    await center.set_preferences(enabled=True)
    assert await center.maybe_notify(_start_event()) is not None


@pytest.mark.asyncio
async def test_type_toggle_only_affects_that_type() -> None:
    center = NotificationCenter(InMemoryNotificationStore())
    await center.set_preferences(match_start=False)
    assert await center.maybe_notify(_start_event()) is None
    result = NotificationEvent(type="match_result", title="Match result", body="b", key="match_result:m1")
    assert await center.maybe_notify(result) is not None


@pytest.mark.asyncio
async def test_dismissed_notification_does_not_come_back() -> None:
    store = InMemoryNotificationStore()
    center = NotificationCenter(store)
    record = await center.maybe_notify(_start_event())
    assert await center.dismiss(record.id) is True
    assert center.notifications == []
    assert store.records == []
    assert await center.maybe_notify(_start_event()) is None
    assert await center.dismiss("missing") is False


@pytest.mark.asyncio
async def test_clear_all_keeps_used_keys() -> None:
    store = InMemoryNotificationStore()
    center = NotificationCenter(store)
    await center.maybe_notify(_start_event("m1"))
    await center.maybe_notify(_start_event("m2"))
    await center.clear_all()
    assert center.notifications == []
    assert store.records == []
    assert store.used_keys == ["match_start:m1", "match_start:m2"]
    assert await center.maybe_notify(_start_event("m1")) is None


@pytest.mark.asyncio
async def test_dedup_survives_reload() -> None:
    store = InMemoryNotificationStore()
    first = NotificationCenter(store)
    await first.maybe_notify(_start_event())
    await first.set_preferences(match_result=False)

    second = NotificationCenter(store)
    await second.load()
    assert len(second.notifications) == 1
    assert second.preferences.match_result is False
    assert await second.maybe_notify(_start_event()) is None


@pytest.mark.asyncio
async def test_sync_notifier_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)

    def _broken(title: str, body: str) -> None:
        raise RuntimeError("no display")

    center = NotificationCenter(InMemoryNotificationStore(), notifier=_broken)
    record = await center.maybe_notify(_start_event())
    assert record is not None
    assert len(center.notifications) == 1
    assert "Platform notifier failed" in caplog.text


@pytest.mark.asyncio
async def test_async_notifier_runs_and_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    delivered: List[Tuple[str, str]] = []

    async def _push(title: str, body: str) -> None:
        delivered.append((title, body))
        raise RuntimeError("push gateway down")

    center = NotificationCenter(InMemoryNotificationStore(), notifier=_push)
    await center.maybe_notify(_start_event())
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert delivered == [("Match started", "Lions vs Tigers is now live")]
    assert "push gateway down" in caplog.text
    assert len(center.notifications) == 1


@pytest.mark.asyncio
async def test_persistence_failure_keeps_in_memory_record(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    center = NotificationCenter(_FailingStore())
    record = await center.maybe_notify(_start_event())
    assert record is not None
    assert center.notifications == [record]
    assert "persistence_failure" in caplog.text


@pytest.mark.asyncio
async def test_used_key_persists_when_record_write_fails() -> None:
    store = _FailingStore()
    first = NotificationCenter(store)
    assert await first.maybe_notify(_start_event()) is not None

    reloaded = NotificationCenter(store)
    await reloaded.load()
    assert reloaded.notifications == []
    assert "match_start:m1" in reloaded.used_keys
    assert await reloaded.maybe_notify(_start_event()) is None


@pytest.mark.asyncio
async def test_unknown_preference_raises() -> None:
    center = NotificationCenter(InMemoryNotificationStore())
    with pytest.raises(ValueError):
        await center.set_preferences(sound=True)
