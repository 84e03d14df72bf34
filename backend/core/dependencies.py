"""FastAPI dependencies: the match controller, the notification center and the calling user."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header

from domain.people import CurrentUser
from lifecycle.controller import MatchController
from notifications.center import NotificationCenter
from services.sql_match_store import SqlMatchStore
from services.sql_notification_store import SqlNotificationStore

from .config import Settings
from .database import get_database_manager

logger = logging.getLogger(__name__)

_controller: Optional[MatchController] = None
_notification_center: Optional[NotificationCenter] = None


def install_services(controller: MatchController, notification_center: NotificationCenter) -> None:
    """Make ``controller`` and ``notification_center`` the ones served to routes."""
    global _controller, _notification_center
    _controller = controller
    _notification_center = notification_center


def reset_services() -> None:
    global _controller, _notification_center
    _controller = None
    _notification_center = None


async def init_services(settings: Settings) -> MatchController:
    """Build the SQL-backed stores on the initialized database, load state and install it."""
    db = get_database_manager()
    center = NotificationCenter(SqlNotificationStore(db))
    await center.load()
    controller = MatchController(
        SqlMatchStore(db),
        notifications=center,
        optimistic=settings.optimistic_updates,
    )
    result = await controller.refresh()
    if result.error:
        logger.warning("Initial match load failed: %s", result.error)
    install_services(controller, center)
    return controller


def get_match_controller() -> MatchController:
    """FastAPI dependency returning the installed MatchController."""
    if _controller is None:
        raise RuntimeError("Match services are not initialized.")
    return _controller


def get_notification_center() -> NotificationCenter:
    """FastAPI dependency returning the installed NotificationCenter."""
    if _notification_center is None:
        raise RuntimeError("Match services are not initialized.")
    return _notification_center


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> Optional[CurrentUser]:
    """Identity forwarded by the auth gateway in X-User-* headers; None for anonymous calls."""
    if not x_user_id:
        return None
    role = x_user_role if x_user_role in ("admin", "organizer", "player", "fan") else "player"
    return CurrentUser(id=x_user_id, role=role, name=x_user_name)
