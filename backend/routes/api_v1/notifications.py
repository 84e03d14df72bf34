"""In-app notification endpoints under /api/v1/notifications."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from core.dependencies import get_notification_center
from notifications.center import NotificationCenter

router = APIRouter(prefix="/notifications", tags=["notifications"])


class PreferencesBody(BaseModel):
    """Only the toggles present in the body are changed."""

    enabled: Optional[bool] = None
    match_start: Optional[bool] = None
    match_result: Optional[bool] = None
    tournament_event: Optional[bool] = None


@router.get("", summary="Notifications (newest first) and current preferences")
def list_notifications(center: NotificationCenter = Depends(get_notification_center)) -> dict:
    return {
        "notifications": [n.model_dump(mode="json") for n in center.notifications],
        "preferences": center.preferences.model_dump(),
    }


@router.post("/{notification_id}/dismiss", summary="Dismiss one notification")
async def dismiss_notification(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
) -> dict:
    if not await center.dismiss(notification_id):
        raise HTTPException(status_code=404, detail="notification not found")
    return {"dismissed": notification_id}


@router.post("/clear", summary="Dismiss all notifications")
async def clear_notifications(center: NotificationCenter = Depends(get_notification_center)) -> dict:
    await center.clear_all()
    return {"cleared": True}


@router.put("/preferences", summary="Update notification toggles")
async def update_preferences(
    body: PreferencesBody,
    center: NotificationCenter = Depends(get_notification_center),
) -> dict:
    prefs = await center.set_preferences(**body.model_dump(exclude_none=True))
    return prefs.model_dump()
