"""Notification router - the caller's in-app inbox"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from .schemas import MarkAllReadResponse, NotificationResponse, UnreadCountResponse
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    since: Optional[datetime] = Query(None, description="Only notifications created after this instant"),
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Newest first. Clients poll with ?since= to pick up new rows."""
    return service.list_notifications(current_user, since)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(unread=service.unread_count(current_user))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return MarkAllReadResponse(updated=service.mark_all_read(current_user))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    current_user: Profile = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_read(current_user, notification_id)
