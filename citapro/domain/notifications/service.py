"""
Notification service

In-app notifications are a side effect of the booking flows. A failed insert
is logged and swallowed so it never undoes or blocks the action that caused it.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import NOTIFICATION_TYPES, Notification, Profile
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def notify(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        appointment_id: Optional[int] = None,
    ) -> Optional[Notification]:
        """
        Insert one notification for ``user_id``.

        Returns:
            The notification, or None if it could not be stored
        """
        if notification_type not in NOTIFICATION_TYPES:
            logger.error(f"❌ Unknown notification type '{notification_type}', not sent to user {user_id}")
            return None

        try:
            notification = self.repo.create(
                self.db,
                user_id=user_id,
                type=notification_type,
                title=title,
                message=message,
                appointment_id=appointment_id,
            )
            logger.info(f"🔔 {notification_type} notification sent to user {user_id}")
            return notification
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to send {notification_type} notification to user {user_id}: {e}")
            return None

    def list_notifications(self, user: Profile, since: Optional[datetime] = None) -> list[Notification]:
        return self.repo.list_for_user(self.db, user.id, since)

    def unread_count(self, user: Profile) -> int:
        return self.repo.count_unread(self.db, user.id)

    def mark_read(self, user: Profile, notification_id: int) -> Notification:
        notification = self.repo.get_for_user(self.db, notification_id, user.id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notificación no encontrada")
        return self.repo.mark_read(self.db, notification)

    def mark_all_read(self, user: Profile) -> int:
        updated = self.repo.mark_all_read(self.db, user.id)
        logger.info(f"✅ Marked {updated} notifications as read for user {user.id}")
        return updated
