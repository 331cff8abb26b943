"""Notification repository - Database operations for in-app notifications"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification


class NotificationRepository:
    @staticmethod
    def create(db: Session, **data) -> Notification:
        notification = Notification(is_read=False, **data)
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def list_for_user(
        db: Session, user_id: int, since: Optional[datetime] = None, limit: int = 100
    ) -> list[Notification]:
        """Newest first; ``since`` returns only rows created after that instant"""
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if since is not None:
            query = query.filter(Notification.created_at > since)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    @staticmethod
    def count_unread(db: Session, user_id: int) -> int:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    @staticmethod
    def get_for_user(db: Session, notification_id: int, user_id: int) -> Optional[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    @staticmethod
    def mark_read(db: Session, notification: Notification) -> Notification:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: int) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated
