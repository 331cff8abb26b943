"""Chat repository - messages attached to an appointment"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import ChatMessage


class ChatRepository:
    @staticmethod
    def list_messages(
        db: Session, appointment_id: int, since: Optional[datetime] = None
    ) -> list[ChatMessage]:
        """Oldest first"""
        query = db.query(ChatMessage).filter(ChatMessage.appointment_id == appointment_id)
        if since is not None:
            query = query.filter(ChatMessage.created_at > since)
        return query.order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc()).all()

    @staticmethod
    def create(db: Session, appointment_id: int, sender_id: int, message: str) -> ChatMessage:
        chat_message = ChatMessage(appointment_id=appointment_id, sender_id=sender_id, message=message)
        db.add(chat_message)
        db.commit()
        db.refresh(chat_message)
        return chat_message
