"""Chat service - conversation between the two parties of an appointment"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ChatMessage, Profile
from ...utils.sanitization import validate_and_sanitize_input
from ..appointments.service import AppointmentService
from .repository import ChatRepository
from .schemas import MAX_MESSAGE_LENGTH, ChatMessageResponse

logger = logging.getLogger(__name__)


def to_message_response(message: ChatMessage, viewer: Profile) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        appointment_id=message.appointment_id,
        sender_id=message.sender_id,
        sender_name=message.sender.full_name if message.sender else None,
        message=message.message,
        created_at=message.created_at,
        is_mine=message.sender_id == viewer.id,
    )


class ChatService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ChatRepository()
        self.appointments = AppointmentService(db)

    def list_messages(
        self, appointment_id: int, user: Profile, since: Optional[datetime] = None
    ) -> list[ChatMessage]:
        self.appointments.get_for_participant(appointment_id, user)
        return self.repo.list_messages(self.db, appointment_id, since)

    def send_message(self, appointment_id: int, user: Profile, text: str) -> ChatMessage:
        appointment, role = self.appointments.get_for_participant(appointment_id, user)
        try:
            text = validate_and_sanitize_input(text, max_length=MAX_MESSAGE_LENGTH)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        message = self.repo.create(self.db, appointment.id, user.id, text)
        logger.info(f"💬 Message {message.id} on appointment {appointment.id} from {role}")
        return message
