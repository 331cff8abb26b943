"""Chat router"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ...rate_limiter import create_rate_limiter
from .schemas import ChatMessageCreate, ChatMessageResponse
from .service import ChatService, to_message_response

router = APIRouter(prefix="/chat", tags=["Chat"])

rate_limit_chat = create_rate_limiter(limit=30, window_seconds=60, key_prefix="chat")


def get_chat_service(db: Session = Depends(get_db)) -> ChatService:
    """Dependency injection for ChatService"""
    return ChatService(db)


@router.get("/{appointment_id}/messages", response_model=list[ChatMessageResponse])
async def list_messages(
    appointment_id: int,
    since: Optional[datetime] = Query(None, description="Only messages sent after this instant"),
    current_user: Profile = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    messages = service.list_messages(appointment_id, current_user, since)
    return [to_message_response(m, current_user) for m in messages]


@router.post("/{appointment_id}/messages", response_model=ChatMessageResponse, status_code=201)
async def send_message(
    appointment_id: int,
    data: ChatMessageCreate,
    current_user: Profile = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
    _: None = Depends(rate_limit_chat),
):
    return to_message_response(service.send_message(appointment_id, current_user, data.message), current_user)
