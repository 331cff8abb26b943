from datetime import datetime
from typing import Optional

from pydantic import BaseModel

MAX_MESSAGE_LENGTH = 2000


class ChatMessageCreate(BaseModel):
    message: str


class ChatMessageResponse(BaseModel):
    id: int
    appointment_id: int
    sender_id: int
    sender_name: Optional[str]
    message: str
    created_at: Optional[datetime] = None
    is_mine: bool = False
