from typing import Optional

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class PersonSummary(BaseModel):
    """Name/email pair embedded in appointment, chat and professional payloads"""

    id: int
    full_name: Optional[str]
    email: str

    class Config:
        from_attributes = True
