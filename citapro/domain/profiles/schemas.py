"""Profile schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import USER_ROLES


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("El nombre no puede estar vacío")
        return v.strip() if v else v


class ProfileRegister(BaseModel):
    """Sign-up metadata sent right after the Firebase account is created"""

    full_name: str
    role: str = "cliente"

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if not v or not v.strip():
            raise ValueError("El nombre es obligatorio")
        return v.strip()

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in USER_ROLES:
            raise ValueError(f"Rol inválido. Usa uno de: {', '.join(USER_ROLES)}")
        return v


class ProfileResponse(BaseModel):
    id: int
    firebase_uid: str
    full_name: Optional[str]
    email: str
    role: str
    avatar_url: Optional[str] = None
    is_professional: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
