"""Professional domain schemas"""

from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_BIO = "Completa tu perfil para empezar a recibir citas"
PLACEHOLDER_PROFESSION = "Por definir"


class ProfessionalUpsert(BaseModel):
    """Schema for creating or updating the caller's professional card"""

    profession: str
    bio: Optional[str] = None
    price_per_hour: float

    @field_validator("profession")
    @classmethod
    def validate_profession(cls, v):
        v = (v or "").strip()
        if not v or v == PLACEHOLDER_PROFESSION:
            raise ValueError("La profesión es obligatoria")
        return v

    @field_validator("price_per_hour")
    @classmethod
    def validate_price(cls, v):
        if v is None or v <= 0:
            raise ValueError("El precio por hora debe ser mayor a 0")
        return v

    @field_validator("bio")
    @classmethod
    def default_bio(cls, v):
        if v is None or not v.strip():
            return DEFAULT_BIO
        return v.strip()


class ProfessionalResponse(BaseModel):
    id: int
    user_id: int
    full_name: Optional[str]
    email: Optional[str]
    avatar_url: Optional[str] = None
    profession: str
    bio: Optional[str]
    price_per_hour: float
    is_active: bool
