"""Professional service - directory listing and the professional's own card"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ROLE_PROFESSIONAL, Professional, Profile
from .repository import ProfessionalRepository
from .schemas import ProfessionalResponse, ProfessionalUpsert

logger = logging.getLogger(__name__)


def to_professional_response(professional: Professional) -> ProfessionalResponse:
    user = professional.user
    return ProfessionalResponse(
        id=professional.id,
        user_id=professional.user_id,
        full_name=user.full_name if user else None,
        email=user.email if user else None,
        avatar_url=user.avatar_url if user else None,
        profession=professional.profession,
        bio=professional.bio,
        price_per_hour=professional.price_per_hour,
        is_active=professional.is_active,
    )


class ProfessionalService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfessionalRepository()

    def list_professionals(self, search: Optional[str] = None) -> list[Professional]:
        return self.repo.list_active(self.db, search)

    def get_professional(self, professional_id: int) -> Professional:
        professional = self.repo.get_by_id(self.db, professional_id)
        if not professional or not professional.is_active:
            raise HTTPException(status_code=404, detail="Profesional no encontrado")
        return professional

    def get_own(self, user: Profile) -> Professional:
        professional = self.repo.get_by_user_id(self.db, user.id)
        if not professional:
            raise HTTPException(status_code=404, detail="Aún no tienes un perfil de profesional")
        return professional

    def upsert_own(self, user: Profile, data: ProfessionalUpsert) -> Professional:
        """Create the caller's professional card, or update the existing one"""
        professional = self.repo.get_by_user_id(self.db, user.id)
        fields = {"profession": data.profession, "bio": data.bio, "price_per_hour": data.price_per_hour}

        if professional:
            logger.info(f"📝 Updating professional {professional.id} for profile {user.id}")
            return self.repo.update(self.db, professional, **fields)

        logger.info(f"🆕 Creating professional card for profile {user.id}")
        professional = self.repo.create(self.db, user.id, is_active=True, **fields)
        if user.role != ROLE_PROFESSIONAL:
            user.role = ROLE_PROFESSIONAL
            self.db.commit()
        return professional
