"""Profile service - Business logic for the caller's own profile"""

import logging

from sqlalchemy.orm import Session

from ...models import Profile
from .repository import ProfileRepository
from .schemas import ProfileRegister, ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def to_response(self, profile: Profile) -> ProfileResponse:
        response = ProfileResponse.model_validate(profile)
        response.is_professional = profile.professional is not None
        return response

    def update_profile(self, profile: Profile, data: ProfileUpdate) -> Profile:
        updates = data.model_dump(exclude_unset=True)
        logger.info(f"📝 Updating profile {profile.id}: {list(updates.keys())}")
        return self.repo.update_profile(self.db, profile, **updates)

    def register(self, profile: Profile, data: ProfileRegister) -> Profile:
        """Apply sign-up metadata (display name and role) to a fresh profile"""
        logger.info(f"🆕 Registering profile {profile.id} as {data.role}")
        return self.repo.update_profile(self.db, profile, full_name=data.full_name, role=data.role)
