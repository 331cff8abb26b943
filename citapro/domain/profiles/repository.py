"""Profile repository - Database operations for profiles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Profile


class ProfileRepository:
    @staticmethod
    def get_by_id(db: Session, profile_id: int) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == profile_id).first()

    @staticmethod
    def update_profile(db: Session, profile: Profile, **updates) -> Profile:
        """Update a profile with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(profile, key):
                setattr(profile, key, value)

        db.commit()
        db.refresh(profile)
        return profile
