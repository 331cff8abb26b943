"""Professional repository - Database operations for professionals"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Professional, Profile


class ProfessionalRepository:
    """Repository for professional database operations"""

    @staticmethod
    def list_active(db: Session, search: Optional[str] = None) -> list[Professional]:
        """Active professionals, optionally filtered by name or profession"""
        query = (
            db.query(Professional)
            .join(Profile, Professional.user_id == Profile.id)
            .filter(Professional.is_active.is_(True))
        )
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(Profile.full_name.ilike(pattern), Professional.profession.ilike(pattern))
            )
        return query.order_by(Profile.full_name.asc()).all()

    @staticmethod
    def get_by_id(db: Session, professional_id: int) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.id == professional_id).first()

    @staticmethod
    def get_by_user_id(db: Session, user_id: int) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.user_id == user_id).first()

    @staticmethod
    def create(db: Session, user_id: int, **data) -> Professional:
        professional = Professional(user_id=user_id, **data)
        db.add(professional)
        db.commit()
        db.refresh(professional)
        return professional

    @staticmethod
    def update(db: Session, professional: Professional, **updates) -> Professional:
        for key, value in updates.items():
            if value is not None and hasattr(professional, key):
                setattr(professional, key, value)

        db.commit()
        db.refresh(professional)
        return professional
