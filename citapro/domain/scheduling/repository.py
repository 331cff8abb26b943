"""Availability repository - Database operations for weekly availability windows"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import DAYS_OF_WEEK, Availability


class AvailabilityRepository:
    @staticmethod
    def list_active(db: Session, professional_id: int) -> list[Availability]:
        """Active windows ordered lunes..domingo, then by start time"""
        rows = (
            db.query(Availability)
            .filter(Availability.professional_id == professional_id, Availability.is_active.is_(True))
            .order_by(Availability.id.asc())
            .all()
        )
        return sorted(rows, key=lambda a: (DAYS_OF_WEEK.index(a.day_of_week), a.start_time))

    @staticmethod
    def get_by_id(db: Session, availability_id: int, professional_id: int) -> Optional[Availability]:
        return (
            db.query(Availability)
            .filter(Availability.id == availability_id, Availability.professional_id == professional_id)
            .first()
        )

    @staticmethod
    def create(db: Session, professional_id: int, **data) -> Availability:
        availability = Availability(professional_id=professional_id, is_active=True, **data)
        db.add(availability)
        db.commit()
        db.refresh(availability)
        return availability

    @staticmethod
    def deactivate(db: Session, availability: Availability) -> Availability:
        """Soft delete: the row stays for history, it just stops producing slots"""
        availability.is_active = False
        db.commit()
        db.refresh(availability)
        return availability
