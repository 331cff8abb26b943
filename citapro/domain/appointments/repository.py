"""Appointment repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment
from .state_machine import SLOT_HOLDING_STATUSES


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_booked_start_times(db: Session, professional_id: int, day: date) -> list[str]:
        """start_time of every appointment still holding a slot on ``day``"""
        rows = (
            db.query(Appointment.start_time)
            .filter(
                Appointment.professional_id == professional_id,
                Appointment.appointment_date == day,
                Appointment.status.in_(SLOT_HOLDING_STATUSES),
            )
            .all()
        )
        return [row.start_time for row in rows]

    @staticmethod
    def list_for_client(db: Session, client_id: int) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.client_id == client_id)
            .order_by(Appointment.appointment_date.desc(), Appointment.start_time.desc())
            .all()
        )

    @staticmethod
    def list_for_professional(
        db: Session, professional_id: int, since: Optional[date] = None
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.professional_id == professional_id)
        if since is not None:
            query = query.filter(Appointment.appointment_date >= since)
        return query.order_by(Appointment.appointment_date.desc(), Appointment.start_time.desc()).all()

    @staticmethod
    def list_for_professional_on(db: Session, professional_id: int, day: date) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.professional_id == professional_id, Appointment.appointment_date == day)
            .order_by(Appointment.start_time.asc())
            .all()
        )

    @staticmethod
    def dates_with_appointments(db: Session, professional_id: int) -> list[date]:
        rows = (
            db.query(Appointment.appointment_date)
            .filter(Appointment.professional_id == professional_id)
            .distinct()
            .order_by(Appointment.appointment_date.asc())
            .all()
        )
        return [row.appointment_date for row in rows]

    @staticmethod
    def create(db: Session, **data) -> Appointment:
        appointment = Appointment(**data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_status(db: Session, appointment: Appointment, status: str, **extra) -> Appointment:
        appointment.status = status
        for key, value in extra.items():
            setattr(appointment, key, value)
        db.commit()
        db.refresh(appointment)
        return appointment
