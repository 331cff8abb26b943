"""Scheduling service - availability windows and the slots they produce"""

import logging
from datetime import date

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import MIN_BOOKING_LEAD_HOURS
from ...models import Availability, Professional
from ...utils.clock import local_now
from ..appointments.repository import AppointmentRepository
from ..professionals.repository import ProfessionalRepository
from .repository import AvailabilityRepository
from .schemas import AvailabilityCreate, SlotsResponse
from .slots import find_availability, generate_slots, weekday_name

logger = logging.getLogger(__name__)


class SchedulingService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()
        self.professionals = ProfessionalRepository()
        self.appointments = AppointmentRepository()

    def _get_active_professional(self, professional_id: int) -> Professional:
        professional = self.professionals.get_by_id(self.db, professional_id)
        if not professional or not professional.is_active:
            raise HTTPException(status_code=404, detail="Profesional no encontrado")
        return professional

    def list_availabilities(self, professional_id: int) -> list[Availability]:
        self._get_active_professional(professional_id)
        return self.repo.list_active(self.db, professional_id)

    def add_availability(self, professional: Professional, data: AvailabilityCreate) -> Availability:
        logger.info(
            f"📅 Professional {professional.id} adding {data.day_of_week} "
            f"{data.start_time}-{data.end_time} / {data.slot_duration_minutes}min"
        )
        return self.repo.create(self.db, professional.id, **data.model_dump())

    def remove_availability(self, professional: Professional, availability_id: int) -> Availability:
        availability = self.repo.get_by_id(self.db, availability_id, professional.id)
        if not availability:
            raise HTTPException(status_code=404, detail="Disponibilidad no encontrada")
        logger.info(f"🗑️ Deactivating availability {availability_id} of professional {professional.id}")
        return self.repo.deactivate(self.db, availability)

    def available_slots(self, professional_id: int, day: date) -> list[str]:
        """Slots currently bookable with ``professional_id`` on ``day``, computed fresh"""
        availabilities = self.repo.list_active(self.db, professional_id)
        booked = self.appointments.get_booked_start_times(self.db, professional_id, day)
        return generate_slots(day, availabilities, booked, local_now(), MIN_BOOKING_LEAD_HOURS)

    def get_slots(self, professional_id: int, day: date) -> SlotsResponse:
        self._get_active_professional(professional_id)
        availability = find_availability(day, self.repo.list_active(self.db, professional_id))
        return SlotsResponse(
            professional_id=professional_id,
            day=day,
            day_of_week=weekday_name(day),
            slots=self.available_slots(professional_id, day),
            slot_duration_minutes=availability.slot_duration_minutes if availability else None,
        )
