"""Stats service - the professional's calendar view and dashboard figures"""

import logging
from datetime import date

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ROLE_PROFESSIONAL, Professional
from ...utils.clock import local_now
from ..appointments.repository import AppointmentRepository
from ..appointments.service import to_appointment_response
from ..appointments.state_machine import ACEPTADA, COMPLETADA, PENDIENTE_ACEPTACION
from ..scheduling.repository import AvailabilityRepository
from .aggregator import PERIODS, aggregate_stats, period_start
from .schemas import CalendarSummary, ProfessionalCalendarResponse, ProfessionalStatsResponse

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, db: Session):
        self.db = db
        self.appointments = AppointmentRepository()
        self.availabilities = AvailabilityRepository()

    def get_stats(self, professional: Professional, period: str) -> ProfessionalStatsResponse:
        if period not in PERIODS:
            raise HTTPException(status_code=400, detail=f"Periodo inválido. Usa uno de: {', '.join(PERIODS)}")

        since = period_start(period, local_now())
        appointments = self.appointments.list_for_professional(self.db, professional.id, since=since)
        availabilities = self.availabilities.list_active(self.db, professional.id)

        logger.info(
            f"📊 Stats for professional {professional.id}: period={period}, {len(appointments)} appointments"
        )
        return ProfessionalStatsResponse(since=since, **aggregate_stats(appointments, availabilities, period))

    def get_calendar(self, professional: Professional, day: date) -> ProfessionalCalendarResponse:
        on_day = self.appointments.list_for_professional_on(self.db, professional.id, day)
        everything = self.appointments.list_for_professional(self.db, professional.id)

        return ProfessionalCalendarResponse(
            day=day,
            appointments=[to_appointment_response(a, ROLE_PROFESSIONAL) for a in on_day],
            dates_with_appointments=self.appointments.dates_with_appointments(self.db, professional.id),
            summary=CalendarSummary(
                total=len(everything),
                aceptadas=sum(1 for a in everything if a.status == ACEPTADA),
                pendientes=sum(1 for a in everything if a.status == PENDIENTE_ACEPTACION),
                completadas=sum(1 for a in everything if a.status == COMPLETADA),
            ),
        )
