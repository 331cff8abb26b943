"""Appointment service - listing and status transitions after booking"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ROLE_CLIENT, ROLE_PROFESSIONAL, Appointment, Profile
from ...schemas import PersonSummary
from ...services import google_calendar_service
from ...shared.validators import parse_hhmm
from ...utils.clock import local_now
from ...utils.sanitization import validate_and_sanitize_input
from ..notifications import messages
from ..notifications.service import NotificationService
from ..professionals.repository import ProfessionalRepository
from .repository import AppointmentRepository
from .schemas import AcceptResponse, AppointmentResponse, MyAppointmentsResponse, ProfessionalSummary
from .state_machine import STATUS_LABELS, InvalidTransition, available_actions, next_status

logger = logging.getLogger(__name__)

MAX_REASON_LENGTH = 500

ACTION_LABELS = {
    "pay": "pagar",
    "accept": "aceptar",
    "reject": "rechazar",
    "complete": "completar",
    "cancel": "cancelar",
}


def to_appointment_response(appointment: Appointment, role: Optional[str] = None) -> AppointmentResponse:
    professional = appointment.professional
    return AppointmentResponse(
        id=appointment.id,
        appointment_date=appointment.appointment_date,
        start_time=appointment.start_time[:5],
        end_time=appointment.end_time[:5],
        status=appointment.status,
        status_label=STATUS_LABELS.get(appointment.status, appointment.status),
        cancellation_reason=appointment.cancellation_reason,
        google_event_id=appointment.google_event_id,
        created_at=appointment.created_at,
        client=PersonSummary.model_validate(appointment.client),
        professional=ProfessionalSummary(
            id=professional.id,
            full_name=professional.user.full_name,
            email=professional.user.email,
            profession=professional.profession,
            price_per_hour=professional.price_per_hour,
        ),
        available_actions=available_actions(appointment.status, role) if role else [],
    )


def starts_at(appointment: Appointment) -> datetime:
    return datetime.combine(appointment.appointment_date, parse_hhmm(appointment.start_time))


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.professionals = ProfessionalRepository()
        self.notifications = NotificationService(db)

    def role_of(self, appointment: Appointment, user: Profile) -> Optional[str]:
        """The caller's side of the appointment, None for outsiders"""
        if appointment.client_id == user.id:
            return ROLE_CLIENT
        if appointment.professional.user_id == user.id:
            return ROLE_PROFESSIONAL
        return None

    def get_for_participant(self, appointment_id: int, user: Profile) -> tuple[Appointment, str]:
        appointment = self.repo.get_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Cita no encontrada")
        role = self.role_of(appointment, user)
        if role is None:
            raise HTTPException(status_code=403, detail="No tienes acceso a esta cita")
        return appointment, role

    def list_mine(self, user: Profile) -> MyAppointmentsResponse:
        as_client = self.repo.list_for_client(self.db, user.id)
        professional = self.professionals.get_by_user_id(self.db, user.id)
        as_professional = (
            self.repo.list_for_professional(self.db, professional.id) if professional else []
        )
        return MyAppointmentsResponse(
            as_client=[to_appointment_response(a, ROLE_CLIENT) for a in as_client],
            as_professional=[to_appointment_response(a, ROLE_PROFESSIONAL) for a in as_professional],
        )

    def _transition(self, appointment: Appointment, action: str, role: str, **extra) -> Appointment:
        try:
            status = next_status(appointment.status, action, role)
        except InvalidTransition as e:
            logger.warning(f"⚠️ Rejected transition on appointment {appointment.id}: {e}")
            raise HTTPException(
                status_code=409,
                detail=f"No se puede {ACTION_LABELS[action]} una cita en estado {appointment.status}",
            ) from e

        logger.info(f"🔄 Appointment {appointment.id}: {appointment.status} -> {status} ({action})")
        return self.repo.update_status(self.db, appointment, status, **extra)

    def _as_owner(self, appointment_id: int, user: Profile, role: str) -> Appointment:
        appointment, caller_role = self.get_for_participant(appointment_id, user)
        if caller_role != role:
            who = "el profesional" if role == ROLE_PROFESSIONAL else "el cliente"
            raise HTTPException(status_code=403, detail=f"Solo {who} puede realizar esta acción")
        return appointment

    async def accept(self, appointment_id: int, user: Profile) -> AcceptResponse:
        appointment = self._as_owner(appointment_id, user, ROLE_PROFESSIONAL)
        appointment = self._transition(appointment, "accept", ROLE_PROFESSIONAL)

        title, message = messages.appointment_accepted(appointment.appointment_date, appointment.start_time)
        self.notifications.notify(appointment.client_id, "cita_aceptada", title, message, appointment.id)

        # Calendar failures never undo the acceptance
        result = await google_calendar_service.sync_appointment(self.db, appointment)
        if not result["success"]:
            logger.warning(f"⚠️ Calendar sync failed for appointment {appointment.id}: {result['error']}")
        self.db.refresh(appointment)

        return AcceptResponse(
            appointment=to_appointment_response(appointment, ROLE_PROFESSIONAL),
            calendar_synced=result["success"],
            event_link=result.get("eventLink"),
            warning=None
            if result["success"]
            else "Cita aceptada, pero no se pudo agregar a Google Calendar",
        )

    def reject(self, appointment_id: int, user: Profile) -> Appointment:
        appointment = self._as_owner(appointment_id, user, ROLE_PROFESSIONAL)
        appointment = self._transition(appointment, "reject", ROLE_PROFESSIONAL)

        title, message = messages.appointment_rejected(appointment.appointment_date)
        self.notifications.notify(appointment.client_id, "cita_rechazada", title, message, appointment.id)
        return appointment

    def complete(self, appointment_id: int, user: Profile) -> Appointment:
        appointment = self._as_owner(appointment_id, user, ROLE_PROFESSIONAL)
        if starts_at(appointment) > local_now():
            raise HTTPException(
                status_code=400, detail="Solo puedes marcar como completada una cita que ya ocurrió"
            )
        appointment = self._transition(appointment, "complete", ROLE_PROFESSIONAL)

        title, message = messages.appointment_completed()
        self.notifications.notify(appointment.client_id, "cita_completada", title, message, appointment.id)
        return appointment

    def cancel(self, appointment_id: int, user: Profile, reason: Optional[str]) -> Appointment:
        # Reason is checked before anything is read or written
        if not reason or not reason.strip():
            raise HTTPException(status_code=400, detail="Debes proporcionar un motivo de cancelación")
        try:
            reason = validate_and_sanitize_input(reason, max_length=MAX_REASON_LENGTH)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        appointment = self._as_owner(appointment_id, user, ROLE_CLIENT)
        appointment = self._transition(
            appointment, "cancel", ROLE_CLIENT, cancellation_reason=reason
        )

        title, message = messages.appointment_cancelled(appointment.appointment_date, reason)
        self.notifications.notify(
            appointment.professional.user_id, "cita_cancelada", title, message, appointment.id
        )
        return appointment
