"""
Checkout service

Books a slot and records the (simulated) card payment. Each step commits on
its own; a failure part way through leaves the earlier rows in place, e.g. an
appointment stuck in pendiente_pago without a payment.
"""

import logging
import secrets
import time

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import DEFAULT_APPOINTMENT_MINUTES
from ...models import ROLE_CLIENT, Payment, Profile
from ...shared.validators import add_minutes
from ..appointments.repository import AppointmentRepository
from ..appointments.service import AppointmentService, to_appointment_response
from ..appointments.state_machine import PENDIENTE_PAGO, next_status
from ..notifications import messages
from ..notifications.service import NotificationService
from ..professionals.repository import ProfessionalRepository
from ..scheduling.service import SchedulingService
from .repository import PaymentRepository
from .schemas import CheckoutRequest, CheckoutResponse, PaymentResponse

logger = logging.getLogger(__name__)


def generate_payment_reference() -> str:
    """PAY-<epoch ms>-<random>"""
    return f"PAY-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9].upper()}"


class CheckoutService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()
        self.appointments = AppointmentRepository()
        self.professionals = ProfessionalRepository()
        self.scheduling = SchedulingService(db)
        self.notifications = NotificationService(db)

    def checkout(self, user: Profile, data: CheckoutRequest) -> CheckoutResponse:
        professional = self.professionals.get_by_id(self.db, data.professional_id)
        if not professional or not professional.is_active:
            raise HTTPException(status_code=404, detail="Profesional no encontrado")
        if professional.user_id == user.id:
            raise HTTPException(status_code=400, detail="No puedes reservar una cita contigo mismo")

        # Slots are recomputed here; the list the client saw may be stale
        if data.start_time not in self.scheduling.available_slots(professional.id, data.appointment_date):
            logger.warning(
                f"⚠️ Slot {data.appointment_date} {data.start_time} no longer offered by professional {professional.id}"
            )
            raise HTTPException(status_code=409, detail="El horario seleccionado ya no está disponible")

        logger.info(
            f"📥 Booking professional {professional.id} on {data.appointment_date} {data.start_time} for profile {user.id}"
        )
        try:
            appointment = self.appointments.create(
                self.db,
                client_id=user.id,
                professional_id=professional.id,
                appointment_date=data.appointment_date,
                start_time=data.start_time,
                end_time=add_minutes(data.start_time, DEFAULT_APPOINTMENT_MINUTES),
                status=PENDIENTE_PAGO,
            )
        except IntegrityError as e:
            # A concurrent checkout took the slot after the check above
            self.db.rollback()
            logger.warning(
                f"⚠️ Slot {data.appointment_date} {data.start_time} taken concurrently for professional {professional.id}"
            )
            raise HTTPException(status_code=409, detail="El horario seleccionado ya no está disponible") from e

        try:
            payment = self.repo.create(
                self.db,
                appointment_id=appointment.id,
                amount=professional.price_per_hour,
                payment_reference=generate_payment_reference(),
            )
            appointment = self.appointments.update_status(
                self.db, appointment, next_status(appointment.status, "pay", ROLE_CLIENT)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Payment failed for appointment {appointment.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Error al procesar el pago") from e

        logger.info(f"💳 Payment {payment.payment_reference} recorded for appointment {appointment.id}")

        title, message = messages.new_booking_for_professional(appointment.appointment_date, appointment.start_time)
        self.notifications.notify(professional.user_id, "pago_realizado", title, message, appointment.id)
        title, message = messages.payment_done_for_client()
        self.notifications.notify(user.id, "pago_realizado", title, message, appointment.id)

        return CheckoutResponse(
            appointment=to_appointment_response(appointment, ROLE_CLIENT),
            payment=PaymentResponse.model_validate(payment),
            message="Pago procesado. El profesional revisará tu solicitud pronto.",
        )

    def get_payment(self, user: Profile, appointment_id: int) -> Payment:
        appointment, _ = AppointmentService(self.db).get_for_participant(appointment_id, user)
        payment = self.repo.get_for_appointment(self.db, appointment.id)
        if not payment:
            raise HTTPException(status_code=404, detail="Pago no encontrado")
        return payment
