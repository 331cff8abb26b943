"""Appointment router - the caller's appointments and their status transitions"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import ROLE_CLIENT, ROLE_PROFESSIONAL, Profile
from .schemas import AcceptResponse, AppointmentResponse, CancelRequest, MyAppointmentsResponse
from .service import AppointmentService, to_appointment_response

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("/mine", response_model=MyAppointmentsResponse)
async def list_my_appointments(
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments booked by the caller and, for professionals, booked with them"""
    return service.list_mine(current_user)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment, role = service.get_for_participant(appointment_id, current_user)
    return to_appointment_response(appointment, role)


@router.post("/{appointment_id}/accept", response_model=AcceptResponse)
async def accept_appointment(
    appointment_id: int,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Accept a pending appointment and push it to Google Calendar"""
    return await service.accept(appointment_id, current_user)


@router.post("/{appointment_id}/reject", response_model=AppointmentResponse)
async def reject_appointment(
    appointment_id: int,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_appointment_response(service.reject(appointment_id, current_user), ROLE_PROFESSIONAL)


@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: int,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_appointment_response(service.complete(appointment_id, current_user), ROLE_PROFESSIONAL)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    data: CancelRequest,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Client-side cancellation; a reason is mandatory"""
    return to_appointment_response(
        service.cancel(appointment_id, current_user, data.reason), ROLE_CLIENT
    )
