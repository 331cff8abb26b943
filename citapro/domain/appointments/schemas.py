"""Appointment domain schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from ...schemas import PersonSummary


class ProfessionalSummary(BaseModel):
    id: int
    full_name: Optional[str]
    email: Optional[str]
    profession: str
    price_per_hour: float


class AppointmentResponse(BaseModel):
    id: int
    appointment_date: date
    start_time: str
    end_time: str
    status: str
    status_label: str = ""
    cancellation_reason: Optional[str] = None
    google_event_id: Optional[str] = None
    created_at: Optional[datetime] = None
    client: PersonSummary
    professional: ProfessionalSummary
    # Buttons the caller may press, from the status transition table
    available_actions: list[str] = []


class MyAppointmentsResponse(BaseModel):
    as_client: list[AppointmentResponse]
    as_professional: list[AppointmentResponse]


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class AcceptResponse(BaseModel):
    appointment: AppointmentResponse
    calendar_synced: bool
    event_link: Optional[str] = None
    warning: Optional[str] = None
