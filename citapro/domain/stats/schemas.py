from datetime import date

from pydantic import BaseModel

from ..appointments.schemas import AppointmentResponse


class DayCount(BaseModel):
    day: str
    count: int


class HourCount(BaseModel):
    hour: str
    count: int


class ProfessionalStatsResponse(BaseModel):
    period: str
    since: date
    total: int
    aceptadas: int
    canceladas: int
    rechazadas: int
    completadas: int
    pendientes: int
    status_counts: dict[str, int]
    status_percentages: dict[str, float]
    client_cancellation_rate: float
    professional_cancellation_rate: float
    hours_available: float
    hours_booked: float
    occupancy_rate: float
    average_attended_per_day: float
    top_days: list[DayCount]
    top_hours: list[HourCount]


class CalendarSummary(BaseModel):
    total: int
    aceptadas: int
    pendientes: int
    completadas: int


class ProfessionalCalendarResponse(BaseModel):
    day: date
    appointments: list[AppointmentResponse]
    dates_with_appointments: list[date]
    summary: CalendarSummary
