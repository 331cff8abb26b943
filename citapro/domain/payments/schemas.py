"""Payment schemas - the simulated card checkout"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import (
    validate_card_expiry,
    validate_card_number,
    validate_cvv,
    validate_hhmm,
)
from ..appointments.schemas import AppointmentResponse


class CheckoutRequest(BaseModel):
    professional_id: int
    appointment_date: date
    start_time: str
    card_number: str
    card_expiry: str
    card_cvv: str
    cardholder_name: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v):
        return validate_hhmm(v)

    @field_validator("card_number")
    @classmethod
    def validate_number(cls, v):
        return validate_card_number(v)

    @field_validator("card_expiry")
    @classmethod
    def validate_expiry(cls, v):
        return validate_card_expiry(v)

    @field_validator("card_cvv")
    @classmethod
    def validate_card_cvv(cls, v):
        return validate_cvv(v)


class PaymentResponse(BaseModel):
    id: int
    appointment_id: int
    amount: float
    payment_reference: str
    payment_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class CheckoutResponse(BaseModel):
    appointment: AppointmentResponse
    payment: PaymentResponse
    message: str
