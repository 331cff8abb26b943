"""Scheduling schemas - availability windows and bookable slots"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...models import DAYS_OF_WEEK
from ...shared.validators import minutes_between, validate_hhmm

MIN_SLOT_MINUTES = 15
MAX_SLOT_MINUTES = 240


class AvailabilityCreate(BaseModel):
    day_of_week: str
    start_time: str
    end_time: str
    slot_duration_minutes: int = 60

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, v):
        v = (v or "").strip().lower()
        if v not in DAYS_OF_WEEK:
            raise ValueError(f"Día inválido. Usa uno de: {', '.join(DAYS_OF_WEEK)}")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v)

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_slot(cls, v):
        if not MIN_SLOT_MINUTES <= v <= MAX_SLOT_MINUTES:
            raise ValueError(
                f"La duración debe estar entre {MIN_SLOT_MINUTES} y {MAX_SLOT_MINUTES} minutos"
            )
        return v

    @model_validator(mode="after")
    def check_window(self):
        if minutes_between(self.start_time, self.end_time) <= 0:
            raise ValueError("La hora de inicio debe ser anterior a la hora de fin")
        return self


class AvailabilityResponse(BaseModel):
    id: int
    professional_id: int
    day_of_week: str
    start_time: str
    end_time: str
    slot_duration_minutes: int
    is_active: bool

    class Config:
        from_attributes = True


class SlotsResponse(BaseModel):
    professional_id: int
    day: date
    day_of_week: str
    slots: list[str]
    slot_duration_minutes: Optional[int] = None
