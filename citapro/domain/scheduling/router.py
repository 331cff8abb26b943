"""Scheduling router - weekly availability and bookable slots"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_professional
from ...database import get_db
from ...models import Professional, Profile
from ...schemas import MessageResponse
from .schemas import AvailabilityCreate, AvailabilityResponse, SlotsResponse
from .service import SchedulingService

router = APIRouter(prefix="/professionals", tags=["Scheduling"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


@router.post("/me/availabilities", response_model=AvailabilityResponse, status_code=201)
async def add_availability(
    data: AvailabilityCreate,
    professional: Professional = Depends(require_professional),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.add_availability(professional, data)


@router.delete("/me/availabilities/{availability_id}", response_model=MessageResponse)
async def remove_availability(
    availability_id: int,
    professional: Professional = Depends(require_professional),
    service: SchedulingService = Depends(get_scheduling_service),
):
    service.remove_availability(professional, availability_id)
    return MessageResponse(message="Disponibilidad eliminada")


@router.get("/{professional_id}/availabilities", response_model=list[AvailabilityResponse])
async def list_availabilities(
    professional_id: int,
    current_user: Profile = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.list_availabilities(professional_id)


@router.get("/{professional_id}/slots", response_model=SlotsResponse)
async def get_slots(
    professional_id: int,
    day: date = Query(..., alias="date"),
    current_user: Profile = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Bookable start times for one date (empty before tomorrow or on days without a window)"""
    return service.get_slots(professional_id, day)
