"""Stats router - professional calendar and dashboard"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_professional
from ...database import get_db
from ...models import Professional
from ...utils.clock import local_now
from .schemas import ProfessionalCalendarResponse, ProfessionalStatsResponse
from .service import StatsService

router = APIRouter(prefix="/professionals/me", tags=["Professional dashboard"])


def get_stats_service(db: Session = Depends(get_db)) -> StatsService:
    """Dependency injection for StatsService"""
    return StatsService(db)


@router.get("/calendar", response_model=ProfessionalCalendarResponse)
async def get_calendar(
    day: Optional[date] = Query(None, alias="date"),
    professional: Professional = Depends(require_professional),
    service: StatsService = Depends(get_stats_service),
):
    """Appointments on one day (today by default) plus the dates that have any"""
    return service.get_calendar(professional, day or local_now().date())


@router.get("/stats", response_model=ProfessionalStatsResponse)
async def get_stats(
    period: str = Query("month"),
    professional: Professional = Depends(require_professional),
    service: StatsService = Depends(get_stats_service),
):
    return service.get_stats(professional, period)
