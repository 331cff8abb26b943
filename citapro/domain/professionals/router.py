"""Professional router - public directory plus the caller's own card"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from .schemas import ProfessionalResponse, ProfessionalUpsert
from .service import ProfessionalService, to_professional_response

router = APIRouter(prefix="/professionals", tags=["Professionals"])


def get_professional_service(db: Session = Depends(get_db)) -> ProfessionalService:
    """Dependency injection for ProfessionalService"""
    return ProfessionalService(db)


@router.get("", response_model=list[ProfessionalResponse])
async def list_professionals(
    search: Optional[str] = Query(None, max_length=100),
    current_user: Profile = Depends(get_current_user),
    service: ProfessionalService = Depends(get_professional_service),
):
    """Active professionals, searchable by name or profession"""
    return [to_professional_response(p) for p in service.list_professionals(search)]


# /me routes are declared before /{professional_id} so "me" is never parsed as an id
@router.get("/me", response_model=ProfessionalResponse)
async def get_my_professional(
    current_user: Profile = Depends(get_current_user),
    service: ProfessionalService = Depends(get_professional_service),
):
    return to_professional_response(service.get_own(current_user))


@router.put("/me", response_model=ProfessionalResponse)
async def upsert_my_professional(
    data: ProfessionalUpsert,
    current_user: Profile = Depends(get_current_user),
    service: ProfessionalService = Depends(get_professional_service),
):
    return to_professional_response(service.upsert_own(current_user, data))


@router.get("/{professional_id}", response_model=ProfessionalResponse)
async def get_professional(
    professional_id: int,
    current_user: Profile = Depends(get_current_user),
    service: ProfessionalService = Depends(get_professional_service),
):
    return to_professional_response(service.get_professional(professional_id))
