"""Profile router - the signed-in user's own profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from .schemas import ProfileRegister, ProfileResponse, ProfileUpdate
from .service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: Profile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    return service.to_response(current_user)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    data: ProfileUpdate,
    current_user: Profile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    return service.to_response(service.update_profile(current_user, data))


@router.post("/register", response_model=ProfileResponse)
async def register_profile(
    data: ProfileRegister,
    current_user: Profile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Store the name and role chosen on the sign-up form"""
    return service.to_response(service.register(current_user, data))
