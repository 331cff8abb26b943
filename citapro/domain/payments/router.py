"""Payment router - checkout and payment lookup"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ...rate_limiter import create_rate_limiter
from .schemas import CheckoutRequest, CheckoutResponse, PaymentResponse
from .service import CheckoutService

router = APIRouter(tags=["Payments"])

rate_limit_checkout = create_rate_limiter(limit=10, window_seconds=60, key_prefix="checkout")


def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    """Dependency injection for CheckoutService"""
    return CheckoutService(db)


@router.post("/appointments/checkout", response_model=CheckoutResponse, status_code=201)
async def checkout(
    data: CheckoutRequest,
    current_user: Profile = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
    _: None = Depends(rate_limit_checkout),
):
    """Book a slot and pay for it in one step (card payment is simulated)"""
    return service.checkout(current_user, data)


@router.get("/payments/appointment/{appointment_id}", response_model=PaymentResponse)
async def get_payment_for_appointment(
    appointment_id: int,
    current_user: Profile = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    return service.get_payment(current_user, appointment_id)
