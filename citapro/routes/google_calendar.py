"""
Google Calendar Integration Routes
Event creation for accepted appointments, plus per-professional OAuth connection
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import urlencode

import httpx
from cryptography.fernet import InvalidToken
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_professional
from ..config import GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REDIRECT_URI
from ..database import get_db
from ..models import Appointment, Professional, Profile
from ..models_google_calendar import GoogleCalendarIntegration
from ..services import google_calendar_service
from ..services.google_calendar_service import CalendarEventRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/google-calendar", tags=["google-calendar"])
events_router = APIRouter(prefix="/calendar", tags=["google-calendar"])

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/userinfo.email",
]


class OAuthCallback(BaseModel):
    code: str


class CalendarStatusResponse(BaseModel):
    connected: bool
    user_email: Optional[str] = None
    calendar_id: Optional[str] = None
    auto_sync_enabled: Optional[bool] = None
    last_synced_at: Optional[datetime] = None


@events_router.post("/events")
async def create_calendar_event(
    data: CalendarEventRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create the Google Calendar event for an appointment the caller takes part in"""
    appointment = db.query(Appointment).filter(Appointment.id == data.appointmentId).first()
    if not appointment:
        raise HTTPException(status_code=404, detail="Cita no encontrada")
    if current_user.id not in (appointment.client_id, appointment.professional.user_id):
        raise HTTPException(status_code=403, detail="No tienes acceso a esta cita")

    result = await google_calendar_service.create_appointment_event(db, data)
    if not result["success"]:
        return JSONResponse(status_code=500, content=result)
    return result


@router.get("/status", response_model=CalendarStatusResponse)
async def get_google_calendar_status(
    professional: Professional = Depends(require_professional), db: Session = Depends(get_db)
):
    """Get Google Calendar connection status"""
    integration = google_calendar_service.find_integration(db, professional.user_id)
    if not integration:
        return CalendarStatusResponse(connected=False)

    return CalendarStatusResponse(
        connected=True,
        user_email=integration.google_user_email,
        calendar_id=integration.google_calendar_id,
        auto_sync_enabled=integration.auto_sync_enabled,
        last_synced_at=integration.last_synced_at,
    )


@router.get("/connect")
async def initiate_google_calendar_oauth(professional: Professional = Depends(require_professional)):
    """Initiate Google Calendar OAuth flow"""
    if not GOOGLE_CLIENT_ID or not GOOGLE_CLIENT_SECRET:
        raise HTTPException(status_code=500, detail="Google Calendar not configured")

    params = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": " ".join(GOOGLE_CALENDAR_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
        "state": professional.user.firebase_uid,
    }

    logger.info(f"Google Calendar OAuth initiated for professional: {professional.id}")

    return {"authorization_url": f"{GOOGLE_AUTH_URL}?{urlencode(params)}"}


@router.post("/callback")
async def handle_google_calendar_callback(
    body: OAuthCallback,
    professional: Professional = Depends(require_professional),
    db: Session = Depends(get_db),
):
    """Exchange the authorization code and store the encrypted tokens"""
    if not body.code:
        raise HTTPException(status_code=400, detail="No authorization code provided")

    try:
        async with google_calendar_service.http_client() as client:
            token_response = await client.post(
                google_calendar_service.GOOGLE_TOKEN_URL,
                data={
                    "code": body.code,
                    "client_id": GOOGLE_CLIENT_ID,
                    "client_secret": GOOGLE_CLIENT_SECRET,
                    "redirect_uri": GOOGLE_REDIRECT_URI,
                    "grant_type": "authorization_code",
                },
            )

            if token_response.status_code != 200:
                logger.error(f"Token exchange failed: {token_response.text}")
                raise HTTPException(status_code=400, detail="Failed to exchange authorization code")

            tokens = token_response.json()
            access_token = tokens.get("access_token")
            refresh_token = tokens.get("refresh_token")
            expires_in = tokens.get("expires_in", 3600)

            if not access_token or not refresh_token:
                raise HTTPException(status_code=400, detail="Invalid token response")

            user_info_response = await client.get(
                GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
            )
            google_email = (
                user_info_response.json().get("email") if user_info_response.status_code == 200 else None
            )
    except httpx.HTTPError as e:
        logger.error(f"❌ Google Calendar callback error: {str(e)}")
        raise HTTPException(status_code=502, detail="Google no respondió, intenta de nuevo") from e

    token_expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
    integration = google_calendar_service.find_integration(db, professional.user_id)

    if integration:
        integration.access_token = google_calendar_service.encrypt_token(access_token)
        integration.refresh_token = google_calendar_service.encrypt_token(refresh_token)
        integration.token_expires_at = token_expires_at
        integration.google_user_email = google_email
    else:
        integration = GoogleCalendarIntegration(
            user_id=professional.user_id,
            access_token=google_calendar_service.encrypt_token(access_token),
            refresh_token=google_calendar_service.encrypt_token(refresh_token),
            token_expires_at=token_expires_at,
            google_user_email=google_email,
            google_calendar_id="primary",
            auto_sync_enabled=True,
        )
        db.add(integration)

    db.commit()

    logger.info(f"✅ Google Calendar connected for professional: {professional.id}")

    return {
        "success": True,
        "message": "Google Calendar connected successfully",
        "user_email": google_email,
    }


@router.post("/disconnect")
async def disconnect_google_calendar(
    professional: Professional = Depends(require_professional), db: Session = Depends(get_db)
):
    """Disconnect Google Calendar integration"""
    integration = google_calendar_service.find_integration(db, professional.user_id)

    if not integration:
        raise HTTPException(status_code=404, detail="Google Calendar not connected")

    try:
        await google_calendar_service.revoke_token(
            google_calendar_service.decrypt_token(integration.refresh_token)
        )
    except InvalidToken as e:
        logger.warning(f"Failed to revoke Google tokens: {str(e)}")

    db.delete(integration)
    db.commit()

    logger.info(f"✅ Google Calendar disconnected for professional: {professional.id}")

    return {"success": True, "message": "Google Calendar disconnected"}
