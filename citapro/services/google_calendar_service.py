"""
Google Calendar Service
Creates the calendar event for an accepted appointment and records its id
"""

import base64
import hashlib
import logging
from datetime import date, datetime, timedelta
from typing import Optional

import httpx
from cryptography.fernet import Fernet, InvalidToken
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import (
    GOOGLE_CALENDAR_TIMEZONE,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_REFRESH_TOKEN,
    SECRET_KEY,
)
from ..models import Appointment
from ..models_google_calendar import GoogleCalendarIntegration
from ..shared.validators import parse_hhmm, validate_hhmm

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105 - OAuth endpoint URL
GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"

EVENT_DURATION = timedelta(hours=1)
EVENT_DESCRIPTION = "Cita programada a través de la plataforma"
EVENT_REMINDERS = {
    "useDefault": False,
    "overrides": [
        {"method": "email", "minutes": 24 * 60},
        {"method": "popup", "minutes": 60},
    ],
}


class CalendarSyncError(Exception):
    pass


class CalendarEventRequest(BaseModel):
    appointmentId: int
    professionalEmail: str
    clientEmail: str
    appointmentDate: date
    appointmentTime: str
    professionalName: str
    clientName: str

    @field_validator("appointmentTime")
    @classmethod
    def validate_appointment_time(cls, v):
        return validate_hhmm(v)


def _cipher() -> Fernet:
    # Fernet needs 32 url-safe base64 bytes; derive them from SECRET_KEY
    return Fernet(base64.urlsafe_b64encode(hashlib.sha256(SECRET_KEY.encode()).digest()))


def encrypt_token(token: str) -> str:
    return _cipher().encrypt(token.encode()).decode()


def decrypt_token(token: str) -> str:
    return _cipher().decrypt(token.encode()).decode()


def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=15.0)


def build_event_body(data: CalendarEventRequest) -> dict:
    start = datetime.combine(data.appointmentDate, parse_hhmm(data.appointmentTime))
    end = start + EVENT_DURATION
    return {
        "summary": f"Cita: {data.clientName} - {data.professionalName}",
        "description": EVENT_DESCRIPTION,
        "start": {"dateTime": start.isoformat(), "timeZone": GOOGLE_CALENDAR_TIMEZONE},
        "end": {"dateTime": end.isoformat(), "timeZone": GOOGLE_CALENDAR_TIMEZONE},
        "attendees": [{"email": data.professionalEmail}, {"email": data.clientEmail}],
        "reminders": EVENT_REMINDERS,
    }


async def refresh_access_token(refresh_token: str) -> tuple[str, int]:
    """
    Exchange a refresh token for a fresh access token

    Returns:
        (access_token, expires_in_seconds)
    """
    if not GOOGLE_CLIENT_ID or not GOOGLE_CLIENT_SECRET:
        raise CalendarSyncError("Missing Google Calendar credentials")

    async with http_client() as client:
        response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "client_id": GOOGLE_CLIENT_ID,
                "client_secret": GOOGLE_CLIENT_SECRET,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
        )

    if response.status_code != 200:
        logger.error(f"❌ Token refresh failed: {response.text}")
        raise CalendarSyncError(f"Failed to get access token: {response.text}")

    tokens = response.json()
    access_token = tokens.get("access_token")
    if not access_token:
        raise CalendarSyncError("No access token in refresh response")
    return access_token, int(tokens.get("expires_in", 3600))


async def get_access_token(db: Session, user_id: int) -> tuple[str, str]:
    """
    Access token and calendar id to write events for ``user_id``.

    The professional's own connected account wins; otherwise the platform-wide
    GOOGLE_REFRESH_TOKEN and its primary calendar are used.
    """
    integration = find_integration(db, user_id)

    if integration and integration.auto_sync_enabled:
        calendar_id = integration.google_calendar_id or "primary"
        try:
            if integration.token_expires_at > datetime.utcnow() + timedelta(minutes=5):
                return decrypt_token(integration.access_token), calendar_id

            logger.info(f"🔄 Google Calendar token for user {user_id} expired, refreshing...")
            access_token, expires_in = await refresh_access_token(
                decrypt_token(integration.refresh_token)
            )
        except InvalidToken as e:
            raise CalendarSyncError("Stored Google Calendar tokens cannot be decrypted") from e

        integration.access_token = encrypt_token(access_token)
        integration.token_expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
        db.commit()
        logger.info("✅ Google Calendar token refreshed successfully")
        return access_token, calendar_id

    if not GOOGLE_REFRESH_TOKEN:
        raise CalendarSyncError("Missing Google Calendar credentials")

    access_token, _ = await refresh_access_token(GOOGLE_REFRESH_TOKEN)
    return access_token, "primary"


async def create_appointment_event(db: Session, data: CalendarEventRequest) -> dict:
    """
    Create one calendar event for an appointment and store its id on the row.

    Never raises: returns {"success": True, "eventId", "eventLink"} or
    {"success": False, "error"}.
    """
    try:
        appointment = db.query(Appointment).filter(Appointment.id == data.appointmentId).first()
        if not appointment:
            raise CalendarSyncError(f"Appointment {data.appointmentId} not found")

        access_token, calendar_id = await get_access_token(db, appointment.professional.user_id)

        logger.info(f"📅 Creating calendar event for appointment {appointment.id}")
        async with http_client() as client:
            response = await client.post(
                f"{GOOGLE_CALENDAR_API}/calendars/{calendar_id}/events",
                headers={"Authorization": f"Bearer {access_token}"},
                json=build_event_body(data),
            )

        if response.status_code not in (200, 201):
            logger.error(f"❌ Failed to create calendar event: {response.text}")
            raise CalendarSyncError(f"Failed to create calendar event: {response.text}")

        event = response.json()
        appointment.google_event_id = event.get("id")
        integration = find_integration(db, appointment.professional.user_id)
        if integration:
            integration.last_synced_at = datetime.utcnow()
        db.commit()

        logger.info(f"✅ Google Calendar event created: {event.get('id')}")
        return {"success": True, "eventId": event.get("id"), "eventLink": event.get("htmlLink")}

    except (CalendarSyncError, httpx.HTTPError, SQLAlchemyError) as e:
        if isinstance(e, SQLAlchemyError):
            db.rollback()
        logger.error(f"❌ Error creating calendar event: {str(e)}")
        return {"success": False, "error": str(e) or e.__class__.__name__}


async def sync_appointment(db: Session, appointment: Appointment) -> dict:
    """Calendar event for an appointment that was just accepted"""
    professional_user = appointment.professional.user
    data = CalendarEventRequest(
        appointmentId=appointment.id,
        professionalEmail=professional_user.email,
        clientEmail=appointment.client.email,
        appointmentDate=appointment.appointment_date,
        appointmentTime=appointment.start_time[:5],
        professionalName=professional_user.full_name or professional_user.email,
        clientName=appointment.client.full_name or appointment.client.email,
    )
    return await create_appointment_event(db, data)


async def revoke_token(token: str) -> bool:
    try:
        async with http_client() as client:
            response = await client.post("https://oauth2.googleapis.com/revoke", params={"token": token})
        return response.status_code == 200
    except httpx.HTTPError as e:
        logger.warning(f"⚠️ Failed to revoke Google token: {str(e)}")
        return False


def find_integration(db: Session, user_id: int) -> Optional[GoogleCalendarIntegration]:
    return (
        db.query(GoogleCalendarIntegration)
        .filter(GoogleCalendarIntegration.user_id == user_id)
        .first()
    )
