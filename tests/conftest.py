import os
from datetime import datetime
from unittest.mock import patch

# Settings are read at import time, so they have to be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["FIREBASE_PROJECT_ID"] = "citapro-test"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["GOOGLE_REFRESH_TOKEN"] = "platform-refresh-token"
os.environ["GOOGLE_CALENDAR_TIMEZONE"] = "America/Mexico_City"

import pytest  # noqa: E402
from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from citapro.auth import get_current_user  # noqa: E402
from citapro.database import Base, SessionLocal, engine, get_db  # noqa: E402
from citapro.main import app  # noqa: E402
from citapro.models import (  # noqa: E402
    ROLE_CLIENT,
    ROLE_PROFESSIONAL,
    Appointment,
    Availability,
    Professional,
    Profile,
)

# Monday 3 March 2025, 08:00 local time
FIXED_NOW = datetime(2025, 3, 3, 8, 0)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def login():
    """Authenticate subsequent requests as the given profile"""

    def _login(profile: Profile):
        profile_id = profile.id

        def _current_user(db: Session = Depends(get_db)):
            return db.query(Profile).filter(Profile.id == profile_id).first()

        app.dependency_overrides[get_current_user] = _current_user

    return _login


@pytest.fixture
def frozen_now():
    """Pin the service clock to FIXED_NOW"""
    with patch("citapro.domain.scheduling.service.local_now", return_value=FIXED_NOW), patch(
        "citapro.domain.appointments.service.local_now", return_value=FIXED_NOW
    ), patch("citapro.domain.stats.service.local_now", return_value=FIXED_NOW), patch(
        "citapro.domain.stats.router.local_now", return_value=FIXED_NOW
    ):
        yield FIXED_NOW


def make_profile(db, name="Ana Cliente", email="ana@example.com", role=ROLE_CLIENT) -> Profile:
    profile = Profile(firebase_uid=f"uid-{email}", full_name=name, email=email, role=role)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def make_professional(
    db, name="Luis Terapeuta", email="luis@example.com", profession="Psicólogo", price=500.0
) -> Professional:
    user = make_profile(db, name=name, email=email, role=ROLE_PROFESSIONAL)
    professional = Professional(user_id=user.id, profession=profession, bio="Bio", price_per_hour=price)
    db.add(professional)
    db.commit()
    db.refresh(professional)
    return professional


def make_availability(db, professional, day="martes", start="09:00", end="12:00", slot=60) -> Availability:
    availability = Availability(
        professional_id=professional.id,
        day_of_week=day,
        start_time=start,
        end_time=end,
        slot_duration_minutes=slot,
    )
    db.add(availability)
    db.commit()
    db.refresh(availability)
    return availability


def make_appointment(db, client, professional, day, start="10:00", end="11:00", status="pendiente_aceptacion", **extra) -> Appointment:
    appointment = Appointment(
        client_id=client.id,
        professional_id=professional.id,
        appointment_date=day,
        start_time=start,
        end_time=end,
        status=status,
        **extra,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment
