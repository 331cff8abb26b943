"""Appointment lifecycle after booking: accept, reject, complete, cancel."""

import json
from datetime import date
from unittest.mock import patch

import httpx
import pytest

from citapro.models import Appointment, Notification
from conftest import make_appointment, make_professional, make_profile

TUESDAY = date(2025, 3, 4)
LAST_SATURDAY = date(2025, 3, 1)


@pytest.fixture
def parties(db, frozen_now):
    professional = make_professional(db)
    client_profile = make_profile(db)
    return professional, client_profile


def google_transport(requests, event_status=200):
    """Fake Google token + Calendar endpoints, recording every request"""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.host == "oauth2.googleapis.com":
            return httpx.Response(200, json={"access_token": "access-123", "expires_in": 3600})
        if event_status != 200:
            return httpx.Response(event_status, json={"error": {"message": "Calendar unavailable"}})
        return httpx.Response(
            200, json={"id": "evt-123", "htmlLink": "https://calendar.google.com/event?eid=evt-123"}
        )

    return lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_my_appointments_split_by_role(client, db, login, parties):
    professional, client_profile = parties
    make_appointment(db, client_profile, professional, TUESDAY)

    login(client_profile)
    mine = client.get("/appointments/mine").json()
    assert len(mine["as_client"]) == 1
    assert mine["as_professional"] == []
    assert mine["as_client"][0]["available_actions"] == ["cancel"]
    assert mine["as_client"][0]["status_label"]

    login(professional.user)
    mine = client.get("/appointments/mine").json()
    assert mine["as_client"] == []
    assert mine["as_professional"][0]["available_actions"] == ["accept", "reject"]
    assert mine["as_professional"][0]["client"]["full_name"] == "Ana Cliente"


def test_outsiders_cannot_see_an_appointment(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY)

    login(make_profile(db, name="Otro", email="otro@example.com"))
    assert client.get(f"/appointments/{appointment.id}").status_code == 403
    assert client.get("/appointments/9999").status_code == 404


def test_accept_creates_calendar_event(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY)
    login(professional.user)

    requests = []
    with patch("citapro.services.google_calendar_service.http_client", google_transport(requests)):
        resp = client.post(f"/appointments/{appointment.id}/accept")

    assert resp.status_code == 200
    body = resp.json()
    assert body["calendar_synced"] is True
    assert body["warning"] is None
    assert body["event_link"] == "https://calendar.google.com/event?eid=evt-123"
    assert body["appointment"]["status"] == "aceptada"
    assert body["appointment"]["available_actions"] == ["complete"]

    token_request, event_request = requests
    assert b"refresh_token=platform-refresh-token" in token_request.content
    assert event_request.url.path == "/calendar/v3/calendars/primary/events"
    assert event_request.headers["Authorization"] == "Bearer access-123"
    event = json.loads(event_request.content)
    assert event["summary"] == "Cita: Ana Cliente - Luis Terapeuta"
    assert event["start"] == {"dateTime": "2025-03-04T10:00:00", "timeZone": "America/Mexico_City"}
    assert event["end"]["dateTime"] == "2025-03-04T11:00:00"
    assert {a["email"] for a in event["attendees"]} == {"luis@example.com", "ana@example.com"}
    assert event["reminders"]["overrides"] == [
        {"method": "email", "minutes": 1440},
        {"method": "popup", "minutes": 60},
    ]

    db.expire_all()
    stored = db.get(Appointment, appointment.id)
    assert stored.status == "aceptada"
    assert stored.google_event_id == "evt-123"
    note = db.query(Notification).filter(Notification.user_id == client_profile.id).one()
    assert note.type == "cita_aceptada"
    assert note.message == "Tu cita para el 4 de marzo de 2025 a las 10:00 ha sido aceptada."


def test_calendar_failure_keeps_the_acceptance(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY)
    login(professional.user)

    with patch(
        "citapro.services.google_calendar_service.http_client", google_transport([], event_status=503)
    ):
        resp = client.post(f"/appointments/{appointment.id}/accept")

    assert resp.status_code == 200
    body = resp.json()
    assert body["calendar_synced"] is False
    assert body["warning"] == "Cita aceptada, pero no se pudo agregar a Google Calendar"
    db.expire_all()
    stored = db.get(Appointment, appointment.id)
    assert stored.status == "aceptada"
    assert stored.google_event_id is None


def test_only_the_professional_accepts(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY)
    login(client_profile)
    assert client.post(f"/appointments/{appointment.id}/accept").status_code == 403


def test_accepting_twice_is_a_conflict(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY, status="aceptada")
    login(professional.user)
    resp = client.post(f"/appointments/{appointment.id}/accept")
    assert resp.status_code == 409
    assert resp.json()["detail"] == "No se puede aceptar una cita en estado aceptada"


def test_reject_notifies_client(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY)
    login(professional.user)

    resp = client.post(f"/appointments/{appointment.id}/reject")

    assert resp.status_code == 200
    assert resp.json()["status"] == "rechazada"
    assert resp.json()["available_actions"] == []
    db.expire_all()
    note = db.query(Notification).filter(Notification.user_id == client_profile.id).one()
    assert note.type == "cita_rechazada"
    assert note.message == "Tu cita para el 4 de marzo de 2025 ha sido rechazada por el profesional."


def test_cannot_complete_a_future_appointment(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY, status="aceptada")
    login(professional.user)

    assert client.post(f"/appointments/{appointment.id}/complete").status_code == 400
    db.expire_all()
    assert db.get(Appointment, appointment.id).status == "aceptada"


def test_complete_past_appointment(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, LAST_SATURDAY, status="aceptada")
    login(professional.user)

    resp = client.post(f"/appointments/{appointment.id}/complete")

    assert resp.status_code == 200
    assert resp.json()["status"] == "completada"
    db.expire_all()
    assert db.query(Notification).filter(Notification.type == "cita_completada").count() == 1


def test_complete_requires_acceptance(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, LAST_SATURDAY)
    login(professional.user)
    assert client.post(f"/appointments/{appointment.id}/complete").status_code == 409


@pytest.mark.parametrize("reason", ["", "   ", None])
def test_cancel_needs_a_reason(client, db, login, parties, reason):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY)
    login(client_profile)

    resp = client.post(f"/appointments/{appointment.id}/cancel", json={"reason": reason})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Debes proporcionar un motivo de cancelación"
    db.expire_all()
    assert db.get(Appointment, appointment.id).status == "pendiente_aceptacion"


def test_cancel_records_reason_and_notifies_professional(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY, status="aceptada")
    login(client_profile)

    resp = client.post(f"/appointments/{appointment.id}/cancel", json={"reason": "Viaje <urgente>"})

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelada"
    assert resp.json()["cancellation_reason"] == "Viaje &lt;urgente&gt;"
    db.expire_all()
    note = db.query(Notification).filter(Notification.user_id == professional.user_id).one()
    assert note.type == "cita_cancelada"
    assert note.message == "La cita del 4 de marzo de 2025 ha sido cancelada. Motivo: Viaje &lt;urgente&gt;"

    again = client.post(f"/appointments/{appointment.id}/cancel", json={"reason": "Otra vez"})
    assert again.status_code == 409


def test_professional_cannot_cancel(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, TUESDAY)
    login(professional.user)
    resp = client.post(f"/appointments/{appointment.id}/cancel", json={"reason": "No puedo"})
    assert resp.status_code == 403


def test_completed_appointment_cannot_be_cancelled(client, db, login, parties):
    professional, client_profile = parties
    appointment = make_appointment(db, client_profile, professional, LAST_SATURDAY, status="completada")
    login(client_profile)
    resp = client.post(f"/appointments/{appointment.id}/cancel", json={"reason": "Tarde"})
    assert resp.status_code == 409
