"""Booking + simulated payment flow."""

from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from citapro.models import Appointment, Notification, Payment
from conftest import make_appointment, make_availability, make_professional, make_profile

TUESDAY = date(2025, 3, 4)

CARD = {"card_number": "4242 4242 4242 4242", "card_expiry": "12/27", "card_cvv": "123"}


@pytest.fixture
def booking(db, login, frozen_now):
    professional = make_professional(db)
    make_availability(db, professional, day="martes", start="09:00", end="12:00", slot=60)
    client_profile = make_profile(db)
    login(client_profile)
    return professional, client_profile


def checkout_body(professional, day=TUESDAY, start="10:00", **card):
    return {
        "professional_id": professional.id,
        "appointment_date": day.isoformat(),
        "start_time": start,
        **CARD,
        **card,
    }


def test_checkout_books_pays_and_notifies(client, db, booking):
    professional, client_profile = booking

    resp = client.post("/appointments/checkout", json=checkout_body(professional))

    assert resp.status_code == 201
    body = resp.json()
    assert body["appointment"]["status"] == "pendiente_aceptacion"
    assert body["appointment"]["start_time"] == "10:00"
    assert body["appointment"]["end_time"] == "11:00"
    assert body["appointment"]["available_actions"] == ["cancel"]
    assert body["payment"]["amount"] == 500.0
    assert body["payment"]["payment_reference"].startswith("PAY-")

    db.expire_all()
    appointment = db.query(Appointment).one()
    assert appointment.client_id == client_profile.id
    assert db.query(Payment).filter(Payment.appointment_id == appointment.id).count() == 1

    pro_note = db.query(Notification).filter(Notification.user_id == professional.user_id).one()
    assert pro_note.type == "pago_realizado"
    assert pro_note.title == "Nueva Cita Pendiente"
    assert pro_note.message == "Tienes una nueva solicitud de cita para el 4 de marzo de 2025 a las 10:00"
    client_note = db.query(Notification).filter(Notification.user_id == client_profile.id).one()
    assert client_note.title == "Pago Realizado"
    assert client_note.appointment_id == appointment.id


def test_booked_slot_disappears_and_cannot_be_booked_twice(client, booking):
    professional, _ = booking
    assert client.post("/appointments/checkout", json=checkout_body(professional)).status_code == 201

    slots = client.get(f"/professionals/{professional.id}/slots", params={"date": "2025-03-04"})
    assert slots.json()["slots"] == ["09:00", "11:00"]

    again = client.post("/appointments/checkout", json=checkout_body(professional))
    assert again.status_code == 409


def test_cancelled_appointment_frees_the_slot(client, db, booking):
    professional, client_profile = booking
    make_appointment(db, client_profile, professional, TUESDAY, start="10:00", status="cancelada")

    resp = client.post("/appointments/checkout", json=checkout_body(professional))
    assert resp.status_code == 201


def test_slot_taken_between_check_and_insert(client, db, booking):
    professional, _ = booking
    rival = make_profile(db, name="Otro", email="otro@example.com")
    make_appointment(db, rival, professional, TUESDAY, start="10:00", status="pendiente_pago")

    # The slot list was read before the rival's row landed
    with patch(
        "citapro.domain.payments.service.SchedulingService.available_slots",
        return_value=["09:00", "10:00", "11:00"],
    ):
        resp = client.post("/appointments/checkout", json=checkout_body(professional))

    assert resp.status_code == 409
    db.expire_all()
    assert db.query(Appointment).count() == 1
    assert db.query(Payment).count() == 0


def test_one_held_appointment_per_slot(db, booking):
    professional, client_profile = booking
    make_appointment(db, client_profile, professional, TUESDAY, start="10:00", status="rechazada")
    make_appointment(db, client_profile, professional, TUESDAY, start="10:00", status="aceptada")

    with pytest.raises(IntegrityError):
        make_appointment(db, client_profile, professional, TUESDAY, start="10:00", status="pendiente_pago")
    db.rollback()


def test_slot_outside_the_window_is_refused(client, booking):
    professional, _ = booking
    resp = client.post("/appointments/checkout", json=checkout_body(professional, start="15:00"))
    assert resp.status_code == 409


def test_day_without_availability_is_refused(client, booking):
    professional, _ = booking
    resp = client.post("/appointments/checkout", json=checkout_body(professional, day=date(2025, 3, 5)))
    assert resp.status_code == 409


@pytest.mark.parametrize(
    "card",
    [
        {"card_number": "1234"},
        {"card_expiry": "13/27"},
        {"card_expiry": "1227"},
        {"card_cvv": "12"},
    ],
)
def test_invalid_card_data(client, db, booking, card):
    professional, _ = booking
    resp = client.post("/appointments/checkout", json=checkout_body(professional, **card))
    assert resp.status_code == 422
    db.expire_all()
    assert db.query(Appointment).count() == 0


def test_cannot_book_yourself(client, db, login, booking):
    professional, _ = booking
    login(professional.user)
    resp = client.post("/appointments/checkout", json=checkout_body(professional))
    assert resp.status_code == 400


def test_failed_payment_leaves_pending_appointment(client, db, booking):
    professional, _ = booking
    with patch(
        "citapro.domain.payments.service.PaymentRepository.create",
        side_effect=SQLAlchemyError("insert failed"),
    ):
        resp = client.post("/appointments/checkout", json=checkout_body(professional))

    assert resp.status_code == 500
    db.expire_all()
    appointment = db.query(Appointment).one()
    assert appointment.status == "pendiente_pago"
    assert db.query(Payment).count() == 0


def test_notification_failure_does_not_fail_checkout(client, db, booking):
    professional, _ = booking
    with patch(
        "citapro.domain.notifications.service.NotificationRepository.create",
        side_effect=SQLAlchemyError("notifications down"),
    ):
        resp = client.post("/appointments/checkout", json=checkout_body(professional))

    assert resp.status_code == 201
    db.expire_all()
    assert db.query(Appointment).one().status == "pendiente_aceptacion"


def test_payment_lookup_for_participants_only(client, db, login, booking):
    professional, _ = booking
    appointment_id = client.post("/appointments/checkout", json=checkout_body(professional)).json()[
        "appointment"
    ]["id"]

    resp = client.get(f"/payments/appointment/{appointment_id}")
    assert resp.status_code == 200
    assert resp.json()["amount"] == 500.0

    login(make_profile(db, name="Otro", email="otro@example.com"))
    assert client.get(f"/payments/appointment/{appointment_id}").status_code == 403
