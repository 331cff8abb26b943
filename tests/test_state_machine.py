"""Unit tests for appointment status transitions."""

import pytest

from citapro.domain.appointments.state_machine import (
    APPOINTMENT_STATUSES,
    SLOT_HOLDING_STATUSES,
    TERMINAL_STATUSES,
    InvalidTransition,
    available_actions,
    next_status,
)
from citapro.models import ROLE_CLIENT, ROLE_PROFESSIONAL, SLOT_HOLDING_FILTER


def test_happy_path():
    status = next_status("pendiente_pago", "pay", ROLE_CLIENT)
    assert status == "pendiente_aceptacion"
    status = next_status(status, "accept", ROLE_PROFESSIONAL)
    assert status == "aceptada"
    assert next_status(status, "complete", ROLE_PROFESSIONAL) == "completada"


def test_reject_from_pending_acceptance():
    assert next_status("pendiente_aceptacion", "reject", ROLE_PROFESSIONAL) == "rechazada"


@pytest.mark.parametrize("status", ["pendiente_pago", "pagada", "pendiente_aceptacion", "aceptada"])
def test_client_can_cancel_any_live_status(status):
    assert next_status(status, "cancel", ROLE_CLIENT) == "cancelada"


@pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES))
def test_terminal_statuses_have_no_way_out(status):
    for role in (ROLE_CLIENT, ROLE_PROFESSIONAL):
        assert available_actions(status, role) == []
    with pytest.raises(InvalidTransition):
        next_status(status, "cancel", ROLE_CLIENT)


def test_completed_never_offers_accept_or_reject():
    actions = available_actions("completada", ROLE_PROFESSIONAL)
    assert "accept" not in actions
    assert "reject" not in actions


def test_wrong_role_is_rejected():
    with pytest.raises(InvalidTransition):
        next_status("pendiente_aceptacion", "accept", ROLE_CLIENT)
    with pytest.raises(InvalidTransition):
        next_status("aceptada", "cancel", ROLE_PROFESSIONAL)


def test_complete_requires_accepted():
    with pytest.raises(InvalidTransition):
        next_status("pendiente_aceptacion", "complete", ROLE_PROFESSIONAL)


def test_button_visibility():
    assert available_actions("pendiente_aceptacion", ROLE_PROFESSIONAL) == ["accept", "reject"]
    assert available_actions("aceptada", ROLE_PROFESSIONAL) == ["complete"]
    assert available_actions("aceptada", ROLE_CLIENT) == ["cancel"]
    assert available_actions("pendiente_pago", ROLE_PROFESSIONAL) == []


def test_pay_is_never_offered_as_a_button():
    for status in APPOINTMENT_STATUSES:
        assert "pay" not in available_actions(status, ROLE_CLIENT)


def test_unknown_action():
    with pytest.raises(InvalidTransition):
        next_status("aceptada", "archive", ROLE_PROFESSIONAL)


def test_held_slot_index_matches_holding_statuses():
    for status in APPOINTMENT_STATUSES:
        assert (f"'{status}'" in SLOT_HOLDING_FILTER) == (status in SLOT_HOLDING_STATUSES)
