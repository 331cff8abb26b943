"""
Appointment status transitions.

    pendiente_pago --pay--> pendiente_aceptacion --accept--> aceptada --complete--> completada
                                                 \--reject--> rechazada
    any non-terminal status --cancel (client, with reason)--> cancelada

Every status write in the service layer goes through ``next_status``.
"""

from collections import namedtuple

from ...models import ROLE_CLIENT, ROLE_PROFESSIONAL

PENDIENTE_PAGO = "pendiente_pago"
PAGADA = "pagada"
PENDIENTE_ACEPTACION = "pendiente_aceptacion"
ACEPTADA = "aceptada"
RECHAZADA = "rechazada"
COMPLETADA = "completada"
CANCELADA = "cancelada"

APPOINTMENT_STATUSES = (
    PENDIENTE_PAGO,
    PAGADA,
    PENDIENTE_ACEPTACION,
    ACEPTADA,
    RECHAZADA,
    COMPLETADA,
    CANCELADA,
)
TERMINAL_STATUSES = frozenset({RECHAZADA, COMPLETADA, CANCELADA})
NON_TERMINAL_STATUSES = frozenset(APPOINTMENT_STATUSES) - TERMINAL_STATUSES

# Statuses that hold a slot; anything else frees it for rebooking
SLOT_HOLDING_STATUSES = frozenset({PENDIENTE_PAGO, PAGADA, PENDIENTE_ACEPTACION, ACEPTADA})

Transition = namedtuple("Transition", ["role", "sources", "target"])

TRANSITIONS = {
    "pay": Transition(ROLE_CLIENT, frozenset({PENDIENTE_PAGO}), PENDIENTE_ACEPTACION),
    "accept": Transition(ROLE_PROFESSIONAL, frozenset({PENDIENTE_ACEPTACION}), ACEPTADA),
    "reject": Transition(ROLE_PROFESSIONAL, frozenset({PENDIENTE_ACEPTACION}), RECHAZADA),
    "complete": Transition(ROLE_PROFESSIONAL, frozenset({ACEPTADA}), COMPLETADA),
    "cancel": Transition(ROLE_CLIENT, NON_TERMINAL_STATUSES, CANCELADA),
}

# "pay" only happens inside checkout, it is never offered as a button
USER_ACTIONS = ("accept", "reject", "complete", "cancel")


class InvalidTransition(Exception):
    def __init__(self, status: str, action: str, role: str):
        self.status = status
        self.action = action
        self.role = role
        super().__init__(f"Cannot '{action}' an appointment in status '{status}' as {role}")


def can_transition(status: str, action: str, role: str) -> bool:
    transition = TRANSITIONS.get(action)
    return transition is not None and transition.role == role and status in transition.sources


def next_status(status: str, action: str, role: str) -> str:
    """Target status of ``action``, or InvalidTransition"""
    if not can_transition(status, action, role):
        raise InvalidTransition(status, action, role)
    return TRANSITIONS[action].target


def available_actions(status: str, role: str) -> list[str]:
    """Actions the UI should offer ``role`` for an appointment in ``status``"""
    return [action for action in USER_ACTIONS if can_transition(status, action, role)]


STATUS_LABELS = {
    PENDIENTE_PAGO: "Pendiente de Pago",
    PAGADA: "Pagada",
    PENDIENTE_ACEPTACION: "Pendiente de Aceptación",
    ACEPTADA: "Aceptada",
    RECHAZADA: "Rechazada",
    COMPLETADA: "Completada",
    CANCELADA: "Cancelada",
}
