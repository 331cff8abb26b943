"""Titles and bodies of the in-app notifications sent by the booking flows"""

from datetime import date

MONTHS_ES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def format_long_date(day: date) -> str:
    """e.g. "5 de marzo de 2025" """
    return f"{day.day} de {MONTHS_ES[day.month - 1]} de {day.year}"


def new_booking_for_professional(day: date, start_time: str) -> tuple[str, str]:
    return (
        "Nueva Cita Pendiente",
        f"Tienes una nueva solicitud de cita para el {format_long_date(day)} a las {start_time[:5]}",
    )


def payment_done_for_client() -> tuple[str, str]:
    return (
        "Pago Realizado",
        "Tu pago ha sido procesado correctamente. El profesional revisará tu solicitud pronto.",
    )


def appointment_accepted(day: date, start_time: str) -> tuple[str, str]:
    return (
        "Cita Aceptada",
        f"Tu cita para el {format_long_date(day)} a las {start_time[:5]} ha sido aceptada.",
    )


def appointment_rejected(day: date) -> tuple[str, str]:
    return (
        "Cita Rechazada",
        f"Tu cita para el {format_long_date(day)} ha sido rechazada por el profesional.",
    )


def appointment_cancelled(day: date, reason: str) -> tuple[str, str]:
    return (
        "Cita Cancelada",
        f"La cita del {format_long_date(day)} ha sido cancelada. Motivo: {reason}",
    )


def appointment_completed() -> tuple[str, str]:
    return ("Cita Completada", "Tu cita ha sido marcada como completada.")
