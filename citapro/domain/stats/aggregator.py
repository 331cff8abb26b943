"""Professional dashboard figures, reduced from appointment and availability rows"""

import calendar
from collections import Counter
from datetime import date, datetime
from typing import Iterable

from ...shared.validators import minutes_between
from ..appointments.state_machine import (
    ACEPTADA,
    APPOINTMENT_STATUSES,
    CANCELADA,
    COMPLETADA,
    PAGADA,
    PENDIENTE_ACEPTACION,
    RECHAZADA,
)

PERIODS = ("day", "week", "month")
DAYS_IN_PERIOD = {"day": 1, "week": 7, "month": 30}

# date.weekday() order
WEEKDAY_LABELS = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")

TOP_DAYS = 3
TOP_HOURS = 5


def period_start(period: str, now: datetime) -> date:
    """First appointment_date included in ``period``"""
    today = now.date()
    if period == "day":
        return today
    if period == "week":
        return date.fromordinal(today.toordinal() - 7)
    if period == "month":
        year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
        return date(year, month, min(today.day, calendar.monthrange(year, month)[1]))
    raise ValueError(f"Unknown period: {period}")


def _percent(part: int, whole: int) -> float:
    # Floored to 2 decimals so a breakdown never adds up past 100
    return (part * 10000 // whole) / 100 if whole > 0 else 0.0


def aggregate_stats(appointments: Iterable, availabilities: Iterable, period: str) -> dict:
    """
    Reduce a professional's appointments (already filtered to the period) and
    active availabilities into the dashboard figures.
    """
    if period not in DAYS_IN_PERIOD:
        raise ValueError(f"Unknown period: {period}")

    appointments = list(appointments)
    days = DAYS_IN_PERIOD[period]
    total = len(appointments)

    by_status = Counter(a.status for a in appointments)
    status_counts = {status: by_status.get(status, 0) for status in APPOINTMENT_STATUSES}

    aceptadas = status_counts[ACEPTADA]
    completadas = status_counts[COMPLETADA]
    rechazadas = status_counts[RECHAZADA]
    canceladas = status_counts[CANCELADA]

    client_cancellations = sum(
        1 for a in appointments if a.status == CANCELADA and (a.cancellation_reason or "").strip()
    )

    available_minutes = sum(
        max(minutes_between(av.start_time, av.end_time), 0)
        for av in availabilities
        if getattr(av, "is_active", True)
    ) * days
    booked_minutes = sum(
        max(minutes_between(a.start_time, a.end_time), 0)
        for a in appointments
        if a.status in (ACEPTADA, COMPLETADA)
    )
    hours_available = round(available_minutes / 60, 2)
    hours_booked = round(booked_minutes / 60, 2)

    weekday_counts = Counter(WEEKDAY_LABELS[a.appointment_date.weekday()] for a in appointments)
    hour_counts = Counter(a.start_time[:5] for a in appointments)

    return {
        "period": period,
        "total": total,
        "aceptadas": aceptadas,
        "canceladas": canceladas,
        "rechazadas": rechazadas,
        "completadas": completadas,
        "pendientes": status_counts[PENDIENTE_ACEPTACION] + status_counts[PAGADA],
        "status_counts": status_counts,
        "status_percentages": {s: _percent(n, total) for s, n in status_counts.items()},
        "client_cancellation_rate": _percent(client_cancellations, total),
        "professional_cancellation_rate": _percent(rechazadas, total),
        "hours_available": hours_available,
        "hours_booked": hours_booked,
        "occupancy_rate": _percent(booked_minutes, available_minutes),
        "average_attended_per_day": round((aceptadas + completadas) / days, 2),
        "top_days": [{"day": d, "count": n} for d, n in weekday_counts.most_common(TOP_DAYS)],
        "top_hours": [{"hour": h, "count": n} for h, n in hour_counts.most_common(TOP_HOURS)],
    }
