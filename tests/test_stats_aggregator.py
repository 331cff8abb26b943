"""Unit tests for the professional dashboard reduction."""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from citapro.domain.stats.aggregator import aggregate_stats, period_start


def appt(status, day=date(2025, 3, 4), start="10:00", end="11:00", reason=None):
    return SimpleNamespace(
        status=status, appointment_date=day, start_time=start, end_time=end, cancellation_reason=reason
    )


def window(start="09:00", end="13:00"):
    return SimpleNamespace(start_time=start, end_time=end, is_active=True)


def test_counts_and_rates():
    appointments = [
        appt("aceptada"),
        appt("completada", start="09:00", end="10:00"),
        appt("cancelada", reason="Me enfermé"),
        appt("cancelada"),
        appt("rechazada"),
        appt("pendiente_aceptacion"),
        appt("pagada"),
    ]
    stats = aggregate_stats(appointments, [window()], "week")

    assert stats["total"] == 7
    assert stats["aceptadas"] == 1
    assert stats["completadas"] == 1
    assert stats["canceladas"] == 2
    assert stats["rechazadas"] == 1
    assert stats["pendientes"] == 2
    assert stats["client_cancellation_rate"] == pytest.approx(14.28)
    assert stats["professional_cancellation_rate"] == pytest.approx(14.28)
    # 4h a day for 7 days, 2h booked
    assert stats["hours_available"] == 28
    assert stats["hours_booked"] == 2
    assert stats["occupancy_rate"] == pytest.approx(7.14)
    assert stats["average_attended_per_day"] == pytest.approx(0.29)


def test_percentages_never_exceed_100():
    appointments = [appt("aceptada")] * 4 + [appt("cancelada")] + [appt("completada")]
    stats = aggregate_stats(appointments, [], "month")

    percentages = stats["status_percentages"]
    assert all(0 <= p <= 100 for p in percentages.values())
    assert sum(percentages.values()) <= 100
    assert sum(stats["status_counts"].values()) == stats["total"] == 6


def test_empty_period():
    stats = aggregate_stats([], [], "day")
    assert stats["total"] == 0
    assert stats["occupancy_rate"] == 0
    assert stats["client_cancellation_rate"] == 0
    assert stats["top_days"] == []


def test_top_days_and_hours():
    appointments = [
        appt("aceptada", day=date(2025, 3, 4), start="10:00"),
        appt("aceptada", day=date(2025, 3, 11), start="10:00"),
        appt("aceptada", day=date(2025, 3, 5), start="12:00"),
    ]
    stats = aggregate_stats(appointments, [], "month")
    assert stats["top_days"][0] == {"day": "Martes", "count": 2}
    assert stats["top_hours"][0] == {"hour": "10:00", "count": 2}


def test_period_start():
    now = datetime(2025, 3, 31, 15, 0)
    assert period_start("day", now) == date(2025, 3, 31)
    assert period_start("week", now) == date(2025, 3, 24)
    assert period_start("month", now) == date(2025, 2, 28)
    assert period_start("month", datetime(2025, 1, 15)) == date(2024, 12, 15)


def test_unknown_period():
    with pytest.raises(ValueError):
        aggregate_stats([], [], "year")
