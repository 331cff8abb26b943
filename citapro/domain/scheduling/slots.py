"""
Bookable slot generation.

A professional publishes a weekly template (one window per weekday, cut into
fixed-length slots). The slots offered for a concrete date are the template
steps for that weekday, minus the start times already taken by live
appointments, minus anything that starts before ``now + lead``.

Pure functions only: callers pass ``now`` in, nothing here reads the clock
or the database, and results are never cached.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ...models import DAYS_OF_WEEK
from ...shared.validators import parse_hhmm, validate_hhmm


def weekday_name(day: date) -> str:
    """Spanish weekday name used by Availability.day_of_week (Monday is "lunes")"""
    return DAYS_OF_WEEK[day.weekday()]


def find_availability(day: date, availabilities: Iterable) -> Optional[object]:
    """First active availability whose weekday matches ``day``"""
    name = weekday_name(day)
    for availability in availabilities:
        if getattr(availability, "is_active", True) and availability.day_of_week == name:
            return availability
    return None


def generate_slots(
    day: date,
    availabilities: Iterable,
    booked_times: Iterable[str],
    now: datetime,
    lead_hours: int = 12,
) -> list[str]:
    """
    Start times ("HH:MM") a client can book on ``day``.

    Args:
        day: The date being booked
        availabilities: The professional's Availability rows
        booked_times: start_time of the professional's live appointments on ``day``
        now: Current wall-clock time, naive, in the availability's time zone
        lead_hours: Minimum notice before a slot can be booked

    Returns:
        Ascending list of slot start times, possibly empty
    """
    # Nothing before tomorrow is bookable
    if day <= now.date():
        return []

    availability = find_availability(day, availabilities)
    if availability is None:
        return []

    step = timedelta(minutes=availability.slot_duration_minutes or 0)
    if step <= timedelta(0):
        return []

    booked = {validate_hhmm(t) for t in booked_times}
    earliest = now + timedelta(hours=lead_hours)

    current = datetime.combine(day, parse_hhmm(availability.start_time))
    end = datetime.combine(day, parse_hhmm(availability.end_time))

    slots = []
    while current < end:
        label = current.strftime("%H:%M")
        if label not in booked and current >= earliest:
            slots.append(label)
        current += step
    return slots
