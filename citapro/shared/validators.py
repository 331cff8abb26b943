"""Shared validation utilities"""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_hhmm(value: str) -> str:
    """
    Validate a wall-clock time in "HH:MM" form.

    Accepts "HH:MM:SS" as well and drops the seconds, since some database
    drivers hand TIME columns back that way.

    Raises:
        ValueError: If the value is not a valid 24h time
    """
    if value is None:
        raise ValueError("Time is required")
    value = value.strip()
    if len(value) == 8 and value[5] == ":":
        value = value[:5]
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def parse_hhmm(value: str) -> time:
    hours, minutes = validate_hhmm(value).split(":")
    return time(int(hours), int(minutes))


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def add_minutes(value: str, minutes: int) -> str:
    """Add minutes to an "HH:MM" string, wrapping at midnight"""
    start = datetime.combine(date.min, parse_hhmm(value))
    return format_hhmm((start + timedelta(minutes=minutes)).time())


def minutes_between(start: str, end: str) -> int:
    start_t, end_t = parse_hhmm(start), parse_hhmm(end)
    return (end_t.hour * 60 + end_t.minute) - (start_t.hour * 60 + start_t.minute)


def validate_card_number(number: Optional[str]) -> str:
    """
    Validate a (simulated) card number: 13 to 19 digits, spaces and dashes allowed.

    Returns:
        The digits only
    """
    digits = re.sub(r"[\s-]", "", number or "")
    if not digits.isdigit() or not 13 <= len(digits) <= 19:
        raise ValueError("Número de tarjeta inválido")
    return digits


def validate_card_expiry(expiry: Optional[str]) -> str:
    """Validate an expiry date in MM/YY form"""
    expiry = (expiry or "").strip()
    match = re.match(r"^(0[1-9]|1[0-2])/(\d{2})$", expiry)
    if not match:
        raise ValueError("Fecha de expiración inválida (MM/YY)")
    return expiry


def validate_cvv(cvv: Optional[str]) -> str:
    cvv = (cvv or "").strip()
    if not cvv.isdigit() or len(cvv) not in (3, 4):
        raise ValueError("CVV inválido")
    return cvv
