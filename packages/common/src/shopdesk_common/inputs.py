"""
Parsing and Range Checks for Operator Input.

Every function here takes raw text as typed by the operator and returns the
parsed value or a `Rejected` outcome. Nothing raises on bad input: the
workflows pass the rejection straight back to the menu.
"""

from __future__ import annotations

import datetime

from .models import MAX_EXPERIENCE_YEARS, MAX_INTEGER, MIN_MODEL_YEAR, VIN_LENGTH
from .outcomes import ErrorKind, Rejected


def parse_int(raw: str, field: str) -> int | Rejected:
    """
    Parses a whole number, allowing surrounding whitespace.

    Numbers outside the range of the store's integer columns are rejected as
    `invalid_input` rather than passed on to a query.
    """
    try:
        value = int(raw.strip())
    except ValueError:
        return Rejected(ErrorKind.PARSE_ERROR, f"{field} must be a whole number, got {raw!r}.")
    if not (-MAX_INTEGER - 1 <= value <= MAX_INTEGER):
        return Rejected(
            ErrorKind.INVALID_INPUT,
            f"{field} must be between {-MAX_INTEGER - 1} and {MAX_INTEGER}.",
        )
    return value


def parse_date(raw: str, field: str, today: datetime.date | None = None) -> datetime.date | Rejected:
    """
    Parses an ISO `YYYY-MM-DD` date.

    A blank answer means `today` (the current date unless given).
    """
    text = raw.strip()
    if not text:
        return today or datetime.date.today()
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        return Rejected(ErrorKind.PARSE_ERROR, f"{field} must be a date as YYYY-MM-DD, got {raw!r}.")


def require_text(raw: str, field: str, max_length: int | None = None) -> str | Rejected:
    """Trims `raw` and rejects it when empty or longer than `max_length`."""
    text = raw.strip()
    if not text:
        return Rejected(ErrorKind.INVALID_INPUT, f"{field} must not be empty.")
    if max_length is not None and len(text) > max_length:
        return Rejected(
            ErrorKind.INVALID_INPUT, f"{field} must be at most {max_length} characters."
        )
    return text


def normalize_vin(raw: str) -> str | Rejected:
    """VINs are compared trimmed and upper-cased."""
    vin = require_text(raw, "VIN", VIN_LENGTH)
    if isinstance(vin, Rejected):
        return vin
    return vin.upper()


def check_model_year(year: int, today: datetime.date | None = None) -> Rejected | None:
    latest = (today or datetime.date.today()).year + 1
    if not (MIN_MODEL_YEAR <= year <= latest):
        return Rejected(
            ErrorKind.INVALID_INPUT,
            f"Year must be between {MIN_MODEL_YEAR} and {latest}, got {year}.",
        )
    return None


def check_odometer(odometer: int) -> Rejected | None:
    if odometer < 0:
        return Rejected(ErrorKind.INVALID_INPUT, f"Odometer must not be negative, got {odometer}.")
    return None


def check_bill(bill: int) -> Rejected | None:
    if bill < 0:
        return Rejected(ErrorKind.INVALID_INPUT, f"Bill must not be negative, got {bill}.")
    return None


def check_experience(years: int) -> Rejected | None:
    if not (0 <= years <= MAX_EXPERIENCE_YEARS):
        return Rejected(
            ErrorKind.INVALID_INPUT,
            f"Experience must be between 0 and {MAX_EXPERIENCE_YEARS} years, got {years}.",
        )
    return None
