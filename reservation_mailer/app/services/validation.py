import re
from collections.abc import Mapping
from typing import Any

from reservation_mailer.app.core.errors import ValidationError
from reservation_mailer.app.routers.schemas import ReservationRequest

REQUIRED_FIELDS = ("name", "email", "phone", "date", "time", "guests", "message")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MISSING_FIELDS_MESSAGE = "All fields are required"
INVALID_EMAIL_MESSAGE = "Invalid email address"


def _is_missing(value: Any) -> bool:
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)):
        return value == 0 or value != value
    return False


def validate_reservation(raw: Any, *, check_email: bool = True) -> ReservationRequest:
    """Check a raw form payload and return it as a ReservationRequest.

    Empty strings, zero, NaN, None and False count as missing; empty lists and
    objects do not. Anything that is not a mapping is treated as a payload
    without fields.
    """
    payload: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    if any(_is_missing(payload.get(field)) for field in REQUIRED_FIELDS):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    values = {field: str(payload[field]) for field in REQUIRED_FIELDS}

    if check_email and not EMAIL_PATTERN.fullmatch(values["email"]):
        raise ValidationError(INVALID_EMAIL_MESSAGE)

    return ReservationRequest(**values)
