"""Call-boundary checks shared by the ledger, waitlist and booking service."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from .errors import ValidationError


def require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_date(value: Any, field_name: str = "date") -> date:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    # datetime subclasses date; bookings are day-granular
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValidationError(f"{field_name} must be YYYY-MM-DD, got {value!r}") from None
    raise ValidationError(f"{field_name} must be a date, got {type(value).__name__}")


def require_severity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 10:
        raise ValidationError(f"severity_score must be an integer in 1-10, got {value!r}")
    return value


def require_positive(value: int, field_name: str) -> int:
    if value <= 0:
        raise ValidationError(f"{field_name} must be positive, got {value}")
    return value
