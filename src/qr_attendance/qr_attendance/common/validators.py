from __future__ import annotations

from datetime import time

from ..core.exceptions import ValidationError
from .datetime_utils import parse_time_of_day


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_time_of_day(value: str | None, field_name: str) -> time:
    raw = require_non_empty(value, field_name)
    try:
        return parse_time_of_day(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM") from None


def require_non_negative_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def require_bool(value, field_name: str, *, default: bool = False) -> bool:
    # JSON "false" arrives as a non-empty string; only real booleans count.
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value
