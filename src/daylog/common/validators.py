from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.constants import ALLOWED_TIME_SPENT
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters", field=field_name)
    return value


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number", field=field_name) from None


def require_iso_date(value: Any, field_name: str = "date") -> str:
    """Accept only a plain YYYY-MM-DD calendar date and return it unchanged."""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD string", field=field_name)
    try:
        parsed = parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD string", field=field_name) from None
    # strptime tolerates "2024-1-5"; the stored form must be zero padded.
    if parsed.isoformat() != value:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD string", field=field_name)
    return value


def coerce_time_spent(value: Any) -> Decimal:
    """Coerce a wire value (number or numeric string) to 0.5 or 1.0."""
    if isinstance(value, bool) or value is None:
        raise ValidationError("Time spent must be 0.5 or 1", field="timeSpent")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Time spent must be 0.5 or 1", field="timeSpent") from None
    if not amount.is_finite():
        raise ValidationError("Time spent must be 0.5 or 1", field="timeSpent")
    for allowed in ALLOWED_TIME_SPENT:
        if amount == allowed:
            return allowed
    raise ValidationError("Time spent must be 0.5 or 1", field="timeSpent")
