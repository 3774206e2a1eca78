from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.exceptions import ValidationError


def require_non_empty(value, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive_int(value, field_name: str) -> int:
    """Coerce ``value`` (int or numeric string) to a positive int."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer, got: {value!r}")
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip() if value is not None else ""
        if not text.isdigit():
            raise ValidationError(f"{field_name} must be a positive integer, got: {value!r}")
        parsed = int(text)
    if parsed <= 0:
        raise ValidationError(f"{field_name} must be a positive integer, got: {value!r}")
    return parsed


def require_positive_decimal(value, field_name: str) -> Decimal:
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError):
        raise ValidationError(f"{field_name} must be a number, got: {value!r}")
    if not parsed.is_finite() or parsed <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return parsed
