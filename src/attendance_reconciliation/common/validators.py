from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value.strip()


def require_date_range(start, end, *, max_days: int | None = None) -> None:
    if end < start:
        raise ValidationError("End date must be on or after start date")
    if max_days is not None and (end - start).days + 1 > max_days:
        raise ValidationError(f"Date range is limited to {max_days} days")
