from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


def require_latitude(value: float) -> float:
    v = float(value)
    if not -90.0 <= v <= 90.0:
        raise ValidationError(f"latitude out of range: {value}")
    return v


def require_longitude(value: float) -> float:
    v = float(value)
    if not -180.0 <= v <= 180.0:
        raise ValidationError(f"longitude out of range: {value}")
    return v


def require_positive(value: float, field_name: str) -> float:
    v = float(value)
    if v <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return v
