from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def parse_iso_date(value: Any, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, date):
        return value
    raw = require_non_empty(value, field_name)
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def parse_period(value: Any) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    try:
        period = int(value)
    except (TypeError, ValueError):
        raise ValidationError("period must be a positive integer")
    if period < 1:
        raise ValidationError("period must be a positive integer")
    return period


def parse_status(value: Any) -> AttendanceStatus:
    raw = require_non_empty(value, "status").lower()
    try:
        return AttendanceStatus(raw)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"status must be one of: {allowed}")
