from __future__ import annotations

from typing import Any, Optional

from ..core.constants import DEFAULT_STATUS
from ..core.enums import AttendanceStatus

CYCLE_ORDER: tuple[AttendanceStatus, ...] = tuple(AttendanceStatus)


def coerce_status(value: Any) -> Optional[AttendanceStatus]:
    """Parse a wire value into a status, or None when absent/unrecognised."""

    if isinstance(value, AttendanceStatus):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return AttendanceStatus(value.strip().lower())
    except ValueError:
        return None


def next_status(current: Any) -> AttendanceStatus:
    """Status following `current` in cycle order, wrapping after the last one.

    Unrecognised input (legacy or corrupted data) falls back to the default
    status instead of raising.
    """

    status = coerce_status(current)
    if status is None:
        return DEFAULT_STATUS
    idx = CYCLE_ORDER.index(status)
    return CYCLE_ORDER[(idx + 1) % len(CYCLE_ORDER)]
