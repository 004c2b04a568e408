from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance states. Declaration order is the click-to-advance cycle order."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"
    EXCUSED = "excused"


class LoadState(str, Enum):
    """Lifecycle of a marking session, as reported to the display layer."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"
    ERROR = "error"


class AttendanceBand(str, Enum):
    """Colour band for an attendance percentage."""

    GOOD = "good"
    WARNING = "warning"
    SHORTAGE = "shortage"
