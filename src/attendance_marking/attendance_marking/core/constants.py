"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus

DEFAULT_STATUS = AttendanceStatus.PRESENT

# Statuses that count as having attended a period.
ATTENDED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})

DEFAULT_GOOD_PERCENTAGE = 90
DEFAULT_MINIMUM_PERCENTAGE = 75

DEFAULT_API_TIMEOUT_SECONDS = 10.0
