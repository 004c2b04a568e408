from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.numbers import percentage_of
from ..core.constants import ATTENDED_STATUSES, DEFAULT_GOOD_PERCENTAGE, DEFAULT_MINIMUM_PERCENTAGE
from ..core.enums import AttendanceBand, AttendanceStatus
from ..roster.model import PeriodRecord, SubjectPeriodBreakdown
from .view import MergedView


@dataclass(frozen=True)
class AggregateCounts:
    """Derived per-status totals over a merged view. Never mutated in place."""

    total: int
    present: int = 0
    absent: int = 0
    late: int = 0
    half_day: int = 0
    excused: int = 0

    def count(self, status: AttendanceStatus) -> int:
        return int(getattr(self, status.value))

    @property
    def attendance_percentage(self) -> Optional[int]:
        return percentage_of(self.present + self.late, self.total)

    def as_dict(self) -> dict[str, int]:
        out = {"total": self.total}
        out.update({s.value: self.count(s) for s in AttendanceStatus})
        return out


def aggregate(view: MergedView) -> AggregateCounts:
    counts = Counter(row.status for row in view.rows())
    return AggregateCounts(total=len(view), **{s.value: counts.get(s, 0) for s in AttendanceStatus})


def aggregate_subject_breakdown(period_records: Iterable[PeriodRecord]) -> list[SubjectPeriodBreakdown]:
    """Per taught subject: attended (present or late) over all recorded periods.

    Subjects without any records are left out rather than shown as 0/0.
    Output follows the order in which subjects first appear.
    """

    attended: dict[str, int] = {}
    total: dict[str, int] = {}
    for rec in period_records:
        total[rec.subject] = total.get(rec.subject, 0) + 1
        attended.setdefault(rec.subject, 0)
        if rec.status in ATTENDED_STATUSES:
            attended[rec.subject] += 1

    out: list[SubjectPeriodBreakdown] = []
    for subject, n in total.items():
        pct = percentage_of(attended[subject], n)
        if pct is None:
            continue
        out.append(SubjectPeriodBreakdown(subject=subject, attended=attended[subject], total=n, percentage=pct))
    return out


def average_percentage(breakdowns: Sequence[SubjectPeriodBreakdown]) -> Optional[int]:
    included = [b.percentage for b in breakdowns if b.total > 0]
    if not included:
        return None
    return percentage_of(sum(included), 100 * len(included))


def attendance_band(
    percentage: Optional[int],
    *,
    good: int = DEFAULT_GOOD_PERCENTAGE,
    minimum: int = DEFAULT_MINIMUM_PERCENTAGE,
) -> Optional[AttendanceBand]:
    if percentage is None:
        return None
    if percentage >= good:
        return AttendanceBand.GOOD
    if percentage >= minimum:
        return AttendanceBand.WARNING
    return AttendanceBand.SHORTAGE
