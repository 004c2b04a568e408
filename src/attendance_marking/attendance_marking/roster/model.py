from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from ..common.numbers import percentage_of
from ..core.constants import DEFAULT_STATUS
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class SelectionKey:
    """Addressable context for a roster. `period=None` means whole-day attendance."""

    date: date
    class_name: str
    section: str
    period: Optional[int] = None

    @property
    def is_period_scoped(self) -> bool:
        return self.period is not None

    def to_params(self) -> dict[str, str]:
        params = {
            "date": self.date.isoformat(),
            "className": self.class_name,
            "section": self.section,
        }
        if self.period is not None:
            params["period"] = str(self.period)
        return params

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "className": self.class_name,
            "section": self.section,
            "period": self.period,
        }


@dataclass(frozen=True)
class RosterEntry:
    """One trackable student within a selection. Name and roll number are display-only."""

    subject_id: str
    roll_number: int
    name: str
    committed_status: Optional[AttendanceStatus] = None
    remarks: Optional[str] = None

    @property
    def base_status(self) -> AttendanceStatus:
        return self.committed_status or DEFAULT_STATUS

    def with_committed(self, status: AttendanceStatus) -> "RosterEntry":
        return replace(self, committed_status=status)


@dataclass(frozen=True)
class PeriodDefinition:
    period: int
    start_time: str
    end_time: str
    subject: Optional[str] = None
    teacher_name: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class PeriodRecord:
    """Historical period attendance row, input to the subject breakdown."""

    subject_id: str
    subject: str
    status: Optional[AttendanceStatus]
    period: Optional[int] = None
    date: Optional[date] = None


@dataclass(frozen=True)
class SubjectPeriodBreakdown:
    subject: str
    attended: int
    total: int
    percentage: int


@dataclass(frozen=True)
class StudentPeriodSummary:
    subject_id: str
    total_periods: int
    attended_periods: int
    subject_wise: tuple[SubjectPeriodBreakdown, ...] = field(default_factory=tuple)
    name: Optional[str] = None

    @property
    def period_percentage(self) -> Optional[int]:
        return percentage_of(self.attended_periods, self.total_periods)


@dataclass(frozen=True)
class CommitRecord:
    subject_id: str
    status: AttendanceStatus
    remarks: Optional[str] = None

    def to_payload(self) -> dict:
        out = {"subjectId": self.subject_id, "status": self.status.value}
        if self.remarks:
            out["remarks"] = self.remarks
        return out


@dataclass(frozen=True)
class CommitRequest:
    """Full-roster batch save for one selection."""

    key: SelectionKey
    records: tuple[CommitRecord, ...]
    subject: Optional[str] = None

    def to_payload(self) -> dict:
        payload = {
            "date": self.key.date.isoformat(),
            "className": self.key.class_name,
            "section": self.key.section,
            "records": [r.to_payload() for r in self.records],
        }
        if self.key.period is not None:
            payload["period"] = self.key.period
            payload["subject"] = self.subject or ""
        return payload


@dataclass(frozen=True)
class CommitReceipt:
    success: bool
    saved_count: int
