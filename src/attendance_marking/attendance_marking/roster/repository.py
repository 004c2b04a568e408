from __future__ import annotations

from typing import Protocol, Sequence

from .model import (
    CommitReceipt,
    CommitRequest,
    PeriodDefinition,
    PeriodRecord,
    RosterEntry,
    SelectionKey,
    StudentPeriodSummary,
)


class RosterRepository(Protocol):
    """Remote roster/attendance service as seen by the marking engine."""

    async def fetch_roster(self, key: SelectionKey) -> Sequence[RosterEntry]:
        raise NotImplementedError

    async def commit_attendance(self, request: CommitRequest) -> CommitReceipt:
        """Submit a full-roster batch. Raises on transport or HTTP failure."""

        raise NotImplementedError

    async def fetch_period_definitions(self, class_name: str, section: str) -> Sequence[PeriodDefinition]:
        raise NotImplementedError

    async def fetch_subject_period_summary(self, class_name: str, section: str) -> Sequence[StudentPeriodSummary]:
        raise NotImplementedError

    async def fetch_period_records(self, class_name: str, section: str) -> Sequence[PeriodRecord]:
        raise NotImplementedError
