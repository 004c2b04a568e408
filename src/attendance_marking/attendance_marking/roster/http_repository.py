from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

from ..api.connection import ApiConnection
from ..api.http_base import first_present, get_json, post_json, unwrap_data
from ..common.numbers import percentage_of
from ..common.validators import parse_iso_date
from ..core.exceptions import ServiceError, ValidationError
from ..marking.status import coerce_status
from .model import (
    CommitReceipt,
    CommitRequest,
    PeriodDefinition,
    PeriodRecord,
    RosterEntry,
    SelectionKey,
    StudentPeriodSummary,
    SubjectPeriodBreakdown,
)
from .repository import RosterRepository


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_list(body: Any, *, nested: Optional[str] = None) -> list[dict]:
    data = unwrap_data(body)
    if nested and isinstance(data, dict):
        data = data.get(nested)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ServiceError("Unexpected response shape from roster service")
    return [row for row in data if isinstance(row, dict)]


def _to_roster_entry(r: dict) -> RosterEntry:
    subject_id = first_present(r, "subjectId", "studentId", "id")
    if subject_id is None:
        raise ServiceError("Roster row without a subject id")
    return RosterEntry(
        subject_id=str(subject_id),
        roll_number=_to_int(r.get("rollNumber")),
        name=str(first_present(r, "name", "studentName", default="")),
        committed_status=coerce_status(first_present(r, "committedStatus", "status")),
        remarks=r.get("remarks") or None,
    )


def _to_breakdown(r: dict) -> SubjectPeriodBreakdown:
    attended = _to_int(r.get("attended"))
    total = _to_int(r.get("total"))
    pct = r.get("percentage")
    return SubjectPeriodBreakdown(
        subject=str(r.get("subject") or ""),
        attended=attended,
        total=total,
        percentage=_to_int(pct) if pct is not None else (percentage_of(attended, total) or 0),
    )


class HttpRosterRepository(RosterRepository):
    """REST implementation of the roster service contracts.

    `requests` is blocking, so each call runs in a worker thread to keep the
    engine's coroutines non-blocking.
    """

    def __init__(self, conn: ApiConnection):
        self._conn = conn

    async def fetch_roster(self, key: SelectionKey) -> Sequence[RosterEntry]:
        if key.is_period_scoped:
            body = await asyncio.to_thread(get_json, self._conn, "/attendance/periods", params=key.to_params())
            rows = _as_list(body, nested="records")
        else:
            body = await asyncio.to_thread(get_json, self._conn, "/attendance/students", params=key.to_params())
            rows = _as_list(body)
        return [_to_roster_entry(r) for r in rows]

    async def commit_attendance(self, request: CommitRequest) -> CommitReceipt:
        path = "/attendance/periods" if request.key.is_period_scoped else "/attendance"
        body = await asyncio.to_thread(post_json, self._conn, path, request.to_payload())
        if not isinstance(body, dict):
            raise ServiceError("Unexpected commit response from roster service")
        return CommitReceipt(
            success=bool(body.get("success", False)),
            saved_count=_to_int(first_present(body, "savedCount", "markedCount")),
        )

    async def fetch_period_definitions(self, class_name: str, section: str) -> Sequence[PeriodDefinition]:
        params = {"className": class_name, "section": section}
        body = await asyncio.to_thread(get_json, self._conn, "/attendance/periods/definitions", params=params)
        return [
            PeriodDefinition(
                period=_to_int(r.get("period")),
                start_time=str(r.get("startTime") or ""),
                end_time=str(r.get("endTime") or ""),
                subject=r.get("subject") or None,
                teacher_name=r.get("teacherName") or None,
                name=r.get("name") or None,
            )
            for r in _as_list(body)
        ]

    async def fetch_subject_period_summary(self, class_name: str, section: str) -> Sequence[StudentPeriodSummary]:
        params = {"className": class_name, "section": section}
        body = await asyncio.to_thread(get_json, self._conn, "/attendance/periods/summary", params=params)
        out: list[StudentPeriodSummary] = []
        for r in _as_list(body):
            breakdowns = (_to_breakdown(sw) for sw in r.get("subjectWise") or [] if isinstance(sw, dict))
            out.append(
                StudentPeriodSummary(
                    subject_id=str(first_present(r, "subjectId", "studentId", default="")),
                    total_periods=_to_int(r.get("totalPeriods")),
                    attended_periods=_to_int(r.get("attendedPeriods")),
                    # Subjects with no scheduled periods have no percentage to show.
                    subject_wise=tuple(b for b in breakdowns if b.total > 0),
                    name=first_present(r, "name", "studentName"),
                )
            )
        return out

    async def fetch_period_records(self, class_name: str, section: str) -> Sequence[PeriodRecord]:
        params = {"className": class_name, "section": section}
        body = await asyncio.to_thread(get_json, self._conn, "/attendance/history", params=params)
        out: list[PeriodRecord] = []
        for r in _as_list(body):
            subject = r.get("subject")
            if not subject:
                continue
            try:
                record_date = parse_iso_date(r["date"]) if r.get("date") else None
            except ValidationError:
                record_date = None
            out.append(
                PeriodRecord(
                    subject_id=str(first_present(r, "subjectId", "studentId", default="")),
                    subject=str(subject),
                    status=coerce_status(r.get("status")),
                    period=_to_int(r.get("period")) if r.get("period") is not None else None,
                    date=record_date,
                )
            )
        return out
