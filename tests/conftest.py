from __future__ import annotations

import asyncio
import threading
import time
from datetime import date
from typing import Optional

import pytest

from attendance_marking.core.enums import AttendanceStatus
from attendance_marking.core.exceptions import ServiceError
from attendance_marking.roster.model import (
    CommitReceipt,
    CommitRequest,
    PeriodDefinition,
    PeriodRecord,
    RosterEntry,
    SelectionKey,
    StudentPeriodSummary,
)


class InMemoryRoster:
    """Roster service double. Commits are applied to the stored rosters like a real backend."""

    def __init__(self):
        self.rosters: dict[SelectionKey, list[RosterEntry]] = {}
        self.definitions: dict[tuple[str, str], list[PeriodDefinition]] = {}
        self.summaries: dict[tuple[str, str], list[StudentPeriodSummary]] = {}
        self.records: dict[tuple[str, str], list[PeriodRecord]] = {}
        self.commits: list[CommitRequest] = []
        self.fetch_calls: list[SelectionKey] = []

        self.fail_fetch = False
        self.fail_commit = False
        self.reject_commit = False
        # When set, fetch/commit wait on these events before answering.
        self.fetch_gates: dict[SelectionKey, asyncio.Event] = {}
        self.commit_gate: Optional[asyncio.Event] = None
        # Thread-safe variant for tests that commit from several event loops at once.
        self.commit_release: Optional[threading.Event] = None

    async def fetch_roster(self, key: SelectionKey):
        self.fetch_calls.append(key)
        gate = self.fetch_gates.get(key)
        if gate is not None:
            await gate.wait()
        if self.fail_fetch:
            raise ServiceError("GET /attendance/students returned HTTP 503", status_code=503)
        return list(self.rosters.get(key, []))

    async def commit_attendance(self, request: CommitRequest) -> CommitReceipt:
        self.commits.append(request)
        if self.commit_gate is not None:
            await self.commit_gate.wait()
        if self.commit_release is not None:
            await asyncio.to_thread(self.commit_release.wait, 5)
        if self.fail_commit:
            raise ServiceError("POST /attendance failed: connection reset")
        if self.reject_commit:
            return CommitReceipt(success=False, saved_count=0)

        statuses = {r.subject_id: r.status for r in request.records}
        self.rosters[request.key] = [
            e.with_committed(statuses.get(e.subject_id, e.base_status)) for e in self.rosters.get(request.key, [])
        ]
        return CommitReceipt(success=True, saved_count=len(request.records))

    async def fetch_period_definitions(self, class_name: str, section: str):
        return list(self.definitions.get((class_name, section), []))

    async def fetch_subject_period_summary(self, class_name: str, section: str):
        return list(self.summaries.get((class_name, section), []))

    async def fetch_period_records(self, class_name: str, section: str):
        return list(self.records.get((class_name, section), []))


def make_entries(*statuses: Optional[AttendanceStatus]) -> list[RosterEntry]:
    return [
        RosterEntry(subject_id=f"s{i}", roll_number=i, name=f"Student {i}", committed_status=status)
        for i, status in enumerate(statuses, start=1)
    ]


@pytest.fixture
def roster_repo():
    return InMemoryRoster()


@pytest.fixture
def day_key():
    return SelectionKey(date=date(2026, 3, 2), class_name="Class 10", section="A")


@pytest.fixture
def period_key():
    return SelectionKey(date=date(2026, 3, 2), class_name="Class 10", section="A", period=1)


@pytest.fixture
def other_period_key():
    return SelectionKey(date=date(2026, 3, 2), class_name="Class 10", section="A", period=2)


@pytest.fixture
def three_present():
    p = AttendanceStatus.PRESENT
    return make_entries(p, p, p)


@pytest.fixture
def entries_factory():
    return make_entries


@pytest.fixture
def run_in_threads():
    """Start `workers` threads together, each running `call` in its own event loop.

    The first call to reach the repository blocks on `release` until every other
    thread has finished, so all of them overlap with it.
    """

    def run(call, *, workers: int, release: threading.Event):
        barrier = threading.Barrier(workers)
        results: list = []
        errors: list[BaseException] = []

        def worker():
            barrier.wait()
            try:
                results.append(asyncio.run(call()))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(workers)]
        for t in threads:
            t.start()
        deadline = time.monotonic() + 5
        while len(results) + len(errors) < workers - 1 and time.monotonic() < deadline:
            time.sleep(0.01)
        release.set()
        for t in threads:
            t.join(5)
        return results, errors

    return run
