from __future__ import annotations

import asyncio
import logging

import pytest

from attendance_marking.core.enums import AttendanceStatus
from attendance_marking.core.exceptions import RosterFetchError
from attendance_marking.roster.adapter import RosterFetchAdapter, normalize_roster
from attendance_marking.roster.model import RosterEntry


def _entry(subject_id, roll, status=None):
    return RosterEntry(subject_id=subject_id, roll_number=roll, name=subject_id.upper(), committed_status=status)


def test_normalize_keeps_first_duplicate_and_sorts_by_roll():
    rows = [
        _entry("s7", 7),
        _entry("s2", 2, AttendanceStatus.ABSENT),
        _entry("s2", 2, AttendanceStatus.LATE),
        _entry("s1", 1),
    ]

    out = normalize_roster(rows)

    assert [e.subject_id for e in out] == ["s1", "s2", "s7"]
    assert out[1].committed_status == AttendanceStatus.ABSENT


def test_normalize_is_stable_for_equal_roll_numbers():
    out = normalize_roster([_entry("b", 3), _entry("a", 3), _entry("c", 1)])
    assert [e.subject_id for e in out] == ["c", "b", "a"]


def test_fetch_logs_dropped_duplicates(roster_repo, day_key, caplog):
    roster_repo.rosters[day_key] = [_entry("s1", 1), _entry("s1", 1)]
    adapter = RosterFetchAdapter(roster_repo)

    with caplog.at_level(logging.WARNING, logger="attendance_marking.roster.adapter"):
        entries = asyncio.run(adapter.fetch(day_key))

    assert len(entries) == 1
    assert "Dropped 1 duplicate" in caplog.text


def test_fetch_failure_is_wrapped(roster_repo, day_key):
    roster_repo.fail_fetch = True
    adapter = RosterFetchAdapter(roster_repo)

    with pytest.raises(RosterFetchError) as exc:
        asyncio.run(adapter.fetch(day_key))

    assert "Class 10-A" in str(exc.value)
