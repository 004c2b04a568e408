from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..roster.model import RosterEntry


@dataclass(frozen=True)
class MergedRow:
    entry: RosterEntry
    status: AttendanceStatus
    pending: bool

    def to_dict(self) -> dict:
        return {
            "subjectId": self.entry.subject_id,
            "rollNumber": self.entry.roll_number,
            "name": self.entry.name,
            "committedStatus": self.entry.committed_status.value if self.entry.committed_status else None,
            "status": self.status.value,
            "pending": self.pending,
        }


class MergedView:
    """Read-only roster with pending edits laid over committed statuses.

    Built on demand from the current roster and an overlay snapshot; holding
    on to one after further edits gives a stale picture.
    """

    def __init__(self, entries: Sequence[RosterEntry], overlay: Mapping[str, AttendanceStatus]):
        self._entries = tuple(entries)
        self._overlay = dict(overlay)
        self._index = {e.subject_id: e for e in self._entries}

    @property
    def entries(self) -> tuple[RosterEntry, ...]:
        return self._entries

    def effective_status(self, subject_id: str) -> AttendanceStatus:
        entry = self._index.get(subject_id)
        if entry is None:
            raise ValidationError(f"Unknown subject: {subject_id}")
        return self._overlay.get(subject_id) or entry.base_status

    def rows(self) -> Iterator[MergedRow]:
        for e in self._entries:
            pending = self._overlay.get(e.subject_id)
            yield MergedRow(entry=e, status=pending or e.base_status, pending=pending is not None)

    def status_map(self) -> dict[str, AttendanceStatus]:
        return {row.entry.subject_id: row.status for row in self.rows()}

    def __contains__(self, subject_id: object) -> bool:
        return subject_id in self._index

    def __len__(self) -> int:
        return len(self._entries)
