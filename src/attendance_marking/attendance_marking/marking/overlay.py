"""
In-memory store of attendance edits that have not been committed yet.

`EditOverlay` sits on top of the committed roster for exactly one selection.
It is created empty when a roster loads, grows through cycle and bulk
operations, and is cleared after a successful commit or a selection change.
It is never partially persisted.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Optional

from ..core.enums import AttendanceStatus
from .status import next_status


class EditOverlay:
    """Pending statuses keyed by subject id.

    Notes:
        - No roster validation happens here; the owning session only passes
          ids that belong to the active roster.
        - `is_dirty()` is derived from the contents, never tracked separately.
    """

    def __init__(self):
        self._pending: dict[str, AttendanceStatus] = {}

    def stage(self, subject_id: str, status: AttendanceStatus) -> None:
        self._pending[subject_id] = status

    def unstage(self, subject_id: str) -> None:
        self._pending.pop(subject_id, None)

    def cycle(self, subject_id: str, current: AttendanceStatus) -> AttendanceStatus:
        """
        Advance one subject to the status after `current` and stage it.

        Every call is a transition, so repeated calls keep walking the cycle.

        Args:
            subject_id (str): The subject to advance.
            current (AttendanceStatus): Its effective status before the click.

        Returns:
            AttendanceStatus: The newly staged status.
        """
        status = next_status(current)
        self.stage(subject_id, status)
        return status

    def set_all(self, subject_ids: Collection[str], status: AttendanceStatus) -> None:
        """Stage `status` for every given subject, replacing earlier edits."""
        for subject_id in subject_ids:
            self.stage(subject_id, status)

    def reset(self) -> None:
        self._pending.clear()

    def is_dirty(self) -> bool:
        return bool(self._pending)

    def get(self, subject_id: str) -> Optional[AttendanceStatus]:
        return self._pending.get(subject_id)

    def status_map(self) -> dict[str, AttendanceStatus]:
        """Shallow copy of the pending edits."""
        return self._pending.copy()

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, subject_id: object) -> bool:
        return subject_id in self._pending
