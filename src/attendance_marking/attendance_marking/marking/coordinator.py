from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.exceptions import CommitError, CommitInProgressError
from ..roster.model import CommitReceipt, CommitRecord, CommitRequest, SelectionKey
from ..roster.repository import RosterRepository
from .view import MergedView

logger = logging.getLogger(__name__)


def build_commit_request(key: SelectionKey, view: MergedView, *, subject: Optional[str] = None) -> CommitRequest:
    """One record per roster entry with its effective status; the whole roster is resent."""

    records = tuple(
        CommitRecord(subject_id=row.entry.subject_id, status=row.status, remarks=row.entry.remarks)
        for row in view.rows()
    )
    return CommitRequest(key=key, records=records, subject=subject)


class CommitCoordinator:
    """Submits full-roster batches, at most one in flight per selection key.

    The coordinator never touches pending edits; clearing them on success is
    the session's job, so a failure leaves them exactly as they were.

    Async Flask views run each request in its own event loop on its own
    thread, so the in-flight set is guarded by a thread lock rather than an
    asyncio primitive.
    """

    def __init__(self, roster: RosterRepository):
        self._roster = roster
        self._in_flight: set[SelectionKey] = set()
        self._lock = threading.Lock()

    def is_in_flight(self, key: SelectionKey) -> bool:
        with self._lock:
            return key in self._in_flight

    def _claim(self, key: SelectionKey) -> None:
        with self._lock:
            if key in self._in_flight:
                raise CommitInProgressError("A save for this selection is already in progress")
            self._in_flight.add(key)

    def _release(self, key: SelectionKey) -> None:
        with self._lock:
            self._in_flight.discard(key)

    async def commit(self, key: SelectionKey, view: MergedView, *, subject: Optional[str] = None) -> CommitReceipt:
        self._claim(key)
        try:
            request = build_commit_request(key, view, subject=subject)
            try:
                receipt = await self._roster.commit_attendance(request)
            except Exception as e:
                logger.warning("Commit failed for %s: %s", key, e)
                raise CommitError("Failed to save attendance. Please try again.") from e
        finally:
            self._release(key)

        if not receipt.success:
            logger.warning("Commit rejected by roster service for %s", key)
            raise CommitError("Attendance save was rejected by the server")

        logger.info("Committed %d record(s) for %s", len(request.records), key)
        return receipt
