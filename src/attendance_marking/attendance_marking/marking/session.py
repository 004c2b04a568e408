from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..core.enums import AttendanceStatus, LoadState
from ..core.exceptions import CommitError, CommitInProgressError, DomainError, RosterFetchError, ValidationError
from ..roster.adapter import RosterFetchAdapter
from ..roster.model import (
    CommitReceipt,
    PeriodDefinition,
    RosterEntry,
    SelectionKey,
    StudentPeriodSummary,
    SubjectPeriodBreakdown,
)
from ..roster.repository import RosterRepository
from .aggregator import AggregateCounts, aggregate, aggregate_subject_breakdown
from .coordinator import CommitCoordinator
from .overlay import EditOverlay
from .view import MergedView

logger = logging.getLogger(__name__)


class MarkingSession:
    """Attendance marking engine for one operator and one active selection.

    The merged view and counts are derived on every access from the committed
    roster plus the pending overlay, so they cannot drift apart.

    Lifecycle per selection:
        loading -> ready(clean) -> ready(dirty) -> saving -> ready(clean) | error(dirty)
    Selecting another key from any state goes back to loading and discards
    pending edits.

    Async Flask views run each request in its own event loop on its own
    thread, so every state transition happens under a thread lock and no
    lock is held across an await.
    """

    def __init__(
        self,
        roster: RosterRepository,
        *,
        fetcher: Optional[RosterFetchAdapter] = None,
        coordinator: Optional[CommitCoordinator] = None,
    ):
        self._roster = roster
        self._fetcher = fetcher or RosterFetchAdapter(roster)
        self._coordinator = coordinator or CommitCoordinator(roster)
        self._overlay = EditOverlay()

        self._key: Optional[SelectionKey] = None
        self._entries: tuple[RosterEntry, ...] = ()
        self._period_definitions: tuple[PeriodDefinition, ...] = ()
        self._loaded = False
        self._state = LoadState.IDLE
        self._last_error: Optional[DomainError] = None
        # Bumped on every select; results tagged with an older value are stale.
        self._generation = 0
        self._lock = threading.Lock()

    # === properties ===

    @property
    def key(self) -> Optional[SelectionKey]:
        return self._key

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def last_error(self) -> Optional[DomainError]:
        return self._last_error

    @property
    def entries(self) -> tuple[RosterEntry, ...]:
        return self._entries

    @property
    def merged_view(self) -> MergedView:
        return MergedView(self._entries, self._overlay.status_map())

    @property
    def committed_view(self) -> MergedView:
        return MergedView(self._entries, {})

    @property
    def aggregate_counts(self) -> AggregateCounts:
        return aggregate(self.merged_view)

    @property
    def period_definitions(self) -> tuple[PeriodDefinition, ...]:
        return self._period_definitions

    @property
    def active_period(self) -> Optional[PeriodDefinition]:
        if self._key is None or self._key.period is None:
            return None
        for p in self._period_definitions:
            if p.period == self._key.period:
                return p
        return None

    def is_dirty(self) -> bool:
        return self._overlay.is_dirty()

    def pending_edits(self) -> dict[str, AttendanceStatus]:
        return self._overlay.status_map()

    # === selection ===

    async def select(self, key: SelectionKey) -> bool:
        """Switch the active selection: drop pending edits, fetch, rebuild.

        This is the only place the active key changes, and it runs even when
        the same key is selected again (a reload). Returns False when a newer
        selection started while this one was fetching; its result is dropped.
        """

        with self._lock:
            if self._overlay.is_dirty():
                logger.info("Discarding %d unsaved edit(s) for %s", len(self._overlay), self._key)
            self._overlay.reset()

            self._generation += 1
            generation = self._generation
            self._key = key
            self._entries = ()
            self._period_definitions = ()
            self._loaded = False
            self._state = LoadState.LOADING
            self._last_error = None
        logger.info("Selecting %s", key)

        try:
            entries = await self._fetcher.fetch(key)
        except RosterFetchError as e:
            with self._lock:
                if generation != self._generation:
                    logger.warning("Roster fetch for superseded selection %s failed: %s", key, e)
                    return False
                self._state = LoadState.ERROR
                self._last_error = e
            raise

        definitions: tuple[PeriodDefinition, ...] = ()
        if key.is_period_scoped:
            try:
                definitions = tuple(await self._roster.fetch_period_definitions(key.class_name, key.section))
            except Exception as e:
                logger.warning("Period definitions unavailable for %s-%s: %s", key.class_name, key.section, e)

        with self._lock:
            if generation != self._generation:
                logger.warning("Ignoring roster for superseded selection %s", key)
                return False

            self._entries = tuple(entries)
            self._period_definitions = definitions
            self._overlay.reset()
            self._loaded = True
            self._state = LoadState.READY
        return True

    async def reload(self) -> bool:
        if self._key is None:
            raise ValidationError("No selection to reload")
        return await self.select(self._key)

    # === editing ===

    def _require_editable(self) -> None:
        if not self._loaded:
            raise ValidationError("Roster is not loaded")
        if self._state == LoadState.SAVING:
            raise ValidationError("Attendance is being saved")

    def cycle(self, subject_id: str) -> Optional[AttendanceStatus]:
        """Advance one subject to the next status. No-op on an empty roster."""

        with self._lock:
            self._require_editable()
            if not self._entries:
                return None
            view = self.merged_view
            if subject_id not in view:
                raise ValidationError(f"Unknown subject: {subject_id}")
            return self._overlay.cycle(subject_id, view.effective_status(subject_id))

    def set_all(self, status: AttendanceStatus) -> None:
        if not isinstance(status, AttendanceStatus):
            raise ValidationError(f"Invalid status: {status!r}")
        with self._lock:
            self._require_editable()
            self._overlay.set_all([e.subject_id for e in self._entries], status)

    def reset(self) -> None:
        """Drop pending edits. Refused while saving: a successful save clears them anyway."""

        with self._lock:
            if self._state == LoadState.SAVING:
                raise ValidationError("Attendance is being saved")
            self._overlay.reset()
            if self._state == LoadState.ERROR and isinstance(self._last_error, CommitError):
                self._state = LoadState.READY
                self._last_error = None

    # === commit ===

    async def commit(self) -> CommitReceipt:
        with self._lock:
            if self._state == LoadState.SAVING:
                raise CommitInProgressError("A save for this selection is already in progress")
            if not self._loaded or self._key is None:
                raise ValidationError("Roster is not loaded")
            if not self._entries:
                return CommitReceipt(success=True, saved_count=0)

            key = self._key
            generation = self._generation
            view = self.merged_view
            submitted = view.status_map()
            subject = self.active_period.subject if self.active_period else None
            self._state = LoadState.SAVING

        try:
            receipt = await self._coordinator.commit(key, view, subject=subject)
        except CommitError as e:
            with self._lock:
                if generation != self._generation:
                    logger.info("Ignoring failed commit for superseded selection %s", key)
                elif isinstance(e, CommitInProgressError):
                    self._state = LoadState.READY
                else:
                    self._state = LoadState.ERROR
                    self._last_error = e
            raise

        with self._lock:
            if generation != self._generation:
                logger.info("Ignoring commit result for superseded selection %s", key)
                return receipt

            self._entries = tuple(e.with_committed(submitted[e.subject_id]) for e in self._entries)
            self._overlay.reset()
            self._state = LoadState.READY
            self._last_error = None
        return receipt

    # === period summaries ===

    def _require_key(self) -> SelectionKey:
        if self._key is None:
            raise ValidationError("No class/section selected")
        return self._key

    async def load_subject_summary(self) -> list[StudentPeriodSummary]:
        key = self._require_key()
        return list(await self._roster.fetch_subject_period_summary(key.class_name, key.section))

    async def subject_breakdown(self) -> list[SubjectPeriodBreakdown]:
        key = self._require_key()
        records = await self._roster.fetch_period_records(key.class_name, key.section)
        return aggregate_subject_breakdown(records)

    # === UI helpers ===

    def snapshot(self) -> dict:
        counts = self.aggregate_counts
        active = self.active_period
        return {
            "selection": self._key.to_dict() if self._key else None,
            "state": self._state.value,
            "dirty": self.is_dirty(),
            "error": str(self._last_error) if self._last_error else None,
            "activePeriod": {
                "period": active.period,
                "subject": active.subject,
                "teacherName": active.teacher_name,
                "startTime": active.start_time,
                "endTime": active.end_time,
            }
            if active
            else None,
            "entries": [row.to_dict() for row in self.merged_view.rows()],
            "counts": counts.as_dict(),
            "attendancePercentage": counts.attendance_percentage,
        }


class SessionRegistry:
    """One marking session per operator, created on first use."""

    def __init__(self, factory: Callable[[], MarkingSession]):
        self._factory = factory
        self._sessions: dict[str, MarkingSession] = {}
        self._lock = threading.Lock()

    def get(self, operator_id: str) -> MarkingSession:
        with self._lock:
            session = self._sessions.get(operator_id)
            if session is None:
                session = self._factory()
                self._sessions[operator_id] = session
            return session

    def discard(self, operator_id: str) -> None:
        with self._lock:
            self._sessions.pop(operator_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
