from __future__ import annotations

import logging
from typing import Iterable

from ..core.exceptions import RosterFetchError
from .model import RosterEntry, SelectionKey
from .repository import RosterRepository

logger = logging.getLogger(__name__)


def normalize_roster(entries: Iterable[RosterEntry]) -> list[RosterEntry]:
    """Drop repeated subject ids (first occurrence wins) and order by roll number.

    The sort is stable, so entries sharing a roll number keep service order.
    """

    seen: set[str] = set()
    unique: list[RosterEntry] = []
    for entry in entries:
        if entry.subject_id in seen:
            continue
        seen.add(entry.subject_id)
        unique.append(entry)
    unique.sort(key=lambda e: e.roll_number)
    return unique


class RosterFetchAdapter:
    """Retrieves the committed roster for a selection.

    The returned subject ids are the ground truth for who is trackable under
    the key. A failure never yields a partial roster.
    """

    def __init__(self, roster: RosterRepository):
        self._roster = roster

    async def fetch(self, key: SelectionKey) -> list[RosterEntry]:
        try:
            raw = list(await self._roster.fetch_roster(key))
        except Exception as e:
            logger.warning("Roster fetch failed for %s: %s", key, e)
            raise RosterFetchError(f"Could not load roster for {key.class_name}-{key.section} on {key.date}") from e

        entries = normalize_roster(raw)
        dropped = len(raw) - len(entries)
        if dropped:
            logger.warning("Dropped %d duplicate roster row(s) for %s", dropped, key)
        return entries
