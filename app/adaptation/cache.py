"""
In-memory snapshot cache.

Snapshots are a pure function of (routine, active tokens, calendar day), so
they can be reused for the rest of the day as long as the routine and the
active context do not change.  Keys are bucketed to the day; callers
invalidate a routine after editing it.
"""

from __future__ import annotations

import datetime
import logging
import threading
from typing import Iterable, NamedTuple, Optional

from app.schemas.snapshot import RoutineSnapshot

logger = logging.getLogger(__name__)


class CacheKey(NamedTuple):
    routine_id: int
    tokens: frozenset[str]
    day: datetime.date

    @classmethod
    def build(
        cls,
        routine_id: int,
        tokens: Iterable[str],
        on: datetime.date | datetime.datetime,
    ) -> CacheKey:
        day = on.date() if isinstance(on, datetime.datetime) else on
        return cls(routine_id, frozenset(tokens), day)


class SnapshotCache:
    """Thread-safe snapshot cache."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, RoutineSnapshot] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[RoutineSnapshot]:
        with self._lock:
            snapshot = self._entries.get(key)
        if snapshot is None:
            logger.debug("Snapshot cache miss: routine %s on %s", key.routine_id, key.day)
        else:
            logger.debug("Snapshot cache hit: routine %s on %s", key.routine_id, key.day)
        return snapshot

    def set(self, key: CacheKey, snapshot: RoutineSnapshot) -> None:
        with self._lock:
            self._entries[key] = snapshot

    def invalidate_routine(self, routine_id: int) -> int:
        """Drop every entry of *routine_id*.  Returns the number removed."""
        return self._remove(lambda k: k.routine_id == routine_id)

    def invalidate_date(self, day: datetime.date) -> int:
        """Drop every entry for *day*."""
        return self._remove(lambda k: k.day == day)

    def invalidate_before(self, day: datetime.date) -> int:
        """Drop entries older than *day* (typically today)."""
        return self._remove(lambda k: k.day < day)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _remove(self, predicate) -> int:
        with self._lock:
            stale = [k for k in self._entries if predicate(k)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Snapshot cache: invalidated %d entries", len(stale))
        return len(stale)


# Process-wide cache used by the service layer.
snapshot_cache = SnapshotCache()
