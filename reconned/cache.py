"""In-memory TTL cache of profile snapshots, keyed by username.

Process-lifetime only. Entries expire by age; there is no size bound.
The lock guards pure in-memory work and is never held across an await.
"""
import threading
import time
from typing import Callable

from reconned.models import ProfileSnapshot

CACHE_TTL_SECONDS = 60 * 60


class SnapshotCache:
    def __init__(self, ttl: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[ProfileSnapshot, float]] = {}
        self._lock = threading.Lock()

    def lookup(self, username: str, now: float | None = None) -> ProfileSnapshot | None:
        """Return the cached snapshot while it is younger than the TTL.

        Stale entries read as absent; they are left for ``sweep_expired``.
        """
        now = self._clock() if now is None else now
        with self._lock:
            entry = self._entries.get(username)
        if entry is None:
            return None
        snapshot, inserted_at = entry
        if now - inserted_at < self.ttl:
            return snapshot
        return None

    def sweep_expired(self, now: float | None = None) -> int:
        """Drop every entry whose age is >= TTL. Returns how many were dropped."""
        now = self._clock() if now is None else now
        with self._lock:
            expired = [k for k, (_, ts) in self._entries.items() if now - ts >= self.ttl]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def insert(self, username: str, snapshot: ProfileSnapshot, now: float | None = None) -> None:
        """Store ``snapshot``, overwriting any previous entry for ``username``."""
        now = self._clock() if now is None else now
        with self._lock:
            self._entries[username] = (snapshot, now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, username: object) -> bool:
        with self._lock:
            return username in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
