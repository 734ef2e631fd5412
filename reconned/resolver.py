"""Cache-aside batch resolution of usernames to profile snapshots."""
import asyncio
import logging
from typing import Awaitable

from reconned.cache import SnapshotCache
from reconned.config import MAX_CONCURRENT_FETCHES
from reconned.models import ProfileSnapshot
from reconned.platforms.base import ProfileFetcher
from reconned.platforms.instagram.fetcher import TransportError
from reconned.platforms.instagram.parser import normalize_response

_log = logging.getLogger(__name__)


class BatchResolver:
    """Serve snapshots from the cache and fetch the misses concurrently.

    ``resolve_batch`` never raises: a username whose fetch failed at the
    transport level gets an empty snapshot that is not cached, so the next
    request tries again.
    """

    def __init__(
        self,
        fetch: ProfileFetcher,
        cache: SnapshotCache | None = None,
        *,
        max_concurrency: int = MAX_CONCURRENT_FETCHES,
    ) -> None:
        self.cache = cache if cache is not None else SnapshotCache()
        self._fetch = fetch
        self._limit = asyncio.Semaphore(max_concurrency)
        # username -> pending fetch shared by every batch that missed on it
        self._inflight: dict[str, asyncio.Future[ProfileSnapshot]] = {}

    async def resolve_batch(self, usernames: list[str]) -> list[ProfileSnapshot]:
        self.cache.sweep_expired()

        results: list[ProfileSnapshot | None] = [None] * len(usernames)
        # Unique misses in first-seen order, each with every slot it fills.
        misses: dict[str, list[int]] = {}
        for i, username in enumerate(usernames):
            cached = self.cache.lookup(username)
            if cached is not None:
                results[i] = cached
            else:
                misses.setdefault(username, []).append(i)

        if misses:
            _log.debug("%d of %d username(s) missed the cache", len(misses), len(usernames))
            fetched = await asyncio.gather(*(self._resolve_miss(u) for u in misses))
            for (username, positions), snapshot in zip(misses.items(), fetched):
                for i in positions:
                    results[i] = snapshot

        return results  # type: ignore[return-value]

    def _resolve_miss(self, username: str) -> Awaitable[ProfileSnapshot]:
        pending = self._inflight.get(username)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch_and_store(username))
            self._inflight[username] = pending
            pending.add_done_callback(lambda _f, u=username: self._inflight.pop(u, None))
        else:
            _log.debug("joining in-flight fetch for %s", username)
        # One waiter going away must not cancel the fetch for the others.
        return asyncio.shield(pending)

    async def _fetch_and_store(self, username: str) -> ProfileSnapshot:
        # Another batch may have stored it between our lookup and now.
        cached = self.cache.lookup(username)
        if cached is not None:
            return cached

        async with self._limit:
            try:
                raw = await self._fetch(username)
            except TransportError as exc:
                _log.warning("%s", exc)
                return ProfileSnapshot.empty(username)
            except Exception:
                _log.exception("unexpected error fetching %s", username)
                return ProfileSnapshot.empty(username)

        try:
            snapshot = normalize_response(username, raw.status_code, raw.body)
        except Exception:
            _log.exception("unexpected error normalizing %s", username)
            return ProfileSnapshot.empty(username)
        self.cache.insert(username, snapshot)
        return snapshot
