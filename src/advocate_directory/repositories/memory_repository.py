"""In-process implementation of CacheStore.

Suitable for a single worker and for tests. A deployment with several
workers should use the Redis backend so they share results.
"""

import threading
import time

from advocate_directory.entities import CacheEntryEntity


class InMemoryCacheRepository:
    """Dict-backed cache with per-entry expiry and tag index.

    This class satisfies the CacheStore protocol through structural
    typing. A re-entrant lock guards every operation, so it is safe to
    share between coroutines and threads.
    """

    def __init__(self, maxsize: int = 10000) -> None:
        """Initialize the in-memory cache.

        Args:
            maxsize: Maximum number of entries; the oldest are evicted first.
        """
        self._maxsize = maxsize
        self._entries: dict[str, tuple[CacheEntryEntity, float]] = {}
        self._tags: dict[str, set[str]] = {}
        self._generations: dict[str, int] = {}
        self._lock = threading.RLock()

    async def get(self, key: str) -> CacheEntryEntity | None:
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            entry, expires_at = item
            if time.time() >= expires_at:
                self._remove(key)
                return None
            return entry

    async def set(self, entry: CacheEntryEntity, ttl: int) -> None:
        with self._lock:
            # Re-insert so dict order tracks write time
            self._entries.pop(entry.key, None)
            self._entries[entry.key] = (entry, time.time() + ttl)
            for tag in entry.tags:
                self._tags.setdefault(tag, set()).add(entry.key)
            while len(self._entries) > self._maxsize:
                self._remove(next(iter(self._entries)))

    async def invalidate_tag(self, tag: str) -> int:
        with self._lock:
            keys = self._tags.pop(tag, set())
            self._generations[tag] = self._generations.get(tag, 0) + 1
            deleted = 0
            for key in keys:
                if key in self._entries:
                    self._remove(key)
                    deleted += 1
            return deleted

    async def generation(self, tag: str) -> int:
        with self._lock:
            return self._generations.get(tag, 0)

    async def clear_all(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._tags.clear()
            return count

    async def count_all(self) -> int:
        now = time.time()
        with self._lock:
            return sum(1 for _, expires_at in self._entries.values() if expires_at > now)

    async def health_check(self) -> bool:
        return True

    def _remove(self, key: str) -> None:
        item = self._entries.pop(key, None)
        if item is None:
            return
        for tag in item[0].tags:
            keys = self._tags.get(tag)
            if keys is not None:
                keys.discard(key)
                if not keys:
                    del self._tags[tag]
