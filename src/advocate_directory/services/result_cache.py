"""Result cache for store lookups.

Memoizes rows and counts keyed by (namespace, kind, query text, page,
limit) for a fixed time window per tag class, with tag-based bulk
invalidation. Backend failures degrade to uncached computation.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from advocate_directory.config import settings
from advocate_directory.entities import CacheEntryEntity
from advocate_directory.exceptions import CacheBackendError
from advocate_directory.protocols import CacheStore
from advocate_directory.services.query_builder import LIST_NAMESPACE

logger = logging.getLogger(__name__)

T = TypeVar("T")

ADVOCATES_TAG = "advocates"
SEARCH_TAG = "search"


def build_cache_key(prefix: str, namespace: str, kind: str, *parts: Any) -> str:
    """Build an injective cache key.

    Parts are JSON-encoded as a list, so distinct (text, page, limit)
    tuples can never produce the same key.

    Example:
        ```python
        build_cache_key("advocates", "search", "rows", "smith", 1, 10)
        # 'advocates:search:rows:["smith",1,10]'
        ```
    """
    encoded = json.dumps(list(parts), separators=(",", ":"), ensure_ascii=False)
    return f"{prefix}:{namespace}:{kind}:{encoded}"


class ResultCache:
    """Cache orchestration over a CacheStore backend.

    Concurrent misses for the same key within one process compute once
    (per-key asyncio.Lock). Across processes duplicate computation may
    happen; the last write for a key wins.

    Example:
        ```python
        from advocate_directory.repositories import InMemoryCacheRepository
        from advocate_directory.services import ResultCache

        cache = ResultCache.create(store=InMemoryCacheRepository())
        rows = await cache.get_or_compute(key, fetch_rows, ttl=60, tags=("advocates",))
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        list_ttl: int | None = None,
        search_ttl: int | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the result cache.

        Args:
            store: Cache storage backend (required).
            list_ttl: TTL in seconds for "list all" results. Defaults to settings.
            search_ttl: TTL in seconds for search results. Defaults to settings.
            key_prefix: Prefix for every key. Defaults to settings.
        """
        self._store = store
        self._list_ttl = list_ttl or settings.cache_list_ttl
        self._search_ttl = search_ttl or settings.cache_search_ttl
        self._prefix = key_prefix or settings.cache_key_prefix
        self._locks: dict[str, asyncio.Lock] = {}
        self._hits = 0
        self._misses = 0
        # Bumped by every invalidation or clear issued through this instance
        self._epoch = 0

    @classmethod
    def create(
        cls,
        store: CacheStore,
        list_ttl: int | None = None,
        search_ttl: int | None = None,
        key_prefix: str | None = None,
    ) -> "ResultCache":
        """Factory method to create ResultCache with defaults from settings."""
        return cls(store=store, list_ttl=list_ttl, search_ttl=search_ttl, key_prefix=key_prefix)

    def key(self, namespace: str, kind: str, *parts: Any) -> str:
        """Build a key under this cache's prefix."""
        return build_cache_key(self._prefix, namespace, kind, *parts)

    def ttl_for(self, namespace: str) -> int:
        return self._list_ttl if namespace == LIST_NAMESPACE else self._search_ttl

    def tags_for(self, namespace: str) -> tuple[str, ...]:
        if namespace == LIST_NAMESPACE:
            return (ADVOCATES_TAG,)
        return (ADVOCATES_TAG, SEARCH_TAG)

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl: int,
        tags: tuple[str, ...] = (),
    ) -> T:
        """Return the cached value for key, computing and storing it on a miss.

        Business logic:
        1. Return a fresh entry if one exists
        2. Otherwise take the per-key lock and check again
        3. Compute and return; store with TTL and tags unless one of the tags
           was invalidated (or the cache cleared) while computing

        Args:
            key: Cache key (see build_cache_key)
            compute: Coroutine factory producing the value on a miss
            ttl: Time-to-live in seconds
            tags: Tags for bulk invalidation

        Returns:
            The cached or freshly computed value

        Raises:
            Whatever ``compute`` raises; nothing is stored in that case.
        """
        entry = await self._read(key)
        if entry is not None:
            self._hits += 1
            return entry.value

        lock = self._locks.setdefault(key, asyncio.Lock())
        try:
            async with lock:
                entry = await self._read(key)
                if entry is not None:
                    self._hits += 1
                    return entry.value

                self._misses += 1
                logger.debug("Cache miss: %s", key)
                epoch = self._epoch
                generations = await self._generations(tags)
                value = await compute()
                if generations is None:
                    return value
                if epoch != self._epoch or generations != await self._generations(tags):
                    logger.info("Not caching %r: invalidated while computing", key)
                    return value
                await self._write(CacheEntryEntity.build(key, value, ttl, tags), ttl)
                return value
        finally:
            if not lock.locked() and self._locks.get(key) is lock:
                del self._locks[key]

    async def invalidate_tag(self, tag: str) -> int:
        """Drop every entry carrying the tag.

        Returns:
            Number of entries deleted
        """
        self._epoch += 1
        count = await self._store.invalidate_tag(tag)
        logger.info("Invalidated cache tag %r (%d entries)", tag, count)
        return count

    async def clear(self) -> int:
        """Clear all cache entries and reset statistics."""
        self._epoch += 1
        self._hits = 0
        self._misses = 0
        return await self._store.clear_all()

    async def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, entry count and TTLs
        """
        try:
            entries = await self._store.count_all()
        except CacheBackendError:
            logger.error("Cache backend unavailable while collecting stats", exc_info=True)
            entries = -1
        return {
            "hits": self._hits,
            "misses": self._misses,
            "entries": entries,
            "list_ttl": self._list_ttl,
            "search_ttl": self._search_ttl,
        }

    async def is_healthy(self) -> bool:
        return await self._store.health_check()

    async def _read(self, key: str) -> CacheEntryEntity | None:
        try:
            entry = await self._store.get(key)
        except CacheBackendError:
            logger.error("Cache GET failed for key %r, computing directly", key, exc_info=True)
            return None
        if entry is None or not entry.is_fresh():
            return None
        logger.debug("Cache hit: %s", key)
        return entry

    async def _generations(self, tags: tuple[str, ...]) -> tuple[int, ...] | None:
        try:
            return tuple([await self._store.generation(tag) for tag in tags])
        except CacheBackendError:
            logger.error("Cache generation lookup failed for tags %r", tags, exc_info=True)
            return None

    async def _write(self, entry: CacheEntryEntity, ttl: int) -> None:
        try:
            await self._store.set(entry, ttl)
        except CacheBackendError:
            logger.error("Cache SET failed for key %r", entry.key, exc_info=True)

    @property
    def store(self) -> CacheStore:
        """Get the underlying cache backend (for testing)."""
        return self._store
