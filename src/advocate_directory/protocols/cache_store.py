"""Cache storage protocol.

Defines the interface for a key/value backend holding memoized store
results, with per-entry TTL and tag-based bulk invalidation.

Implementations can include:
- Redis (production, shared across processes)
- In-process dict (single worker, tests)
"""

from typing import Protocol, runtime_checkable

from advocate_directory.entities import CacheEntryEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type implementing these methods satisfies the protocol, no
    explicit inheritance needed. Writes for the same key are last
    writer wins.
    """

    async def get(self, key: str) -> CacheEntryEntity | None:
        """Get an entry by key.

        Returns:
            The entry, or None if missing or expired
        """
        ...

    async def set(self, entry: CacheEntryEntity, ttl: int) -> None:
        """Store an entry and register it under each of its tags.

        Args:
            entry: The entry to store
            ttl: Time-to-live in seconds
        """
        ...

    async def invalidate_tag(self, tag: str) -> int:
        """Delete every entry carrying the tag.

        Returns:
            Number of entries deleted
        """
        ...

    async def generation(self, tag: str) -> int:
        """Get the tag's invalidation counter.

        Every ``invalidate_tag`` call for the tag increases it.
        """
        ...

    async def clear_all(self) -> int:
        """Delete all entries.

        Returns:
            Number of entries deleted
        """
        ...

    async def count_all(self) -> int:
        """Count live entries."""
        ...

    async def health_check(self) -> bool:
        """Check if the backend is reachable."""
        ...
