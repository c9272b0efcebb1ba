"""Redis implementation of CacheStore.

Entries are JSON documents stored with a native TTL (``SET ... EX``).
Each tag is a sorted set of the keys carrying it, scored by the entry's
expiry time, so a tag can be invalidated without scanning the keyspace.
Members past their expiry are pruned on every write, and the tag key
itself expires with its longest-lived member.
"""

import json
import time

import redis.asyncio as redis
from redis.exceptions import RedisError

from advocate_directory.config import get_redis_client, settings
from advocate_directory.entities import CacheEntryEntity
from advocate_directory.exceptions import CacheBackendError


class RedisCacheRepository:
    """Redis cache backend.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed. ``EXPIRE`` with ``NX``/``GT``
    needs Redis 7.0 or newer.

    Keys:
        - ``{prefix}:{namespace}:{kind}:[...]`` hold entries
        - ``{prefix}:tag:{tag}`` hold the entry keys for a tag (sorted set)
        - ``{prefix}:gen:{tag}`` count invalidations of a tag
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: asyncio Redis client instance. If None, creates default.
            key_prefix: Prefix shared by every key. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            redis_client: Client to use. If None, builds one from settings.
            key_prefix: Key prefix. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(redis_client=redis_client, key_prefix=key_prefix)

    def _tag_key(self, tag: str) -> str:
        return f"{self._prefix}:tag:{tag}"

    def _generation_key(self, tag: str) -> str:
        return f"{self._prefix}:gen:{tag}"

    async def get(self, key: str) -> CacheEntryEntity | None:
        """Get an entry by key.

        Returns:
            The entry, or None if missing (Redis drops expired keys itself)
        """
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            raise CacheBackendError(f"Redis GET failed: {e}") from e

        if raw is None:
            return None

        try:
            return CacheEntryEntity.from_dict(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise CacheBackendError(f"Corrupt cache entry at {key!r}") from e

    async def set(self, entry: CacheEntryEntity, ttl: int) -> None:
        """Store an entry with TTL and index its key under each tag.

        Args:
            entry: The entry to store
            ttl: Time-to-live in seconds
        """
        payload = json.dumps(entry.to_dict(), separators=(",", ":"))
        now = time.time()
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.set(entry.key, payload, ex=ttl)
            for tag in entry.tags:
                tag_key = self._tag_key(tag)
                pipe.zadd(tag_key, {entry.key: now + ttl})
                pipe.zremrangebyscore(tag_key, "-inf", now)
                # NX covers a fresh key, GT only ever extends
                pipe.expire(tag_key, ttl, nx=True)
                pipe.expire(tag_key, ttl, gt=True)
            await pipe.execute()
        except RedisError as e:
            raise CacheBackendError(f"Redis SET failed: {e}") from e

    async def invalidate_tag(self, tag: str) -> int:
        """Delete every entry carrying the tag and bump its generation.

        Returns:
            Number of entries deleted
        """
        tag_key = self._tag_key(tag)
        try:
            keys = await self._client.zrange(tag_key, 0, -1)
            pipe = self._client.pipeline(transaction=True)
            if keys:
                pipe.delete(*keys)
            pipe.delete(tag_key)
            pipe.incr(self._generation_key(tag))
            results = await pipe.execute()
        except RedisError as e:
            raise CacheBackendError(f"Redis tag invalidation failed: {e}") from e
        return int(results[0]) if keys else 0

    async def generation(self, tag: str) -> int:
        try:
            raw = await self._client.get(self._generation_key(tag))
        except RedisError as e:
            raise CacheBackendError(f"Redis GET failed: {e}") from e
        return int(raw) if raw is not None else 0

    async def clear_all(self) -> int:
        """Delete every entry and tag index under the prefix.

        Generation counters are kept so that computes already in flight
        still see the tags as changed.

        Returns:
            Number of keys deleted (entries and tag sets)
        """
        generation_prefix = f"{self._prefix}:gen:"
        count = 0
        try:
            async for key in self._client.scan_iter(match=f"{self._prefix}:*"):
                if not key.startswith(generation_prefix):
                    count += await self._client.delete(key)
        except RedisError as e:
            raise CacheBackendError(f"Redis clear failed: {e}") from e
        return count

    async def count_all(self) -> int:
        """Count entries under the prefix (tag sets and counters excluded)."""
        bookkeeping = (f"{self._prefix}:tag:", f"{self._prefix}:gen:")
        count = 0
        try:
            async for key in self._client.scan_iter(match=f"{self._prefix}:*"):
                if not key.startswith(bookkeeping):
                    count += 1
        except RedisError as e:
            raise CacheBackendError(f"Redis scan failed: {e}") from e
        return count

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
