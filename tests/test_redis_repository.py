"""Tests for the Redis cache backend against a stub asyncio client."""

import json
import time

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from advocate_directory.entities import CacheEntryEntity
from advocate_directory.exceptions import CacheBackendError
from advocate_directory.repositories import RedisCacheRepository


class StubPipeline:
    """Queues calls and replays them against the stub client on execute()."""

    def __init__(self, client: "StubRedis") -> None:
        self._client = client
        self._ops: list[tuple] = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self._ops.append((name, args, kwargs))
            return self

        return queue

    async def execute(self):
        return [await getattr(self._client, name)(*args, **kwargs) for name, args, kwargs in self._ops]


class StubRedis:
    """Just enough of redis.asyncio.Redis (decode_responses=True) for the repository.

    Key TTLs are recorded, not enforced; ``-1`` means no expiry.
    """

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.zsets: dict[str, dict[str, float]] = {}
        self.ttls: dict[str, int] = {}

    def pipeline(self, transaction=True):
        return StubPipeline(self)

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex if ex is not None else -1
        return True

    async def incr(self, key):
        self.data[key] = str(int(self.data.get(key, "0")) + 1)
        return int(self.data[key])

    async def zadd(self, key, mapping):
        members = self.zsets.setdefault(key, {})
        added = sum(1 for member in mapping if member not in members)
        members.update(mapping)
        return added

    async def zremrangebyscore(self, key, min, max):
        members = self.zsets.get(key, {})
        doomed = [member for member, score in members.items() if float(min) <= score <= float(max)]
        for member in doomed:
            del members[member]
        return len(doomed)

    async def zrange(self, key, start, end):
        members = sorted(self.zsets.get(key, {}).items(), key=lambda item: item[1])
        return [member for member, _ in members]

    async def expire(self, key, seconds, nx=False, gt=False):
        current = self.ttls.get(key, -1)
        if nx and current != -1:
            return False
        # GT treats a key without expiry as infinite
        if gt and (current == -1 or seconds <= current):
            return False
        self.ttls[key] = seconds
        return True

    async def delete(self, *keys):
        deleted = 0
        for key in keys:
            if self.data.pop(key, None) is not None or self.zsets.pop(key, None) is not None:
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    async def scan_iter(self, match=None):
        prefix = match.rstrip("*") if match else ""
        for key in list(self.data) + list(self.zsets):
            if key.startswith(prefix):
                yield key

    async def ping(self):
        return True


class DownRedis(StubRedis):
    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def zrange(self, key, start, end):
        raise RedisConnectionError("connection refused")

    async def ping(self):
        raise RedisConnectionError("connection refused")

    def pipeline(self, transaction=True):
        raise RedisConnectionError("connection refused")


@pytest.fixture
def clock(monkeypatch):
    now = [1_000_000.0]
    monkeypatch.setattr(time, "time", lambda: now[0])
    return now


@pytest.fixture
def stub_client() -> StubRedis:
    return StubRedis()


@pytest.fixture
def repository(stub_client) -> RedisCacheRepository:
    return RedisCacheRepository.create(redis_client=stub_client, key_prefix="advocates")


async def test_set_then_get_round_trips_entry(repository, stub_client):
    entry = CacheEntryEntity.build("advocates:list:count:[\"\"]", 42, ttl=300, tags=("advocates",))
    await repository.set(entry, ttl=300)

    assert stub_client.ttls[entry.key] == 300
    assert json.loads(stub_client.data[entry.key])["value"] == 42
    assert await repository.get(entry.key) == entry


async def test_tags_are_tracked_and_invalidated(repository, stub_client):
    await repository.set(CacheEntryEntity.build("advocates:list:a", 1, 300, ("advocates",)), ttl=300)
    await repository.set(CacheEntryEntity.build("advocates:search:b", 2, 60, ("advocates", "search")), ttl=60)

    assert set(stub_client.zsets["advocates:tag:search"]) == {"advocates:search:b"}
    assert await repository.count_all() == 2

    assert await repository.invalidate_tag("search") == 1
    assert await repository.get("advocates:search:b") is None
    assert await repository.get("advocates:list:a") is not None
    assert "advocates:tag:search" not in stub_client.zsets


async def test_tag_index_drops_expired_members(repository, stub_client, clock):
    for i in range(50):
        entry = CacheEntryEntity.build(f"advocates:search:rows:[\"q{i}\"]", i, 1, ("advocates", "search"))
        await repository.set(entry, ttl=1)
    assert len(stub_client.zsets["advocates:tag:search"]) == 50
    assert stub_client.ttls["advocates:tag:search"] == 1

    clock[0] += 2
    await repository.set(CacheEntryEntity.build("advocates:search:rows:[\"late\"]", 0, 1, ("search",)), ttl=1)
    assert list(stub_client.zsets["advocates:tag:search"]) == ["advocates:search:rows:[\"late\"]"]


async def test_tag_index_lives_as_long_as_its_longest_entry(repository, stub_client):
    await repository.set(CacheEntryEntity.build("advocates:list:a", 1, 300, ("advocates",)), ttl=300)
    await repository.set(CacheEntryEntity.build("advocates:search:b", 2, 60, ("advocates", "search")), ttl=60)
    assert stub_client.ttls["advocates:tag:advocates"] == 300
    assert stub_client.ttls["advocates:tag:search"] == 60


async def test_invalidation_bumps_generation(repository):
    assert await repository.generation("advocates") == 0
    await repository.set(CacheEntryEntity.build("advocates:list:a", 1, 300, ("advocates",)), ttl=300)
    await repository.invalidate_tag("advocates")
    await repository.invalidate_tag("advocates")
    assert await repository.generation("advocates") == 2
    assert await repository.generation("search") == 0


async def test_missing_key_returns_none(repository):
    assert await repository.get("advocates:nope") is None


async def test_corrupt_entry_raises_backend_error(repository, stub_client):
    stub_client.data["advocates:bad"] = "not json"
    with pytest.raises(CacheBackendError):
        await repository.get("advocates:bad")


async def test_clear_all_removes_prefixed_keys(repository, stub_client):
    await repository.set(CacheEntryEntity.build("advocates:list:a", 1, 300, ("advocates",)), ttl=300)
    await repository.invalidate_tag("search")
    stub_client.data["unrelated"] = "x"
    assert await repository.clear_all() == 2
    assert stub_client.data == {"unrelated": "x", "advocates:gen:search": "1"}
    assert await repository.count_all() == 0


async def test_connection_errors_become_backend_errors():
    repository = RedisCacheRepository.create(redis_client=DownRedis(), key_prefix="advocates")
    with pytest.raises(CacheBackendError):
        await repository.get("advocates:k")
    with pytest.raises(CacheBackendError):
        await repository.set(CacheEntryEntity.build("advocates:k", 1, 60), ttl=60)
    with pytest.raises(CacheBackendError):
        await repository.invalidate_tag("advocates")
    with pytest.raises(CacheBackendError):
        await repository.generation("advocates")
    assert await repository.health_check() is False
