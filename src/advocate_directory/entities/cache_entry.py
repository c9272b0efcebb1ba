"""Cache entry domain entity."""

import time
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a memoized store result.

    Attributes:
        key: Cache key (namespace, kind and JSON-encoded parts)
        value: The cached rows (list of dicts) or count (int)
        created_at: When the value was computed (Unix timestamp)
        revalidate_after: When the value becomes stale (Unix timestamp)
        tags: Labels used for bulk invalidation
    """

    key: str
    value: Any
    created_at: float
    revalidate_after: float
    tags: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, key: str, value: Any, ttl: int, tags: tuple[str, ...] = ()) -> "CacheEntryEntity":
        """Create an entry that expires ``ttl`` seconds from now."""
        now = time.time()
        return cls(key=key, value=value, created_at=now, revalidate_after=now + ttl, tags=tuple(tags))

    def is_fresh(self, now: float | None = None) -> bool:
        """Return True if the entry has not reached its revalidation time."""
        return (now if now is not None else time.time()) < self.revalidate_after

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value,
            "created_at": self.created_at,
            "revalidate_after": self.revalidate_after,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntryEntity":
        return cls(
            key=data["key"],
            value=data["value"],
            created_at=float(data["created_at"]),
            revalidate_after=float(data["revalidate_after"]),
            tags=tuple(data.get("tags") or ()),
        )
