"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (PostgreSQL -> SQLite, Redis -> memory)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from advocate_directory.protocols import AdvocateStore, CacheStore

    store: AdvocateStore = SqlAdvocateRepository(database)
    cache: CacheStore = RedisCacheRepository.create()
    cache: CacheStore = InMemoryCacheRepository()
    ```
"""

from .advocate_store import AdvocateStore
from .cache_store import CacheStore

__all__ = [
    "AdvocateStore",
    "CacheStore",
]
