"""Repository layer for data access.

This layer abstracts external dependencies (relational store, Redis)
behind protocol-based interfaces. The repositories are protocol-based
(structural typing), not inheritance-based.
"""

from advocate_directory.protocols import AdvocateStore, CacheStore

from .memory_repository import InMemoryCacheRepository
from .redis_repository import RedisCacheRepository
from .sql_advocate_repository import SqlAdvocateRepository

__all__ = [
    "AdvocateStore",
    "CacheStore",
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    "SqlAdvocateRepository",
]
