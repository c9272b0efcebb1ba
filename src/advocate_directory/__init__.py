"""Advocate Directory - searchable, paginated advocate records with cached lookups.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (AdvocateStore, CacheStore)
    - repositories: Data access implementations (SQLAlchemy, Redis, in-memory)
    - services: Business logic (validation, query building, caching, pagination)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from advocate_directory.repositories import InMemoryCacheRepository, SqlAdvocateRepository
    from advocate_directory.services import ResultCache, SearchService

    service = SearchService.create(
        store=SqlAdvocateRepository.create(),
        cache=ResultCache.create(store=InMemoryCacheRepository()),
    )
    result = await service.search("smith", page=1, limit=10)
    ```

For HTTP API:
    ```python
    from advocate_directory.api.app import app
    ```
"""

from advocate_directory.config import get_redis_client, settings
from advocate_directory.dto import AdvocateListResponse, SearchAdvocatesRequest
from advocate_directory.entities import AdvocateEntity, CacheEntryEntity, PageEntity
from advocate_directory.exceptions import (
    AdvocateDirectoryError,
    CacheBackendError,
    SearchValidationError,
    StoreError,
)
from advocate_directory.handlers import AdvocateHandler
from advocate_directory.protocols import AdvocateStore, CacheStore
from advocate_directory.repositories import (
    InMemoryCacheRepository,
    RedisCacheRepository,
    SqlAdvocateRepository,
)
from advocate_directory.services import ResultCache, SearchService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "AdvocateStore",
    "CacheStore",
    # Services (business logic)
    "ResultCache",
    "SearchService",
    # Handlers (HTTP)
    "AdvocateHandler",
    # Repositories (data access)
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    "SqlAdvocateRepository",
    # Entities (domain models)
    "AdvocateEntity",
    "CacheEntryEntity",
    "PageEntity",
    # DTOs (API contracts)
    "AdvocateListResponse",
    "SearchAdvocatesRequest",
    # Errors
    "AdvocateDirectoryError",
    "CacheBackendError",
    "SearchValidationError",
    "StoreError",
]
