"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from advocate_directory.config import configure_logging, settings
from advocate_directory.db import Database
from advocate_directory.handlers import AdvocateHandler
from advocate_directory.protocols import CacheStore
from advocate_directory.repositories import (
    InMemoryCacheRepository,
    RedisCacheRepository,
    SqlAdvocateRepository,
)
from advocate_directory.services import ResultCache, SearchService

logger = logging.getLogger(__name__)


def get_search_service(request: Request) -> SearchService:
    """Dependency injection for SearchService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The SearchService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise RuntimeError("SearchService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> AdvocateHandler:
    """Dependency injection for AdvocateHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "advocate_handler", None)
    if handler is None:
        raise RuntimeError("AdvocateHandler not initialized. Check lifespan setup.")
    return handler


def build_cache_store() -> CacheStore:
    """Create the cache backend selected by CACHE_BACKEND."""
    if settings.uses_redis:
        return RedisCacheRepository.create()
    return InMemoryCacheRepository()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Database and repository (data access)
    2. Result cache over the configured backend
    3. Search service (business logic) - app.state.search_service
    4. Handler (HTTP endpoints) - app.state.advocate_handler

    Cleanup:
        Disposes the engine, closes Redis and removes services from app.state
    """
    configure_logging()

    database = Database.create()
    store = SqlAdvocateRepository.create(database=database)
    cache_store = build_cache_store()
    result_cache = ResultCache.create(store=cache_store)
    search_service = SearchService.create(store=store, cache=result_cache)

    app.state.database = database
    app.state.cache_store = cache_store
    app.state.search_service = search_service
    app.state.advocate_handler = AdvocateHandler(search_service=search_service)

    logger.info("Search service initialized (cache backend: %s)", settings.cache_backend)
    logger.info(
        "Page size bounds: [%d, %d], TTLs: list=%ds search=%ds",
        settings.page_limit_min,
        settings.page_limit_max,
        settings.cache_list_ttl,
        settings.cache_search_ttl,
    )
    if not await store.health_check():
        logger.warning("Record store is not reachable at startup")

    yield

    if isinstance(cache_store, RedisCacheRepository):
        await cache_store.close()
    await database.dispose()

    del app.state.advocate_handler
    del app.state.search_service
    del app.state.cache_store
    del app.state.database
    logger.info("Search service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[AdvocateHandler, Depends(get_handler)]
ServiceDep = Annotated[SearchService, Depends(get_search_service)]
