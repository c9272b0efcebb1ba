"""Search service for the advocate directory.

Orchestrates validation, query building, cache-backed store lookups and
pagination for one request.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from advocate_directory.config import settings
from advocate_directory.entities import AdvocateEntity, PageEntity
from advocate_directory.exceptions import SearchValidationError, StoreError
from advocate_directory.protocols import AdvocateStore
from advocate_directory.services.pagination import calculate_pagination, clamp_limit, clamp_page
from advocate_directory.services.query_builder import AdvocateQuery, build_advocate_query
from advocate_directory.services.result_cache import ADVOCATES_TAG, ResultCache
from advocate_directory.services.validator import validate_search_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """Rows and page metadata for one request.

    Attributes:
        advocates: The requested page of advocates
        page: Pagination metadata computed from the same count
        is_search: True when the search path was taken
    """

    advocates: list[AdvocateEntity]
    page: PageEntity
    is_search: bool


class SearchService:
    """Core search-and-paginate orchestration.

    This service depends on PROTOCOLS, not concrete implementations:
    - AdvocateStore: SQLAlchemy over PostgreSQL or SQLite, or a fake
    - ResultCache over any CacheStore: Redis or in-memory

    Example:
        ```python
        service = SearchService.create(store=repository, cache=result_cache)

        result = await service.search("smith", page=1, limit=10)
        result.page.total_pages
        ```
    """

    def __init__(
        self,
        store: AdvocateStore,
        cache: ResultCache,
        page_max: int | None = None,
        limit_min: int | None = None,
        limit_max: int | None = None,
        limit_default: int | None = None,
    ) -> None:
        """Initialize the search service.

        Args:
            store: Advocate record store (required).
            cache: Result cache (required).
            page_max: Upper bound for page numbers. Defaults to settings.
            limit_min: Floor for page size. Defaults to settings.
            limit_max: Ceiling for page size. Defaults to settings.
            limit_default: Page size when none is requested. Defaults to settings.
        """
        self._store = store
        self._cache = cache
        self._page_max = page_max or settings.page_max
        self._limit_min = limit_min or settings.page_limit_min
        self._limit_max = limit_max or settings.page_limit_max
        self._limit_default = limit_default or settings.page_limit_default

        if self._limit_min < 1 or self._limit_min > self._limit_max:
            raise ValueError("Page size bounds must satisfy 1 <= limit_min <= limit_max")

    @classmethod
    def create(
        cls,
        store: AdvocateStore,
        cache: ResultCache,
        page_max: int | None = None,
        limit_min: int | None = None,
        limit_max: int | None = None,
        limit_default: int | None = None,
    ) -> "SearchService":
        """Factory method to create SearchService with defaults from settings."""
        return cls(
            store=store,
            cache=cache,
            page_max=page_max,
            limit_min=limit_min,
            limit_max=limit_max,
            limit_default=limit_default,
        )

    def normalize(self, page: int | None, limit: int | None) -> tuple[int, int]:
        """Apply defaults and clamp page and limit to their configured bounds."""
        page = clamp_page(1 if page is None else page, self._page_max)
        limit = clamp_limit(self._limit_default if limit is None else limit, self._limit_min, self._limit_max)
        return page, limit

    async def search(
        self,
        search: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> SearchResult:
        """Fetch one page of advocates, optionally filtered by search text.

        Business logic:
        1. Clamp page and limit
        2. Blank or absent text -> list all; otherwise validate and sanitize
        3. Fetch rows and count concurrently through the cache
        4. Compute pagination metadata from the count

        Args:
            search: Raw search text from the request
            page: Requested 1-based page
            limit: Requested page size

        Returns:
            SearchResult with the page of advocates and its metadata

        Raises:
            SearchValidationError: If the text is rejected (no store or cache access)
            StoreError: If either store lookup fails
        """
        page, limit = self.normalize(page, limit)

        if search is None or not search.strip():
            query = build_advocate_query(None)
        else:
            result = validate_search_query(search)
            if not result.is_valid:
                logger.info("Rejected search query: %s", result.error)
                raise SearchValidationError(result.error or "Invalid search query")
            query = build_advocate_query(result.sanitized)

        rows, total = await self._fetch(query, page, limit)
        return SearchResult(
            advocates=[AdvocateEntity.from_row(row) for row in rows],
            page=calculate_pagination(total, page, limit),
            is_search=query.search is not None,
        )

    async def list_all(self, page: int | None = None, limit: int | None = None) -> SearchResult:
        """Fetch one page of all advocates."""
        return await self.search(None, page=page, limit=limit)

    async def invalidate(self, tag: str = ADVOCATES_TAG) -> int:
        """Drop cached results carrying the tag (all advocate results by default)."""
        return await self._cache.invalidate_tag(tag)

    async def _fetch(self, query: AdvocateQuery, page: int, limit: int) -> tuple[list[dict[str, Any]], int]:
        namespace = query.cache_namespace
        ttl = self._cache.ttl_for(namespace)
        tags = self._cache.tags_for(namespace)
        text = query.cache_text
        offset = (page - 1) * limit

        rows_task = asyncio.ensure_future(
            self._cache.get_or_compute(
                self._cache.key(namespace, "rows", text, page, limit),
                lambda: self._store.find_page(query, offset, limit),
                ttl=ttl,
                tags=tags,
            )
        )
        count_task = asyncio.ensure_future(
            self._cache.get_or_compute(
                self._cache.key(namespace, "count", text),
                lambda: self._store.count(query),
                ttl=ttl,
                tags=tags,
            )
        )
        rows, total = await self._gather_or_cancel(rows_task, count_task)
        return rows, total

    @staticmethod
    async def _gather_or_cancel(*tasks: asyncio.Future) -> list[Any]:
        """Await all tasks; if one fails, cancel the rest and re-raise."""
        try:
            return await asyncio.gather(*tasks)
        except StoreError:
            for task in tasks:
                task.cancel()
            raise
        except Exception as e:
            for task in tasks:
                task.cancel()
            logger.exception("Advocate lookup failed")
            raise StoreError("Advocate lookup failed") from e

    @property
    def store(self) -> AdvocateStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def cache(self) -> ResultCache:
        """Get the underlying result cache (for testing)."""
        return self._cache
