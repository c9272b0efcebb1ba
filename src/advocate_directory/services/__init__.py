"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> SearchService -> ResultCache -> AdvocateStore
    (HTTP)  -> (Orchestration) -> (Memoization) -> (Data Access)

Usage:
    ```python
    from advocate_directory.services import ResultCache, SearchService

    cache = ResultCache.create(store=InMemoryCacheRepository())
    service = SearchService.create(store=SqlAdvocateRepository.create(), cache=cache)
    ```
"""

from .pagination import calculate_pagination, clamp_limit, clamp_page
from .query_builder import AdvocateQuery, build_advocate_query
from .result_cache import ADVOCATES_TAG, SEARCH_TAG, ResultCache, build_cache_key
from .search_service import SearchResult, SearchService
from .validator import ValidationResult, sanitize_search_query, validate_search_query

__all__ = [
    "ADVOCATES_TAG",
    "SEARCH_TAG",
    "AdvocateQuery",
    "ResultCache",
    "SearchResult",
    "SearchService",
    "ValidationResult",
    "build_advocate_query",
    "build_cache_key",
    "calculate_pagination",
    "clamp_limit",
    "clamp_page",
    "sanitize_search_query",
    "validate_search_query",
]
