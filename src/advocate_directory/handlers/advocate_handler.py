"""HTTP handlers for advocate listing and search.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, caching headers and error
envelopes.
"""

import hashlib
import logging

from fastapi import HTTPException, Response, status

from advocate_directory.dto import (
    AdvocateItem,
    AdvocateListResponse,
    CacheInvalidationResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    PaginationInfo,
    SearchAdvocatesRequest,
)
from advocate_directory.entities import AdvocateEntity
from advocate_directory.exceptions import CacheBackendError, SearchValidationError, StoreError
from advocate_directory.services import SearchResult, SearchService

logger = logging.getLogger(__name__)

LIST_CACHE_CONTROL = "public, max-age=30, stale-while-revalidate=60"
SEARCH_CACHE_CONTROL = "public, max-age=60, stale-while-revalidate=120"
NO_STORE = "no-store"

INVALID_QUERY_MESSAGE = "Invalid search query"
INTERNAL_ERROR = "Internal server error"
FETCH_FAILED_MESSAGE = "Failed to fetch advocates"


def _json_response(model, status_code: int, cache_control: str, by_alias: bool = False) -> Response:
    body = model.model_dump_json(by_alias=by_alias).encode()
    headers = {"Cache-Control": cache_control}
    if status_code == status.HTTP_200_OK:
        headers["ETag"] = f'"{hashlib.sha256(body).hexdigest()[:32]}"'
    return Response(content=body, status_code=status_code, media_type="application/json", headers=headers)


def _to_item(advocate: AdvocateEntity) -> AdvocateItem:
    return AdvocateItem(
        id=advocate.id,
        first_name=advocate.first_name,
        last_name=advocate.last_name,
        city=advocate.city,
        degree=advocate.degree,
        specialties=list(advocate.specialties),
        years_of_experience=advocate.years_of_experience,
        phone_number=advocate.phone_number,
        created_at=advocate.created_at,
    )


class AdvocateHandler:
    """HTTP handlers for the advocate directory.

    This handler delegates business logic to SearchService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs (camelCase JSON)
    - Cache-Control and ETag headers
    - 400 for rejected search text, opaque 500 for store failures

    Example:
        ```python
        handler = AdvocateHandler(search_service=service)

        @app.get("/api/advocates")
        async def list_advocates(search: str | None = None, page: str | None = None, limit: str | None = None):
            return await handler.list_advocates(SearchAdvocatesRequest.from_query(search, page, limit))
        ```
    """

    def __init__(self, search_service: SearchService) -> None:
        """Initialize the advocate handler.

        Args:
            search_service: The search service for business logic (required).
        """
        self._service = search_service

    async def list_advocates(self, request: SearchAdvocatesRequest) -> Response:
        """Handle GET /api/advocates requests.

        Args:
            request: The search request DTO

        Returns:
            200 with data and pagination, 400 with a validation reason,
            or 500 with a generic failure
        """
        try:
            result = await self._service.search(request.search, page=request.page, limit=request.limit)
        except SearchValidationError as e:
            return _json_response(
                ErrorResponse(error=e.reason, message=INVALID_QUERY_MESSAGE),
                status.HTTP_400_BAD_REQUEST,
                NO_STORE,
            )
        except StoreError:
            logger.exception("Failed to fetch advocates")
            return _json_response(
                ErrorResponse(error=INTERNAL_ERROR, message=FETCH_FAILED_MESSAGE),
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                NO_STORE,
            )

        return _json_response(
            self.to_response(result),
            status.HTTP_200_OK,
            SEARCH_CACHE_CONTROL if result.is_search else LIST_CACHE_CONTROL,
            by_alias=True,
        )

    @staticmethod
    def to_response(result: SearchResult) -> AdvocateListResponse:
        """Convert a SearchResult to the response envelope."""
        page = result.page
        return AdvocateListResponse(
            data=[_to_item(advocate) for advocate in result.advocates],
            pagination=PaginationInfo(
                page=page.page,
                limit=page.limit,
                total=page.total,
                total_pages=page.total_pages,
                has_next=page.has_next,
                has_prev=page.has_prev,
            ),
        )

    async def invalidate(self, tag: str) -> CacheInvalidationResponse:
        """Handle POST /api/advocates/revalidate requests.

        Raises:
            HTTPException: If the cache backend cannot be reached
        """
        try:
            count = await self._service.invalidate(tag)
        except CacheBackendError as e:
            logger.exception("Cache invalidation failed for tag %r", tag)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Cache backend unavailable",
            ) from e

        return CacheInvalidationResponse(
            success=True,
            tag=tag,
            deleted_count=count,
            message=f"Invalidated cache tag '{tag}'",
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests."""
        stats = await self._service.cache.get_stats()
        return CacheStatsResponse(
            hits=stats["hits"],
            misses=stats["misses"],
            entries=stats["entries"],
            list_ttl_seconds=stats["list_ttl"],
            search_ttl_seconds=stats["search_ttl"],
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Raises:
            HTTPException: 503 if the record store is unreachable
        """
        store_healthy = await self._service.store.health_check()
        cache_healthy = await self._service.cache.is_healthy()

        if not store_healthy:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Record store unavailable",
            )

        return HealthCheckResponse(
            status="healthy" if cache_healthy else "degraded",
            store_healthy=store_healthy,
            cache_healthy=cache_healthy,
        )
