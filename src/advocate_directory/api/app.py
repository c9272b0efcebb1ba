from typing import Any

from fastapi import FastAPI, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from advocate_directory.api.dependencies import HandlerDep, lifespan
from advocate_directory.config import settings
from advocate_directory.dto import (
    CacheInvalidationResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    SearchAdvocatesRequest,
)
from advocate_directory.services import ADVOCATES_TAG

API_VERSION = "0.1.0"


def create_app() -> FastAPI:
    """Create the FastAPI application with routes and middleware."""
    app = FastAPI(
        title="Advocate Directory API",
        description="Searchable, paginated advocate directory with cached lookups",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Advocate Directory API",
            "version": API_VERSION,
            "description": "Searchable, paginated advocate directory with cached lookups",
            "endpoints": {
                "advocates": "/api/advocates",
                "revalidate": "/api/advocates/revalidate",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.get(
        "/api/advocates",
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def list_advocates(
        handler: HandlerDep,
        search: str | None = Query(None, description="Free-text search; blank lists all"),
        page: str | None = Query(None, description="1-based page number"),
        limit: str | None = Query(None, description="Page size"),
    ) -> Response:
        """List or search advocates, one page at a time.

        Args:
            search: Optional search text.
            page: Page number; non-integers fall back to 1.
            limit: Page size; clamped to the configured bounds.

        Returns:
            ``{"data": [...], "pagination": {...}}`` or an error envelope.
        """
        return await handler.list_advocates(SearchAdvocatesRequest.from_query(search, page, limit))

    @app.post("/api/advocates/revalidate", response_model=CacheInvalidationResponse)
    async def revalidate(
        handler: HandlerDep,
        tag: str = Query(ADVOCATES_TAG, description="Cache tag to invalidate"),
    ) -> CacheInvalidationResponse:
        """Invalidate cached results for a tag after the underlying data changed."""
        return await handler.invalidate(tag)

    @app.get("/stats", response_model=CacheStatsResponse)
    async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return await handler.get_stats()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "advocate_directory.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
