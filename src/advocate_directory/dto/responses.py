"""Response DTOs for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdvocateItem(CamelModel):
    """Single advocate in the data array."""

    id: int
    first_name: str
    last_name: str
    city: str
    degree: str
    specialties: list[str] = Field(default_factory=list)
    years_of_experience: int
    phone_number: int
    created_at: str | None = None


class PaginationInfo(CamelModel):
    """Pager state consistent with the data array it accompanies."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool


class AdvocateListResponse(CamelModel):
    """Success envelope for GET /api/advocates."""

    data: list[AdvocateItem] = Field(default_factory=list)
    pagination: PaginationInfo


class ErrorResponse(BaseModel):
    """Error envelope for rejected or failed requests."""

    error: str = Field(..., description="Specific reason (validation) or generic failure")
    message: str = Field(..., description="Human-readable summary")


class CacheInvalidationResponse(BaseModel):
    """Response DTO for cache tag invalidation."""

    success: bool
    tag: str
    deleted_count: int
    message: str


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    hits: int = Field(..., ge=0)
    misses: int = Field(..., ge=0)
    entries: int = Field(..., description="Live entries, or -1 if the backend is unreachable")
    list_ttl_seconds: int = Field(..., ge=0)
    search_ttl_seconds: int = Field(..., ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded' (cache unreachable)")
    store_healthy: bool = Field(..., description="Whether the record store is reachable")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
