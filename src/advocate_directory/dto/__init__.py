"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import SearchAdvocatesRequest
from .responses import (
    AdvocateItem,
    AdvocateListResponse,
    CacheInvalidationResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
    PaginationInfo,
)

__all__ = [
    "SearchAdvocatesRequest",
    "AdvocateItem",
    "AdvocateListResponse",
    "CacheInvalidationResponse",
    "CacheStatsResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "PaginationInfo",
]
