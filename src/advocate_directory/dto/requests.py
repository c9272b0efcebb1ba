"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


def _parse_int(value: str | int | None) -> int | None:
    """Parse a query parameter leniently; anything non-integer means 'not given'."""
    if value is None or isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        return None


class SearchAdvocatesRequest(BaseModel):
    """Request DTO for listing and searching advocates.

    Page and limit are not range-checked here; the service clamps them.
    """

    search: str | None = Field(None, description="Free-text search; blank means list all")
    page: int | None = Field(None, description="1-based page number (default 1)")
    limit: int | None = Field(None, description="Page size (clamped to the configured bounds)")

    @classmethod
    def from_query(
        cls,
        search: str | None = None,
        page: str | int | None = None,
        limit: str | int | None = None,
    ) -> "SearchAdvocatesRequest":
        """Build a request from raw query-string values."""
        return cls(search=search, page=_parse_int(page), limit=_parse_int(limit))
