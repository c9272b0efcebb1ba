"""Page metadata domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PageEntity:
    """Pagination metadata for one response.

    Derived per request from the current count; never cached by itself.
    """

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @property
    def offset(self) -> int:
        """Number of rows to skip for this page."""
        return (self.page - 1) * self.limit
