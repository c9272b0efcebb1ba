"""Advocate record store protocol.

Defines the read-only interface the search core needs from the relational
store: a page of rows and a count for the same filter.

Implementations can include:
- SQLAlchemy over PostgreSQL (default)
- SQLAlchemy over SQLite (development, tests)
- In-memory fakes for unit tests
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from advocate_directory.services.query_builder import AdvocateQuery


@runtime_checkable
class AdvocateStore(Protocol):
    """Protocol for advocate record stores.

    Rows are plain JSON-compatible dicts with snake_case keys so they can
    be cached as-is. Implementations must use bound parameters, never
    string interpolation of the search text.
    """

    async def find_page(self, query: "AdvocateQuery", offset: int, limit: int) -> list[dict[str, Any]]:
        """Fetch one page of advocates matching the query.

        Args:
            query: Predicate built by the query builder
            offset: Number of matching rows to skip
            limit: Maximum number of rows to return

        Returns:
            List of advocate rows ordered by id

        Raises:
            StoreError: If the store cannot be reached or the query fails
        """
        ...

    async def count(self, query: "AdvocateQuery") -> int:
        """Count advocates matching the query.

        Raises:
            StoreError: If the store cannot be reached or the query fails
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
