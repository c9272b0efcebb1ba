"""SQLAlchemy implementation of AdvocateStore.

Works with any async SQLAlchemy driver (asyncpg for PostgreSQL, aiosqlite
for SQLite). All search text reaches the database as bound parameters.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from advocate_directory.config import settings
from advocate_directory.db import Database
from advocate_directory.exceptions import StoreError
from advocate_directory.services.query_builder import AdvocateQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlAdvocateRepository:
    """Relational advocate store.

    This class satisfies the AdvocateStore protocol through structural
    typing - no explicit inheritance needed.

    Every call opens its own session, so a row query and a count query
    can run at the same time. Each call is bounded by a timeout; a timeout
    or driver error surfaces as StoreError.
    """

    def __init__(self, database: Database | None = None, timeout: float | None = None) -> None:
        """Initialize the repository.

        Args:
            database: Session provider. If None, creates one from settings.
            timeout: Per-query timeout in seconds. Defaults to settings.
        """
        self._db = database or Database.create()
        self._timeout = timeout or settings.store_timeout_seconds

    @classmethod
    def create(cls, database: Database | None = None, timeout: float | None = None) -> "SqlAdvocateRepository":
        """Factory method to create SqlAdvocateRepository with defaults."""
        return cls(database=database, timeout=timeout)

    async def find_page(self, query: AdvocateQuery, offset: int, limit: int) -> list[dict[str, Any]]:
        """Fetch one page of advocates matching the query, ordered by id."""

        async def run() -> list[dict[str, Any]]:
            async with self._db.session() as session:
                result = await session.execute(query.rows_statement(offset, limit))
                return [advocate.to_row() for advocate in result.scalars().all()]

        return await self._run("find_page", run())

    async def count(self, query: AdvocateQuery) -> int:
        """Count advocates matching the query."""

        async def run() -> int:
            async with self._db.session() as session:
                result = await session.execute(query.count_statement())
                return int(result.scalar_one())

        return await self._run("count", run())

    async def health_check(self) -> bool:
        """Check if the database is reachable.

        Returns:
            True if healthy, False otherwise
        """

        async def run() -> bool:
            async with self._db.session() as session:
                await session.execute(text("SELECT 1"))
                return True

        try:
            return await self._run("health_check", run())
        except StoreError:
            return False

    async def _run(self, operation: str, coro: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error("Store %s timed out after %.1fs", operation, self._timeout)
            raise StoreError(f"Store {operation} timed out") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("Store %s failed: %s", operation, e.__class__.__name__)
            raise StoreError(f"Store {operation} failed") from e

    @property
    def database(self) -> Database:
        """Get the session provider."""
        return self._db
