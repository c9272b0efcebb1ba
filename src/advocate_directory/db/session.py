"""Async SQLAlchemy session management."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from advocate_directory.config import settings
from advocate_directory.db.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Lazy SQLAlchemy engine/session factory wrapper.

    Each call to ``session()`` opens an independent session, so the row
    and count queries of one request can run concurrently.
    """

    def __init__(self, url: str | None = None, echo: bool | None = None, **engine_kwargs) -> None:
        self._url = url or settings.database_url
        self._echo = settings.database_echo if echo is None else echo
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def create(cls, url: str | None = None, echo: bool | None = None, **engine_kwargs) -> "Database":
        """Factory method to create a Database with defaults from settings."""
        return cls(url=url, echo=echo, **engine_kwargs)

    def _ensure_engine(self) -> None:
        if self._engine is None:
            self._engine = create_async_engine(
                self._url,
                echo=self._echo,
                pool_pre_ping=True,
                **self._engine_kwargs,
            )
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.info("Database engine initialized (%s)", self._engine.url.render_as_string(hide_password=True))

    @property
    def engine(self) -> AsyncEngine:
        self._ensure_engine()
        assert self._engine is not None
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        self._ensure_engine()
        assert self._session_factory is not None
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create tables that do not exist yet (development and seeding)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
