"""Shared pytest fixtures: fake store, caches and a seeded SQLite database."""

import asyncio
from typing import Any

import pytest
import pytest_asyncio

from advocate_directory.db import Advocate, Database
from advocate_directory.repositories import InMemoryCacheRepository, SqlAdvocateRepository
from advocate_directory.services import ResultCache, SearchService
from advocate_directory.services.query_builder import AdvocateQuery


def make_row(
    id: int,
    first_name: str = "Pat",
    last_name: str = "Jones",
    city: str = "Denver",
    degree: str = "MD",
    specialties: list[str] | None = None,
    years_of_experience: int = 1,
    phone_number: int = 5550000000,
) -> dict[str, Any]:
    return {
        "id": id,
        "first_name": first_name,
        "last_name": last_name,
        "city": city,
        "degree": degree,
        "specialties": specialties or [],
        "years_of_experience": years_of_experience,
        "phone_number": phone_number,
        "created_at": "2024-01-01T00:00:00",
    }


class FakeAdvocateStore:
    """AdvocateStore fake: matches on last name and records every call."""

    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self.rows = rows
        self.find_calls = 0
        self.count_calls = 0
        self.queries: list[AdvocateQuery] = []
        self.fail_with: Exception | None = None
        self.healthy = True

    def _matching(self, query: AdvocateQuery) -> list[dict[str, Any]]:
        if query.search is None:
            return list(self.rows)
        needle = query.search.lower()
        return [row for row in self.rows if needle in row["last_name"].lower()]

    async def find_page(self, query: AdvocateQuery, offset: int, limit: int) -> list[dict[str, Any]]:
        self.find_calls += 1
        self.queries.append(query)
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        return self._matching(query)[offset : offset + limit]

    async def count(self, query: AdvocateQuery) -> int:
        self.count_calls += 1
        self.queries.append(query)
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        return len(self._matching(query))

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def directory_rows() -> list[dict[str, Any]]:
    """15 Smiths followed by 5 Browns."""
    rows = [make_row(i, first_name=f"Person{i}", last_name="Smith") for i in range(1, 16)]
    rows += [make_row(i, first_name=f"Person{i}", last_name="Brown") for i in range(16, 21)]
    return rows


@pytest.fixture
def fake_store(directory_rows) -> FakeAdvocateStore:
    return FakeAdvocateStore(directory_rows)


@pytest.fixture
def cache_repository() -> InMemoryCacheRepository:
    return InMemoryCacheRepository()


@pytest.fixture
def result_cache(cache_repository) -> ResultCache:
    return ResultCache.create(store=cache_repository, list_ttl=300, search_ttl=60, key_prefix="test")


@pytest.fixture
def search_service(fake_store, result_cache) -> SearchService:
    return SearchService.create(
        store=fake_store,
        cache=result_cache,
        page_max=120000,
        limit_min=10,
        limit_max=100,
        limit_default=10,
    )


SEED_ADVOCATES = [
    make_row(1, "John", "Doe", "New York", "MD", ["Bipolar", "LGBTQ"], 10, 5551234567),
    make_row(2, "Jane", "Smith", "Los Angeles", "PhD", ["Trauma & PTSD"], 7, 5559806543),
    make_row(3, "Alice", "Johnson", "Chicago", "MSW", ["Pediatrics"], 5, 5554561234),
    make_row(4, "Bob", "Smithers", "Austin", "MD", ["Chronic pain"], 3, 5550000000),
    make_row(5, "Maria", "Garcia", "Phoenix", "DO", ["Men's issues", "Sleep issues"], 12, 5552223333),
    make_row(6, "Wei", "Chen", "Seattle", "MD", ["Telehealth 100% remote"], 20, 5558889999),
]


@pytest_asyncio.fixture
async def database(tmp_path):
    """File-backed SQLite database seeded with SEED_ADVOCATES."""
    db = Database.create(url=f"sqlite+aiosqlite:///{tmp_path / 'advocates.db'}", echo=False)
    await db.create_all()
    async with db.session() as session:
        session.add_all(
            Advocate(**{key: value for key, value in row.items() if key != "created_at"})
            for row in SEED_ADVOCATES
        )
        await session.commit()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def sql_repository(database) -> SqlAdvocateRepository:
    return SqlAdvocateRepository.create(database=database, timeout=5.0)
