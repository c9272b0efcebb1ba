#!/usr/bin/env python3
"""
Seed script for the advocate directory.

Creates the advocates table if needed, inserts a sample set of advocates,
invalidates cached results, and runs a few example searches.
"""

import asyncio
import random

from sqlalchemy import delete

from advocate_directory.config import configure_logging
from advocate_directory.db import Advocate, Database
from advocate_directory.repositories import InMemoryCacheRepository, SqlAdvocateRepository
from advocate_directory.services import ResultCache, SearchService

SPECIALTIES = [
    "Bipolar",
    "LGBTQ",
    "Medication/Prescribing",
    "Suicide History/Attempts",
    "General Mental Health (anxiety, depression, stress, grief, life transitions)",
    "Men's issues",
    "Relationship Issues (family, friends, couple, etc)",
    "Trauma & PTSD",
    "Personality disorders",
    "Personal growth",
    "Substance use/abuse",
    "Pediatrics",
    "Women's issues (post-partum, infertility, family planning)",
    "Chronic pain",
    "Weight loss & nutrition",
    "Eating disorders",
    "Diabetic Diet and nutrition",
    "Coaching (leadership, career, academic and wellness)",
    "Life coaching",
    "Obsessive-compulsive disorders",
    "Neuropsychological evaluations & testing (ADHD testing)",
    "Attention and Hyperactivity (ADHD)",
    "Sleep issues",
    "Schizophrenia and psychotic disorders",
    "Learning disorders",
    "Domestic abuse",
]

ADVOCATES = [
    ("John", "Doe", "New York", "MD", 10, 5551234567),
    ("Jane", "Smith", "Los Angeles", "PhD", 8, 5559876543),
    ("Alice", "Johnson", "Chicago", "MSW", 5, 5554567890),
    ("Michael", "Brown", "Houston", "MD", 12, 5556543210),
    ("Emily", "Davis", "Phoenix", "PhD", 7, 5553210987),
    ("Chris", "Martinez", "Philadelphia", "MSW", 9, 5557890123),
    ("Jessica", "Taylor", "San Antonio", "MD", 11, 5554561234),
    ("David", "Harris", "San Diego", "PhD", 6, 5557896543),
    ("Laura", "Clark", "Dallas", "MSW", 4, 5550123456),
    ("Daniel", "Lewis", "San Jose", "MD", 13, 5553217654),
    ("Sarah", "Lee", "Austin", "PhD", 10, 5551238765),
    ("James", "King", "Jacksonville", "MSW", 5, 5556540987),
    ("Megan", "Green", "San Francisco", "MD", 14, 5559873456),
    ("Joshua", "Walker", "Columbus", "PhD", 9, 5556781234),
    ("Amanda", "Hall", "Fort Worth", "MSW", 3, 5559872345),
]


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def random_specialties(rng: random.Random) -> list[str]:
    return rng.sample(SPECIALTIES, k=rng.randint(1, 3))


async def seed(database: Database) -> int:
    """Replace the advocates table contents with the sample set."""
    print_section("Seeding advocates")

    await database.create_all()
    rng = random.Random(42)

    async with database.session() as session:
        await session.execute(delete(Advocate))
        session.add_all(
            Advocate(
                first_name=first,
                last_name=last,
                city=city,
                degree=degree,
                specialties=random_specialties(rng),
                years_of_experience=years,
                phone_number=phone,
            )
            for first, last, city, degree, years, phone in ADVOCATES
        )
        await session.commit()

    print(f"  ✓ Inserted {len(ADVOCATES)} advocates")
    return len(ADVOCATES)


async def demo_search(service: SearchService) -> None:
    """Run a few example searches against the seeded data."""
    print_section("Example searches")

    for text in ["smith", "MD", "555987", "10", "trauma", None]:
        result = await service.search(text, page=1, limit=10)
        page = result.page
        print(f"\n  search={text!r}")
        print(f"    total={page.total} pages={page.total_pages} next={page.has_next}")
        for advocate in result.advocates[:3]:
            print(f"    - {advocate.first_name} {advocate.last_name} ({advocate.city}, {advocate.degree})")


async def main() -> None:
    configure_logging()
    database = Database.create()
    cache = ResultCache.create(store=InMemoryCacheRepository())
    service = SearchService.create(store=SqlAdvocateRepository.create(database=database), cache=cache)

    try:
        await seed(database)
        # Cached results predate the new rows
        await service.invalidate()
        await demo_search(service)
    finally:
        await database.dispose()

    print("\n✓ Done")


if __name__ == "__main__":
    asyncio.run(main())
