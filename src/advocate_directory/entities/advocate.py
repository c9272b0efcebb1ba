"""Advocate domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AdvocateEntity:
    """Domain entity for a directory record.

    Attributes:
        id: Primary key in the record store
        first_name: Given name
        last_name: Family name
        city: City of practice
        degree: Credential (e.g. MD, PhD, MSW)
        specialties: Areas of practice, in stored order
        years_of_experience: Whole years in practice
        phone_number: Phone number as stored (numeric)
        created_at: ISO-8601 creation timestamp, if known
    """

    id: int
    first_name: str
    last_name: str
    city: str
    degree: str
    years_of_experience: int
    phone_number: int
    specialties: tuple[str, ...] = field(default_factory=tuple)
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AdvocateEntity":
        """Build an entity from a store row (as returned by AdvocateStore)."""
        return cls(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            city=row["city"],
            degree=row["degree"],
            specialties=tuple(row.get("specialties") or ()),
            years_of_experience=row["years_of_experience"],
            phone_number=row["phone_number"],
            created_at=row.get("created_at"),
        )
