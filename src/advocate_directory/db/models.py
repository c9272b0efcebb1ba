"""SQLAlchemy models for the advocate directory."""

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for advocate directory tables."""


class Advocate(Base):
    """A directory record.

    ``specialties`` is JSON (JSONB on PostgreSQL); searches match its text
    form, not individual elements. ``phone_number`` is numeric and is cast
    to text for matching.
    """

    __tablename__ = "advocates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    degree: Mapped[str] = mapped_column(String(64), nullable=False)
    specialties: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list
    )
    years_of_experience: Mapped[int] = mapped_column(Integer, nullable=False)
    phone_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def to_row(self) -> dict:
        """Return a JSON-compatible dict with snake_case keys."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "city": self.city,
            "degree": self.degree,
            "specialties": list(self.specialties or []),
            "years_of_experience": self.years_of_experience,
            "phone_number": self.phone_number,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
