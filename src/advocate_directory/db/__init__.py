"""Relational storage: SQLAlchemy models and async session management."""

from .models import Advocate, Base
from .session import Database

__all__ = ["Advocate", "Base", "Database"]
