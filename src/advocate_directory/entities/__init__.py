"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .advocate import AdvocateEntity
from .cache_entry import CacheEntryEntity
from .page import PageEntity

__all__ = ["AdvocateEntity", "CacheEntryEntity", "PageEntity"]
