"""Predicate construction for advocate search.

A search matches a record when ANY of these hold:
    - first name, last name, city or degree contains the text (case-insensitive)
    - the phone number, rendered as text, contains the text
    - the specialties column, rendered as text, contains the text
    - years of experience equals the text, when the text is a whole number

Phone and specialties are matched against their serialized form, so a
specialties match is a substring match on the JSON text, not a tag match.
"""

import math
from dataclasses import dataclass

from sqlalchemy import ColumnElement, Select, String, cast, false, func, or_, select, true

from advocate_directory.db.models import Advocate

LIST_NAMESPACE = "list"
SEARCH_NAMESPACE = "search"

_LIKE_ESCAPE = "\\"
# Largest value a 32-bit INTEGER column can hold
_MAX_YEARS = 2**31 - 1


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def parse_years(text: str) -> int | None:
    """Parse text as a whole number of years.

    Returns None unless the entire text is a finite number with no
    fractional part (``"7"`` and ``"7.0"`` parse, ``"7a"``, ``"7.5"`` and
    ``"1_000"`` do not).
    """
    # float() also takes digit separators and non-ASCII digits
    if "_" in text or not text.isascii():
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or not value.is_integer():
        return None
    if abs(value) > _MAX_YEARS:
        return None
    return int(value)


@dataclass(frozen=True)
class AdvocateQuery:
    """A filter over the advocates table plus the text it was built from.

    Attributes:
        search: Sanitized search text, or None for "list all"
        predicate: SQLAlchemy boolean clause shared by row and count statements
    """

    search: str | None
    predicate: ColumnElement[bool]

    @property
    def cache_namespace(self) -> str:
        """Cache key namespace; listing and searching never share keys."""
        return LIST_NAMESPACE if self.search is None else SEARCH_NAMESPACE

    @property
    def cache_text(self) -> str:
        """Text part of cache keys: the sanitized search text, empty for listing."""
        return self.search or ""

    def rows_statement(self, offset: int, limit: int) -> Select:
        """SELECT one page of matching advocates, ordered by id."""
        return (
            select(Advocate)
            .where(self.predicate)
            .order_by(Advocate.id)
            .offset(offset)
            .limit(limit)
        )

    def count_statement(self) -> Select:
        """SELECT COUNT(*) with the same filter and no row projection."""
        return select(func.count()).select_from(Advocate).where(self.predicate)


def build_search_predicate(search: str) -> ColumnElement[bool]:
    """Build the OR of all match clauses for sanitized search text."""
    pattern = f"%{escape_like(search)}%"

    def contains(column) -> ColumnElement[bool]:
        return column.ilike(pattern, escape=_LIKE_ESCAPE)

    years = parse_years(search)
    years_clause = Advocate.years_of_experience == years if years is not None else false()

    return or_(
        contains(Advocate.first_name),
        contains(Advocate.last_name),
        contains(Advocate.city),
        contains(Advocate.degree),
        contains(cast(Advocate.phone_number, String)),
        contains(cast(Advocate.specialties, String)),
        years_clause,
    )


def build_advocate_query(search: str | None = None) -> AdvocateQuery:
    """Build the query for a request.

    Args:
        search: Sanitized search text, or None to match every record

    Returns:
        AdvocateQuery usable for both the page of rows and the count
    """
    if search is None:
        return AdvocateQuery(search=None, predicate=true())
    return AdvocateQuery(search=search, predicate=build_search_predicate(search))
