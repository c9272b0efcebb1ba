"""Pagination arithmetic and request parameter clamping."""

from advocate_directory.entities import PageEntity


def clamp_page(page: int, max_page: int) -> int:
    """Clamp a requested page number to [1, max_page]."""
    return max(1, min(page, max_page))


def clamp_limit(limit: int, floor: int, ceiling: int) -> int:
    """Clamp a requested page size to [floor, ceiling]."""
    return max(floor, min(limit, ceiling))


def calculate_pagination(total: int, page: int, limit: int) -> PageEntity:
    """Derive page metadata from a total count.

    The caller clamps ``page`` and guarantees ``limit >= 1``; no clamping
    happens here.

    Args:
        total: Number of matching records
        page: 1-based page number
        limit: Page size

    Returns:
        PageEntity with total_pages, has_next and has_prev filled in
    """
    total_pages = -(-total // limit) if total > 0 else 0
    return PageEntity(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
