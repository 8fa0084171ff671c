"""
Core — Pagination

Standard paginator with configurable page_size and hard max cap, plus
the ?limit= clamp used by the movement feeds.

@file core/pagination.py
"""

from rest_framework.pagination import PageNumberPagination

from core.constants import (
    DEFAULT_PAGE_SIZE,
    FEED_DEFAULT_LIMIT,
    FEED_MAX_LIMIT,
    FEED_MIN_LIMIT,
    MAX_PAGE_SIZE,
)


class StandardPagination(PageNumberPagination):
    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = 'page_size'
    max_page_size = MAX_PAGE_SIZE


def clamp_limit(raw, default: int = FEED_DEFAULT_LIMIT) -> int:
    """Parse a ?limit= value; non-numeric falls back to default, then clamp to [1, 100]."""
    try:
        value = int(raw) if raw not in (None, '') else default
    except (TypeError, ValueError):
        value = default
    return min(max(value, FEED_MIN_LIMIT), FEED_MAX_LIMIT)
