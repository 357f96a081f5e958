"""Deterministic ordering and page windowing."""

from pageforge.pagination.bounds import PageWindow
from pageforge.pagination.query import QueryBuilder, SortDirection

SORT_COLUMN = "created_at"


def apply_ordering(query: QueryBuilder, order: SortDirection | None) -> QueryBuilder:
    """Order by the primary row's creation time, NULLs last either way."""
    return query.order_by_column(f"{query.alias}.{SORT_COLUMN}", order or "DESC", nulls_last=True)


def apply_window(query: QueryBuilder, window: PageWindow) -> QueryBuilder:
    return query.window(window.offset, window.limit)
