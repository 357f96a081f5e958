"""Total row counting independent of the page window."""

from pageforge.pagination.query import QueryBuilder


def snapshot_for_count(query: QueryBuilder) -> QueryBuilder:
    """Clone the filter/join state, dropping any ordering and window."""
    return query.clone(keep_ordering=False, keep_window=False)


def count_total(query: QueryBuilder) -> int:
    """
    Count matching primary rows.

    Joins can return several rows per primary row, so the count is always
    ``COUNT(DISTINCT <primary key>)`` over an unordered, unwindowed clone.
    """
    return snapshot_for_count(query).count_distinct_keys()
