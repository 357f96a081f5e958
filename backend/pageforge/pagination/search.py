"""Free-text search across a declared column set."""

from pageforge.pagination.options import SearchSpec
from pageforge.pagination.query import QueryBuilder


def qualify_column(reference: str, alias: str) -> str:
    """Prefix a bare column name with the primary alias."""
    return reference if "." in reference else f"{alias}.{reference}"


def apply_search(query: QueryBuilder, term: str | None, spec: SearchSpec | None) -> QueryBuilder:
    """
    AND a case-insensitive OR-group of contains predicates onto the query.

    Does nothing without a term, without a spec, or when the term is blank.
    The term only ever reaches the database as a bound parameter.
    """
    if spec is None or term is None:
        return query
    needle = term.strip()
    if not needle or not spec.columns:
        return query

    references = [qualify_column(col, query.alias) for col in spec.columns]
    return query.where_any_contains(references, needle)
