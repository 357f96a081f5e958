"""Query builder interface the pagination engine composes against.

The engine never touches a concrete driver. Each data-source driver implements
``QueryBuilder`` (and usually ``Repository``) once; see
``pageforge.pagination.drivers`` for the SQLAlchemy implementation.
"""

from collections.abc import Sequence
from typing import Any, Literal, Protocol, TypeVar

from pageforge.pagination.keys import KeyDescriptor

T = TypeVar("T")

SortDirection = Literal["ASC", "DESC"]

RawRow = dict[str, Any]


class QueryBuilder(Protocol[T]):
    """Fixed capability set of a composable list query.

    Mutating methods change the builder in place and return it so calls can
    be chained.
    """

    @property
    def alias(self) -> str:
        """Name the primary row is referenced by."""
        ...

    @property
    def key(self) -> KeyDescriptor:
        """Primary-key descriptor of the primary row."""
        ...

    @property
    def has_row_multiplying_joins(self) -> bool:
        """Whether joins may return several rows per primary row."""
        ...

    def where(self, criterion: Any) -> "QueryBuilder[T]": ...

    def join_relation(self, path: str) -> "QueryBuilder[T]": ...

    def project(self, columns: Sequence[str]) -> "QueryBuilder[T]": ...

    def where_any_contains(self, references: Sequence[str], term: str) -> "QueryBuilder[T]": ...

    def order_by_column(
        self, column: str, direction: SortDirection, nulls_last: bool = True
    ) -> "QueryBuilder[T]": ...

    def window(self, offset: int | None, limit: int | None) -> "QueryBuilder[T]": ...

    def clone(self, keep_ordering: bool = False, keep_window: bool = False) -> "QueryBuilder[T]": ...

    def fetch_entities(self) -> list[T]: ...

    def fetch_raw_and_entities(self) -> tuple[list[RawRow], list[T]]: ...

    def count_distinct_keys(self) -> int: ...


class Repository(Protocol[T]):
    """A collection handle that can open aliased queries."""

    @property
    def default_alias(self) -> str: ...

    def create_query(self, alias: str | None = None) -> QueryBuilder[T]: ...
