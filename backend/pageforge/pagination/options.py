"""Declarative options describing what a list call pages over."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pageforge.pagination.query import QueryBuilder, Repository


@dataclass
class SearchSpec:
    """Columns a free-text term is matched against, in declaration order."""

    columns: Sequence[str] = ()
    term: str | None = None

    def __post_init__(self):
        self.columns = tuple(dict.fromkeys(str(col) for col in self.columns))


@dataclass
class PaginateOptions:
    """
    Source and shape of a paginated query.

    Exactly one of ``repository`` or ``query`` is used: a prebuilt query wins
    and is taken as-is, otherwise a query is opened on the repository and
    ``alias``, ``filter``, ``relations`` and ``projection`` are applied.
    """

    repository: Repository | None = None
    query: QueryBuilder | None = None
    alias: str | None = None
    filter: Any = None
    relations: Sequence[str] = ()
    projection: Sequence[str] | None = None
    search: SearchSpec | None = None
    max_limit: int | None = None


@dataclass
class MergeOptions(PaginateOptions):
    """Options for a merge listing; ``merge_keys`` name the extra raw columns."""

    merge_keys: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self):
        self.merge_keys = tuple(dict.fromkeys(self.merge_keys))
