"""SQLAlchemy 2.0 implementation of the query builder interface."""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, column, distinct, func, inspect, or_, and_, select, table
from sqlalchemy.orm import InstanceState, Session, aliased, contains_eager, load_only
from sqlalchemy.sql.elements import ClauseElement
from sqlalchemy.sql.selectable import Join

from pageforge.exceptions import ConfigurationError
from pageforge.pagination.keys import KeyDescriptor
from pageforge.pagination.query import RawRow, SortDirection

logger = logging.getLogger(__name__)

T = TypeVar("T")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

CREATED_AT = "created_at"


def _split_reference(reference: str) -> tuple[str | None, str]:
    """Split ``alias.column`` (or a bare ``column``) and validate both parts."""
    alias, _, name = str(reference).rpartition(".")
    parts = [name] if not alias else alias.split(".") + [name]
    if not all(_IDENTIFIER.match(part) for part in parts):
        raise ConfigurationError(f"Invalid column reference: {reference!r}")
    return (alias or None), name


def _column_attribute(target: Any, name: str) -> Any:
    """Resolve a mapped column attribute by attribute key or database column name."""
    mapper = inspect(target).mapper
    if name in mapper.column_attrs:
        return getattr(target, name)
    for attr in mapper.column_attrs:
        if attr.columns[0].name == name:
            return getattr(target, attr.key)
    raise ConfigurationError(f"Unknown column {name!r} on {mapper.class_.__name__}")


def _has_joins(statement: Select) -> bool:
    """True when the statement reads from a join or from several FROM items."""
    froms = statement.get_final_froms()
    return len(froms) > 1 or any(isinstance(item, Join) for item in froms)


class SqlAlchemyQuery(Generic[T]):
    """A composable list query over one (aliased) mapped entity.

    The wrapped ``Select`` only ever carries filter, join and grouping state.
    Ordering, windowing and loader options are kept aside and applied when a
    statement is executed, so clones can drop them before counting.
    """

    def __init__(
        self,
        session: Session,
        entity: Any,
        statement: Select,
        alias: str,
        key: KeyDescriptor,
    ):
        self._session = session
        self._entity = entity
        self._statement = statement
        self._alias = alias
        self._key = key
        self._joins: dict[str, Any] = {}
        self._eager: dict[str, Any] = {}
        self._projection: Any | None = None
        self._ordering: list[tuple[Any, SortDirection, bool]] = []
        self._offset: int | None = None
        self._limit: int | None = None
        self._multiplying = False

    @classmethod
    def from_statement(cls, session: Session, statement: Select) -> "SqlAlchemyQuery[Any]":
        """
        Wrap a prebuilt ``select()`` whose first column is the primary entity.

        The caller keeps full control over the statement's shape. Alias and
        primary key are read from the entity (aliased or not) it selects.
        Any join in the statement may fan out rows, so joined statements are
        windowed over distinct primary keys.
        """
        descriptions = statement.column_descriptions
        first = descriptions[0] if descriptions else None
        if not first or first.get("entity") is None or first.get("expr") is not first.get("entity"):
            raise ConfigurationError("Prebuilt query must select a mapped entity first")

        entity = first["entity"]
        info = inspect(entity)
        alias = info.name if getattr(info, "is_aliased_class", False) else info.mapper.local_table.name
        query = cls(session, entity, statement, alias, KeyDescriptor.from_mapper(entity))
        query._multiplying = _has_joins(statement)
        return query

    @property
    def alias(self) -> str:
        return self._alias

    @property
    def key(self) -> KeyDescriptor:
        return self._key

    @property
    def entity(self) -> Any:
        return self._entity

    @property
    def statement(self) -> Select:
        """The filter/join state without ordering or windowing."""
        return self._statement

    @property
    def has_row_multiplying_joins(self) -> bool:
        return self._multiplying

    # Composition

    def resolve_column(self, reference: str) -> Any:
        """
        Resolve ``column`` or ``alias.column`` to a column expression.

        Bare names and the primary alias resolve against the primary entity,
        joined relation aliases against the joined entity. Unknown aliases
        (joins the caller added to a prebuilt statement) become quoted
        ``alias.column`` references.
        """
        alias, name = _split_reference(reference)
        if alias is None or alias == self._alias:
            return _column_attribute(self._entity, name)
        joined = alias.replace(".", "_")
        if joined in self._joins:
            return _column_attribute(self._joins[joined], name)
        return table(alias, column(name)).c[name]

    def _criterion(self, criterion: Any) -> Any:
        if isinstance(criterion, ClauseElement):
            return criterion
        if isinstance(criterion, Mapping):
            return and_(*(self.resolve_column(name) == value for name, value in criterion.items()))
        if isinstance(criterion, (list, tuple)):
            return or_(*(self._criterion(part) for part in criterion))
        if callable(criterion):
            return criterion(self._entity)
        raise ConfigurationError(f"Unsupported filter: {type(criterion).__name__}")

    def where(self, criterion: Any) -> "SqlAlchemyQuery[T]":
        """Conjoin a filter (expression, mapping, list of mappings or callable)."""
        self._statement = self._statement.where(self._criterion(criterion))
        return self

    def join_relation(self, path: str) -> "SqlAlchemyQuery[T]":
        """Left outer join a relation path and load it into the entities."""
        parent, parent_path, loader = self._entity, None, None
        for segment in path.split("."):
            current_path = segment if parent_path is None else f"{parent_path}.{segment}"
            join_alias = current_path.replace(".", "_")
            if not _IDENTIFIER.match(segment):
                raise ConfigurationError(f"Invalid relation path: {path!r}")

            relationship = inspect(parent).mapper.relationships.get(segment)
            if relationship is None:
                raise ConfigurationError(f"Unknown relation {path!r} on {self._alias!r}")

            attribute = getattr(parent, segment)
            if join_alias in self._joins:
                target = self._joins[join_alias]
            else:
                target = aliased(relationship.mapper.class_, name=join_alias)
                self._statement = self._statement.outerjoin(target, attribute)
                self._joins[join_alias] = target
                if relationship.uselist:
                    self._multiplying = True

            eager = attribute.of_type(target)
            loader = contains_eager(eager) if loader is None else loader.contains_eager(eager)
            if parent_path is not None:
                self._eager.pop(parent_path, None)
            self._eager[current_path] = loader
            parent, parent_path = target, current_path
        return self

    def project(self, columns: Sequence[str]) -> "SqlAlchemyQuery[T]":
        """Load only the given columns of the primary entity."""
        names = list(dict.fromkeys([self._key.property_path, *columns]))
        mapper = inspect(self._entity).mapper
        if CREATED_AT in mapper.column_attrs and CREATED_AT not in names:
            names.append(CREATED_AT)
        self._projection = load_only(*(self.resolve_column(name) for name in names))
        return self

    def where_any_contains(self, references: Sequence[str], term: str) -> "SqlAlchemyQuery[T]":
        """AND a case-insensitive contains OR-group over the given columns."""
        columns = [self.resolve_column(reference) for reference in references]
        if columns:
            self._statement = self._statement.where(
                or_(*(col.icontains(term, autoescape=True) for col in columns))
            )
        return self

    def order_by_column(
        self, column_name: str, direction: SortDirection, nulls_last: bool = True
    ) -> "SqlAlchemyQuery[T]":
        self._ordering.append((self.resolve_column(column_name), direction, nulls_last))
        return self

    def window(self, offset: int | None, limit: int | None) -> "SqlAlchemyQuery[T]":
        self._offset, self._limit = offset, limit
        return self

    def clone(self, keep_ordering: bool = False, keep_window: bool = False) -> "SqlAlchemyQuery[T]":
        """Copy the filter/join state, optionally dropping ordering and window."""
        copy = SqlAlchemyQuery(self._session, self._entity, self._statement, self._alias, self._key)
        copy._joins = dict(self._joins)
        copy._eager = dict(self._eager)
        copy._projection = self._projection
        copy._multiplying = self._multiplying
        if keep_ordering:
            copy._ordering = list(self._ordering)
        if keep_window:
            copy._offset, copy._limit = self._offset, self._limit
        return copy

    # Execution

    @staticmethod
    def _sort_expression(col: Any, direction: SortDirection, nulls_last: bool) -> Any:
        expression = col.desc() if direction == "DESC" else col.asc()
        return expression.nulls_last() if nulls_last else expression

    def _windowed(self, statement: Select) -> Select:
        statement = statement.order_by(
            *(self._sort_expression(col, d, n) for col, d, n in self._ordering)
        )
        if self._offset is None and self._limit is None:
            return statement
        if not self._multiplying:
            return statement.offset(self._offset).limit(self._limit)

        # Window over distinct primary keys so joined rows can't shrink a page
        key_column = getattr(self._entity, self._key.property_path)
        sort_labels = [col.label(f"page_sort_{i}") for i, (col, _, _) in enumerate(self._ordering)]
        inner = self._statement.add_columns(key_column.label("page_key"), *sort_labels).subquery()
        page_keys = (
            select(inner.c.page_key, *(inner.c[label.name] for label in sort_labels))
            .distinct()
            .order_by(
                *(
                    self._sort_expression(inner.c[f"page_sort_{i}"], d, n)
                    for i, (_, d, n) in enumerate(self._ordering)
                )
            )
            .offset(self._offset)
            .limit(self._limit)
            .subquery()
        )
        return statement.where(key_column.in_(select(page_keys.c.page_key)))

    def _with_loaders(self, statement: Select) -> Select:
        options = list(self._eager.values())
        if self._projection is not None:
            options.append(self._projection)
        return statement.options(*options) if options else statement

    def fetch_entities(self) -> list[T]:
        """Execute and return the page's entities with joined relations loaded."""
        statement = self._with_loaders(self._windowed(self._statement))
        return list(self._session.scalars(statement).unique().all())

    def fetch_raw_and_entities(self) -> tuple[list[RawRow], list[T]]:
        """
        Execute once and return raw rows alongside de-duplicated entities.

        Raw rows expose primary entity columns as ``<alias>_<column>``, joined
        entity columns as ``<join alias>_<column>`` and every other selected
        expression under its label.
        """
        statement = self._windowed(self._statement.add_columns(*self._joins.values()))
        result = self._session.execute(self._with_loaders(statement))
        if self._eager:
            # Joined collections are populated across rows
            result = result.unique()
        names = list(result.keys())
        raw: list[RawRow] = []
        entities: list[T] = []
        seen: set[int] = set()
        for row in result.all():
            raw.append(self._raw_row(names, row))
            entity = row[0]
            if entity is not None and id(entity) not in seen:
                seen.add(id(entity))
                entities.append(entity)
        return raw, entities

    def _raw_row(self, names: list[str], row: Sequence[Any]) -> RawRow:
        raw: RawRow = {}
        for index, (name, value) in enumerate(zip(names, row)):
            prefix = self._alias if index == 0 else name
            state = inspect(value, raiseerr=False)
            if isinstance(state, InstanceState):
                for attr in state.mapper.column_attrs:
                    if attr.key in state.dict:
                        raw[f"{prefix}_{attr.columns[0].name}"] = state.dict[attr.key]
            elif value is None and name in self._joins:
                continue
            else:
                raw[name] = value
        return raw

    def count_distinct_keys(self) -> int:
        """Count distinct primary keys over the filter/join state."""
        key_column = getattr(self._entity, self._key.property_path)
        inner = (
            self._statement.add_columns(key_column.label("row_key"))
            .order_by(None)
            .limit(None)
            .offset(None)
            .subquery()
        )
        total = self._session.execute(select(func.count(distinct(inner.c.row_key)))).scalar_one()
        logger.debug("Counted %s distinct %s rows", total, self._alias)
        return int(total or 0)


class SqlAlchemyRepository(Generic[T]):
    """Collection handle for one mapped class bound to a session."""

    def __init__(self, session: Session, model: type[T]):
        self._session = session
        self._model = model

    @property
    def default_alias(self) -> str:
        return inspect(self._model).local_table.name

    def create_query(self, alias: str | None = None) -> SqlAlchemyQuery[T]:
        name = alias or self.default_alias
        if not _IDENTIFIER.match(name):
            raise ConfigurationError(f"Invalid alias: {name!r}")
        entity = aliased(self._model, name=name)
        return SqlAlchemyQuery(
            self._session, entity, select(entity), name, KeyDescriptor.from_mapper(self._model)
        )
