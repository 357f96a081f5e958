"""Correlates raw projection rows with typed entities by primary key."""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from numbers import Number
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect

from pageforge.pagination.keys import KeyDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")

ExtraValue = int | float | str | None

_DIGITS = re.compile(r"^\d+$")


@dataclass(frozen=True)
class MergedRow(Generic[T]):
    """
    A typed entity enriched with extra raw columns.

    Attribute access looks at the extras first and then at the entity, so
    pydantic ``from_attributes`` validation sees one combined row. Merge keys
    without a matching raw row are absent, not None.
    """

    entity: T
    extras: Mapping[str, ExtraValue] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in ("entity", "extras"):
            raise AttributeError(name)
        extras = object.__getattribute__(self, "extras")
        if name in extras:
            return extras[name]
        return getattr(object.__getattribute__(self, "entity"), name)

    def to_dict(self) -> dict[str, Any]:
        """Flatten loaded entity columns and extras into one dict."""
        state = inspect(self.entity, raiseerr=False)
        if state is not None and hasattr(state, "mapper"):
            columns = {
                attr.key: state.dict[attr.key]
                for attr in state.mapper.column_attrs
                if attr.key in state.dict
            }
        else:
            columns = dict(vars(self.entity))
        return {**columns, **self.extras}


def coerce_extra(value: Any) -> ExtraValue:
    """Numbers stay numbers, digit strings become ints, other strings stay, rest is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Number):
        return value
    if isinstance(value, str):
        return int(value) if _DIGITS.match(value) else value
    return None


def collect_extras(
    raw_rows: Iterable[Mapping[str, Any]],
    key: KeyDescriptor,
    alias: str,
    merge_keys: Sequence[str],
) -> dict[str, dict[str, ExtraValue]]:
    """
    Group merge-key values by canonical primary key.

    Rows without a primary key are skipped; later rows overwrite earlier ones
    for the same key.

    Raises:
        UnsupportedKeyType: If a raw key value has no canonical form
    """
    raw_key = key.raw_column(alias)
    extras: dict[str, dict[str, ExtraValue]] = {}
    for row in raw_rows:
        canonical = key.codec(row.get(raw_key))
        if canonical is None:
            continue
        stash = extras.setdefault(canonical, {})
        for name in merge_keys:
            stash[name] = coerce_extra(row.get(name))
    return extras


def merge_raw_rows(
    raw_rows: Iterable[Mapping[str, Any]],
    entities: Iterable[T],
    key: KeyDescriptor,
    alias: str,
    merge_keys: Sequence[str],
) -> list[MergedRow[T]]:
    """
    Attach extra raw columns to entities, matching on primary key.

    Raw and entity rows are not index-aligned once joins are involved, so the
    correlation goes through the canonical key rather than position.

    Raises:
        UnsupportedKeyType: If a key on either side has no canonical form
    """
    extras = collect_extras(raw_rows, key, alias, merge_keys)
    merged = []
    for entity in entities:
        canonical = key.encode_entity(entity)
        found = extras.get(canonical) if canonical is not None else None
        if found is None:
            logger.debug("No raw extras for %s key %s", alias, canonical)
        merged.append(MergedRow(entity=entity, extras=dict(found or {})))
    return merged
