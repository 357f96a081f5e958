"""Primary-key descriptors and canonical key encoding.

Raw projection rows and ORM entities carry the same primary key in different
shapes (a driver value under ``<alias>_<column>`` versus a Python attribute on
the entity). Both sides are encoded to one canonical string so they can be
correlated.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from operator import attrgetter
from typing import Any

from sqlalchemy import inspect

from pageforge.exceptions import UnsupportedKeyType


class KeyKind(str, Enum):
    """Supported primary-key value kinds."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    UUID = "uuid"
    TEMPORAL = "temporal"
    BYTES = "bytes"
    STRINGABLE = "stringable"


def _encode_number(value: float | Decimal) -> str:
    # 42.0 and 42 must correlate
    integral = value == value.to_integral_value() if isinstance(value, Decimal) else value.is_integer()
    if integral:
        return str(int(value))
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return repr(value)


_ENCODERS: dict[KeyKind, Callable[[Any], str]] = {
    KeyKind.STRING: lambda value: value,
    KeyKind.INTEGER: lambda value: str(int(value)),
    KeyKind.NUMBER: _encode_number,
    KeyKind.UUID: str,
    KeyKind.TEMPORAL: lambda value: value.isoformat(),
    KeyKind.BYTES: lambda value: bytes(value).hex(),
    KeyKind.STRINGABLE: str,
}


def classify_key(value: object) -> KeyKind:
    """
    Determine which encoder applies to a primary-key value.

    Raises:
        UnsupportedKeyType: If no encoder applies
    """
    if isinstance(value, str):
        return KeyKind.STRING
    if isinstance(value, bool):
        raise UnsupportedKeyType(value)
    if isinstance(value, int):
        return KeyKind.INTEGER
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise UnsupportedKeyType(value)
        return KeyKind.NUMBER
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise UnsupportedKeyType(value)
        return KeyKind.NUMBER
    if isinstance(value, uuid.UUID):
        return KeyKind.UUID
    if isinstance(value, (datetime, date, time)):
        return KeyKind.TEMPORAL
    if isinstance(value, (bytes, bytearray, memoryview)):
        return KeyKind.BYTES
    if type(value).__str__ is not object.__str__:
        return KeyKind.STRINGABLE
    raise UnsupportedKeyType(value)


def encode_key(value: object) -> str | None:
    """
    Encode a primary-key value to its canonical string.

    None encodes to None, meaning the row takes part in no correlation.

    Raises:
        UnsupportedKeyType: If the value has no canonical form
    """
    if value is None:
        return None
    return _ENCODERS[classify_key(value)](value)


@dataclass(frozen=True)
class KeyDescriptor:
    """How to find and canonicalize the primary key on both row shapes."""

    property_path: str
    column_name: str
    codec: Callable[[object], str | None] = encode_key

    def entity_value(self, entity: object) -> object:
        """Read the key from an entity, following dotted property paths."""
        return attrgetter(self.property_path)(entity)

    def raw_column(self, alias: str) -> str:
        """Name of the key column in a raw row of the given alias."""
        return f"{alias}_{self.column_name}"

    def encode_entity(self, entity: object) -> str | None:
        return self.codec(self.entity_value(entity))

    @classmethod
    def from_mapper(cls, model: Any) -> "KeyDescriptor":
        """
        Build a descriptor from a mapped class (or aliased entity).

        Only the first primary-key column is used for correlation.
        """
        mapper = inspect(model).mapper
        column = mapper.primary_key[0]
        prop = mapper.get_property_by_column(column)
        return cls(property_path=prop.key, column_name=column.name)
