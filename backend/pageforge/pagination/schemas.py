"""Pydantic schemas for list requests and paginated responses."""

from typing import Any, Callable, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PaginationRequest(BaseModel):
    """
    A list request as sent by a client.

    Nothing here is ever rejected: unparsable numbers become None and are
    defaulted later, unknown sort orders fall back to DESC.
    """

    model_config = ConfigDict(populate_by_name=True)

    limit: int | None = Field(None, description="Items per page (clamped to the maximum)")
    page: int | None = Field(None, description="Page number, starting from 1")
    order: Literal["ASC", "DESC"] = Field("DESC", description="Sort order for created_at")
    search_term: str | None = Field(None, alias="q", description="Free-text search query")

    @field_validator("limit", "page", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            return int(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("order", mode="before")
    @classmethod
    def _lenient_order(cls, value: Any) -> str:
        normalized = str(value).strip().upper() if value is not None else ""
        return normalized if normalized in ("ASC", "DESC") else "DESC"

    @field_validator("search_term", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageMeta(_CamelModel):
    """Paging metadata of a result envelope."""

    items_per_page: int
    total_items: int
    current_page: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class PageLinks(_CamelModel):
    """Navigation links of a result envelope."""

    first: str
    last: str
    current: str
    next: str | None = None
    previous: str | None = None


class Paginated(_CamelModel, Generic[T]):
    """Result envelope: one page of data plus metadata and links."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[T]
    meta: PageMeta
    links: PageLinks

    def map(self, transform: Callable[[Any], Any]) -> "Paginated[Any]":
        """Return a copy with every data row passed through ``transform``."""
        return self.model_copy(update={"data": [transform(row) for row in self.data]})
