"""Clamping of requested page size and page number."""

from dataclasses import dataclass

DEFAULT_LIMIT = 10
DEFAULT_MAX_LIMIT = 100
# Largest OFFSET a signed 64-bit database integer can hold
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PageWindow:
    """Effective paging window for one request."""

    limit: int
    page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def normalize_bounds(
    limit: int | None,
    page: int | None,
    max_limit: int | None = DEFAULT_MAX_LIMIT,
    default_limit: int = DEFAULT_LIMIT,
) -> PageWindow:
    """
    Clamp a requested limit and page into a safe window.

    Out-of-range values are never an error: list endpoints must keep working
    with whatever paging parameters the client sends.

    Args:
        limit: Requested items per page (None means default)
        page: Requested 1-indexed page (None means first page, huge pages are
            capped so the offset still fits a 64-bit integer)
        max_limit: Upper bound for the limit (values below 1 act as 1)
        default_limit: Limit used when none was requested

    Returns:
        PageWindow with the effective limit, page and offset
    """
    ceiling = max(1, max_limit if max_limit is not None else DEFAULT_MAX_LIMIT)
    requested = default_limit if limit is None else limit
    effective_limit = min(max(1, requested), ceiling)
    effective_page = max(1, page if page is not None else 1)
    effective_page = min(effective_page, MAX_OFFSET // effective_limit + 1)
    return PageWindow(limit=effective_limit, page=effective_page)
