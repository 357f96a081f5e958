"""FastAPI dependencies for list endpoints."""

from fastapi import Query, Request

from pageforge.config import get_settings
from pageforge.pagination import PaginationEngine, PaginationRequest, RequestContext


async def get_pagination_request(
    limit: str | None = Query(None, description="Items per page (max 100)", examples=["10"]),
    page: str | None = Query(None, description="Page number (starting from 1)", examples=["1"]),
    order: str | None = Query(None, description="Sort order for created_at: ASC or DESC"),
    q: str | None = Query(None, description="Free-text search query"),
) -> PaginationRequest:
    """
    Parse paging parameters without ever rejecting them.

    Values are taken as strings so malformed input reaches the clamping logic
    instead of failing validation with a 422.
    """
    return PaginationRequest(limit=limit, page=page, order=order, q=q)


async def get_request_context(request: Request) -> RequestContext:
    """URL parts of the inbound request, used to build navigation links."""
    return RequestContext.from_request(request)


def get_pagination_engine() -> PaginationEngine:
    """Engine configured from application settings."""
    settings = get_settings()
    return PaginationEngine(
        max_limit=settings.max_page_limit,
        default_limit=settings.default_page_limit,
    )
