"""Paging metadata and navigation links."""

import math
from dataclasses import dataclass

import httpx
from fastapi import Request

from pageforge.pagination.bounds import PageWindow
from pageforge.pagination.schemas import PageLinks, PageMeta


@dataclass(frozen=True)
class RequestContext:
    """The parts of the inbound request that links are built from."""

    scheme: str
    host: str
    path: str
    query: str = ""

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(
            scheme=request.url.scheme,
            host=request.headers.get("host") or request.url.netloc,
            path=request.url.path,
            query=request.url.query,
        )

    @property
    def url(self) -> httpx.URL:
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        query = f"?{self.query}" if self.query else ""
        return httpx.URL(f"{self.scheme}://{self.host}{path}{query}")


def total_pages_for(total_items: int, limit: int) -> int:
    """At least one page, even when there is nothing to show."""
    return max(1, math.ceil(total_items / limit))


def build_meta(window: PageWindow, total_items: int) -> PageMeta:
    total_pages = total_pages_for(total_items, window.limit)
    return PageMeta(
        items_per_page=window.limit,
        total_items=total_items,
        current_page=window.page,
        total_pages=total_pages,
        has_next_page=window.page < total_pages,
        has_previous_page=window.page > 1,
    )


def build_links(context: RequestContext, window: PageWindow, total_pages: int) -> PageLinks:
    """
    Derive first/last/current/next/previous URLs from the request URL.

    ``limit`` and ``page`` are force-set; every other query parameter is kept
    as sent. ``next`` and ``previous`` are None when there is no such page.
    """
    base = context.url.copy_set_param("limit", window.limit).copy_set_param("page", window.page)

    def link(page: int) -> str:
        return str(base.copy_set_param("page", page))

    return PageLinks(
        first=link(1),
        last=link(total_pages),
        current=link(window.page),
        next=link(window.page + 1) if window.page < total_pages else None,
        previous=link(window.page - 1) if window.page > 1 else None,
    )
