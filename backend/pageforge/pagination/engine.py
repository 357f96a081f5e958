"""Pagination engine: composes bounds, query, search, ordering, counting and links."""

import logging
from typing import Any

from pageforge.config import get_settings
from pageforge.pagination.bounds import PageWindow, normalize_bounds
from pageforge.pagination.composer import compose_query
from pageforge.pagination.counting import count_total, snapshot_for_count
from pageforge.pagination.links import RequestContext, build_links, build_meta
from pageforge.pagination.merge import MergedRow, merge_raw_rows
from pageforge.pagination.options import MergeOptions, PaginateOptions
from pageforge.pagination.ordering import apply_ordering, apply_window
from pageforge.pagination.query import QueryBuilder
from pageforge.pagination.schemas import Paginated, PaginationRequest
from pageforge.pagination.search import apply_search

logger = logging.getLogger(__name__)


class PaginationEngine:
    """
    Turns a list request plus declarative options into a paginated envelope.

    The engine is stateless between calls; every call builds its own query,
    window and envelope. It only reads from the data source.
    """

    def __init__(self, max_limit: int | None = None, default_limit: int | None = None):
        settings = get_settings()
        self.max_limit = max_limit if max_limit is not None else settings.max_page_limit
        self.default_limit = default_limit if default_limit is not None else settings.default_page_limit

    def _window(self, request: PaginationRequest, options: PaginateOptions) -> PageWindow:
        max_limit = options.max_limit if options.max_limit is not None else self.max_limit
        return normalize_bounds(request.limit, request.page, max_limit, self.default_limit)

    def _prepare(
        self, request: PaginationRequest, options: PaginateOptions
    ) -> tuple[PageWindow, QueryBuilder, QueryBuilder]:
        """Compose, search and order; return the window, page query and count snapshot."""
        window = self._window(request, options)
        query = compose_query(options)

        term = request.search_term
        if term is None and options.search is not None:
            term = options.search.term
        apply_search(query, term, options.search)

        counter = snapshot_for_count(query)
        apply_ordering(query, request.order)
        apply_window(query, window)

        logger.debug(
            "Paging %s: page=%s limit=%s order=%s search=%r",
            query.alias,
            window.page,
            window.limit,
            request.order,
            term,
        )
        return window, query, counter

    def _envelope(
        self, data: list[Any], window: PageWindow, total_items: int, context: RequestContext
    ) -> Paginated[Any]:
        meta = build_meta(window, total_items)
        links = build_links(context, window, meta.total_pages)
        return Paginated(data=data, meta=meta, links=links)

    def paginate(
        self,
        request: PaginationRequest,
        options: PaginateOptions,
        context: RequestContext,
    ) -> Paginated[Any]:
        """
        Fetch one page of typed entities.

        Raises:
            ConfigurationError: If the options name no data source
        """
        window, query, counter = self._prepare(request, options)
        rows = query.fetch_entities()
        total_items = count_total(counter)
        logger.debug("Fetched %s of %s %s rows", len(rows), total_items, query.alias)
        return self._envelope(rows, window, total_items, context)

    def paginate_with_raw_merge(
        self,
        request: PaginationRequest,
        options: MergeOptions,
        context: RequestContext,
    ) -> Paginated[MergedRow[Any]]:
        """
        Fetch one page of typed entities enriched with extra raw columns.

        Raises:
            ConfigurationError: If the options name no data source
            UnsupportedKeyType: If a primary key cannot be canonicalized
        """
        window, query, counter = self._prepare(request, options)
        total_items = count_total(counter)
        raw_rows, entities = query.fetch_raw_and_entities()
        rows = merge_raw_rows(raw_rows, entities, query.key, query.alias, options.merge_keys)
        logger.debug(
            "Merged %s raw rows onto %s of %s %s rows",
            len(raw_rows),
            len(rows),
            total_items,
            query.alias,
        )
        return self._envelope(rows, window, total_items, context)
