"""Pagination and query-composition engine."""

from pageforge.pagination.bounds import PageWindow, normalize_bounds
from pageforge.pagination.engine import PaginationEngine
from pageforge.pagination.keys import KeyDescriptor, KeyKind, encode_key
from pageforge.pagination.links import RequestContext, build_links, build_meta
from pageforge.pagination.merge import MergedRow, merge_raw_rows
from pageforge.pagination.options import MergeOptions, PaginateOptions, SearchSpec
from pageforge.pagination.schemas import PageLinks, PageMeta, Paginated, PaginationRequest

__all__ = [
    "PageWindow",
    "normalize_bounds",
    "PaginationEngine",
    "KeyDescriptor",
    "KeyKind",
    "encode_key",
    "RequestContext",
    "build_links",
    "build_meta",
    "MergedRow",
    "merge_raw_rows",
    "MergeOptions",
    "PaginateOptions",
    "SearchSpec",
    "PageLinks",
    "PageMeta",
    "Paginated",
    "PaginationRequest",
]
