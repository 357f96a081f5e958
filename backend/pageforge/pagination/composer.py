"""Builds the base list query from declarative options."""

import logging

from pageforge.exceptions import ConfigurationError
from pageforge.pagination.options import PaginateOptions
from pageforge.pagination.query import QueryBuilder

logger = logging.getLogger(__name__)


def compose_query(options: PaginateOptions) -> QueryBuilder:
    """
    Produce the query a list call pages over.

    A prebuilt query is returned untouched. Otherwise a query is opened on the
    repository, then the filter, relation joins and projection are applied.

    Raises:
        ConfigurationError: If neither a prebuilt query nor a repository is given
    """
    if options.query is not None:
        return options.query
    if options.repository is None:
        raise ConfigurationError("Provide either a prebuilt query or a repository")

    query = options.repository.create_query(options.alias or options.repository.default_alias)
    if options.filter is not None:
        query.where(options.filter)
    for relation in options.relations or ():
        query.join_relation(relation)
    if options.projection:
        query.project(options.projection)

    logger.debug(
        "Composed %s query (relations=%s, projection=%s)",
        query.alias,
        list(options.relations or ()),
        list(options.projection or ()),
    )
    return query
