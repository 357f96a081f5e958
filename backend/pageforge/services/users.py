"""User directory listings built on the pagination engine."""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from pageforge.models import Comment, User
from pageforge.pagination import (
    MergeOptions,
    MergedRow,
    PaginateOptions,
    Paginated,
    PaginationEngine,
    PaginationRequest,
    RequestContext,
    SearchSpec,
)
from pageforge.pagination.drivers import SqlAlchemyQuery, SqlAlchemyRepository

logger = logging.getLogger(__name__)

USER_SEARCH_COLUMNS = ("first_name", "last_name", "email", "phone")
USER_MAX_LIMIT = 100


def list_users(
    db: Session,
    request: PaginationRequest,
    context: RequestContext,
    engine: PaginationEngine | None = None,
) -> Paginated[User]:
    """
    Page through users that have not been soft-deleted.

    Args:
        db: Database session
        request: Paging, ordering and search parameters
        context: Inbound request URL parts for navigation links
        engine: Pagination engine (a default one is created if omitted)

    Returns:
        Paginated envelope of User models
    """
    engine = engine or PaginationEngine()
    return engine.paginate(
        request,
        PaginateOptions(
            repository=SqlAlchemyRepository(db, User),
            filter=lambda users: users.deleted_at.is_(None),
            search=SearchSpec(columns=USER_SEARCH_COLUMNS, term=request.search_term),
            max_limit=USER_MAX_LIMIT,
        ),
        context,
    )


def user_activity_query(db: Session) -> SqlAlchemyQuery[Any]:
    """Users with the number of comments each has written."""
    users = aliased(User, name="users")
    comments = aliased(Comment, name="comments")
    statement = (
        select(users, func.count(comments.comment_id).label("comment_count"))
        .outerjoin(comments, comments.author_id == users.user_id)
        .where(users.deleted_at.is_(None))
        .group_by(users.user_id)
    )
    return SqlAlchemyQuery.from_statement(db, statement)


def list_user_activity(
    db: Session,
    request: PaginationRequest,
    context: RequestContext,
    engine: PaginationEngine | None = None,
) -> Paginated[MergedRow[User]]:
    """Page through users with their comment counts attached."""
    engine = engine or PaginationEngine()
    return engine.paginate_with_raw_merge(
        request,
        MergeOptions(
            query=user_activity_query(db),
            search=SearchSpec(columns=USER_SEARCH_COLUMNS, term=request.search_term),
            max_limit=USER_MAX_LIMIT,
            merge_keys=("comment_count",),
        ),
        context,
    )
