"""User directory API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pageforge.api.dependencies import (
    get_pagination_engine,
    get_pagination_request,
    get_request_context,
)
from pageforge.database import get_db
from pageforge.pagination import Paginated, PaginationEngine, PaginationRequest, RequestContext
from pageforge.schemas.user import UserActivityResponse, UserResponse
from pageforge.services.users import list_user_activity, list_users

router = APIRouter()


@router.get("", response_model=Paginated[UserResponse])
async def get_users(
    pagination: PaginationRequest = Depends(get_pagination_request),
    context: RequestContext = Depends(get_request_context),
    engine: PaginationEngine = Depends(get_pagination_engine),
    db: Session = Depends(get_db),
):
    """List users with paging, created_at ordering and free-text search."""
    result = list_users(db, pagination, context, engine)
    return result.map(UserResponse.model_validate)


@router.get("/activity", response_model=Paginated[UserActivityResponse])
async def get_user_activity(
    pagination: PaginationRequest = Depends(get_pagination_request),
    context: RequestContext = Depends(get_request_context),
    engine: PaginationEngine = Depends(get_pagination_engine),
    db: Session = Depends(get_db),
):
    """List users with the number of comments each has written."""
    result = list_user_activity(db, pagination, context, engine)
    return result.map(UserActivityResponse.model_validate)
