"""Main API router that combines all endpoint routers."""

from fastapi import APIRouter

from pageforge.api import users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
