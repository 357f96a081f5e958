"""Pydantic schemas for API request/response validation."""

from pageforge.schemas.user import (
    UserResponse,
    UserActivityResponse,
)

__all__ = [
    "UserResponse",
    "UserActivityResponse",
]
