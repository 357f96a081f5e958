"""Pydantic schemas for user directory endpoints."""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Schema for a user in list responses."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    first_name: str = Field(..., max_length=80)
    last_name: str = Field(..., max_length=80)
    email: str
    phone: str
    designation: str
    department_name: str | None = None
    avatar: str | None = None
    user_role: str = Field(..., description="'admin' or 'user'")
    is_active: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Computed properties
    full_name: str


class UserActivityResponse(UserResponse):
    """User list entry with server-computed activity columns."""

    comment_count: int | None = Field(None, description="Comments written by the user")
