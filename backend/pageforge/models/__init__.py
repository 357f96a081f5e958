"""SQLAlchemy ORM models."""

from pageforge.models.user import User, Comment

__all__ = [
    "User",
    "Comment",
]
