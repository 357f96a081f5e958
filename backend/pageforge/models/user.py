"""User and comment models listed by the directory endpoints."""

import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, ForeignKey, Index, Boolean, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pageforge.database import Base


class User(Base):
    """Model representing a member of the organisation."""

    __tablename__ = "users"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    designation: Mapped[str] = mapped_column(String(120), nullable=False)
    department_name: Mapped[str | None] = mapped_column(String(120))
    avatar: Mapped[str | None] = mapped_column(Text)
    user_role: Mapped[str] = mapped_column(String(20), default="user")  # 'admin' or 'user'
    is_active: Mapped[bool] = mapped_column(Boolean, default=False)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(
        "created_by", Uuid(as_uuid=True), ForeignKey("users.user_id")
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    created_by: Mapped["User | None"] = relationship(
        "User", remote_side="User.user_id", back_populates="created_users"
    )
    created_users: Mapped[list["User"]] = relationship("User", back_populates="created_by")
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="author", order_by="Comment.comment_id"
    )

    __table_args__ = (
        Index("idx_users_created_at", "created_at"),
        Index("idx_users_department", "department_name"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class Comment(Base):
    """A comment written by a user."""

    __tablename__ = "comments"

    comment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.user_id"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, default=datetime.utcnow)

    author: Mapped["User"] = relationship("User", back_populates="comments")

    __table_args__ = (Index("idx_comments_author", "author_id"),)

    def __repr__(self) -> str:
        return f"<Comment {self.comment_id} by {self.author_id}>"
