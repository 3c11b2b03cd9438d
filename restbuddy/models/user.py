"""
RestBuddy: User Model
=======================

What:  ORM model for the `users` table, exposed as the `users` resource.
Who:   Registered by `default_registry()`; served by the dispatcher.

Query Patterns:
    - Show:   SELECT ... WHERE id = :id LIMIT 1
    - List:   SELECT ... [WHERE name ILIKE :q] ORDER BY created_at DESC LIMIT :n
    - Update: SELECT ... WHERE id = :id, then UPDATE on flush
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restbuddy.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    age: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Stored in UTC; serialized as ISO 8601 by jsonable_encoder
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    posts = relationship("Post", back_populates="author", lazy="noload")

    __table_args__ = (
        Index("idx_users_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
