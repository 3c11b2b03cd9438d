"""
RestBuddy: Post Model
=======================

What:  ORM model for the `posts` table, exposed as the `posts` resource.
How:   `user_id` is an ordinary mapped column, so `?user_id=3` filters posts
       by author without any transformer. The `author` relationship is not
       a column and is never serialized.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restbuddy.database import Base


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    body: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Values: 'draft' → 'published' | 'archived'
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    author = relationship("User", back_populates="posts", lazy="noload")

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, status='{self.status}')>"
