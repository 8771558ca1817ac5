"""
Postboard Backend: Post SQLAlchemy Model
==========================================

What:  ORM model representing the `posts` table.
Why:   Maps rows to Python objects for the CRUD operations in PostService.
Who:   Used by PostService and by create_tables() for development databases.

Table Design:
    - Integer primary key assigned by the database on insert
    - created_at / updated_at default to the server clock (server_now), so
      both come from the same INSERT and are equal when a post is created
    - updated_at is reassigned to the server clock by every update

    Index on created_at DESC backs the list query (newest first).
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base, server_now


class Post(Base):
    """
    A titled text record.

    Lifecycle:
        1. Created by POST /api/posts (title and content required)
        2. Updated by PUT /api/posts/{id} (title and/or content, updated_at refreshed)
        3. Deleted by DELETE /api/posts/{id}; deletion is permanent
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Timestamps ────────────────────────────────────────────────────────
    # Assigned by the storage layer, never by the application clock
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=server_now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=server_now(),
    )

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
