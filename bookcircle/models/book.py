"""Book ORM: a book a user has logged as read.

Invariants:
    - id is a UUID primary key (native uuid on PostgreSQL, CHAR(32) elsewhere)
    - user_id is set on create and never changes
    - rating is 0.0-5.0 in steps of 0.5 (validated at the schema boundary)
    - (created_at, id) is the feed sort key; indexed together

Design Decisions:
    - cascade delete for likes: a book owns its likes
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Float, DateTime, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookcircle.db.base import Base


class Book(Base):
    """Book entry owned by one user."""
    __tablename__ = "books"
    __table_args__ = (
        Index("ix_books_created_at_id", "created_at", "id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    genre: Mapped[str] = mapped_column(String(255), nullable=False)
    img_src: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    date_started: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    date_finished: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    likes: Mapped[list["Like"]] = relationship(
        "Like", back_populates="book",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="Like.created_at.desc()",
    )
