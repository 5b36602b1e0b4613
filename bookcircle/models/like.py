"""Like ORM: existence of (user_id, book_id) means the user likes the book."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookcircle.db.base import Base


class Like(Base):
    """Composite-key relationship row, toggled on and off."""
    __tablename__ = "likes"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    book_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    book: Mapped["Book"] = relationship("Book", back_populates="likes")
