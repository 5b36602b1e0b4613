"""Follower ORM: user_id follows the owner of profile_id."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookcircle.db.base import Base


class Follower(Base):
    """Composite-key relationship row, toggled on and off."""
    __tablename__ = "followers"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="followers",
    )
