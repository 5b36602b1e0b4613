"""Profile ORM: optional per-user bio and interest tags.

Invariants:
    - At most one profile per user (unique user_id)
    - bio is at most 255 characters
    - tags is a comma-joined string, stored as entered after normalization
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookcircle.db.base import Base


class Profile(Base):
    """Reader profile; followers attach to it."""
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True,
    )
    bio: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    tags: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    followers: Mapped[list["Follower"]] = relationship(
        "Follower", back_populates="profile",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="Follower.created_at.desc()",
    )
