"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId is the identity provider's opaque string id (never a local PK)
    - BookId, ProfileId, WishlistItemId wrap UUIDs
    - ExternalUser is never persisted; PublicUser always carries a non-empty username
    - FeedCursor names the first record of the next page (inclusive)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NewType, Protocol
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
BookId = NewType("BookId", UUID)
ProfileId = NewType("ProfileId", UUID)
WishlistItemId = NewType("WishlistItemId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class OwnedEntity(str, Enum):
    """Entity labels used in identity resolution and ownership errors."""
    BOOK = "Book"
    PROFILE = "Profile"
    WISHLIST_ITEM = "WishlistItem"


class MutationAction(str, Enum):
    UPDATE = "update"
    DELETE = "delete"


# ─── Value Types ─────────────────────────────────────────────────

class OwnedRecord(Protocol):
    """Anything with an id and an owning user id: Book, Profile, WishlistItem."""
    id: UUID
    user_id: str


@dataclass(frozen=True)
class ExternalUser:
    """User record as returned by the identity provider."""
    id: UserId
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str = ""
    external_usernames: tuple[str, ...] = field(default_factory=tuple)

    @property
    def external_username(self) -> str | None:
        return next((u for u in self.external_usernames if u), None)

    @property
    def display_name(self) -> str | None:
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts) or None


@dataclass(frozen=True)
class PublicUser:
    """Client-facing projection of an ExternalUser with a resolved username."""
    id: UserId
    username: str
    name: str | None
    profile_image_url: str
    external_username: str | None


@dataclass(frozen=True)
class FeedCursor:
    """Sort key of the first record on the next page."""
    id: BookId
    created_at: datetime
