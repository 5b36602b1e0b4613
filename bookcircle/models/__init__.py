"""ORM Models: SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Owning user ids are identity-provider strings; users are never stored locally

Design Decisions:
    - One file per entity
    - All models imported here so string-based relationship() references
      resolve before any query runs
"""

from bookcircle.models.book import Book  # noqa: F401
from bookcircle.models.like import Like  # noqa: F401
from bookcircle.models.profile import Profile  # noqa: F401
from bookcircle.models.follower import Follower  # noqa: F401
from bookcircle.models.wishlist_item import WishlistItem  # noqa: F401
from bookcircle.models.rate_limit_hit import RateLimitHit  # noqa: F401
