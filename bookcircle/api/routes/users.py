"""User Routes: identity-provider lookups and per-user views (books, likes, follows, wishlist).

Invariants:
    - Collections are returned as lists, empty when nothing matches
    - Wishlist reads require an authenticated user
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.api.dependencies import (
    get_current_user_id, get_feed_assembler, get_feed_cursor,
    get_identity_client, get_identity_resolver,
)
from bookcircle.api.responses import (
    book_with_user, feed_page, profile_with_user, user_liked_books,
    wishlist_with_user,
)
from bookcircle.config import Settings, get_settings
from bookcircle.core.domain_types import FeedCursor
from bookcircle.core.paginate import clamp_limit
from bookcircle.core.service_protocols import IdentityClient
from bookcircle.infrastructure.database import get_db
from bookcircle.schemas.book import BookFeedPage, BookWithUser, UserLikedBooks
from bookcircle.schemas.profile import FollowerOut, ProfileWithUser, UserFollowing
from bookcircle.schemas.user import UserOut
from bookcircle.schemas.wishlist import WishlistItemWithUser
from bookcircle.services import handle_profiles, handle_wishlist
from bookcircle.services.assemble_feed import FeedAssembler
from bookcircle.services.resolve_identities import (
    IdentityResolver, find_user_by_username, list_public_users,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserOut])
async def list_users(
    client: IdentityClient = Depends(get_identity_client),
    settings: Settings = Depends(get_settings),
):
    users = await list_public_users(client, limit=settings.list_take_limit)
    return [UserOut.model_validate(u) for u in users]


@router.get("/by-username/{username}", response_model=UserOut)
async def get_user_by_username(
    username: str,
    client: IdentityClient = Depends(get_identity_client),
    settings: Settings = Depends(get_settings),
):
    user = await find_user_by_username(
        client, username, scan_limit=settings.identity_username_scan_limit,
    )
    return UserOut.model_validate(user)


@router.get("/{user_id}/books", response_model=list[BookWithUser])
async def get_books_by_user(
    user_id: str, feed: FeedAssembler = Depends(get_feed_assembler),
):
    return [book_with_user(i) for i in await feed.books_by_user(user_id)]


@router.get("/{user_id}/liked-books", response_model=UserLikedBooks)
async def get_liked_books(
    user_id: str, feed: FeedAssembler = Depends(get_feed_assembler),
):
    return user_liked_books(user_id, await feed.liked_books(user_id))


@router.get("/{user_id}/following/books", response_model=BookFeedPage)
async def get_followed_books(
    user_id: str,
    limit: int | None = Query(None, ge=1),
    cursor: FeedCursor | None = Depends(get_feed_cursor),
    feed: FeedAssembler = Depends(get_feed_assembler),
    settings: Settings = Depends(get_settings),
):
    """Cursor feed of books by everyone user_id follows."""
    page_size = clamp_limit(limit, settings.feed_default_limit, settings.feed_max_limit)
    return feed_page(await feed.followed_books(user_id, page_size, cursor))


@router.get("/{user_id}/profile", response_model=ProfileWithUser)
async def get_profile_by_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    resolver: IdentityResolver = Depends(get_identity_resolver),
):
    return profile_with_user(
        await handle_profiles.get_profile_by_user(db, resolver, user_id),
    )


@router.get("/{user_id}/following", response_model=UserFollowing)
async def get_user_following(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    resolver: IdentityResolver = Depends(get_identity_resolver),
):
    follows, profiles = await handle_profiles.user_following(db, resolver, user_id)
    return UserFollowing(
        user_id=user_id,
        following_count=len(follows),
        following=[FollowerOut.model_validate(f) for f in follows],
        profiles=[profile_with_user(p) for p in profiles],
    )


@router.get("/{user_id}/wishlist", response_model=list[WishlistItemWithUser])
async def get_wishlist_by_user(
    user_id: str,
    _viewer_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    resolver: IdentityResolver = Depends(get_identity_resolver),
    settings: Settings = Depends(get_settings),
):
    items = await handle_wishlist.items_by_user(
        db, resolver, user_id, take_limit=settings.list_take_limit,
    )
    return [wishlist_with_user(i) for i in items]
