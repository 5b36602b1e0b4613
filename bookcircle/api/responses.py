"""Response builders: (record, PublicUser) pairs to response schemas."""

from bookcircle.core.domain_types import PublicUser
from bookcircle.models.book import Book
from bookcircle.models.profile import Profile
from bookcircle.models.wishlist_item import WishlistItem
from bookcircle.schemas.book import (
    BookFeedPage, BookOut, BookWithUser, FeedCursorOut, LikeOut, UserLikedBooks,
)
from bookcircle.schemas.profile import ProfileOut, ProfileWithUser
from bookcircle.schemas.user import UserOut
from bookcircle.schemas.wishlist import WishlistItemOut, WishlistItemWithUser
from bookcircle.services.assemble_feed import FeedPage, LikedBooks


def book_with_user(item: tuple[Book, PublicUser]) -> BookWithUser:
    book, user = item
    return BookWithUser(
        book=BookOut.model_validate(book), user=UserOut.model_validate(user),
    )


def feed_page(page: FeedPage) -> BookFeedPage:
    return BookFeedPage(
        books=[book_with_user(i) for i in page.items],
        next_cursor=(
            FeedCursorOut.model_validate(page.next_cursor)
            if page.next_cursor else None
        ),
    )


def user_liked_books(user_id: str, liked: LikedBooks) -> UserLikedBooks:
    return UserLikedBooks(
        user_id=user_id,
        like_count=len(liked.likes),
        likes=[LikeOut.model_validate(like) for like in liked.likes],
        books=[book_with_user(i) for i in liked.items],
    )


def profile_with_user(item: tuple[Profile, PublicUser]) -> ProfileWithUser:
    profile, user = item
    return ProfileWithUser(
        profile=ProfileOut.model_validate(profile),
        user=UserOut.model_validate(user),
    )


def wishlist_with_user(item: tuple[WishlistItem, PublicUser]) -> WishlistItemWithUser:
    wishlist_item, user = item
    return WishlistItemWithUser(
        wishlist_item=WishlistItemOut.model_validate(wishlist_item),
        user=UserOut.model_validate(user),
    )
