"""Feed Assembler: book listings composed with identity resolution and cursor pagination.

Invariants:
    - Every listed book is paired with its owner's PublicUser, or the call fails
    - Cursor feeds order by (created_at desc, id desc); the cursor row is included
    - Followed-users feed is one joined query plus one batched identity lookup
    - "Nothing found" is always an empty list, never None

Design Decisions:
    - Plain lists capped at take_limit (newest first); only feeds are cursor-paginated
"""

import logging
from dataclasses import dataclass

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.core.domain_types import (
    BookId, FeedCursor, OwnedEntity, PublicUser, UserId,
)
from bookcircle.core.errors import ResourceNotFoundError
from bookcircle.core.paginate import fetch_size, split_page
from bookcircle.models.book import Book
from bookcircle.models.follower import Follower
from bookcircle.models.like import Like
from bookcircle.models.profile import Profile
from bookcircle.services.resolve_identities import IdentityResolver

logger = logging.getLogger(__name__)

BookItem = tuple[Book, PublicUser]


@dataclass
class FeedPage:
    items: list[BookItem]
    next_cursor: FeedCursor | None


@dataclass
class LikedBooks:
    likes: list[Like]
    items: list[BookItem]


def newest_first(stmt: Select) -> Select:
    return stmt.order_by(Book.created_at.desc(), Book.id.desc())


def starting_at(stmt: Select, cursor: FeedCursor | None) -> Select:
    """Restrict to rows at or after the cursor in (created_at desc, id desc) order."""
    if cursor is None:
        return stmt
    return stmt.where(
        or_(
            Book.created_at < cursor.created_at,
            and_(Book.created_at == cursor.created_at, Book.id <= cursor.id),
        ),
    )


class FeedAssembler:
    """Read side for books: lists, feeds and single lookups."""

    def __init__(
        self, db: AsyncSession, resolver: IdentityResolver, take_limit: int = 100,
    ):
        self.db = db
        self.resolver = resolver
        self.take_limit = take_limit

    async def all_books(self) -> list[BookItem]:
        books = await self._books(newest_first(select(Book)).limit(self.take_limit))
        return await self.resolver.attach(books, OwnedEntity.BOOK)

    async def infinite_feed(
        self, limit: int, cursor: FeedCursor | None = None,
    ) -> FeedPage:
        return await self._page(select(Book), limit, cursor)

    async def books_by_user(self, user_id: UserId) -> list[BookItem]:
        stmt = newest_first(select(Book).where(Book.user_id == user_id))
        books = await self._books(stmt.limit(self.take_limit))
        return await self.resolver.attach(books, OwnedEntity.BOOK)

    async def liked_books(self, user_id: UserId) -> LikedBooks:
        """The user's likes and the liked books, most recently liked first."""
        stmt = (
            select(Like, Book)
            .join(Book, Book.id == Like.book_id)
            .where(Like.user_id == user_id)
            .order_by(Like.created_at.desc(), Book.id.desc())
            .limit(self.take_limit)
        )
        rows = (await self.db.execute(stmt)).all()
        items = await self.resolver.attach(
            [book for _, book in rows], OwnedEntity.BOOK,
        )
        return LikedBooks(likes=[like for like, _ in rows], items=items)

    async def followed_books(
        self, user_id: UserId, limit: int, cursor: FeedCursor | None = None,
    ) -> FeedPage:
        """Books owned by everyone whose profile user_id follows."""
        stmt = (
            select(Book)
            .join(Profile, Profile.user_id == Book.user_id)
            .join(Follower, Follower.profile_id == Profile.id)
            .where(Follower.user_id == user_id)
        )
        return await self._page(stmt, limit, cursor)

    async def get_book(self, book_id: BookId) -> BookItem:
        book = await self.load_book(book_id)
        return await self.resolver.attach_one(book, OwnedEntity.BOOK)

    async def load_book(self, book_id: BookId) -> Book:
        book = await self.db.get(Book, book_id)
        if book is None:
            raise ResourceNotFoundError("Book", str(book_id))
        return book

    async def _page(
        self, stmt: Select, limit: int, cursor: FeedCursor | None,
    ) -> FeedPage:
        stmt = newest_first(starting_at(stmt, cursor)).limit(fetch_size(limit))
        books, next_cursor = split_page(await self._books(stmt), limit)
        items = await self.resolver.attach(books, OwnedEntity.BOOK)
        return FeedPage(items=items, next_cursor=next_cursor)

    async def _books(self, stmt: Select) -> list[Book]:
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
