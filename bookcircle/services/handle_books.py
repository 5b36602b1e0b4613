"""Book Mutations: create, update, delete and like toggling.

Invariants:
    - create: rate limited before insert; owner is the authenticated user
    - update: NOT_FOUND -> FORBIDDEN -> rate limit -> write
    - delete: NOT_FOUND -> FORBIDDEN -> delete (likes cascade)
    - toggle_like flips (user_id, book_id) and reports the new state
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.core.domain_types import BookId, MutationAction, OwnedEntity, UserId
from bookcircle.core.errors import ResourceNotFoundError
from bookcircle.models.book import Book
from bookcircle.models.like import Like
from bookcircle.schemas.book import BookCreate, BookUpdate
from bookcircle.services.guard_mutations import MutationGuard

logger = logging.getLogger(__name__)


async def create_book(
    db: AsyncSession, guard: MutationGuard, user_id: UserId, data: BookCreate,
) -> Book:
    await guard.enforce_rate_limit(user_id)
    book = Book(user_id=user_id, **data.model_dump())
    db.add(book)
    await db.commit()
    await db.refresh(book)
    logger.info(
        "Book created", extra={"user_id": user_id, "resource_id": str(book.id)},
    )
    return book


async def update_book(
    db: AsyncSession,
    guard: MutationGuard,
    book_id: BookId,
    user_id: UserId,
    data: BookUpdate,
) -> Book:
    book = await guard.load_owned(
        db, Book, book_id, user_id, OwnedEntity.BOOK, MutationAction.UPDATE,
    )
    await guard.enforce_rate_limit(user_id)
    for name, value in data.model_dump(exclude_none=True).items():
        setattr(book, name, value)
    await db.commit()
    await db.refresh(book)
    return book


async def delete_book(
    db: AsyncSession, guard: MutationGuard, book_id: BookId, user_id: UserId,
) -> Book:
    book = await guard.load_owned(
        db, Book, book_id, user_id, OwnedEntity.BOOK, MutationAction.DELETE,
    )
    await db.delete(book)
    await db.commit()
    logger.info(
        "Book deleted", extra={"user_id": user_id, "resource_id": str(book_id)},
    )
    return book


async def toggle_like(db: AsyncSession, book_id: BookId, user_id: UserId) -> bool:
    """Like if not liked, unlike if liked. Returns True when a like was added."""
    if await db.get(Book, book_id) is None:
        raise ResourceNotFoundError("Book", str(book_id))
    existing = await db.get(Like, (user_id, book_id))
    if existing is None:
        db.add(Like(user_id=user_id, book_id=book_id))
        added = True
    else:
        await db.delete(existing)
        added = False
    await db.commit()
    return added
