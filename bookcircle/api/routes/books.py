"""Book Routes: listings, cursor feed, CRUD and like toggling.

Invariants:
    - Reads are public; writes and toggles need an authenticated user
    - Every book in a response is paired with its resolved owner
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.api.dependencies import (
    get_current_user_id, get_feed_assembler, get_feed_cursor, get_mutation_guard,
)
from bookcircle.api.responses import book_with_user, feed_page
from bookcircle.config import Settings, get_settings
from bookcircle.core.domain_types import FeedCursor
from bookcircle.core.paginate import clamp_limit
from bookcircle.infrastructure.database import get_db
from bookcircle.schemas.book import (
    BookCreate, BookFeedPage, BookLikes, BookOut, BookUpdate, BookWithUser,
    LikeOut, ToggleLikeResult,
)
from bookcircle.services import handle_books
from bookcircle.services.assemble_feed import FeedAssembler
from bookcircle.services.guard_mutations import MutationGuard

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/books", tags=["books"])


@router.get("", response_model=list[BookWithUser])
async def list_books(feed: FeedAssembler = Depends(get_feed_assembler)):
    """Newest books from everyone."""
    return [book_with_user(i) for i in await feed.all_books()]


@router.get("/feed", response_model=BookFeedPage)
async def infinite_feed(
    limit: int | None = Query(None, ge=1),
    cursor: FeedCursor | None = Depends(get_feed_cursor),
    feed: FeedAssembler = Depends(get_feed_assembler),
    settings: Settings = Depends(get_settings),
):
    """Cursor-paginated feed of all books."""
    page_size = clamp_limit(limit, settings.feed_default_limit, settings.feed_max_limit)
    return feed_page(await feed.infinite_feed(page_size, cursor))


@router.get("/{book_id}", response_model=BookWithUser)
async def get_book(
    book_id: UUID, feed: FeedAssembler = Depends(get_feed_assembler),
):
    return book_with_user(await feed.get_book(book_id))


@router.get("/{book_id}/likes", response_model=BookLikes)
async def get_book_likes(
    book_id: UUID, feed: FeedAssembler = Depends(get_feed_assembler),
):
    book = await feed.load_book(book_id)
    return BookLikes(
        book_id=book.id,
        like_count=len(book.likes),
        likes=[LikeOut.model_validate(like) for like in book.likes],
    )


@router.post("", response_model=BookOut, status_code=status.HTTP_201_CREATED)
async def create_book(
    body: BookCreate,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_books.create_book(db, guard, user_id, body)


@router.put("/{book_id}", response_model=BookOut)
async def update_book(
    book_id: UUID,
    body: BookUpdate,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_books.update_book(db, guard, book_id, user_id, body)


@router.delete("/{book_id}", response_model=BookOut)
async def delete_book(
    book_id: UUID,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_books.delete_book(db, guard, book_id, user_id)


@router.post("/{book_id}/like", response_model=ToggleLikeResult)
async def toggle_like(
    book_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    added = await handle_books.toggle_like(db, book_id, user_id)
    return ToggleLikeResult(added_like=added)
