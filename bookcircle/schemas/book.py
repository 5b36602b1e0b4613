"""Book Schemas: Pydantic models with field-level validation for book endpoints.

Invariants:
    - title, author, genre: 1-255 chars, stripped
    - description: at most 255 chars
    - date_started / date_finished must carry a timezone (UTC expected)
    - rating: 0-5 in steps of 0.5
    - Every book returned to a client is paired with a resolved user

Design Decisions:
    - BookUpdate.img_src optional: omitted means keep the stored cover
"""

from datetime import datetime
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator

from bookcircle.schemas.user import UserOut


class BookFields(BaseModel):
    """Editable book fields shared by create and update."""
    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    description: str = Field("", max_length=255)
    date_started: AwareDatetime
    date_finished: AwareDatetime
    genre: str = Field(min_length=1, max_length=255)
    rating: float = Field(ge=0, le=5, multiple_of=0.5)

    @field_validator("title", "author", "genre")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Must be 1 or more characters long")
        return v


class BookCreate(BookFields):
    img_src: str = Field("", max_length=2048)


class BookUpdate(BookFields):
    img_src: str | None = Field(None, max_length=2048)


class BookOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    title: str
    author: str
    description: str
    genre: str
    img_src: str
    rating: float
    date_started: datetime
    date_finished: datetime
    created_at: datetime


class BookWithUser(BaseModel):
    book: BookOut
    user: UserOut


class FeedCursorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime


class BookFeedPage(BaseModel):
    books: list[BookWithUser]
    next_cursor: FeedCursorOut | None = None


class LikeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    book_id: UUID
    created_at: datetime


class BookLikes(BaseModel):
    """Likes on one book; likes is empty (never null) when nobody liked it."""
    book_id: UUID
    like_count: int
    likes: list[LikeOut]


class UserLikedBooks(BaseModel):
    """A user's likes with the liked books, both most recently liked first."""
    user_id: str
    like_count: int
    likes: list[LikeOut]
    books: list[BookWithUser]


class ToggleLikeResult(BaseModel):
    added_like: bool
