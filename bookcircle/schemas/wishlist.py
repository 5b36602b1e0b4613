"""Wishlist Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from bookcircle.schemas.user import UserOut


class WishlistItemFields(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    description: str = Field("", max_length=2000)
    link: str = Field("", max_length=2048)


class WishlistItemCreate(WishlistItemFields):
    pass


class WishlistItemUpdate(WishlistItemFields):
    pass


class WishlistItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    title: str
    author: str
    description: str
    link: str
    created_at: datetime


class WishlistItemWithUser(BaseModel):
    wishlist_item: WishlistItemOut
    user: UserOut
