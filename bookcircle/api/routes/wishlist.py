"""Wishlist Routes: every endpoint requires an authenticated user."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.api.dependencies import (
    get_current_user_id, get_identity_resolver, get_mutation_guard,
)
from bookcircle.api.responses import wishlist_with_user
from bookcircle.infrastructure.database import get_db
from bookcircle.schemas.wishlist import (
    WishlistItemCreate, WishlistItemOut, WishlistItemUpdate, WishlistItemWithUser,
)
from bookcircle.services import handle_wishlist
from bookcircle.services.guard_mutations import MutationGuard
from bookcircle.services.resolve_identities import IdentityResolver

router = APIRouter(prefix="/api/v1/wishlist", tags=["wishlist"])


@router.get("/{item_id}", response_model=WishlistItemWithUser)
async def get_wishlist_item(
    item_id: UUID,
    _viewer_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    resolver: IdentityResolver = Depends(get_identity_resolver),
):
    return wishlist_with_user(await handle_wishlist.get_item(db, resolver, item_id))


@router.post("", response_model=WishlistItemOut, status_code=status.HTTP_201_CREATED)
async def create_wishlist_item(
    body: WishlistItemCreate,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_wishlist.create_item(db, guard, user_id, body)


@router.put("/{item_id}", response_model=WishlistItemOut)
async def update_wishlist_item(
    item_id: UUID,
    body: WishlistItemUpdate,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_wishlist.update_item(db, guard, item_id, user_id, body)


@router.delete("/{item_id}", response_model=WishlistItemOut)
async def delete_wishlist_item(
    item_id: UUID,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_wishlist.delete_item(db, guard, item_id, user_id)
