"""Wishlist Service: owner-only wishlist items, reads resolved like books."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.core.domain_types import (
    MutationAction, OwnedEntity, PublicUser, UserId, WishlistItemId,
)
from bookcircle.core.errors import ResourceNotFoundError
from bookcircle.models.wishlist_item import WishlistItem
from bookcircle.schemas.wishlist import WishlistItemCreate, WishlistItemUpdate
from bookcircle.services.guard_mutations import MutationGuard
from bookcircle.services.resolve_identities import IdentityResolver

logger = logging.getLogger(__name__)

WishlistEntry = tuple[WishlistItem, PublicUser]


async def get_item(
    db: AsyncSession, resolver: IdentityResolver, item_id: WishlistItemId,
) -> WishlistEntry:
    item = await db.get(WishlistItem, item_id)
    if item is None:
        raise ResourceNotFoundError("WishlistItem", str(item_id))
    return await resolver.attach_one(item, OwnedEntity.WISHLIST_ITEM)


async def items_by_user(
    db: AsyncSession, resolver: IdentityResolver, user_id: UserId, take_limit: int = 100,
) -> list[WishlistEntry]:
    result = await db.execute(
        select(WishlistItem)
        .where(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
        .limit(take_limit),
    )
    items = list(result.scalars().all())
    return await resolver.attach(items, OwnedEntity.WISHLIST_ITEM)


async def create_item(
    db: AsyncSession, guard: MutationGuard, user_id: UserId, data: WishlistItemCreate,
) -> WishlistItem:
    await guard.enforce_rate_limit(user_id)
    item = WishlistItem(user_id=user_id, **data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def update_item(
    db: AsyncSession,
    guard: MutationGuard,
    item_id: WishlistItemId,
    user_id: UserId,
    data: WishlistItemUpdate,
) -> WishlistItem:
    item = await guard.load_owned(
        db, WishlistItem, item_id, user_id,
        OwnedEntity.WISHLIST_ITEM, MutationAction.UPDATE,
    )
    await guard.enforce_rate_limit(user_id)
    for name, value in data.model_dump().items():
        setattr(item, name, value)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_item(
    db: AsyncSession, guard: MutationGuard, item_id: WishlistItemId, user_id: UserId,
) -> WishlistItem:
    item = await guard.load_owned(
        db, WishlistItem, item_id, user_id,
        OwnedEntity.WISHLIST_ITEM, MutationAction.DELETE,
    )
    await db.delete(item)
    await db.commit()
    logger.info(
        "Wishlist item deleted",
        extra={"user_id": user_id, "resource_id": str(item_id)},
    )
    return item
