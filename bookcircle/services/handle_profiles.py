"""Profile Service: profile CRUD, follower views, and follow toggling.

Invariants:
    - One profile per user; a second create raises ConflictError
    - create/update rate limited; update/delete owner-only (NOT_FOUND first)
    - toggle_follow flips (user_id, profile_id) and reports the new state
    - Follower lists are empty lists, never None
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookcircle.core.domain_types import (
    MutationAction, OwnedEntity, ProfileId, PublicUser, UserId,
)
from bookcircle.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from bookcircle.models.follower import Follower
from bookcircle.models.profile import Profile
from bookcircle.schemas.profile import ProfileCreate, ProfileUpdate
from bookcircle.services.guard_mutations import MutationGuard
from bookcircle.services.resolve_identities import IdentityResolver

logger = logging.getLogger(__name__)


async def load_profile(db: AsyncSession, profile_id: ProfileId) -> Profile:
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise ResourceNotFoundError("Profile", str(profile_id))
    return profile


async def get_profile_by_user(
    db: AsyncSession, resolver: IdentityResolver, user_id: UserId,
) -> tuple[Profile, PublicUser]:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise ResourceNotFoundError("Profile", user_id)
    return await resolver.attach_one(profile, OwnedEntity.PROFILE)


async def create_profile(
    db: AsyncSession, guard: MutationGuard, user_id: UserId, data: ProfileCreate,
) -> Profile:
    await guard.enforce_rate_limit(user_id)
    result = await db.execute(select(Profile.id).where(Profile.user_id == user_id))
    if result.scalar_one_or_none() is not None:
        raise ConflictError(
            "Profile already exists for this user",
            context=ErrorContext(user_id=user_id, resource_type="Profile"),
        )
    profile = Profile(user_id=user_id, **data.model_dump())
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    logger.info(
        "Profile created",
        extra={"user_id": user_id, "resource_id": str(profile.id)},
    )
    return profile


async def update_profile(
    db: AsyncSession,
    guard: MutationGuard,
    profile_id: ProfileId,
    user_id: UserId,
    data: ProfileUpdate,
) -> Profile:
    profile = await guard.load_owned(
        db, Profile, profile_id, user_id,
        OwnedEntity.PROFILE, MutationAction.UPDATE,
    )
    await guard.enforce_rate_limit(user_id)
    profile.bio = data.bio
    profile.tags = data.tags
    await db.commit()
    await db.refresh(profile)
    return profile


async def delete_profile(
    db: AsyncSession, guard: MutationGuard, profile_id: ProfileId, user_id: UserId,
) -> Profile:
    profile = await guard.load_owned(
        db, Profile, profile_id, user_id,
        OwnedEntity.PROFILE, MutationAction.DELETE,
    )
    await db.delete(profile)
    await db.commit()
    return profile


async def toggle_follow(
    db: AsyncSession, profile_id: ProfileId, user_id: UserId,
) -> bool:
    """Follow if not following, unfollow otherwise. True when a follow was added."""
    await load_profile(db, profile_id)
    existing = await db.get(Follower, (user_id, profile_id))
    if existing is None:
        db.add(Follower(user_id=user_id, profile_id=profile_id))
        added = True
    else:
        await db.delete(existing)
        added = False
    await db.commit()
    return added


async def user_following(
    db: AsyncSession, resolver: IdentityResolver, user_id: UserId,
) -> tuple[list[Follower], list[tuple[Profile, PublicUser]]]:
    """Follow rows of user_id plus each followed profile with its owner."""
    result = await db.execute(
        select(Follower)
        .where(Follower.user_id == user_id)
        .options(selectinload(Follower.profile))
        .order_by(Follower.created_at.desc()),
    )
    follows = list(result.scalars().all())
    profiles = await resolver.attach(
        [f.profile for f in follows], OwnedEntity.PROFILE,
    )
    return follows, profiles
