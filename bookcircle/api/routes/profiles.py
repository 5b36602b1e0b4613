"""Profile Routes: profile writes, follower lists, follow toggling."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.api.dependencies import get_current_user_id, get_mutation_guard
from bookcircle.infrastructure.database import get_db
from bookcircle.schemas.profile import (
    FollowerOut, ProfileCreate, ProfileFollowers, ProfileOut, ProfileUpdate,
    ToggleFollowResult,
)
from bookcircle.services import handle_profiles
from bookcircle.services.guard_mutations import MutationGuard

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])


@router.post("", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
async def create_profile(
    body: ProfileCreate,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_profiles.create_profile(db, guard, user_id, body)


@router.put("/{profile_id}", response_model=ProfileOut)
async def update_profile(
    profile_id: UUID,
    body: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_profiles.update_profile(db, guard, profile_id, user_id, body)


@router.delete("/{profile_id}", response_model=ProfileOut)
async def delete_profile(
    profile_id: UUID,
    user_id: str = Depends(get_current_user_id),
    guard: MutationGuard = Depends(get_mutation_guard),
    db: AsyncSession = Depends(get_db),
):
    return await handle_profiles.delete_profile(db, guard, profile_id, user_id)


@router.get("/{profile_id}/followers", response_model=ProfileFollowers)
async def get_profile_followers(
    profile_id: UUID, db: AsyncSession = Depends(get_db),
):
    profile = await handle_profiles.load_profile(db, profile_id)
    return ProfileFollowers(
        profile_id=profile.id,
        follower_count=len(profile.followers),
        followers=[FollowerOut.model_validate(f) for f in profile.followers],
    )


@router.post("/{profile_id}/follow", response_model=ToggleFollowResult)
async def toggle_follow(
    profile_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    added = await handle_profiles.toggle_follow(db, profile_id, user_id)
    return ToggleFollowResult(added_follow=added)
