"""Profile Schemas: bio/tags input and follower views.

Invariants:
    - bio: at most 255 chars
    - tags: comma-joined; whitespace around each tag removed, empty tags dropped
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookcircle.schemas.user import UserOut


class ProfileFields(BaseModel):
    bio: str = Field("", max_length=255)
    tags: str = Field("", max_length=1000)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: str) -> str:
        return ",".join(t.strip() for t in v.split(",") if t.strip())


class ProfileCreate(ProfileFields):
    pass


class ProfileUpdate(ProfileFields):
    pass


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    bio: str
    tags: str
    created_at: datetime


class ProfileWithUser(BaseModel):
    profile: ProfileOut
    user: UserOut


class FollowerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    profile_id: UUID
    created_at: datetime


class ProfileFollowers(BaseModel):
    profile_id: UUID
    follower_count: int
    followers: list[FollowerOut]


class UserFollowing(BaseModel):
    """Profiles a user follows, with each profile owner resolved."""
    user_id: str
    following_count: int
    following: list[FollowerOut]
    profiles: list[ProfileWithUser]


class ToggleFollowResult(BaseModel):
    added_follow: bool
