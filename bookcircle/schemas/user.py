"""User Schemas: client-facing projection of identity-provider users."""

from pydantic import BaseModel, ConfigDict


class UserOut(BaseModel):
    """Public user; username is always resolved (never null)."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str | None = None
    profile_image_url: str = ""
    external_username: str | None = None
