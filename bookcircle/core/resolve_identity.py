"""Identity Resolution: merge owned records with identity-provider users.

Invariants:
    - One routine for every owned entity (books, profiles, wishlist items)
    - Username fallback: username -> external-account username -> display name
    - A record whose owner is missing or has no resolvable username fails the
      whole batch (IdentityResolutionError), never a partial result
    - Output order equals input order
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from bookcircle.core.domain_types import (
    ExternalUser, OwnedEntity, OwnedRecord, PublicUser,
)
from bookcircle.core.errors import IdentityResolutionError

R = TypeVar("R", bound=OwnedRecord)


def resolve_display_username(user: ExternalUser) -> str | None:
    """Return the first non-empty of username, external username, display name."""
    for candidate in (user.username, user.external_username, user.display_name):
        if candidate:
            return candidate
    return None


def to_public_user(user: ExternalUser) -> PublicUser | None:
    """Project to the client shape; None when no username is resolvable."""
    username = resolve_display_username(user)
    if username is None:
        return None
    return PublicUser(
        id=user.id,
        username=username,
        name=user.display_name,
        profile_image_url=user.profile_image_url,
        external_username=user.external_username,
    )


def distinct_owner_ids(records: Iterable[OwnedRecord]) -> list[str]:
    """Owning user ids in first-seen order, without duplicates."""
    return list(dict.fromkeys(r.user_id for r in records))


def attach_users(
    records: Sequence[R],
    users: Iterable[ExternalUser],
    entity: OwnedEntity,
) -> list[tuple[R, PublicUser]]:
    """Pair each record with its owner's public projection."""
    by_id = {u.id: u for u in users}
    paired: list[tuple[R, PublicUser]] = []
    for record in records:
        user = by_id.get(record.user_id)
        public = to_public_user(user) if user else None
        if public is None:
            raise IdentityResolutionError(
                entity.value, str(record.id), record.user_id,
            )
        paired.append((record, public))
    return paired
