"""Identity Resolver: batched identity-provider lookups around core/resolve_identity.py.

Invariants:
    - Owning ids deduplicated, then fetched in batches of at most batch_size
    - Empty input makes no external call
    - Username lookup order: exact username, first/last name, external-account username
"""

import logging
from collections.abc import Sequence
from typing import TypeVar

from bookcircle.core.domain_types import (
    ExternalUser, OwnedEntity, OwnedRecord, PublicUser, UserId,
)
from bookcircle.core.errors import ResourceNotFoundError
from bookcircle.core.resolve_identity import (
    attach_users, distinct_owner_ids, to_public_user,
)
from bookcircle.core.service_protocols import IdentityClient

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=OwnedRecord)


class IdentityResolver:
    """Attaches resolved public users to owned records."""

    def __init__(self, client: IdentityClient, batch_size: int = 100):
        self.client = client
        self.batch_size = batch_size

    async def fetch_users(self, user_ids: list[UserId]) -> list[ExternalUser]:
        users: list[ExternalUser] = []
        for start in range(0, len(user_ids), self.batch_size):
            users.extend(
                await self.client.get_users(user_ids[start:start + self.batch_size]),
            )
        return users

    async def attach(
        self, records: Sequence[R], entity: OwnedEntity,
    ) -> list[tuple[R, PublicUser]]:
        if not records:
            return []
        users = await self.fetch_users(distinct_owner_ids(records))
        return attach_users(records, users, entity)

    async def attach_one(
        self, record: R, entity: OwnedEntity,
    ) -> tuple[R, PublicUser]:
        return (await self.attach([record], entity))[0]


def _split_name(query: str) -> tuple[str, str]:
    parts = query.split()
    if not parts:
        return "", ""
    first = parts[0]
    last = parts[-1] if len(parts) > 1 else ""
    return first.lower(), last.lower()


def _matches_name(user: ExternalUser, first: str, last: str) -> bool:
    return (
        (user.first_name or "").lower() == first
        and (user.last_name or "").lower() == last
    )


async def find_user_by_username(
    client: IdentityClient, username: str, scan_limit: int = 200,
) -> PublicUser:
    """Look a user up by the handle shown in profile URLs."""
    exact = await client.get_users_by_username([username])
    candidates = exact[:1]
    if not candidates:
        users = await client.list_users(scan_limit)
        first, last = _split_name(username)
        candidates = [u for u in users if first and _matches_name(u, first, last)]
        if not candidates:
            candidates = [u for u in users if username in u.external_usernames]
    public = to_public_user(candidates[0]) if candidates else None
    if public is None:
        raise ResourceNotFoundError("User", username)
    return public


async def list_public_users(
    client: IdentityClient, limit: int = 100,
) -> list[PublicUser]:
    """Users for the discover page; users with no resolvable username are skipped."""
    publics = []
    for user in await client.list_users(limit):
        public = to_public_user(user)
        if public is None:
            logger.warning(
                "Skipping user without resolvable username",
                extra={"user_id": user.id},
            )
            continue
        publics.append(public)
    return publics
