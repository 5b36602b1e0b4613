"""IdentityResolver and username lookup against the fake identity provider.

Tests cover:
    - owner ids deduplicated and fetched in batches of batch_size
    - empty input makes no identity call
    - username lookup: exact handle, then "First Last", then external account
    - unknown handle -> NOT_FOUND; discover list skips unresolvable users
"""

import uuid
from dataclasses import dataclass

import pytest

from bookcircle.core.domain_types import ExternalUser, OwnedEntity
from bookcircle.core.errors import ResourceNotFoundError
from bookcircle.services.resolve_identities import (
    IdentityResolver, find_user_by_username, list_public_users,
)
from tests.services.fakes import ALICE, BOB, CAROL, FakeIdentityClient


@dataclass
class _Record:
    id: uuid.UUID
    user_id: str


async def test_attach_batches_distinct_owner_ids():
    users = [ExternalUser(id=f"u{i}", username=f"reader{i}") for i in range(5)]
    client = FakeIdentityClient(users)
    resolver = IdentityResolver(client, batch_size=2)
    records = [_Record(uuid.uuid4(), f"u{i % 5}") for i in range(10)]

    paired = await resolver.attach(records, OwnedEntity.BOOK)

    assert client.batches == [["u0", "u1"], ["u2", "u3"], ["u4"]]
    assert [u.username for _, u in paired] == [f"reader{i % 5}" for i in range(10)]


async def test_attach_empty_makes_no_call():
    client = FakeIdentityClient()
    assert await IdentityResolver(client).attach([], OwnedEntity.PROFILE) == []
    assert client.batches == []


async def test_attach_one_returns_single_pair():
    record = _Record(uuid.uuid4(), CAROL.id)
    rec, user = await IdentityResolver(FakeIdentityClient()).attach_one(
        record, OwnedEntity.WISHLIST_ITEM,
    )
    assert rec is record
    assert user.username == "Carol King"


@pytest.mark.parametrize("handle, expected_id", [
    ("alice", ALICE.id),
    ("Carol King", CAROL.id),
    ("carol king", CAROL.id),
    ("bobgh", BOB.id),
])
async def test_find_user_by_username_fallbacks(handle, expected_id):
    user = await find_user_by_username(FakeIdentityClient(), handle)
    assert user.id == expected_id


async def test_find_user_by_unknown_username_is_not_found():
    with pytest.raises(ResourceNotFoundError):
        await find_user_by_username(FakeIdentityClient(), "nobody")


async def test_list_public_users_skips_unresolvable():
    users = await list_public_users(FakeIdentityClient())
    assert [u.username for u in users] == ["alice", "bobgh", "Carol King"]


# --- routes ---------------------------------------------------------------

async def test_users_route_lists_resolvable_users(client):
    resp = await client.get("/api/v1/users")
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [ALICE.id, BOB.id, CAROL.id]


async def test_by_username_route(client):
    resp = await client.get("/api/v1/users/by-username/bobgh")
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == BOB.id
    assert body["name"] == "Bob Stone"
    assert body["external_username"] == "bobgh"


async def test_by_username_route_unknown_is_404(client):
    resp = await client.get("/api/v1/users/by-username/nobody")
    assert resp.status_code == 404
