"""Clerk identity client over httpx.MockTransport.

Tests cover:
    - parse_clerk_user maps names, image and external account usernames
    - get_users sends one request with every id and parses both list shapes
    - 429 / 5xx / transport failures become ExternalServiceError
"""

import httpx
import pytest

from bookcircle.core.errors import ExternalServiceError
from bookcircle.infrastructure.identity_client import (
    ClerkIdentityClient, parse_clerk_user,
)

CLERK_USER = {
    "id": "user_1",
    "username": None,
    "first_name": "Ann",
    "last_name": "Lee",
    "image_url": "https://img.clerk/1.png",
    "external_accounts": [{"provider": "oauth_github", "username": "gh-ann"}],
}


def _client(handler) -> ClerkIdentityClient:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://clerk.test/v1",
    )
    return ClerkIdentityClient("sk_test", http_client=http)


def test_parse_clerk_user():
    user = parse_clerk_user(CLERK_USER)
    assert user.id == "user_1"
    assert user.username is None
    assert user.external_username == "gh-ann"
    assert user.display_name == "Ann Lee"
    assert user.profile_image_url == "https://img.clerk/1.png"


def test_parse_clerk_user_without_accounts():
    user = parse_clerk_user({"id": "user_2", "username": "bee"})
    assert user.external_usernames == ()
    assert user.profile_image_url == ""


async def test_get_users_sends_single_batched_request():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[CLERK_USER])

    client = _client(handler)
    users = await client.get_users(["user_1", "user_2"])

    assert len(requests) == 1
    assert requests[0].url.path == "/v1/users"
    assert requests[0].url.params.get_list("user_id") == ["user_1", "user_2"]
    assert [u.id for u in users] == ["user_1"]
    await client.aclose()


async def test_get_users_accepts_wrapped_payload():
    client = _client(lambda r: httpx.Response(
        200, json={"data": [CLERK_USER], "total_count": 1},
    ))
    users = await client.get_users(["user_1"])
    assert users[0].display_name == "Ann Lee"


async def test_get_users_empty_input_makes_no_request():
    def handler(request):
        raise AssertionError("no request expected")

    assert await _client(handler).get_users([]) == []


async def test_rate_limited_lookup_carries_retry_after():
    client = _client(lambda r: httpx.Response(429, headers={"Retry-After": "3"}))
    with pytest.raises(ExternalServiceError) as exc:
        await client.get_users(["user_1"])
    assert exc.value.error_type == "rate_limit"
    assert exc.value.context.retry_after_ms == 3000


async def test_server_error_maps_to_external_service_error():
    client = _client(lambda r: httpx.Response(502, text="bad gateway"))
    with pytest.raises(ExternalServiceError) as exc:
        await client.list_users(10)
    assert exc.value.error_type == "server_error"
    assert exc.value.http_status == 503


async def test_connection_failure_maps_to_external_service_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ExternalServiceError) as exc:
        await _client(handler).get_users_by_username(["ann"])
    assert exc.value.error_type == "connection_error"
