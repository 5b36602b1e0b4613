"""Clerk Identity Client: batched user lookups over the Clerk Backend API.

Invariants:
    - One HTTP request per get_users() call; callers keep batches <= batch limit
    - Every transport/status failure mapped to ExternalServiceError (core/errors.py)
    - Raw Clerk JSON never leaves this module; callers see ExternalUser only

Design Decisions:
    - httpx.AsyncClient owned by this object, created once in the lifespan and closed on shutdown
    - Tests pass a client built on httpx.MockTransport
"""

import logging

import httpx

from bookcircle.core.domain_types import ExternalUser, UserId
from bookcircle.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

_SERVICE = "Identity provider"


def parse_clerk_user(data: dict) -> ExternalUser:
    """Map a Clerk user object to ExternalUser."""
    accounts = data.get("external_accounts") or []
    return ExternalUser(
        id=data["id"],
        username=data.get("username") or None,
        first_name=data.get("first_name") or None,
        last_name=data.get("last_name") or None,
        profile_image_url=(
            data.get("image_url") or data.get("profile_image_url") or ""
        ),
        external_usernames=tuple(
            a["username"] for a in accounts if a.get("username")
        ),
    )


class ClerkIdentityClient:
    """Async Clerk Backend API client."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.clerk.com/v1",
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Authorization": f"Bearer {secret_key}"},
        )

    async def get_users(self, user_ids: list[UserId]) -> list[ExternalUser]:
        if not user_ids:
            return []
        data = await self._get(
            "/users", {"user_id": user_ids, "limit": len(user_ids)},
        )
        logger.debug(
            "Identity batch lookup", extra={"batch_size": len(user_ids)},
        )
        return [parse_clerk_user(u) for u in data]

    async def get_users_by_username(self, usernames: list[str]) -> list[ExternalUser]:
        if not usernames:
            return []
        data = await self._get("/users", {"username": usernames})
        return [parse_clerk_user(u) for u in data]

    async def list_users(self, limit: int) -> list[ExternalUser]:
        data = await self._get(
            "/users", {"limit": limit, "order_by": "-created_at"},
        )
        return [parse_clerk_user(u) for u in data]

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict) -> list[dict]:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException:
            raise ExternalServiceError(_SERVICE, "Request timed out", "timeout")
        except httpx.RequestError as e:
            raise ExternalServiceError(_SERVICE, str(e), "connection_error")
        self._raise_for_status(response)
        payload = response.json()
        # Newer API versions wrap lists as {"data": [...], "total_count": n}
        if isinstance(payload, dict):
            payload = payload.get("data", [])
        return payload

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        if response.status_code == 429:
            raise ExternalServiceError(
                _SERVICE, "Rate limit exceeded", "rate_limit",
                retry_after_ms=_retry_after_ms(response),
            )
        logger.error(
            f"Identity provider returned {response.status_code}: {response.text[:200]}",
        )
        kind = "server_error" if response.status_code >= 500 else "client_error"
        raise ExternalServiceError(
            _SERVICE, f"HTTP {response.status_code}", kind,
        )


def _retry_after_ms(response: httpx.Response) -> int | None:
    val = response.headers.get("retry-after")
    if val and val.isdigit():
        return int(val) * 1000
    return None
