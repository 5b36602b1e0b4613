"""Clerk Session Verifier: checks session JWTs locally against Clerk's signing keys.

Invariants:
    - Only RS256 is accepted; exp, iat and sub are required claims
    - The returned user id is the token's `sub` claim
    - Expired, malformed, wrongly signed or unknown-kid tokens yield None
    - A configured issuer or authorized-party list must match, else None
    - A JWKS endpoint that cannot be reached raises ExternalServiceError

Design Decisions:
    - With clerk_jwt_key (PEM) set, verification never touches the network
    - Otherwise keys come from the Backend API JWKS and are cached by PyJWKClient;
      the blocking fetch runs in a worker thread
"""

import asyncio
import logging
from typing import Any, Protocol

import jwt

from bookcircle.core.domain_types import UserId
from bookcircle.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

_SERVICE = "Identity provider"
_ALGORITHMS = ["RS256"]
_REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class SigningKeySource(Protocol):
    """What PyJWKClient offers: the signing key for a token's `kid`."""
    def get_signing_key_from_jwt(self, token: str) -> Any: ...


class ClerkSessionVerifier:
    """SessionVerifier for Clerk-issued session tokens."""

    def __init__(
        self,
        secret_key: str = "",
        jwks_url: str = "https://api.clerk.com/v1/jwks",
        jwt_key: str | None = None,
        issuer: str | None = None,
        authorized_parties: tuple[str, ...] = (),
        leeway_seconds: int = 5,
        timeout_seconds: float = 10.0,
        key_source: SigningKeySource | None = None,
    ):
        self._jwt_key = jwt_key
        self._keys = key_source
        if self._keys is None and not jwt_key:
            self._keys = jwt.PyJWKClient(
                jwks_url,
                cache_keys=True,
                headers={"Authorization": f"Bearer {secret_key}"},
                timeout=timeout_seconds,
            )
        self.issuer = issuer
        self.authorized_parties = tuple(authorized_parties)
        self.leeway_seconds = leeway_seconds

    async def verify(self, token: str) -> UserId | None:
        """User id from a valid session token, None when the token is rejected."""
        try:
            key = await self._signing_key(token)
            claims = jwt.decode(
                token,
                key,
                algorithms=_ALGORITHMS,
                issuer=self.issuer,
                leeway=self.leeway_seconds,
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_iss": self.issuer is not None,
                },
            )
        except jwt.InvalidTokenError as e:
            logger.info(f"Session token rejected: {e}")
            return None

        azp = claims.get("azp")
        if self.authorized_parties and azp and azp not in self.authorized_parties:
            logger.info(f"Session token from unauthorized party {azp}")
            return None
        return UserId(claims["sub"])

    async def _signing_key(self, token: str) -> Any:
        if self._jwt_key:
            return self._jwt_key
        try:
            signing_key = await asyncio.to_thread(
                self._keys.get_signing_key_from_jwt, token,
            )
        except jwt.PyJWKClientConnectionError as e:
            raise ExternalServiceError(_SERVICE, str(e), "connection_error") from e
        except jwt.PyJWKClientError as e:
            # No key matches the token's kid
            raise jwt.InvalidTokenError(str(e)) from e
        return signing_key.key
