"""Boundary Protocols: contracts between core and the external services.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Implementations are constructed at startup and injected per request

Design Decisions:
    - Protocol over ABC: structural subtyping, so test fakes need no base class
"""

from dataclasses import dataclass
from typing import Protocol

from bookcircle.core.domain_types import ExternalUser, UserId


class IdentityClient(Protocol):
    """Contract for the external identity provider."""
    async def get_users(self, user_ids: list[UserId]) -> list[ExternalUser]: ...
    async def get_users_by_username(self, usernames: list[str]) -> list[ExternalUser]: ...
    async def list_users(self, limit: int) -> list[ExternalUser]: ...


class SessionVerifier(Protocol):
    """Contract for turning a bearer session token into a user id."""
    async def verify(self, token: str) -> UserId | None: ...


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    remaining: int
    retry_after_ms: int | None = None


class RateLimiter(Protocol):
    """Contract for the sliding-window limiter, keyed by user id."""
    async def limit(self, key: str) -> RateLimitResult: ...


class TextGenerator(Protocol):
    """Contract for the LLM text-generation service."""
    async def generate(self, prompt: str) -> str: ...
