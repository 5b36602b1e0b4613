"""Request Dependencies: injected service clients, guards, and the authenticated identity.

Invariants:
    - Service clients are read from app.state (built in the lifespan); no module globals
    - get_current_user_id raises AuthenticationRequiredError (401) when the bearer
      token is missing or fails session verification
    - A feed cursor is either both cursor_id and cursor_created_at, or neither

Design Decisions:
    - Tests replace clients through app.dependency_overrides, not monkeypatching
"""

from datetime import datetime
from uuid import UUID

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.config import Settings, get_settings
from bookcircle.core.domain_types import FeedCursor, UserId
from bookcircle.core.errors import AuthenticationRequiredError, RequestValidationFailed
from bookcircle.core.service_protocols import (
    IdentityClient, RateLimiter, SessionVerifier, TextGenerator,
)
from bookcircle.infrastructure.database import get_db
from bookcircle.services.assemble_feed import FeedAssembler
from bookcircle.services.guard_mutations import MutationGuard
from bookcircle.services.resolve_identities import IdentityResolver

_bearer = HTTPBearer(auto_error=False)


def get_identity_client(request: Request) -> IdentityClient:
    return request.app.state.identity_client


def get_session_verifier(request: Request) -> SessionVerifier:
    return request.app.state.session_verifier


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_text_generator(request: Request) -> TextGenerator:
    return request.app.state.text_generator


def get_identity_resolver(
    client: IdentityClient = Depends(get_identity_client),
    settings: Settings = Depends(get_settings),
) -> IdentityResolver:
    return IdentityResolver(client, batch_size=settings.identity_batch_size)


def get_mutation_guard(
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> MutationGuard:
    return MutationGuard(limiter)


def get_feed_assembler(
    db: AsyncSession = Depends(get_db),
    resolver: IdentityResolver = Depends(get_identity_resolver),
    settings: Settings = Depends(get_settings),
) -> FeedAssembler:
    return FeedAssembler(db, resolver, take_limit=settings.list_take_limit)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: SessionVerifier = Depends(get_session_verifier),
) -> UserId:
    """Authenticated user id from the session token."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationRequiredError()
    user_id = await verifier.verify(credentials.credentials)
    if not user_id:
        raise AuthenticationRequiredError()
    return user_id


def get_feed_cursor(
    cursor_id: UUID | None = Query(None),
    cursor_created_at: datetime | None = Query(None),
) -> FeedCursor | None:
    if cursor_id is None and cursor_created_at is None:
        return None
    if cursor_id is None or cursor_created_at is None:
        raise RequestValidationFailed(
            "cursor_id and cursor_created_at must be given together", "cursor",
        )
    return FeedCursor(id=cursor_id, created_at=cursor_created_at)
