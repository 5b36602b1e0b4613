"""Mutation Guard: rate limit and ownership checks run before every write.

Invariants:
    - enforce_rate_limit raises RateLimitExceededError when the limiter refuses
    - load_owned: NOT_FOUND before FORBIDDEN, and nothing is written on failure
    - Rate limiting is keyed by the authenticated user id
"""

import logging
from typing import TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.core.domain_types import MutationAction, OwnedEntity, UserId
from bookcircle.core.enforce_ownership import require_owned
from bookcircle.core.errors import ErrorContext, RateLimitExceededError
from bookcircle.core.service_protocols import RateLimiter

logger = logging.getLogger(__name__)

M = TypeVar("M")


class MutationGuard:
    """Per-request guard bound to an injected rate limiter."""

    def __init__(self, rate_limiter: RateLimiter):
        self.rate_limiter = rate_limiter

    async def enforce_rate_limit(self, user_id: UserId) -> None:
        result = await self.rate_limiter.limit(user_id)
        if not result.success:
            raise RateLimitExceededError(
                retry_after_ms=result.retry_after_ms,
                context=ErrorContext(user_id=user_id),
            )

    async def load_owned(
        self,
        db: AsyncSession,
        model: type[M],
        record_id: UUID,
        user_id: UserId,
        entity: OwnedEntity,
        action: MutationAction,
    ) -> M:
        record = await db.get(model, record_id)
        owned = require_owned(record, user_id, entity, str(record_id), action)
        logger.debug(
            f"Ownership verified for {action.value}",
            extra={"user_id": user_id, "resource_id": str(record_id)},
        )
        return owned
