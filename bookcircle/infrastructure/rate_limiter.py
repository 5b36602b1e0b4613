"""Sliding-Window Rate Limiter: per-key operation log persisted in the database.

Invariants:
    - No in-process state: every decision reads the rate_limit_hits table
    - A hit row is written only when the operation is allowed
    - Hits older than the window are pruned on each check for that key
    - Uses its own session, independent of the request's unit of work

Design Decisions:
    - Decision logic lives in core/sliding_window.py; this class only does IO
    - clock is injectable so tests can move time without sleeping
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.core.service_protocols import RateLimitResult
from bookcircle.core.sliding_window import evaluate_window, window_start
from bookcircle.models.rate_limit_hit import RateLimitHit

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlSlidingWindowLimiter:
    """Allows max_requests operations per key in any trailing window."""

    def __init__(
        self,
        session_factory: SessionFactory,
        max_requests: int = 5,
        window_seconds: int = 60,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._session_factory = session_factory
        self.max_requests = max_requests
        self.window = timedelta(seconds=window_seconds)
        self._clock = clock

    async def limit(self, key: str) -> RateLimitResult:
        now = _as_utc(self._clock())
        start = window_start(now, self.window)
        async with self._session_factory() as db:
            await db.execute(
                delete(RateLimitHit).where(
                    RateLimitHit.key == key, RateLimitHit.created_at <= start,
                ),
            )
            result = await db.execute(
                select(RateLimitHit.created_at).where(
                    RateLimitHit.key == key, RateLimitHit.created_at > start,
                ),
            )
            hits = [_as_utc(h) for h in result.scalars().all()]
            decision = evaluate_window(hits, now, self.max_requests, self.window)
            if decision.allowed:
                db.add(RateLimitHit(key=key, created_at=now))
            await db.commit()

        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded", extra={"rate_limit_key": key},
            )
        return RateLimitResult(
            success=decision.allowed,
            remaining=decision.remaining,
            retry_after_ms=decision.retry_after_ms,
        )
