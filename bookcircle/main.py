"""bookcircle API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BookCircleError to structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, identity client, session verifier, rate limiter and text
      generator are built in the lifespan, stored on app.state, and closed
      on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookcircle import __version__
from bookcircle.api.error_handlers import register_error_handlers
from bookcircle.api.routes import (
    books, health, profiles, recommendations, users, wishlist,
)
from bookcircle.config import get_settings
from bookcircle.infrastructure.anthropic_client import AnthropicTextGenerator
from bookcircle.infrastructure.database import init_db
from bookcircle.infrastructure.identity_client import ClerkIdentityClient
from bookcircle.infrastructure.observability import setup_logging
from bookcircle.infrastructure.rate_limiter import SqlSlidingWindowLimiter
from bookcircle.infrastructure.session_verifier import ClerkSessionVerifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    identity_client = ClerkIdentityClient(
        settings.clerk_secret_key,
        base_url=settings.clerk_api_url,
        timeout_seconds=settings.clerk_timeout_seconds,
    )
    app.state.identity_client = identity_client
    app.state.session_verifier = ClerkSessionVerifier(
        settings.clerk_secret_key,
        jwks_url=settings.clerk_jwks_url,
        jwt_key=settings.clerk_jwt_key,
        issuer=settings.clerk_jwt_issuer,
        authorized_parties=tuple(settings.clerk_authorized_parties),
        leeway_seconds=settings.clerk_jwt_leeway_seconds,
        timeout_seconds=settings.clerk_timeout_seconds,
    )
    app.state.rate_limiter = SqlSlidingWindowLimiter(
        manager.session,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.state.text_generator = AnthropicTextGenerator(
        settings.anthropic_api_key,
        model=settings.recommendation_model,
        max_tokens=settings.recommendation_max_tokens,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    logger.info("bookcircle API started")
    yield
    logger.info("bookcircle API shutting down")
    await identity_client.aclose()
    await manager.dispose()


app = FastAPI(
    title="bookcircle API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(books.router)
app.include_router(users.router)
app.include_router(profiles.router)
app.include_router(wishlist.router)
app.include_router(recommendations.router)

register_error_handlers(app)
