"""Service test fixtures: async DB, fake external services, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and the service-client dependencies are overridden on the app
    - db_manager patched so the readiness check sees the test engine
    - Seed factories write through their own session and commit

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from bookcircle.api.dependencies import (
    get_identity_client, get_rate_limiter, get_session_verifier,
    get_text_generator,
)
from bookcircle.db.base import Base
from bookcircle.infrastructure.database import get_db, DatabaseSessionManager
from bookcircle.models.book import Book
from bookcircle.models.follower import Follower
from bookcircle.models.like import Like
from bookcircle.models.profile import Profile
from bookcircle.models.wishlist_item import WishlistItem
import bookcircle.infrastructure.database as db_module
from bookcircle.main import app

from tests.services.fakes import (
    FakeIdentityClient, FakeRateLimiter, FakeSessionVerifier, FakeTextGenerator,
)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def identity_client():
    return FakeIdentityClient()


@pytest.fixture
def rate_limiter():
    return FakeRateLimiter()


@pytest.fixture
def text_generator():
    return FakeTextGenerator(
        "Title: Dune\nAuthor: Frank Herbert\nDescription: Desert politics.\n\n"
        "Title: Hyperion\nAuthor: Dan Simmons\nDescription: Pilgrims and the Shrike.\n\n"
        "Title: Foundation\nAuthor: Isaac Asimov\nDescription: Psychohistory.",
    )


@pytest.fixture
async def client(
    test_engine, test_session_factory, identity_client, rate_limiter, text_generator,
):
    """FastAPI test client with DB and service dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: identity_client
    app.dependency_overrides[get_session_verifier] = lambda: FakeSessionVerifier()
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_text_generator] = lambda: text_generator

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_book(test_session_factory):
    """Insert a book; created_at defaults to BASE_TIME + `hours` hours."""
    async def _make(
        user_id="user_alice", title="A Book", hours=0, book_id=None, **fields,
    ):
        book = Book(
            id=book_id or uuid.uuid4(),
            user_id=user_id,
            title=title,
            author=fields.pop("author", "Some Author"),
            description=fields.pop("description", ""),
            genre=fields.pop("genre", "Fiction"),
            img_src=fields.pop("img_src", ""),
            rating=fields.pop("rating", 4.0),
            date_started=BASE_TIME,
            date_finished=BASE_TIME + timedelta(days=7),
            created_at=fields.pop("created_at", BASE_TIME + timedelta(hours=hours)),
        )
        async with test_session_factory() as db:
            db.add(book)
            await db.commit()
        return book
    return _make


@pytest.fixture
def make_profile(test_session_factory):
    async def _make(user_id="user_alice", bio="Reader", tags="scifi,history"):
        profile = Profile(user_id=user_id, bio=bio, tags=tags)
        async with test_session_factory() as db:
            db.add(profile)
            await db.commit()
            await db.refresh(profile)
        return profile
    return _make


@pytest.fixture
def make_follow(test_session_factory):
    async def _make(user_id, profile_id, seconds=0):
        async with test_session_factory() as db:
            db.add(Follower(
                user_id=user_id, profile_id=profile_id,
                created_at=BASE_TIME + timedelta(seconds=seconds),
            ))
            await db.commit()
    return _make


@pytest.fixture
def make_like(test_session_factory):
    async def _make(user_id, book_id, seconds=0):
        async with test_session_factory() as db:
            db.add(Like(
                user_id=user_id, book_id=book_id,
                created_at=BASE_TIME + timedelta(seconds=seconds),
            ))
            await db.commit()
    return _make


@pytest.fixture
def make_wishlist_item(test_session_factory):
    async def _make(user_id="user_alice", title="Wanted", hours=0):
        item = WishlistItem(
            user_id=user_id, title=title, author="Someone",
            description="Looks good", link="https://books.example/wanted",
            created_at=BASE_TIME + timedelta(hours=hours),
        )
        async with test_session_factory() as db:
            db.add(item)
            await db.commit()
            await db.refresh(item)
        return item
    return _make
