"""DatabaseSessionManager: rollback and error translation on a real SQLite engine.

Tests cover:
    - unique violation -> ConflictError (409)
    - other SQLAlchemy failures -> DatabaseError (503)
    - health_check True on a live engine
    - all-digit UUID ids survive a write and read
"""

import uuid

import pytest
from sqlalchemy import select, text

from bookcircle.core.errors import ConflictError, DatabaseError
from bookcircle.db.base import Base
from bookcircle.infrastructure.database import DatabaseSessionManager
from bookcircle.models.book import Book
from bookcircle.models.profile import Profile


@pytest.fixture
async def manager():
    mgr = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    async with mgr.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield mgr
    await mgr.dispose()


async def test_duplicate_profile_is_conflict(manager):
    async with manager.session() as db:
        db.add(Profile(user_id="user_alice", bio="", tags=""))
        await db.commit()

    with pytest.raises(ConflictError) as exc:
        async with manager.session() as db:
            db.add(Profile(user_id="user_alice", bio="again", tags=""))
            await db.commit()
    assert exc.value.http_status == 409


async def test_operational_error_is_database_error(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.http_status == 503


async def test_health_check(manager):
    assert await manager.health_check() is True


async def test_all_digit_uuid_reads_back_as_uuid(manager):
    # Hex id with no letters; NUMERIC column affinity would turn it into an int
    book_id = uuid.UUID(int=4)
    async with manager.session() as db:
        db.add(Book(
            id=book_id, user_id="user_alice", title="Dune", author="Frank Herbert",
            description="", genre="", img_src="", rating=5.0,
        ))
        await db.commit()

    async with manager.session() as db:
        stored = await db.scalar(select(Book.id).where(Book.id == book_id))
    assert stored == book_id
    assert isinstance(stored, uuid.UUID)
