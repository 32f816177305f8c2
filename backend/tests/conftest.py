"""Root conftest - shared test configuration and database fixtures.

Invariants:
    - Every test using the DB gets a fresh SQLite file under tmp_path
    - Separate sessions get separate connections (needed for concurrency tests)
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, async_sessionmaker, create_async_engine,
)

from roomkeeper.db.base import Base  # noqa: E402
from roomkeeper.models import RoomModel, UserModel  # noqa: E402


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'roomkeeper.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
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
async def seed_room(test_session_factory):
    """Open room 1 with an admin ("admin-code") and a participant ("guest-code")."""
    async with test_session_factory() as session:
        room = RoomModel(name="Office party")
        room.users = [
            UserModel(auth_code="admin-code", name="Alice", is_admin=True),
            UserModel(auth_code="guest-code", name="Bob"),
        ]
        session.add(room)
        await session.commit()
        return {
            "room_id": room.id,
            "admin_id": room.users[0].id,
            "guest_id": room.users[1].id,
        }


@pytest.fixture
async def seed_other_room(test_session_factory):
    """A second, closed room with its own admin and participant."""
    async with test_session_factory() as session:
        room = RoomModel(
            name="Closed party",
            closed_on=datetime.now(timezone.utc) - timedelta(days=1),
        )
        room.users = [
            UserModel(auth_code="closed-admin", is_admin=True),
            UserModel(auth_code="closed-guest"),
        ]
        session.add(room)
        await session.commit()
        return {
            "room_id": room.id,
            "admin_id": room.users[0].id,
            "guest_id": room.users[1].id,
        }
