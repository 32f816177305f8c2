"""API test fixtures - FastAPI app wired to the per-test SQLite database.

Invariants:
    - get_db dependency overridden to use the test session factory
    - db_manager patched so readiness probes hit the test engine
"""

import pytest
from httpx import ASGITransport, AsyncClient

import roomkeeper.infrastructure.database as db_module
from roomkeeper.infrastructure.database import DatabaseSessionManager, get_db
from roomkeeper.main import app


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

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
