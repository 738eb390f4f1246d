"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - Session bridge and procedure runner replaced by fakes via dependency_overrides

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for registry tests
      (ADR: stored procedures themselves are exercised through FakeRunner)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from procgate.api.dependencies import get_procedure_runner, get_session_bridge
from procgate.db.base import Base
from procgate.infrastructure.database import get_db
from procgate.infrastructure.token_session_store import InMemoryTokenSessionStore
from procgate.main import app
from procgate.models.api_definition import ApiDefinition  # noqa: F401
from procgate.services.session_bridge import SessionBridge
from tests.services.fakes import FakeRunner, FakeUpstream


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
def fake_upstream():
    return FakeUpstream()


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def token_store():
    return InMemoryTokenSessionStore(ttl_seconds=3600)


@pytest.fixture
def session_bridge(token_store, fake_upstream):
    return SessionBridge(token_store, fake_upstream, default_login_type="USER")


@pytest.fixture
async def client(test_session_factory, session_bridge, fake_runner):
    """FastAPI test client with DB, session bridge and runner overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_bridge] = lambda: session_bridge
    app.dependency_overrides[get_procedure_runner] = lambda: fake_runner

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
