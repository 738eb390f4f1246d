"""Health Probes — liveness always, readiness tied to the database pool."""

from procgate.infrastructure import database
from procgate.infrastructure.database import DatabaseSessionManager


async def test_liveness_needs_no_token(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_readiness_before_pool_exists(client, monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)

    response = await client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["reason"] == "database_unavailable"


async def test_readiness_with_reachable_database(client, monkeypatch):
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    monkeypatch.setattr(database, "db_manager", manager)

    response = await client.get("/health/ready")
    await manager.dispose()

    assert response.status_code == 200
    assert response.json()["checks"] == {"database": "healthy"}
