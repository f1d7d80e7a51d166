"""Health Routes — liveness and readiness checks.

Invariants:
    - /health/ answers 200 without touching the database
    - /health/ready answers 200 when SELECT 1 succeeds, 503 otherwise
"""

from learning_contracts.main import app


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy"}


async def test_readiness_without_database_returns_503(client, monkeypatch):
    """No manager installed (startup failed or already shut down)."""
    monkeypatch.setattr(app.state, "db_manager", None)

    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
