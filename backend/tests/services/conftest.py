"""Service test fixtures — async DB, seeded aggregate and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - app.state.db_manager points at the test engine (readiness check)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; FOR UPDATE is a no-op
      there, so version races are driven explicitly in the tests
"""

from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from learning_contracts.db.base import Base
from learning_contracts.infrastructure.database import get_db, DatabaseSessionManager
from learning_contracts.models import Clause, Cohort, Contract, User
from learning_contracts.main import app


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
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    original_manager = getattr(app.state, "db_manager", None)
    app.state.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db_manager = original_manager


@pytest.fixture
async def seed(test_db):
    """Two cohort members, one contract, one clause with content 'v1'."""
    author = User(email="author@example.com", name="Ada Author")
    reviewer = User(
        email="reviewer@example.com", name="Rey Reviewer", role="FACILITATOR",
    )
    cohort = Cohort(name="Spring Cohort", description="Pairs on weekly sprints")
    cohort.members = [author, reviewer]
    contract = Contract(title="Team Working Agreement", cohort=cohort)
    clause = Clause(
        title="Punctuality", content="v1", contract=contract, created_by=author,
    )
    test_db.add_all([author, reviewer, cohort, contract, clause])
    await test_db.commit()
    return SimpleNamespace(
        author=author, reviewer=reviewer, cohort=cohort,
        contract=contract, clause=clause,
    )
