"""Infrastructure test fixtures — in-memory SQLite behind a real DatabaseSessionManager.

Invariants:
    - Every test gets a fresh in-memory SQLite database with all tables created
    - The manager is built with __new__ so the SQLite engine's pool is not handed
      PostgreSQL pool sizing arguments

Design Decisions:
    - SQLite in-memory: fast, no external dependency; CHECK constraints and guarded
      UPDATE rowcounts behave the same as on PostgreSQL for what these tests exercise
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from bountyboard.db.base import Base
from bountyboard.infrastructure.database import DatabaseSessionManager
from bountyboard.infrastructure.bounty_store import SqlBountyStore
from bountyboard.infrastructure.application_store import SqlApplicationStore
from bountyboard.infrastructure.invitation_store import SqlInvitationStore
import bountyboard.models  # noqa: F401


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
def db(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    manager.lock_timeout_ms = 1_000
    return manager


@pytest.fixture
def bounties(db):
    return SqlBountyStore(db)


@pytest.fixture
def applications(db):
    return SqlApplicationStore(db)


@pytest.fixture
def invitations(db):
    return SqlInvitationStore(db)


@pytest.fixture
def poster():
    return uuid4()


@pytest.fixture
async def open_bounty(bounties, poster):
    return await bounties.create(poster, "Migrate CI", Decimal("75.50"), "USD", "GitHub Actions")
