"""Service test fixtures — in-memory stores and a frozen clock for the engines.

Invariants:
    - Every test gets a fresh FakeDatabase shared by the three fake stores
    - The clock fixture is mutable: tests move time forward with clock.advance()

Design Decisions:
    - Engines are built on the fakes, not on SQLite: race interleavings are injected
      deterministically through FakeDatabase.before_write
      (SQL store behaviour is covered in tests/infrastructure)
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from bountyboard.lifecycle import BountyLifecycle
from tests.services.fake_stores import (
    FakeDatabase, FakeBountyStore, FakeApplicationStore, FakeInvitationStore,
)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def bounty_store(fake_db):
    return FakeBountyStore(fake_db)


@pytest.fixture
def application_store(fake_db):
    return FakeApplicationStore(fake_db)


@pytest.fixture
def invitation_store(fake_db):
    return FakeInvitationStore(fake_db)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def lifecycle(bounty_store, application_store, invitation_store, clock):
    return BountyLifecycle(
        bounty_store, application_store, invitation_store, clock=clock,
    )


@pytest.fixture
def poster():
    return uuid4()


@pytest.fixture
def applicant():
    return uuid4()


@pytest.fixture
async def open_bounty(bounty_store, poster):
    """A bounty in `created` posted by `poster`."""
    return await bounty_store.create(poster, "Add CSV export", Decimal("120.00"))


@pytest.fixture
async def pending_application(application_store, open_bounty, applicant):
    return await application_store.submit(open_bounty.id, applicant, "I can do it")
