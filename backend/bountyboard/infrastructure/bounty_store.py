"""SQL Bounty Store — bounty persistence with status compare-and-swap.

Invariants:
    - transition() writes only when the row still has the expected status;
      rowcount 0 means nothing was written and None is returned
    - Soft-deleted bounties are invisible (get returns None, transition never matches)
    - receiver_id is never written here; it is assigned by the application store
      together with the acceptance

Design Decisions:
    - Guarded UPDATE ... WHERE status = :expected instead of SELECT ... FOR UPDATE:
      one round trip, same semantics on PostgreSQL and SQLite
"""

import logging
from decimal import Decimal

from sqlalchemy import select, update

from bountyboard.core.domain_types import BountyId, UserId, BountyStatus
from bountyboard.core.records import BountyRecord
from bountyboard.infrastructure.database import DatabaseSessionManager
from bountyboard.infrastructure.record_mapping import bounty_record
from bountyboard.models.bounty import Bounty

logger = logging.getLogger(__name__)


class SqlBountyStore:
    """BountyStore backed by the `bounties` table."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def create(
        self, poster_id: UserId, title: str, reward: Decimal,
        currency: str = "USD", description: str = "",
    ) -> BountyRecord:
        async with self._db.session() as session:
            bounty = Bounty(
                poster_id=poster_id, title=title, reward=reward,
                currency=currency, description=description,
                status=BountyStatus.CREATED.value,
            )
            session.add(bounty)
            await session.commit()
            await session.refresh(bounty)
            logger.info("Bounty created", extra={"bounty_id": str(bounty.id)})
            return bounty_record(bounty)

    async def get(self, bounty_id: BountyId) -> BountyRecord | None:
        async with self._db.session() as session:
            result = await session.execute(
                select(Bounty)
                .where(Bounty.id == bounty_id)
                .where(Bounty.deleted_at.is_(None)),
            )
            bounty = result.scalar_one_or_none()
            return bounty_record(bounty) if bounty else None

    async def transition(
        self, bounty_id: BountyId,
        expected: BountyStatus, new_status: BountyStatus,
    ) -> BountyRecord | None:
        async with self._db.session() as session:
            result = await session.execute(
                update(Bounty)
                .where(Bounty.id == bounty_id)
                .where(Bounty.status == expected.value)
                .where(Bounty.deleted_at.is_(None))
                .values(status=new_status.value)
                .execution_options(synchronize_session=False),
            )
            if result.rowcount != 1:
                await session.rollback()
                return None
            await session.commit()
            bounty = await session.get(Bounty, bounty_id, populate_existing=True)
            return bounty_record(bounty)
