"""SQL Application Store — application persistence and the two-row acceptance.

Invariants:
    - accept() runs in ONE transaction: application pending -> accepted, then bounty
      created -> in_progress with receiver_id; if either guarded UPDATE matches no
      row the transaction is rolled back and None is returned
    - reject() is a single guarded UPDATE on the application row
    - Soft-deleted rows are invisible: a deleted bounty loads as None next to its
      application

Design Decisions:
    - Application row updated first: its guard also pins bounty_id and user_id, so the
      bounty update can trust the ids the engine passed in
"""

import logging

from sqlalchemy import select, update

from bountyboard.core.domain_types import (
    ApplicationId, BountyId, UserId, ApplicationStatus, BountyStatus,
)
from bountyboard.core.records import ApplicationRecord, BountyRecord
from bountyboard.infrastructure.database import DatabaseSessionManager
from bountyboard.infrastructure.record_mapping import application_record, bounty_record
from bountyboard.models.application import Application
from bountyboard.models.bounty import Bounty

logger = logging.getLogger(__name__)


class SqlApplicationStore:
    """ApplicationStore backed by the `applications` and `bounties` tables."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def submit(
        self, bounty_id: BountyId, user_id: UserId, proposal: str = "",
    ) -> ApplicationRecord:
        async with self._db.session() as session:
            application = Application(
                bounty_id=bounty_id, user_id=user_id, proposal=proposal,
                status=ApplicationStatus.PENDING.value,
            )
            session.add(application)
            await session.commit()
            await session.refresh(application)
            logger.info(
                "Application submitted",
                extra={
                    "application_id": str(application.id),
                    "bounty_id": str(bounty_id),
                },
            )
            return application_record(application)

    async def get(self, application_id: ApplicationId) -> ApplicationRecord | None:
        loaded = await self.get_with_bounty(application_id)
        return loaded[0] if loaded else None

    async def get_with_bounty(
        self, application_id: ApplicationId,
    ) -> tuple[ApplicationRecord, BountyRecord | None] | None:
        async with self._db.session() as session:
            result = await session.execute(
                select(Application)
                .where(Application.id == application_id)
                .where(Application.deleted_at.is_(None)),
            )
            application = result.scalar_one_or_none()
            if not application:
                return None
            bounty = application.bounty
            if bounty is None or bounty.deleted_at is not None:
                return application_record(application), None
            return application_record(application), bounty_record(bounty)

    async def accept(
        self, application_id: ApplicationId, bounty_id: BountyId,
        receiver_id: UserId, reason: str,
    ) -> ApplicationRecord | None:
        async with self._db.session() as session:
            decided = await session.execute(
                update(Application)
                .where(Application.id == application_id)
                .where(Application.bounty_id == bounty_id)
                .where(Application.user_id == receiver_id)
                .where(Application.status == ApplicationStatus.PENDING.value)
                .where(Application.deleted_at.is_(None))
                .values(status=ApplicationStatus.ACCEPTED.value, reason=reason)
                .execution_options(synchronize_session=False),
            )
            if decided.rowcount != 1:
                await session.rollback()
                return None

            assigned = await session.execute(
                update(Bounty)
                .where(Bounty.id == bounty_id)
                .where(Bounty.status == BountyStatus.CREATED.value)
                .where(Bounty.deleted_at.is_(None))
                .values(
                    status=BountyStatus.IN_PROGRESS.value,
                    receiver_id=receiver_id,
                )
                .execution_options(synchronize_session=False),
            )
            if assigned.rowcount != 1:
                # Bounty left `created` after the engine validated it
                await session.rollback()
                logger.info(
                    "Acceptance rolled back: bounty no longer open",
                    extra={
                        "application_id": str(application_id),
                        "bounty_id": str(bounty_id),
                    },
                )
                return None

            await session.commit()
            return await self._reload(session, application_id)

    async def reject(
        self, application_id: ApplicationId, reason: str,
    ) -> ApplicationRecord | None:
        async with self._db.session() as session:
            decided = await session.execute(
                update(Application)
                .where(Application.id == application_id)
                .where(Application.status == ApplicationStatus.PENDING.value)
                .where(Application.deleted_at.is_(None))
                .values(status=ApplicationStatus.REJECTED.value, reason=reason)
                .execution_options(synchronize_session=False),
            )
            if decided.rowcount != 1:
                await session.rollback()
                return None
            await session.commit()
            return await self._reload(session, application_id)

    async def _reload(self, session, application_id: ApplicationId) -> ApplicationRecord:
        application = await session.get(
            Application, application_id, populate_existing=True,
        )
        return application_record(application)
